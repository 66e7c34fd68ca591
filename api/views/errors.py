import structlog
from rest_framework import status
from rest_framework.exceptions import ParseError
from rest_framework.response import Response

from ..exceptions import DomainError, ErrorKind, Required

logger = structlog.get_logger(__name__)

STATUS_BY_KIND = {
    ErrorKind.REQUIRED: status.HTTP_400_BAD_REQUEST,
    ErrorKind.INVALID_IDENTIFIER: status.HTTP_400_BAD_REQUEST,
    ErrorKind.ALREADY_EXISTS: status.HTTP_409_CONFLICT,
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.AUTHOR_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.NO_REVIEWER_CANDIDATES: status.HTTP_409_CONFLICT,
    ErrorKind.REVIEWER_NOT_ASSIGNED: status.HTTP_409_CONFLICT,
    ErrorKind.ALREADY_MERGED: status.HTTP_409_CONFLICT,
}

# коды, у которых статус отличается от статуса их вида
STATUS_BY_CODE = {
    'TEAM_EXISTS': status.HTTP_400_BAD_REQUEST,
}


def error_response(code: str, message: str, http_status: int) -> Response:
    return Response({
        'error': {
            'code': code,
            'message': message
        }
    }, status=http_status)


def domain_error_response(exc: DomainError) -> Response:
    http_status = STATUS_BY_CODE.get(exc.code, STATUS_BY_KIND[exc.kind])
    return error_response(exc.code, exc.message, http_status)


def server_error_response(op: str) -> Response:
    """500 без подробностей для клиента; сама ошибка уходит в лог."""
    logger.exception('request failed', op=op)
    return error_response('SERVER_ERROR', 'Internal server error', status.HTTP_500_INTERNAL_SERVER_ERROR)


def request_payload(request) -> dict:
    try:
        data = request.data
    except ParseError:
        raise Required('body', 'invalid request body')
    return data if isinstance(data, dict) else {}

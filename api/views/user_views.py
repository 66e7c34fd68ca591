from rest_framework.decorators import api_view
from rest_framework.response import Response

from ..exceptions import DomainError
from ..services import UserService
from ..serializers import UserSerializer, PullRequestShortSerializer
from .errors import domain_error_response, request_payload, server_error_response


@api_view(['POST'])
def user_set_active(request):
    """POST /users/setIsActive - Установить флаг активности пользователя"""
    try:
        data = request_payload(request)
        user = UserService.set_user_active_status(data.get('user_id'), data.get('is_active'))
        serializer = UserSerializer(user)

        return Response({
            'user': serializer.data
        })

    except DomainError as e:
        return domain_error_response(e)
    except Exception:
        return server_error_response('user_set_active')


@api_view(['GET'])
def users_get_review(request):
    """GET /users/getReview - Получить PR'ы, где пользователь назначен ревьювером"""
    try:
        user_id = request.query_params.get('user_id')
        assigned_prs = UserService.get_user_review_assignments(user_id)
        serializer = PullRequestShortSerializer(assigned_prs, many=True)

        return Response({
            'user_id': user_id,
            'pull_requests': serializer.data
        })

    except DomainError as e:
        return domain_error_response(e)
    except Exception:
        return server_error_response('users_get_review')

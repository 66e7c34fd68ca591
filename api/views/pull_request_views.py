from rest_framework import status
from rest_framework.decorators import api_view
from rest_framework.response import Response

from ..exceptions import DomainError
from ..identifiers import format_user_id
from ..services import PullRequestService
from ..serializers import PullRequestSerializer
from .errors import domain_error_response, request_payload, server_error_response


@api_view(['POST'])
def pullrequest_create(request):
    """POST /pullRequest/create - Создать PR и назначить ревьюверов"""
    try:
        data = request_payload(request)
        pr = PullRequestService.create_pull_request(
            data.get('pull_request_id'),
            data.get('pull_request_name'),
            data.get('author_id'),
        )
        serializer = PullRequestSerializer(pr)

        return Response({
            'pr': serializer.data
        }, status=status.HTTP_201_CREATED)

    except DomainError as e:
        return domain_error_response(e)
    except Exception:
        return server_error_response('pullrequest_create')


@api_view(['POST'])
def pullrequest_merge(request):
    """POST /pullRequest/merge - Пометить PR как MERGED"""
    try:
        pr = PullRequestService.merge_pull_request(request_payload(request).get('pull_request_id'))
        serializer = PullRequestSerializer(pr)

        return Response({
            'pr': serializer.data
        })

    except DomainError as e:
        return domain_error_response(e)
    except Exception:
        return server_error_response('pullrequest_merge')


@api_view(['POST'])
def pullrequest_reassign(request):
    """POST /pullRequest/reassign - Переназначить ревьювера"""
    try:
        data = request_payload(request)
        old_user_id = data.get('old_reviewer_id') or data.get('old_user_id')

        pr, new_reviewer = PullRequestService.reassign_reviewer(data.get('pull_request_id'), old_user_id)
        serializer = PullRequestSerializer(pr)

        return Response({
            'pr': serializer.data,
            'replaced_by': format_user_id(new_reviewer)
        })

    except DomainError as e:
        return domain_error_response(e)
    except Exception:
        return server_error_response('pullrequest_reassign')

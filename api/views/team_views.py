from rest_framework import status
from rest_framework.decorators import api_view
from rest_framework.response import Response

from ..exceptions import DomainError
from ..services import TeamService
from ..serializers import TeamSerializer
from .errors import domain_error_response, request_payload, server_error_response


@api_view(['POST'])
def team_add(request):
    """POST /team/add - Создать команду с участниками"""
    try:
        data = request_payload(request)
        team = TeamService.create_team_with_members(data.get('team_name'), data.get('members', []))
        serializer = TeamSerializer(team)

        return Response({
            'team': serializer.data
        }, status=status.HTTP_201_CREATED)

    except DomainError as e:
        return domain_error_response(e)
    except Exception:
        return server_error_response('team_add')


@api_view(['GET'])
def team_get(request):
    """GET /team/get - Получить команду с участниками"""
    try:
        team = TeamService.get_team_with_members(request.query_params.get('team_name'))
        serializer = TeamSerializer(team)

        return Response(serializer.data)

    except DomainError as e:
        return domain_error_response(e)
    except Exception:
        return server_error_response('team_get')


@api_view(['POST'])
def team_deactivate(request):
    """POST /team/deactivate - Деактивировать всех участников команды"""
    try:
        team_name = request.query_params.get('team_name') or request_payload(request).get('team_name')
        deactivated = TeamService.deactivate_team_users(team_name)

        return Response({
            'team_name': team_name,
            'deactivated_users': deactivated
        })

    except DomainError as e:
        return domain_error_response(e)
    except Exception:
        return server_error_response('team_deactivate')

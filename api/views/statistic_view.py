from rest_framework.decorators import api_view
from rest_framework.response import Response

from ..services import StatsService
from ..serializers import PRStatsSerializer, ReviewerLoadSerializer
from .errors import server_error_response


@api_view(['GET'])
def stats_prs(request):
    """
    GET /stats/prs - Общая статистика по PR
    """
    try:
        stats = StatsService.get_pr_stats()
        return Response({'stats': PRStatsSerializer(stats).data})

    except Exception:
        return server_error_response('stats_prs')


@api_view(['GET'])
def stats_reviewers(request):
    """
    GET /stats/reviewers - Нагрузка на ревьюверов
    """
    try:
        load = StatsService.get_reviewer_load()
        return Response({'reviewers': ReviewerLoadSerializer(load, many=True).data})

    except Exception:
        return server_error_response('stats_reviewers')

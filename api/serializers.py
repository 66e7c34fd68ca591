from rest_framework import serializers

from .identifiers import format_user_id
from .models import Team, User, PullRequest


class TeamMemberSerializer(serializers.ModelSerializer):
    user_id = serializers.CharField()
    username = serializers.CharField()
    is_active = serializers.BooleanField()

    class Meta:
        model = User
        fields = ['user_id', 'username', 'is_active']


class TeamSerializer(serializers.ModelSerializer):
    team_name = serializers.CharField(source='name')
    members = TeamMemberSerializer(many=True, source='members.all')

    class Meta:
        model = Team
        fields = ['team_name', 'members']


class UserSerializer(serializers.ModelSerializer):
    user_id = serializers.CharField()
    username = serializers.CharField()
    team_name = serializers.CharField(source='team_id')
    is_active = serializers.BooleanField()

    class Meta:
        model = User
        fields = ['user_id', 'username', 'team_name', 'is_active']


class PullRequestSerializer(serializers.ModelSerializer):
    pull_request_id = serializers.CharField(source='id')
    pull_request_name = serializers.CharField(source='name')
    author_id = serializers.SerializerMethodField()
    status = serializers.CharField()
    assigned_reviewers = serializers.SerializerMethodField()
    createdAt = serializers.DateTimeField(source='created_at', format='%Y-%m-%dT%H:%M:%SZ')
    mergedAt = serializers.DateTimeField(source='merged_at', format='%Y-%m-%dT%H:%M:%SZ', allow_null=True)

    class Meta:
        model = PullRequest
        fields = [
            'pull_request_id', 'pull_request_name', 'author_id',
            'status', 'assigned_reviewers', 'createdAt', 'mergedAt'
        ]

    @staticmethod
    def get_author_id(obj):
        return format_user_id(obj.author_id)

    @staticmethod
    def get_assigned_reviewers(obj):
        # порядок назначения, а не порядок ключей
        links = obj.reviewer_links.order_by('id').values_list('reviewer_id', flat=True)
        return [format_user_id(reviewer_id) for reviewer_id in links]


class PullRequestShortSerializer(serializers.ModelSerializer):
    pull_request_id = serializers.CharField(source='id')
    pull_request_name = serializers.CharField(source='name')
    author_id = serializers.SerializerMethodField()
    status = serializers.CharField()

    class Meta:
        model = PullRequest
        fields = ['pull_request_id', 'pull_request_name', 'author_id', 'status']

    @staticmethod
    def get_author_id(obj):
        return format_user_id(obj.author_id)


class PRStatsSerializer(serializers.Serializer):
    total_prs = serializers.IntegerField()
    open_prs = serializers.IntegerField()
    merged_prs = serializers.IntegerField()
    avg_reviewers_per_pr = serializers.FloatField()


class ReviewerLoadSerializer(serializers.Serializer):
    user_id = serializers.SerializerMethodField()
    username = serializers.CharField()
    prs_reviewed = serializers.IntegerField()
    open_prs_reviewed = serializers.IntegerField()
    merged_prs_reviewed = serializers.IntegerField()

    @staticmethod
    def get_user_id(obj):
        return format_user_id(obj['id'])

from django.db import models

from .identifiers import format_user_id


class Team(models.Model):
    name = models.CharField(max_length=255, primary_key=True)
    members = models.ManyToManyField('User', through='TeamMember', related_name='teams', blank=True)

    def __str__(self):
        return self.name

    class Meta:
        db_table = 'teams'


class User(models.Model):
    # Внешний идентификатор u<id>, см. api.identifiers
    id = models.IntegerField(primary_key=True)
    username = models.CharField(max_length=255)
    team = models.ForeignKey(Team, on_delete=models.PROTECT, related_name='users')
    is_active = models.BooleanField(default=True)

    @property
    def user_id(self) -> str:
        return format_user_id(self.id)

    def __str__(self):
        return f"{self.username} ({self.user_id})"

    class Meta:
        db_table = 'users'


class TeamMember(models.Model):
    team = models.ForeignKey(Team, on_delete=models.CASCADE, related_name='memberships')
    user = models.ForeignKey(User, on_delete=models.CASCADE, related_name='memberships')

    class Meta:
        db_table = 'team_members'
        constraints = [
            models.UniqueConstraint(fields=['team', 'user'], name='team_member_unique'),
        ]


class PullRequest(models.Model):
    class Status(models.TextChoices):
        OPEN = 'OPEN', 'Open'
        MERGED = 'MERGED', 'Merged'

    id = models.CharField(max_length=255, primary_key=True)
    name = models.CharField(max_length=255)
    author = models.ForeignKey(User, on_delete=models.PROTECT, related_name='authored_prs')
    status = models.CharField(max_length=10, choices=Status.choices, default=Status.OPEN)
    reviewers = models.ManyToManyField(
        User, through='PullRequestReviewer', related_name='assigned_prs', blank=True
    )
    created_at = models.DateTimeField()
    merged_at = models.DateTimeField(null=True, blank=True)

    @property
    def is_merged(self) -> bool:
        return self.status == self.Status.MERGED

    def __str__(self):
        return f"{self.name} ({self.id})"

    class Meta:
        db_table = 'pull_requests'


class PullRequestReviewer(models.Model):
    pull_request = models.ForeignKey(PullRequest, on_delete=models.CASCADE, related_name='reviewer_links')
    reviewer = models.ForeignKey(User, on_delete=models.CASCADE, related_name='review_links')

    class Meta:
        db_table = 'pr_reviewers'
        constraints = [
            models.UniqueConstraint(fields=['pull_request', 'reviewer'], name='pr_reviewer_unique'),
        ]

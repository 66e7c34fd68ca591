"""
Доступ к данным: справочник команд, реестр PR и агрегаты для статистики.

Методы ничего не знают про HTTP и внешние идентификаторы: пользователи здесь -
целые ключи. Ошибки базы заворачиваются в StorageError с именем операции.
"""
import functools
from dataclasses import dataclass

from django.db import DatabaseError, IntegrityError, transaction
from django.db.models import Count, Prefetch, Q

from .exceptions import (
    AlreadyExists, AuthorNotFound, NotFound, ReviewerNotAssigned, StorageError,
)
from .models import PullRequest, PullRequestReviewer, Team, TeamMember, User


def storage_operation(op: str):
    def decorator(func):
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            try:
                return func(*args, **kwargs)
            except DatabaseError as exc:
                raise StorageError(op, exc) from exc
        return wrapper
    return decorator


@dataclass(frozen=True)
class MemberRecord:
    user_id: int
    username: str
    is_active: bool


class TeamDirectory:
    """
    Команды, их участники и флаг активности пользователей
    """

    @classmethod
    @storage_operation('repo.team.create_team')
    def create_team(cls, team_name: str) -> Team:
        try:
            with transaction.atomic():
                return Team.objects.create(name=team_name)
        except IntegrityError:
            raise AlreadyExists('team_name already exists', code='TEAM_EXISTS')

    @classmethod
    @storage_operation('repo.team.team_exists')
    def team_exists(cls, team_name: str) -> bool:
        return Team.objects.filter(name=team_name).exists()

    @classmethod
    @storage_operation('repo.team.add_members')
    def add_members(cls, team_name: str, members: list) -> None:
        """
        Upsert пользователей и добавление в команду.

        Повторное добавление пользователя перезаписывает имя, команду и активность;
        дубликат строки участия игнорируется.
        """
        # последний из повторяющихся user_id побеждает
        latest = {member.user_id: member for member in members}
        if not latest:
            return

        with transaction.atomic():
            User.objects.bulk_create(
                [
                    User(id=m.user_id, username=m.username, team_id=team_name, is_active=m.is_active)
                    for m in latest.values()
                ],
                update_conflicts=True,
                unique_fields=['id'],
                update_fields=['username', 'team', 'is_active'],
            )
            TeamMember.objects.bulk_create(
                [TeamMember(team_id=team_name, user_id=user_id) for user_id in latest],
                ignore_conflicts=True,
            )

    @classmethod
    @storage_operation('repo.team.get_team_with_members')
    def get_team_with_members(cls, team_name: str) -> Team:
        try:
            return (
                Team.objects
                .prefetch_related(Prefetch('members', queryset=User.objects.order_by('id')))
                .get(name=team_name)
            )
        except Team.DoesNotExist:
            raise NotFound(f"Team '{team_name}' not found")

    @classmethod
    @storage_operation('repo.team.deactivate_all_members')
    def deactivate_all_members(cls, team_name: str) -> int:
        if not Team.objects.filter(name=team_name).exists():
            raise NotFound(f"Team '{team_name}' not found")
        return User.objects.filter(team_id=team_name, is_active=True).update(is_active=False)

    @classmethod
    @storage_operation('repo.team.get_active_members')
    def get_active_members(cls, team_name: str, exclude=()) -> list:
        return list(
            User.objects
            .filter(team_id=team_name, is_active=True)
            .exclude(id__in=list(exclude))
            .order_by('id')
            .values_list('id', flat=True)
        )

    @classmethod
    @storage_operation('repo.team.get_author_team')
    def get_author_team(cls, user_id: int) -> str:
        team_name = User.objects.filter(id=user_id).values_list('team_id', flat=True).first()
        if team_name is None:
            raise AuthorNotFound()
        return team_name

    @classmethod
    @storage_operation('repo.user.user_exists')
    def user_exists(cls, user_id: int) -> bool:
        return User.objects.filter(id=user_id).exists()

    @classmethod
    @storage_operation('repo.user.set_user_active')
    def set_user_active(cls, user_id: int, is_active: bool) -> User:
        updated = User.objects.filter(id=user_id).update(is_active=is_active)
        if not updated:
            raise NotFound('User not found')
        return User.objects.select_related('team').get(id=user_id)


class PullRequestLedger:
    """
    Pull Request'ы, их статус и связь с ревьюверами
    """

    @classmethod
    @storage_operation('repo.pull_request.exists')
    def exists(cls, pr_id: str) -> bool:
        return PullRequest.objects.filter(id=pr_id).exists()

    @classmethod
    @storage_operation('repo.pull_request.create')
    def create(cls, pr_id: str, pr_name: str, author_id: int, created_at) -> PullRequest:
        try:
            with transaction.atomic():
                return PullRequest.objects.create(
                    id=pr_id,
                    name=pr_name,
                    author_id=author_id,
                    status=PullRequest.Status.OPEN,
                    created_at=created_at,
                )
        except IntegrityError:
            if PullRequest.objects.filter(id=pr_id).exists():
                raise AlreadyExists('PR id already exists', code='PR_EXISTS')
            raise

    @classmethod
    @storage_operation('repo.pull_request.get')
    def get(cls, pr_id: str, for_update: bool = False) -> PullRequest:
        queryset = PullRequest.objects.all()
        if for_update:
            queryset = queryset.select_for_update()
        try:
            return queryset.get(id=pr_id)
        except PullRequest.DoesNotExist:
            raise NotFound(f"PR '{pr_id}' not found")

    @classmethod
    @storage_operation('repo.pull_request.reviewer_ids')
    def reviewer_ids(cls, pr_id: str) -> list:
        return list(
            PullRequestReviewer.objects
            .filter(pull_request_id=pr_id)
            .order_by('id')
            .values_list('reviewer_id', flat=True)
        )

    @classmethod
    def get_with_reviewers(cls, pr_id: str, for_update: bool = False) -> tuple:
        pr = cls.get(pr_id, for_update=for_update)
        return pr, cls.reviewer_ids(pr_id)

    @classmethod
    @storage_operation('repo.pull_request.add_reviewers')
    def add_reviewers(cls, pr_id: str, reviewer_ids: list) -> None:
        PullRequestReviewer.objects.bulk_create([
            PullRequestReviewer(pull_request_id=pr_id, reviewer_id=reviewer_id)
            for reviewer_id in reviewer_ids
        ])

    @classmethod
    @storage_operation('repo.pull_request.merge')
    def merge(cls, pr_id: str, merged_at) -> bool:
        """
        OPEN -> MERGED одним условным UPDATE.

        Возвращает False, если PR уже был смержен (повторный merge не ошибка).
        """
        updated = (
            PullRequest.objects
            .filter(id=pr_id)
            .exclude(status=PullRequest.Status.MERGED)
            .update(status=PullRequest.Status.MERGED, merged_at=merged_at)
        )
        if updated:
            return True
        if PullRequest.objects.filter(id=pr_id).exists():
            return False
        raise NotFound(f"PR '{pr_id}' not found")

    @classmethod
    @storage_operation('repo.pull_request.replace_reviewer')
    def replace_reviewer(cls, pr_id: str, old_reviewer_id: int, new_reviewer_id: int) -> None:
        with transaction.atomic():
            deleted, _ = (
                PullRequestReviewer.objects
                .filter(pull_request_id=pr_id, reviewer_id=old_reviewer_id)
                .delete()
            )
            # слот уже освободил конкурентный запрос
            if not deleted:
                raise ReviewerNotAssigned()
            PullRequestReviewer.objects.create(pull_request_id=pr_id, reviewer_id=new_reviewer_id)

    @classmethod
    @storage_operation('repo.pull_request.reviews_for_user')
    def reviews_for_user(cls, user_id: int) -> list:
        return list(
            PullRequest.objects
            .filter(reviewer_links__reviewer_id=user_id)
            .order_by('created_at', 'id')
        )


class StatsRepository:

    @classmethod
    @storage_operation('repo.stats.get_pr_stats')
    def get_pr_stats(cls) -> dict:
        counts = PullRequest.objects.aggregate(
            total_prs=Count('id'),
            open_prs=Count('id', filter=Q(status=PullRequest.Status.OPEN)),
            merged_prs=Count('id', filter=Q(status=PullRequest.Status.MERGED)),
        )
        reviewer_rows = PullRequestReviewer.objects.count()
        total = counts['total_prs']

        return {
            'total_prs': total,
            'open_prs': counts['open_prs'],
            'merged_prs': counts['merged_prs'],
            'avg_reviewers_per_pr': reviewer_rows / total if total else 0.0,
        }

    @classmethod
    @storage_operation('repo.stats.get_reviewer_load')
    def get_reviewer_load(cls) -> list:
        return list(
            User.objects
            .filter(assigned_prs__isnull=False)
            .annotate(
                prs_reviewed=Count('assigned_prs'),
                open_prs_reviewed=Count('assigned_prs', filter=Q(assigned_prs__status=PullRequest.Status.OPEN)),
                merged_prs_reviewed=Count('assigned_prs', filter=Q(assigned_prs__status=PullRequest.Status.MERGED)),
            )
            .values('id', 'username', 'prs_reviewed', 'open_prs_reviewed', 'merged_prs_reviewed')
            .order_by('-prs_reviewed', 'id')
        )

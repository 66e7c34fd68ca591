import structlog
from django.db import transaction
from django.utils import timezone

from .exceptions import (
    AlreadyExists, AlreadyMerged, NoReviewerCandidates, NotFound, Required, ReviewerNotAssigned,
)
from .identifiers import format_user_id, parse_user_id
from .models import PullRequest, Team, User
from .repositories import MemberRecord, PullRequestLedger, StatsRepository, TeamDirectory
from .selection import ReviewerSelector

logger = structlog.get_logger(__name__)

REVIEWERS_PER_PR = 2


class TeamService:
    """
    Сервис для управления командами и пользователями
    """

    @classmethod
    @transaction.atomic
    def create_team_with_members(cls, team_name: str, members_data: list) -> Team:
        """
        Создает команду с пользователями
        """
        log = logger.bind(op='service.team.create_team_with_members', team_name=team_name)
        log.info('attempting to create team with members')

        if not team_name:
            raise Required('team_name')

        # Все проверки до первой записи в базу
        members = cls._parse_members(members_data)

        if TeamDirectory.team_exists(team_name):
            log.warning('team already exists')
            raise AlreadyExists('team_name already exists', code='TEAM_EXISTS')

        TeamDirectory.create_team(team_name)
        TeamDirectory.add_members(team_name, members)

        team = TeamDirectory.get_team_with_members(team_name)
        log.info('team created', member_count=len(members))
        return team

    @classmethod
    def _parse_members(cls, members_data) -> list:
        if members_data is None:
            return []
        if not isinstance(members_data, list):
            raise Required('members', 'members must be a list')

        members = []
        for i, member in enumerate(members_data):
            if not isinstance(member, dict):
                raise Required(f'members[{i}]', f'Member at index {i} must be an object')
            for key in ('user_id', 'username'):
                if not member.get(key):
                    raise Required(f'members[{i}].{key}', f'{key} is required for member at index {i}')
            is_active = member.get('is_active')
            if not isinstance(is_active, bool):
                raise Required(f'members[{i}].is_active', f'is_active must be a boolean for member at index {i}')

            members.append(MemberRecord(
                user_id=parse_user_id(member['user_id']),
                username=member['username'],
                is_active=is_active,
            ))
        return members

    @classmethod
    def get_team_with_members(cls, team_name: str) -> Team:
        if not team_name:
            raise Required('team_name')
        return TeamDirectory.get_team_with_members(team_name)

    @classmethod
    @transaction.atomic
    def deactivate_team_users(cls, team_name: str) -> int:
        """
        Деактивирует всех активных участников команды.

        Уже назначенные ревьюверы на открытых PR остаются: активность
        перепроверяется только при переназначении.
        """
        log = logger.bind(op='service.team.deactivate_team_users', team_name=team_name)
        log.info('attempting to deactivate team users')

        if not team_name:
            raise Required('team_name')

        deactivated = TeamDirectory.deactivate_all_members(team_name)
        log.info('team users deactivated', deactivated_count=deactivated)
        return deactivated


class UserService:
    """
    Сервис для управления пользователями
    """

    @classmethod
    def set_user_active_status(cls, user_id: str, is_active: bool) -> User:
        log = logger.bind(op='service.user.set_user_active_status', user_id=user_id, is_active=is_active)

        if not user_id:
            raise Required('user_id')
        if not isinstance(is_active, bool):
            raise Required('is_active', 'is_active must be a boolean')

        user = TeamDirectory.set_user_active(parse_user_id(user_id), is_active)
        log.info('user status changed')
        return user

    @classmethod
    def get_user_review_assignments(cls, user_id: str) -> list:
        if not user_id:
            raise Required('user_id')

        key = parse_user_id(user_id)
        if not TeamDirectory.user_exists(key):
            raise NotFound(f"User '{user_id}' not found")
        return PullRequestLedger.reviews_for_user(key)


class PullRequestService:
    """
    Сервис для управления Pull Request'ами: назначение и переназначение ревьюверов
    """

    # Тесты подменяют на ReviewerSelector(random.Random(seed))
    selector = ReviewerSelector()

    @classmethod
    @transaction.atomic
    def create_pull_request(cls, pr_id: str, pr_name: str, author_id: str) -> PullRequest:
        log = logger.bind(op='service.pull_request.create_pull_request', pr_id=pr_id, author_id=author_id)
        log.info('attempting to create PR with reviewers')

        if not pr_id:
            raise Required('pull_request_id')
        if not pr_name:
            raise Required('pull_request_name')
        if not author_id:
            raise Required('author_id')

        author_key = parse_user_id(author_id)

        if PullRequestLedger.exists(pr_id):
            log.warning('PR already exists')
            raise AlreadyExists('PR id already exists', code='PR_EXISTS')

        team_name = TeamDirectory.get_author_team(author_key)

        candidates = TeamDirectory.get_active_members(team_name, exclude=[author_key])
        if not candidates:
            log.warning('no active team members available for review', team_name=team_name)
            raise NoReviewerCandidates('no active reviewers available in team')

        reviewers = cls.selector.select(candidates, REVIEWERS_PER_PR)

        pr = PullRequestLedger.create(pr_id, pr_name, author_key, created_at=timezone.now())
        PullRequestLedger.add_reviewers(pr_id, reviewers)

        log.info('PR created', reviewers=[format_user_id(r) for r in reviewers])
        return pr

    @classmethod
    @transaction.atomic
    def merge_pull_request(cls, pr_id: str) -> PullRequest:
        log = logger.bind(op='service.pull_request.merge_pull_request', pr_id=pr_id)
        log.info('attempting to merge PR')

        if not pr_id:
            raise Required('pull_request_id')

        changed = PullRequestLedger.merge(pr_id, merged_at=timezone.now())
        pr = PullRequestLedger.get(pr_id)

        log.info('PR merged' if changed else 'PR was already merged')
        return pr

    @classmethod
    @transaction.atomic
    def reassign_reviewer(cls, pr_id: str, old_user_id: str) -> tuple:
        """
        Заменяет ревьювера на случайного активного участника команды автора.

        Returns:
            tuple: (PR, ключ нового ревьювера)
        """
        log = logger.bind(op='service.pull_request.reassign_reviewer', pr_id=pr_id, old_reviewer_id=old_user_id)
        log.info('attempting to reassign reviewer')

        if not pr_id:
            raise Required('pull_request_id')
        if not old_user_id:
            raise Required('old_reviewer_id')

        old_key = parse_user_id(old_user_id)

        pr, reviewer_ids = PullRequestLedger.get_with_reviewers(pr_id, for_update=True)

        # Проверяем доменные правила
        if pr.is_merged:
            log.warning('cannot reassign reviewer on merged PR')
            raise AlreadyMerged()

        if old_key not in reviewer_ids:
            log.warning('reviewer not assigned to this PR')
            raise ReviewerNotAssigned()

        team_name = TeamDirectory.get_author_team(pr.author_id)

        exclude = set(reviewer_ids)
        exclude.add(pr.author_id)
        candidates = TeamDirectory.get_active_members(team_name, exclude=exclude)
        if not candidates:
            log.warning('no available replacement candidates in team', team_name=team_name)
            raise NoReviewerCandidates()

        new_key = cls.selector.select_one(candidates)
        PullRequestLedger.replace_reviewer(pr_id, old_key, new_key)

        log.info('reviewer reassigned', new_reviewer=format_user_id(new_key))
        return pr, new_key


class StatsService:
    """
    Сервис для сбора статистики
    """

    @classmethod
    def get_pr_stats(cls) -> dict:
        stats = StatsRepository.get_pr_stats()
        logger.info('PR statistics retrieved', op='service.stats.get_pr_stats', **stats)
        return stats

    @classmethod
    def get_reviewer_load(cls) -> list:
        """
        Returns:
            list: сколько PR назначено каждому ревьюверу, всего / открытых / смерженных
        """
        return StatsRepository.get_reviewer_load()

from django.db import IntegrityError
from django.db.models import ProtectedError
from django.test import TestCase
from django.utils import timezone

from api.models import Team, TeamMember, User, PullRequest, PullRequestReviewer


class TeamModelTest(TestCase):
    def test_create_team(self):
        """Тест создания команды"""
        team = Team.objects.create(name="backend")
        self.assertEqual(team.name, "backend")
        self.assertEqual(str(team), "backend")

    def test_team_unique_name(self):
        """Тест уникальности имени команды"""
        Team.objects.create(name="backend")
        with self.assertRaises(IntegrityError):
            Team.objects.create(name="backend")

    def test_team_with_users_cannot_be_deleted(self):
        """Команду нельзя удалить, пока на неё ссылаются пользователи"""
        team = Team.objects.create(name="backend")
        User.objects.create(id=1, username="John Doe", team=team)

        with self.assertRaises(ProtectedError):
            team.delete()


class UserModelTest(TestCase):
    def setUp(self):
        self.team = Team.objects.create(name="backend")
        self.user = User.objects.create(id=1, username="John Doe", team=self.team)

    def test_create_user(self):
        """Тест создания пользователя"""
        self.assertEqual(self.user.user_id, "u1")
        self.assertTrue(self.user.is_active)
        self.assertEqual(str(self.user), "John Doe (u1)")

    def test_membership_is_unique(self):
        TeamMember.objects.create(team=self.team, user=self.user)
        with self.assertRaises(IntegrityError):
            TeamMember.objects.create(team=self.team, user=self.user)


class PullRequestModelTest(TestCase):
    def setUp(self):
        self.team = Team.objects.create(name="backend")
        self.author = User.objects.create(id=1, username="Author", team=self.team)
        self.reviewer = User.objects.create(id=2, username="Reviewer", team=self.team)

    def test_create_pull_request(self):
        """Тест создания PR"""
        pr = PullRequest.objects.create(id="pr-1", name="Test PR", author=self.author, created_at=timezone.now())

        self.assertEqual(pr.status, PullRequest.Status.OPEN)
        self.assertFalse(pr.is_merged)
        self.assertIsNone(pr.merged_at)
        self.assertEqual(str(pr), "Test PR (pr-1)")

    def test_reviewer_cannot_be_added_twice(self):
        pr = PullRequest.objects.create(id="pr-1", name="Test PR", author=self.author, created_at=timezone.now())
        PullRequestReviewer.objects.create(pull_request=pr, reviewer=self.reviewer)

        with self.assertRaises(IntegrityError):
            PullRequestReviewer.objects.create(pull_request=pr, reviewer=self.reviewer)

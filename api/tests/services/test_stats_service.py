from django.test import TestCase
from django.utils import timezone

from api.models import Team, User, PullRequest, PullRequestReviewer
from api.services import StatsService


class StatsServiceTest(TestCase):
    def setUp(self):
        self.team = Team.objects.create(name="backend")
        self.users = [
            User.objects.create(id=i, username=f"Dev {i}", is_active=True, team=self.team)
            for i in range(1, 5)
        ]

    def _pr(self, pr_id, reviewers, status=PullRequest.Status.OPEN):
        pr = PullRequest.objects.create(
            id=pr_id, name=pr_id, author=self.users[0], status=status, created_at=timezone.now()
        )
        for reviewer in reviewers:
            PullRequestReviewer.objects.create(pull_request=pr, reviewer=reviewer)
        return pr

    def test_empty_stats(self):
        """Без PR среднее равно нулю"""
        stats = StatsService.get_pr_stats()

        self.assertEqual(stats, {
            'total_prs': 0,
            'open_prs': 0,
            'merged_prs': 0,
            'avg_reviewers_per_pr': 0.0,
        })

    def test_counts_and_average(self):
        self._pr("pr-1", self.users[1:3])
        self._pr("pr-2", self.users[1:2], status=PullRequest.Status.MERGED)
        self._pr("pr-3", [])

        stats = StatsService.get_pr_stats()

        self.assertEqual(stats['total_prs'], 3)
        self.assertEqual(stats['open_prs'], 2)
        self.assertEqual(stats['merged_prs'], 1)
        self.assertAlmostEqual(stats['avg_reviewers_per_pr'], 1.0)

    def test_reviewer_load(self):
        self._pr("pr-1", self.users[1:3])
        self._pr("pr-2", self.users[1:2], status=PullRequest.Status.MERGED)

        load = StatsService.get_reviewer_load()

        self.assertEqual([row['id'] for row in load], [2, 3])
        self.assertEqual(load[0]['prs_reviewed'], 2)
        self.assertEqual(load[0]['open_prs_reviewed'], 1)
        self.assertEqual(load[0]['merged_prs_reviewed'], 1)
        self.assertEqual(load[1]['prs_reviewed'], 1)

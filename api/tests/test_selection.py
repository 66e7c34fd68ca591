import random
from collections import Counter

from django.test import SimpleTestCase

from api.selection import ReviewerSelector


class ReviewerSelectorTest(SimpleTestCase):
    def setUp(self):
        self.selector = ReviewerSelector(random.Random(1234))

    def test_small_pool_returns_everyone(self):
        for pool in ([], [7], [7, 8]):
            with self.subTest(pool=pool):
                self.assertEqual(sorted(self.selector.select(pool, 2)), pool)

    def test_takes_distinct_elements(self):
        pool = list(range(10))
        for _ in range(100):
            selected = self.selector.select(pool, 2)
            self.assertEqual(len(selected), 2)
            self.assertEqual(len(set(selected)), 2)
            self.assertTrue(set(selected) <= set(pool))

    def test_does_not_mutate_pool(self):
        pool = [1, 2, 3, 4]
        self.selector.select(pool, 2)

        self.assertEqual(pool, [1, 2, 3, 4])

    def test_inclusion_is_uniform(self):
        pool = [1, 2, 3, 4, 5]
        counts = Counter()
        rounds = 5000
        for _ in range(rounds):
            counts.update(self.selector.select(pool, 2))

        # каждый входит с вероятностью 2/5
        for member in pool:
            self.assertAlmostEqual(counts[member] / rounds, 0.4, delta=0.04)

    def test_order_of_small_pool_is_randomized(self):
        orders = {tuple(self.selector.select([1, 2], 2)) for _ in range(50)}

        self.assertEqual(orders, {(1, 2), (2, 1)})

    def test_same_seed_same_choice(self):
        pool = list(range(20))
        first = ReviewerSelector(random.Random(7)).select(pool, 3)
        second = ReviewerSelector(random.Random(7)).select(pool, 3)

        self.assertEqual(first, second)

    def test_select_one(self):
        self.assertIn(self.selector.select_one([3, 4, 5]), [3, 4, 5])
        with self.assertRaises(ValueError):
            self.selector.select_one([])

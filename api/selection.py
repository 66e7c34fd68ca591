"""
Случайный выбор ревьюверов.

Источник случайности передаётся снаружи: в проде это ``random.SystemRandom``,
в тестах - ``random.Random`` с фиксированным seed.
"""
import random


class ReviewerSelector:

    def __init__(self, rng: random.Random = None):
        self.rng = rng if rng is not None else random.SystemRandom()

    def select(self, pool, count: int) -> list:
        """
        Выбирает до ``count`` различных элементов из ``pool`` равновероятно.

        Если кандидатов не больше ``count``, возвращаются все в случайном порядке.
        Иначе - частичная перетасовка Фишера-Йетса и первые ``count`` элементов.
        """
        candidates = list(pool)
        n = len(candidates)
        if count <= 0 or n == 0:
            return []

        take = min(count, n)
        for i in range(take):
            j = self.rng.randint(i, n - 1)
            candidates[i], candidates[j] = candidates[j], candidates[i]

        # при take == n последний шаг тривиален, перестановка полная
        return candidates[:take]

    def select_one(self, pool):
        selected = self.select(pool, 1)
        if not selected:
            raise ValueError('cannot select from an empty pool')
        return selected[0]

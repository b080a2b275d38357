import random

import pytest

from splitstats.core.exceptions import InvalidParameterError
from splitstats.experiments.assignment import select_variant


class FixedDraw:
    def __init__(self, value):
        self.value = value

    def random(self):
        return self.value


class TestSelectVariant:
    def test_cumulative_weights(self):
        weights = [50, 30, 20]

        assert select_variant(weights, FixedDraw(0.10)) == 0
        assert select_variant(weights, FixedDraw(0.60)) == 1
        assert select_variant(weights, FixedDraw(0.95)) == 2

    def test_boundary_belongs_to_lower_variant(self):
        assert select_variant([50, 50], FixedDraw(0.5)) == 0

    def test_falls_back_to_control(self):
        assert select_variant([10, 10], FixedDraw(0.99)) == 0

    def test_missing_weight_counts_as_zero(self):
        assert select_variant([None, 100], FixedDraw(0.5)) == 1

    def test_negative_weight(self):
        with pytest.raises(InvalidParameterError):
            select_variant([-10, 110])

    def test_seeded_distribution(self):
        rng = random.Random(7)
        picks = [select_variant([20, 80], rng) for _ in range(10000)]

        assert picks.count(1) / len(picks) == pytest.approx(0.8, abs=0.03)

    def test_seeded_is_reproducible(self):
        first = [select_variant([30, 30, 40], random.Random(3)) for _ in range(5)]
        second = [select_variant([30, 30, 40], random.Random(3)) for _ in range(5)]
        assert first == second

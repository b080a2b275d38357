import pytest

from splitstats.core.exceptions import InvalidObservationError
from splitstats.experiments.estimation import estimate_rate, wilson_interval
from splitstats.experiments.types import ConfidenceInterval, VariantObservation


class TestEstimateRate:
    def test_basic_rate_and_interval(self):
        rate, interval = estimate_rate(25, 100)

        assert rate == 0.25
        assert 0.15 < interval.lower < rate < interval.upper < 0.35

    def test_wilson_values(self):
        """Center is pulled toward 0.5 for small samples."""
        estimate = estimate_rate(25, 100)

        assert estimate.interval.lower == pytest.approx(0.1755, abs=1e-3)
        assert estimate.interval.upper == pytest.approx(0.3431, abs=1e-3)

    def test_zero_views(self):
        estimate = estimate_rate(0, 0)

        assert estimate.rate == 0.0
        assert estimate.interval == ConfidenceInterval(lower=0.0, upper=0.0)

    def test_zero_conversions(self):
        rate, interval = estimate_rate(0, 100)

        assert rate == 0.0
        assert interval.lower == pytest.approx(0.0, abs=1e-12)
        assert 0.0 < interval.upper < 0.05

    def test_full_conversion_stays_within_bounds(self):
        rate, interval = estimate_rate(100, 100)

        assert rate == 1.0
        assert interval.upper == pytest.approx(1.0, abs=1e-12)
        assert interval.upper <= 1.0
        assert 0.9 < interval.lower < 1.0

    def test_single_observation(self):
        _, interval = estimate_rate(1, 1)
        assert 0.0 <= interval.lower <= interval.upper <= 1.0

    def test_narrower_interval_with_larger_sample(self):
        _, small = estimate_rate(20, 100)
        _, large = estimate_rate(2000, 10000)

        assert (large.upper - large.lower) < (small.upper - small.lower)

    def test_idempotent(self):
        assert estimate_rate(37, 412) == estimate_rate(37, 412)


class TestEstimateRateValidation:
    def test_negative_views(self):
        with pytest.raises(InvalidObservationError):
            estimate_rate(0, -1)

    def test_negative_conversions(self):
        with pytest.raises(InvalidObservationError):
            estimate_rate(-1, 10)

    def test_conversions_exceed_views(self):
        with pytest.raises(InvalidObservationError):
            estimate_rate(11, 10)

    def test_errors_are_value_errors(self):
        with pytest.raises(ValueError):
            estimate_rate(11, 10)


class TestWilsonInterval:
    def test_wider_with_higher_z(self):
        low_95, high_95 = wilson_interval(30, 200)
        low_99, high_99 = wilson_interval(30, 200, z=2.576)

        assert low_99 < low_95
        assert high_99 > high_95

    def test_no_trials(self):
        assert wilson_interval(0, 0) == (0.0, 0.0)

    def test_successes_exceed_trials(self):
        with pytest.raises(InvalidObservationError):
            wilson_interval(1, 0)


class TestCountValidation:
    @pytest.mark.parametrize("views", [float("nan"), 10.5, float("inf"), "10", True])
    def test_non_integral_views(self, views):
        with pytest.raises(InvalidObservationError):
            VariantObservation("control", views=views, conversions=0)

    @pytest.mark.parametrize("conversions", [float("nan"), 0.5])
    def test_non_integral_conversions(self, conversions):
        with pytest.raises(InvalidObservationError):
            estimate_rate(conversions, 10)

    def test_whole_float_counts_accepted(self):
        observation = VariantObservation("control", views=1000.0, conversions=50)
        assert observation.conversion_rate == pytest.approx(0.05)

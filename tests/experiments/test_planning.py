import math

import pytest
import structlog
from scipy import stats as scipy_stats

from splitstats.core.exceptions import InvalidParameterError
from splitstats.experiments.planning import (
    apply_multiple_comparison_correction,
    plan_sample_size,
)


class TestPlanSampleSize:
    def test_standard_ab_test(self):
        plan = plan_sample_size(0.05, 0.20, 0.05, 0.80, 2)

        assert plan.per_variant > 1000
        assert plan.total == plan.per_variant * 2
        assert plan.estimated_days > 1

    def test_matches_closed_form(self):
        plan = plan_sample_size(0.05, 0.20)

        z_alpha = scipy_stats.norm.ppf(0.975)
        z_beta = scipy_stats.norm.ppf(0.80)
        p1 = 0.05
        p2 = p1 * (1 + 0.20)
        p = (p1 + p2) / 2
        expected = math.ceil(2 * p * (1 - p) * (z_alpha + z_beta) ** 2 / (p2 - p1) ** 2)

        assert plan.per_variant == expected
        assert plan.estimated_days == math.ceil(expected / 1000)

    def test_smaller_effect_needs_more_samples(self):
        effects = [0.05, 0.10, 0.20, 0.30, 0.50]
        sizes = [plan_sample_size(0.05, mde).per_variant for mde in effects]

        assert all(a > b for a, b in zip(sizes, sizes[1:]))

    def test_more_variants_need_more_samples(self):
        ab = plan_sample_size(0.05, 0.20, variant_count=2)
        abc = plan_sample_size(0.05, 0.20, variant_count=3)

        assert abc.per_variant > ab.per_variant
        assert abc.per_variant == math.ceil(ab.per_variant * math.log(3))
        assert abc.total == abc.per_variant * 3

    def test_alpha_is_honored(self):
        default = plan_sample_size(0.05, 0.20, alpha=0.05)
        strict = plan_sample_size(0.05, 0.20, alpha=0.01)
        assert strict.per_variant > default.per_variant

    def test_power_is_honored(self):
        n_80 = plan_sample_size(0.05, 0.20, power=0.80)
        n_95 = plan_sample_size(0.05, 0.20, power=0.95)
        assert n_95.per_variant > n_80.per_variant

    def test_daily_traffic(self):
        plan = plan_sample_size(0.05, 0.20, daily_traffic_per_variant=100)
        assert plan.estimated_days == math.ceil(plan.per_variant / 100)

    def test_small_sample_still_takes_a_day(self):
        plan = plan_sample_size(0.30, 0.50)
        assert plan.estimated_days == 1
        assert plan.per_variant >= 1

    def test_negative_effect(self):
        plan = plan_sample_size(0.10, -0.20)
        assert plan.per_variant > 0


class TestPlanValidation:
    @pytest.mark.parametrize("baseline", [0.0, 1.0, -0.1, 1.5])
    def test_baseline_out_of_range(self, baseline):
        with pytest.raises(InvalidParameterError):
            plan_sample_size(baseline)

    def test_zero_effect(self):
        with pytest.raises(InvalidParameterError):
            plan_sample_size(0.05, 0.0)

    def test_variant_rate_above_one(self):
        with pytest.raises(InvalidParameterError):
            plan_sample_size(0.6, 1.0)

    @pytest.mark.parametrize("kwargs", [{"alpha": 0.0}, {"alpha": 1.0}, {"power": 0.0}, {"power": 1.0}])
    def test_probabilities_out_of_range(self, kwargs):
        with pytest.raises(InvalidParameterError):
            plan_sample_size(0.05, 0.1, **kwargs)

    def test_single_variant(self):
        with pytest.raises(InvalidParameterError):
            plan_sample_size(0.05, variant_count=1)

    def test_no_traffic(self):
        with pytest.raises(InvalidParameterError):
            plan_sample_size(0.05, daily_traffic_per_variant=0)


class TestMultipleComparisonCorrection:
    def test_two_variants_unchanged(self):
        assert apply_multiple_comparison_correction(1000, 2) == 1000

    def test_logarithmic_growth(self):
        assert apply_multiple_comparison_correction(1000, 4) == math.ceil(1000 * math.log(4))


def test_planning_is_silent_without_logging_configuration(capsys):
    structlog.reset_defaults()

    plan_sample_size(0.05)

    captured = capsys.readouterr()
    assert captured.out == ""
    assert captured.err == ""

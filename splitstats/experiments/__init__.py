"""
Statistical inference for A/B/n experiments.

This module provides:
- Conversion rate estimation with Wilson intervals
- Two-proportion Z-tests of each variant against the control
- Winner selection under a significance and sample-size policy
- Sample size planning
- Beta-Binomial posteriors and expected-loss ranking
"""

from splitstats.experiments.assignment import select_variant
from splitstats.experiments.bayesian import (
    CredibleIntervalMethod,
    expected_loss,
    integrated_expected_loss,
    posterior,
    probability_to_be_best,
)
from splitstats.experiments.comparison import compare, compare_variants
from splitstats.experiments.estimation import estimate_rate, wilson_interval
from splitstats.experiments.normal import inverse_normal_cdf, standard_normal_cdf
from splitstats.experiments.planning import plan_sample_size
from splitstats.experiments.summary import ExperimentStats, VariantSnapshot, summarize_experiment
from splitstats.experiments.types import (
    ComparisonResult,
    ConfidenceInterval,
    PosteriorEstimate,
    RateEstimate,
    SampleSizePlan,
    VariantObservation,
    WinnerVerdict,
    ZTestResult,
)
from splitstats.experiments.winner import determine_winner

__all__ = [
    "VariantObservation",
    "ConfidenceInterval",
    "RateEstimate",
    "ZTestResult",
    "ComparisonResult",
    "WinnerVerdict",
    "SampleSizePlan",
    "PosteriorEstimate",
    "ExperimentStats",
    "VariantSnapshot",
    "CredibleIntervalMethod",
    "standard_normal_cdf",
    "inverse_normal_cdf",
    "estimate_rate",
    "wilson_interval",
    "compare",
    "compare_variants",
    "determine_winner",
    "plan_sample_size",
    "posterior",
    "expected_loss",
    "integrated_expected_loss",
    "probability_to_be_best",
    "summarize_experiment",
    "select_variant",
]

"""
Sample size planning for conversion experiments.

Answers "how many views does each variant need before the experiment can
reliably detect the lift we care about?". The minimum detectable effect is
relative: 0.10 means a 10% improvement over the baseline rate.
"""

import math

from splitstats.core.exceptions import InvalidParameterError
from splitstats.experiments.normal import inverse_normal_cdf
from splitstats.experiments.types import SampleSizePlan

DEFAULT_DAILY_TRAFFIC_PER_VARIANT = 1000


def apply_multiple_comparison_correction(n: int, variant_count: int) -> int:
    """
    Inflate a per-variant sample size when more than one treatment is tested.

    Scales by ln(variant_count). This is a heuristic that grows with the
    number of comparisons, not an exact Bonferroni correction.
    """
    if variant_count > 2:
        return math.ceil(n * math.log(variant_count))
    return n


def plan_sample_size(
    baseline_rate: float,
    minimum_detectable_effect: float = 0.10,
    alpha: float = 0.05,
    power: float = 0.80,
    variant_count: int = 2,
    daily_traffic_per_variant: int = DEFAULT_DAILY_TRAFFIC_PER_VARIANT,
) -> SampleSizePlan:
    if not 0 < baseline_rate < 1:
        raise InvalidParameterError(f"baseline_rate must be between 0 and 1, got {baseline_rate}")
    if minimum_detectable_effect == 0:
        raise InvalidParameterError("minimum_detectable_effect must be non-zero")
    if not 0 < alpha < 1:
        raise InvalidParameterError(f"alpha must be between 0 and 1, got {alpha}")
    if not 0 < power < 1:
        raise InvalidParameterError(f"power must be between 0 and 1, got {power}")
    if variant_count < 2:
        raise InvalidParameterError(f"variant_count must be at least 2, got {variant_count}")
    if daily_traffic_per_variant < 1:
        raise InvalidParameterError("daily_traffic_per_variant must be positive")

    p1 = baseline_rate
    p2 = p1 * (1 + minimum_detectable_effect)
    if not 0 < p2 < 1:
        raise InvalidParameterError(
            f"Expected variant rate {p2:.4f} is outside (0, 1); lower the effect size"
        )

    z_alpha = inverse_normal_cdf(1 - alpha / 2)
    z_beta = inverse_normal_cdf(power)

    # Pooled proportion
    p = (p1 + p2) / 2

    n = math.ceil(2 * p * (1 - p) * (z_alpha + z_beta) ** 2 / (p2 - p1) ** 2)
    per_variant = apply_multiple_comparison_correction(n, variant_count)

    return SampleSizePlan(
        per_variant=per_variant,
        total=per_variant * variant_count,
        estimated_days=math.ceil(per_variant / daily_traffic_per_variant),
    )

import math
from typing import Tuple

from splitstats.experiments.types import ConfidenceInterval, RateEstimate, validate_counts

# 95% two-sided critical value
Z_95 = 1.96


def wilson_interval(successes: int, n: int, z: float = Z_95) -> Tuple[float, float]:
    """
    Wilson score interval for a binomial proportion.

    Unlike the normal approximation (p ± z·sqrt(p(1-p)/n)) the Wilson bounds
    stay inside [0, 1] and keep a realistic width when n is small or the
    observed rate sits at 0 or 1, which is the normal state of an experiment
    that has just started.

    With no trials (n == 0) the interval is the degenerate [0, 0], the same
    as estimate_rate() reports.
    """
    validate_counts(successes, n)
    if n == 0:
        return 0.0, 0.0

    p = successes / n
    z2 = z * z

    denominator = 1 + z2 / n
    center = (p + z2 / (2 * n)) / denominator
    margin = z * math.sqrt(p * (1 - p) / n + z2 / (4 * n * n)) / denominator

    return max(0.0, center - margin), min(1.0, center + margin)


def estimate_rate(conversions: int, views: int) -> RateEstimate:
    validate_counts(conversions, views)

    if views == 0:
        return RateEstimate(rate=0.0, interval=ConfidenceInterval(lower=0.0, upper=0.0))

    lower, upper = wilson_interval(conversions, views)
    return RateEstimate(
        rate=conversions / views,
        interval=ConfidenceInterval(lower=lower, upper=upper),
    )

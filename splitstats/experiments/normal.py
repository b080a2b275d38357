"""
Standard normal distribution helpers.

standard_normal_cdf uses the Abramowitz & Stegun 26.2.17 rational
approximation. Its maximum absolute error is about 7.5e-8, which is more
than enough for reporting confidence to two decimal places. Callers only
depend on the function signature, so the approximation can be swapped for
scipy.stats.norm.cdf without touching them.
"""

import math

from scipy import stats as scipy_stats

from splitstats.core.exceptions import InvalidParameterError

_P = 0.2316419
_B1 = 0.319381530
_B2 = -0.356563782
_B3 = 1.781477937
_B4 = -1.821255978
_B5 = 1.330274429
_INV_SQRT_2PI = 1.0 / math.sqrt(2.0 * math.pi)


def standard_normal_cdf(z: float) -> float:
    t = 1.0 / (1.0 + _P * abs(z))
    density = _INV_SQRT_2PI * math.exp(-z * z / 2.0)
    tail = density * t * (_B1 + t * (_B2 + t * (_B3 + t * (_B4 + t * _B5))))

    # tail is P(Z > |z|)
    return 1.0 - tail if z > 0 else tail


def inverse_normal_cdf(p: float) -> float:
    """Return z such that P(Z <= z) = p for Z ~ Normal(0, 1)."""
    if not 0.0 < p < 1.0:
        raise InvalidParameterError(f"p must be between 0 and 1 (exclusive), got {p}")
    return float(scipy_stats.norm.ppf(p))


def two_tailed_p_value(z: float) -> float:
    p_value = 2.0 * (1.0 - standard_normal_cdf(abs(z)))
    return min(max(p_value, 0.0), 1.0)

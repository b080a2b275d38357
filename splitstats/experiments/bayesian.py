"""
Bayesian (Beta-Binomial) estimation of conversion rates.

With a Beta(prior_alpha, prior_beta) prior and binomial observations the
posterior of a variant's conversion rate is

    Beta(prior_alpha + conversions, prior_beta + views - conversions)

posterior() summarises it as a mean and a 95% credible interval. Two
interval methods are available:

- "normal": mean ± 1.96·sd. Cheap, and accurate once both posterior
  parameters are roughly 10 or more. It under-covers for small counts.
- "exact": the 2.5% and 97.5% Beta quantiles (inverse incomplete beta).

Ranking helpers:

- expected_loss(): max posterior mean minus each variant's mean. This is a
  mean-based approximation of the expected loss and is always a lower
  bound of the true value.
- integrated_expected_loss(): E[max_j θ_j] - E[θ_i], integrated numerically
  over the joint posterior.
- probability_to_be_best(): P(θ_i is the largest rate).

The integrals are deterministic (no sampling), so repeated calls return
identical results.
"""

import math
from enum import Enum
from typing import List, Optional, Sequence, Tuple, Union

import numpy as np
from scipy import integrate
from scipy import stats as scipy_stats

from splitstats.core.exceptions import InvalidParameterError
from splitstats.experiments.estimation import Z_95
from splitstats.experiments.types import PosteriorEstimate, VariantObservation, validate_counts

CREDIBLE_MASS = 0.95

# Beta mass left outside each integration range
TAIL_MASS = 1e-12
# Per-variant quantiles handed to quad as breakpoints
BREAKPOINT_QUANTILES = (0.001, 0.01, 0.1, 0.5, 0.9, 0.99, 0.999)
QUAD_LIMIT = 500
QUAD_EPSABS = 1e-13


class CredibleIntervalMethod(str, Enum):
    NORMAL = "normal"
    EXACT = "exact"


def posterior_parameters(
    conversions: int, views: int, prior_alpha: float = 1.0, prior_beta: float = 1.0
) -> Tuple[float, float]:
    validate_counts(conversions, views)
    if prior_alpha <= 0 or prior_beta <= 0:
        raise InvalidParameterError(
            f"Prior parameters must be positive (alpha={prior_alpha}, beta={prior_beta})"
        )
    return prior_alpha + conversions, prior_beta + (views - conversions)


def beta_normal_bounds(alpha: float, beta: float, z: float = Z_95) -> Tuple[float, float]:
    """Normal approximation to the Beta(alpha, beta) central interval, clamped to [0, 1]."""
    total = alpha + beta
    mean = alpha / total
    variance = (alpha * beta) / (total**2 * (total + 1))
    sd = math.sqrt(variance)
    return max(0.0, mean - z * sd), min(1.0, mean + z * sd)


def beta_exact_bounds(alpha: float, beta: float, mass: float = CREDIBLE_MASS) -> Tuple[float, float]:
    tail = (1 - mass) / 2
    lower = scipy_stats.beta.ppf(tail, alpha, beta)
    upper = scipy_stats.beta.ppf(1 - tail, alpha, beta)
    return float(lower), float(upper)


def posterior(
    conversions: int,
    views: int,
    prior_alpha: float = 1.0,
    prior_beta: float = 1.0,
    method: Union[CredibleIntervalMethod, str] = CredibleIntervalMethod.NORMAL,
) -> PosteriorEstimate:
    alpha, beta = posterior_parameters(conversions, views, prior_alpha, prior_beta)

    try:
        method = CredibleIntervalMethod(method)
    except ValueError:
        raise InvalidParameterError(f"Unknown credible interval method: {method!r}") from None

    if method is CredibleIntervalMethod.EXACT:
        lower, upper = beta_exact_bounds(alpha, beta)
    else:
        lower, upper = beta_normal_bounds(alpha, beta)

    return PosteriorEstimate(
        mean=alpha / (alpha + beta),
        lower=lower,
        upper=upper,
        alpha=alpha,
        beta=beta,
    )


def _all_parameters(
    variants: Sequence[VariantObservation], prior_alpha: float, prior_beta: float
) -> List[Tuple[float, float]]:
    return [
        posterior_parameters(v.conversions, v.views, prior_alpha, prior_beta) for v in variants
    ]


def expected_loss(
    variants: Sequence[VariantObservation], prior_alpha: float = 1.0, prior_beta: float = 1.0
) -> List[float]:
    """Mean-based expected loss per variant (lower is better, the leader scores 0)."""
    means = [a / (a + b) for a, b in _all_parameters(variants, prior_alpha, prior_beta)]
    if not means:
        return []

    max_mean = max(means)
    return [max(0.0, max_mean - mean) for mean in means]


def _support(alpha: float, beta: float) -> Tuple[float, float]:
    """Range holding all but 2·TAIL_MASS of the Beta(alpha, beta) mass."""
    lower = scipy_stats.beta.ppf(TAIL_MASS, alpha, beta)
    upper = scipy_stats.beta.isf(TAIL_MASS, alpha, beta)
    return float(lower), float(upper)


def _breakpoints(
    parameters: Sequence[Tuple[float, float]], lower: float, upper: float
) -> Optional[List[float]]:
    alphas = np.array([a for a, _ in parameters])
    betas = np.array([b for _, b in parameters])
    quantiles = scipy_stats.beta.ppf(np.array(BREAKPOINT_QUANTILES)[:, None], alphas, betas)
    points = sorted({float(q) for q in quantiles.ravel() if lower < q < upper})
    return points or None


def _integrate(
    func, lower: float, upper: float, parameters: Sequence[Tuple[float, float]]
) -> float:
    # With large counts a posterior is far narrower than [0, 1], so quad only
    # sees the region where the mass is, split at every variant's quantiles
    if upper <= lower:
        return 0.0
    value, _ = integrate.quad(
        func,
        lower,
        upper,
        points=_breakpoints(parameters, lower, upper),
        limit=QUAD_LIMIT,
        epsabs=QUAD_EPSABS,
    )
    return value


def _expected_maximum(parameters: Sequence[Tuple[float, float]]) -> float:
    alphas = np.array([a for a, _ in parameters])
    betas = np.array([b for _, b in parameters])
    supports = [_support(a, b) for a, b in parameters]
    lower = min(s[0] for s in supports)
    upper = max(s[1] for s in supports)

    # E[max] = ∫ P(max > x) dx over [0, 1]. P(max > x) is 1 below `lower`
    # and 0 above `upper`.
    def survival_of_max(x: float) -> float:
        return 1.0 - float(np.prod(scipy_stats.beta.cdf(x, alphas, betas)))

    return lower + _integrate(survival_of_max, lower, upper, parameters)


def integrated_expected_loss(
    variants: Sequence[VariantObservation], prior_alpha: float = 1.0, prior_beta: float = 1.0
) -> List[float]:
    parameters = _all_parameters(variants, prior_alpha, prior_beta)
    if not parameters:
        return []

    expected_max = _expected_maximum(parameters)
    return [max(0.0, expected_max - a / (a + b)) for a, b in parameters]


def probability_to_be_best(
    variants: Sequence[VariantObservation], prior_alpha: float = 1.0, prior_beta: float = 1.0
) -> List[float]:
    parameters = _all_parameters(variants, prior_alpha, prior_beta)

    probabilities = []
    for i, (alpha_i, beta_i) in enumerate(parameters):
        others = [p for j, p in enumerate(parameters) if j != i]
        other_alphas = np.array([a for a, _ in others])
        other_betas = np.array([b for _, b in others])

        def integrand(x: float) -> float:
            others_below = np.prod(scipy_stats.beta.cdf(x, other_alphas, other_betas))
            return float(scipy_stats.beta.pdf(x, alpha_i, beta_i) * others_below)

        # The integrand vanishes outside variant i's own support
        lower, upper = _support(alpha_i, beta_i)
        value = _integrate(integrand, lower, upper, parameters)
        probabilities.append(min(max(value, 0.0), 1.0))

    return probabilities

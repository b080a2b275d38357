import math
import numbers
from dataclasses import dataclass, field
from typing import Iterator, Optional, Tuple

from splitstats.core.exceptions import InvalidObservationError


def _is_count(value) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, numbers.Integral):
        return True
    # Whole floats such as 1000.0 are accepted, NaN and 10.5 are not
    return isinstance(value, float) and math.isfinite(value) and value.is_integer()


def validate_counts(conversions: int, views: int) -> None:
    if not (_is_count(conversions) and _is_count(views)):
        raise InvalidObservationError(
            f"Counts must be whole numbers (conversions={conversions!r}, views={views!r})"
        )
    if views < 0 or conversions < 0:
        raise InvalidObservationError(
            f"Counts must be non-negative (conversions={conversions}, views={views})"
        )
    if conversions > views:
        raise InvalidObservationError(
            f"conversions ({conversions}) cannot exceed views ({views})"
        )


@dataclass(frozen=True)
class VariantObservation:
    name: str
    views: int
    conversions: int

    def __post_init__(self):
        validate_counts(self.conversions, self.views)

    @property
    def conversion_rate(self) -> float:
        if self.views == 0:
            return 0.0
        return self.conversions / self.views


@dataclass(frozen=True)
class ConfidenceInterval:
    lower: float
    upper: float


@dataclass(frozen=True)
class RateEstimate:
    rate: float
    interval: ConfidenceInterval

    def __iter__(self) -> Iterator:
        # Unpacks as (rate, interval)
        return iter((self.rate, self.interval))


@dataclass(frozen=True)
class ZTestResult:
    z_score: float
    p_value: float

    def __iter__(self) -> Iterator:
        return iter((self.z_score, self.p_value))


@dataclass(frozen=True)
class ComparisonResult:
    variant_index: int
    is_significant: bool
    confidence_percent: float
    p_value: float
    z_score: float
    relative_lift_percent: float  # Percentage
    absolute_lift_percent: float  # Percentage points


@dataclass(frozen=True)
class WinnerVerdict:
    """
    Outcome of a multi-variant comparison against the control (index 0).

    winner_index is None when no variant may be declared yet. A value of 0
    means the control was confirmed: every variant is significantly worse.
    """

    winner_index: Optional[int]
    confidence_percent: float
    sufficient_data: bool
    results: Tuple[ComparisonResult, ...] = field(default_factory=tuple)

    @property
    def has_winner(self) -> bool:
        return self.winner_index is not None


@dataclass(frozen=True)
class SampleSizePlan:
    per_variant: int
    total: int
    estimated_days: int


@dataclass(frozen=True)
class PosteriorEstimate:
    mean: float
    lower: float
    upper: float
    alpha: float
    beta: float

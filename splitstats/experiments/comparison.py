import math
from typing import Tuple

from splitstats.experiments.normal import two_tailed_p_value
from splitstats.experiments.types import ComparisonResult, VariantObservation, ZTestResult

NO_EVIDENCE = ZTestResult(z_score=0.0, p_value=1.0)


def calculate_pooled_proportion(control: VariantObservation, variant: VariantObservation) -> float:
    total_views = control.views + variant.views
    if total_views == 0:
        return 0.0
    return (control.conversions + variant.conversions) / total_views


def calculate_lift(control_rate: float, variant_rate: float) -> Tuple[float, float]:
    # Absolute lift in percentage points
    absolute_lift = (variant_rate - control_rate) * 100

    # Relative lift is reported as 0 when the control never converted
    if control_rate > 0:
        relative_lift = ((variant_rate - control_rate) / control_rate) * 100
    else:
        relative_lift = 0.0

    return absolute_lift, relative_lift


def compare(control: VariantObservation, variant: VariantObservation) -> ZTestResult:
    """
    Two-tailed pooled Z-test of H0: control rate == variant rate.

    Returns z = 0, p = 1 whenever there is no evidence to weigh: an empty
    arm, or a pooled rate of 0 or 1 (zero standard error).
    """
    if control.views == 0 or variant.views == 0:
        return NO_EVIDENCE

    pooled = calculate_pooled_proportion(control, variant)
    se = math.sqrt(pooled * (1 - pooled) * (1 / control.views + 1 / variant.views))

    if se == 0:
        return NO_EVIDENCE

    z_score = (variant.conversion_rate - control.conversion_rate) / se
    return ZTestResult(z_score=z_score, p_value=two_tailed_p_value(z_score))


def compare_variants(
    control: VariantObservation,
    variant: VariantObservation,
    confidence_threshold_percent: float = 95.0,
    variant_index: int = 1,
) -> ComparisonResult:
    z_score, p_value = compare(control, variant)

    confidence = (1 - p_value) * 100
    absolute_lift, relative_lift = calculate_lift(
        control.conversion_rate, variant.conversion_rate
    )

    return ComparisonResult(
        variant_index=variant_index,
        is_significant=confidence >= confidence_threshold_percent,
        confidence_percent=confidence,
        p_value=p_value,
        z_score=z_score,
        relative_lift_percent=relative_lift,
        absolute_lift_percent=absolute_lift,
    )

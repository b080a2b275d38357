from typing import Sequence

from splitstats.core.exceptions import InsufficientVariantsError
from splitstats.experiments.comparison import compare_variants
from splitstats.experiments.types import VariantObservation, WinnerVerdict


def determine_winner(
    variants: Sequence[VariantObservation],
    minimum_sample_size: int = 100,
    confidence_threshold_percent: float = 95.0,
) -> WinnerVerdict:
    """
    Pick the winning variant of an A/B/n experiment.

    variants[0] is the control. Every other variant is compared against it
    with a pooled two-proportion Z-test.

    Policy:
    - No verdict while any variant has fewer than minimum_sample_size views.
    - A treatment wins when it is significant, has a positive lift, and has
      the highest conversion rate among such treatments. Ties keep the
      lower index.
    - When no treatment beats the control and every treatment is
      significantly worse, the control is confirmed: winner_index is 0 and
      the confidence is the weakest of those comparisons. Downstream
      consumers read winner_index == 0 as "keep control".
    - Otherwise winner_index is None.
    """
    if len(variants) < 2:
        raise InsufficientVariantsError(
            f"At least 2 variants are required (control + 1), got {len(variants)}"
        )

    sufficient_data = all(v.views >= minimum_sample_size for v in variants)
    if not sufficient_data:
        return WinnerVerdict(winner_index=None, confidence_percent=0.0, sufficient_data=False)

    control = variants[0]
    results = tuple(
        compare_variants(control, variant, confidence_threshold_percent, variant_index=index)
        for index, variant in enumerate(variants[1:], start=1)
    )

    best_index = 0
    best_confidence = 0.0

    for result in results:
        if result.is_significant and result.relative_lift_percent > 0:
            candidate = variants[result.variant_index]
            if candidate.conversion_rate > variants[best_index].conversion_rate:
                best_index = result.variant_index
                best_confidence = result.confidence_percent

    if best_index == 0 and all(
        r.is_significant and r.relative_lift_percent < 0 for r in results
    ):
        best_confidence = min(r.confidence_percent for r in results)

    winner_index = best_index if best_confidence >= confidence_threshold_percent else None

    return WinnerVerdict(
        winner_index=winner_index,
        confidence_percent=best_confidence,
        sufficient_data=True,
        results=results,
    )

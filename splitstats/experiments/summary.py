from dataclasses import dataclass
from typing import Any, Dict, Sequence, Tuple

from splitstats.experiments.estimation import estimate_rate
from splitstats.experiments.types import ConfidenceInterval, VariantObservation, WinnerVerdict
from splitstats.experiments.winner import determine_winner


@dataclass(frozen=True)
class VariantSnapshot:
    name: str
    views: int
    conversions: int
    conversion_rate: float
    interval: ConfidenceInterval

    @property
    def conversion_rate_percent(self) -> float:
        return self.conversion_rate * 100


@dataclass(frozen=True)
class ExperimentStats:
    variants: Tuple[VariantSnapshot, ...]
    verdict: WinnerVerdict

    def to_record(self) -> Dict[str, Any]:
        """Shape stored on the experiment by the stats service (rates as percentages)."""
        return {
            "stats": [
                {
                    "name": snapshot.name,
                    "views": snapshot.views,
                    "conversions": snapshot.conversions,
                    "conversionRate": snapshot.conversion_rate_percent,
                }
                for snapshot in self.variants
            ],
            "winningVariant": self.verdict.winner_index,
            "confidenceLevel": self.verdict.confidence_percent,
        }


def summarize_experiment(
    variants: Sequence[VariantObservation],
    minimum_sample_size: int = 100,
    confidence_threshold_percent: float = 95.0,
) -> ExperimentStats:
    snapshots = []
    for variant in variants:
        rate, interval = estimate_rate(variant.conversions, variant.views)
        snapshots.append(
            VariantSnapshot(
                name=variant.name,
                views=variant.views,
                conversions=variant.conversions,
                conversion_rate=rate,
                interval=interval,
            )
        )

    verdict = determine_winner(variants, minimum_sample_size, confidence_threshold_percent)
    return ExperimentStats(variants=tuple(snapshots), verdict=verdict)

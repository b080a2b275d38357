from splitstats.experiments import (
    VariantObservation,
    WinnerVerdict,
    determine_winner,
    estimate_rate,
    plan_sample_size,
    posterior,
    summarize_experiment,
)

__all__ = [
    "__version__",
    "VariantObservation",
    "WinnerVerdict",
    "determine_winner",
    "estimate_rate",
    "plan_sample_size",
    "posterior",
    "summarize_experiment",
]
__version__ = "0.1.0"

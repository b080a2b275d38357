"""
Command line interface for splitstats.

Usage:
    splitstats analyze counts.csv
    splitstats analyze counts.json --minimum-sample-size 500 --confidence-threshold 99 --json
    splitstats plan --baseline-rate 0.05 --mde 0.2 --variants 3
    splitstats posterior --conversions 95 --views 100 --method exact
    splitstats loss counts.csv

Count files hold one row per variant, control first, with the columns
name, views, conversions (CSV) or a JSON list of objects with those keys.
"""

import argparse
import json
import sys
from dataclasses import asdict
from pathlib import Path
from typing import Any, List, Optional

import pandas as pd
import structlog

from splitstats.config import Settings, get_settings
from splitstats.core.exceptions import InvalidObservationError
from splitstats.core.logging_config import configure_logging
from splitstats.experiments.bayesian import (
    CredibleIntervalMethod,
    expected_loss,
    integrated_expected_loss,
    posterior,
    probability_to_be_best,
)
from splitstats.experiments.planning import plan_sample_size
from splitstats.experiments.summary import summarize_experiment
from splitstats.experiments.types import VariantObservation
from splitstats.models.schemas import ExperimentCountsRequest

logger = structlog.get_logger(__name__)

REQUIRED_COLUMNS = ("name", "views", "conversions")


def read_counts(path: Path) -> List[dict]:
    """Read per-variant counts from a CSV or JSON file."""
    if path.suffix.lower() == ".json":
        with open(path) as f:
            data = json.load(f)
        if isinstance(data, dict):
            data = data.get("variants", [])
        return data

    df = pd.read_csv(path, dtype={"name": str})
    missing = [col for col in REQUIRED_COLUMNS if col not in df.columns]
    if missing:
        raise InvalidObservationError(f"{path.name} is missing columns: {', '.join(missing)}")

    # Counts go to the schema as parsed, so fractional or empty cells fail
    # validation instead of being truncated. The JSON round trip turns numpy
    # scalars into plain ints, floats and None.
    return json.loads(df[list(REQUIRED_COLUMNS)].to_json(orient="records"))


def load_observations(path: str) -> List[VariantObservation]:
    request = ExperimentCountsRequest(variants=read_counts(Path(path)))
    return request.to_observations()


def emit_json(payload: Any) -> None:
    print(json.dumps(payload, indent=2, default=str))


def cmd_analyze(args: argparse.Namespace, settings: Settings) -> int:
    """Estimate every variant and determine the winner."""
    variants = load_observations(args.input)
    minimum_sample_size = (
        args.minimum_sample_size
        if args.minimum_sample_size is not None
        else settings.MINIMUM_SAMPLE_SIZE
    )
    threshold = (
        args.confidence_threshold
        if args.confidence_threshold is not None
        else settings.CONFIDENCE_THRESHOLD
    )

    summary = summarize_experiment(variants, minimum_sample_size, threshold)
    verdict = summary.verdict

    if verdict.sufficient_data:
        logger.info(
            "winner_determined",
            winner_index=verdict.winner_index,
            confidence_percent=round(verdict.confidence_percent, 4),
            variant_count=len(variants),
        )
    else:
        logger.debug(
            "insufficient_data",
            minimum_sample_size=minimum_sample_size,
            views=[v.views for v in variants],
        )

    if args.json:
        emit_json(
            {
                "variants": [
                    {**asdict(snapshot), "conversion_rate_percent": snapshot.conversion_rate_percent}
                    for snapshot in summary.variants
                ],
                "verdict": asdict(verdict),
                "record": summary.to_record(),
            }
        )
        return 0

    print("\nExperiment Analysis")
    print("===================")
    print(f"{'Variant':<20} {'Views':>10} {'Conv.':>8} {'Rate':>8}  95% CI")
    for snapshot in summary.variants:
        print(
            f"{snapshot.name:<20} {snapshot.views:>10,} {snapshot.conversions:>8,} "
            f"{snapshot.conversion_rate_percent:>7.2f}%  "
            f"[{snapshot.interval.lower:.2%}, {snapshot.interval.upper:.2%}]"
        )

    print()
    if not verdict.sufficient_data:
        print(f"Insufficient data: every variant needs at least {minimum_sample_size:,} views.")
        return 0

    for result in verdict.results:
        name = summary.variants[result.variant_index].name
        print(
            f"{name} vs {summary.variants[0].name}: "
            f"lift {result.relative_lift_percent:+.1f}% ({result.absolute_lift_percent:+.2f} pp), "
            f"z={result.z_score:.3f}, p={result.p_value:.4f}, "
            f"confidence {result.confidence_percent:.2f}%"
            f"{' [significant]' if result.is_significant else ''}"
        )

    print()
    if verdict.winner_index is None:
        print(f"No winner yet at {threshold:g}% confidence.")
    elif verdict.winner_index == 0:
        print(
            f"Control confirmed: every variant is worse "
            f"({verdict.confidence_percent:.2f}% confidence)."
        )
    else:
        print(
            f"Winner: {summary.variants[verdict.winner_index].name} "
            f"({verdict.confidence_percent:.2f}% confidence)."
        )
    return 0


def cmd_plan(args: argparse.Namespace, settings: Settings) -> int:
    """Compute the sample size needed before starting an experiment."""
    plan = plan_sample_size(
        baseline_rate=args.baseline_rate,
        minimum_detectable_effect=(
            args.mde if args.mde is not None else settings.MINIMUM_DETECTABLE_EFFECT
        ),
        alpha=args.alpha if args.alpha is not None else settings.ALPHA,
        power=args.power if args.power is not None else settings.POWER,
        variant_count=args.variants,
        daily_traffic_per_variant=(
            args.daily_traffic
            if args.daily_traffic is not None
            else settings.DAILY_TRAFFIC_PER_VARIANT
        ),
    )
    logger.debug(
        "sample_size_planned",
        baseline_rate=args.baseline_rate,
        per_variant=plan.per_variant,
        total=plan.total,
    )

    if args.json:
        emit_json(asdict(plan))
        return 0

    print("\nSample Size Plan")
    print("================")
    print(f"Per variant:     {plan.per_variant:>12,}")
    print(f"Total:           {plan.total:>12,}")
    print(f"Estimated days:  {plan.estimated_days:>12,}")
    return 0


def cmd_posterior(args: argparse.Namespace, settings: Settings) -> int:
    """Summarise the Beta posterior of a single variant."""
    estimate = posterior(
        args.conversions,
        args.views,
        prior_alpha=args.prior_alpha if args.prior_alpha is not None else settings.PRIOR_ALPHA,
        prior_beta=args.prior_beta if args.prior_beta is not None else settings.PRIOR_BETA,
        method=args.method or settings.CREDIBLE_INTERVAL_METHOD,
    )

    if args.json:
        emit_json(asdict(estimate))
        return 0

    print(f"Posterior Beta({estimate.alpha:g}, {estimate.beta:g})")
    print(f"Mean: {estimate.mean:.4%}")
    print(f"95% credible interval: [{estimate.lower:.4%}, {estimate.upper:.4%}]")
    return 0


def cmd_loss(args: argparse.Namespace, settings: Settings) -> int:
    """Rank variants by Bayesian expected loss."""
    variants = load_observations(args.input)
    priors = {"prior_alpha": settings.PRIOR_ALPHA, "prior_beta": settings.PRIOR_BETA}

    approximate = expected_loss(variants, **priors)
    integrated = integrated_expected_loss(variants, **priors)
    best = probability_to_be_best(variants, **priors)

    rows = [
        {
            "name": variant.name,
            "expected_loss": approximate[i],
            "integrated_expected_loss": integrated[i],
            "probability_to_be_best": best[i],
        }
        for i, variant in enumerate(variants)
    ]

    if args.json:
        emit_json(rows)
        return 0

    print(f"\n{'Variant':<20} {'Loss (mean)':>12} {'Loss (exact)':>13} {'P(best)':>9}")
    for row in rows:
        print(
            f"{row['name']:<20} {row['expected_loss']:>12.5f} "
            f"{row['integrated_expected_loss']:>13.5f} {row['probability_to_be_best']:>9.2%}"
        )
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="splitstats",
        description="Statistics for A/B/n conversion experiments",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  Analyze an experiment:
    splitstats analyze counts.csv

  Plan a three-way test detecting a 20% lift on a 5% baseline:
    splitstats plan --baseline-rate 0.05 --mde 0.2 --variants 3
        """,
    )
    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    analyze_parser = subparsers.add_parser("analyze", help="Estimate rates and pick a winner")
    analyze_parser.add_argument("input", help="CSV or JSON file with name, views, conversions")
    analyze_parser.add_argument(
        "--minimum-sample-size",
        type=int,
        default=None,
        help="Views every variant needs before a verdict (default: from settings, 100)",
    )
    analyze_parser.add_argument(
        "--confidence-threshold",
        type=float,
        default=None,
        help="Confidence percent required to declare a winner (default: from settings, 95)",
    )
    analyze_parser.add_argument("--json", action="store_true", help="Print JSON output")
    analyze_parser.set_defaults(func=cmd_analyze)

    plan_parser = subparsers.add_parser("plan", help="Plan the sample size of an experiment")
    plan_parser.add_argument("--baseline-rate", type=float, required=True, help="Control conversion rate")
    plan_parser.add_argument(
        "--mde", type=float, default=None, help="Relative minimum detectable effect (0.1 = +10%%)"
    )
    plan_parser.add_argument("--alpha", type=float, default=None, help="Significance level")
    plan_parser.add_argument("--power", type=float, default=None, help="Statistical power")
    plan_parser.add_argument("--variants", type=int, default=2, help="Variants including control")
    plan_parser.add_argument(
        "--daily-traffic", type=int, default=None, help="Expected daily views per variant"
    )
    plan_parser.add_argument("--json", action="store_true", help="Print JSON output")
    plan_parser.set_defaults(func=cmd_plan)

    posterior_parser = subparsers.add_parser("posterior", help="Beta posterior of one variant")
    posterior_parser.add_argument("--conversions", type=int, required=True)
    posterior_parser.add_argument("--views", type=int, required=True)
    posterior_parser.add_argument("--prior-alpha", type=float, default=None)
    posterior_parser.add_argument("--prior-beta", type=float, default=None)
    posterior_parser.add_argument(
        "--method",
        choices=[m.value for m in CredibleIntervalMethod],
        default=None,
        help="Credible interval method (default: from settings, normal)",
    )
    posterior_parser.add_argument("--json", action="store_true", help="Print JSON output")
    posterior_parser.set_defaults(func=cmd_posterior)

    loss_parser = subparsers.add_parser("loss", help="Bayesian expected loss per variant")
    loss_parser.add_argument("input", help="CSV or JSON file with name, views, conversions")
    loss_parser.add_argument("--json", action="store_true", help="Print JSON output")
    loss_parser.set_defaults(func=cmd_loss)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    settings = get_settings()
    configure_logging(settings.LOG_LEVEL, settings.LOG_JSON)

    try:
        return args.func(args, settings)
    except (OSError, ValueError) as e:
        # pydantic ValidationError and SplitStatsError are both ValueErrors
        logger.error("command_failed", command=args.command, error=str(e))
        print(f"Error: {e}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())

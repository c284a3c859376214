"""Command line entry point: label a daily series from a fixture file or a synthetic walk."""

import argparse
import sys

from pydantic import TypeAdapter

from config import Settings, configure_logging
from processor.anomaly import AnomalyAnalyzer, InvalidInput
from processor.report import build_report
from producers.market_chart import MarketDataError, load_observations
from producers.schemas import MetricRecord
from producers.synthetic import synthetic_series

_records_json = TypeAdapter(list[MetricRecord])


def parse_args(argv=None):
    settings = Settings()
    parser = argparse.ArgumentParser(
        description="Flag anomalous days in a daily price / market cap / volume series"
    )
    parser.add_argument(
        "input",
        nargs="?",
        help="JSON file: a market_chart payload or a list of observations",
    )
    parser.add_argument(
        "--threshold",
        type=float,
        default=settings.anomaly_z_threshold,
        help="Flag days whose |z-score| exceeds this value",
    )
    parser.add_argument(
        "--window",
        type=int,
        default=settings.anomaly_window_size,
        help="Trailing window size in days, current day included",
    )
    parser.add_argument(
        "--anomalies-only",
        action="store_true",
        help="Print flagged rows and a period summary instead of every record",
    )
    parser.add_argument(
        "--synthetic",
        type=int,
        metavar="DAYS",
        help="Analyze a generated series of this many days instead of a file",
    )
    parser.add_argument("--seed", type=int, default=None, help="Seed for --synthetic")
    args = parser.parse_args(argv)
    if args.input is None and args.synthetic is None:
        parser.error("an input file or --synthetic DAYS is required")
    return args, settings


def main(argv=None) -> int:
    args, settings = parse_args(argv)
    log = configure_logging("anomaly-cli", settings.log_level, stream=sys.stderr)

    try:
        if args.synthetic is not None:
            observations = synthetic_series(args.synthetic, seed=args.seed)
            log.info("synthetic_series_generated", days=args.synthetic, seed=args.seed)
        else:
            observations = load_observations(args.input)
            log.info("observations_loaded", path=args.input, count=len(observations))

        analyzer = AnomalyAnalyzer(args.threshold, args.window, log=log)
        records = analyzer.analyze(observations)
    except (InvalidInput, MarketDataError, ValueError) as e:
        log.error("analysis_failed", error_type=type(e).__name__, error=str(e))
        return 2

    if args.anomalies_only:
        sys.stdout.write(build_report(records).model_dump_json(indent=2) + "\n")
    else:
        sys.stdout.write(_records_json.dump_json(records, indent=2).decode() + "\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())

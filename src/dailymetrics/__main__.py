"""
Entrypoint: one interactive check-in, appended to the data file.

Usage:
    python -m dailymetrics                  # uses DAILY_METRICS_DATA_FILE or ./daily_metrics.csv
    python -m dailymetrics --file log.csv   # explicit data file
    daily-metrics                           # console script, same options

Exit codes: 0 logged, 1 data file could not be written, 2 history could not
be read, 3 invalid configuration, 130 cancelled by the user.
"""
import argparse
import logging
import sys
from datetime import datetime
from typing import List, Optional

EXIT_OK = 0
EXIT_IO_ERROR = 1
EXIT_HISTORY_ERROR = 2
EXIT_CONFIG_ERROR = 3
EXIT_CANCELLED = 130

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="daily-metrics",
        description="Log today's sleep, energy ratings and workout to a CSV file.",
    )
    parser.add_argument(
        "--file",
        "-f",
        default=None,
        help="Path to the CSV data file (default: settings data_file, daily_metrics.csv)",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    from pydantic import ValidationError

    from dailymetrics.cli.collector import EntryCollector, UserCancelled, compute_day_count
    from dailymetrics.cli.theme import Theme
    from dailymetrics.config import get_settings
    from dailymetrics.storage.scanner import HistoryReadError, scan_history
    from dailymetrics.storage.writer import LogFileError, append_entry

    args = build_parser().parse_args(argv)
    try:
        settings = get_settings()
        logging.basicConfig(
            level=settings.log_level,
            format="%(asctime)s %(name)s %(levelname)s %(message)s",
        )
    except (ValidationError, ValueError) as exc:
        print(f"\nConfiguration Error: {exc}", file=sys.stderr)
        print("   Check the DAILY_METRICS_* environment variables and .env file.", file=sys.stderr)
        return EXIT_CONFIG_ERROR

    theme = Theme(enabled=settings.color and sys.stdout.isatty())
    data_file = args.file or settings.data_file
    tz = settings.tz

    print(theme.rule())
    print(theme.heading(" Daily Metrics Logger "))
    print(theme.rule())

    try:
        today = datetime.now(tz).date()
        summary = scan_history(data_file, today, tz)

        day_count = compute_day_count(summary, today)
        print(f"Current Date: {today:%Y-%m-%d}")
        print(
            f"Logging Day: {theme.highlight(str(day_count))} / "
            f"{theme.style(str(settings.goal_days), 'green')} (Goal)"
        )
        print(theme.rule("-"))

        collector = EntryCollector(theme, clock=lambda: datetime.now(tz))
        entry = collector.collect(today, summary)
        append_entry(data_file, entry)

    except UserCancelled:
        print(theme.error("\nCancelled. Nothing was logged."), file=sys.stderr)
        return EXIT_CANCELLED
    except HistoryReadError as exc:
        print(theme.error(f"\nHistory Error: {exc}"), file=sys.stderr)
        print("   Check that the data file is a readable CSV file.", file=sys.stderr)
        return EXIT_HISTORY_ERROR
    except LogFileError as exc:
        print(theme.error(f"\nFile Error: {exc}"), file=sys.stderr)
        print("   The entry was NOT logged.", file=sys.stderr)
        return EXIT_IO_ERROR

    print(theme.style("\n" + "-" * 40, "green"))
    print(theme.success(" Entry successfully logged!"))
    print(f" Timestamp: {theme.muted(f'{entry.timestamp:%Y-%m-%d %H:%M:%S %Z}')}")
    print(theme.style("-" * 40, "green"))
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())

# connects input (flags + cities) to the service and prints the report.
# credits to api.open-meteo.com for the weather and openstreetmap for geocoding.

from __future__ import annotations
import argparse
import logging
import sys
from typing import List, Optional
from .client import MAX_FORECAST_DAYS, WeatherClientError, clamp_forecast_days
from .logconfig import setup_logging
from .render import RenderOptions, render, render_failures
from .service import compute_all

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="weacli",
        description="Current weather and daily forecast for one or more cities.",
    )
    parser.add_argument(
        "-f", "--forecast", type=int, default=0, metavar="DAYS",
        help=f"forecast days from today (0-{MAX_FORECAST_DAYS}, default 0)",
    )
    parser.add_argument("-a", "--all", action="store_true", help="show all metrics and sun times")
    parser.add_argument("-x", "--extended", action="store_true", help="show extended metrics")
    parser.add_argument("-s", "--sun", action="store_true", help="show sunrise, sunset and daylight")
    parser.add_argument("--fahrenheit", action="store_true", help="temperatures in Fahrenheit")
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging on stderr")
    parser.add_argument("cities", nargs="*", metavar="city")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)  # -h prints usage and exits here

    if not args.cities:
        parser.print_help(sys.stdout)
        return 1

    try:
        setup_logging("DEBUG" if args.verbose else None)
    except WeatherClientError as exc:
        print(f"weacli: {exc}", file=sys.stderr)
        return 2

    days = clamp_forecast_days(args.forecast)
    if days != args.forecast:
        logger.warning("forecast days must be between 0 and %d (got %d), using 0", MAX_FORECAST_DAYS, args.forecast)

    # uses threads under the hood (ThreadPoolExecutor in service.compute_all)
    try:
        results = compute_all(args.cities, days=days)
    except WeatherClientError as exc:
        # only configuration problems get here, per-city failures are collected
        logger.error("%s", exc)
        return 2

    options = RenderOptions(
        show_all=args.all,
        show_extended=args.extended,
        show_sun=args.sun,
        fahrenheit=args.fahrenheit,
    )
    report = render(results, options)
    if report:
        print(report)
    for line in render_failures(results):
        print(line, file=sys.stderr)
    return 0


if __name__ == "__main__":
    sys.exit(main())

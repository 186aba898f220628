"""Command-line entry point: smooth, filter and segment a GPX trace.

Reads one GPX file, runs the processing pipeline and writes every derived
sequence next to the input as ``<input>.<name>.gpx``.
"""

import argparse
import logging
import sys
from typing import List, Optional

from pytrackseg._version import __version__
from pytrackseg.exceptions import PyTrackSegError
from pytrackseg.pipeline import PRODUCT_NAMES, process_trace
from pytrackseg.preprocessing.temporal import drop_bad_timestamps
from pytrackseg.utilities.config import FILTER_METHODS, Thresholds
from pytrackseg.utilities.gpx_io import read_gpx, write_products

logger = logging.getLogger("pytrackseg")


def configure_logging(verbosity: int) -> None:
    """Configure the root logger with a console handler."""

    level = {-1: logging.WARNING, 0: logging.INFO}.get(verbosity, logging.DEBUG)
    fmt = "%(asctime)s - %(levelname)s - %(message)s"
    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(level)
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(fmt))
    root.addHandler(handler)


def build_parser() -> argparse.ArgumentParser:
    defaults = Thresholds()
    parser = argparse.ArgumentParser(
        prog="pytrackseg",
        description="Smooth a GPX trace, drop GPS noise and stationary periods, "
                    "and extract moving and climbing segments.",
    )
    parser.add_argument("gpxfile", help="input GPX trace")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--fix", action="store_true",
                        help="drop samples with non-advancing time or repeated coordinates first")
    parser.add_argument("--fix-only", action="store_true",
                        help="only write <input>.fixed.gpx and stop")
    parser.add_argument("--filter", dest="filter_method", choices=FILTER_METHODS,
                        default=defaults.filter_method, help="noise/stationary filter policy")
    parser.add_argument("--rough-window", type=float, default=defaults.rough_window,
                        help="rough smoothing window in seconds (default: %(default)s)")
    parser.add_argument("--fine-window", type=float, default=defaults.fine_window,
                        help="fine smoothing window in seconds (default: %(default)s)")
    parser.add_argument("--min-speed", type=float, default=defaults.min_speed,
                        help="exclusive lower speed bound in m/s (default: %(default)s)")
    parser.add_argument("--max-speed", type=float, default=defaults.max_speed,
                        help="exclusive upper speed bound in m/s (default: %(default)s)")
    parser.add_argument("--max-step", type=float, default=defaults.max_step,
                        help="exclusive upper bound on the step between samples in m")
    parser.add_argument("--min-run", dest="min_run_length", type=int, default=defaults.min_run_length,
                        help="burst filter: shortest run of moving samples kept (default: %(default)s)")
    parser.add_argument("--leap", type=float, default=defaults.leap,
                        help="time gap in seconds that separates intervals (default: %(default)s)")
    parser.add_argument("--min-duration", type=float, default=defaults.min_duration,
                        help="shortest interval kept in seconds (default: %(default)s)")
    parser.add_argument("--only", nargs="+", choices=PRODUCT_NAMES, metavar="NAME",
                        help=f"write only these products ({', '.join(PRODUCT_NAMES)})")
    parser.add_argument("--no-climb-bearing", action="store_true",
                        help="classify climbs on elevation and distance only")
    group = parser.add_mutually_exclusive_group()
    group.add_argument("-v", "--verbose", action="store_true", help="debug logging and progress bars")
    group.add_argument("-q", "--quiet", action="store_true", help="only log warnings and errors")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(1 if args.verbose else -1 if args.quiet else 0)

    try:
        thresholds = Thresholds(
            rough_window=args.rough_window,
            fine_window=args.fine_window,
            min_speed=args.min_speed,
            max_speed=args.max_speed,
            max_step=args.max_step,
            min_run_length=args.min_run_length,
            filter_method=args.filter_method,
            leap=args.leap,
            min_duration=args.min_duration,
            check_climb_bearing=not args.no_climb_bearing,
        ).validate()
    except ValueError as exc:
        parser.error(str(exc))

    try:
        trace = read_gpx(args.gpxfile)

        if args.fix_only:
            written = write_products({"fixed": drop_bad_timestamps(trace)}, args.gpxfile)
            logger.info("Wrote %d file(s)", len(written))
            return 0

        products, intervals = process_trace(
            trace, thresholds, fix=args.fix, allow_empty=False, verbose=args.verbose
        )
        if args.only:
            products = {name: products[name] for name in args.only if name in products}

        for row in intervals.itertuples(index=False):
            logger.info("Interval %.0f-%.0f: %.0f s, %.0f m%s",
                        row.start_time, row.end_time, row.duration, row.distance,
                        " (climb)" if row.is_climb else "")

        written = write_products(products, args.gpxfile)
        logger.info("Wrote %d file(s)", len(written))
    except PyTrackSegError as exc:
        logger.error("%s", exc)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())

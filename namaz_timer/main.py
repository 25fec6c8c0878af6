import argparse
import logging
import sys
from datetime import datetime
from typing import List, Optional

from dateutil import parser as dateutil_parser

from namaz_timer.core.app import NamazTimerApp
from namaz_timer.core.clock import ClockTime
from namaz_timer.core.config import Config
from namaz_timer.core.errors import NamazTimerError
from namaz_timer.engine.formatting import display_name, format_clock, format_countdown
from namaz_timer.engine.query import countdown, next_entry
from namaz_timer.engine.types import GeoCoordinate, Schedule


def setup_basic_logging():
    """Setup basic stdout logging before config is loaded"""
    root_logger = logging.getLogger()
    if not root_logger.handlers:  # Only add handler if none exists
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(message)s'
        ))
        root_logger.addHandler(handler)
        root_logger.setLevel(logging.WARNING)
        logging.debug("Basic logging initialized")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description='Prayer times with Hanafi-style windows')
    parser.add_argument('--config',
                        help='Path to config file (default: config.yaml)')
    parser.add_argument('--lat', type=float, help='Latitude in degrees (overrides config)')
    parser.add_argument('--lon', type=float, help='Longitude in degrees (overrides config)')
    parser.add_argument('--date', help='Date to compute, any format dateutil understands (default: today)')
    parser.add_argument('--now', help='Clock time to count down from, e.g. 06:00 or "9:15 PM" (default: now)')
    parser.add_argument('--source', choices=['astronomical', 'aladhan'], help='Timing source (overrides config)')
    parser.add_argument('--utc-offset',
                        help='Hours from UTC for astronomical times, or "local" for this machine (default)')
    parser.add_argument('--force', action='store_true', help='Ignore stored schedules and caches')
    parser.add_argument('--24h', dest='hour24', action='store_true', help='Print 24-hour times')
    parser.add_argument('--serve', action='store_true', help='Run the HTTP API instead of printing')
    return parser


def apply_overrides(config: Config, args: argparse.Namespace) -> None:
    location = config.data.setdefault("location", {})
    if args.lat is not None:
        location["latitude"] = args.lat
    if args.lon is not None:
        location["longitude"] = args.lon
    if args.utc_offset is not None:
        if args.utc_offset == "local":
            location["utc_offset"] = None
        else:
            location["utc_offset"] = float(args.utc_offset)
    if args.source:
        config.data.setdefault("source", {})["backend"] = args.source


def render_schedule(schedule: Schedule, coordinate: GeoCoordinate, hour12: bool = True) -> List[str]:
    lines = [
        f"Prayer times for {schedule.date.isoformat()} at "
        f"({coordinate.latitude:.4f}, {coordinate.longitude:.4f}) [{schedule.source}]",
        "",
    ]
    for entry in schedule:
        window = f"{format_clock(entry.window_start, hour12)} - {format_clock(entry.window_end, hour12)}"
        if entry.crosses_midnight:
            window += " (+1d)"
        lines.append(f"  {display_name(entry.key):<14} {format_clock(entry.display_time, hour12):>8}   {window}")
    return lines


def main(argv: Optional[List[str]] = None) -> int:
    setup_basic_logging()
    args = build_parser().parse_args(argv)

    config_path = args.config if args.config else "config.yaml"
    config = Config(config_path=config_path)

    try:
        apply_overrides(config, args)
        app = NamazTimerApp(config=config)
        if args.serve:
            from namaz_timer.api import run_api_server
            run_api_server(app)
            return 0

        on_date = dateutil_parser.parse(args.date).date() if args.date else datetime.now().date()
        now = ClockTime.parse(args.now) if args.now else datetime.now()

        coordinate = app.default_coordinate()
        schedule = app.get_schedule(coordinate, on_date, force_fetch=args.force)
        for line in render_schedule(schedule, coordinate, hour12=not args.hour24):
            print(line)

        entry = next_entry(schedule, now)
        print("")
        print(f"Next: {display_name(entry.key)} at {format_clock(entry.display_time, not args.hour24)}, "
              f"{format_countdown(countdown(entry, now))}")
        return 0
    except NamazTimerError as e:
        logging.error(f"{e}")
        return 1
    except ValueError as e:
        logging.error(f"Invalid argument: {e}")
        return 2


if __name__ == "__main__":
    sys.exit(main())

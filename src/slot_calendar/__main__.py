"""
Slot calendar CLI entry point.

Convert between wall-clock time and epoch/slot dates of a chain whose slot
and epoch lengths change over time.

Usage::

    python -m slot_calendar --time 2020-07-29T21:44:51Z
    python -m slot_calendar --time 1596059091
    python -m slot_calendar --epoch 208 --slot 0
    python -m slot_calendar --total-slots 4492800
    python -m slot_calendar --schedule schedule.yaml --time 2021-01-01T00:00:00Z

Options:
    --network      Named network preset (default: $SLOT_CALENDAR_NETWORK or mainnet)
    --schedule     Path to a schedule YAML file (default: $SLOT_CALENDAR_SCHEDULE)
    --time         Instant to convert (ISO-8601 or unix seconds)
    --epoch/--slot Slot date to convert
    --total-slots  Absolute slot count since genesis to convert
"""

from __future__ import annotations

import argparse
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path

import yaml
from pydantic import ValidationError

from slot_calendar import config
from slot_calendar.networks import NETWORKS
from slot_calendar.schedule import ScheduleConfig, ScheduleRegistry
from slot_calendar.slotdate import SlotDate
from slot_calendar.types import SlotCalendarError, as_utc

logger = logging.getLogger(__name__)


def parse_time(value: str) -> datetime:
    """
    Parse an instant given on the command line.

    Plain integers are unix seconds. Anything else must be ISO-8601; a value
    without an offset is read as UTC.

    Raises:
        ValueError: If the value is neither.
    """
    if value.lstrip("-").isdigit():
        return datetime.fromtimestamp(int(value), tz=timezone.utc)
    return as_utc(datetime.fromisoformat(value))


def load_registry(network: str, schedule_path: Path | None = None) -> ScheduleRegistry:
    """
    Build the registry to convert against.

    A schedule file takes precedence over the network preset.
    """
    if schedule_path is not None:
        logger.debug("Loading schedule from %s", schedule_path)
        return ScheduleConfig.from_yaml_file(schedule_path).to_registry()

    logger.debug("Using %s network preset", network)
    return NETWORKS[network]()


def describe(slot_date: SlotDate) -> str:
    """Render a slot date with its absolute slot count and time span."""
    return "\n".join(
        [
            f"Epoch {slot_date.epoch}, slot {slot_date.slot}:",
            f"  Slots from genesis: {slot_date.slots_from_genesis()}",
            f"  Start time: {slot_date.start_time().isoformat()}",
            f"  End time:   {slot_date.end_time().isoformat()}",
        ]
    )


LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_HANDLER_NAME = "slot-calendar"


class ColoredFormatter(logging.Formatter):
    """Formatter that tints each line with the color of its level."""

    LEVEL_COLORS = {
        logging.DEBUG: "\x1b[2m",
        logging.INFO: "\x1b[32m",
        logging.WARNING: "\x1b[33m",
        logging.ERROR: "\x1b[31m",
        logging.CRITICAL: "\x1b[1;31m",
    }
    RESET = "\x1b[0m"

    def formatMessage(self, record: logging.LogRecord) -> str:
        message = super().formatMessage(record)
        color = self.LEVEL_COLORS.get(record.levelno)
        if color is None:
            return message
        return f"{color}{message}{self.RESET}"


def setup_logging(verbose: bool = False, no_color: bool = False) -> None:
    """
    Route log records to stderr.

    The handler is installed once per process. Calling this again, as
    repeated `main()` calls do, only updates its level and formatter.
    """
    level = logging.DEBUG if verbose else logging.WARNING
    root = logging.getLogger()

    handler = next(
        (
            h
            for h in root.handlers
            if isinstance(h, logging.StreamHandler) and h.get_name() == _HANDLER_NAME
        ),
        None,
    )
    if handler is None:
        handler = logging.StreamHandler()
        handler.set_name(_HANDLER_NAME)
        root.addHandler(handler)
    else:
        handler.setStream(sys.stderr)

    formatter_class = logging.Formatter if no_color else ColoredFormatter
    handler.setFormatter(formatter_class(LOG_FORMAT, datefmt=DATE_FORMAT))
    handler.setLevel(level)
    root.setLevel(level)


def build_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="slot-calendar",
        description="Epoch/slot calendar conversion",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument(
        "--network",
        default=config.SLOT_CALENDAR_NETWORK,
        choices=sorted(NETWORKS),
        help="Named network preset (default: %(default)s)",
    )
    parser.add_argument(
        "--schedule",
        type=Path,
        default=Path(config.SLOT_CALENDAR_SCHEDULE) if config.SLOT_CALENDAR_SCHEDULE else None,
        help="Path to a schedule YAML file, overrides --network",
    )
    parser.add_argument("--time", type=parse_time, help="Instant to convert to a slot date")
    parser.add_argument("--epoch", type=int, help="Epoch of the slot date to convert")
    parser.add_argument("--slot", type=int, default=0, help="Slot within --epoch (default: 0)")
    parser.add_argument("--total-slots", type=int, help="Absolute slot count since genesis")
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    parser.add_argument(
        "--no-color",
        action="store_true",
        help="Disable colored logging output",
    )
    return parser


def run(args: argparse.Namespace) -> list[str]:
    """Perform the requested conversions and return the rendered results."""
    registry = load_registry(args.network, args.schedule)
    results: list[str] = []

    if args.time is not None:
        results.append(f"Time {args.time.isoformat()}:")
        results.append(describe(registry.slot_date_of_time(args.time)))

    if args.epoch is not None:
        results.append(describe(SlotDate(args.epoch, args.slot, registry)))

    if args.total_slots is not None:
        results.append(describe(registry.slot_date_for(args.total_slots)))

    return results


def main(argv: list[str] | None = None) -> int:
    """CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging(args.verbose, args.no_color)

    if args.time is None and args.epoch is None and args.total_slots is None:
        parser.error("one of --time, --epoch or --total-slots is required")

    try:
        results = run(args)
    except (SlotCalendarError, OSError, yaml.YAMLError, ValidationError) as e:
        logger.debug("Conversion failed", exc_info=True)
        print(f"error: {e}", file=sys.stderr)
        return 1

    print("\n".join(results))
    return 0


if __name__ == "__main__":
    sys.exit(main())

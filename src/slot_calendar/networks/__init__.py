"""Schedules of known networks."""

from collections.abc import Callable

from slot_calendar.schedule import ScheduleRegistry

from .mainnet import (
    BYRON_PARAMETERS,
    MAINNET_GENESIS_TIME,
    SHELLEY_PARAMETERS,
    SHELLEY_START_EPOCH,
    mainnet_schedule,
)

NETWORKS: dict[str, Callable[[], ScheduleRegistry]] = {
    "mainnet": mainnet_schedule,
}
"""Registry factories keyed by network name."""

__all__ = [
    "BYRON_PARAMETERS",
    "MAINNET_GENESIS_TIME",
    "NETWORKS",
    "SHELLEY_PARAMETERS",
    "SHELLEY_START_EPOCH",
    "mainnet_schedule",
]

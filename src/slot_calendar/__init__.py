"""
Epoch/slot calendar for chains whose slot and epoch lengths change over time.

Build a `ScheduleRegistry` from a genesis instant and the parameters in force
at genesis, append every later parameter change, then convert:

    registry = ScheduleRegistry(genesis_time, {"slotLength": 20000, "epochLength": 21600})
    registry.append_window(208, {"slotLength": 1000, "epochLength": 432000})

    slot_date = registry.slot_date_of_time(now)
    slot_date.start_time(), slot_date.end_time(), slot_date.slots_from_genesis()
"""

from .schedule import ChainParameters, ScheduleConfig, ScheduleRegistry, Window
from .slotdate import SlotCoordinate, SlotDate
from .types import (
    FractionalSlotLengthError,
    InvalidArgumentError,
    InvalidParametersError,
    InvalidSlotForEpochError,
    NonMonotonicUpdateError,
    PrecedesGenesisError,
    SlotCalendarError,
    UnderflowError,
)

__all__ = [
    "ChainParameters",
    "ScheduleConfig",
    "ScheduleRegistry",
    "SlotCoordinate",
    "SlotDate",
    "Window",
    # Exceptions
    "SlotCalendarError",
    "InvalidArgumentError",
    "InvalidParametersError",
    "FractionalSlotLengthError",
    "PrecedesGenesisError",
    "NonMonotonicUpdateError",
    "InvalidSlotForEpochError",
    "UnderflowError",
]

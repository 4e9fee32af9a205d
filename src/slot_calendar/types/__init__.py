"""Reusable type definitions for the slot calendar."""

from .base import CamelModel, StrictBaseModel
from .exceptions import (
    FractionalSlotLengthError,
    InvalidArgumentError,
    InvalidParametersError,
    InvalidSlotForEpochError,
    NonMonotonicUpdateError,
    PrecedesGenesisError,
    SlotCalendarError,
    UnderflowError,
)
from .numbers import NonNegativeInt, require_non_negative
from .timestamps import as_utc, milliseconds_between, shift_milliseconds

__all__ = [
    # Core types
    "CamelModel",
    "StrictBaseModel",
    "NonNegativeInt",
    "require_non_negative",
    # Time helpers
    "as_utc",
    "milliseconds_between",
    "shift_milliseconds",
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

"""Exception hierarchy for the slot calendar."""

from __future__ import annotations

from datetime import datetime
from typing import Any


class SlotCalendarError(Exception):
    """
    Base exception for all calendar errors.

    Every error is caused by caller-supplied input and is raised
    synchronously. None of them is retried.

    Attributes:
        message: Human-readable error description.
    """

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r})"


class InvalidArgumentError(SlotCalendarError):
    """
    Raised when an epoch, slot or slot count is negative or not an integer.

    Attributes:
        name: The name of the rejected argument.
        value: The rejected value.
    """

    def __init__(self, name: str, value: Any) -> None:
        self.name = name
        self.value = value
        super().__init__(f"{name} must be a non-negative integer, got {value!r}")


class InvalidParametersError(SlotCalendarError):
    """
    Raised when a parameter set lacks a positive slot length or epoch length.

    Attributes:
        slot_length: The offending `slotLength` (None if missing).
        epoch_length: The offending `epochLength` (None if missing).
    """

    def __init__(self, slot_length: Any, epoch_length: Any) -> None:
        self.slot_length = slot_length
        self.epoch_length = epoch_length
        super().__init__(
            "slotLength and epochLength must be positive integers, "
            f"got slotLength={slot_length!r}, epochLength={epoch_length!r}"
        )


class FractionalSlotLengthError(InvalidParametersError):
    """
    Raised when `slotLength` is positive but not a whole number of milliseconds.

    Conversions are exact integer millisecond arithmetic, so a value such
    as `1000.0` is accepted and read as `1000`, while `1000.5` is not.
    """

    def __init__(self, slot_length: float, epoch_length: Any) -> None:
        self.slot_length = slot_length
        self.epoch_length = epoch_length
        SlotCalendarError.__init__(
            self,
            f"slotLength must be a whole number of milliseconds, got slotLength={slot_length!r}",
        )


class PrecedesGenesisError(SlotCalendarError):
    """
    Raised when a time strictly before the genesis instant is converted.

    Attributes:
        time: The queried time.
        genesis_time: The genesis instant of the schedule.
    """

    def __init__(self, time: datetime, genesis_time: datetime) -> None:
        self.time = time
        self.genesis_time = genesis_time
        super().__init__(
            f"time {time.isoformat()} precedes genesis at {genesis_time.isoformat()}"
        )


class NonMonotonicUpdateError(SlotCalendarError):
    """
    Raised when a parameter update does not start strictly after the last one.

    Attributes:
        epoch: The epoch of the rejected update.
        last_epoch: The anchor epoch of the most recent window.
    """

    def __init__(self, epoch: int, last_epoch: int) -> None:
        self.epoch = epoch
        self.last_epoch = last_epoch
        super().__init__(
            f"parameter update at epoch {epoch} must start strictly after epoch {last_epoch}"
        )


class InvalidSlotForEpochError(SlotCalendarError):
    """
    Raised when a slot date names a slot beyond the length of its epoch.

    Attributes:
        epoch: The epoch of the rejected date.
        slot: The rejected slot.
        epoch_length: The number of slots in that epoch.
    """

    def __init__(self, epoch: int, slot: int, epoch_length: int) -> None:
        self.epoch = epoch
        self.slot = slot
        self.epoch_length = epoch_length
        super().__init__(
            f"slot {slot} is invalid in epoch {epoch}, which has {epoch_length} slots"
        )


class UnderflowError(SlotCalendarError):
    """
    Raised when moving a slot date would put it before genesis.

    Attributes:
        slots_from_genesis: The absolute slot count of the starting date.
        delta: The requested offset in slots.
    """

    def __init__(self, slots_from_genesis: int, delta: int) -> None:
        self.slots_from_genesis = slots_from_genesis
        self.delta = delta
        super().__init__(
            f"cannot move {delta} slots from slot {slots_from_genesis}: result precedes genesis"
        )

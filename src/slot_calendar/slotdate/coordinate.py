"""Slot coordinates: an epoch and a slot, without a calendar."""

from __future__ import annotations

from dataclasses import dataclass

from slot_calendar.types import require_non_negative


@dataclass(frozen=True, slots=True, order=True)
class SlotCoordinate:
    """
    A position on the chain given by its epoch and its slot within that epoch.

    Coordinates know nothing about slot or epoch lengths. They are ordered by
    epoch first and slot second, which is the chronological order on every
    chain. Use `SlotDate` to turn a coordinate into wall-clock time.
    """

    epoch: int
    """Epoch number, counted from genesis."""

    slot: int
    """Slot number, counted from the start of the epoch."""

    def __post_init__(self) -> None:
        require_non_negative("epoch", self.epoch)
        require_non_negative("slot", self.slot)

    def after(self, other: SlotCoordinate) -> bool:
        """Whether this coordinate is strictly later than `other`."""
        return self > other

    def before(self, other: SlotCoordinate) -> bool:
        """Whether this coordinate is strictly earlier than `other`."""
        return self < other

    def same_as(self, other: SlotCoordinate) -> bool:
        """Whether both coordinates name the same epoch and slot."""
        return self == other

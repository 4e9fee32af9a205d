"""Slot dates bound to a parameter schedule."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime
from functools import total_ordering
from typing import TYPE_CHECKING

from slot_calendar.schedule.window import Window, governing_window, window_at_total_slots
from slot_calendar.types import InvalidSlotForEpochError, UnderflowError, shift_milliseconds

from .coordinate import SlotCoordinate

if TYPE_CHECKING:
    from slot_calendar.schedule import ScheduleRegistry


def _coordinate_of(other: SlotDate | SlotCoordinate) -> SlotCoordinate:
    if isinstance(other, SlotDate):
        return other.coordinate
    return other


def _check_fits(windows: Sequence[Window], coordinate: SlotCoordinate) -> None:
    epoch_length = governing_window(windows, coordinate.epoch).parameters.epoch_length
    if coordinate.slot >= epoch_length:
        raise InvalidSlotForEpochError(coordinate.epoch, coordinate.slot, epoch_length)


def _slots_from_genesis(windows: Sequence[Window], coordinate: SlotCoordinate) -> int:
    window = governing_window(windows, coordinate.epoch)
    return window.anchor_total_slots + window.slots_to(coordinate.epoch, coordinate.slot)


@total_ordering
class SlotDate:
    """
    A slot coordinate resolved against a schedule registry.

    The date keeps a reference to its registry, not a copy of the parameters.
    Every derived value (slot count, start time, end time) is computed from
    the registry's windows at the time of the call. Each method reads the
    window tuple once, so a window appended concurrently is either fully
    visible to the call or not at all.

    Comparisons only look at the coordinate, so two dates naming the same
    epoch and slot are equal even if they were built on different registries.
    """

    __slots__ = ("_coordinate", "_registry")

    def __init__(self, epoch: int, slot: int, registry: ScheduleRegistry) -> None:
        """
        Create a slot date.

        Raises:
            InvalidArgumentError: If `epoch` or `slot` is negative.
            InvalidSlotForEpochError: If `slot` does not fit into `epoch`.
        """
        coordinate = SlotCoordinate(epoch, slot)
        _check_fits(registry.windows, coordinate)

        self._coordinate = coordinate
        self._registry = registry

    @classmethod
    def at(cls, coordinate: SlotCoordinate, registry: ScheduleRegistry) -> SlotDate:
        """Resolve an existing coordinate against `registry`."""
        return cls(coordinate.epoch, coordinate.slot, registry)

    @classmethod
    def resolved(cls, coordinate: SlotCoordinate, registry: ScheduleRegistry) -> SlotDate:
        """
        Wrap a coordinate computed from `registry`'s own windows.

        The coordinate is not checked against the current windows again: it
        was derived from one snapshot of them, and a window appended since
        then must not turn a correct result into an error.
        """
        slot_date = cls.__new__(cls)
        slot_date._coordinate = coordinate
        slot_date._registry = registry
        return slot_date

    @property
    def epoch(self) -> int:
        """Epoch number."""
        return self._coordinate.epoch

    @property
    def slot(self) -> int:
        """Slot number within the epoch."""
        return self._coordinate.slot

    @property
    def coordinate(self) -> SlotCoordinate:
        """The plain `(epoch, slot)` pair of this date."""
        return self._coordinate

    @property
    def registry(self) -> ScheduleRegistry:
        """The registry this date resolves against."""
        return self._registry

    def slots_from_genesis(self) -> int:
        """Number of slots from genesis to this date."""
        return _slots_from_genesis(self._registry.windows, self._coordinate)

    def _start_in(self, window: Window) -> datetime:
        return shift_milliseconds(
            window.anchor_time,
            window.parameters.slot_length * window.slots_to(self.epoch, self.slot),
        )

    def start_time(self) -> datetime:
        """Wall-clock time at which this slot begins."""
        return self._start_in(governing_window(self._registry.windows, self.epoch))

    def end_time(self) -> datetime:
        """
        Wall-clock time at which this slot ends.

        This is also the start time of the next slot.
        """
        window = governing_window(self._registry.windows, self.epoch)
        return shift_milliseconds(self._start_in(window), window.parameters.slot_length)

    def add(self, slots: int) -> SlotDate:
        """
        Move this date by `slots` slots, forwards or backwards.

        The move may cross any number of parameter changes.

        Raises:
            UnderflowError: If the result would precede genesis.
        """
        windows = self._registry.windows
        total = _slots_from_genesis(windows, self._coordinate)
        if slots < -total:
            raise UnderflowError(total, slots)

        target = total + slots
        window = window_at_total_slots(windows, target)
        epoch, slot = window.locate(target - window.anchor_total_slots)
        return SlotDate.resolved(SlotCoordinate(epoch, slot), self._registry)

    def difference(self, other: SlotDate | SlotCoordinate) -> int:
        """
        Signed number of slots from `other` to this date.

        `other` is read as a coordinate and resolved against this date's
        registry, even when it is a date bound to another registry.

        Raises:
            InvalidSlotForEpochError: If `other` does not exist on this registry.
        """
        windows = self._registry.windows
        coordinate = _coordinate_of(other)
        _check_fits(windows, coordinate)
        return _slots_from_genesis(windows, self._coordinate) - _slots_from_genesis(
            windows, coordinate
        )

    def after(self, other: SlotDate | SlotCoordinate) -> bool:
        """Whether this date is strictly later than `other`."""
        return self._coordinate.after(_coordinate_of(other))

    def before(self, other: SlotDate | SlotCoordinate) -> bool:
        """Whether this date is strictly earlier than `other`."""
        return self._coordinate.before(_coordinate_of(other))

    def same_as(self, other: SlotDate | SlotCoordinate) -> bool:
        """Whether this date names the same epoch and slot as `other`."""
        return self._coordinate.same_as(_coordinate_of(other))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SlotDate):
            return NotImplemented
        return self._coordinate == other._coordinate

    def __lt__(self, other: SlotDate) -> bool:
        if not isinstance(other, SlotDate):
            return NotImplemented
        return self._coordinate < other._coordinate

    def __hash__(self) -> int:
        return hash(self._coordinate)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(epoch={self.epoch}, slot={self.slot})"

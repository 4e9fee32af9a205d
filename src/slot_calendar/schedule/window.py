"""Parameter windows and their anchors."""

from __future__ import annotations

from bisect import bisect_right
from collections.abc import Sequence
from datetime import datetime

from slot_calendar.types import NonNegativeInt, StrictBaseModel, shift_milliseconds

from .parameters import ChainParameters, ParameterUpdate


class Window(StrictBaseModel):
    """
    A parameter set together with the point where it becomes active.

    The anchor is a checkpoint at the first slot of `anchor_epoch`: the
    number of slots since genesis and the wall-clock time at that slot.
    Conversions only ever walk forward from the closest anchor, so they
    never replay the history of earlier parameter changes.

    Anchors are derived from the previous window by `successor()`, never
    supplied by hand, which keeps every anchor consistent with the
    parameters that were in force before it.
    """

    anchor_epoch: NonNegativeInt
    """Epoch at which this window becomes active."""

    anchor_total_slots: NonNegativeInt
    """Slots elapsed from genesis to the first slot of `anchor_epoch`."""

    anchor_time: datetime
    """Wall-clock time of the first slot of `anchor_epoch`."""

    parameters: ChainParameters
    """Merged parameter set in force from `anchor_epoch` onwards."""

    @classmethod
    def genesis(cls, genesis_time: datetime, parameters: ChainParameters) -> Window:
        """The seed window starting at epoch 0, slot 0."""
        return cls(
            anchor_epoch=0,
            anchor_total_slots=0,
            anchor_time=genesis_time,
            parameters=parameters,
        )

    def successor(self, epoch: int, update: ParameterUpdate) -> Window:
        """
        Derive the window that takes over at `epoch`.

        The caller guarantees `epoch > anchor_epoch`. Every epoch in between
        runs under this window's parameters.
        """
        epochs_elapsed = epoch - self.anchor_epoch
        return Window(
            anchor_epoch=epoch,
            anchor_total_slots=self.anchor_total_slots
            + epochs_elapsed * self.parameters.epoch_length,
            anchor_time=shift_milliseconds(
                self.anchor_time, epochs_elapsed * self.parameters.epoch_duration_ms
            ),
            parameters=self.parameters.merged(update),
        )

    def slots_to(self, epoch: int, slot: int) -> int:
        """Slots from this window's anchor to `(epoch, slot)`."""
        return (epoch - self.anchor_epoch) * self.parameters.epoch_length + slot

    def locate(self, slots_into_window: int) -> tuple[int, int]:
        """Split a slot offset from the anchor into an `(epoch, slot)` pair."""
        epoch_offset, slot = divmod(slots_into_window, self.parameters.epoch_length)
        return self.anchor_epoch + epoch_offset, slot


def governing_window(windows: Sequence[Window], epoch: int) -> Window:
    """The last window whose anchor epoch is at or before `epoch`."""
    return windows[bisect_right(windows, epoch, key=lambda w: w.anchor_epoch) - 1]


def window_at_total_slots(windows: Sequence[Window], total_slots: int) -> Window:
    """The window containing the slot `total_slots` slots after genesis."""
    return windows[bisect_right(windows, total_slots, key=lambda w: w.anchor_total_slots) - 1]


def window_at_time(windows: Sequence[Window], time: datetime) -> Window:
    """The window containing `time`, which must not precede genesis."""
    return windows[bisect_right(windows, time, key=lambda w: w.anchor_time) - 1]

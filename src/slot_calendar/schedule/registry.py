"""
Windowed Schedule Registry
==========================

Time-to-slot conversion across parameter changes.

A chain's calendar is piecewise linear: inside one parameter window every
slot lasts `slotLength` milliseconds and every epoch holds `epochLength`
slots, but both can change at an epoch boundary. The registry keeps the
ordered list of windows and answers the two dual questions

- which slot date contains the instant T, and
- when does the slot date (epoch, slot) start and end,

consistently across any number of parameter changes.

How It Works
------------
Each window records an anchor at its first slot (epoch, slots since genesis,
wall-clock time). Anchors are computed once, when the window is appended,
from the previous window's parameters. A query then

1. binary-searches the anchors for the window governing its input, and
2. walks forward from that single anchor with plain integer arithmetic.

Windows are only ever appended with strictly increasing epochs, so all three
anchor components increase strictly and the search is valid for every one.
"""

from __future__ import annotations

import logging
import threading
from datetime import datetime

from slot_calendar.slotdate import SlotCoordinate, SlotDate
from slot_calendar.types import (
    NonMonotonicUpdateError,
    PrecedesGenesisError,
    as_utc,
    milliseconds_between,
    require_non_negative,
)

from .parameters import ChainParameters, ParameterUpdate
from .window import Window, governing_window, window_at_time, window_at_total_slots

logger = logging.getLogger(__name__)


class ScheduleRegistry:
    """
    Append-only log of parameter windows for one chain.

    Slot dates hold a reference to the registry they were created against
    and resolve through its current windows on every call, so windows
    appended later are picked up by dates that already exist.

    The window list is an immutable tuple that `append_window` replaces under
    a lock. Readers take one reference to the tuple and compute on that
    snapshot, which makes concurrent reads safe while an append is running.
    """

    __slots__ = ("_genesis_time", "_windows", "_lock")

    def __init__(self, genesis_time: datetime, initial_parameters: ParameterUpdate) -> None:
        """
        Create the registry with its seed window at epoch 0.

        Args:
            genesis_time: Start of epoch 0, slot 0. A naive value is read as UTC.
            initial_parameters: Parameters active from genesis.

        Raises:
            InvalidParametersError: If `slotLength` or `epochLength` is not positive.
        """
        self._genesis_time = as_utc(genesis_time)
        seed = Window.genesis(self._genesis_time, ChainParameters.coerce(initial_parameters))
        self._windows: tuple[Window, ...] = (seed,)
        self._lock = threading.Lock()

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}(genesis_time={self._genesis_time.isoformat()}, "
            f"windows={len(self._windows)})"
        )

    def __len__(self) -> int:
        return len(self._windows)

    @property
    def genesis_time(self) -> datetime:
        """Wall-clock time of epoch 0, slot 0."""
        return self._genesis_time

    @property
    def windows(self) -> tuple[Window, ...]:
        """Snapshot of the windows, oldest first."""
        return self._windows

    def window_count(self) -> int:
        """Number of windows, the seed window included."""
        return len(self._windows)

    # --- Lookup ---

    def window_for_epoch(self, epoch: int) -> Window:
        """The last window whose anchor epoch is at or before `epoch`."""
        require_non_negative("epoch", epoch)
        return governing_window(self._windows, epoch)

    def settings_for(self, epoch: int | None = None) -> ChainParameters:
        """
        Parameters in force at `epoch`, or the latest ones if no epoch is given.

        Each window stores its update merged over everything before it, so
        the governing window's parameters are the fold of every window up to
        and including it.

        Raises:
            InvalidArgumentError: If `epoch` is negative.
        """
        if epoch is None:
            return self._windows[-1].parameters
        return self.window_for_epoch(epoch).parameters

    def has_parameter_from_inception(self, key: str) -> bool:
        """
        Whether `key` was part of the parameters at genesis.

        Keys introduced by later updates do not count.
        """
        return key in self._windows[0].parameters

    # --- Validity checks ---

    def is_slot_valid(self, slot: int) -> bool:
        """Whether `slot` fits into an epoch under the latest parameters."""
        return self.is_slot_of_epoch_valid(slot)

    def is_slot_of_epoch_valid(self, slot: int, epoch: int | None = None) -> bool:
        """
        Whether `slot` fits into `epoch`.

        Considers the latest parameters if no epoch is given. Negative slots
        are never valid.
        """
        return 0 <= slot < self.settings_for(epoch).epoch_length

    def is_after_or_same_as_genesis(self, time: datetime) -> bool:
        """Whether `time` is not strictly before genesis."""
        return as_utc(time) >= self._genesis_time

    # --- Mutation ---

    def append_window(self, epoch: int, parameters: ParameterUpdate) -> ScheduleRegistry:
        """
        Record a parameter change taking effect at the first slot of `epoch`.

        `parameters` may be partial: keys it leaves out keep their previous
        values. The registry is unchanged if the update is rejected.

        Returns:
            This registry, so updates can be chained.

        Raises:
            InvalidArgumentError: If `epoch` is negative.
            NonMonotonicUpdateError: If `epoch` is not after the last window's epoch.
            InvalidParametersError: If the merged parameters are invalid.
        """
        require_non_negative("epoch", epoch)
        with self._lock:
            last = self._windows[-1]
            if epoch <= last.anchor_epoch:
                raise NonMonotonicUpdateError(epoch, last.anchor_epoch)

            window = last.successor(epoch, parameters)
            self._windows = self._windows + (window,)

        logger.debug(
            "Appended window: epoch=%d total_slots=%d time=%s slot_length=%d epoch_length=%d",
            window.anchor_epoch,
            window.anchor_total_slots,
            window.anchor_time.isoformat(),
            window.parameters.slot_length,
            window.parameters.epoch_length,
        )
        return self

    # --- Conversions ---

    def slot_date_of_time(self, time: datetime) -> SlotDate:
        """
        The slot date whose slot contains `time`.

        An instant exactly on a slot boundary belongs to the slot starting there.

        Raises:
            PrecedesGenesisError: If `time` is before genesis.
        """
        time = as_utc(time)
        if time < self._genesis_time:
            raise PrecedesGenesisError(time, self._genesis_time)

        window = window_at_time(self._windows, time)
        params = window.parameters

        elapsed_ms = milliseconds_between(window.anchor_time, time)
        epoch_offset = elapsed_ms // params.epoch_duration_ms
        slot = (elapsed_ms // params.slot_length) % params.epoch_length
        return SlotDate.resolved(SlotCoordinate(window.anchor_epoch + epoch_offset, slot), self)

    def slot_date_for(self, total_slots: int) -> SlotDate:
        """
        The slot date `total_slots` slots after genesis.

        Raises:
            InvalidArgumentError: If `total_slots` is negative.
        """
        require_non_negative("total_slots", total_slots)

        window = window_at_total_slots(self._windows, total_slots)
        epoch, slot = window.locate(total_slots - window.anchor_total_slots)
        return SlotDate.resolved(SlotCoordinate(epoch, slot), self)

"""Tests for SlotDate."""

from __future__ import annotations

import threading
from datetime import datetime, timedelta

import pytest

from slot_calendar.networks import mainnet_schedule
from slot_calendar.schedule import ScheduleRegistry
from slot_calendar.slotdate import SlotCoordinate, SlotDate
from slot_calendar.types import (
    InvalidArgumentError,
    InvalidSlotForEpochError,
    UnderflowError,
)


def utc(value: str) -> datetime:
    """Parse an ISO-8601 instant."""
    return datetime.fromisoformat(value)


class TestConstruction:
    """Tests for building slot dates."""

    def test_negative_epoch(self, mainnet: ScheduleRegistry) -> None:
        """Negative epochs are rejected."""
        with pytest.raises(InvalidArgumentError):
            SlotDate(-1, 1, mainnet)

    def test_negative_slot(self, mainnet: ScheduleRegistry) -> None:
        """Negative slots are rejected."""
        with pytest.raises(InvalidArgumentError):
            SlotDate(1, -1, mainnet)

    @pytest.mark.parametrize(
        "epoch, slot",
        [
            pytest.param(207, 43199, id="beyond_byron_epoch"),
            pytest.param(207, 21600, id="exactly_byron_epoch_length"),
        ],
    )
    def test_slot_beyond_epoch_length(
        self, mainnet: ScheduleRegistry, epoch: int, slot: int
    ) -> None:
        """A slot must fit into the epoch it is in."""
        with pytest.raises(InvalidSlotForEpochError) as exc_info:
            SlotDate(epoch, slot, mainnet)
        assert exc_info.value.epoch_length == 21600

    def test_longer_epoch_after_change(self, mainnet: ScheduleRegistry) -> None:
        """The same slot is valid once epochs are longer."""
        slot_date = SlotDate(208, 43199, mainnet)
        assert (slot_date.epoch, slot_date.slot) == (208, 43199)

    def test_valid(self, mainnet: ScheduleRegistry) -> None:
        """Accessors return the coordinate."""
        slot_date = SlotDate(322, 100, mainnet)
        assert slot_date.epoch == 322
        assert slot_date.slot == 100
        assert slot_date.coordinate == SlotCoordinate(322, 100)
        assert slot_date.registry is mainnet

    def test_at(self, mainnet: ScheduleRegistry) -> None:
        """A coordinate resolves to a date with the same fields."""
        slot_date = SlotDate.at(SlotCoordinate(208, 5), mainnet)
        assert slot_date.coordinate == SlotCoordinate(208, 5)


class TestSlotsFromGenesis:
    """Tests for slots_from_genesis()."""

    def test_first_epoch(self, mainnet: ScheduleRegistry) -> None:
        """Slots in epoch 0 count directly."""
        assert SlotDate(0, 100, mainnet).slots_from_genesis() == 100

    def test_fifth_epoch(self, testnet_dummy: ScheduleRegistry) -> None:
        """Five full epochs plus 100 slots."""
        assert SlotDate(5, 100, testnet_dummy).slots_from_genesis() == 108100

    def test_before_change(self, mainnet: ScheduleRegistry) -> None:
        """The last slot of epoch 207."""
        assert SlotDate(207, 21599, mainnet).slots_from_genesis() == 4492799

    def test_after_change(self, mainnet: ScheduleRegistry) -> None:
        """The first slot of epoch 208."""
        assert SlotDate(208, 0, mainnet).slots_from_genesis() == 4492800

    def test_later_epoch_after_change(self, mainnet: ScheduleRegistry) -> None:
        """Epochs after the change hold 432000 slots."""
        assert SlotDate(210, 3, mainnet).slots_from_genesis() == 4492800 + 2 * 432000 + 3


class TestTimes:
    """Tests for start_time() and end_time()."""

    def test_start_first_epoch(self, mainnet: ScheduleRegistry) -> None:
        """Slot 100 starts 2000 seconds after genesis."""
        slot_date = SlotDate(0, 100, mainnet)
        assert slot_date.start_time() == utc("2017-09-23T22:18:11Z")
        assert slot_date.start_time() == mainnet.genesis_time + timedelta(milliseconds=100 * 20000)

    def test_start_fifth_epoch(self, testnet_dummy: ScheduleRegistry) -> None:
        """Epoch 5, slot 100 on a single-window registry."""
        assert SlotDate(5, 100, testnet_dummy).start_time() == utc("2017-10-18T22:18:11Z")

    def test_start_before_change(self, mainnet: ScheduleRegistry) -> None:
        """The last 20 second slot."""
        assert SlotDate(207, 21599, mainnet).start_time() == utc("2020-07-29T21:44:31Z")

    def test_start_after_change(self, mainnet: ScheduleRegistry) -> None:
        """The first 1 second slot."""
        assert SlotDate(208, 0, mainnet).start_time() == utc("2020-07-29T21:44:51Z")

    def test_end_before_change(self, mainnet: ScheduleRegistry) -> None:
        """The last 20 second slot ends at the boundary."""
        assert SlotDate(207, 21599, mainnet).end_time() == utc("2020-07-29T21:44:51Z")

    def test_end_after_change(self, mainnet: ScheduleRegistry) -> None:
        """The first 1 second slot ends one second later."""
        assert SlotDate(208, 0, mainnet).end_time() == utc("2020-07-29T21:44:52Z")

    def test_end_is_start_of_next(self, mainnet: ScheduleRegistry) -> None:
        """Slots tile the timeline without gaps."""
        for epoch, slot in [(0, 0), (100, 21599), (207, 21599), (208, 431999)]:
            slot_date = SlotDate(epoch, slot, mainnet)
            assert slot_date.end_time() == slot_date.add(1).start_time()


class TestAdd:
    """Tests for add()."""

    def test_too_large_negative(self, mainnet: ScheduleRegistry) -> None:
        """Moving before genesis fails."""
        slot_date = SlotDate(100, 2500, mainnet)
        with pytest.raises(UnderflowError) as exc_info:
            slot_date.add(-(slot_date.slots_from_genesis() + 1))
        assert exc_info.value.slots_from_genesis == slot_date.slots_from_genesis()

    def test_back_to_genesis(self, mainnet: ScheduleRegistry) -> None:
        """Moving back exactly to genesis is allowed."""
        slot_date = SlotDate(100, 2500, mainnet)
        genesis = slot_date.add(-slot_date.slots_from_genesis())
        assert (genesis.epoch, genesis.slot) == (0, 0)

    def test_one_slot_across_change(self, mainnet: ScheduleRegistry) -> None:
        """The slot after 207/21599 is 208/0."""
        slot_date = SlotDate(207, 21599, mainnet).add(1)
        assert (slot_date.epoch, slot_date.slot) == (208, 0)

    def test_zero(self, mainnet: ScheduleRegistry) -> None:
        """Adding nothing gives an equal date."""
        slot_date = SlotDate(207, 21599, mainnet)
        assert slot_date.add(0) == slot_date

    def test_two_epochs_across_change(self, mainnet: ScheduleRegistry) -> None:
        """One short and one long epoch forward."""
        slot_date = SlotDate(207, 0, mainnet).add(21600 + 432000)
        assert (slot_date.epoch, slot_date.slot) == (209, 0)

    def test_two_epochs_back_across_change(self, mainnet: ScheduleRegistry) -> None:
        """One long and one short epoch back."""
        slot_date = SlotDate(209, 0, mainnet).add(-(21600 + 432000))
        assert (slot_date.epoch, slot_date.slot) == (207, 0)

    def test_keeps_registry(self, mainnet: ScheduleRegistry) -> None:
        """The result is bound to the same registry."""
        assert SlotDate(5, 5, mainnet).add(10).registry is mainnet


class TestDifference:
    """Tests for difference()."""

    def test_same_date(self, mainnet: ScheduleRegistry) -> None:
        """A date is zero slots from itself."""
        slot_date = SlotDate(100, 2500, mainnet)
        assert slot_date.difference(slot_date) == 0

    def test_across_change(self, mainnet: ScheduleRegistry) -> None:
        """The dates on either side of the change are one slot apart."""
        before = SlotDate(207, 21599, mainnet)
        after = SlotDate(208, 0, mainnet)
        assert before.difference(after) == -1
        assert after.difference(before) == 1

    def test_coordinate(self, mainnet: ScheduleRegistry) -> None:
        """A plain coordinate is resolved against the receiver's registry."""
        assert SlotDate(209, 0, mainnet).difference(SlotCoordinate(207, 0)) == 21600 + 432000

    def test_other_registry_is_read_as_coordinates(
        self, mainnet: ScheduleRegistry, testnet_dummy: ScheduleRegistry
    ) -> None:
        """A date from another registry counts with the receiver's windows."""
        on_testnet = SlotDate(208, 0, testnet_dummy)
        on_mainnet = SlotDate(209, 0, mainnet)

        # 432000 slots on mainnet, where epoch 208 is long.
        assert on_mainnet.difference(on_testnet) == 432000
        # 21600 slots on the testnet, where it is not.
        assert SlotDate(209, 0, testnet_dummy).difference(on_testnet) == 21600

    def test_other_registry_coordinate_must_exist(
        self, mainnet: ScheduleRegistry, testnet_dummy: ScheduleRegistry
    ) -> None:
        """Coordinates that do not exist on the receiver's registry are rejected."""
        long_epoch_slot = SlotDate(208, 30000, mainnet)
        with pytest.raises(InvalidSlotForEpochError):
            SlotDate(209, 0, testnet_dummy).difference(long_epoch_slot)


class TestComparison:
    """Tests for the comparison operations delegated to the coordinate."""

    def test_after_before_same_as(self, mainnet: ScheduleRegistry) -> None:
        """Relations follow epoch, then slot."""
        earlier = SlotDate(207, 21599, mainnet)
        later = SlotDate(208, 0, mainnet)

        assert later.after(earlier)
        assert earlier.before(later)
        assert not earlier.same_as(later)
        assert earlier.same_as(SlotCoordinate(207, 21599))
        assert later.after(SlotCoordinate(207, 21599))

    def test_operators(self, mainnet: ScheduleRegistry) -> None:
        """Dates support the rich comparison operators."""
        earlier = SlotDate(1, 5, mainnet)
        later = SlotDate(2, 0, mainnet)

        assert earlier < later
        assert later >= earlier
        assert earlier == SlotDate(1, 5, mainnet)
        assert earlier != later
        assert sorted([later, earlier]) == [earlier, later]

    def test_equality_ignores_registry(
        self, mainnet: ScheduleRegistry, testnet_dummy: ScheduleRegistry
    ) -> None:
        """Equal coordinates are equal dates, and hash alike."""
        assert SlotDate(5, 5, mainnet) == SlotDate(5, 5, testnet_dummy)
        assert len({SlotDate(5, 5, mainnet), SlotDate(5, 5, testnet_dummy)}) == 1

    def test_not_equal_to_coordinate(self, mainnet: ScheduleRegistry) -> None:
        """A date and a bare coordinate are different kinds of value."""
        assert SlotDate(5, 5, mainnet) != SlotCoordinate(5, 5)

    def test_repr(self, mainnet: ScheduleRegistry) -> None:
        """The repr shows the coordinate."""
        assert repr(SlotDate(208, 0, mainnet)) == "SlotDate(epoch=208, slot=0)"


class TestLateWindows:
    """Existing dates pick up windows appended after they were created."""

    def test_resolves_against_current_windows(self, testnet_dummy: ScheduleRegistry) -> None:
        """The same date moves in time once a change is recorded before it."""
        slot_date = SlotDate(209, 0, testnet_dummy)
        assert slot_date.slots_from_genesis() == 209 * 21600

        testnet_dummy.append_window(208, {"slotLength": 1000, "epochLength": 432000})

        assert slot_date.slots_from_genesis() == 208 * 21600 + 432000
        assert slot_date.start_time() == utc("2020-08-03T21:44:51Z")
        assert slot_date.end_time() == utc("2020-08-03T21:44:52Z")


class TestConcurrentAppends:
    """Reads running while windows are appended."""

    UPDATES = [
        (210 + i, {"slotLength": 1000 + 10 * i, "epochLength": 432000 - 1000 * i})
        for i in range(40)
    ]

    def expected(self, count: int) -> tuple[datetime, int, SlotCoordinate]:
        """End time, distance and moved coordinate after the first `count` updates."""
        registry = mainnet_schedule()
        for epoch, parameters in self.UPDATES[:count]:
            registry.append_window(epoch, parameters)
        slot_date = SlotDate(300, 7, registry)
        return (
            slot_date.end_time(),
            slot_date.difference(SlotCoordinate(200, 0)),
            slot_date.add(-1_000_000).coordinate,
        )

    def test_reads_see_whole_snapshots(self) -> None:
        """Every result matches the registry before or after some append, never a mix."""
        allowed = [self.expected(count) for count in range(len(self.UPDATES) + 1)]
        ends = {end for end, _, _ in allowed}
        distances = {distance for _, distance, _ in allowed}
        moved = {coordinate for _, _, coordinate in allowed}

        registry = mainnet_schedule()
        slot_date = SlotDate(300, 7, registry)
        done = threading.Event()
        observed: list[tuple[datetime, int, SlotCoordinate]] = []

        def read() -> None:
            while not done.is_set():
                observed.append(
                    (
                        slot_date.end_time(),
                        slot_date.difference(SlotCoordinate(200, 0)),
                        slot_date.add(-1_000_000).coordinate,
                    )
                )

        readers = [threading.Thread(target=read) for _ in range(4)]
        for reader in readers:
            reader.start()
        for epoch, parameters in self.UPDATES:
            registry.append_window(epoch, parameters)
        done.set()
        for reader in readers:
            reader.join()

        assert observed
        for end, distance, coordinate in observed:
            assert end in ends
            assert distance in distances
            assert coordinate in moved
        assert (slot_date.end_time(), slot_date.difference(SlotCoordinate(200, 0))) == (
            allowed[-1][0],
            allowed[-1][1],
        )

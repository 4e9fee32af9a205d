"""
Shared pytest fixtures for all slot_calendar tests.

Provides the two registries most tests convert against:

- `mainnet`: the Cardano main network, with its parameter change at epoch 208.
- `testnet_dummy`: the same genesis and initial parameters, but no change.
"""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from slot_calendar.networks import mainnet_schedule
from slot_calendar.schedule import ScheduleRegistry

GENESIS = datetime(2017, 9, 23, 21, 44, 51, tzinfo=timezone.utc)
"""Mainnet genesis instant."""


@pytest.fixture
def mainnet() -> ScheduleRegistry:
    """A fresh mainnet registry."""
    return mainnet_schedule()


@pytest.fixture
def testnet_dummy() -> ScheduleRegistry:
    """A single-window registry with the initial mainnet parameters."""
    return ScheduleRegistry(GENESIS, {"epochLength": 21600, "slotLength": 20000})

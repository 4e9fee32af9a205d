"""
Mainnet Schedule
================

Calendar parameters of the Cardano main network.

Mainnet launched with 20 second slots and 21600 slots per epoch (five-day
epochs). The hard fork into Shelley at epoch 208 switched to 1 second slots
and 432000 slots per epoch, keeping epochs at five days.
"""

from datetime import datetime, timezone

from typing_extensions import Final

from slot_calendar.schedule import ChainParameters, ScheduleRegistry

# --- Genesis ---

MAINNET_GENESIS_TIME: Final = datetime(2017, 9, 23, 21, 44, 51, tzinfo=timezone.utc)
"""Start of epoch 0, slot 0."""

# --- Parameter Sets ---

BYRON_PARAMETERS: Final = ChainParameters(slot_length=20_000, epoch_length=21_600)
"""Parameters from genesis until the Shelley hard fork."""

SHELLEY_PARAMETERS: Final = ChainParameters(slot_length=1_000, epoch_length=432_000)
"""Parameters from the Shelley hard fork onwards."""

SHELLEY_START_EPOCH: Final = 208
"""First epoch running under the Shelley parameters."""


def mainnet_schedule() -> ScheduleRegistry:
    """
    Build a registry with the mainnet genesis and its known parameter changes.

    Each call returns a new registry, so appending a window to one does not
    leak into any other caller's calendar.
    """
    return ScheduleRegistry(MAINNET_GENESIS_TIME, BYRON_PARAMETERS).append_window(
        SHELLEY_START_EPOCH, SHELLEY_PARAMETERS
    )

"""Pytest configuration and shared fixtures."""

import os

from hypothesis import settings

if "SLOT_CALENDAR_NETWORK" not in os.environ:
    os.environ["SLOT_CALENDAR_NETWORK"] = "mainnet"

# Create a profile named "no_deadline" with deadline disabled.
settings.register_profile("no_deadline", deadline=None)
settings.load_profile("no_deadline")

"""
Environment configuration for the slot calendar command line.

The calendar library itself never reads the environment. These settings only
provide defaults for `python -m slot_calendar`.
"""

import os

_SUPPORTED_NETWORKS: list[str] = ["mainnet"]

SLOT_CALENDAR_NETWORK = os.environ.get("SLOT_CALENDAR_NETWORK", "mainnet").lower()
"""The network used when no schedule file is given. Defaults to 'mainnet'."""

if SLOT_CALENDAR_NETWORK not in _SUPPORTED_NETWORKS:
    raise ValueError(
        f"Invalid SLOT_CALENDAR_NETWORK environment variable: '{SLOT_CALENDAR_NETWORK}'. "
        f"Supported values: {_SUPPORTED_NETWORKS}"
    )

SLOT_CALENDAR_SCHEDULE = os.environ.get("SLOT_CALENDAR_SCHEDULE") or None
"""Path of a YAML schedule file overriding the network preset, if set."""

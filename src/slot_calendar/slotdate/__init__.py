"""Slot coordinates and calendar-bound slot dates."""

from .concrete import SlotDate
from .coordinate import SlotCoordinate

__all__ = [
    "SlotCoordinate",
    "SlotDate",
]

"""Parameter windows and the registry that converts between time and slots."""

from .config import ScheduleConfig, ScheduleUpdate
from .parameters import ChainParameters, ParameterUpdate
from .registry import ScheduleRegistry
from .window import Window

__all__ = [
    "ChainParameters",
    "ParameterUpdate",
    "ScheduleConfig",
    "ScheduleRegistry",
    "ScheduleUpdate",
    "Window",
]

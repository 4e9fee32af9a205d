"""
Chain Parameter Sets
====================

A parameter set is the bag of tuning values a chain runs under between two
parameter changes. Two keys drive the calendar:

- `slotLength`: duration of a single slot in milliseconds.
- `epochLength`: number of slots in one epoch.

Every other key (protocol magic, security parameter, ...) is carried along
and merged, but never interpreted.
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from typing import Any, TypeAlias

from pydantic import model_validator

from slot_calendar.types import CamelModel, FractionalSlotLengthError, InvalidParametersError

_CAMEL_KEYS: dict[str, str] = {
    "slot_length": "slotLength",
    "epoch_length": "epochLength",
}
_FIELD_NAMES: dict[str, str] = {camel: snake for snake, camel in _CAMEL_KEYS.items()}


def _is_positive_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value > 0


def _is_positive_float(value: Any) -> bool:
    return isinstance(value, float) and value > 0 and math.isfinite(value)


def _normalize(update: ParameterUpdate) -> dict[str, Any]:
    """Key an update by its camelCase names."""
    if isinstance(update, ChainParameters):
        return update.as_mapping()
    return {_CAMEL_KEYS.get(key, key): value for key, value in update.items()}


class ChainParameters(CamelModel):
    """
    Parameter set effective for a range of epochs.

    Unknown keys are allowed and kept verbatim, so `ChainParameters.model_validate(
    {"slotLength": 1000, "epochLength": 432000, "activeSlotsCoeff": 0.05})`
    keeps `activeSlotsCoeff` available through `get()` and `as_mapping()`.
    """

    model_config = CamelModel.model_config | {"extra": "allow", "frozen": True}

    slot_length: int
    """Duration of one slot in milliseconds."""

    epoch_length: int
    """Number of slots per epoch."""

    @model_validator(mode="before")
    @classmethod
    def check_lengths(cls, data: Any) -> Any:
        """
        Reject parameter sets without a positive slot length and epoch length.

        A slot length given as a whole-valued float (`1000.0`, as JSON or YAML
        sources may write it) is read as the integer it names.

        Raises a calendar error rather than a pydantic validation error, so
        callers handle a bad parameter set the same way wherever it comes from.
        """
        if not isinstance(data, Mapping):
            return data

        slot_key = "slotLength" if "slotLength" in data else "slot_length"
        slot_length = data.get(slot_key)
        epoch_length = data.get("epochLength", data.get("epoch_length"))
        if not _is_positive_int(epoch_length):
            raise InvalidParametersError(slot_length, epoch_length)

        if _is_positive_float(slot_length):
            if not slot_length.is_integer():
                raise FractionalSlotLengthError(slot_length, epoch_length)
            return {**data, slot_key: int(slot_length)}

        if not _is_positive_int(slot_length):
            raise InvalidParametersError(slot_length, epoch_length)
        return data

    @classmethod
    def coerce(cls, value: ParameterUpdate) -> ChainParameters:
        """Build a parameter set from a mapping, or return an existing one unchanged."""
        if isinstance(value, ChainParameters):
            return value
        return cls.model_validate(_normalize(value))

    @property
    def epoch_duration_ms(self) -> int:
        """Duration of one epoch in milliseconds."""
        return self.slot_length * self.epoch_length

    def merged(self, update: ParameterUpdate) -> ChainParameters:
        """
        Overlay `update` on this parameter set.

        Keys in the update win. Keys it does not mention are kept, so a
        partial update such as `{"slotLength": 1000}` is valid.
        """
        return ChainParameters.model_validate(self.as_mapping() | _normalize(update))

    def as_mapping(self) -> dict[str, Any]:
        """All parameters keyed by their camelCase names, extras included."""
        return self.model_dump(by_alias=True)

    def get(self, key: str, default: Any = None) -> Any:
        """Look up a parameter by name."""
        name = _CAMEL_KEYS.get(key, key)
        if name in _FIELD_NAMES:
            return getattr(self, _FIELD_NAMES[name])
        return (self.model_extra or {}).get(name, default)

    def __contains__(self, key: object) -> bool:
        if not isinstance(key, str):
            return False
        name = _CAMEL_KEYS.get(key, key)
        return name in _FIELD_NAMES or name in (self.model_extra or {})


ParameterUpdate: TypeAlias = ChainParameters | Mapping[str, Any]
"""Anything accepted as a (possibly partial) parameter set."""

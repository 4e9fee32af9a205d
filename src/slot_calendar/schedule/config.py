"""Schedule configuration loader.

Loads a chain's genesis instant and parameter history from YAML:

    GENESIS_TIME: 2017-09-23T21:44:51Z
    PARAMETERS:
      slotLength: 20000
      epochLength: 21600
    UPDATES:
    - EPOCH: 208
      PARAMETERS:
        slotLength: 1000
        epochLength: 432000

`GENESIS_TIME` may be a YAML timestamp, an ISO-8601 string or a unix time in
seconds. Updates may be partial: keys they leave out keep their earlier value.
"""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path
from typing import Any

import yaml
from pydantic import Field, field_validator, model_validator

from slot_calendar.types import NonNegativeInt, StrictBaseModel, as_utc

from .registry import ScheduleRegistry


class ScheduleUpdate(StrictBaseModel):
    """A parameter change taking effect at the first slot of an epoch."""

    epoch: NonNegativeInt = Field(alias="EPOCH")
    """Epoch from which the new parameters apply."""

    parameters: dict[str, Any] = Field(alias="PARAMETERS")
    """Parameters overriding the previous values."""


class ScheduleConfig(StrictBaseModel):
    """
    Everything needed to rebuild the calendar of one chain.

    Field names use UPPERCASE to match the genesis file convention.
    Pydantic aliases map them to snake_case Python attributes.
    """

    genesis_time: datetime = Field(alias="GENESIS_TIME")
    """Wall-clock time of epoch 0, slot 0."""

    parameters: dict[str, Any] = Field(alias="PARAMETERS")
    """Parameters in force at genesis."""

    updates: list[ScheduleUpdate] = Field(default_factory=list, alias="UPDATES")
    """Parameter changes, in strictly increasing epoch order."""

    @field_validator("genesis_time", mode="before")
    @classmethod
    def parse_genesis_time(cls, v: Any) -> datetime:
        """
        Accept unix seconds and ISO-8601 strings as well as datetimes.

        YAML parsers turn unquoted timestamps into datetimes already, but a
        quoted timestamp stays a string and a plain number stays an integer.
        """
        if isinstance(v, datetime):
            return as_utc(v)
        if isinstance(v, int) and not isinstance(v, bool):
            return datetime.fromtimestamp(v, tz=timezone.utc)
        if isinstance(v, str):
            return as_utc(datetime.fromisoformat(v))
        raise ValueError(f"GENESIS_TIME must be a timestamp, got {type(v).__name__}")

    @field_validator("updates", mode="before")
    @classmethod
    def parse_updates(cls, v: Any) -> list[ScheduleUpdate]:
        """Build update models from the raw YAML mappings."""
        if v is None:
            return []
        if not isinstance(v, list):
            raise ValueError(f"UPDATES must be a list, got {type(v).__name__}")
        return [u if isinstance(u, ScheduleUpdate) else ScheduleUpdate.model_validate(u) for u in v]

    @model_validator(mode="after")
    def validate_update_order(self) -> ScheduleConfig:
        """Verify that every update starts strictly after the one before it."""
        last_epoch = 0
        for update in self.updates:
            if update.epoch <= last_epoch:
                raise ValueError(
                    f"update at epoch {update.epoch} must start strictly after epoch {last_epoch}"
                )
            last_epoch = update.epoch
        return self

    def to_registry(self) -> ScheduleRegistry:
        """
        Build a registry holding the genesis window and every update.

        Raises:
            InvalidParametersError: If a parameter set lacks a positive slot
                length or epoch length.
        """
        registry = ScheduleRegistry(self.genesis_time, self.parameters)
        for update in self.updates:
            registry.append_window(update.epoch, update.parameters)
        return registry

    @classmethod
    def from_yaml_file(cls, path: Path | str) -> ScheduleConfig:
        """
        Load configuration from a YAML file.

        Raises:
            FileNotFoundError: If the file does not exist.
            yaml.YAMLError: If the file is not valid YAML.
            pydantic.ValidationError: If the data fails validation.
        """
        path = Path(path)
        with path.open(encoding="utf-8") as f:
            data = yaml.safe_load(f)
        return cls.model_validate(data)

    @classmethod
    def from_yaml(cls, content: str) -> ScheduleConfig:
        """
        Load configuration from a YAML string.

        Useful for testing or programmatic config generation.
        """
        data = yaml.safe_load(content)
        return cls.model_validate(data)

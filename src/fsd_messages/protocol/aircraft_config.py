"""Aircraft configuration payload exchanged in ``$CQ...:ACC`` lines.

Pilot clients share lights, engines, gear and flaps state as a JSON
document wrapped in ``{"config": {...}}``. Every key is optional: clients
send full snapshots and then only the keys that changed.
"""

from __future__ import annotations

from typing import Self

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from fsd_messages.protocol.exceptions import InvalidAircraftConfig


class AircraftLights(BaseModel):
    model_config = ConfigDict(strict=True, frozen=True)

    strobe_on: bool | None = None
    landing_on: bool | None = None
    taxi_on: bool | None = None
    beacon_on: bool | None = None
    nav_on: bool | None = None
    logo_on: bool | None = None


class AircraftEngine(BaseModel):
    model_config = ConfigDict(strict=True, frozen=True)

    on: bool | None = None
    is_reversing: bool | None = None


class AircraftEngines(BaseModel):
    """Engines keyed "1" to "4" on the wire."""

    model_config = ConfigDict(strict=True, frozen=True, populate_by_name=True)

    engine_1: AircraftEngine | None = Field(default=None, alias="1")
    engine_2: AircraftEngine | None = Field(default=None, alias="2")
    engine_3: AircraftEngine | None = Field(default=None, alias="3")
    engine_4: AircraftEngine | None = Field(default=None, alias="4")


class AircraftConfig(BaseModel):
    """A full or partial aircraft state snapshot."""

    model_config = ConfigDict(strict=True, frozen=True)

    is_full_data: bool | None = None
    lights: AircraftLights | None = None
    engines: AircraftEngines | None = None
    gear_down: bool | None = None
    flaps_pct: int | None = Field(default=None, ge=-(2**31), le=2**31 - 1)
    spoilers_out: bool | None = None
    on_ground: bool | None = None
    static_cg_height: float | None = None

    @classmethod
    def from_json(cls, text: str) -> Self:
        """Unwrap and validate a ``{"config": {...}}`` document.

        Raises:
            InvalidAircraftConfig: If the text is not JSON, lacks the
                ``config`` key, or holds values of the wrong type

        """
        try:
            envelope = _AircraftConfigEnvelope.model_validate_json(text)
        except ValidationError as e:
            raise InvalidAircraftConfig(text) from e
        return envelope.config  # type: ignore[return-value]

    def to_json(self) -> str:
        """Wrap in ``{"config": ...}`` as compact JSON, omitting unset keys."""
        return _AircraftConfigEnvelope(config=self).model_dump_json(exclude_none=True, by_alias=True)


class _AircraftConfigEnvelope(BaseModel):
    model_config = ConfigDict(strict=True, frozen=True)

    config: AircraftConfig

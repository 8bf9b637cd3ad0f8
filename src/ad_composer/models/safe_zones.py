from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .geometry import NormRect, is_valid_zone

ZoneId = Literal["A", "B", "C"]
ZONE_IDS: tuple[ZoneId, ...] = ("A", "B", "C")


class Zone(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: ZoneId
    rect: NormRect

    @field_validator("rect")
    @classmethod
    def _within_canvas(cls, rect: NormRect) -> NormRect:
        if not is_valid_zone(rect):
            raise ValueError(f"zone rect out of bounds: {rect}")
        return rect


class SafeZones(BaseModel):
    """Text-safe placement zones for one image. Computed once, then cached."""

    model_config = ConfigDict(frozen=True)

    image_id: str
    zones: list[Zone] = Field(min_length=1)
    avoid_regions: list[NormRect] = Field(
        default_factory=list, description="areas overlay text must not cover"
    )

    def get_zone(self, zone_id: str) -> Zone | None:
        return next((z for z in self.zones if z.id == zone_id), None)

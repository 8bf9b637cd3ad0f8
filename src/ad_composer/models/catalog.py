from pydantic import BaseModel, ConfigDict, Field

from .copy_pool import SlotType
from .safe_zones import ZoneId


class FamilyDefinition(BaseModel):
    """A creative concept (e.g. "promo"). Not a layout."""

    model_config = ConfigDict(frozen=True)

    id: str
    display_name: str
    description: str = Field(description="shown to the AI when recommending a family")


class Theme(BaseModel):
    model_config = ConfigDict(frozen=True)

    font: str = Field(description="font family name, e.g. 'Playfair Display'")
    font_size: int = Field(gt=0, description="upper bound; layouts clamp to the zone")
    color: str = Field(description="CSS color for the primary text")
    bg: str = Field(description="CSS color for the text card, or 'transparent'")
    radius: int = 0
    shadow: bool = False


class StyleDefinition(BaseModel):
    """A visual variant within a family (a.k.a. template)."""

    model_config = ConfigDict(frozen=True)

    id: str
    family_id: str
    name: str
    supported_zones: list[ZoneId]
    default_theme: Theme
    max_lines: int = Field(gt=0)
    slot_types: list[SlotType] = Field(min_length=1, description="first entry is the primary slot")

    @property
    def primary_slot_type(self) -> SlotType:
        return self.slot_types[0]

    @property
    def secondary_slot_types(self) -> list[SlotType]:
        return self.slot_types[1:]

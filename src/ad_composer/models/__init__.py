from .catalog import FamilyDefinition, StyleDefinition, Theme
from .copy_pool import LANGUAGES, Angle, CopyPool, CopySlot, Language, SlotType
from .geometry import NormRect, PixelRect, clamp_zone, is_valid_zone, to_pixels
from .safe_zones import ZONE_IDS, SafeZones, Zone, ZoneId
from .spec import (
    FORMAT_DIMS,
    Canvas,
    Format,
    ImageAsset,
    Replacement,
    Result,
    SelectionOptions,
    Spec,
)

__all__ = [
    "NormRect",
    "PixelRect",
    "to_pixels",
    "is_valid_zone",
    "clamp_zone",
    "Zone",
    "ZoneId",
    "ZONE_IDS",
    "SafeZones",
    "Angle",
    "SlotType",
    "Language",
    "LANGUAGES",
    "CopySlot",
    "CopyPool",
    "FamilyDefinition",
    "StyleDefinition",
    "Theme",
    "Format",
    "FORMAT_DIMS",
    "Canvas",
    "ImageAsset",
    "Spec",
    "Result",
    "Replacement",
    "SelectionOptions",
]

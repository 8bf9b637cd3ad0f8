from datetime import datetime, timezone
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .catalog import Theme
from .copy_pool import Language
from .safe_zones import ZoneId

Format = Literal["4:5", "1:1", "9:16"]


class Canvas(BaseModel):
    model_config = ConfigDict(frozen=True)

    w: int = Field(gt=0)
    h: int = Field(gt=0)


FORMAT_DIMS: dict[str, Canvas] = {
    "4:5": Canvas(w=1080, h=1350),
    "1:1": Canvas(w=1080, h=1080),
    "9:16": Canvas(w=1080, h=1920),
}


def _utcnow() -> str:
    return datetime.now(timezone.utc).isoformat()


class ImageAsset(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    filename: str
    location: str
    width: int
    height: int
    created_at: str = Field(default_factory=_utcnow)


class Spec(BaseModel):
    """Fully resolved family/style/zone/copy combination, ready to render."""

    model_config = ConfigDict(frozen=True)

    id: str
    image_id: str
    format: Format
    language: Language
    family_id: str
    style_id: str
    zone_id: ZoneId
    primary_slot_id: str
    texts: dict[str, str] = Field(description="resolved copy: slot type → text, plus optional 'attribution'")
    theme: Theme
    canvas: Canvas


class Result(BaseModel):
    """Rendered output of a Spec. Only `approved` and `superseded_by` ever change."""

    id: str
    spec_id: str
    image_id: str
    family_id: str
    style_id: str
    primary_slot_id: str
    location: str
    approved: bool = False
    superseded_by: str | None = None
    created_at: str = Field(default_factory=_utcnow)

    @property
    def active(self) -> bool:
        return self.superseded_by is None


class Replacement(BaseModel):
    result: Result
    superseded_id: str


class SelectionOptions(BaseModel):
    families: list[str] = Field(default_factory=list)
    family_mode: Literal["explicit", "all", "recommended"] = "explicit"
    # Filled in by the service from the copy generator in "recommended" mode
    recommended_family: str | None = None
    language: Language = "en"
    format: Format = "4:5"
    style_mode: Literal["one", "all"] = "one"
    exclude_style_ids: set[str] = Field(default_factory=set)

    @model_validator(mode="after")
    def _explicit_needs_families(self) -> "SelectionOptions":
        if self.family_mode == "explicit" and not self.families:
            raise ValueError("families required when family_mode is 'explicit'")
        return self

from enum import Enum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

Language = Literal["en", "de", "fr", "es"]
LANGUAGES: tuple[Language, ...] = ("en", "de", "fr", "es")


class Angle(str, Enum):
    BENEFIT = "benefit"
    CURIOSITY = "curiosity"
    URGENCY = "urgency"
    EMOTIONAL = "emotional"
    ASPIRATIONAL = "aspirational"
    STORY = "story"
    CONTRAST = "contrast"


class SlotType(str, Enum):
    HEADLINE = "headline"
    QUOTE = "quote"
    SUBTEXT = "subtext"


class CopySlot(BaseModel):
    """One unit of generated copy text."""

    model_config = ConfigDict(frozen=True)

    id: str
    language: Language
    slot_type: SlotType
    text: str = Field(min_length=1)
    angle: Angle | None = Field(default=None, description="tone tag (headline/subtext only)")
    attribution: str | None = Field(default=None, description="reviewer credit (quote only)")

    @model_validator(mode="after")
    def _check_tags(self) -> "CopySlot":
        if self.slot_type == SlotType.QUOTE and self.angle is not None:
            raise ValueError("quote slots carry an attribution, not an angle")
        if self.slot_type != SlotType.QUOTE and self.attribution is not None:
            raise ValueError("only quote slots carry an attribution")
        return self


class CopyPool(BaseModel):
    model_config = ConfigDict(frozen=True)

    image_id: str
    slots: list[CopySlot]

    def get(self, slot_id: str) -> CopySlot | None:
        return next((s for s in self.slots if s.id == slot_id), None)

    def filter(
        self,
        language: Language | None = None,
        slot_type: SlotType | None = None,
    ) -> list[CopySlot]:
        return [
            s
            for s in self.slots
            if (language is None or s.language == language)
            and (slot_type is None or s.slot_type == slot_type)
        ]

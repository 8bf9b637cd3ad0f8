from __future__ import annotations

import logging
import random
from collections.abc import Callable, Iterable
from dataclasses import dataclass

from ad_composer.errors import ConfigurationError, NotFoundError
from ad_composer.models import (
    ZONE_IDS,
    FamilyDefinition,
    PixelRect,
    SlotType,
    Spec,
    StyleDefinition,
    Theme,
)
from ad_composer.render.layout import LayoutTree, SourceImage

logger = logging.getLogger(__name__)

LayoutFn = Callable[[Spec, SourceImage, PixelRect], LayoutTree]


@dataclass(frozen=True)
class Style:
    """A registered style: its definition plus the layout function that draws it."""

    definition: StyleDefinition
    layout: LayoutFn

    @property
    def id(self) -> str:
        return self.definition.id

    @property
    def family_id(self) -> str:
        return self.definition.family_id

    @property
    def supported_zones(self) -> list[str]:
        return list(self.definition.supported_zones)

    @property
    def default_theme(self) -> Theme:
        return self.definition.default_theme

    @property
    def slot_types(self) -> list[SlotType]:
        return list(self.definition.slot_types)

    @property
    def primary_slot_type(self) -> SlotType:
        return self.definition.primary_slot_type


class Catalog:
    """Families and styles, registered once at startup and read-only afterwards.

    Registration order is preserved: `get_styles_for_family` returns styles in
    the order they were registered.
    """

    def __init__(self, zone_ids: Iterable[str] = ZONE_IDS):
        self._zone_ids = frozenset(zone_ids)
        self._families: dict[str, FamilyDefinition] = {}
        self._styles: dict[str, Style] = {}

    # ── Registration ────────────────────────────────────────
    def register_family(self, definition: FamilyDefinition) -> None:
        if definition.id in self._families:
            raise ConfigurationError(f'Family "{definition.id}" registered twice')
        self._families[definition.id] = definition

    def register_style(self, definition: StyleDefinition, layout: LayoutFn) -> Style:
        if definition.id in self._styles:
            raise ConfigurationError(f'Style "{definition.id}" registered twice')
        if definition.family_id not in self._families:
            raise ConfigurationError(
                f'Style "{definition.id}" references unknown family "{definition.family_id}"'
            )
        if not definition.supported_zones:
            raise ConfigurationError(f'Style "{definition.id}" supports no zones')
        unknown = [z for z in definition.supported_zones if z not in self._zone_ids]
        if unknown:
            raise ConfigurationError(
                f'Style "{definition.id}" references unsupported zones {unknown}'
            )
        style = Style(definition=definition, layout=layout)
        self._styles[definition.id] = style
        return style

    def validate(self) -> None:
        """Every registered family must own at least one style."""
        for family_id in self._families:
            if not self.get_styles_for_family(family_id):
                raise ConfigurationError(f'No styles registered for family "{family_id}"')
        logger.info(
            "Catalog ready: %d families, %d styles", len(self._families), len(self._styles)
        )

    # ── Lookup ──────────────────────────────────────────────
    def get_family(self, family_id: str) -> FamilyDefinition:
        try:
            return self._families[family_id]
        except KeyError:
            raise NotFoundError("Family", family_id) from None

    def get_style(self, style_id: str) -> Style:
        try:
            return self._styles[style_id]
        except KeyError:
            raise NotFoundError("Style", style_id) from None

    def get_styles_for_family(self, family_id: str) -> list[Style]:
        self.get_family(family_id)
        return [s for s in self._styles.values() if s.family_id == family_id]

    def families(self) -> list[FamilyDefinition]:
        return list(self._families.values())

    def styles(self) -> list[Style]:
        return list(self._styles.values())

    # ── Random picks ────────────────────────────────────────
    def pick_random_style(
        self,
        family_id: str,
        rng: random.Random,
        exclude: Iterable[str] = (),
    ) -> Style:
        """Uniform pick within a family; exclusions are dropped if they leave nothing."""
        styles = self.get_styles_for_family(family_id)
        if not styles:
            raise ConfigurationError(f'No styles registered for family "{family_id}"')
        excluded = set(exclude)
        pool = [s for s in styles if s.id not in excluded] or styles
        return rng.choice(pool)

    def pick_different_style(self, family_id: str, current_style_id: str, rng: random.Random) -> Style:
        """Uniform pick among the family's other styles, or the same one if it is alone."""
        styles = self.get_styles_for_family(family_id)
        if not styles:
            raise ConfigurationError(f'No styles registered for family "{family_id}"')
        others = [s for s in styles if s.id != current_style_id]
        return rng.choice(others or styles)

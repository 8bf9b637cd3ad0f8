"""Selection engine — cached AI artifacts + catalog → fully resolved Specs.

Per requested family, in order:
  1) pick the style(s) to emit (one random pick, or every style)
  2) rotate zones by running spec index: supported_zones[i % K]
  3) resolve copy slot by slot, primary first; secondaries follow the
     primary's angle so the tone stays consistent within one creative
"""
from __future__ import annotations

import logging
import random
from collections.abc import Collection

from ad_composer.catalog import ASPIRATIONAL_FAMILY, Catalog, Style
from ad_composer.errors import (
    ConfigurationError,
    PreconditionFailedError,
    ValidationError,
    ZoneNotFoundError,
)
from ad_composer.models import (
    FORMAT_DIMS,
    Angle,
    CopyPool,
    CopySlot,
    Language,
    SafeZones,
    SelectionOptions,
    SlotType,
    Spec,
)
from ad_composer.utils.ids import new_id

logger = logging.getLogger(__name__)

# Round-robin order for headline primaries across one batch
ANGLE_ORDER: tuple[Angle, ...] = (
    Angle.BENEFIT,
    Angle.CURIOSITY,
    Angle.URGENCY,
    Angle.EMOTIONAL,
)


def pick_slot(
    slots: list[CopySlot],
    used: Collection[str],
    target_angle: Angle | None,
    rng: random.Random,
) -> CopySlot:
    """Four-tier pick, first match wins.

    (a) unused slot with the target angle
    (b) any unused slot
    (c) used slot with the target angle
    (d) uniformly random slot
    """
    def _unused_with_angle():
        return next((s for s in slots if s.angle == target_angle and s.id not in used), None)

    def _unused():
        return next((s for s in slots if s.id not in used), None)

    def _with_angle():
        return next((s for s in slots if s.angle == target_angle), None)

    if target_angle is None:
        tiers = (_unused,)
    else:
        tiers = (_unused_with_angle, _unused, _with_angle)

    for tier in tiers:
        match = tier()
        if match:
            return match
    return rng.choice(slots)


def resolve_slot(
    pool: CopyPool,
    language: Language,
    slot_type: SlotType,
    used: Collection[str],
    target_angle: Angle | None,
    rng: random.Random,
) -> CopySlot:
    """Pick a slot of `slot_type` in `language`, degrading to a random pick when none exist."""
    candidates = pool.filter(language=language, slot_type=slot_type)
    if candidates:
        return pick_slot(candidates, used, target_angle, rng)

    fallback = pool.filter(slot_type=slot_type) or list(pool.slots)
    if not fallback:
        raise PreconditionFailedError(f'Copy pool for image "{pool.image_id}" is empty')
    logger.warning(
        "No %s slots for language %s — picking at random from %d slots",
        slot_type.value,
        language,
        len(fallback),
    )
    return rng.choice(fallback)


def apply_slot(texts: dict[str, str], slot_type: SlotType, slot: CopySlot) -> None:
    texts[slot_type.value] = slot.text
    if slot.attribution:
        texts["attribution"] = slot.attribution


def resolve_copy(
    style: Style,
    pool: CopyPool,
    language: Language,
    used: Collection[str],
    primary_angle: Angle | None,
    rng: random.Random,
) -> tuple[CopySlot, dict[str, str]]:
    """Resolve every slot type the style declares. Returns (primary slot, texts).

    Secondary slots always target the primary's resolved angle.
    """
    primary = resolve_slot(
        pool, language, style.primary_slot_type, used, primary_angle, rng
    )

    texts: dict[str, str] = {}
    apply_slot(texts, style.primary_slot_type, primary)
    for slot_type in style.definition.secondary_slot_types:
        secondary = resolve_slot(pool, language, slot_type, used, primary.angle, rng)
        apply_slot(texts, slot_type, secondary)
    return primary, texts


def primary_target_angle(family_id: str, slot_type: SlotType, index: int) -> Angle | None:
    if family_id == ASPIRATIONAL_FAMILY:
        return Angle.ASPIRATIONAL
    if slot_type == SlotType.HEADLINE:
        return ANGLE_ORDER[index % len(ANGLE_ORDER)]
    # quotes carry no angle
    return None


def _resolve_families(options: SelectionOptions, catalog: Catalog) -> list[str]:
    if options.family_mode == "all":
        return [f.id for f in catalog.families()]
    if options.family_mode == "recommended":
        if not options.recommended_family:
            raise ValidationError("recommended_family is required in 'recommended' mode")
        families = [options.recommended_family]
    else:
        families = list(options.families)
    for family_id in families:
        catalog.get_family(family_id)
    return families


def _zone_for(style: Style, safe_zones: SafeZones, index: int) -> str:
    zones = [z for z in style.supported_zones if safe_zones.get_zone(z) is not None]
    if not zones:
        raise ZoneNotFoundError(",".join(style.supported_zones))
    return zones[index % len(zones)]


def _styles_to_emit(
    family_id: str,
    options: SelectionOptions,
    catalog: Catalog,
    rng: random.Random,
) -> list[Style]:
    styles = catalog.get_styles_for_family(family_id)
    if not styles:
        raise ConfigurationError(f'No styles registered for family "{family_id}"')
    if options.style_mode == "all":
        return styles
    return [catalog.pick_random_style(family_id, rng, exclude=options.exclude_style_ids)]


def build_specs(
    image_id: str,
    safe_zones: SafeZones,
    copy_pool: CopyPool,
    options: SelectionOptions,
    catalog: Catalog,
    rng: random.Random | None = None,
) -> list[Spec]:
    """Build one Spec per emitted style across every requested family.

    Primary slots are not reused within one call unless the pool runs out.
    """
    rng = rng or random.Random()
    canvas = FORMAT_DIMS[options.format]
    used: set[str] = set()
    specs: list[Spec] = []

    index = 0
    for family_id in _resolve_families(options, catalog):
        for style in _styles_to_emit(family_id, options, catalog, rng):
            zone_id = _zone_for(style, safe_zones, index)
            target = primary_target_angle(family_id, style.primary_slot_type, index)
            primary, texts = resolve_copy(
                style,
                copy_pool,
                options.language,
                used,
                target,
                rng,
            )
            used.add(primary.id)

            specs.append(
                Spec(
                    id=new_id("as"),
                    image_id=image_id,
                    format=options.format,
                    language=options.language,
                    family_id=family_id,
                    style_id=style.id,
                    zone_id=zone_id,
                    primary_slot_id=primary.id,
                    texts=texts,
                    theme=style.default_theme,
                    canvas=canvas,
                )
            )
            index += 1

    logger.info(
        "Selected %d specs for image %s (lang=%s, format=%s)",
        len(specs),
        image_id,
        options.language,
        options.format,
    )
    return specs

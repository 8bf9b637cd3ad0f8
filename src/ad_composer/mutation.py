"""Mutation engine: constrained re-selection against an existing Spec.

Every function returns a brand new Spec (new id); the input is never touched.
Persistence and supersession are handled by the service.
"""
from __future__ import annotations

import random
from collections.abc import Collection

from ad_composer.catalog import Catalog
from ad_composer.errors import ValidationError
from ad_composer.models import (
    FORMAT_DIMS,
    Angle,
    CopyPool,
    CopySlot,
    Language,
    SafeZones,
    Spec,
)
from ad_composer.selection import apply_slot, resolve_slot
from ad_composer.utils.ids import new_id


def _pick_other_zone(
    zones: list[str], safe_zones: SafeZones, current: str, rng: random.Random
) -> str:
    """Random zone other than `current` among those the image actually has."""
    available = [z for z in zones if safe_zones.get_zone(z) is not None]
    others = [z for z in available if z != current]
    if others:
        return rng.choice(others)
    # only the current zone fits, or none does and rendering reports it
    return available[0] if available else current


def _angle_of(pool: CopyPool, slot_id: str) -> Angle | None:
    slot = pool.get(slot_id)
    return slot.angle if slot else None


def _first_with_angle(slots: list[CopySlot], angle: Angle | None) -> CopySlot | None:
    """Same-angle slot if one exists, else the first slot of the list."""
    if angle is not None:
        match = next((s for s in slots if s.angle == angle), None)
        if match:
            return match
    return slots[0] if slots else None


def swap_style(
    spec: Spec,
    catalog: Catalog,
    pool: CopyPool,
    safe_zones: SafeZones,
    rng: random.Random,
) -> Spec:
    """Different style in the same family; the primary copy survives when its type does."""
    old_style = catalog.get_style(spec.style_id)
    new_style = catalog.pick_different_style(spec.family_id, spec.style_id, rng)
    zone_id = _pick_other_zone(new_style.supported_zones, safe_zones, spec.zone_id, rng)
    angle = _angle_of(pool, spec.primary_slot_id)

    texts: dict[str, str] = {}
    primary_type = new_style.primary_slot_type
    if primary_type == old_style.primary_slot_type and primary_type.value in spec.texts:
        primary_id = spec.primary_slot_id
        texts[primary_type.value] = spec.texts[primary_type.value]
        if "attribution" in spec.texts:
            texts["attribution"] = spec.texts["attribution"]
    else:
        primary = resolve_slot(
            pool, spec.language, primary_type, {spec.primary_slot_id}, angle, rng
        )
        primary_id = primary.id
        angle = primary.angle
        apply_slot(texts, primary_type, primary)

    for slot_type in new_style.definition.secondary_slot_types:
        if slot_type.value in spec.texts:
            texts[slot_type.value] = spec.texts[slot_type.value]
        else:
            apply_slot(texts, slot_type, resolve_slot(pool, spec.language, slot_type, (), angle, rng))

    return spec.model_copy(
        update={
            "id": new_id("as"),
            "style_id": new_style.id,
            "zone_id": zone_id,
            "primary_slot_id": primary_id,
            "texts": texts,
            "theme": new_style.default_theme,
        }
    )


def swap_primary(
    spec: Spec,
    catalog: Catalog,
    pool: CopyPool,
    safe_zones: SafeZones,
    rng: random.Random,
    previous_slot_ids: Collection[str] = (),
) -> Spec:
    """Another primary slot (preferring a new angle), cascaded to secondaries, plus a new zone.

    `previous_slot_ids` are primaries already shown earlier in this result's
    lineage; they are only reused once nothing fresh is left.
    """
    style = catalog.get_style(spec.style_id)
    slot_type = style.primary_slot_type
    current_angle = _angle_of(pool, spec.primary_slot_id)

    candidates = [
        s for s in pool.filter(language=spec.language, slot_type=slot_type)
        if s.id != spec.primary_slot_id
    ]
    if candidates:
        fresh = [s for s in candidates if s.id not in previous_slot_ids]
        tiers = (
            [s for s in fresh if s.angle != current_angle],
            fresh,
            [s for s in candidates if s.angle != current_angle],
            candidates,
        )
        primary = rng.choice(next(tier for tier in tiers if tier))
    else:
        # the current slot is the sole candidate
        primary = pool.get(spec.primary_slot_id) or resolve_slot(
            pool, spec.language, slot_type, (), current_angle, rng
        )

    texts: dict[str, str] = {}
    apply_slot(texts, slot_type, primary)
    for secondary_type in style.definition.secondary_slot_types:
        secondary = resolve_slot(pool, spec.language, secondary_type, (), primary.angle, rng)
        apply_slot(texts, secondary_type, secondary)

    return spec.model_copy(
        update={
            "id": new_id("as"),
            "zone_id": _pick_other_zone(style.supported_zones, safe_zones, spec.zone_id, rng),
            "primary_slot_id": primary.id,
            "texts": texts,
        }
    )


def switch_language(spec: Spec, catalog: Catalog, pool: CopyPool, language: Language) -> Spec:
    """Same style/zone/canvas; every filled slot re-resolved in `language`, angle-matched."""
    if language == spec.language:
        return spec.model_copy(update={"id": new_id("as")})

    style = catalog.get_style(spec.style_id)
    texts = dict(spec.texts)
    primary_id = spec.primary_slot_id
    angle = _angle_of(pool, spec.primary_slot_id)

    primary = _first_with_angle(
        pool.filter(language=language, slot_type=style.primary_slot_type), angle
    )
    if primary:
        primary_id = primary.id
        angle = primary.angle
        apply_slot(texts, style.primary_slot_type, primary)

    for slot_type in style.definition.secondary_slot_types:
        secondary = _first_with_angle(pool.filter(language=language, slot_type=slot_type), angle)
        if secondary:
            apply_slot(texts, slot_type, secondary)

    return spec.model_copy(
        update={
            "id": new_id("as"),
            "language": language,
            "primary_slot_id": primary_id,
            "texts": texts,
        }
    )


def switch_format(spec: Spec, format: str) -> Spec:
    """Only the canvas changes; style, zone and copy carry over."""
    canvas = FORMAT_DIMS.get(format)
    if canvas is None:
        raise ValidationError(f'Unknown format "{format}" (expected one of {sorted(FORMAT_DIMS)})')
    return spec.model_copy(update={"id": new_id("as"), "format": format, "canvas": canvas})


__all__ = [
    "swap_style",
    "swap_primary",
    "switch_language",
    "switch_format",
]

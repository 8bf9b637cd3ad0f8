from ad_composer.models import FamilyDefinition

from .registry import Catalog, LayoutFn, Style
from .styles import (
    boxed_text,
    chat_bubble,
    luxury_editorial_left,
    luxury_minimal_center,
    luxury_soft_frame,
    luxury_soft_frame_open,
    message_bubble,
    quote_card,
    star_review,
)

# Family whose copy is always resolved with the aspirational angle
ASPIRATIONAL_FAMILY = "luxury"

FAMILIES: tuple[FamilyDefinition, ...] = (
    FamilyDefinition(
        id="promo",
        display_name="Promo",
        description="Bold promotional overlays that highlight offers and product benefits",
    ),
    FamilyDefinition(
        id="testimonial",
        display_name="Testimonial",
        description="Customer quote styles that build trust through social proof",
    ),
    FamilyDefinition(
        id="luxury",
        display_name="Luxury Editorial",
        description="Aspirational, minimal luxury copy — short, refined, no aggressive hooks, no emojis",
    ),
)

_STYLE_MODULES = (
    boxed_text,
    chat_bubble,
    quote_card,
    star_review,
    message_bubble,
    luxury_minimal_center,
    luxury_editorial_left,
    luxury_soft_frame,
    luxury_soft_frame_open,
)


def build_default_catalog() -> Catalog:
    """Register the shipped families and styles, then validate the result."""
    catalog = Catalog()
    for family in FAMILIES:
        catalog.register_family(family)
    for module in _STYLE_MODULES:
        catalog.register_style(module.DEFINITION, module.layout)
    catalog.validate()
    return catalog


__all__ = [
    "ASPIRATIONAL_FAMILY",
    "FAMILIES",
    "Catalog",
    "LayoutFn",
    "Style",
    "build_default_catalog",
]

import math

from ad_composer.models import PixelRect, SlotType, Spec, StyleDefinition, Theme
from ad_composer.render.layout import (
    BoxNode,
    LayoutTree,
    PolygonNode,
    SourceImage,
    TextNode,
    background,
    clamp_font_size,
    estimate_lines,
    text_height,
)

DEFINITION = StyleDefinition(
    id="star_review",
    family_id="testimonial",
    name="Star Review",
    supported_zones=["A", "B", "C"],
    default_theme=Theme(
        font="Inter",
        font_size=34,
        color="#1a1a1a",
        bg="#FFFFFF",
        radius=16,
        shadow=True,
    ),
    max_lines=3,
    slot_types=[SlotType.QUOTE],
)

_STAR_COLOR = "#F59E0B"
_STAR_GAP = 4
_PAD_Y = 22
_PAD_X = 28


def _star(cx: float, cy: float, outer: float) -> tuple[tuple[int, int], ...]:
    """Five-pointed star, point up."""
    inner = outer * 0.4
    points = []
    for i in range(10):
        radius = outer if i % 2 == 0 else inner
        theta = -math.pi / 2 + i * math.pi / 5
        points.append((round(cx + radius * math.cos(theta)), round(cy + radius * math.sin(theta))))
    return tuple(points)


def layout(spec: Spec, image: SourceImage, zone: PixelRect) -> LayoutTree:
    w, h = spec.canvas.w, spec.canvas.h
    theme = spec.theme
    quote = spec.texts.get(SlotType.QUOTE.value, "")

    size = clamp_font_size(theme.font_size, zone.h, 0.17)
    star = min(36, max(10, round(zone.h * 0.12)))
    inner_w = max(1, zone.w - _PAD_X * 2)
    quote_h = text_height(
        estimate_lines(quote, size, inner_w, DEFINITION.max_lines, bold=True), size, 1.35
    )
    card_h = _PAD_Y * 2 + star + 14 + quote_h

    stars = [
        PolygonNode(
            points=_star(
                zone.x + _PAD_X + star / 2 + i * (star + _STAR_GAP),
                zone.y + _PAD_Y + star / 2,
                star / 2,
            ),
            fill=_STAR_COLOR,
        )
        for i in range(5)
    ]

    return LayoutTree(
        width=w,
        height=h,
        children=(
            background(image, w, h),
            BoxNode(
                x=zone.x,
                y=zone.y,
                w=zone.w,
                h=card_h,
                fill=theme.bg,
                radius=theme.radius,
                shadow=theme.shadow,
            ),
            *stars,
            TextNode(
                text=quote,
                x=zone.x + _PAD_X,
                y=zone.y + _PAD_Y + star + 14,
                w=inner_w,
                h=quote_h,
                font=theme.font,
                size=size,
                color=theme.color,
                bold=True,
                line_height=1.35,
                max_lines=DEFINITION.max_lines,
            ),
        ),
    )

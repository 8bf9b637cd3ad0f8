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
    id="chat_bubble",
    family_id="promo",
    name="Chat Bubble",
    supported_zones=["A", "B", "C"],
    default_theme=Theme(
        font="Inter",
        font_size=38,
        color="#1a1a1a",
        bg="#FFFFFF",
        radius=20,
        shadow=True,
    ),
    max_lines=3,
    slot_types=[SlotType.HEADLINE],
)

_PAD_Y = 22
_PAD_X = 28
_TAIL = 14
_TAIL_INSET = 24


def layout(spec: Spec, image: SourceImage, zone: PixelRect) -> LayoutTree:
    """Speech bubble hugging the top-left of the zone, tail pointing down."""
    w, h = spec.canvas.w, spec.canvas.h
    theme = spec.theme
    headline = spec.texts.get(SlotType.HEADLINE.value, "")

    size = clamp_font_size(theme.font_size, zone.h, 0.25)
    max_inner = max(1, zone.w - _PAD_X * 2)
    # shrink-wrap short headlines instead of always spanning the zone
    natural_w = round(len(headline) * size * 0.6)
    inner_w = max(size, min(max_inner, natural_w))
    lines = estimate_lines(headline, size, inner_w, DEFINITION.max_lines, bold=True)
    text_h = text_height(lines, size, 1.3)

    bubble_w = inner_w + _PAD_X * 2
    bubble_h = text_h + _PAD_Y * 2
    tail_x = zone.x + _TAIL_INSET
    tail_y = zone.y + bubble_h

    return LayoutTree(
        width=w,
        height=h,
        children=(
            background(image, w, h),
            BoxNode(
                x=zone.x,
                y=zone.y,
                w=bubble_w,
                h=bubble_h,
                fill=theme.bg,
                radius=theme.radius,
                shadow=theme.shadow,
            ),
            PolygonNode(
                points=(
                    (tail_x, tail_y - 1),
                    (tail_x + _TAIL * 2, tail_y - 1),
                    (tail_x + _TAIL, tail_y + _TAIL),
                ),
                fill=theme.bg,
            ),
            TextNode(
                text=headline,
                x=zone.x + _PAD_X,
                y=zone.y + _PAD_Y,
                w=inner_w,
                h=text_h,
                font=theme.font,
                size=size,
                color=theme.color,
                bold=True,
                line_height=1.3,
                max_lines=DEFINITION.max_lines,
            ),
        ),
    )

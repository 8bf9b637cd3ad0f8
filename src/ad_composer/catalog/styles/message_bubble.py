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

# iMessage-style "sent" bubble, right-aligned in the zone.
DEFINITION = StyleDefinition(
    id="message_bubble",
    family_id="testimonial",
    name="Message Bubble",
    supported_zones=["A", "B", "C"],
    default_theme=Theme(
        font="Inter",
        font_size=38,
        color="#FFFFFF",
        bg="#007AFF",
        radius=42,
        shadow=True,
    ),
    max_lines=3,
    slot_types=[SlotType.QUOTE],
)

_PAD_Y = 18
_PAD_X = 24


def layout(spec: Spec, image: SourceImage, zone: PixelRect) -> LayoutTree:
    w, h = spec.canvas.w, spec.canvas.h
    theme = spec.theme
    quote = spec.texts.get(SlotType.QUOTE.value, "")

    size = clamp_font_size(theme.font_size, zone.h, 0.13)
    tail_half = round(size * 0.3)
    tail_w = size
    tail_h = tail_half * 2

    # bubble + tail may take at most 90% of the zone width
    max_inner = max(1, round(zone.w * 0.9) - tail_w - _PAD_X * 2)
    natural_w = round(len(quote) * size * 0.6)
    inner_w = max(size, min(max_inner, natural_w))
    text_h = text_height(
        estimate_lines(quote, size, inner_w, DEFINITION.max_lines, bold=True), size, 1.3
    )

    bubble_w = inner_w + _PAD_X * 2
    bubble_h = text_h + _PAD_Y * 2
    bubble_x = zone.right - tail_w - bubble_w
    bubble_y = zone.y
    bottom = bubble_y + bubble_h

    return LayoutTree(
        width=w,
        height=h,
        children=(
            background(image, w, h),
            BoxNode(
                x=bubble_x,
                y=bubble_y,
                w=bubble_w,
                h=bubble_h,
                fill=theme.bg,
                radius=theme.radius,
                # square bottom-right corner so the tail joins flush
                corners=(True, True, False, True),
                shadow=theme.shadow,
            ),
            PolygonNode(
                points=(
                    (bubble_x + bubble_w, bottom - tail_h),
                    (bubble_x + bubble_w + tail_w, bottom - tail_half),
                    (bubble_x + bubble_w, bottom),
                ),
                fill=theme.bg,
            ),
            TextNode(
                text=quote,
                x=bubble_x + _PAD_X,
                y=bubble_y + _PAD_Y,
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

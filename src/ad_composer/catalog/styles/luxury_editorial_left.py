from ad_composer.models import PixelRect, SlotType, Spec, StyleDefinition, Theme
from ad_composer.render.layout import (
    BoxNode,
    LayoutTree,
    SourceImage,
    TextNode,
    background,
    clamp_font_size,
    estimate_lines,
    text_height,
)

# Warm white card with a champagne gold bar on the left edge.
# Serif headline + letter-spaced subtext, left-aligned.
DEFINITION = StyleDefinition(
    id="luxury_editorial_left",
    family_id="luxury",
    name="Editorial Left",
    supported_zones=["A", "B", "C"],
    default_theme=Theme(
        font="Playfair Display",
        font_size=46,
        color="#1A1A1A",
        bg="rgba(255, 252, 248, 0.92)",
        radius=0,
        shadow=False,
    ),
    max_lines=4,
    slot_types=[SlotType.HEADLINE, SlotType.SUBTEXT],
)

_GOLD = "#C8A96E"
_SUBTEXT_COLOR = "#7A7060"
_BAR_W = 3
_BAR_GAP = 22
_PAD_Y = 32
_PAD_X = 36
_BOTTOM_MARGIN = 24


def layout(spec: Spec, image: SourceImage, zone: PixelRect) -> LayoutTree:
    w, h = spec.canvas.w, spec.canvas.h
    theme = spec.theme
    headline = spec.texts.get(SlotType.HEADLINE.value, "")
    subtext = spec.texts.get(SlotType.SUBTEXT.value, "")

    size = clamp_font_size(theme.font_size, zone.h, 0.12)
    sub_size = max(12, round(size * 0.52))
    text_x = zone.x + _PAD_X + _BAR_W + _BAR_GAP
    inner_w = max(1, zone.right - _PAD_X - text_x)

    head_h = text_height(
        estimate_lines(headline, size, inner_w, DEFINITION.max_lines, bold=True), size, 1.3
    )
    sub_h = text_height(1, sub_size, 1.2) if subtext else 0
    content_h = head_h + (16 + sub_h if subtext else 0)

    # never run past the bottom of the canvas
    card_h = min(content_h + _PAD_Y * 2, h - zone.y - _BOTTOM_MARGIN)
    card_h = max(card_h, 1)
    content_h = max(1, min(content_h, card_h - _PAD_Y * 2))

    children = [
        background(image, w, h),
        BoxNode(x=zone.x, y=zone.y, w=zone.w, h=card_h, fill=theme.bg, radius=theme.radius),
        BoxNode(
            x=zone.x + _PAD_X,
            y=zone.y + _PAD_Y,
            w=_BAR_W,
            h=content_h,
            fill=_GOLD,
            radius=1,
        ),
        TextNode(
            text=headline,
            x=text_x,
            y=zone.y + _PAD_Y,
            w=inner_w,
            h=min(head_h, content_h),
            font=theme.font,
            size=size,
            color=theme.color,
            bold=True,
            line_height=1.3,
            max_lines=DEFINITION.max_lines,
        ),
    ]
    if subtext and content_h > head_h:
        children.append(
            TextNode(
                text=subtext,
                x=text_x,
                y=zone.y + _PAD_Y + head_h + 16,
                w=inner_w,
                h=sub_h,
                font="Inter",
                size=sub_size,
                color=_SUBTEXT_COLOR,
                max_lines=1,
                uppercase=True,
            )
        )
    return LayoutTree(width=w, height=h, children=tuple(children))

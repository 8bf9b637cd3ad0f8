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

# Thin inset frame around the whole canvas + warm neutral headline card.
DEFINITION = StyleDefinition(
    id="luxury_soft_frame",
    family_id="luxury",
    name="Soft Frame",
    supported_zones=["A", "B", "C"],
    default_theme=Theme(
        font="Playfair Display",
        font_size=50,
        color="#1A1A1A",
        bg="rgba(250, 248, 245, 0.93)",
        radius=0,
        shadow=False,
    ),
    max_lines=3,
    slot_types=[SlotType.HEADLINE],
)

_FRAME_INSET = 22
_FRAME_COLOR = "#C8B99A"
_FRAME_STROKE = 2
_PAD_Y = 44
_PAD_X = 48
_BOTTOM_MARGIN = 24


def layout(spec: Spec, image: SourceImage, zone: PixelRect) -> LayoutTree:
    w, h = spec.canvas.w, spec.canvas.h
    theme = spec.theme
    headline = spec.texts.get(SlotType.HEADLINE.value, "")

    size = clamp_font_size(theme.font_size, zone.h, 0.13)
    inner_w = max(1, zone.w - _PAD_X * 2)
    head_h = text_height(
        estimate_lines(headline, size, inner_w, DEFINITION.max_lines, bold=True), size, 1.3
    )
    card_h = max(1, min(head_h + _PAD_Y * 2, h - zone.y - _BOTTOM_MARGIN))

    return LayoutTree(
        width=w,
        height=h,
        children=(
            background(image, w, h),
            BoxNode(
                x=_FRAME_INSET,
                y=_FRAME_INSET,
                w=w - _FRAME_INSET * 2,
                h=h - _FRAME_INSET * 2,
                outline=_FRAME_COLOR,
                outline_width=_FRAME_STROKE,
            ),
            BoxNode(x=zone.x, y=zone.y, w=zone.w, h=card_h, fill=theme.bg, radius=theme.radius),
            TextNode(
                text=headline,
                x=zone.x + _PAD_X,
                y=zone.y + _PAD_Y,
                w=inner_w,
                h=max(1, min(head_h, card_h - _PAD_Y * 2)),
                font=theme.font,
                size=size,
                color=theme.color,
                bold=True,
                align="center",
                line_height=1.3,
                max_lines=DEFINITION.max_lines,
            ),
        ),
    )

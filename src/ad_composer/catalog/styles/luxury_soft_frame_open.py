from ad_composer.models import PixelRect, SlotType, Spec, StyleDefinition, Theme
from ad_composer.render.layout import (
    BoxNode,
    LayoutTree,
    SourceImage,
    TextNode,
    background,
    clamp_font_size,
)

# Same inset frame as Soft Frame, but no card: a large white headline floats
# inside the frame and the zone only decides its vertical gravity.
DEFINITION = StyleDefinition(
    id="luxury_soft_frame_open",
    family_id="luxury",
    name="Soft Frame Open",
    supported_zones=["A", "B", "C"],
    default_theme=Theme(
        font="Playfair Display",
        font_size=150,
        color="#FFFFFF",
        bg="transparent",
        radius=0,
        shadow=False,
    ),
    max_lines=3,
    slot_types=[SlotType.HEADLINE],
)

_FRAME_INSET = 22
_FRAME_COLOR = "#C8B99A"
_FRAME_STROKE = 2
_INNER_PAD = 40


def _gravity(zone: PixelRect, canvas_h: int) -> str:
    center = (zone.y + zone.h / 2) / canvas_h
    if center < 0.38:
        return "top"
    if center > 0.62:
        return "bottom"
    return "center"


def layout(spec: Spec, image: SourceImage, zone: PixelRect) -> LayoutTree:
    w, h = spec.canvas.w, spec.canvas.h
    theme = spec.theme
    headline = spec.texts.get(SlotType.HEADLINE.value, "")

    size = clamp_font_size(theme.font_size, zone.h, 0.51)
    frame_w = w - _FRAME_INSET * 2
    frame_h = h - _FRAME_INSET * 2

    return LayoutTree(
        width=w,
        height=h,
        children=(
            background(image, w, h),
            BoxNode(
                x=_FRAME_INSET,
                y=_FRAME_INSET,
                w=frame_w,
                h=frame_h,
                outline=_FRAME_COLOR,
                outline_width=_FRAME_STROKE,
            ),
            TextNode(
                text=headline,
                x=_FRAME_INSET + _INNER_PAD,
                y=_FRAME_INSET + _INNER_PAD,
                w=frame_w - _INNER_PAD * 2,
                h=frame_h - _INNER_PAD * 2,
                font=theme.font,
                size=size,
                color=theme.color,
                bold=True,
                align="center",
                valign=_gravity(zone, h),
                line_height=1.3,
                max_lines=DEFINITION.max_lines,
            ),
        ),
    )

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

# White card, centered serif headline, thin champagne divider, small caps subtext.
DEFINITION = StyleDefinition(
    id="luxury_minimal_center",
    family_id="luxury",
    name="Minimal Center",
    supported_zones=["A", "B", "C"],
    default_theme=Theme(
        font="Playfair Display",
        font_size=52,
        color="#1A1A1A",
        bg="#FFFFFF",
        radius=0,
        shadow=False,
    ),
    max_lines=3,
    slot_types=[SlotType.HEADLINE, SlotType.SUBTEXT],
)

_DIVIDER = "#D4C5B0"
_SUBTEXT_COLOR = "#7A7060"
_PAD_Y = 52
_PAD_X = 56


def layout(spec: Spec, image: SourceImage, zone: PixelRect) -> LayoutTree:
    w, h = spec.canvas.w, spec.canvas.h
    theme = spec.theme
    headline = spec.texts.get(SlotType.HEADLINE.value, "")
    subtext = spec.texts.get(SlotType.SUBTEXT.value, "")

    size = clamp_font_size(theme.font_size, zone.h, 0.14)
    sub_size = max(12, round(size * 0.45))
    inner_w = max(1, zone.w - _PAD_X * 2)
    head_h = text_height(
        estimate_lines(headline, size, inner_w, DEFINITION.max_lines, bold=True), size, 1.3
    )

    divider_w = round(inner_w * 0.6)
    divider_y = zone.y + _PAD_Y + head_h + 28
    sub_y = divider_y + 1 + 18
    sub_h = text_height(1, sub_size, 1.2) if subtext else 0
    card_h = (sub_y + sub_h if subtext else divider_y + 1) + _PAD_Y - zone.y

    children = [
        background(image, w, h),
        BoxNode(x=zone.x, y=zone.y, w=zone.w, h=card_h, fill=theme.bg, radius=theme.radius),
        TextNode(
            text=headline,
            x=zone.x + _PAD_X,
            y=zone.y + _PAD_Y,
            w=inner_w,
            h=head_h,
            font=theme.font,
            size=size,
            color=theme.color,
            bold=True,
            align="center",
            line_height=1.3,
            max_lines=DEFINITION.max_lines,
        ),
        BoxNode(
            x=zone.x + (zone.w - divider_w) // 2,
            y=divider_y,
            w=divider_w,
            h=1,
            fill=_DIVIDER,
        ),
    ]
    if subtext:
        children.append(
            TextNode(
                text=subtext,
                x=zone.x + _PAD_X,
                y=sub_y,
                w=inner_w,
                h=sub_h,
                font="Inter",
                size=sub_size,
                color=_SUBTEXT_COLOR,
                align="center",
                max_lines=1,
                uppercase=True,
            )
        )
    return LayoutTree(width=w, height=h, children=tuple(children))

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

DEFINITION = StyleDefinition(
    id="boxed_text",
    family_id="promo",
    name="Boxed Text",
    supported_zones=["A", "B", "C"],
    default_theme=Theme(
        font="Bebas Neue",
        font_size=52,
        color="#292121",
        bg="rgba(255, 255, 255, 0.75)",
        radius=16,
        shadow=True,
    ),
    max_lines=2,
    slot_types=[SlotType.HEADLINE, SlotType.SUBTEXT],
)

_PAD_Y = 28
_PAD_X = 36
_GAP = 10


def layout(spec: Spec, image: SourceImage, zone: PixelRect) -> LayoutTree:
    """Full-width card pinned to the bottom edge of the zone, centered headline."""
    w, h = spec.canvas.w, spec.canvas.h
    theme = spec.theme
    headline = spec.texts.get(SlotType.HEADLINE.value, "")
    subtext = spec.texts.get(SlotType.SUBTEXT.value, "")

    size = clamp_font_size(theme.font_size, zone.h, 0.35)
    sub_size = max(12, round(size * 0.45))
    inner_w = max(1, zone.w - _PAD_X * 2)

    head_h = text_height(
        estimate_lines(headline, size, inner_w, DEFINITION.max_lines), size, 1.2
    )
    sub_h = text_height(estimate_lines(subtext, sub_size, inner_w, 1), sub_size, 1.3) if subtext else 0

    card_h = _PAD_Y * 2 + head_h + (_GAP + sub_h if sub_h else 0)
    card_y = max(0, zone.bottom - card_h)

    children = [
        background(image, w, h),
        BoxNode(
            x=zone.x,
            y=card_y,
            w=zone.w,
            h=card_h,
            fill=theme.bg,
            radius=theme.radius,
            shadow=theme.shadow,
        ),
        TextNode(
            text=headline,
            x=zone.x + _PAD_X,
            y=card_y + _PAD_Y,
            w=inner_w,
            h=head_h,
            font=theme.font,
            size=size,
            color=theme.color,
            align="center",
            max_lines=DEFINITION.max_lines,
        ),
    ]
    if sub_h:
        children.append(
            TextNode(
                text=subtext,
                x=zone.x + _PAD_X,
                y=card_y + _PAD_Y + head_h + _GAP,
                w=inner_w,
                h=sub_h,
                font="Inter",
                size=sub_size,
                color=theme.color,
                align="center",
                line_height=1.3,
                max_lines=1,
            )
        )
    return LayoutTree(width=w, height=h, children=tuple(children))

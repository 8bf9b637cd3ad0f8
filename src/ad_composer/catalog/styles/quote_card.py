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
    id="quote_card",
    family_id="testimonial",
    name="Quote Card",
    supported_zones=["A", "B", "C"],
    default_theme=Theme(
        font="Inter",
        font_size=48,
        color="#0A0A0A",
        bg="rgba(255, 255, 255, 0.82)",
        radius=6,
        shadow=True,
    ),
    max_lines=5,
    slot_types=[SlotType.QUOTE],
)

_ACCENT = "#1AABFB"
_RULE_COLOR = "#E0E0E0"
_ATTRIBUTION_COLOR = "#3A3A3A"
_DEFAULT_ATTRIBUTION = "— Verified Review"
_PAD_Y = 36
_PAD_X = 40


def layout(spec: Spec, image: SourceImage, zone: PixelRect) -> LayoutTree:
    """White review card: oversized blue quote mark, bold quote, rule, attribution."""
    w, h = spec.canvas.w, spec.canvas.h
    theme = spec.theme
    quote = spec.texts.get(SlotType.QUOTE.value, "")
    attribution = spec.texts.get("attribution") or _DEFAULT_ATTRIBUTION

    mark_size = min(160, max(24, round(zone.h * 0.6)))
    size = clamp_font_size(theme.font_size, zone.h, 0.22)
    attribution_size = max(12, round(size * 0.72))
    inner_w = max(1, zone.w - _PAD_X * 2)

    # the glyph sits high in its line box; only ~60% of it is visible ink
    mark_h = round(mark_size * 0.62)
    quote_h = text_height(
        estimate_lines(quote, size, inner_w, DEFINITION.max_lines, bold=True), size, 1.25
    )
    attribution_h = text_height(1, attribution_size, 1.2)

    y = zone.y + _PAD_Y
    mark_y = y
    quote_y = mark_y + mark_h
    rule_y = quote_y + quote_h + 24
    attribution_y = rule_y + 1 + 16
    card_h = attribution_y + attribution_h + _PAD_Y - zone.y
    card_h = min(card_h, h - zone.y)

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
            TextNode(
                text="“",
                x=zone.x + _PAD_X,
                y=mark_y,
                w=inner_w,
                h=mark_size,
                font=theme.font,
                size=mark_size,
                color=_ACCENT,
                bold=True,
                line_height=1.0,
                max_lines=1,
            ),
            TextNode(
                text=quote,
                x=zone.x + _PAD_X,
                y=quote_y,
                w=inner_w,
                h=quote_h,
                font=theme.font,
                size=size,
                color=theme.color,
                bold=True,
                line_height=1.25,
                max_lines=DEFINITION.max_lines,
            ),
            BoxNode(x=zone.x + _PAD_X, y=rule_y, w=inner_w, h=1, fill=_RULE_COLOR),
            TextNode(
                text=attribution,
                x=zone.x + _PAD_X,
                y=attribution_y,
                w=inner_w,
                h=attribution_h,
                font=theme.font,
                size=attribution_size,
                color=_ATTRIBUTION_COLOR,
                max_lines=1,
            ),
        ),
    )

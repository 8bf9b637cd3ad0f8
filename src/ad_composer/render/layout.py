"""Declarative layout tree produced by style layout functions.

A tree is a flat, paint-ordered list of nodes in absolute canvas pixels.
Layout functions never touch Pillow; the rasterizer is the only consumer.
"""
from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Literal, Union

Align = Literal["left", "center", "right"]
VAlign = Literal["top", "center", "bottom"]

# Rough glyph advance as a fraction of font size, used to size cards
# before the real font is known.
_AVG_CHAR_WIDTH = 0.55
_AVG_CHAR_WIDTH_BOLD = 0.6


@dataclass(frozen=True)
class SourceImage:
    data: bytes
    mime: str = "image/png"


@dataclass(frozen=True)
class ImageNode:
    src: bytes
    x: int
    y: int
    w: int
    h: int
    fit: Literal["cover", "contain"] = "cover"


@dataclass(frozen=True)
class BoxNode:
    x: int
    y: int
    w: int
    h: int
    fill: str | None = None
    radius: int = 0
    # (top-left, top-right, bottom-right, bottom-left)
    corners: tuple[bool, bool, bool, bool] = (True, True, True, True)
    outline: str | None = None
    outline_width: int = 1
    shadow: bool = False


@dataclass(frozen=True)
class TextNode:
    text: str
    x: int
    y: int
    w: int
    h: int
    font: str
    size: int
    color: str
    bold: bool = False
    align: Align = "left"
    valign: VAlign = "top"
    line_height: float = 1.2
    max_lines: int = 3
    uppercase: bool = False


@dataclass(frozen=True)
class PolygonNode:
    points: tuple[tuple[int, int], ...]
    fill: str | None = None
    outline: str | None = None
    outline_width: int = 1


Node = Union[ImageNode, BoxNode, TextNode, PolygonNode]


@dataclass(frozen=True)
class LayoutTree:
    width: int
    height: int
    children: tuple[Node, ...] = field(default_factory=tuple)


def background(image: SourceImage, width: int, height: int) -> ImageNode:
    """Full-bleed, cover-fitted background every style starts from."""
    return ImageNode(src=image.data, x=0, y=0, w=width, h=height, fit="cover")


def clamp_font_size(theme_size: int, zone_h: int, fraction: float, minimum: int = 12) -> int:
    """Theme font size, capped to a fraction of the zone height."""
    return max(minimum, min(theme_size, round(zone_h * fraction)))


def estimate_lines(text: str, size: int, width: int, max_lines: int, bold: bool = False) -> int:
    """Approximate wrapped line count for `text`, capped at `max_lines`."""
    if not text:
        return 0
    advance = size * (_AVG_CHAR_WIDTH_BOLD if bold else _AVG_CHAR_WIDTH)
    per_line = max(1, int(width // max(advance, 1)))
    lines = 0
    current = 0
    for word in text.split():
        needed = len(word) if current == 0 else current + 1 + len(word)
        if needed <= per_line:
            current = needed
            continue
        if current:
            lines += 1
        # words longer than a line spill over
        lines += (len(word) - 1) // per_line
        current = len(word) % per_line or per_line
    if current:
        lines += 1
    return max(1, min(lines, max_lines))


def text_height(lines: int, size: int, line_height: float) -> int:
    return math.ceil(lines * size * line_height)

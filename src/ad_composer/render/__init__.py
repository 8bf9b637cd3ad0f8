from .layout import (
    BoxNode,
    ImageNode,
    LayoutTree,
    PolygonNode,
    SourceImage,
    TextNode,
)
from .rasterize import image_to_bytes, parse_color, rasterize

__all__ = [
    "ImageNode",
    "BoxNode",
    "TextNode",
    "PolygonNode",
    "LayoutTree",
    "SourceImage",
    "rasterize",
    "parse_color",
    "image_to_bytes",
]

from __future__ import annotations

import io
import re
from functools import lru_cache
from pathlib import Path

from PIL import Image, ImageColor, ImageDraw, ImageFilter, ImageFont, ImageOps

from .layout import BoxNode, ImageNode, LayoutTree, PolygonNode, TextNode

# font family → (regular, bold) file names under the fonts directory
_FONT_FILES: dict[str, tuple[str, str]] = {
    "Inter": ("Inter-Regular.ttf", "Inter-Bold.ttf"),
    "Bebas Neue": ("BebasNeue-Regular.ttf", "BebasNeue-Regular.ttf"),
    "Playfair Display": ("PlayfairDisplay-Regular.ttf", "PlayfairDisplay-Bold.ttf"),
}

_RGBA_RE = re.compile(
    r"rgba\(\s*(\d+)\s*,\s*(\d+)\s*,\s*(\d+)\s*,\s*([0-9.]+)\s*\)", re.IGNORECASE
)

_SHADOW_OFFSET = 4
_SHADOW_BLUR = 10
_SHADOW_COLOR = (0, 0, 0, 60)
_ELLIPSIS = "..."


def parse_color(css: str | None) -> tuple[int, int, int, int]:
    """CSS color string (#hex, rgb(), rgba() with 0–1 alpha, names) → RGBA."""
    if css is None or css.strip().lower() == "transparent":
        return (0, 0, 0, 0)
    css = css.strip()
    match = _RGBA_RE.fullmatch(css)
    if match:
        r, g, b = (int(match.group(i)) for i in range(1, 4))
        alpha = float(match.group(4))
        return (r, g, b, round(max(0.0, min(alpha, 1.0)) * 255))
    rgb = ImageColor.getrgb(css)
    if len(rgb) == 4:
        return rgb  # type: ignore[return-value]
    return (*rgb, 255)


@lru_cache(maxsize=128)
def _load_font(fonts_dir: str, family: str, size: int, bold: bool) -> ImageFont.ImageFont:
    """Load a TTF from the fonts directory, falling back to Pillow's default font."""
    regular, bold_file = _FONT_FILES.get(family, _FONT_FILES["Inter"])
    font_path = Path(fonts_dir) / (bold_file if bold else regular)
    if font_path.exists():
        return ImageFont.truetype(str(font_path), size=size)
    # Fallback: glyph coverage is limited, add the TTF files to fonts_dir
    return ImageFont.load_default(size=size)


def _text_width(font: ImageFont.ImageFont, text: str) -> float:
    bbox = font.getbbox(text)
    return bbox[2] - bbox[0]


def _wrap_text(text: str, font: ImageFont.ImageFont, max_width: int) -> list[str]:
    """Greedy word wrap; words wider than a line are broken per character."""
    lines: list[str] = []
    current = ""
    for word in text.split():
        candidate = f"{current} {word}" if current else word
        if _text_width(font, candidate) <= max_width:
            current = candidate
            continue
        if current:
            lines.append(current)
            current = ""
        for char in word:
            test = current + char
            if _text_width(font, test) <= max_width or not current:
                current = test
            else:
                lines.append(current)
                current = char
    if current:
        lines.append(current)
    return lines


def _truncate(line: str, font: ImageFont.ImageFont, max_width: int) -> str:
    while line and _text_width(font, line + _ELLIPSIS) > max_width:
        line = line[:-1]
    return line.rstrip() + _ELLIPSIS


def _fit_lines(node: TextNode, font: ImageFont.ImageFont, line_px: int) -> list[str]:
    """Wrap to the box width and drop whatever would overflow the box height."""
    text = node.text.upper() if node.uppercase else node.text
    lines = _wrap_text(text, font, node.w)
    visible = max(1, min(node.max_lines, node.h // max(line_px, 1)))
    if len(lines) > visible:
        lines = lines[:visible]
        lines[-1] = _truncate(lines[-1], font, node.w)
    return lines


def _paste_image(canvas: Image.Image, node: ImageNode) -> Image.Image:
    source = Image.open(io.BytesIO(node.src)).convert("RGBA")
    if node.fit == "cover":
        fitted = ImageOps.fit(source, (node.w, node.h), Image.LANCZOS)
    else:
        fitted = ImageOps.contain(source, (node.w, node.h), Image.LANCZOS)
    offset = (node.x + (node.w - fitted.width) // 2, node.y + (node.h - fitted.height) // 2)
    canvas.paste(fitted, offset, mask=fitted.split()[3])
    return canvas


def _draw_box(canvas: Image.Image, node: BoxNode) -> Image.Image:
    """Semi-transparent card composited over the canvas, with optional soft shadow."""
    shape = [node.x, node.y, node.x + node.w, node.y + node.h]

    if node.shadow:
        shadow = Image.new("RGBA", canvas.size, (0, 0, 0, 0))
        ImageDraw.Draw(shadow).rounded_rectangle(
            [c + _SHADOW_OFFSET for c in shape],
            radius=node.radius,
            fill=_SHADOW_COLOR,
            corners=node.corners,
        )
        canvas = Image.alpha_composite(canvas, shadow.filter(ImageFilter.GaussianBlur(_SHADOW_BLUR)))

    overlay = Image.new("RGBA", canvas.size, (0, 0, 0, 0))
    ImageDraw.Draw(overlay).rounded_rectangle(
        shape,
        radius=node.radius,
        fill=parse_color(node.fill) if node.fill else None,
        outline=parse_color(node.outline) if node.outline else None,
        width=node.outline_width,
        corners=node.corners,
    )
    return Image.alpha_composite(canvas, overlay)


def _draw_polygon(canvas: Image.Image, node: PolygonNode) -> Image.Image:
    overlay = Image.new("RGBA", canvas.size, (0, 0, 0, 0))
    ImageDraw.Draw(overlay).polygon(
        list(node.points),
        fill=parse_color(node.fill) if node.fill else None,
        outline=parse_color(node.outline) if node.outline else None,
        width=node.outline_width,
    )
    return Image.alpha_composite(canvas, overlay)


def _draw_text(canvas: Image.Image, node: TextNode, fonts_dir: str) -> Image.Image:
    font = _load_font(fonts_dir, node.font, node.size, node.bold)
    line_px = max(1, round(node.size * node.line_height))
    lines = _fit_lines(node, font, line_px)

    block_h = len(lines) * line_px
    if node.valign == "center":
        top = node.y + (node.h - block_h) // 2
    elif node.valign == "bottom":
        top = node.y + node.h - block_h
    else:
        top = node.y

    overlay = Image.new("RGBA", canvas.size, (0, 0, 0, 0))
    draw = ImageDraw.Draw(overlay)
    fill = parse_color(node.color)
    for i, line in enumerate(lines):
        line_w = _text_width(font, line)
        if node.align == "center":
            line_x = node.x + (node.w - line_w) / 2
        elif node.align == "right":
            line_x = node.x + node.w - line_w
        else:
            line_x = node.x
        draw.text((line_x, top + i * line_px), line, font=font, fill=fill)
    return Image.alpha_composite(canvas, overlay)


def rasterize(tree: LayoutTree, fonts_dir: str) -> Image.Image:
    """Paint every node in order onto a transparent canvas of the tree's size."""
    canvas = Image.new("RGBA", (tree.width, tree.height), (0, 0, 0, 0))
    for node in tree.children:
        if isinstance(node, ImageNode):
            canvas = _paste_image(canvas, node)
        elif isinstance(node, BoxNode):
            canvas = _draw_box(canvas, node)
        elif isinstance(node, PolygonNode):
            canvas = _draw_polygon(canvas, node)
        elif isinstance(node, TextNode):
            canvas = _draw_text(canvas, node, fonts_dir)
        else:
            raise TypeError(f"unsupported layout node: {type(node).__name__}")
    return canvas


def image_to_bytes(image: Image.Image, format: str = "PNG") -> bytes:
    """PIL Image → bytes."""
    buffer = io.BytesIO()
    image.convert("RGB").save(buffer, format=format)
    return buffer.getvalue()

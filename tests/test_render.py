"""Render pipeline tests — layout trees, rasterization, storage of outputs"""
import io

import pytest
from PIL import Image

from ad_composer.errors import NotFoundError, ZoneNotFoundError
from ad_composer.models import FORMAT_DIMS, SlotType, Spec
from ad_composer.render import (
    ImageNode,
    LayoutTree,
    SourceImage,
    TextNode,
    parse_color,
    rasterize,
)
from ad_composer.render.layout import clamp_font_size, estimate_lines
from ad_composer.render.pipeline import Renderer, RenderPipeline
from ad_composer.render.rasterize import _fit_lines, _load_font
from ad_composer.storage import LocalStorage
from factories import make_safe_zones

_TEXTS = {
    SlotType.HEADLINE: "Salon look in 5 minutes",
    SlotType.SUBTEXT: "Professional results at home",
    SlotType.QUOTE: "My manicurist was shocked these aren't gel. Two weeks in and they still look perfect.",
}

_ALL_STYLES = [
    "boxed_text",
    "chat_bubble",
    "quote_card",
    "star_review",
    "message_bubble",
    "luxury_minimal_center",
    "luxury_editorial_left",
    "luxury_soft_frame",
    "luxury_soft_frame_open",
]


def _make_spec(catalog, style_id, zone_id="B", format="4:5"):
    style = catalog.get_style(style_id)
    texts = {t.value: _TEXTS[t] for t in style.slot_types}
    if SlotType.QUOTE in style.slot_types:
        texts["attribution"] = "— Sophie M., Verified Buyer"
    return Spec(
        id="as_test",
        image_id="img_test",
        format=format,
        language="en",
        family_id=style.family_id,
        style_id=style_id,
        zone_id=zone_id,
        primary_slot_id="sl_test",
        texts=texts,
        theme=style.default_theme,
        canvas=FORMAT_DIMS[format],
    )


@pytest.fixture
def renderer(catalog, tmp_path):
    # empty fonts dir → Pillow's default font
    return Renderer(catalog, str(tmp_path / "fonts"))


@pytest.mark.parametrize("style_id", _ALL_STYLES)
def test_every_style_renders_at_canvas_size(renderer, catalog, product_png, style_id):
    png = renderer.render(_make_spec(catalog, style_id), make_safe_zones(), product_png)

    image = Image.open(io.BytesIO(png))
    assert image.format == "PNG"
    assert image.size == (1080, 1350)


@pytest.mark.parametrize("zone_id", ["A", "B", "C"])
@pytest.mark.parametrize("format", ["1:1", "9:16"])
def test_boxed_text_renders_in_every_zone_and_format(renderer, catalog, product_png, zone_id, format):
    spec = _make_spec(catalog, "boxed_text", zone_id=zone_id, format=format)
    png = renderer.render(spec, make_safe_zones(), product_png)
    canvas = FORMAT_DIMS[format]
    assert Image.open(io.BytesIO(png)).size == (canvas.w, canvas.h)


@pytest.mark.parametrize("style_id", _ALL_STYLES)
def test_layout_tree_shape(renderer, catalog, product_png, style_id):
    spec = _make_spec(catalog, style_id)
    tree = renderer.build_layout(spec, make_safe_zones(), SourceImage(data=product_png))

    assert (tree.width, tree.height) == (1080, 1350)
    bg = tree.children[0]
    assert isinstance(bg, ImageNode)
    assert (bg.x, bg.y, bg.w, bg.h, bg.fit) == (0, 0, 1080, 1350, "cover")

    primary = spec.texts[catalog.get_style(style_id).primary_slot_type.value]
    text_nodes = [n for n in tree.children if isinstance(n, TextNode)]
    assert any(n.text == primary for n in text_nodes)
    for node in text_nodes:
        assert node.w > 0 and node.h > 0
        assert node.x >= 0 and node.x + node.w <= tree.width


def test_missing_zone_raises_zone_not_found(renderer, catalog, product_png):
    spec = _make_spec(catalog, "chat_bubble", zone_id="C")
    with pytest.raises(ZoneNotFoundError) as exc_info:
        renderer.render(spec, make_safe_zones(zone_ids=("A", "B")), product_png)
    assert isinstance(exc_info.value, NotFoundError)
    assert 'Zone "C" not found' in str(exc_info.value)


@pytest.mark.asyncio
async def test_render_and_store_writes_generated_png(renderer, catalog, product_png, tmp_path):
    storage = LocalStorage(tmp_path / "storage")
    pipeline = RenderPipeline(renderer, storage)

    location, result_id = await pipeline.render_and_store(
        _make_spec(catalog, "star_review"), make_safe_zones(), product_png
    )

    assert result_id.startswith("rr_")
    assert location == f"/files/generated/{result_id}.png"
    stored = tmp_path / "storage" / "generated" / f"{result_id}.png"
    assert Image.open(stored).size == (1080, 1350)


# ── Rasterizer ──────────────────────────────────────────────
@pytest.mark.parametrize(
    "css, rgba",
    [
        ("#FFFFFF", (255, 255, 255, 255)),
        ("#007AFF", (0, 122, 255, 255)),
        ("rgba(255, 255, 255, 0.75)", (255, 255, 255, 191)),
        ("rgba(0,0,0,0)", (0, 0, 0, 0)),
        ("transparent", (0, 0, 0, 0)),
        ("white", (255, 255, 255, 255)),
        (None, (0, 0, 0, 0)),
    ],
)
def test_parse_color(css, rgba):
    assert parse_color(css) == rgba


def test_overflowing_text_is_cut_with_ellipsis(tmp_path):
    font = _load_font(str(tmp_path), "Inter", 20, False)
    node = TextNode(
        text="This headline is far too long to fit inside a narrow box on one line",
        x=0,
        y=0,
        w=200,
        h=30,
        font="Inter",
        size=20,
        color="#000000",
        max_lines=3,
    )

    lines = _fit_lines(node, font, line_px=24)

    assert len(lines) == 1
    assert lines[0].endswith("...")


def test_short_text_is_not_truncated(tmp_path):
    font = _load_font(str(tmp_path), "Inter", 20, False)
    node = TextNode(text="Hi", x=0, y=0, w=200, h=100, font="Inter", size=20, color="#000")
    assert _fit_lines(node, font, line_px=24) == ["Hi"]


def test_rasterize_rejects_unknown_nodes(tmp_path):
    tree = LayoutTree(width=10, height=10, children=("not a node",))
    with pytest.raises(TypeError):
        rasterize(tree, str(tmp_path))


def test_font_size_is_clamped_to_zone_height():
    assert clamp_font_size(52, zone_h=100, fraction=0.35) == 35
    assert clamp_font_size(52, zone_h=1000, fraction=0.35) == 52
    assert clamp_font_size(52, zone_h=10, fraction=0.35) == 12


def test_estimate_lines():
    assert estimate_lines("", 40, 400, 3) == 0
    assert estimate_lines("short", 40, 400, 3) == 1
    assert estimate_lines("word " * 50, 40, 400, 3) == 3

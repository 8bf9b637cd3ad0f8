"""Command-line entry point tests"""
from pathlib import Path

import pytest

from ad_composer.__main__ import _options, main, parse_args
from ad_composer.config import get_settings
from factories import make_png


@pytest.fixture
def workdir(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("AI_BACKEND", "mock")
    get_settings.cache_clear()
    yield tmp_path
    get_settings.cache_clear()


def test_family_mode_from_flags(workdir):
    assert _options(parse_args(["p.png"])).family_mode == "all"

    explicit = _options(parse_args(["p.png", "--family", "promo", "--family", "luxury"]))
    assert explicit.family_mode == "explicit"
    assert explicit.families == ["promo", "luxury"]

    assert _options(parse_args(["p.png", "--recommend"])).family_mode == "recommended"


def test_generation_flags(workdir):
    options = _options(
        parse_args(["p.png", "--family", "promo", "--language", "de", "--format", "9:16", "--all-styles"])
    )
    assert (options.language, options.format, options.style_mode) == ("de", "9:16", "all")


def test_unknown_language_is_rejected(workdir):
    with pytest.raises(SystemExit):
        parse_args(["p.png", "--language", "it"])


@pytest.mark.asyncio
async def test_main_writes_one_png_per_result(workdir):
    photo = workdir / "product.png"
    photo.write_bytes(make_png())

    await main(parse_args([str(photo), "--family", "promo", "--all-styles", "--output", "out"]))

    written = sorted(p.name for p in Path("out").iterdir())
    assert len(written) == 2
    assert written[0].startswith("promo_boxed_text_rr_")
    assert written[1].startswith("promo_chat_bubble_rr_")

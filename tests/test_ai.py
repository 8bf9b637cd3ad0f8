"""AI collaborator tests (no real API calls)"""
import json
import os
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from ad_composer.ai import (
    AnthropicZoneAnalyzer,
    MockCopyGenerator,
    MockZoneAnalyzer,
    OpenAICopyGenerator,
    create_ai_backend,
)
from ad_composer.catalog import FAMILIES
from ad_composer.config import Settings
from ad_composer.models import LANGUAGES, ImageAsset, SlotType, is_valid_zone
from factories import make_png


def _make_image():
    return ImageAsset(
        id="img_test",
        filename="product.png",
        location="/files/uploads/img_test.png",
        width=800,
        height=1000,
    )


def _anthropic_client(payload: dict):
    client = MagicMock()
    client.messages.create = AsyncMock(
        return_value=SimpleNamespace(content=[SimpleNamespace(text=json.dumps(payload))])
    )
    return client


def _openai_client(payload: dict):
    client = MagicMock()
    client.chat.completions.create = AsyncMock(
        return_value=SimpleNamespace(
            choices=[SimpleNamespace(message=SimpleNamespace(content=json.dumps(payload)))]
        )
    )
    return client


# ── Mock backend ────────────────────────────────────────────
@pytest.mark.asyncio
async def test_mock_zone_analyzer_returns_three_valid_zones():
    zones = await MockZoneAnalyzer().analyze(_make_image(), make_png())
    assert zones.image_id == "img_test"
    assert [z.id for z in zones.zones] == ["A", "B", "C"]
    assert all(is_valid_zone(z.rect) for z in zones.zones)
    assert len(zones.avoid_regions) == 1


@pytest.mark.asyncio
async def test_mock_copy_pool_shape():
    pool = await MockCopyGenerator().generate(_make_image(), make_png())

    assert len(pool.slots) == 80
    assert len({s.id for s in pool.slots}) == 80
    for language in LANGUAGES:
        headlines = pool.filter(language=language, slot_type=SlotType.HEADLINE)
        quotes = pool.filter(language=language, slot_type=SlotType.QUOTE)
        subtexts = pool.filter(language=language, slot_type=SlotType.SUBTEXT)
        assert (len(headlines), len(quotes), len(subtexts)) == (9, 3, 8)
        assert all(q.attribution and q.angle is None for q in quotes)
        # every subtext angle has a headline with the same angle
        assert {s.angle for s in subtexts} == {h.angle for h in headlines}


@pytest.mark.asyncio
async def test_mock_recommendation():
    generator = MockCopyGenerator(recommended_family="luxury")
    family = await generator.recommend_family(_make_image(), b"", list(FAMILIES))
    assert family == "luxury"


def test_backend_factory():
    zones, copy = create_ai_backend(Settings(ai_backend="mock"))
    assert isinstance(zones, MockZoneAnalyzer)
    assert isinstance(copy, MockCopyGenerator)

    zones, copy = create_ai_backend(Settings(ai_backend="live"))
    assert isinstance(zones, AnthropicZoneAnalyzer)
    assert isinstance(copy, OpenAICopyGenerator)


# ── Live backend with stubbed clients ───────────────────────
@pytest.mark.asyncio
async def test_anthropic_zones_are_clamped_into_bounds():
    client = _anthropic_client(
        {
            "zones": [
                {"id": "A", "rect": {"x": 0.05, "y": 0.04, "w": 0.5, "h": 0.15}},
                {"id": "C", "rect": {"x": 0.7, "y": 0.05, "w": 0.5, "h": 0.2}},
            ],
            "avoid_regions": [{"x": 0.2, "y": 0.3, "w": 0.6, "h": 0.9}],
        }
    )
    analyzer = AnthropicZoneAnalyzer(client=client, model="test-model")

    zones = await analyzer.analyze(_make_image(), make_png())

    assert [z.id for z in zones.zones] == ["A", "C"]
    assert zones.get_zone("C").rect.w == pytest.approx(0.3)
    assert zones.avoid_regions[0].h == pytest.approx(0.7)
    kwargs = client.messages.create.call_args.kwargs
    assert kwargs["model"] == "test-model"
    image_block = kwargs["messages"][0]["content"][0]
    assert image_block["type"] == "image"
    assert image_block["source"]["media_type"] == "image/png"


@pytest.mark.asyncio
async def test_openai_copy_pool_assigns_slot_ids():
    client = _openai_client(
        {
            "slots": [
                {"language": "en", "slot_type": "headline", "text": "Glow up", "angle": "benefit"},
                {"language": "en", "slot_type": "subtext", "text": "At home", "angle": "benefit"},
                {"language": "de", "slot_type": "quote", "text": "Super!", "attribution": "— Anna"},
            ]
        }
    )
    generator = OpenAICopyGenerator(client=client, model="test-model")

    pool = await generator.generate(_make_image(), make_png())

    assert pool.image_id == "img_test"
    assert [s.slot_type for s in pool.slots] == [SlotType.HEADLINE, SlotType.SUBTEXT, SlotType.QUOTE]
    assert all(s.id.startswith("sl_") for s in pool.slots)
    kwargs = client.chat.completions.create.call_args.kwargs
    assert kwargs["response_format"] == {"type": "json_object"}
    assert kwargs["messages"][1]["content"][0]["image_url"]["url"].startswith("data:image/png;base64,")


@pytest.mark.asyncio
async def test_openai_recommendation():
    generator = OpenAICopyGenerator(client=_openai_client({"family_id": "testimonial"}))
    family = await generator.recommend_family(_make_image(), make_png(), list(FAMILIES))
    assert family == "testimonial"


@pytest.mark.asyncio
async def test_openai_recommendation_falls_back_to_first_family():
    generator = OpenAICopyGenerator(client=_openai_client({"family_id": "space-opera"}))
    family = await generator.recommend_family(_make_image(), make_png(), list(FAMILIES))
    assert family == FAMILIES[0].id


# ── HTTP client factory ─────────────────────────────────────
def test_ssl_verify_defaults_to_certifi_bundle():
    import certifi

    from ad_composer.utils import http_client

    with patch.object(http_client, "get_settings", return_value=Settings()):
        assert http_client._build_ssl_context() == certifi.where()
    with patch.object(http_client, "get_settings", return_value=Settings(ssl_verify=False)):
        assert http_client._build_ssl_context() is False


def test_sdk_clients_use_configured_keys():
    from ad_composer.utils import http_client

    settings = Settings(openai_api_key="sk-test", anthropic_api_key="sk-ant-test")
    with patch.object(http_client, "get_settings", return_value=settings):
        assert http_client.create_openai_client().api_key == "sk-test"
        assert http_client.create_anthropic_client().api_key == "sk-ant-test"


def test_custom_ca_bundle_is_exported(tmp_path, monkeypatch):
    from ad_composer.utils import http_client

    bundle = tmp_path / "corp-ca.pem"
    monkeypatch.delenv("SSL_CERT_FILE", raising=False)
    monkeypatch.delenv("REQUESTS_CA_BUNDLE", raising=False)
    with patch.object(http_client, "get_settings", return_value=Settings(ca_bundle_path=str(bundle))):
        http_client.configure_ssl_globally()

    assert os.environ["SSL_CERT_FILE"] == str(bundle)
    assert os.environ["REQUESTS_CA_BUNDLE"] == str(bundle)

"""Vision-based safe-zone analysis.

Claude looks at the product photo and returns up to three normalized text
zones plus the regions overlay text must not cover.
"""
from __future__ import annotations

import json
import logging
from pathlib import Path

from ad_composer.config import get_settings
from ad_composer.models import ImageAsset, NormRect, SafeZones, Zone, clamp_zone
from ad_composer.utils.http_client import create_anthropic_client
from ad_composer.utils.image_utils import anthropic_image_block, mime_for_filename

logger = logging.getLogger(__name__)

_TEMPLATE_PATH = Path(__file__).parent / "prompt_templates/safe_zones.txt"


def _parse_zones(image_id: str, raw: dict) -> SafeZones:
    """Model output → SafeZones. Rects are clamped into the unit square first."""
    zones = [
        Zone(id=z["id"], rect=clamp_zone(NormRect(**z["rect"])))
        for z in raw.get("zones", [])
    ]
    avoid = [clamp_zone(NormRect(**r)) for r in raw.get("avoid_regions", [])]
    return SafeZones(image_id=image_id, zones=zones, avoid_regions=avoid)


class AnthropicZoneAnalyzer:
    def __init__(self, client=None, model: str | None = None):
        self._client = client
        self._model = model

    async def analyze(self, image: ImageAsset, image_bytes: bytes) -> SafeZones:
        settings = get_settings()
        client = self._client or create_anthropic_client()
        system_prompt = _TEMPLATE_PATH.read_text(encoding="utf-8")
        mime = mime_for_filename(image.filename)

        response = await client.messages.create(
            model=self._model or settings.zone_model,
            system=system_prompt,
            messages=[
                {
                    "role": "user",
                    "content": [
                        anthropic_image_block(image_bytes, mime),
                        {"type": "text", "text": "Find the text-safe zones in this product photo."},
                    ],
                }
            ],
            max_tokens=512,
        )

        raw = json.loads(response.content[0].text)
        safe_zones = _parse_zones(image.id, raw)
        logger.info(
            "Zone analysis for image %s: %s",
            image.id,
            ", ".join(z.id for z in safe_zones.zones),
        )
        return safe_zones

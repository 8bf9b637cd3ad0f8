"""Copy-pool generation and family recommendation via GPT vision (JSON mode)."""
from __future__ import annotations

import json
import logging
from pathlib import Path

from ad_composer.config import get_settings
from ad_composer.models import CopyPool, CopySlot, FamilyDefinition, ImageAsset
from ad_composer.utils.http_client import create_openai_client
from ad_composer.utils.ids import new_id
from ad_composer.utils.image_utils import mime_for_filename, to_data_url

logger = logging.getLogger(__name__)

_TEMPLATE_DIR = Path(__file__).parent / "prompt_templates"


class OpenAICopyGenerator:
    def __init__(self, client=None, model: str | None = None):
        self._client = client
        self._model = model

    async def _ask(
        self,
        system_prompt: str,
        image: ImageAsset,
        image_bytes: bytes,
        text: str,
        max_tokens: int,
    ) -> dict:
        settings = get_settings()
        client = self._client or create_openai_client()
        data_url = to_data_url(image_bytes, mime_for_filename(image.filename))

        response = await client.chat.completions.create(
            model=self._model or settings.copy_model,
            messages=[
                {"role": "system", "content": system_prompt},
                {
                    "role": "user",
                    "content": [
                        {
                            "type": "image_url",
                            "image_url": {"url": data_url, "detail": "low"},
                        },
                        {"type": "text", "text": text},
                    ],
                },
            ],
            response_format={"type": "json_object"},
            max_tokens=max_tokens,
        )
        return json.loads(response.choices[0].message.content)

    async def generate(self, image: ImageAsset, image_bytes: bytes) -> CopyPool:
        system_prompt = (_TEMPLATE_DIR / "copy_pool.txt").read_text(encoding="utf-8")
        raw = await self._ask(
            system_prompt,
            image,
            image_bytes,
            "Write the ad copy pool for this product.",
            max_tokens=4096,
        )
        slots = [CopySlot(id=new_id("sl"), **entry) for entry in raw.get("slots", [])]
        logger.info("Copy pool for image %s: %d slots", image.id, len(slots))
        return CopyPool(image_id=image.id, slots=slots)

    async def recommend_family(
        self,
        image: ImageAsset,
        image_bytes: bytes,
        families: list[FamilyDefinition],
    ) -> str:
        template = (_TEMPLATE_DIR / "recommend_family.txt").read_text(encoding="utf-8")
        options = "\n".join(f"- {f.id}: {f.description}" for f in families)
        raw = await self._ask(
            template.format(families=options),
            image,
            image_bytes,
            "Which family fits this product best?",
            max_tokens=256,
        )

        family_id = raw.get("family_id", "")
        known = [f.id for f in families]
        if family_id not in known:
            logger.warning(
                "Recommended family %r is not registered — using %s", family_id, known[0]
            )
            return known[0]
        logger.info("Recommended family for image %s: %s", image.id, family_id)
        return family_id

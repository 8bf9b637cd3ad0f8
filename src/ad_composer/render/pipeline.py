"""Spec + source image → layout tree → PNG → stored Result location."""
from __future__ import annotations

import asyncio
import logging
import threading

from ad_composer.catalog import Catalog
from ad_composer.errors import ZoneNotFoundError
from ad_composer.models import SafeZones, Spec, to_pixels
from ad_composer.storage import ObjectStorage
from ad_composer.utils.ids import new_id
from ad_composer.utils.image_utils import probe_image

from .layout import LayoutTree, SourceImage
from .rasterize import image_to_bytes, rasterize

logger = logging.getLogger(__name__)


class Renderer:
    """Synchronous renderer. One rasterization at a time per process."""

    def __init__(self, catalog: Catalog, fonts_dir: str):
        self.catalog = catalog
        self.fonts_dir = fonts_dir
        self._lock = threading.Lock()

    def build_layout(self, spec: Spec, safe_zones: SafeZones, source: SourceImage) -> LayoutTree:
        zone = safe_zones.get_zone(spec.zone_id)
        if zone is None:
            raise ZoneNotFoundError(spec.zone_id)
        rect = to_pixels(zone.rect, spec.canvas.w, spec.canvas.h)
        style = self.catalog.get_style(spec.style_id)
        return style.layout(spec, source, rect)

    def render(self, spec: Spec, safe_zones: SafeZones, source_bytes: bytes) -> bytes:
        _, _, mime = probe_image(source_bytes)
        tree = self.build_layout(spec, safe_zones, SourceImage(data=source_bytes, mime=mime))
        with self._lock:
            image = rasterize(tree, self.fonts_dir)
        return image_to_bytes(image, format="PNG")


class RenderPipeline:
    """Renders off the event loop and writes the PNG to the `generated` bucket."""

    def __init__(self, renderer: Renderer, storage: ObjectStorage):
        self.renderer = renderer
        self.storage = storage

    async def render_and_store(
        self,
        spec: Spec,
        safe_zones: SafeZones,
        source_bytes: bytes,
    ) -> tuple[str, str]:
        """Returns (location, result_id)."""
        png = await asyncio.to_thread(self.renderer.render, spec, safe_zones, source_bytes)
        result_id = new_id("rr")
        location = await self.storage.save("generated", f"{result_id}.png", png)
        logger.info(
            "Rendered %s/%s zone=%s %dx%d → %s",
            spec.family_id,
            spec.style_id,
            spec.zone_id,
            spec.canvas.w,
            spec.canvas.h,
            location,
        )
        return location, result_id

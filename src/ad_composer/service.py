"""CreativeService: the operations a caller (CLI, HTTP layer) drives.

upload → (AI artifacts, memoized per image) → select → render → store,
plus the mutation flows that supersede an existing Result.
"""
from __future__ import annotations

import asyncio
import logging
import random
from collections import defaultdict
from collections.abc import Callable

from ad_composer.ai import CopyGenerator, ZoneAnalyzer, create_ai_backend
from ad_composer.catalog import Catalog, build_default_catalog
from ad_composer.config import Settings, get_settings
from ad_composer.errors import (
    ConflictError,
    InvalidStateError,
    NotFoundError,
    PreconditionFailedError,
    ValidationError,
)
from ad_composer.models import (
    FORMAT_DIMS,
    LANGUAGES,
    CopyPool,
    ImageAsset,
    Replacement,
    Result,
    SafeZones,
    SelectionOptions,
    Spec,
)
from ad_composer.mutation import swap_primary, swap_style, switch_format, switch_language
from ad_composer.render.pipeline import Renderer, RenderPipeline
from ad_composer.selection import build_specs
from ad_composer.storage import LocalStorage, ObjectStorage
from ad_composer.store import SQLiteStore
from ad_composer.utils.ids import new_id
from ad_composer.utils.image_utils import probe_image

logger = logging.getLogger(__name__)

_EXTENSIONS = {
    "image/png": ".png",
    "image/jpeg": ".jpg",
    "image/webp": ".webp",
}

# (current spec, image safe zones, copy pool, result being replaced) → new spec
Mutation = Callable[[Spec, SafeZones, CopyPool, Result], Spec]


class CreativeService:
    def __init__(
        self,
        *,
        catalog: Catalog,
        store: SQLiteStore,
        storage: ObjectStorage,
        zone_analyzer: ZoneAnalyzer,
        copy_generator: CopyGenerator,
        renderer: Renderer,
        rng: random.Random | None = None,
    ):
        self.catalog = catalog
        self.store = store
        self.storage = storage
        self.zone_analyzer = zone_analyzer
        self.copy_generator = copy_generator
        self.pipeline = RenderPipeline(renderer, storage)
        self.rng = rng or random.Random()
        self._image_locks: defaultdict[str, asyncio.Lock] = defaultdict(asyncio.Lock)
        self._result_locks: defaultdict[str, asyncio.Lock] = defaultdict(asyncio.Lock)

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> "CreativeService":
        settings = settings or get_settings()
        catalog = build_default_catalog()
        zone_analyzer, copy_generator = create_ai_backend(settings)
        return cls(
            catalog=catalog,
            store=SQLiteStore(settings.database_path),
            storage=LocalStorage(settings.storage_dir),
            zone_analyzer=zone_analyzer,
            copy_generator=copy_generator,
            renderer=Renderer(catalog, settings.fonts_dir),
        )

    # ── Images ──────────────────────────────────────────────
    async def upload_image(self, filename: str, data: bytes) -> ImageAsset:
        width, height, mime = probe_image(data)
        image_id = new_id("img")
        location = await self.storage.save("uploads", f"{image_id}{_EXTENSIONS[mime]}", data)
        image = ImageAsset(
            id=image_id,
            filename=filename,
            location=location,
            width=width,
            height=height,
        )
        self.store.insert_image(image)
        logger.info("Uploaded %s as %s (%dx%d)", filename, image_id, width, height)
        return image

    def _require_image(self, image_id: str) -> ImageAsset:
        image = self.store.get_image(image_id)
        if image is None:
            raise NotFoundError("Image", image_id)
        return image

    async def _source_bytes(self, image: ImageAsset) -> bytes:
        return await self.storage.read("uploads", image.location)

    # ── AI artifacts (generated at most once per image) ─────
    async def get_safe_zones(self, image_id: str) -> SafeZones:
        async with self._image_locks[f"zones:{image_id}"]:
            cached = self.store.get_safe_zones(image_id)
            if cached is not None:
                return cached
            image = self._require_image(image_id)
            safe_zones = await self.zone_analyzer.analyze(image, await self._source_bytes(image))
            self.store.save_safe_zones(safe_zones)
            return safe_zones

    async def get_copy_pool(self, image_id: str) -> CopyPool:
        async with self._image_locks[f"copy:{image_id}"]:
            cached = self.store.get_copy_pool(image_id)
            if cached is not None:
                return cached
            image = self._require_image(image_id)
            pool = await self.copy_generator.generate(image, await self._source_bytes(image))
            self.store.save_copy_pool(pool)
            return pool

    # ── Generation ──────────────────────────────────────────
    async def _render_result(self, spec: Spec, safe_zones: SafeZones, source: bytes) -> Result:
        location, result_id = await self.pipeline.render_and_store(spec, safe_zones, source)
        # written only once rendering succeeded
        self.store.insert_spec(spec)
        return Result(
            id=result_id,
            spec_id=spec.id,
            image_id=spec.image_id,
            family_id=spec.family_id,
            style_id=spec.style_id,
            primary_slot_id=spec.primary_slot_id,
            location=location,
        )

    async def generate(self, image_id: str, options: SelectionOptions) -> list[Result]:
        """Select and render one Result per emitted style."""
        image = self._require_image(image_id)
        source = await self._source_bytes(image)

        if options.family_mode == "recommended" and not options.recommended_family:
            family_id = await self.copy_generator.recommend_family(
                image, source, self.catalog.families()
            )
            options = options.model_copy(update={"recommended_family": family_id})

        safe_zones, pool = await asyncio.gather(
            self.get_safe_zones(image_id),
            self.get_copy_pool(image_id),
        )
        specs = build_specs(image_id, safe_zones, pool, options, self.catalog, self.rng)

        results: list[Result] = []
        for spec in specs:
            result = await self._render_result(spec, safe_zones, source)
            self.store.insert_result(result)
            results.append(result)
        logger.info("Generated %d results for image %s", len(results), image_id)
        return results

    # ── Mutations ───────────────────────────────────────────
    async def _mutate(self, result_id: str, mutation: Mutation) -> Replacement:
        """Render a replacement for an active result and supersede it.

        The new Result is only inserted once the old one is successfully
        marked, so a lineage never ends up with two active members.
        """
        async with self._result_locks[result_id]:
            old = self.store.get_result(result_id)
            if old is None:
                raise NotFoundError("Result", result_id)
            if not old.active:
                raise InvalidStateError(
                    f'Result "{result_id}" was already replaced by "{old.superseded_by}"'
                )
            spec = self.store.get_spec(old.spec_id)
            if spec is None:
                raise NotFoundError("Spec", old.spec_id)

            safe_zones = self.store.get_safe_zones(spec.image_id)
            pool = self.store.get_copy_pool(spec.image_id)
            if safe_zones is None or pool is None:
                raise PreconditionFailedError(
                    f'Image "{spec.image_id}" has not been analyzed yet — run generate first'
                )

            new_spec = mutation(spec, safe_zones, pool, old)
            image = self._require_image(spec.image_id)
            new_result = await self._render_result(
                new_spec, safe_zones, await self._source_bytes(image)
            )

            if not self.store.mark_superseded(old.id, new_result.id):
                raise ConflictError(f'Result "{result_id}" was superseded concurrently')
            self.store.insert_result(new_result)

        # a superseded result can never be mutated again
        self._result_locks.pop(old.id, None)
        logger.info("Result %s superseded by %s", old.id, new_result.id)
        return Replacement(result=new_result, superseded_id=old.id)

    def lineage(self, result_id: str) -> list[Result]:
        """Every result in the supersession chain ending at `result_id`, oldest first."""
        current = self.store.get_result(result_id)
        if current is None:
            raise NotFoundError("Result", result_id)
        chain = [current]
        predecessor = self.store.get_predecessor(current.id)
        while predecessor is not None:
            chain.append(predecessor)
            predecessor = self.store.get_predecessor(predecessor.id)
        chain.reverse()
        return chain

    async def regenerate_style(self, result_id: str) -> Replacement:
        return await self._mutate(
            result_id,
            lambda spec, zones, pool, _old: swap_style(spec, self.catalog, pool, zones, self.rng),
        )

    async def regenerate_headline(self, result_id: str) -> Replacement:
        def _swap(spec: Spec, zones: SafeZones, pool: CopyPool, old: Result) -> Spec:
            shown = {r.primary_slot_id for r in self.lineage(old.id)}
            return swap_primary(
                spec, self.catalog, pool, zones, self.rng, previous_slot_ids=shown
            )

        return await self._mutate(result_id, _swap)

    async def switch_language_or_format(
        self,
        result_ids: list[str],
        language: str | None = None,
        format: str | None = None,
    ) -> list[Replacement]:
        """Re-render each result in a new language and/or format.

        Items that are missing, already superseded or cannot be resolved are
        skipped; the rest still go through.
        """
        issues = []
        if not result_ids:
            issues.append("result_ids must not be empty")
        if language is None and format is None:
            issues.append("language or format is required")
        if language is not None and language not in LANGUAGES:
            issues.append(f"unsupported language {language!r}")
        if format is not None and format not in FORMAT_DIMS:
            issues.append(f"unsupported format {format!r}")
        if issues:
            raise ValidationError(issues)

        def _switch(spec: Spec, _zones: SafeZones, pool: CopyPool, _old: Result) -> Spec:
            if language is not None:
                spec = switch_language(spec, self.catalog, pool, language)
            if format is not None:
                spec = switch_format(spec, format)
            return spec

        replacements: list[Replacement] = []
        for result_id in result_ids:
            try:
                replacements.append(await self._mutate(result_id, _switch))
            except (NotFoundError, InvalidStateError, PreconditionFailedError, ConflictError) as exc:
                logger.warning("Skipping %s: %s", result_id, exc)
        return replacements

    # ── Results ─────────────────────────────────────────────
    def set_approval(self, result_id: str, approved: bool) -> Result:
        if not self.store.set_approval(result_id, approved):
            raise NotFoundError("Result", result_id)
        return self.store.get_result(result_id)

    def list_active_results(self, image_id: str) -> list[Result]:
        return self.store.list_active_results(image_id)

    async def clear_images(self, image_ids: list[str]) -> None:
        """Remove images with all their specs, results and stored files."""
        result_ids = [r.id for image_id in image_ids for r in self.store.list_results(image_id)]
        locators = self.store.delete_images(image_ids)
        for locator in locators:
            try:
                await self.storage.delete(locator)
            except (OSError, ValidationError) as exc:
                logger.warning("Could not delete %s: %s", locator, exc)
        for image_id in image_ids:
            self._image_locks.pop(f"zones:{image_id}", None)
            self._image_locks.pop(f"copy:{image_id}", None)
        for result_id in result_ids:
            self._result_locks.pop(result_id, None)

from __future__ import annotations

from typing import Protocol

from ad_composer.models import CopyPool, FamilyDefinition, ImageAsset, SafeZones


class ZoneAnalyzer(Protocol):
    """Image in → text-safe zones out. Called at most once per image."""

    async def analyze(self, image: ImageAsset, image_bytes: bytes) -> SafeZones: ...


class CopyGenerator(Protocol):
    """Image in → localized copy pool out. Called at most once per image."""

    async def generate(self, image: ImageAsset, image_bytes: bytes) -> CopyPool: ...

    async def recommend_family(
        self,
        image: ImageAsset,
        image_bytes: bytes,
        families: list[FamilyDefinition],
    ) -> str: ...

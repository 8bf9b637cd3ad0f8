"""Blob storage for uploaded originals and rendered creatives.

Locators have the form `/files/{bucket}/{key}` so they can be served directly
by a static file route.
"""
from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Literal, Protocol

from ad_composer.errors import NotFoundError, ValidationError

logger = logging.getLogger(__name__)

Bucket = Literal["uploads", "generated"]
BUCKETS: tuple[Bucket, ...] = ("uploads", "generated")

_LOCATOR_PREFIX = "/files/"


class ObjectStorage(Protocol):
    async def save(self, bucket: Bucket, key: str, data: bytes) -> str: ...

    async def read(self, bucket: Bucket, key_or_locator: str) -> bytes: ...

    async def delete(self, locator: str) -> None: ...


def locator_for(bucket: Bucket, key: str) -> str:
    return f"{_LOCATOR_PREFIX}{bucket}/{key}"


def parse_locator(locator: str) -> tuple[Bucket, str]:
    """`/files/generated/rr_ab12.png` → ("generated", "rr_ab12.png")."""
    if not locator.startswith(_LOCATOR_PREFIX):
        raise ValidationError(f"Not a storage locator: {locator!r}")
    bucket, _, key = locator[len(_LOCATOR_PREFIX):].partition("/")
    if bucket not in BUCKETS or not key:
        raise ValidationError(f"Not a storage locator: {locator!r}")
    return bucket, key  # type: ignore[return-value]


class LocalStorage:
    """Filesystem storage: one directory per bucket under `root`."""

    def __init__(self, root: str | Path):
        self.root = Path(root)

    def _path(self, bucket: Bucket, key: str) -> Path:
        if bucket not in BUCKETS:
            raise ValidationError(f"Unknown bucket {bucket!r}")
        # keys are flat file names
        if not key or Path(key).name != key or key in (".", ".."):
            raise ValidationError(f"Invalid storage key {key!r}")
        return self.root / bucket / key

    def _key(self, bucket: Bucket, key_or_locator: str) -> str:
        if key_or_locator.startswith(_LOCATOR_PREFIX):
            located_bucket, key = parse_locator(key_or_locator)
            if located_bucket != bucket:
                raise ValidationError(
                    f"Locator {key_or_locator!r} is not in bucket {bucket!r}"
                )
            return key
        return key_or_locator

    async def save(self, bucket: Bucket, key: str, data: bytes) -> str:
        path = self._path(bucket, key)

        def _write() -> None:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(data)

        await asyncio.to_thread(_write)
        logger.info("Stored %s/%s (%d bytes)", bucket, key, len(data))
        return locator_for(bucket, key)

    async def read(self, bucket: Bucket, key_or_locator: str) -> bytes:
        key = self._key(bucket, key_or_locator)
        path = self._path(bucket, key)
        try:
            return await asyncio.to_thread(path.read_bytes)
        except FileNotFoundError:
            raise NotFoundError("File", f"{bucket}/{key}") from None

    async def delete(self, locator: str) -> None:
        bucket, key = parse_locator(locator)
        await asyncio.to_thread(self._path(bucket, key).unlink, missing_ok=True)

"""SQLite persistence for images, AI artifacts, specs and results.

Artifacts and specs are stored as JSON documents; results are stored as
columns so the supersession chain can be queried and updated atomically.
"""
from __future__ import annotations

import logging
import sqlite3
import threading
from pathlib import Path

from ad_composer.models import CopyPool, ImageAsset, Result, SafeZones, Spec

logger = logging.getLogger(__name__)

_SCHEMA = """
CREATE TABLE IF NOT EXISTS images (
    id         TEXT PRIMARY KEY,
    filename   TEXT NOT NULL,
    location   TEXT NOT NULL,
    width      INTEGER NOT NULL,
    height     INTEGER NOT NULL,
    created_at TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS safe_zones (
    image_id TEXT PRIMARY KEY REFERENCES images(id),
    data     TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS copy_pools (
    image_id TEXT PRIMARY KEY REFERENCES images(id),
    data     TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS specs (
    id       TEXT PRIMARY KEY,
    image_id TEXT NOT NULL REFERENCES images(id),
    data     TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS results (
    id              TEXT PRIMARY KEY,
    spec_id         TEXT NOT NULL REFERENCES specs(id),
    image_id        TEXT NOT NULL REFERENCES images(id),
    family_id       TEXT NOT NULL,
    style_id        TEXT NOT NULL,
    primary_slot_id TEXT NOT NULL,
    location        TEXT NOT NULL,
    approved        INTEGER NOT NULL DEFAULT 0,
    superseded_by   TEXT,
    created_at      TEXT NOT NULL
);

CREATE INDEX IF NOT EXISTS idx_results_image ON results(image_id);
CREATE INDEX IF NOT EXISTS idx_results_superseded_by ON results(superseded_by);
"""


def _row_to_result(row: sqlite3.Row) -> Result:
    return Result(
        id=row["id"],
        spec_id=row["spec_id"],
        image_id=row["image_id"],
        family_id=row["family_id"],
        style_id=row["style_id"],
        primary_slot_id=row["primary_slot_id"],
        location=row["location"],
        approved=bool(row["approved"]),
        superseded_by=row["superseded_by"],
        created_at=row["created_at"],
    )


class SQLiteStore:
    """Store backed by one sqlite3 connection.

    Pass ":memory:" for an ephemeral database (tests).
    """

    def __init__(self, path: str | Path = ":memory:"):
        if str(path) != ":memory:":
            Path(path).parent.mkdir(parents=True, exist_ok=True)
        # Service coroutines hop between the loop and worker threads
        self._conn = sqlite3.connect(str(path), check_same_thread=False)
        self._conn.row_factory = sqlite3.Row
        self._lock = threading.Lock()
        with self._lock:
            self._conn.execute("PRAGMA foreign_keys = ON")
            self._conn.executescript(_SCHEMA)

    def close(self) -> None:
        self._conn.close()

    def _execute(self, sql: str, params: tuple = ()) -> sqlite3.Cursor:
        with self._lock, self._conn:
            return self._conn.execute(sql, params)

    def _fetchone(self, sql: str, params: tuple = ()) -> sqlite3.Row | None:
        with self._lock:
            return self._conn.execute(sql, params).fetchone()

    def _fetchall(self, sql: str, params: tuple = ()) -> list[sqlite3.Row]:
        with self._lock:
            return self._conn.execute(sql, params).fetchall()

    # ── Images ──────────────────────────────────────────────
    def insert_image(self, image: ImageAsset) -> None:
        self._execute(
            "INSERT INTO images (id, filename, location, width, height, created_at) "
            "VALUES (?, ?, ?, ?, ?, ?)",
            (image.id, image.filename, image.location, image.width, image.height, image.created_at),
        )

    def get_image(self, image_id: str) -> ImageAsset | None:
        row = self._fetchone("SELECT * FROM images WHERE id = ?", (image_id,))
        return ImageAsset(**dict(row)) if row else None

    # ── AI artifacts ────────────────────────────────────────
    def save_safe_zones(self, safe_zones: SafeZones) -> None:
        self._execute(
            "INSERT OR REPLACE INTO safe_zones (image_id, data) VALUES (?, ?)",
            (safe_zones.image_id, safe_zones.model_dump_json()),
        )

    def get_safe_zones(self, image_id: str) -> SafeZones | None:
        row = self._fetchone("SELECT data FROM safe_zones WHERE image_id = ?", (image_id,))
        return SafeZones.model_validate_json(row["data"]) if row else None

    def save_copy_pool(self, pool: CopyPool) -> None:
        self._execute(
            "INSERT OR REPLACE INTO copy_pools (image_id, data) VALUES (?, ?)",
            (pool.image_id, pool.model_dump_json()),
        )

    def get_copy_pool(self, image_id: str) -> CopyPool | None:
        row = self._fetchone("SELECT data FROM copy_pools WHERE image_id = ?", (image_id,))
        return CopyPool.model_validate_json(row["data"]) if row else None

    # ── Specs ───────────────────────────────────────────────
    def insert_spec(self, spec: Spec) -> None:
        self._execute(
            "INSERT INTO specs (id, image_id, data) VALUES (?, ?, ?)",
            (spec.id, spec.image_id, spec.model_dump_json()),
        )

    def get_spec(self, spec_id: str) -> Spec | None:
        row = self._fetchone("SELECT data FROM specs WHERE id = ?", (spec_id,))
        return Spec.model_validate_json(row["data"]) if row else None

    # ── Results ─────────────────────────────────────────────
    def insert_result(self, result: Result) -> None:
        self._execute(
            "INSERT INTO results (id, spec_id, image_id, family_id, style_id, primary_slot_id, "
            "location, approved, superseded_by, created_at) "
            "VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)",
            (
                result.id,
                result.spec_id,
                result.image_id,
                result.family_id,
                result.style_id,
                result.primary_slot_id,
                result.location,
                int(result.approved),
                result.superseded_by,
                result.created_at,
            ),
        )

    def get_result(self, result_id: str) -> Result | None:
        row = self._fetchone("SELECT * FROM results WHERE id = ?", (result_id,))
        return _row_to_result(row) if row else None

    def list_active_results(self, image_id: str) -> list[Result]:
        rows = self._fetchall(
            "SELECT * FROM results WHERE image_id = ? AND superseded_by IS NULL "
            "ORDER BY created_at DESC, rowid DESC",
            (image_id,),
        )
        return [_row_to_result(r) for r in rows]

    def list_results(self, image_id: str) -> list[Result]:
        rows = self._fetchall(
            "SELECT * FROM results WHERE image_id = ? ORDER BY rowid", (image_id,)
        )
        return [_row_to_result(r) for r in rows]

    def set_approval(self, result_id: str, approved: bool) -> bool:
        cursor = self._execute(
            "UPDATE results SET approved = ? WHERE id = ?", (int(approved), result_id)
        )
        return cursor.rowcount == 1

    def mark_superseded(self, old_id: str, new_id: str) -> bool:
        """Link `old_id` → `new_id`. False if `old_id` was already superseded."""
        cursor = self._execute(
            "UPDATE results SET superseded_by = ? WHERE id = ? AND superseded_by IS NULL",
            (new_id, old_id),
        )
        return cursor.rowcount == 1

    def get_predecessor(self, result_id: str) -> Result | None:
        row = self._fetchone("SELECT * FROM results WHERE superseded_by = ?", (result_id,))
        return _row_to_result(row) if row else None

    # ── Cleanup ─────────────────────────────────────────────
    def delete_images(self, image_ids: list[str]) -> list[str]:
        """Delete images and everything derived from them. Returns the blob locators to remove."""
        if not image_ids:
            return []
        marks = ",".join("?" for _ in image_ids)
        params = tuple(image_ids)
        with self._lock, self._conn:
            locators = [
                r["location"]
                for r in self._conn.execute(
                    f"SELECT location FROM images WHERE id IN ({marks}) "
                    f"UNION ALL SELECT location FROM results WHERE image_id IN ({marks})",
                    params + params,
                )
            ]
            self._conn.execute(f"DELETE FROM results WHERE image_id IN ({marks})", params)
            self._conn.execute(f"DELETE FROM specs WHERE image_id IN ({marks})", params)
            self._conn.execute(f"DELETE FROM copy_pools WHERE image_id IN ({marks})", params)
            self._conn.execute(f"DELETE FROM safe_zones WHERE image_id IN ({marks})", params)
            self._conn.execute(f"DELETE FROM images WHERE id IN ({marks})", params)
        logger.info("Deleted %d images (%d stored files)", len(image_ids), len(locators))
        return locators

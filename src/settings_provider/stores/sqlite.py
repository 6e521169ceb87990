"""SQLiteDocumentStore — durable, single-file storage backend using aiosqlite."""

from __future__ import annotations

import json
import logging
from typing import Any

import aiosqlite

from settings_provider.exceptions import StoreError
from settings_provider.stores.base import DocumentStore, split_path

logger = logging.getLogger(__name__)

_CREATE_TABLE = """
CREATE TABLE IF NOT EXISTS documents (
    collection TEXT NOT NULL,
    key        TEXT NOT NULL,
    value      TEXT NOT NULL,
    PRIMARY KEY (collection, key)
)
"""


class SQLiteDocumentStore(DocumentStore):
    """Persistent store backed by a single SQLite file.

    Each ``collection/document`` pair is one row holding the document as
    JSON text, so supported paths are one to three segments deep:
    ``collection``, ``collection/document`` and
    ``collection/document/field``.

    Parameters:
        db_path: Path to the SQLite database file.  Use ``":memory:"``
                 for an in-memory database (useful for testing).
    """

    def __init__(self, db_path: str = "settings.db") -> None:
        self._db_path = db_path
        self._db: aiosqlite.Connection | None = None

    async def _connect(self) -> aiosqlite.Connection:
        if self._db is None:
            self._db = await aiosqlite.connect(self._db_path)
            await self._db.execute(_CREATE_TABLE)
            await self._db.commit()
            logger.debug("Opened settings database at %s", self._db_path)
        return self._db

    async def close(self) -> None:
        if self._db:
            await self._db.close()
            self._db = None

    # ── row helpers ──────────────────────────────────────────

    async def _load(self, collection: str, key: str) -> dict[str, Any] | None:
        db = await self._connect()
        cursor = await db.execute(
            "SELECT value FROM documents WHERE collection = ? AND key = ?",
            (collection, key),
        )
        row = await cursor.fetchone()
        if row is None:
            return None
        document: dict[str, Any] = json.loads(row[0])
        return document

    async def _save(self, collection: str, key: str, document: dict[str, Any]) -> None:
        db = await self._connect()
        if document:
            await db.execute(
                "INSERT OR REPLACE INTO documents (collection, key, value) VALUES (?, ?, ?)",
                (collection, key, json.dumps(document)),
            )
        else:
            await db.execute(
                "DELETE FROM documents WHERE collection = ? AND key = ?",
                (collection, key),
            )

    @staticmethod
    def _merge(document: dict[str, Any], fields: dict[str, Any]) -> None:
        # A None value removes the field, as a realtime database PATCH does
        for key, value in fields.items():
            if value is None:
                document.pop(key, None)
            else:
                document[key] = value

    @staticmethod
    def _segments(operation: str, path: str) -> list[str]:
        segments = split_path(path)
        if not 1 <= len(segments) <= 3:
            raise StoreError(operation, path, "path must be 1 to 3 segments deep")
        return segments

    # ── DocumentStore protocol ───────────────────────────────

    async def fetch(self, path: str) -> Any | None:
        segments = self._segments("fetch", path)
        try:
            if len(segments) == 1:
                db = await self._connect()
                cursor = await db.execute(
                    "SELECT key, value FROM documents WHERE collection = ?",
                    (segments[0],),
                )
                rows = await cursor.fetchall()
                return {row[0]: json.loads(row[1]) for row in rows} or None

            document = await self._load(segments[0], segments[1])
            if document is None or len(segments) == 2:
                return document
            return document.get(segments[2])
        except aiosqlite.Error as exc:
            raise StoreError("fetch", path, str(exc)) from exc

    async def update(self, path: str, fields: dict[str, Any]) -> None:
        segments = self._segments("update", path)
        try:
            db = await self._connect()
            if len(segments) == 1:
                # Collection-level update replaces each named document
                for key, document in fields.items():
                    if document is not None and not isinstance(document, dict):
                        raise StoreError("update", path, f"document '{key}' must be an object")
                    replacement: dict[str, Any] = {}
                    self._merge(replacement, document or {})
                    await self._save(segments[0], key, replacement)
            else:
                collection, key = segments[0], segments[1]
                document = await self._load(collection, key) or {}
                if len(segments) == 2:
                    self._merge(document, fields)
                else:
                    current = document.get(segments[2])
                    nested = dict(current) if isinstance(current, dict) else {}
                    self._merge(nested, fields)
                    if nested:
                        document[segments[2]] = nested
                    else:
                        document.pop(segments[2], None)
                await self._save(collection, key, document)
            await db.commit()
        except aiosqlite.Error as exc:
            raise StoreError("update", path, str(exc)) from exc

    async def remove(self, path: str) -> None:
        segments = self._segments("remove", path)
        try:
            db = await self._connect()
            if len(segments) == 1:
                await db.execute("DELETE FROM documents WHERE collection = ?", (segments[0],))
            elif len(segments) == 2:
                await db.execute(
                    "DELETE FROM documents WHERE collection = ? AND key = ?",
                    (segments[0], segments[1]),
                )
            else:
                document = await self._load(segments[0], segments[1])
                if document is None or segments[2] not in document:
                    return
                del document[segments[2]]
                await self._save(segments[0], segments[1], document)
            await db.commit()
        except aiosqlite.Error as exc:
            raise StoreError("remove", path, str(exc)) from exc

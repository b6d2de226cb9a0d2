"""File-backed document store.

Documents are JSON objects grouped into collections. Every collection is a
directory under ``base_dir`` and every document is one ``<key>.json`` file
inside it.

- ``create`` is exclusive and atomic: the content is written to a temporary
  file first and then hard-linked to its final name, so a crash leaves either
  the complete document or nothing.
- ``update`` replaces the whole document (no merge). Callers read-modify-write.
- ``read`` never raises on malformed content; it returns an empty document.
- Keys must match ``_NAME_PATTERN``. ``create`` rejects any other key with
  ValueError; lookups treat it as a missing document.

There is no cross-operation locking. ``lock(collection, key)`` hands out an
in-process ``asyncio.Lock`` for callers that want to serialize their own
read-modify-write cycles on one key; the store itself never takes it.
"""

from __future__ import annotations

import asyncio
import json
import os
import re
import shutil
import tempfile
import weakref
from pathlib import Path
from typing import Any

import structlog

from shared.errors import AlreadyExists, NotFound

logger = structlog.get_logger(__name__)

DOCUMENT_SUFFIX = ".json"

_NAME_PATTERN = re.compile(r"^[A-Za-z0-9][A-Za-z0-9_-]*$")


def _check_name(kind: str, value: str) -> str:
    if not isinstance(value, str) or not _NAME_PATTERN.match(value):
        raise ValueError(f"Invalid {kind} name: {value!r}")
    return value


class DocumentStore:
    """Collection-scoped CRUD over JSON documents on disk."""

    def __init__(self, base_dir: Path | str) -> None:
        self.base_dir = Path(base_dir)
        self._locks: weakref.WeakValueDictionary[tuple[str, str], asyncio.Lock] = weakref.WeakValueDictionary()

    # -------------------------------------------------------------------
    # Paths
    # -------------------------------------------------------------------
    def collection_path(self, collection: str) -> Path:
        return self.base_dir / _check_name("collection", collection)

    def document_path(self, collection: str, key: str) -> Path:
        return self.collection_path(collection) / f"{_check_name('key', key)}{DOCUMENT_SUFFIX}"

    def existing_document_path(self, collection: str, key: str) -> Path:
        """Path of a document being looked up. A key that could never be created is absent."""
        if not isinstance(key, str) or not _NAME_PATTERN.match(key):
            raise NotFound(f"Document {key!r} not found in {collection!r}", collection=collection, key=key)
        return self.document_path(collection, key)

    def ensure_collections(self, *collections: str) -> None:
        for collection in collections:
            self.collection_path(collection).mkdir(parents=True, exist_ok=True)

    def drop_collections(self, *collections: str) -> None:
        for collection in collections:
            shutil.rmtree(self.collection_path(collection), ignore_errors=True)

    def lock(self, collection: str, key: str) -> asyncio.Lock:
        """Per-key lock shared by everyone asking for the same document."""
        lock_key = (collection, key)
        lock = self._locks.get(lock_key)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[lock_key] = lock
        return lock

    # -------------------------------------------------------------------
    # Operations
    # -------------------------------------------------------------------
    async def create(self, collection: str, key: str, document: dict[str, Any]) -> None:
        await asyncio.to_thread(self._create, collection, key, document)

    async def read(self, collection: str, key: str) -> dict[str, Any]:
        return await asyncio.to_thread(self._read, collection, key)

    async def update(self, collection: str, key: str, document: dict[str, Any]) -> None:
        await asyncio.to_thread(self._update, collection, key, document)

    async def delete(self, collection: str, key: str) -> None:
        await asyncio.to_thread(self._delete, collection, key)

    async def list(self, collection: str) -> set[str]:
        return await asyncio.to_thread(self._list, collection)

    # -------------------------------------------------------------------
    # Blocking implementations (run in a worker thread)
    # -------------------------------------------------------------------
    def _write_temp(self, directory: Path, document: dict[str, Any]) -> str:
        payload = json.dumps(document)
        fd, temp_path = tempfile.mkstemp(dir=directory, prefix=".", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(payload)
                handle.flush()
                os.fsync(handle.fileno())
        except BaseException:
            os.unlink(temp_path)
            raise
        return temp_path

    def _create(self, collection: str, key: str, document: dict[str, Any]) -> None:
        target = self.document_path(collection, key)
        target.parent.mkdir(parents=True, exist_ok=True)

        temp_path = self._write_temp(target.parent, document)
        try:
            os.link(temp_path, target)
        except FileExistsError:
            raise AlreadyExists(
                f"Document {key!r} already exists in {collection!r}",
                collection=collection,
                key=key,
            ) from None
        finally:
            os.unlink(temp_path)

    def _read(self, collection: str, key: str) -> dict[str, Any]:
        path = self.existing_document_path(collection, key)
        try:
            raw = path.read_text(encoding="utf-8")
        except FileNotFoundError:
            raise NotFound(f"Document {key!r} not found in {collection!r}", collection=collection, key=key) from None

        try:
            document = json.loads(raw)
        except json.JSONDecodeError as exc:
            logger.warning("Malformed document treated as empty", collection=collection, key=key, error=str(exc))
            return {}

        if not isinstance(document, dict):
            logger.warning("Non-object document treated as empty", collection=collection, key=key)
            return {}
        return document

    def _update(self, collection: str, key: str, document: dict[str, Any]) -> None:
        target = self.existing_document_path(collection, key)
        if not target.is_file():
            raise NotFound(f"Document {key!r} not found in {collection!r}", collection=collection, key=key)

        temp_path = self._write_temp(target.parent, document)
        try:
            os.replace(temp_path, target)
        except BaseException:
            os.unlink(temp_path)
            raise

    def _delete(self, collection: str, key: str) -> None:
        try:
            self.existing_document_path(collection, key).unlink()
        except FileNotFoundError:
            raise NotFound(f"Document {key!r} not found in {collection!r}", collection=collection, key=key) from None

    def _list(self, collection: str) -> set[str]:
        directory = self.collection_path(collection)
        if not directory.is_dir():
            return set()
        return {
            entry.name[: -len(DOCUMENT_SUFFIX)]
            for entry in os.scandir(directory)
            if entry.is_file() and entry.name.endswith(DOCUMENT_SUFFIX) and not entry.name.startswith(".")
        }

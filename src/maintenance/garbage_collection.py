"""Garbage collection of expired tokens and carts.

Every swept document is read and deleted when its ``expires`` (epoch ms) is
not in the future. Documents without a numeric ``expires`` are left alone.
A failure on one document is logged and the sweep moves on.
"""

from collections.abc import Callable, Iterable

import structlog

from shared.errors import NotFound
from shared.ids import now_ms
from shared.store import EXPIRING_COLLECTIONS, DocumentStore

logger = structlog.get_logger(__name__)


def is_expired(document: dict, now: int) -> bool:
    expires = document.get("expires")
    if isinstance(expires, bool) or not isinstance(expires, int | float):
        return False
    return expires <= now


class GarbageCollector:
    def __init__(
        self,
        store: DocumentStore,
        collections: Iterable[str] = EXPIRING_COLLECTIONS,
        clock: Callable[[], int] = now_ms,
    ) -> None:
        self.store = store
        self.collections = tuple(collections)
        self.clock = clock

    async def sweep(self) -> dict[str, int]:
        """One pass over every collection. Returns deleted counts per collection."""
        return {collection: await self.sweep_collection(collection) for collection in self.collections}

    async def sweep_collection(self, collection: str) -> int:
        try:
            keys = await self.store.list(collection)
        except OSError as exc:
            logger.error("Could not list collection", collection=collection, error=str(exc))
            return 0

        deleted = 0
        for key in sorted(keys):
            try:
                document = await self.store.read(collection, key)
            except NotFound:
                continue
            except OSError as exc:
                logger.error("Could not read document", collection=collection, key=key, error=str(exc))
                continue

            if not is_expired(document, self.clock()):
                continue

            try:
                await self.store.delete(collection, key)
            except NotFound:
                # Already removed by a concurrent request
                continue
            except OSError as exc:
                logger.error("Could not delete document", collection=collection, key=key, error=str(exc))
                continue
            deleted += 1

        if deleted:
            logger.info("Expired documents removed", collection=collection, count=deleted)
        return deleted

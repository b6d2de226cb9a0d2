"""Log archive: rotation of the line-delimited operational logs.

Live files are ``<name>.log`` in the log directory. Rotating one compresses
its full contents (gzip, then base64) into ``<name>-<epoch ms>.gz.b64`` and
then truncates the live file to empty. The archive is opened exclusively, so
an existing archive is never overwritten.

A record appended between the read and the truncate is lost; rotation is not
exactly-once against concurrent writers.
"""

import asyncio
import base64
import gzip
from collections.abc import Callable
from pathlib import Path

import structlog

from shared.errors import NotFound
from shared.ids import now_ms

logger = structlog.get_logger(__name__)

LOG_SUFFIX = ".log"
ARCHIVE_SUFFIX = ".gz.b64"


class LogArchive:
    def __init__(self, base_dir: Path | str, clock: Callable[[], int] = now_ms) -> None:
        self.base_dir = Path(base_dir)
        self.clock = clock

    def _path(self, name: str) -> Path:
        path = self.base_dir / name
        if path.parent != self.base_dir:
            raise ValueError(f"Invalid log file name: {name!r}")
        return path

    def list(self, include_compressed: bool = False) -> list[str]:
        """Names of the live log files, plus archives when asked for."""
        if not self.base_dir.is_dir():
            return []
        names = []
        for path in sorted(self.base_dir.iterdir()):
            if not path.is_file():
                continue
            if path.name.endswith(LOG_SUFFIX) or (include_compressed and path.name.endswith(ARCHIVE_SUFFIX)):
                names.append(path.name)
        return names

    def archive_name(self, name: str) -> str:
        return f"{name.removesuffix(LOG_SUFFIX)}-{self.clock()}{ARCHIVE_SUFFIX}"

    def compress(self, name: str) -> str | None:
        """Write the archive for a live file; None when there is nothing to archive."""
        source = self._path(name)
        try:
            content = source.read_bytes()
        except FileNotFoundError:
            raise NotFound(f"Log file {name!r} does not exist", name=name) from None
        if not content:
            return None

        archive = self.archive_name(name)
        encoded = base64.b64encode(gzip.compress(content))
        with open(self._path(archive), "xb") as fh:
            fh.write(encoded)
        return archive

    def rotate(self, name: str) -> str | None:
        """Compress then truncate. Returns the archive name, None if the file was empty."""
        archive = self.compress(name)
        if archive is not None:
            with open(self._path(name), "r+b") as fh:
                fh.truncate(0)
        return archive

    def decompress(self, archive_name: str) -> str:
        """Decoded text of an archive written by ``compress``."""
        try:
            encoded = self._path(archive_name).read_bytes()
        except FileNotFoundError:
            raise NotFound(f"Log archive {archive_name!r} does not exist", name=archive_name) from None
        return gzip.decompress(base64.b64decode(encoded)).decode("utf-8")


async def rotate_logs(archive: LogArchive) -> dict[str, str | None]:
    """Rotate every live log file. A failure on one file does not stop the others.

    Returns a mapping of rotated file name to archive name (None for skipped
    empty files). Files that failed are left out and logged.
    """
    results: dict[str, str | None] = {}
    for name in await asyncio.to_thread(archive.list, False):
        try:
            results[name] = await asyncio.to_thread(archive.rotate, name)
        except (OSError, NotFound) as exc:
            logger.error("Could not rotate log file", file=name, error=str(exc))
            continue
        if results[name]:
            logger.debug("Rotated log file", file=name, archive=results[name])
    return results

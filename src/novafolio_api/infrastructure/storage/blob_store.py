"""Filesystem blob store for uploaded documents.

Files live flat under a single root directory and are addressed by a public
locator of the form ``/files/<basename>``. The basename is
``<uuid4>_<sanitized original name>``, so two uploads never collide even with
the same original filename.
"""

import asyncio
import io
import logging
import os
import re
import time
from dataclasses import dataclass
from pathlib import Path, PurePosixPath
from typing import Iterable, List, Optional, Set
from uuid import uuid4

logger = logging.getLogger(__name__)

CHUNK_SIZE = 1024 * 1024
DEFAULT_FILENAME = "document"
_UNSAFE_CHARS = re.compile(r"[^\w.\-]+", re.ASCII)


def sanitize_filename(name: Optional[str]) -> str:
    """Strip directory components and restrict to ``[A-Za-z0-9_.-]``."""
    base = (name or "").replace("\\", "/").rsplit("/", 1)[-1]
    safe = _UNSAFE_CHARS.sub("_", base)
    if safe in ("", ".", ".."):
        return DEFAULT_FILENAME
    return safe


@dataclass(frozen=True)
class StoredBlob:
    """Result of a successful write."""
    locator: str
    path: Path
    size: int


class _BytesSource:
    """Async ``read(n)`` adapter over in-memory bytes."""

    def __init__(self, data: bytes):
        self._buffer = io.BytesIO(data)

    async def read(self, size: int = -1) -> bytes:
        return self._buffer.read(size)


class BlobStore:
    """Durable byte storage addressed by public locators."""

    def __init__(self, storage_dir: str = "data/uploads", public_prefix: str = "/files"):
        """Initialize blob store.

        Args:
            storage_dir: Root directory; relative paths resolve against the
                working directory
            public_prefix: URL prefix under which the root is served
        """
        self.storage_dir = storage_dir
        self.public_prefix = "/" + public_prefix.strip("/")

    def resolve_root(self) -> Path:
        """Absolute root directory. Pure, no filesystem access."""
        configured = Path(self.storage_dir)
        if configured.is_absolute():
            return configured
        return Path.cwd() / configured

    def ensure_root(self) -> Path:
        """Create the root directory (with parents) if absent."""
        root = self.resolve_root()
        root.mkdir(parents=True, exist_ok=True)
        return root

    def locator_for(self, basename: str) -> str:
        return f"{self.public_prefix}/{basename}"

    def resolve_path(self, locator: str) -> Path:
        """Map a locator to its absolute path using only its basename.

        Raises:
            ValueError: If the locator has no usable basename
        """
        basename = PurePosixPath(locator.replace("\\", "/")).name
        if basename in ("", ".", ".."):
            raise ValueError(f"Invalid storage locator: {locator!r}")
        return self.resolve_root() / basename

    async def write(self, source, original_name: Optional[str]) -> StoredBlob:
        """Stream ``source`` into a new file under the root.

        Args:
            source: Object with an async ``read(size)`` method (e.g. an
                ``UploadFile``)
            original_name: Client-supplied filename, sanitized before use

        Returns:
            StoredBlob with the public locator

        Raises:
            OSError: If the root is not writable or the disk is full. A
                partially written file is left in place.
        """
        root = await asyncio.to_thread(self.ensure_root)
        basename = f"{uuid4()}_{sanitize_filename(original_name)}"
        path = root / basename

        size = 0
        handle = await asyncio.to_thread(open, path, "xb")
        try:
            while True:
                chunk = await source.read(CHUNK_SIZE)
                if not chunk:
                    break
                await asyncio.to_thread(handle.write, chunk)
                size += len(chunk)
        finally:
            await asyncio.to_thread(handle.close)

        logger.info(f"Stored {size} bytes at {path}")
        return StoredBlob(locator=self.locator_for(basename), path=path, size=size)

    async def write_bytes(self, data: bytes, original_name: Optional[str]) -> StoredBlob:
        return await self.write(_BytesSource(data), original_name)

    async def read(self, locator: str) -> bytes:
        return await asyncio.to_thread(self.resolve_path(locator).read_bytes)

    async def remove(self, locator: str) -> bool:
        """Best-effort file removal. Never raises.

        Returns:
            True if a file was removed
        """
        try:
            path = self.resolve_path(locator)
            await asyncio.to_thread(path.unlink)
        except FileNotFoundError:
            logger.debug(f"Blob already absent: {locator}")
            return False
        except (OSError, ValueError) as e:
            logger.warning(f"Failed to remove blob {locator}: {e}")
            return False
        logger.info(f"Removed blob {locator}")
        return True

    async def remove_many(self, locators: Iterable[str]) -> int:
        removed = 0
        for locator in locators:
            if await self.remove(locator):
                removed += 1
        return removed

    def list_files(self) -> List[Path]:
        root = self.resolve_root()
        if not root.is_dir():
            return []
        return sorted(p for p in root.iterdir() if p.is_file())

    def orphans(self, known_locators: Set[str], min_age_seconds: float = 0) -> List[str]:
        """Locators of files no document references, older than the grace period.

        The grace period protects uploads whose record insert has not
        committed yet.
        """
        known = {PurePosixPath(loc.replace("\\", "/")).name for loc in known_locators}
        cutoff = time.time() - min_age_seconds
        found = []
        for path in self.list_files():
            if path.name in known:
                continue
            try:
                if os.path.getmtime(path) > cutoff:
                    continue
            except OSError:
                continue
            found.append(self.locator_for(path.name))
        return found

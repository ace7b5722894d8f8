"""Filesystem-backed icon cache with independent positive and negative TTLs.

Each domain maps to `<cache_dir>/<domain>.png` holding the icon bytes, or to a
zero-byte `<cache_dir>/<domain>.png.miss` marker recording a failed resolution.
File modification times are the fetch times. Domains must be validated before
they reach this module since they are used as file names.
"""

import asyncio
import logging
import tempfile
import time
from pathlib import Path

from favicache.icons.constants import ICON_FILE_SUFFIX, MISS_MARKER_SUFFIX
from favicache.icons.models import CacheLookup

logger = logging.getLogger(__name__)


def is_expired(path: Path, ttl: int) -> bool:
    """Check whether a file is older than `ttl` seconds. A `ttl` of 0 never expires.

    Raises:
        - `OSError` if the file can't be inspected (e.g. it doesn't exist).
    """
    age = time.time() - path.lstat().st_mtime
    return ttl > 0 and ttl <= age


class IconCache:
    """Icon cache stored as plain files in a single directory."""

    cache_dir: Path
    ttl: int
    negttl: int

    def __init__(self, cache_dir: Path, ttl: int, negttl: int) -> None:
        self.cache_dir = cache_dir
        self.ttl = ttl
        self.negttl = negttl

    def icon_path(self, domain: str) -> Path:
        """Path of the cached icon for a domain."""
        return self.cache_dir / f"{domain}{ICON_FILE_SUFFIX}"

    def miss_marker_path(self, domain: str) -> Path:
        """Path of the negative cache marker for a domain."""
        return self.cache_dir / f"{domain}{ICON_FILE_SUFFIX}{MISS_MARKER_SUFFIX}"

    def _is_negcached(self, domain: str) -> bool:
        marker = self.miss_marker_path(domain)
        try:
            expired = is_expired(marker, self.negttl)
        except OSError:
            # The marker is missing or inaccessible in some way.
            return False

        if not expired:
            return True

        # No longer negatively cached, drop the marker.
        try:
            marker.unlink(missing_ok=True)
        except OSError as e:
            logger.error(f"Could not remove negative cache indicator for icon {domain}: {e}")
        return False

    def _read_fresh_icon(self, domain: str) -> bytes | None:
        path = self.icon_path(domain)
        try:
            if is_expired(path, self.ttl):
                return None
            return path.read_bytes()
        except OSError:
            return None

    def _lookup(self, domain: str) -> CacheLookup:
        if self._is_negcached(domain):
            return CacheLookup.negative()

        icon = self._read_fresh_icon(domain)
        if icon is None:
            return CacheLookup.miss()
        return CacheLookup.hit(icon)

    async def get(self, domain: str) -> CacheLookup:
        """Look up a domain. Filesystem errors are reported as cache misses."""
        return await asyncio.to_thread(self._lookup, domain)

    def _write(self, path: Path, content: bytes) -> None:
        try:
            path.write_bytes(content)
        except FileNotFoundError:
            self.cache_dir.mkdir(parents=True, exist_ok=True)
            path.write_bytes(content)

    def _save(self, path: Path, content: bytes) -> bool:
        try:
            self._write(path, content)
        except OSError as e:
            logger.info(f"Icon save error for {path}: {e}")
            return False
        return True

    def _save_hit(self, domain: str, icon: bytes) -> None:
        if self._save(self.icon_path(domain), icon):
            # A stale marker must not shadow the icon once the negative TTL is reconsidered.
            self.miss_marker_path(domain).unlink(missing_ok=True)

    async def put_hit(self, domain: str, icon: bytes) -> None:
        """Store a downloaded icon. Write failures are logged and ignored."""
        try:
            await asyncio.to_thread(self._save_hit, domain, icon)
        except OSError as e:
            logger.info(f"Could not clear negative cache indicator for icon {domain}: {e}")

    async def put_miss(self, domain: str) -> None:
        """Record a failed resolution. Write failures are logged and ignored."""
        await asyncio.to_thread(self._save, self.miss_marker_path(domain), b"")

    def _check_writable(self) -> bool:
        try:
            self.cache_dir.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(dir=self.cache_dir, prefix=".heartbeat-"):
                pass
        except OSError as e:
            logger.warning(f"Icon cache directory {self.cache_dir} is not writable: {e}")
            return False
        return True

    async def is_writable(self) -> bool:
        """Check that icons can be stored, creating the cache directory if needed."""
        return await asyncio.to_thread(self._check_writable)

"""Cache update flow: fetch, stage, commit.

:class:`CacheUpdater` wires the three cache components together. It adds no
error handling of its own: every :class:`~tldrview.exceptions.TldrError`
from the fetcher or extractor reaches the caller unmodified, and the CLI
prints it as ``Could not update cache: ...``.
"""

from __future__ import annotations

from datetime import timedelta

from tldrview.cache.extractor import ArchiveExtractor
from tldrview.cache.fetcher import ArchiveFetcher
from tldrview.cache.store import CacheStore
from tldrview.models import UpdatesConfig
from tldrview.output import debug


class CacheUpdater:
    """Replace the cache wholesale with the contents of an archive.

    Args:
        store: Cache to replace.
        fetcher: Source of archive bytes.
        extractor: Unpacker for the fetched bytes. A default
            :class:`ArchiveExtractor` is used when omitted.
    """

    def __init__(
        self,
        store: CacheStore,
        fetcher: ArchiveFetcher,
        extractor: ArchiveExtractor | None = None,
    ) -> None:
        self._store = store
        self._fetcher = fetcher
        self._extractor = extractor or ArchiveExtractor()

    def update(self, source: str) -> None:
        """Fetch *source*, unpack it, and swap it in as the live cache.

        On any failure the previous cache, if there was one, is left intact.
        """
        data = self._fetcher.fetch(source)
        with self._store.staging_dir() as staging:
            root = self._extractor.extract(data, staging)
            self._store.replace_with(root)
        debug(f"Cache updated from {source}")


def should_auto_update(store: CacheStore, updates: UpdatesConfig) -> bool:
    """Return True if auto-update is enabled and the cache is missing or due."""
    if not updates.auto_update:
        return False
    if not store.exists():
        return True
    return store.age() > timedelta(hours=updates.auto_update_interval_hours)

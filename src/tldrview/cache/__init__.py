"""Page cache lifecycle for tldrview.

This package owns everything between "bytes somewhere" and "a page on
disk":

* :class:`ArchiveFetcher` -- reads archive bytes from a path or URL.
* :class:`ArchiveExtractor` -- unpacks a ``.tar.gz`` into a staging directory.
* :class:`CacheStore` -- freshness queries, page lookup, clearing, and the
  atomic swap that commits a staged tree.
* :class:`CacheUpdater` -- runs the three in sequence.
"""

from tldrview.cache.extractor import ArchiveExtractor
from tldrview.cache.fetcher import ArchiveFetcher, networking_enabled
from tldrview.cache.store import MAX_CACHE_AGE, CacheStore, current_platform, read_page_file
from tldrview.cache.updater import CacheUpdater, should_auto_update

__all__ = [
    "ArchiveExtractor",
    "ArchiveFetcher",
    "CacheStore",
    "CacheUpdater",
    "MAX_CACHE_AGE",
    "current_platform",
    "networking_enabled",
    "read_page_file",
    "should_auto_update",
]

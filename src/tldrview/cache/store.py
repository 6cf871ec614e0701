"""On-disk page cache: freshness, lookup, clearing, and atomic replacement.

Layout under the cache root::

    <cache_root>/
        tldr-pages/            # live cache; its mtime marks the last update
            pages/
                common/tar.md
                linux/apt.md
                osx/brew.md
                ...
        .staging-XXXX/         # present only while an update runs

:class:`CacheStore` is the only component that reads or writes this tree.
The live directory is either absent or fully populated: updates are staged
in a sibling directory and committed by rename (see :meth:`CacheStore.replace_with`).
A non-empty directory cannot be renamed over another one, so the commit is
two renames (live aside, staged in). Between them the live directory is
briefly absent, and a concurrent reader sees "Cache not found" rather than
a partial tree.

Page lookup order, for a requested platform ``P``:

1. ``pages/P/``
2. ``pages/common/``
3. every other platform directory, alphabetically

The first directory holding ``<name>.md`` wins.
"""

from __future__ import annotations

import os
import shutil
import sys
import tempfile
import time
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import timedelta
from pathlib import Path

from tldrview.cache.extractor import PAGES_DIR_NAME
from tldrview.exceptions import CacheNotFoundError, PageNotFoundError
from tldrview.models import Page
from tldrview.output import debug

LIVE_DIR_NAME = "tldr-pages"
COMMON_PLATFORM = "common"
PAGE_SUFFIX = ".md"

MAX_CACHE_AGE = timedelta(days=30)
"""Cache age beyond which a staleness warning is shown. Advisory only."""


def current_platform() -> str:
    """Map the running OS onto a tldr platform directory name."""
    if sys.platform.startswith("linux"):
        return "linux"
    if sys.platform == "darwin":
        return "osx"
    if sys.platform in ("win32", "cygwin"):
        return "windows"
    if sys.platform.startswith("sunos"):
        return "sunos"
    if "bsd" in sys.platform:
        return sys.platform.rstrip("0123456789")
    return "linux"


def normalize_page_name(name: str) -> str:
    """Turn user input into a page file stem (``Git Checkout`` -> ``git-checkout``)."""
    return "-".join(name.strip().lower().split())


class CacheStore:
    """Owner of the page cache directory.

    Args:
        cache_root: Directory that holds the live cache and staging
            directories. It does not need to exist yet.

    Example::

        store = CacheStore(get_cache_dir())
        if store.exists() and store.is_stale():
            warning("cache is old")
        page = store.lookup("tar", "linux")
    """

    def __init__(self, cache_root: str | Path) -> None:
        self._root = Path(cache_root)

    @property
    def root(self) -> Path:
        """The cache root directory."""
        return self._root

    @property
    def live_dir(self) -> Path:
        """The live cache directory whose mtime tracks the last update."""
        return self._root / LIVE_DIR_NAME

    @property
    def pages_dir(self) -> Path:
        return self.live_dir / PAGES_DIR_NAME

    # ------------------------------------------------------------------ #
    # Freshness
    # ------------------------------------------------------------------ #

    def exists(self) -> bool:
        """Return True if a completed update has populated the cache."""
        return self.live_dir.is_dir()

    def age(self) -> timedelta:
        """Time since the last successful update.

        Raises:
            CacheNotFoundError: If the cache does not exist.
        """
        try:
            mtime = self.live_dir.stat().st_mtime
        except FileNotFoundError as exc:
            raise CacheNotFoundError(_cache_not_found_message()) from exc
        return timedelta(seconds=max(0.0, time.time() - mtime))

    def is_stale(self, max_age: timedelta = MAX_CACHE_AGE) -> bool:
        """Return True if the cache exists and is older than *max_age*."""
        return self.exists() and self.age() > max_age

    # ------------------------------------------------------------------ #
    # Invalidation
    # ------------------------------------------------------------------ #

    def clear(self) -> bool:
        """Delete the cache root and everything in it.

        Clearing an absent cache is not an error.

        Returns:
            ``True`` if something was removed, ``False`` if the cache was
            already absent.
        """
        if not self._root.exists():
            return False
        debug(f"Removing {self._root}")
        shutil.rmtree(self._root)
        return True

    # ------------------------------------------------------------------ #
    # Two-phase update
    # ------------------------------------------------------------------ #

    @contextmanager
    def staging_dir(self) -> Iterator[Path]:
        """Yield a fresh, empty directory next to the live cache.

        The directory lives under the cache root so that the final rename in
        :meth:`replace_with` never crosses a filesystem boundary. Whatever is
        left in it is removed on exit.
        """
        self._root.mkdir(parents=True, exist_ok=True)
        path = Path(tempfile.mkdtemp(prefix=".staging-", dir=self._root))
        try:
            yield path
        finally:
            shutil.rmtree(path, ignore_errors=True)

    def replace_with(self, extracted_dir: Path) -> None:
        """Commit *extracted_dir* as the new live cache.

        Phase one moves the current live directory aside; phase two renames
        the staged tree into its place. If phase two fails the previous tree
        is moved back. A reader racing the commit sees the old cache, no
        cache for the instant between the two renames, or the new cache.
        The old tree is deleted only after the commit, and the live
        directory's mtime is set to now.

        Args:
            extracted_dir: Directory holding ``pages/``, normally returned by
                :meth:`~tldrview.cache.extractor.ArchiveExtractor.extract`.
                Must be on the same filesystem as the cache root.
        """
        self._root.mkdir(parents=True, exist_ok=True)
        live = self.live_dir
        backup: Path | None = None

        if live.exists():
            backup = Path(tempfile.mkdtemp(prefix=".previous-", dir=self._root)) / LIVE_DIR_NAME
            os.rename(live, backup)

        try:
            os.rename(extracted_dir, live)
        except OSError:
            if backup is not None:
                os.rename(backup, live)
                backup.parent.rmdir()
            raise

        os.utime(live, None)
        if backup is not None:
            shutil.rmtree(backup.parent, ignore_errors=True)
        debug(f"Cache committed at {live}")

    # ------------------------------------------------------------------ #
    # Lookup
    # ------------------------------------------------------------------ #

    def platforms(self) -> list[str]:
        """Return the platform directory names in the cache, sorted."""
        if not self.pages_dir.is_dir():
            return []
        return sorted(p.name for p in self.pages_dir.iterdir() if p.is_dir())

    def search_order(self, platform: str) -> list[str]:
        """Return the platform directories to search, in priority order."""
        order = [platform]
        if platform != COMMON_PLATFORM:
            order.append(COMMON_PLATFORM)
        order.extend(p for p in self.platforms() if p not in order)
        return order

    def lookup(self, name: str, platform: str) -> Page:
        """Find the page for *name*, preferring *platform*.

        Args:
            name: Command name as typed by the user; normalised with
                :func:`normalize_page_name`.
            platform: Preferred platform directory (``linux``, ``osx``, ...).

        Returns:
            The first matching :class:`~tldrview.models.Page` in
            :meth:`search_order`.

        Raises:
            CacheNotFoundError: If the cache has never been populated.
            PageNotFoundError: If no platform directory holds the page.
        """
        if not self.exists():
            raise CacheNotFoundError(_cache_not_found_message())

        stem = normalize_page_name(name)
        for candidate in self.search_order(platform):
            path = self.pages_dir / candidate / f"{stem}{PAGE_SUFFIX}"
            if path.is_file():
                debug(f"Found {stem} in {candidate}")
                return Page(
                    name=stem,
                    platform=candidate,
                    path=path,
                    text=path.read_text(encoding="utf-8"),
                )

        raise PageNotFoundError(f"Page `{stem}` not found in cache")

    def list_pages(self, platform: str) -> list[str]:
        """Return sorted page names available for *platform* (including ``common``).

        Raises:
            CacheNotFoundError: If the cache has never been populated.
        """
        if not self.exists():
            raise CacheNotFoundError(_cache_not_found_message())

        names: set[str] = set()
        for candidate in (platform, COMMON_PLATFORM):
            directory = self.pages_dir / candidate
            if directory.is_dir():
                names.update(
                    p.stem for p in directory.iterdir()
                    if p.is_file() and p.suffix == PAGE_SUFFIX
                )
        return sorted(names)


def read_page_file(path: str | Path) -> Page:
    """Load a page from an explicit file path (``tldr --render FILE``).

    Raises:
        PageNotFoundError: If the file cannot be read.
    """
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise PageNotFoundError(
            f"Could not open file: {path}: {exc.strerror or exc}"
        ) from exc
    return Page(name=path.stem, platform=None, path=path, text=text)


def _cache_not_found_message() -> str:
    return "Cache not found. Please run `tldr --update`."

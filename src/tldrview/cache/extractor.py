"""Validate and unpack a gzip-compressed page tarball into a staging directory.

Extraction is the *stage* half of the two-phase cache update: it only ever
writes into a fresh directory handed to it by
:meth:`~tldrview.cache.store.CacheStore.staging_dir`. Swapping the staged
tree into the live cache is the *commit* half and belongs to
:meth:`~tldrview.cache.store.CacheStore.replace_with`.

Archives published by the tldr project wrap the page tree in a single
top-level directory (``tldr-main/pages/...``); locally built archives may
put ``pages/`` at the top. :meth:`ArchiveExtractor.extract` accepts both and
returns the directory that holds ``pages/``.
"""

from __future__ import annotations

import gzip
import io
import tarfile
import zlib
from pathlib import Path

from tldrview.exceptions import UnpackError
from tldrview.output import debug

PAGES_DIR_NAME = "pages"


class ArchiveExtractor:
    """Unpack archive bytes produced by :class:`~tldrview.cache.fetcher.ArchiveFetcher`."""

    def extract(self, data: bytes, target_dir: Path) -> Path:
        """Decompress and untar *data* into *target_dir*.

        Members are extracted with the tarfile ``data`` filter, which rejects
        absolute paths, parent-directory traversal and links that point
        outside *target_dir*.

        Args:
            data: Raw ``.tar.gz`` bytes.
            target_dir: An existing, empty staging directory.

        Returns:
            The directory inside *target_dir* that contains ``pages/``.

        Raises:
            UnpackError: The bytes are not gzip data, the tar stream is
                corrupt or unsafe, or the archive holds no ``pages/`` tree.
        """
        try:
            raw = gzip.decompress(data)
        except (OSError, EOFError, zlib.error) as exc:
            raise UnpackError(f"Could not unpack compressed data: {exc}") from exc

        try:
            with tarfile.open(fileobj=io.BytesIO(raw), mode="r:") as archive:
                archive.extractall(target_dir, filter="data")
        except (tarfile.TarError, OSError) as exc:
            raise UnpackError(f"Could not read tar archive: {exc}") from exc

        root = find_pages_root(target_dir)
        debug(f"Unpacked archive into {root}")
        return root


def find_pages_root(directory: Path) -> Path:
    """Return the directory under *directory* that holds the ``pages/`` tree.

    Raises:
        UnpackError: If neither *directory* nor its single top-level
            subdirectory contains ``pages/``.
    """
    if (directory / PAGES_DIR_NAME).is_dir():
        return directory

    children = [p for p in directory.iterdir() if p.is_dir()]
    if len(children) == 1 and (children[0] / PAGES_DIR_NAME).is_dir():
        return children[0]

    raise UnpackError("Archive does not contain a pages directory")

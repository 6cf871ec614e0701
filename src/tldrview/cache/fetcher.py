"""Obtain raw archive bytes from a local file or an HTTP(S) URL.

:class:`ArchiveFetcher` is the first stage of a cache update. It makes
exactly one attempt and does not look at what it fetched: a URL that serves
an HTML page instead of a tarball still yields bytes, and the failure is
reported later by :class:`~tldrview.cache.extractor.ArchiveExtractor`.

A *source* counts as a URL when it starts with a scheme of at least two
characters followed by a colon (``https://...``, ``httpsss:...``). The
two-character minimum keeps Windows drive letters (``C:\\pages.tar.gz``)
on the path side.
"""

from __future__ import annotations

import os
import re
from pathlib import Path
from urllib.parse import urlsplit

import httpx

from tldrview.exceptions import FetchError, NetworkingDisabledError, UnsupportedUrlSchemeError
from tldrview.output import debug

NO_NETWORK_ENV = "TLDRVIEW_NO_NETWORK"
"""Setting this variable to any non-empty value disables networking support."""

_ALLOWED_SCHEMES = ("http", "https")
_URL_RE = re.compile(r"^[A-Za-z][A-Za-z0-9+.\-]+:")


def networking_enabled() -> bool:
    """Return whether this installation may fetch archives over the network."""
    return not os.environ.get(NO_NETWORK_ENV)


def is_url(source: str) -> bool:
    """Return True if *source* should be treated as a URL rather than a path."""
    return _URL_RE.match(source) is not None


class ArchiveFetcher:
    """Fetch archive bytes for a cache update.

    Args:
        networking: Whether URLs may be fetched. When ``False`` every URL
            source raises :class:`~tldrview.exceptions.NetworkingDisabledError`.
        timeout: Timeout in seconds handed to httpx for the single request.

    Example::

        fetcher = ArchiveFetcher(networking=networking_enabled())
        data = fetcher.fetch("https://github.com/tldr-pages/tldr/archive/main.tar.gz")
    """

    def __init__(self, networking: bool = True, timeout: float = 30.0) -> None:
        self._networking = networking
        self._timeout = timeout

    @property
    def networking(self) -> bool:
        """Whether URL sources are permitted."""
        return self._networking

    def fetch(self, source: str) -> bytes:
        """Return the raw bytes behind *source*.

        Args:
            source: A filesystem path or an ``http``/``https`` URL.

        Returns:
            The unmodified file contents or response body.

        Raises:
            NetworkingDisabledError: *source* is a URL and networking is off.
            UnsupportedUrlSchemeError: *source* is a URL with a scheme other
                than ``http`` or ``https``.
            FetchError: The file cannot be opened or the HTTP request fails.
        """
        if is_url(source):
            return self._fetch_url(source)
        return self._fetch_file(source)

    def _fetch_url(self, url: str) -> bytes:
        if not self._networking:
            raise NetworkingDisabledError(
                "This installation was built without networking support; "
                f"cannot update the cache from a network URL: {url}"
            )

        scheme = urlsplit(url).scheme.lower()
        if scheme not in _ALLOWED_SCHEMES:
            raise UnsupportedUrlSchemeError(
                f"HTTP error: URL scheme is not allowed: {scheme}"
            )

        debug(f"Downloading archive from {url}")
        try:
            response = httpx.get(url, timeout=self._timeout, follow_redirects=True)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise FetchError(
                f"HTTP error: status {exc.response.status_code} fetching {url}"
            ) from exc
        except httpx.RequestError as exc:
            raise FetchError(f"HTTP error: {exc}") from exc

        debug(f"Downloaded {len(response.content)} bytes")
        return response.content

    def _fetch_file(self, path: str) -> bytes:
        debug(f"Reading archive from {path}")
        try:
            return Path(path).read_bytes()
        except OSError as exc:
            raise FetchError(f"Could not open file: {path}: {exc.strerror or exc}") from exc

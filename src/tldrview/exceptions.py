"""Exception hierarchy for tldrview.

All exceptions inherit from :class:`TldrError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`tldrview.exit_codes`.
The top-level error handler in :func:`tldrview.app.main` catches
``TldrError`` and exits with the appropriate code, while unexpected
exceptions produce a crash log and exit with :data:`EXIT_GENERIC_FAILURE`.

Subclass hierarchy::

    TldrError (exit 1)
    +-- InvalidUsageError          (exit 2)
    +-- CacheNotFoundError         (exit 3)
    +-- PageNotFoundError          (exit 4)
    +-- NetworkingDisabledError    (exit 5)
    +-- FetchError                 (exit 6)
    |   +-- UnsupportedUrlSchemeError
    +-- UnpackError                (exit 7)
    +-- ConfigError                (exit 1)
"""

from tldrview.exit_codes import (
    EXIT_CACHE_NOT_FOUND,
    EXIT_FETCH_ERROR,
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
    EXIT_NETWORKING_DISABLED,
    EXIT_PAGE_NOT_FOUND,
    EXIT_UNPACK_ERROR,
)


class TldrError(Exception):
    """Base exception for all tldrview errors.

    Every subclass sets a class-level ``exit_code`` corresponding to one of
    the constants in :mod:`tldrview.exit_codes`. The entry point catches
    this exception type and calls ``sys.exit(exc.exit_code)``.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class InvalidUsageError(TldrError):
    """Raised for conflicting or missing CLI arguments."""

    exit_code = EXIT_INVALID_USAGE


class CacheNotFoundError(TldrError):
    """Raised when a page is requested but no cache has been downloaded yet."""

    exit_code = EXIT_CACHE_NOT_FOUND


class PageNotFoundError(TldrError):
    """Raised when the cache exists but holds no page with the requested name."""

    exit_code = EXIT_PAGE_NOT_FOUND


class NetworkingDisabledError(TldrError):
    """Raised when a network URL is given but networking support is disabled."""

    exit_code = EXIT_NETWORKING_DISABLED


class FetchError(TldrError):
    """Raised when archive bytes cannot be obtained (file I/O or HTTP failure)."""

    exit_code = EXIT_FETCH_ERROR


class UnsupportedUrlSchemeError(FetchError):
    """Raised for URLs whose scheme is neither ``http`` nor ``https``."""


class UnpackError(TldrError):
    """Raised when archive bytes are not a valid gzip-compressed tarball of pages."""

    exit_code = EXIT_UNPACK_ERROR


class ConfigError(TldrError):
    """Raised for configuration problems (invalid TOML, bad colour names, existing seed target)."""

    exit_code = EXIT_GENERIC_FAILURE

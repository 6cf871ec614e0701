"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~tldrview.exceptions.TldrError` subclass.
Shell wrappers can inspect the exit code to tell a missing cache from a
missing page without parsing stderr.

Example::

    $ tldr sl
    $ echo $?
    3   # EXIT_CACHE_NOT_FOUND -- run `tldr --update` first
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred (including configuration errors)."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid or conflicting arguments."""

EXIT_CACHE_NOT_FOUND = 3
"""No page cache exists yet."""

EXIT_PAGE_NOT_FOUND = 4
"""The cache exists but does not contain the requested page."""

EXIT_NETWORKING_DISABLED = 5
"""A network URL was given to an installation without networking support."""

EXIT_FETCH_ERROR = 6
"""The archive could not be read from disk or downloaded."""

EXIT_UNPACK_ERROR = 7
"""The archive could not be decompressed or unpacked."""

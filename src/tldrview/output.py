"""Output system with a strict split between status text and errors.

* **stdout** -- primary data (rendered pages, page lists, the config path)
  plus status lines ("Successfully updated cache.", the cache staleness
  warning). Status lines are suppressed by ``--quiet``; data never is.
* **stderr** -- errors (never suppressed), next-step suggestions and debug
  lines.
* **Colour control** -- respects ``NO_COLOR``, ``TERM=dumb``, and the
  ``--color never`` CLI flag.

The module exposes two layers:

1. :class:`OutputManager` -- a stateful object holding Rich consoles and
   quiet/verbose flags. Created once in :func:`~tldrview.app.tldr_command`
   and installed via :func:`set_output`.
2. Module-level convenience functions (:func:`info`, :func:`error`,
   :func:`debug`, etc.) that delegate to the global ``OutputManager``
   instance so callers do not need to pass the manager around.
"""

from __future__ import annotations

import os
import sys
from typing import Optional

from rich.console import Console
from rich.markup import escape


class OutputManager:
    """Central manager for all CLI output.

    Maintains two Rich :class:`~rich.console.Console` instances -- one for
    stdout and one for stderr. Messages are escaped before printing so that
    paths or URLs containing square brackets are never read as Rich markup,
    and soft wrapping keeps long messages on one line.

    Args:
        no_color: Disable all colour in status and error messages.
        quiet: Suppress informational, success, warning and suggestion
            messages.
        verbose: Enable debug-level messages on stderr.
    """

    def __init__(
        self,
        no_color: bool = False,
        quiet: bool = False,
        verbose: bool = False,
    ) -> None:
        self._no_color = no_color or _should_disable_color()
        self._quiet = quiet
        self._verbose = verbose

        self._stdout = Console(
            file=sys.stdout,
            no_color=self._no_color,
            highlight=False,
            emoji=False,
            soft_wrap=True,
        )
        self._stderr = Console(
            file=sys.stderr,
            no_color=self._no_color,
            stderr=True,
            highlight=False,
            emoji=False,
            soft_wrap=True,
        )

    # ------------------------------------------------------------------ #
    # Data output (stdout)
    # ------------------------------------------------------------------ #

    def print_data(self, text: str) -> None:
        """Write primary output (a rendered page, a page list) to stdout verbatim.

        A rendered page carries its own escape sequences, so this bypasses
        Rich entirely. Never suppressed.
        """
        sys.stdout.write(text)
        sys.stdout.flush()

    # ------------------------------------------------------------------ #
    # Status messages (stdout)
    # ------------------------------------------------------------------ #

    def info(self, message: str) -> None:
        """Print an informational message to stdout. Suppressed by ``--quiet``."""
        if not self._quiet:
            self._print(self._stdout, message)

    def success(self, message: str) -> None:
        """Print a green success message to stdout. Suppressed by ``--quiet``."""
        if not self._quiet:
            self._print(self._stdout, message, "green")

    def warning(self, message: str) -> None:
        """Print a yellow advisory warning to stdout. Suppressed by ``--quiet``.

        Used for conditions that do not stop the command, such as a stale
        cache.
        """
        if not self._quiet:
            self._print(self._stdout, message, "yellow")

    # ------------------------------------------------------------------ #
    # Diagnostics (stderr)
    # ------------------------------------------------------------------ #

    def error(self, message: str) -> None:
        """Print a bold-red error to stderr. Never suppressed.

        Args:
            message: The error text (prefixed with ``Error:`` on output).
        """
        if self._no_color:
            print(f"Error: {message}", file=sys.stderr, flush=True)
        else:
            self._stderr.print(f"[bold red]Error:[/bold red] {escape(message)}")

    def suggest(self, message: str) -> None:
        """Print a dimmed next-step suggestion to stderr. Suppressed by ``--quiet``.

        Args:
            message: The suggestion text (prefixed with an arrow on output).
        """
        if not self._quiet:
            self._print(self._stderr, f"→ {message}", "dim")

    def debug(self, message: str) -> None:
        """Print a debug message to stderr. Only shown when ``--verbose`` is active.

        Args:
            message: The debug text (prefixed with ``[debug]`` on output).
        """
        if self._verbose:
            self._print(self._stderr, f"[debug] {message}", "dim")

    # ------------------------------------------------------------------ #
    # Private helpers
    # ------------------------------------------------------------------ #

    def _print(self, console: Console, message: str, style: Optional[str] = None) -> None:
        if self._no_color:
            print(message, file=console.file, flush=True)
        elif style:
            console.print(f"[{style}]{escape(message)}[/{style}]")
        else:
            console.print(escape(message))


# ------------------------------------------------------------------ #
# Module-level helpers
# ------------------------------------------------------------------ #


def is_tty() -> bool:
    """Check if stdout is a TTY."""
    return hasattr(sys.stdout, "isatty") and sys.stdout.isatty()


def _should_disable_color() -> bool:
    """Check if color should be disabled per clig.dev.

    Returns True when NO_COLOR env var is set (any value) or TERM=dumb.
    """
    if os.environ.get("NO_COLOR") is not None:
        return True
    if os.environ.get("TERM") == "dumb":
        return True
    return False


def should_use_color(mode: str) -> bool:
    """Resolve a ``--color`` mode (``auto``, ``always``, ``never``) to a flag.

    ``auto`` enables colour only for an interactive stdout with colour not
    disabled through the environment.
    """
    if mode == "always":
        return True
    if mode == "never":
        return False
    return is_tty() and not _should_disable_color()


# ------------------------------------------------------------------ #
# Global output instance (set during app startup)
# ------------------------------------------------------------------ #

_output: Optional[OutputManager] = None


def get_output() -> OutputManager:
    """Return the global :class:`OutputManager` instance.

    If no instance has been installed via :func:`set_output`, a default
    ``OutputManager`` is created lazily.
    """
    global _output
    if _output is None:
        _output = OutputManager()
    return _output


def set_output(output: OutputManager) -> None:
    """Install *output* as the global :class:`OutputManager` instance."""
    global _output
    _output = output


def reset_output() -> None:
    """Reset the global :class:`OutputManager` to ``None``.

    Primarily useful in test suites to ensure a clean state between tests.
    """
    global _output
    _output = None


# ------------------------------------------------------------------ #
# Convenience functions that use the global instance
# ------------------------------------------------------------------ #


def print_data(text: str) -> None:
    """Write primary output to stdout via the global OutputManager."""
    get_output().print_data(text)


def info(message: str) -> None:
    """Print info message to stdout via the global OutputManager."""
    get_output().info(message)


def error(message: str) -> None:
    """Print error to stderr via the global OutputManager."""
    get_output().error(message)


def success(message: str) -> None:
    """Print success message to stdout via the global OutputManager."""
    get_output().success(message)


def warning(message: str) -> None:
    """Print warning to stdout via the global OutputManager."""
    get_output().warning(message)


def suggest(message: str) -> None:
    """Print next-step suggestion to stderr via the global OutputManager."""
    get_output().suggest(message)


def debug(message: str) -> None:
    """Print debug message to stderr via the global OutputManager."""
    get_output().debug(message)

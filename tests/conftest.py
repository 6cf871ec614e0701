"""Shared test fixtures for tldrview.

Provides reusable fixtures for loading page fixtures, creating isolated
cache/config environments, building page archives, managing output state,
and running the CLI. These fixtures are automatically discovered by pytest
and available to all test modules without explicit imports.
"""

from __future__ import annotations

import io
import tarfile
from pathlib import Path
from typing import Callable, Optional

import pytest

from tldrview.output import reset_output


FIXTURES_DIR = Path(__file__).parent / "fixtures"

SL_PAGE = """\
# sl

> Steam locomotive running through your terminal.

- Let a steam locomotive run through your terminal:

`sl`
"""

TAR_COMMON_PAGE = """\
# tar

> Archiving utility.

- Extract an archive:

`tar xf {{source.tar}}`
"""

TAR_LINUX_PAGE = """\
# tar

> GNU archiving utility.

- Extract an archive:

`tar xf {{source.tar}}`
"""

DEFAULT_PAGES = {
    "common/sl.md": SL_PAGE,
    "common/tar.md": TAR_COMMON_PAGE,
    "linux/tar.md": TAR_LINUX_PAGE,
    "linux/apt.md": "# apt\n\n> Debian package manager.\n",
    "osx/brew.md": "# brew\n\n> Package manager for macOS.\n",
    "windows/tar.md": "# tar\n\n> Windows tar.\n",
}


# ---------------------------------------------------------------------------
# Auto-reset global output state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager after every test.

    The OutputManager caches references to sys.stdout/sys.stderr at
    creation time.  When Typer's CliRunner redirects those streams during
    a test and the test finishes, the cached references become stale
    ("I/O operation on closed file").  Resetting forces a fresh manager
    to be created on next use.
    """
    yield
    reset_output()


# ---------------------------------------------------------------------------
# Page fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def inkscape_v1() -> str:
    """Inkscape page in the legacy (``#``, ``-``, backtick) syntax."""
    return (FIXTURES_DIR / "inkscape-v1.md").read_text(encoding="utf-8")


@pytest.fixture
def inkscape_v2() -> str:
    """Inkscape page in the current (underline, indented code) syntax."""
    return (FIXTURES_DIR / "inkscape-v2.md").read_text(encoding="utf-8")


@pytest.fixture
def inkscape_default_expected() -> str:
    """Inkscape page rendered with the default style config and colour on."""
    return (
        "\n"
        "  \x1b[1minkscape\x1b[0m\n"
        "\n"
        "  Inkscape is a SVG (Scalable Vectorial Graphics) editing program.\n"
        "\n"
        "  \x1b[32mOpen an SVG file in the Inkscape GUI:\x1b[0m\n"
        "\n"
        "      \x1b[36minkscape \x1b[0m\x1b[4;36mfilename.svg\x1b[0m\n"
        "\n"
        "  \x1b[32mExport an SVG file into a bitmap with the default format (PNG):\x1b[0m\n"
        "\n"
        "      \x1b[36minkscape \x1b[0m\x1b[4;36mfilename.svg\x1b[0m"
        "\x1b[36m -e \x1b[0m\x1b[4;36mfilename.png\x1b[0m\n"
        "\n"
    )


@pytest.fixture
def inkscape_custom_expected() -> str:
    """Inkscape page rendered with ``fixtures/config.toml`` and colour on."""
    return (
        "\n"
        "  \x1b[35minkscape\x1b[0m\n"
        "\n"
        "  \x1b[4;33mInkscape is a SVG (Scalable Vectorial Graphics) editing program.\x1b[0m\n"
        "\n"
        "  \x1b[1;34mOpen an SVG file in the Inkscape GUI:\x1b[0m\n"
        "\n"
        "      \x1b[31minkscape \x1b[0m\x1b[3;38;2;255;135;0mfilename.svg\x1b[0m\n"
        "\n"
        "  \x1b[1;34mExport an SVG file into a bitmap with the default format (PNG):\x1b[0m\n"
        "\n"
        "      \x1b[31minkscape \x1b[0m\x1b[3;38;2;255;135;0mfilename.svg\x1b[0m"
        "\x1b[31m -e \x1b[0m\x1b[3;38;2;255;135;0mfilename.png\x1b[0m\n"
        "\n"
    )


# ---------------------------------------------------------------------------
# Archive fixtures
# ---------------------------------------------------------------------------


def build_archive(pages: dict[str, str], top: Optional[str] = "tldr-main") -> bytes:
    """Build a ``.tar.gz`` holding ``pages/<relative path>`` entries.

    Args:
        pages: Mapping of ``platform/name.md`` to page text.
        top: Top-level directory wrapping ``pages/`` (as in GitHub archives),
            or ``None`` to put ``pages/`` at the archive root.
    """
    buf = io.BytesIO()
    with tarfile.open(fileobj=buf, mode="w:gz") as archive:
        for rel, text in pages.items():
            data = text.encode("utf-8")
            name = f"{top}/pages/{rel}" if top else f"pages/{rel}"
            info = tarfile.TarInfo(name)
            info.size = len(data)
            info.mode = 0o644
            archive.addfile(info, io.BytesIO(data))
    return buf.getvalue()


@pytest.fixture
def archive_bytes() -> Callable[..., bytes]:
    """The :func:`build_archive` helper, for tests that want bytes in memory."""
    return build_archive


@pytest.fixture
def make_archive(tmp_path: Path) -> Callable[..., Path]:
    """Factory writing a page archive into tmp_path and returning its path."""

    def _make(
        pages: Optional[dict[str, str]] = None,
        name: str = "tldr.tar.gz",
        top: Optional[str] = "tldr-main",
    ) -> Path:
        path = tmp_path / name
        path.write_bytes(build_archive(DEFAULT_PAGES if pages is None else pages, top=top))
        return path

    return _make


@pytest.fixture
def archive_file(make_archive: Callable[..., Path]) -> Path:
    """A page archive on disk with the default page set."""
    return make_archive()


# ---------------------------------------------------------------------------
# Environment isolation fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Isolate cache, config and data directories to tmp_path.

    Sets TLDRVIEW_CACHE_DIR, TLDRVIEW_CONFIG_DIR and XDG_DATA_HOME to
    subdirectories of tmp_path so that tests never touch real user
    state, clears variables that change behaviour (networking, colour),
    and changes the working directory to tmp_path.

    Returns:
        The tmp_path root directory for additional file creation.
    """
    monkeypatch.setenv("TLDRVIEW_CACHE_DIR", str(tmp_path / "cache"))
    monkeypatch.setenv("TLDRVIEW_CONFIG_DIR", str(tmp_path / "config"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))
    for var in ["TLDRVIEW_NO_NETWORK", "NO_COLOR", "FORCE_COLOR"]:
        monkeypatch.delenv(var, raising=False)

    monkeypatch.chdir(tmp_path)
    return tmp_path


# ---------------------------------------------------------------------------
# CLI runner fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def cli_runner():
    """Typer CLI test runner.

    Returns a CliRunner instance that captures stdout and stderr
    separately.
    """
    from typer.testing import CliRunner

    return CliRunner()

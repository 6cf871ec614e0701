"""Canonical Pydantic models shared across all tldrview modules.

This is the single source of truth for data shapes in the project. Every other
module imports from here rather than defining its own models. The models fall
into two groups:

**Configuration models** -- serialised as TOML in the user's config directory:
    :class:`TextStyle`, :class:`StyleConfig`, :class:`DisplayConfig`,
    :class:`UpdatesConfig`, and :class:`Config`.

**Page models** -- produced by the cache and the page parser and consumed by
the renderer:
    :class:`Page`, :class:`LineKind`, :class:`Line`, and :class:`ParsedPage`.

All models are frozen: a configuration is loaded once per invocation and a
parsed page is built fresh for every render, and neither changes afterwards.
Use ``model_copy(update=...)`` to derive a modified instance.
"""

from __future__ import annotations

import enum
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from rich.color import Color, ColorParseError

DEFAULT_ARCHIVE_URL = "https://github.com/tldr-pages/tldr/archive/main.tar.gz"
"""Archive used by ``tldr --update`` unless the config names another one."""

# Colour names accepted by older config files that rich spells differently.
_COLOR_ALIASES = {"purple": "magenta"}


# --- Style Config ---


class TextStyle(BaseModel):
    """Display style for one kind of page line.

    Colours accept anything :meth:`rich.color.Color.parse` understands:
    standard names (``red``, ``bright_cyan``), ``#rrggbb`` hex triples, and
    ``color(N)`` 256-colour indices. ``None`` keeps the terminal default.

    Example::

        TextStyle(foreground="cyan", underline=True)
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    foreground: Optional[str] = Field(default=None, description="Text colour")
    background: Optional[str] = Field(default=None, description="Background colour")
    bold: bool = False
    italic: bool = False
    underline: bool = False

    @field_validator("foreground", "background", mode="before")
    @classmethod
    def _check_color(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        if not isinstance(value, str):
            raise ValueError(f"colour must be a string, got {type(value).__name__}")
        name = _COLOR_ALIASES.get(value.strip().lower(), value.strip())
        try:
            Color.parse(name)
        except ColorParseError as exc:
            raise ValueError(f"unknown colour {value!r}") from exc
        return name


class StyleConfig(BaseModel):
    """Styles bound to each line kind of a rendered page.

    ``example_variable`` is applied to ``{{placeholder}}`` spans inside
    example commands; the rest of the command uses ``example_code``.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    title: TextStyle = Field(default_factory=lambda: TextStyle(bold=True))
    description: TextStyle = Field(default_factory=TextStyle)
    example_text: TextStyle = Field(default_factory=lambda: TextStyle(foreground="green"))
    example_code: TextStyle = Field(default_factory=lambda: TextStyle(foreground="cyan"))
    example_variable: TextStyle = Field(
        default_factory=lambda: TextStyle(foreground="cyan", underline=True)
    )


class DisplayConfig(BaseModel):
    """Global rendering toggles."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    compact: bool = Field(default=False, description="Omit blank spacer lines")
    raw: bool = Field(default=False, description="Print the page source unmodified")
    show_title: bool = Field(default=True, description="Render the page title line")


class UpdatesConfig(BaseModel):
    """Where cache updates come from and whether they run automatically."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    archive_url: str = Field(
        default=DEFAULT_ARCHIVE_URL, description="Archive URL or path used by --update"
    )
    auto_update: bool = Field(
        default=False, description="Update the cache before rendering when it is due"
    )
    auto_update_interval_hours: int = Field(
        default=720, ge=1, description="Cache age that triggers an auto-update"
    )


class Config(BaseModel):
    """User configuration persisted at ``~/.config/tldrview/config.toml``.

    Loaded by :func:`~tldrview.config.load_config` and written out by
    :func:`~tldrview.config.seed_config`. Every section is optional; a
    missing file or section falls back to the defaults declared here.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    style: StyleConfig = Field(default_factory=StyleConfig)
    display: DisplayConfig = Field(default_factory=DisplayConfig)
    updates: UpdatesConfig = Field(default_factory=UpdatesConfig)


# --- Page Models ---


class Page(BaseModel):
    """A single command's cheat-sheet document as read from disk."""

    model_config = ConfigDict(frozen=True)

    name: str
    platform: Optional[str] = Field(
        default=None, description="Platform directory, or None for explicit files"
    )
    path: Path
    text: str


class LineKind(str, enum.Enum):
    """Roles a page line can play, independent of the marker syntax used."""

    TITLE = "title"
    DESCRIPTION = "description"
    EXAMPLE_DESCRIPTION = "example_description"
    EXAMPLE_COMMAND = "example_command"


class Line(BaseModel):
    """One classified page line with its marker removed.

    For :attr:`LineKind.EXAMPLE_COMMAND` the text still contains the
    ``{{placeholder}}`` markers; the renderer resolves them.
    """

    model_config = ConfigDict(frozen=True)

    kind: LineKind
    text: str


class ParsedPage(BaseModel):
    """Ordered lines of a page, in source document order."""

    model_config = ConfigDict(frozen=True)

    lines: tuple[Line, ...] = ()

    def of_kind(self, kind: LineKind) -> list[Line]:
        """Return the lines of one kind, preserving order."""
        return [line for line in self.lines if line.kind == kind]

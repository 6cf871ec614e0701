"""Render a parsed page to terminal text.

Styles are turned into ANSI escape sequences with
:meth:`rich.style.Style.render` against a fixed colour system, not through a
:class:`rich.console.Console`. The output therefore does not depend on the
terminal Rich detects, its width, or its colour depth, and the same
``(ParsedPage, StyleConfig)`` pair always renders to the same bytes.

Layout of a rendered page (``compact`` removes every blank line)::

    <blank>
      title
    <blank>
      description line
      description line
    <blank>
      Example description:
    <blank>
          example command {{with}} {{placeholders}}
    <blank>
"""

from __future__ import annotations

import re

from rich.color import ColorSystem
from rich.style import Style

from tldrview.models import DisplayConfig, Line, LineKind, ParsedPage, StyleConfig, TextStyle

_PLACEHOLDER_RE = re.compile(r"\{\{(.*?)\}\}")
# Named colours keep their standard SGR codes under TRUECOLOR; only hex
# and 256-colour values produce extended sequences.
_COLOR_SYSTEM = ColorSystem.TRUECOLOR

_TEXT_INDENT = "  "
_COMMAND_INDENT = "      "

# Consecutive lines of these kinds form one block with no blank line between them.
_BLOCK_KINDS = (LineKind.DESCRIPTION, LineKind.EXAMPLE_COMMAND)


def to_rich_style(style: TextStyle) -> Style:
    """Convert a config :class:`~tldrview.models.TextStyle` into a Rich style."""
    return Style(
        color=style.foreground,
        bgcolor=style.background,
        bold=style.bold,
        italic=style.italic,
        underline=style.underline,
    )


class Renderer:
    """Turn :class:`~tldrview.models.ParsedPage` values into styled text.

    Args:
        style: Styles for each line kind and for command placeholders.
        display: Layout toggles (``compact``, ``show_title``). ``raw`` is
            honoured by the caller, which skips parsing altogether and uses
            :meth:`render_raw`.
        color: Emit ANSI escape sequences. When ``False`` the same layout is
            produced as plain text.

    Example::

        renderer = Renderer(StyleConfig(), DisplayConfig(), color=False)
        print(renderer.render(parse_page(text)), end="")
    """

    def __init__(self, style: StyleConfig, display: DisplayConfig, color: bool = True) -> None:
        self._display = display
        self._color = color
        self._styles = {
            LineKind.TITLE: to_rich_style(style.title),
            LineKind.DESCRIPTION: to_rich_style(style.description),
            LineKind.EXAMPLE_DESCRIPTION: to_rich_style(style.example_text),
            LineKind.EXAMPLE_COMMAND: to_rich_style(style.example_code),
        }
        self._variable_style = to_rich_style(style.example_variable)

    def render(self, page: ParsedPage) -> str:
        """Render *page* to a string ending in a newline."""
        compact = self._display.compact
        rows: list[str] = [] if compact else [""]

        previous: LineKind | None = None
        for line in page.lines:
            if line.kind == LineKind.TITLE and not self._display.show_title:
                continue
            if not compact and previous is not None and not (
                line.kind == previous and line.kind in _BLOCK_KINDS
            ):
                rows.append("")
            rows.append(self._render_line(line))
            previous = line.kind

        if not compact:
            rows.append("")
        return "\n".join(rows) + "\n"

    def render_raw(self, text: str) -> str:
        """Return the page source unchanged, newline-terminated."""
        return text if text.endswith("\n") else text + "\n"

    def _render_line(self, line: Line) -> str:
        if line.kind == LineKind.EXAMPLE_COMMAND:
            return _COMMAND_INDENT + self._render_command(line.text)
        return _TEXT_INDENT + self._paint(line.text, self._styles[line.kind])

    def _render_command(self, text: str) -> str:
        """Render a command, styling ``{{placeholder}}`` spans separately."""
        code_style = self._styles[LineKind.EXAMPLE_COMMAND]
        parts: list[str] = []
        position = 0
        for match in _PLACEHOLDER_RE.finditer(text):
            parts.append(self._paint(text[position:match.start()], code_style))
            parts.append(self._paint(match.group(1), self._variable_style))
            position = match.end()
        parts.append(self._paint(text[position:], code_style))
        return "".join(parts)

    def _paint(self, text: str, style: Style) -> str:
        if not self._color:
            return text
        return style.render(text, color_system=_COLOR_SYSTEM)

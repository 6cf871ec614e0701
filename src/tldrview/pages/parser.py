"""Classify the lines of a tldr page into title, description, and examples.

Two marker syntaxes exist in the wild and :func:`parse_page` accepts both,
deciding line by line so that half-migrated documents still parse:

* **Title** -- ``# tar`` (v1), or ``tar`` above a line of ``=`` (v2).
* **Description** -- ``> Archiver.`` in both.
* **Example description** -- ``- List files:`` (v1), or ``List files:`` (v2).
* **Example command** -- a backtick-quoted line (v1), or a line indented by
  four spaces (v2).

Parsing never fails. Blank lines, title underlines, code fences, subheadings,
thematic breaks and HTML comments are skipped. Any other unindented line is
example text, whatever character it opens with, so a page written against a
newer revision of the format degrades gracefully instead of raising.
"""

from __future__ import annotations

import re
from typing import Optional

from tldrview.models import Line, LineKind, ParsedPage

_CODE_INDENT = "    "
_FENCES = ("```", "~~~")
_UNDERLINE_RE = re.compile(r"^=+\s*$")
# Markdown constructs that carry no page content: subheadings, thematic
# breaks and HTML comments. Every other unindented line is example text.
_NON_CONTENT_RE = re.compile(r"^(#{2,6}(\s|$)|#$|-{3,}$|<!--)")


def classify_line(line: str) -> Optional[Line]:
    """Return the :class:`~tldrview.models.Line` for one source line.

    The setext (``===``) title form spans two lines and is recognised by
    :func:`parse_page`; on its own its text line reads as an example
    description.

    Args:
        line: A single line without its newline.

    Returns:
        The classified line with its marker removed, or ``None`` when the
        line carries no content.
    """
    text = line.rstrip()
    if not text.strip():
        return None

    if text.startswith("# "):
        return Line(kind=LineKind.TITLE, text=text[2:].strip())
    if text.startswith(">"):
        return Line(kind=LineKind.DESCRIPTION, text=text[1:].strip())
    if text.startswith("- "):
        return Line(kind=LineKind.EXAMPLE_DESCRIPTION, text=text[2:].strip())
    if text.startswith(_FENCES) or _UNDERLINE_RE.match(text) or _NON_CONTENT_RE.match(text):
        return None
    if len(text) >= 2 and text.startswith("`") and text.endswith("`"):
        return Line(kind=LineKind.EXAMPLE_COMMAND, text=text[1:-1])
    if text.startswith(_CODE_INDENT):
        return Line(kind=LineKind.EXAMPLE_COMMAND, text=text[len(_CODE_INDENT):])
    if text[0].isspace():
        return None
    # v2 example descriptions may open with any character, `sudo` or -x included.
    return Line(kind=LineKind.EXAMPLE_DESCRIPTION, text=text)


def parse_page(text: str) -> ParsedPage:
    """Parse a page document into a :class:`~tldrview.models.ParsedPage`.

    Example::

        page = parse_page("# tar\\n\\n> Archiver.\\n\\n- List:\\n\\n`tar tf {{f}}`\\n")
        [line.kind for line in page.lines]
        # [TITLE, DESCRIPTION, EXAMPLE_DESCRIPTION, EXAMPLE_COMMAND]
    """
    source = text.lstrip("\ufeff").splitlines()
    lines: list[Line] = []

    i = 0
    while i < len(source):
        current = source[i]
        following = source[i + 1] if i + 1 < len(source) else None
        if (
            following is not None
            and _UNDERLINE_RE.match(following)
            and current.strip()
            and not current[0].isspace()
        ):
            lines.append(Line(kind=LineKind.TITLE, text=current.strip()))
            i += 2
            continue

        line = classify_line(current)
        if line is not None:
            lines.append(line)
        i += 1

    return ParsedPage(lines=tuple(lines))

"""Tests for page line classification and parsing."""

from __future__ import annotations

import pytest

from tldrview.models import Line, LineKind
from tldrview.pages import classify_line, parse_page


class TestClassifyLine:
    @pytest.mark.parametrize(
        ("line", "kind", "text"),
        [
            ("# tar", LineKind.TITLE, "tar"),
            ("> Archiving utility.", LineKind.DESCRIPTION, "Archiving utility."),
            (">No space after marker.", LineKind.DESCRIPTION, "No space after marker."),
            ("- List files:", LineKind.EXAMPLE_DESCRIPTION, "List files:"),
            ("List files:", LineKind.EXAMPLE_DESCRIPTION, "List files:"),
            ("`tar tf {{file}}`", LineKind.EXAMPLE_COMMAND, "tar tf {{file}}"),
            ("    tar tf {{file}}", LineKind.EXAMPLE_COMMAND, "tar tf {{file}}"),
        ],
    )
    def test_recognised_markers(self, line: str, kind: LineKind, text: str) -> None:
        assert classify_line(line) == Line(kind=kind, text=text)

    @pytest.mark.parametrize(
        "line",
        [
            "",
            "   ",
            "```",
            "```sh",
            "===",
            "#",
            "## Subheading",
            "###",
            "---",
            "<!-- comment -->",
            "~~~",
            "  two-space indent",
            "\tTabbed",
        ],
    )
    def test_skipped_lines(self, line: str) -> None:
        assert classify_line(line) is None

    @pytest.mark.parametrize(
        "line",
        [
            "`sudo` is needed to run:",
            "`unterminated",
            "-x flag usage:",
            "* Wildcard usage:",
            "+ Positive offsets:",
            "<input> redirection:",
            "| Pipe into another command:",
            "~ Home directory:",
            "! History expansion:",
            "#hashtag search:",
        ],
    )
    def test_unmarked_text_is_example_description(self, line: str) -> None:
        assert classify_line(line) == Line(kind=LineKind.EXAMPLE_DESCRIPTION, text=line)

    def test_trailing_whitespace_ignored(self) -> None:
        assert classify_line("# tar   ") == Line(kind=LineKind.TITLE, text="tar")

    def test_command_keeps_inner_spacing(self) -> None:
        line = classify_line("`echo  {{a}}  b`")
        assert line is not None
        assert line.text == "echo  {{a}}  b"

    def test_setext_title_alone_is_example_description(self) -> None:
        assert classify_line("tar") == Line(kind=LineKind.EXAMPLE_DESCRIPTION, text="tar")


class TestParsePage:
    def test_v1_and_v2_are_equivalent(self, inkscape_v1: str, inkscape_v2: str) -> None:
        assert parse_page(inkscape_v1) == parse_page(inkscape_v2)

    def test_v1_structure(self, inkscape_v1: str) -> None:
        page = parse_page(inkscape_v1)

        assert [line.kind for line in page.lines] == [
            LineKind.TITLE,
            LineKind.DESCRIPTION,
            LineKind.EXAMPLE_DESCRIPTION,
            LineKind.EXAMPLE_COMMAND,
            LineKind.EXAMPLE_DESCRIPTION,
            LineKind.EXAMPLE_COMMAND,
        ]
        assert page.lines[0].text == "inkscape"
        assert page.lines[-1].text == "inkscape {{filename.svg}} -e {{filename.png}}"

    def test_setext_title(self) -> None:
        page = parse_page("tar\n===\n\n> Archiver.\n")
        assert page.lines == (
            Line(kind=LineKind.TITLE, text="tar"),
            Line(kind=LineKind.DESCRIPTION, text="Archiver."),
        )

    def test_underline_without_title_is_skipped(self) -> None:
        page = parse_page("\n===\n> Archiver.\n")
        assert page.lines == (Line(kind=LineKind.DESCRIPTION, text="Archiver."),)

    def test_indented_line_above_underline_is_not_title(self) -> None:
        page = parse_page("    tar\n===\n")
        assert page.of_kind(LineKind.TITLE) == []
        assert page.of_kind(LineKind.EXAMPLE_COMMAND) == [
            Line(kind=LineKind.EXAMPLE_COMMAND, text="tar")
        ]

    def test_mixed_syntax(self) -> None:
        text = (
            "# tar\n"
            "\n"
            "> Archiver.\n"
            "\n"
            "- List files:\n"
            "\n"
            "    tar tf {{file}}\n"
            "\n"
            "Extract files:\n"
            "\n"
            "`tar xf {{file}}`\n"
        )
        page = parse_page(text)
        assert [line.kind for line in page.lines] == [
            LineKind.TITLE,
            LineKind.DESCRIPTION,
            LineKind.EXAMPLE_DESCRIPTION,
            LineKind.EXAMPLE_COMMAND,
            LineKind.EXAMPLE_DESCRIPTION,
            LineKind.EXAMPLE_COMMAND,
        ]

    def test_multiline_description(self) -> None:
        page = parse_page("# tar\n> Line one.\n> Line two.\n")
        assert [line.text for line in page.of_kind(LineKind.DESCRIPTION)] == [
            "Line one.",
            "Line two.",
        ]

    def test_crlf_and_bom(self) -> None:
        page = parse_page("\ufeff# tar\r\n\r\n> Archiver.\r\n")
        assert page.lines == (
            Line(kind=LineKind.TITLE, text="tar"),
            Line(kind=LineKind.DESCRIPTION, text="Archiver."),
        )

    def test_unknown_constructs_never_fail(self) -> None:
        page = parse_page("## Notes\n---\n<!-- note -->\n```\ncode\n```\n")
        # Only the bare text line survives, as an example description.
        assert page.lines == (Line(kind=LineKind.EXAMPLE_DESCRIPTION, text="code"),)

    def test_empty_document(self) -> None:
        assert parse_page("").lines == ()

    def test_order_preserved(self) -> None:
        page = parse_page("`b`\n- a\n# t\n")
        assert [line.kind for line in page.lines] == [
            LineKind.EXAMPLE_COMMAND,
            LineKind.EXAMPLE_DESCRIPTION,
            LineKind.TITLE,
        ]

    @pytest.mark.parametrize(
        "description",
        [
            "`sudo` is needed to run:",
            "-x flag usage:",
            "* Wildcard usage:",
            "<input> redirection:",
        ],
    )
    def test_v1_and_v2_equivalent_for_any_description(self, description: str) -> None:
        v1 = f"# foo\n\n> Desc.\n\n- {description}\n\n`foo {{{{bar}}}}`\n"
        v2 = f"foo\n===\n\n> Desc.\n\n{description}\n\n    foo {{{{bar}}}}\n"

        page = parse_page(v2)

        assert page == parse_page(v1)
        assert page.of_kind(LineKind.EXAMPLE_DESCRIPTION) == [
            Line(kind=LineKind.EXAMPLE_DESCRIPTION, text=description)
        ]
        assert page.of_kind(LineKind.EXAMPLE_COMMAND) == [
            Line(kind=LineKind.EXAMPLE_COMMAND, text="foo {{bar}}")
        ]

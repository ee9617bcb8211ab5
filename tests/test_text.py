"""Tests for appdatarepo.core.text module."""

from __future__ import annotations

from appdatarepo.core.text import (
    LIST_INDENT,
    ContentBuffer,
    DescriptionAssembler,
    indent,
    wsstrip,
)

SAMPLES = [
    "",
    "   ",
    "plain",
    "  a  b\t\tc  ",
    "a \n b",
    "\n\n  lead and trail \t\n",
    "one\n\n\ntwo",
    "x\t\n\t y \n",
]


class TestWsstrip:
    """Tests for whitespace normalization."""

    def test_spaces_and_tabs_collapse(self) -> None:
        assert wsstrip("  a  b\t\tc  ") == "a b c"

    def test_run_with_newline_becomes_newline(self) -> None:
        assert wsstrip("a \n b") == "a\nb"
        assert wsstrip("one\n\n\ntwo") == "one\ntwo"

    def test_empty(self) -> None:
        assert wsstrip("") == ""
        assert wsstrip(" \t\n") == ""

    def test_other_whitespace_kept(self) -> None:
        assert wsstrip("a b") == "a b"

    def test_properties(self) -> None:
        for text in SAMPLES:
            out = wsstrip(text)
            assert out == out.strip(" \t\n")
            assert "  " not in out
            assert "\n\n" not in out
            assert " \n" not in out and "\n " not in out
            assert "\t" not in out

    def test_idempotent(self) -> None:
        for text in SAMPLES:
            assert wsstrip(wsstrip(text)) == wsstrip(text)


class TestIndent:
    """Tests for line indentation."""

    def test_every_line(self) -> None:
        assert indent("a\nb", 2) == "  a\n  b"

    def test_length_grows_by_n_per_line(self) -> None:
        text = "one\ntwo\nthree"
        assert len(indent(text, LIST_INDENT)) == len(text) + LIST_INDENT * 3

    def test_empty_lines_untouched(self) -> None:
        assert indent("", 4) == ""
        assert indent("a\n\nb", 1) == " a\n\n b"


class TestContentBuffer:
    """Tests for ContentBuffer."""

    def test_append_and_reset(self) -> None:
        buf = ContentBuffer()
        buf.append("Hel")
        buf.append("lo")
        assert len(buf) == 5
        assert buf.getvalue() == "Hello"
        assert str(buf) == "Hello"
        buf.reset()
        assert len(buf) == 0
        assert buf.getvalue() == ""

    def test_wsstrip_in_place(self) -> None:
        buf = ContentBuffer()
        buf.append("  Does ")
        buf.append("  foo \n")
        assert buf.wsstrip() == "Does foo"
        assert buf.getvalue() == "Does foo"
        assert len(buf) == len("Does foo")

    def test_wsstrip_to_empty(self) -> None:
        buf = ContentBuffer()
        buf.append(" \n ")
        assert buf.wsstrip() == ""
        assert len(buf) == 0


class TestDescriptionAssembler:
    """Tests for paragraph and list layout."""

    def test_paragraph_then_list(self) -> None:
        d = DescriptionAssembler()
        d.add_paragraph("Line one.")
        d.start_list()
        d.add_unordered_item("Item A")
        d.add_unordered_item("Item B")
        d.end_list()
        assert d.finish() == "Line one.\n\n  - Item A\n  - Item B"

    def test_paragraphs_separated_by_blank_line(self) -> None:
        d = DescriptionAssembler()
        d.add_paragraph("  First\n   paragraph ")
        d.add_paragraph("Second")
        assert d.finish() == "First\nparagraph\n\nSecond"

    def test_ordered_markers(self) -> None:
        d = DescriptionAssembler()
        d.start_list()
        for _ in range(11):
            d.add_ordered_item("x")
        d.end_list()
        lines = d.finish().split("\n")
        assert [line[:3] for line in lines] == [f" {i}." for i in range(1, 10)] + ["10.", "11."]
        assert lines[0] == " 1. x"
        assert lines[10] == "11. x"
        assert d.item_count == 11

    def test_ordered_counter_restarts_per_list(self) -> None:
        d = DescriptionAssembler()
        d.start_list()
        d.add_ordered_item("a")
        d.add_ordered_item("b")
        d.end_list()
        d.start_list()
        d.add_ordered_item("c")
        d.end_list()
        assert d.finish() == " 1. a\n 2. b\n\n 1. c"

    def test_multiline_item(self) -> None:
        d = DescriptionAssembler()
        d.start_list()
        d.add_unordered_item("first\n   second")
        d.end_list()
        assert d.finish() == "  - first\n    second"

    def test_empty_item_is_newline_only(self) -> None:
        d = DescriptionAssembler()
        d.add_paragraph("P")
        d.start_list()
        d.add_ordered_item("  ")
        d.add_ordered_item("b")
        d.end_list()
        assert d.finish() == "P\n\n\n 2. b"

    def test_empty_description(self) -> None:
        d = DescriptionAssembler()
        assert d.finish() is None
        d.start_list()
        d.add_unordered_item(" ")
        d.end_list()
        assert d.finish() is None

    def test_reset(self) -> None:
        d = DescriptionAssembler()
        d.add_paragraph("old")
        d.start_list()
        d.add_ordered_item("x")
        d.reset()
        assert d.finish() is None
        assert d.item_count == 0

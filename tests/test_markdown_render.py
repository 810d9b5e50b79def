"""Tests for streamchat.ui.markdown."""

from streamchat.ui.markdown import render_markdown_line


def test_plain_line_unchanged():
    assert render_markdown_line("just words here").plain == "just words here"


def test_empty_line():
    assert render_markdown_line("").plain == ""


def test_header_drops_hashes():
    t = render_markdown_line("## Section")
    assert t.plain == "Section"
    assert "bold" in str(t.style)


def test_bullet_list():
    assert render_markdown_line("  - item").plain == "  • item"


def test_numbered_list():
    assert render_markdown_line("1. first").plain == "1. first"


def test_inline_code():
    t = render_markdown_line("run `ls -la` now")
    assert t.plain == "run ls -la now"
    assert any("on " in str(span.style) for span in t.spans)


def test_bold_and_italic():
    assert render_markdown_line("**strong** and *soft*").plain == "strong and soft"


def test_strikethrough():
    assert render_markdown_line("~~old~~ new").plain == "old new"


def test_link_keeps_label():
    assert render_markdown_line("see [docs](https://example.com)").plain == "see docs"


def test_lone_asterisks_untouched():
    assert render_markdown_line("2 * 3 * 4").plain == "2 * 3 * 4"


def test_block_quote():
    assert render_markdown_line("> quoted").plain == "┃ quoted"


def test_horizontal_rule():
    t = render_markdown_line("---")
    assert set(t.plain) == {"─"}

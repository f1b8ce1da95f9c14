"""Tests for HTML handler."""

import pytest
from pathlib import Path

from redmine_markup.formats.html_handler import (
    HTMLHandler,
    parse_style_attribute,
)
from redmine_markup.formatting.ir import NodeKind, TextStyle
from redmine_markup.formatting.markup import to_redmine


@pytest.fixture
def handler() -> HTMLHandler:
    return HTMLHandler()


def convert(handler: HTMLHandler, html: str) -> str:
    return to_redmine(handler.parse(html))


class TestHTMLStructure:
    """Tests for blocks, frames and tables built from HTML."""

    def test_paragraphs_become_blocks(self, handler: HTMLHandler):
        assert convert(handler, "<p>a</p>\n<p>b</p>") == "a\nb\n\n"

    def test_whitespace_collapses(self, handler: HTMLHandler):
        html = "<p>  lots   of\n   space  </p>"

        assert convert(handler, html) == "lots of space\n\n"

    def test_whitespace_across_inline_tags(self, handler: HTMLHandler):
        assert convert(handler, "<p>a <b> b</b></p>") == "a *b*\n\n"

    def test_line_break_splits_block(self, handler: HTMLHandler):
        assert convert(handler, "<p>a<br>b</p>") == "a\nb\n\n"

    def test_full_page_uses_body(self, handler: HTMLHandler):
        html = (
            "<html><head><title>Notes</title><style>p {}</style></head>"
            "<body><p>text</p></body></html>"
        )
        document = handler.parse(html)

        assert to_redmine(document) == "text\n\n"
        assert document.metadata["title"] == "Notes"

    def test_blockquote_becomes_nested_frame(self, handler: HTMLHandler):
        document = handler.parse("<p>a</p><blockquote><p>q</p></blockquote>")
        children = document.root_frame.children

        assert [child.kind for child in children] == [NodeKind.BLOCK, NodeKind.FRAME]
        assert to_redmine(document) == "a\nq\n\n\n"

    def test_comments_are_ignored(self, handler: HTMLHandler):
        assert convert(handler, "<p>a<!-- hidden -->b</p>") == "ab\n\n"

    def test_unordered_list(self, handler: HTMLHandler):
        html = "<ul><li>one</li><li>two</li></ul>"

        assert convert(handler, html) == "* one\n* two\n\n"

    def test_ordered_list(self, handler: HTMLHandler):
        html = "<ol start='3'><li>three</li><li>four</li></ol>"
        document = handler.parse(html)
        texts = [child.plain_text for child in document.root_frame.children]

        assert texts == ["3. three", "4. four"]
        assert to_redmine(document) == "# three\n# four\n\n"

    def test_list_item_with_paragraph(self, handler: HTMLHandler):
        html = "<ul><li><p>wrapped</p></li></ul>"

        assert convert(handler, html) == "* wrapped\n\n"

    def test_table(self, handler: HTMLHandler):
        html = (
            "<table>"
            "<tr><th>H1</th><th>H2</th></tr>"
            "<tr><td>a</td><td>b</td></tr>"
            "</table>"
        )

        assert convert(handler, html) == "| *H1* | *H2* |\n| a | b |\n\n"

    def test_table_sections(self, handler: HTMLHandler):
        html = (
            "<table><thead><tr><td>h</td></tr></thead>"
            "<tbody><tr><td>b</td></tr></tbody></table>"
        )
        table = handler.parse(html).root_frame.children[0]

        assert table.kind is NodeKind.TABLE
        assert table.rows == 2

    def test_colspan_keeps_grid(self, handler: HTMLHandler):
        html = (
            "<table><tr><td colspan='2'>wide</td></tr>"
            "<tr><td>a</td><td>b</td></tr></table>"
        )

        assert convert(handler, html) == "| wide |  |\n| a | b |\n\n"

    def test_nested_table(self, handler: HTMLHandler):
        html = "<table><tr><td><table><tr><td>in</td></tr></table></td></tr></table>"
        outer = handler.parse(html).root_frame.children[0]
        inner = outer.cell_at(0, 0).children[0]

        assert outer.rows == 1
        assert inner.kind is NodeKind.TABLE
        assert convert(handler, html) == "| | in |\n |\n\n"

    def test_list_item_starting_with_table(self, handler: HTMLHandler):
        html = "<ul><li><table><tr><td>x</td></tr></table></li></ul>"
        table = handler.parse(html).root_frame.children[0]

        assert table.kind is NodeKind.TABLE
        assert table.cell_at(0, 0).plain_text == "x"

    def test_text_around_table(self, handler: HTMLHandler):
        html = "<p>before</p><table><tr><td>x</td></tr></table><p>after</p>"

        assert convert(handler, html) == "before\n| x |\nafter\n\n"


class TestHTMLFormatting:
    """Tests for character formats read from HTML."""

    def test_bold_and_italic_tags(self, handler: HTMLHandler):
        html = "<p>Hello <b>bold</b> and <em>italic</em></p>"

        assert convert(handler, html) == "Hello *bold* and _italic_\n\n"

    def test_nested_styles(self, handler: HTMLHandler):
        html = "<p><u><i><strong>hi</strong></i></u></p>"

        assert convert(handler, html) == "+_*hi*_+\n\n"

    def test_inline_code(self, handler: HTMLHandler):
        html = "<p>run <code>ls -l</code></p>"

        assert convert(handler, html) == "run @ls <notextile>-</notextile>l@\n\n"

    def test_code_link_is_not_wrapped(self, handler: HTMLHandler):
        html = "<p><code>http://example.com</code></p>"

        assert convert(handler, html) == "http://example.com\n\n"

    def test_css_styles(self, handler: HTMLHandler):
        html = '<p><span style="font-weight: bold; font-style: italic">x</span></p>'

        assert convert(handler, html) == "_*x*_\n\n"

    def test_css_numeric_weight(self, handler: HTMLHandler):
        html = '<p><span style="font-weight:700">x</span></p>'

        assert convert(handler, html) == "*x*\n\n"

    def test_css_can_clear_bold(self, handler: HTMLHandler):
        html = '<p><b>a<span style="font-weight: normal">b</span></b></p>'

        assert convert(handler, html) == "*a*b\n\n"

    def test_css_underline(self, handler: HTMLHandler):
        html = '<p><span style="text-decoration: underline">x</span></p>'

        assert convert(handler, html) == "+x+\n\n"

    def test_monospace_family(self, handler: HTMLHandler):
        html = "<p><span style=\"font-family: 'DejaVu Sans Mono', monospace\">x</span></p>"
        block = handler.parse(html).root_frame.children[0]

        assert TextStyle.FIXED_PITCH in block.fragments[0].format.style
        assert convert(handler, html) == "@x@\n\n"

    def test_font_face_keeps_family(self, handler: HTMLHandler):
        html = '<p><font face="Courier">x</font></p>'
        block = handler.parse(html).root_frame.children[0]

        assert block.fragments[0].format.font_family == "Courier"
        assert convert(handler, html) == "@x@\n\n"

    def test_preformatted_lines(self, handler: HTMLHandler):
        html = "<pre>a\nb</pre>"

        assert convert(handler, html) == "@a@\n@b@\n\n"

    def test_heading_is_bold(self, handler: HTMLHandler):
        assert convert(handler, "<h2>Title</h2>") == "*Title*\n\n"


class TestHTMLHandlerFile:
    """Tests for reading HTML files."""

    def test_supported_extensions(self, handler: HTMLHandler):
        assert ".html" in handler.supported_extensions
        assert ".htm" in handler.supported_extensions

    def test_read_file(self, handler: HTMLHandler, tmp_path: Path):
        file_path = tmp_path / "page.html"
        file_path.write_text("<p>café <b>ok</b></p>", encoding="utf-8")

        assert to_redmine(handler.read(file_path)) == "café *ok*\n\n"


def test_parse_style_attribute():
    declarations = parse_style_attribute("Font-Weight: BOLD; color:red;;bogus")

    assert declarations == {"font-weight": "bold", "color": "red"}

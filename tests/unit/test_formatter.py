"""
Unit tests for draftsplice.formatting.formatter and draftsplice.formatting.reconstructor.

Covers:
- HTML bodies: inline styles only, idempotent
- Markdown bodies: lists, paragraphs, emphasis, escaping
- Placeholder tokens survive every path
- Body reassembly order
"""
import pytest

from draftsplice.formatting.formatter import (
    add_inline_styles,
    format_for_insertion,
    is_html,
    markdown_to_html,
    to_plain_text,
)
from draftsplice.formatting.reconstructor import assemble_from_fragments, assemble_replacement_body
from draftsplice.models.segmentation import PreservedFragments

P = '<p style="margin-top: 0; margin-bottom: 15px;">'
UL = '<ul style="margin-bottom: 15px;">'
OL = '<ol style="margin-bottom: 15px;">'


class TestHtmlBodies:

    def test_is_html(self):
        assert is_html("<p>Hi</p>")
        assert not is_html("a < b and c > d")
        assert not is_html("Plain text")

    def test_styles_are_inlined(self):
        out = format_for_insertion("<p>Hi</p><ul><li>x</li></ul><ol><li>y</li></ol>")
        assert out == f"{P}Hi</p>{UL}<li>x</li></ul>{OL}<li>y</li></ol>"

    def test_tags_with_attributes_are_left_alone(self):
        markup = '<p class="lead">Hi</p>'
        assert add_inline_styles(markup) == markup

    @pytest.mark.parametrize("body", [
        "<p>Hi</p><ul><li>x</li></ul>",
        "Intro\n- a\n- b",
        "Plain **text**",
    ])
    def test_formatting_is_idempotent(self, body):
        once = format_for_insertion(body)
        assert format_for_insertion(once) == once

    def test_other_tags_untouched(self):
        assert format_for_insertion("<div><strong>Hi</strong></div>") == "<div><strong>Hi</strong></div>"


class TestMarkdownBodies:

    def test_list_then_paragraph(self):
        out = format_for_insertion("- item one\n- item two\n\nSecond paragraph")
        assert out == f"{UL}<li>item one</li><li>item two</li></ul>{P}Second paragraph</p>"
        assert out.count("<ul") == 1
        assert "<p></p>" not in out

    def test_ordered_list(self):
        out = markdown_to_html("Steps:\n1. Open\n2. Close")
        assert out == "<p>Steps:</p><ol><li>Open</li><li>Close</li></ol>"

    def test_switching_list_kind(self):
        out = markdown_to_html("- a\n1. b")
        assert out == "<ul><li>a</li></ul><ol><li>b</li></ol>"

    def test_star_bullets_are_lists_not_italics(self):
        out = markdown_to_html("* one\n* two")
        assert out == "<ul><li>one</li><li>two</li></ul>"

    def test_one_paragraph_per_line(self):
        out = markdown_to_html("Hello Anna,\n\n\nSee you soon.")
        assert out == "<p>Hello Anna,</p><p>See you soon.</p>"

    def test_emphasis(self):
        out = markdown_to_html("This is **bold** and *italic*, __also bold__ and _also italic_")
        assert out == (
            "<p>This is <strong>bold</strong> and <em>italic</em>, "
            "<strong>also bold</strong> and <em>also italic</em></p>"
        )

    def test_snake_case_is_not_italic(self):
        assert markdown_to_html("use my_var_name here") == "<p>use my_var_name here</p>"

    def test_text_is_escaped(self):
        assert markdown_to_html("a < b & c") == "<p>a &lt; b &amp; c</p>"

    def test_blank_body(self):
        assert format_for_insertion("") == ""
        assert format_for_insertion("   \n ") == ""


class TestPlaceholders:

    def test_html_path(self):
        out = format_for_insertion("<p>See [[TABLE_1]] below.</p>")
        assert "[[TABLE_1]]" in out

    def test_markdown_path(self):
        out = format_for_insertion("Chart: [[IMAGE_2]] and _note_\n- [[TABLE_1]]")
        assert "[[IMAGE_2]]" in out
        assert "<li>[[TABLE_1]]</li>" in out
        assert "<em>note</em>" in out

    def test_underscored_token_name(self):
        out = markdown_to_html("_[[TABLE_10]]_ stays")
        assert "[[TABLE_10]]" in out


class TestPlainText:

    def test_tags_removed_and_entities_decoded(self):
        assert to_plain_text("<p>Hi &amp; bye</p><ul><li>x</li></ul>") == "Hi & byex"

    def test_empty(self):
        assert to_plain_text("") == ""


class TestReconstructor:

    def test_order_is_draft_signature_thread(self):
        body = assemble_replacement_body("Hello", "<div>SIG</div>", "<div>THREAD</div>")
        assert body == f"{P}Hello</p><div>SIG</div><div>THREAD</div>"

    def test_missing_fragments(self):
        assert assemble_replacement_body("<p>Hi</p>") == f"{P}Hi</p>"

    def test_from_fragments(self):
        fragments = PreservedFragments(signature_html="<p>S</p>", thread_html="<hr><div>T</div>")
        body = assemble_from_fragments("<p>New</p>", fragments)
        assert body.endswith("<p>S</p><hr><div>T</div>")
        assert body.startswith(f"{P}New</p>")

"""
Unit tests for draftsplice.segmentation.signature.

Covers:
- Template strategy (and its minimum length)
- Closing-phrase strategy, table order and case-insensitivity
- Structural contact-block fallback
- is_contact_line()
"""
import pytest

from draftsplice.segmentation.signature import detect_signature_start, is_contact_line, strip_signature


class TestTemplate:
    """Session template takes priority over every heuristic."""

    def test_suffix_template_is_removed(self):
        text = "Hello there\nJohn Smith\nACME Corp"
        assert strip_signature(text, "John Smith\nACME Corp") == "Hello there"

    @pytest.mark.parametrize("draft", ["Quick note", "Line one\nLine two\n", "  padded  "])
    def test_any_draft_followed_by_template(self, draft):
        template = "Jane Doe\nHead of Sales"
        assert strip_signature(draft + template, template) == draft.strip()

    def test_trailing_whitespace_after_template(self):
        assert detect_signature_start("Hello there\nJohn Smith\n", "John Smith\n") == 12
        assert strip_signature("Hello there\nJohn Smith\n  \n", "John Smith") == "Hello there"

    def test_short_template_is_ignored(self):
        assert strip_signature("Hi\nBob", "Bob") == "Hi\nBob"

    def test_template_wins_over_closing_phrase(self):
        text = "Hello\nBest regards,\nJohn\nACME Corp"
        template = "ACME Corp\nSupport line"
        assert detect_signature_start(text, template) == text.index("\nBest regards,")
        assert detect_signature_start(text, "John\nACME Corp") == text.index("John\nACME Corp")

    def test_non_matching_template_falls_back(self):
        assert strip_signature("Hello\nKind regards,\nBob", "Something else entirely") == "Hello"


class TestClosingPhrase:
    """Locale closing phrases and mobile footers."""

    def test_best_regards_and_everything_after(self):
        text = "Can you review?\n\nBest regards,\nJohn\n+1 555 123 4567"
        assert strip_signature(text) == "Can you review?"

    def test_cut_index_is_the_line_break(self):
        assert detect_signature_start("Hello\nBest regards,\nJo") == 5

    def test_table_order_beats_position(self):
        text = "Question?\nThanks,\nAnna\nBest regards,\nJohn"
        assert strip_signature(text) == "Question?\nThanks,\nAnna"

    def test_case_insensitive(self):
        assert strip_signature("ok\nBEST REGARDS,\nX") == "ok"

    def test_mobile_footer(self):
        assert strip_signature("On my way\n\nSent from my iPhone") == "On my way"

    def test_french_and_german_closings(self):
        assert strip_signature("Merci pour votre retour.\nCordialement,\nMarie") == "Merci pour votre retour."
        assert strip_signature("Danke.\nMit freundlichen Grüßen,\nHans") == "Danke."

    def test_dash_delimiter(self):
        assert strip_signature("Body text\n-- \nJohn") == "Body text"

    def test_dash_delimiter_followed_by_blank_lines(self):
        assert strip_signature("Body\n--\n\nJohn") == "Body"
        assert detect_signature_start("Body\n-- \n\n\nJohn") == 4

    def test_first_line_is_never_a_signature(self):
        assert strip_signature("Thanks, see you then.") == "Thanks, see you then."


class TestContactBlock:
    """Structural fallback over the last lines."""

    def test_phone_line_cut(self):
        text = (
            "Please find the report attached.\nLet me know.\n"
            "John Smith\nSales Director\nphone +1 (555) 123-4567"
        )
        assert strip_signature(text) == (
            "Please find the report attached.\nLet me know.\nJohn Smith\nSales Director"
        )

    def test_url_line_cut(self):
        assert strip_signature("a\nb\nc\nwww.example.com") == "a\nb\nc"

    def test_email_line_cut(self):
        assert strip_signature("a\nb\nc\nd\njohn@example.com") == "a\nb\nc\nd"

    def test_short_text_is_left_alone(self):
        assert strip_signature("a\nwww.example.com") == "a\nwww.example.com"

    def test_nothing_found(self):
        assert detect_signature_start("Just text") is None
        assert strip_signature("  Just text \n") == "Just text"


class TestIsContactLine:

    @pytest.mark.parametrize("line", [
        "+33 1 23 45 67 89",
        "Tel: (555) 123-4567",
        "jane.doe@example.org",
        "https://example.org",
        "www.example.org",
    ])
    def test_contact_lines(self, line):
        assert is_contact_line(line)

    @pytest.mark.parametrize("line", ["Room 12", "See you at 10", "Sales Director", ""])
    def test_plain_lines(self, line):
        assert not is_contact_line(line)

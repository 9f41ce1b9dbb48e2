"""
Formatter — turns a model-returned body into Outlook-safe HTML.

HTML bodies only get inline spacing styles. Anything else is treated as
lightweight markdown:
    - inline pass:  **bold**, __bold__, *italic*, _italic_
    - block pass:   "- " / "* " bullet lists, "1. " ordered lists,
                    one <p> per text line, blank lines close lists

Placeholder tokens ([[TABLE_1]], [[IMAGE_2]], ...) are shielded from every
transform and come out byte-identical.
"""
import html
import re
from typing import List, Optional, Tuple

from draftsplice.config.constants import HTML_TAG_PATTERN, INLINE_BLOCK_STYLES, PLACEHOLDER_PATTERN

_HTML_TAG_RE = re.compile(HTML_TAG_PATTERN, re.IGNORECASE)
_PLACEHOLDER_RE = re.compile(PLACEHOLDER_PATTERN)
_SENTINEL_RE = re.compile(r"\x00(\d+)\x00")

# Applied in this order; italic lookarounds keep list markers and bold
# delimiters out, the \w guards keep snake_case words intact.
_INLINE_RULES: List[Tuple[re.Pattern, str]] = [
    (re.compile(r"\*\*(.+?)\*\*"), r"<strong>\1</strong>"),
    (re.compile(r"(?<![*\w])\*(?![*\s])(.+?)(?<![*\s])\*(?![*\w])"), r"<em>\1</em>"),
    (re.compile(r"__(.+?)__"), r"<strong>\1</strong>"),
    (re.compile(r"(?<![_\w])_(?![_\s])(.+?)(?<![_\s])_(?![_\w])"), r"<em>\1</em>"),
]

_UNORDERED_ITEM_RE = re.compile(r"^[-*]\s+(.+)$")
_ORDERED_ITEM_RE = re.compile(r"^\d+\.\s+(.+)$")
_BLOCK_TAG_RE = re.compile(r"<(p|ul|ol)[\s>]", re.IGNORECASE)

_STYLE_RULES = [
    (re.compile(rf"<{tag}>", re.IGNORECASE), f'<{tag} style="{style}">')
    for tag, style in INLINE_BLOCK_STYLES.items()
]


def is_html(body: str) -> bool:
    return bool(_HTML_TAG_RE.search(body))


def format_for_insertion(raw_body: str) -> str:
    """Return insertion-ready HTML for *raw_body* (HTML or markdown-ish text)."""
    if not raw_body or not raw_body.strip():
        return ""
    if is_html(raw_body):
        return add_inline_styles(raw_body)
    return add_inline_styles(markdown_to_html(raw_body))


def add_inline_styles(markup: str) -> str:
    """
    Inline spacing on bare <p>, <ul> and <ol> opening tags.

    Tags that already carry attributes are left alone, which makes the
    function idempotent.
    """
    if not markup:
        return markup
    for pattern, replacement in _STYLE_RULES:
        markup = pattern.sub(replacement, markup)
    return markup


def markdown_to_html(text: str) -> str:
    """Convert lightweight markdown to unstyled block HTML."""
    shielded, tokens = _shield_placeholders(text)
    converted = html.escape(shielded, quote=False)
    for pattern, replacement in _INLINE_RULES:
        converted = pattern.sub(replacement, converted)
    converted = _build_blocks(converted)
    return _restore_placeholders(converted, tokens)


def to_plain_text(body: str) -> str:
    """Tag-free projection of a body, used for the plain clipboard flavour."""
    return html.unescape(re.sub(r"<[^>]*>", "", body or ""))


# ======================================================================
# Internal helpers
# ======================================================================

def _build_blocks(text: str) -> str:
    parts: List[str] = []
    open_list: Optional[str] = None

    for raw_line in text.split("\n"):
        line = raw_line.strip()
        item = _UNORDERED_ITEM_RE.match(line)
        kind = "ul"
        if item is None:
            item = _ORDERED_ITEM_RE.match(line)
            kind = "ol"

        if item is not None:
            if open_list != kind:
                if open_list is not None:
                    parts.append(f"</{open_list}>")
                parts.append(f"<{kind}>")
                open_list = kind
            parts.append(f"<li>{item.group(1)}</li>")
            continue

        if open_list is not None:
            parts.append(f"</{open_list}>")
            open_list = None
        if line:
            parts.append(f"<p>{line}</p>")

    if open_list is not None:
        parts.append(f"</{open_list}>")

    result = "".join(parts)
    if not _BLOCK_TAG_RE.search(result):
        result = f"<p>{result}</p>"
    return result


def _shield_placeholders(text: str) -> Tuple[str, List[str]]:
    tokens: List[str] = []

    def stash(match: re.Match) -> str:
        tokens.append(match.group(0))
        return f"\x00{len(tokens) - 1}\x00"

    return _PLACEHOLDER_RE.sub(stash, text), tokens


def _restore_placeholders(text: str, tokens: List[str]) -> str:
    return _SENTINEL_RE.sub(lambda m: tokens[int(m.group(1))], text)

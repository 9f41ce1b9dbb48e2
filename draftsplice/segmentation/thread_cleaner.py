"""
Thread Text Cleaner — compacts quoted history for LLM context.

Passes, in order:
    1. Header range collapse (keep labels, drop values) for each locale
    2. Header / banner / separator line removal
    3. Blank line normalization
    4. Trailing signature removal

Best-effort denoising, not an archival transform.
"""
import re
from typing import List, Pattern, Tuple

from draftsplice.config.constants import HEADER_LINE_PATTERNS, HEADER_RANGE_RULES
from draftsplice.segmentation.signature import strip_signature


def _compile_range_rules() -> List[Tuple[Pattern, str]]:
    rules = []
    for locale_rules in HEADER_RANGE_RULES.values():
        for label, next_label, replacement in locale_rules:
            pattern = re.compile(rf"{label}[\s\S]*?(?={next_label})", re.IGNORECASE)
            rules.append((pattern, replacement))
    return rules


_RANGE_RULES = _compile_range_rules()
_LINE_RES = [re.compile(pattern, flags) for pattern, flags in HEADER_LINE_PATTERNS]
_BLANK_RUN_RE = re.compile(r"\n{3,}")


def clean_thread_text(raw_text: str) -> str:
    """Return *raw_text* without header values, banners and signature."""
    if not raw_text:
        return ""

    result = raw_text
    for pattern, replacement in _RANGE_RULES:
        result = pattern.sub(replacement, result)

    for pattern in _LINE_RES:
        result = pattern.sub("", result)

    result = _BLANK_RUN_RE.sub("\n\n", result)
    result = strip_signature(result)
    return result.strip()

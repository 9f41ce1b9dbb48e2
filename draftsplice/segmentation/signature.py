"""
Signature Detector — finds where a trailing signature block begins.

Three strategies, strict priority order (first hit wins):
    1. Template match:  text ends with the session's signature template
    2. Closing phrase:  "Best regards,", "Cordialement,", "Sent from my iPhone", ...
    3. Structural:      phone / email / URL line among the last lines

Pure text transform: no document access, no state.
"""
import logging
import re
from typing import List, Optional

from draftsplice.config.constants import (
    CONTACT_PATTERNS,
    MIN_PHONE_DIGITS,
    SIGNATURE_CLOSING_PATTERNS,
    STRUCTURAL_MAX_DISTANCE,
    STRUCTURAL_MIN_LINES,
    STRUCTURAL_SCAN_LINES,
    TEMPLATE_MIN_LENGTH,
)

logger = logging.getLogger(__name__)

_CLOSING_RES = [re.compile(p, re.IGNORECASE) for p in SIGNATURE_CLOSING_PATTERNS]
_PHONE_RE = re.compile(CONTACT_PATTERNS["PHONE"])
_EMAIL_RE = re.compile(CONTACT_PATTERNS["EMAIL"], re.IGNORECASE)
_URL_RE = re.compile(CONTACT_PATTERNS["URL"], re.IGNORECASE)


def detect_signature_start(text: str, template: Optional[str] = None) -> Optional[int]:
    """
    Return the index in *text* where the signature starts, or None.

    Args:
        text: Plain text of a draft (or of a thread fragment).
        template: Signature template captured at session start (optional).
    """
    cut = _match_template(text, template)
    if cut is not None:
        logger.debug("Signature cut by template at %d", cut)
        return cut

    cut = _match_closing_phrase(text)
    if cut is not None:
        logger.debug("Signature cut by closing phrase at %d", cut)
        return cut

    cut = _match_contact_block(text)
    if cut is not None:
        logger.debug("Signature cut by contact block at %d", cut)
    return cut


def strip_signature(text: str, template: Optional[str] = None) -> str:
    """Trimmed *text* with its trailing signature removed (unchanged if none found)."""
    result = text.strip()
    cut = detect_signature_start(result, template)
    if cut is None:
        return result
    return result[:cut].strip()


# ======================================================================
# Strategies
# ======================================================================

def _match_template(text: str, template: Optional[str]) -> Optional[int]:
    if not template:
        return None
    template = template.strip()
    if len(template) <= TEMPLATE_MIN_LENGTH:
        return None
    trimmed = text.rstrip()
    if trimmed.endswith(template):
        return len(trimmed) - len(template)
    return None


def _match_closing_phrase(text: str) -> Optional[int]:
    for pattern in _CLOSING_RES:
        match = pattern.search(text)
        if match:
            return match.start()
    return None


def _match_contact_block(text: str) -> Optional[int]:
    lines = text.split("\n")
    if len(lines) <= STRUCTURAL_MIN_LINES:
        return None

    last = len(lines) - 1
    first = max(0, len(lines) - STRUCTURAL_SCAN_LINES)
    for i in range(last, first - 1, -1):
        if i <= len(lines) - STRUCTURAL_MAX_DISTANCE:
            break
        if is_contact_line(lines[i].strip()):
            return _line_offset(lines, i)
    return None


def is_contact_line(line: str) -> bool:
    """True when *line* carries a phone-like token, an email address or a URL."""
    if _EMAIL_RE.search(line) or _URL_RE.search(line):
        return True
    for match in _PHONE_RE.finditer(line):
        if sum(ch.isdigit() for ch in match.group(0)) >= MIN_PHONE_DIGITS:
            return True
    return False


def _line_offset(lines: List[str], line_index: int) -> int:
    return sum(len(line) + 1 for line in lines[:line_index])

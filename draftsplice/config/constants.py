"""
Constants used across segmentation, formatting and completion.

Every locale-specific pattern lives in a table here so that supporting a
new mail client or language is a data change, not a code change.
"""
import re
from typing import Dict, List, Tuple

# =============================================================================
# Thread boundary markers (probed in order, first hit wins)
# =============================================================================
# Each marker is a minimal selector: tag / id / class / attrs, all optional.
THREAD_MARKERS: List[dict] = [
    {"id": "divRplyFwdMsg"},                       # Outlook desktop reply/forward
    {"id": "x_divRplyFwdMsg"},                     # same, x_-prefixed by OWA
    {"class": "gmail_quote"},                      # Gmail
    {"id": "appendonsend"},                        # Outlook appendonsend
    {"tag": "hr", "attrs": {"tabindex": "-1"}},    # Outlook separator
    {"class": "ms-MessageBody"},                   # Outlook Web
    {"tag": "blockquote"},
]

THREAD_HEADER_CONTAINER_TAGS: Tuple[str, ...] = ("div", "p", "font")

# Matched against a block's text content, case-insensitive, single line.
THREAD_HEADER_PATTERNS: List[str] = [
    r"From:.*Sent:",
    r"De\s*:.*Envoyé",
    r"Von:.*Gesendet",
    r"---------- Original Message ----------",
]

# =============================================================================
# Signature containers (explicit client markup)
# =============================================================================
SIGNATURE_CONTAINER_MARKERS: List[dict] = [
    {"id": "Signature"},                           # Outlook
    {"class": "Signature"},
    {"id": "ms-outlook-mobile-signature"},
    {"attrs": {"data-signature": None}},           # presence only
    {"class": "gmail_signature"},
    {"attrs": {"data-smartmail": "gmail_signature"}},
]

SIGNATURE_TEMPLATE_CONTAINER_TAGS: Tuple[str, ...] = ("div", "p", "table")
SIGNATURE_PHRASE_CONTAINER_TAGS: Tuple[str, ...] = ("div", "p")

# =============================================================================
# Signature heuristics on plain text
# =============================================================================
# Scan order encodes priority: the first pattern that matches anywhere wins.
# Each phrase must start a line after the first one; the cut is at the \n.
SIGNATURE_CLOSING_PATTERNS: List[str] = [
    r"\n--\s*\n",
    r"\nBest regards,",
    r"\nKind regards,",
    r"\nRegards,",
    r"\nSincerely,",
    r"\nThanks,",
    r"\nThank you,",
    r"\nCheers,",
    r"\nCordialement,",
    r"\nCdlt,",
    r"\nMit freundlichen Grüßen,",
    r"\nMfG,",
    r"\nSent from my iPhone",
    r"\nSent from my Android",
    r"\nGet Outlook for",
    r"\nEnvoyé de mon",
    r"\nVerzonden vanaf",
]

# Same phrases, matched at a line start inside a block's text.
SIGNATURE_BLOCK_PATTERNS: List[str] = [
    r"^\s*Best regards\b",
    r"^\s*Kind regards\b",
    r"^\s*Regards\b",
    r"^\s*Sincerely\b",
    r"^\s*Thanks\b",
    r"^\s*Thank you\b",
    r"^\s*Cheers\b",
    r"^\s*Cordialement\b",
    r"^\s*Cdlt\b",
    r"^\s*Mit freundlichen Grüßen",
    r"^\s*MfG\b",
    r"^\s*--\s*$",
]

# Contact-block tokens for the structural fallback.
CONTACT_PATTERNS: Dict[str, str] = {
    "PHONE": r"\+?\(?\d[\d\s().-]{6,18}\d",
    "EMAIL": r"[a-z0-9._%+-]+@[a-z0-9.-]+\.[a-z]{2,}",
    "URL": r"www\.|https?://",
}
MIN_PHONE_DIGITS: int = 7

TEMPLATE_MIN_LENGTH: int = 5
STRUCTURAL_MIN_LINES: int = 3
STRUCTURAL_SCAN_LINES: int = 8
STRUCTURAL_MAX_DISTANCE: int = 10

# =============================================================================
# Thread text cleaning
# =============================================================================
# locale -> [(label pattern, next label lookahead, replacement)]
HEADER_RANGE_RULES: Dict[str, List[Tuple[str, str, str]]] = {
    "en": [
        (r"From:", r"Sent:", "From:\n"),
        (r"Sent:", r"To:", "Sent:\n"),
        (r"To:", r"Subject:", "To:\n"),
    ],
    "fr": [
        (r"De\s*:", r"Envoyé", "De:\n"),
        (r"Envoyé\s*:", r"À", "Envoyé:\n"),
        (r"À\s*:", r"Objet", "À:\n"),
    ],
    "de": [
        (r"Von:", r"Gesendet", "Von:\n"),
        (r"Gesendet:", r"An", "Gesendet:\n"),
        (r"An:", r"Betreff", "An:\n"),
    ],
}

# (pattern, flags); every match is removed.
HEADER_LINE_PATTERNS: List[Tuple[str, int]] = [
    (r"^Cc:.*$", re.MULTILINE),
    (r"^Bcc:.*$", re.MULTILINE),
    (r"^Date:.*$", re.MULTILINE),
    (r"^Importance:.*$", re.MULTILINE),
    (r"<[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}>", 0),
    (r"^On\s+.*\s+wrote:\s*$", re.MULTILINE | re.IGNORECASE),
    (r"^Le\s+.*\s+a écrit\s*:\s*$", re.MULTILINE | re.IGNORECASE),
    (r"^Am\s+.*\s+schrieb\s*:\s*$", re.MULTILINE | re.IGNORECASE),
    (r"^[-_]{3,}.*$", re.MULTILINE),
    (r"^Original Message.*$", re.MULTILINE | re.IGNORECASE),
    (r"^Message d'origine.*$", re.MULTILINE | re.IGNORECASE),
    (r"^Forwarded message.*$", re.MULTILINE | re.IGNORECASE),
]

# =============================================================================
# Formatting
# =============================================================================
HTML_TAG_PATTERN: str = r"<[a-z][\s\S]*>"
PLACEHOLDER_PATTERN: str = r"\[\[[A-Z][A-Z0-9]*_\d+\]\]"

# Outlook ignores stylesheets, spacing is inlined on bare opening tags.
INLINE_BLOCK_STYLES: Dict[str, str] = {
    "p": "margin-top: 0; margin-bottom: 15px;",
    "ul": "margin-bottom: 15px;",
    "ol": "margin-bottom: 15px;",
}

VOID_ELEMENTS: frozenset = frozenset({
    "area", "base", "br", "col", "embed", "hr", "img", "input",
    "link", "meta", "param", "source", "track", "wbr",
})

# =============================================================================
# Prompt context
# =============================================================================
CONTEXT_THREAD_SEPARATOR: str = "\n\n--- Previous Thread ---\n"
PREVIEW_THREAD_SEPARATOR: str = "\n\n--- PREVIOUS THREAD ---\n\n"

# =============================================================================
# Providers & storage
# =============================================================================
SUPPORTED_PROVIDERS: Tuple[str, ...] = ("openai", "claude", "gemini", "custom")

PROVIDER_DISPLAY_NAMES: Dict[str, str] = {
    "openai": "OpenAI",
    "claude": "Claude",
    "gemini": "Gemini",
    "custom": "Custom API",
}

ANTHROPIC_VERSION: str = "2023-06-01"

STORAGE_PREFIX: str = "outlook_ai_assistant_"

DEFAULT_PROVIDER_SETTINGS: dict = {
    "activeProvider": "openai",
    "providers": {
        "openai": {"apiKey": "", "endpoint": "https://api.openai.com/v1", "model": "gpt-4o-mini"},
        "claude": {"apiKey": "", "endpoint": "https://api.anthropic.com", "model": "claude-3-5-sonnet-20241022"},
        "gemini": {"apiKey": "", "endpoint": "https://generativelanguage.googleapis.com", "model": "gemini-1.5-flash"},
        "custom": {"apiKey": "", "endpoint": "", "model": ""},
    },
}

DEFAULT_PROMPTS: List[Tuple[str, str]] = [
    ("Fix Grammar", "Fix any grammatical errors in this text while maintaining the original meaning and tone."),
    ("Make Professional", "Rewrite this text to be more professional and formal while keeping the same message."),
    ("Summarize", "Provide a brief, concise summary of this text."),
    ("Translate to French", "Translate this text to French."),
    ("Make Friendly", "Rewrite this text to be warmer and more friendly while keeping the same message."),
]

"""
Completion Gateway — one call contract over three vendor request shapes.

    openai / custom → POST {endpoint}/chat/completions
    claude          → POST {endpoint}/v1/messages
    gemini          → POST {endpoint}/v1beta/models/{model}:generateContent

The adapter is selected once from ProviderSettings. It returns the raw
model text; turning that untrusted text into a CompletionResult is the
job of ``parse_completion``.
"""
import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

import requests

from draftsplice.completion.errors import ConfigurationError, ProviderError
from draftsplice.completion.parsing import parse_completion
from draftsplice.config.constants import ANTHROPIC_VERSION, PROVIDER_DISPLAY_NAMES
from draftsplice.config.settings import LLM_MAX_TOKENS, LLM_TEMPERATURE
from draftsplice.models.completion import CompletionRequest, CompletionResult, ProviderConfig, ProviderSettings

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = """You are an expert email assistant. When given an email body and an instruction, you must:
1. Generate an appropriate email subject line
2. Generate the improved/modified email body based on the instruction

IMPORTANT: You MUST respond with valid JSON in this exact format:
{
  "subject": "Your suggested subject line here",
  "body": "<p>Your HTML-formatted email body here</p>"
}

For the body, use RICH HTML FORMATTING to create visually appealing, well-structured emails:
- Use <p> tags for paragraphs with proper spacing between ideas
- Use <strong> for bold emphasis on important words or phrases
- Use <em> for italic text when appropriate
- Use <ul> and <li> for bullet point lists (great for action items, key points)
- Use <ol> and <li> for numbered/ordered lists (great for steps, priorities)
- Use <br> for line breaks within paragraphs when needed
- Use emojis SPARINGLY and only when they naturally add warmth or clarity:
  - Limit usage to 1-2 relevant emojis maximum, and only if the tone is friendly or informal
  - Avoid emojis in formal or strictly professional correspondence

OBJECT PRESERVATION:
- The input may contain placeholders like [[TABLE_1]] or [[IMAGE_1]].
- These represent embedded tables or images that MUST be preserved exactly as-is.
- Include these placeholders in your output in their appropriate relative positions.
- Do NOT modify, remove, or rewrite the placeholder text.

- Keep the formatting clean, professional, and visually structured
- Do not include any text outside the JSON object
- Do not use markdown syntax - use only HTML tags"""


def build_user_message(context: str, instruction: str) -> str:
    return f"Instruction: {instruction}\n\nEmail content:\n{context}"


# ======================================================================
# Adapter
# ======================================================================

@dataclass(frozen=True)
class ProviderAdapter:
    """A vendor call shape bound to its configuration."""

    kind: str
    config: ProviderConfig
    call: Callable[[ProviderConfig, str, str], str]

    @property
    def display_name(self) -> str:
        return PROVIDER_DISPLAY_NAMES.get(self.kind, self.kind)

    def complete(self, context: str, instruction: str) -> str:
        """Raw model text for one completion. Raises ProviderError on failure."""
        logger.info(
            "Calling %s (model=%s, context=%d chars)",
            self.display_name,
            self.config.model,
            len(context),
        )
        return self.call(self.config, context, instruction)

    def complete_request(self, request: CompletionRequest) -> CompletionResult:
        return parse_completion(self.complete(request.context, request.instruction))


def get_provider(settings: ProviderSettings) -> ProviderAdapter:
    """
    Select the adapter for the active provider.

    Raises:
        ConfigurationError: unknown provider, missing API key or endpoint.
    """
    kind = settings.active_provider
    call = _CALL_SHAPES.get(kind)
    if call is None:
        raise ConfigurationError(f"Unknown provider: {kind}")

    config = settings.active_config
    if config is None or not config.api_key:
        raise ConfigurationError(f"No API key configured for {kind}. Please configure in settings.")
    if not config.endpoint:
        raise ConfigurationError(f"No endpoint configured for {kind}. Please configure in settings.")

    return ProviderAdapter(kind=kind, config=config, call=call)


# ======================================================================
# Call shapes
# ======================================================================

def _call_chat_completions(config: ProviderConfig, context: str, instruction: str) -> str:
    data = _post(
        f"{config.endpoint}/chat/completions",
        label="OpenAI",
        headers={
            "Content-Type": "application/json",
            "Authorization": f"Bearer {config.api_key}",
        },
        payload={
            "model": config.model,
            "messages": [
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": build_user_message(context, instruction)},
            ],
            "temperature": LLM_TEMPERATURE,
            "response_format": {"type": "json_object"},
        },
    )
    return _as_text(_dig(data, "choices", 0, "message", "content"))


def _call_messages(config: ProviderConfig, context: str, instruction: str) -> str:
    data = _post(
        f"{config.endpoint}/v1/messages",
        label="Claude",
        headers={
            "Content-Type": "application/json",
            "x-api-key": config.api_key,
            "anthropic-version": ANTHROPIC_VERSION,
        },
        payload={
            "model": config.model,
            "max_tokens": LLM_MAX_TOKENS,
            "system": SYSTEM_PROMPT,
            "messages": [
                {"role": "user", "content": build_user_message(context, instruction)},
            ],
        },
    )
    return _as_text(_dig(data, "content", 0, "text"))


def _call_generate_content(config: ProviderConfig, context: str, instruction: str) -> str:
    data = _post(
        f"{config.endpoint}/v1beta/models/{config.model}:generateContent",
        label="Gemini",
        headers={"Content-Type": "application/json"},
        params={"key": config.api_key},
        payload={
            "contents": [
                {"parts": [{"text": f"{SYSTEM_PROMPT}\n\n{build_user_message(context, instruction)}"}]},
            ],
            "generationConfig": {
                "temperature": LLM_TEMPERATURE,
                "responseMimeType": "application/json",
            },
        },
    )
    return _as_text(_dig(data, "candidates", 0, "content", "parts", 0, "text"))


_CALL_SHAPES: Dict[str, Callable[[ProviderConfig, str, str], str]] = {
    "openai": _call_chat_completions,
    "custom": _call_chat_completions,
    "claude": _call_messages,
    "gemini": _call_generate_content,
}


# ======================================================================
# HTTP helpers
# ======================================================================

def _post(
    url: str,
    label: str,
    headers: Dict[str, str],
    payload: dict,
    params: Optional[Dict[str, str]] = None,
) -> Any:
    try:
        response = requests.post(url, headers=headers, json=payload, params=params)
    except requests.RequestException as e:
        logger.error("%s request failed: %s", label, e)
        raise ProviderError(f"{label} API request failed: {e}", provider=label) from e

    if not response.ok:
        message = _vendor_error_message(response) or f"{label} API error: {response.status_code}"
        logger.error("%s returned HTTP %d: %s", label, response.status_code, message)
        raise ProviderError(message, status_code=response.status_code, provider=label)

    try:
        return response.json()
    except ValueError as e:
        raise ProviderError(
            f"{label} API returned an unreadable response",
            status_code=response.status_code,
            provider=label,
        ) from e


def _vendor_error_message(response: requests.Response) -> Optional[str]:
    try:
        body = response.json()
    except ValueError:
        return None
    message = _dig(body, "error", "message")
    return message if isinstance(message, str) and message else None


def _dig(data: Any, *path: Any) -> Any:
    """Walk nested dicts / lists, returning None as soon as a step is missing."""
    current = data
    for step in path:
        try:
            current = current[step]
        except (KeyError, IndexError, TypeError):
            return None
    return current


def _as_text(value: Any) -> str:
    return value if isinstance(value, str) else ""

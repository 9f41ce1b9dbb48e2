"""
Environment settings loaded from .env file.
"""
import os
from dotenv import load_dotenv

load_dotenv()


# --- LLM providers ---
ACTIVE_PROVIDER: str = os.getenv("DRAFTSPLICE_ACTIVE_PROVIDER", "openai")

OPENAI_API_KEY: str = os.getenv("OPENAI_API_KEY", "")
OPENAI_ENDPOINT: str = os.getenv("OPENAI_ENDPOINT", "https://api.openai.com/v1")
OPENAI_MODEL: str = os.getenv("OPENAI_MODEL", "gpt-4o-mini")

ANTHROPIC_API_KEY: str = os.getenv("ANTHROPIC_API_KEY", "")
ANTHROPIC_ENDPOINT: str = os.getenv("ANTHROPIC_ENDPOINT", "https://api.anthropic.com")
ANTHROPIC_MODEL: str = os.getenv("ANTHROPIC_MODEL", "claude-3-5-sonnet-20241022")

GEMINI_API_KEY: str = os.getenv("GEMINI_API_KEY", "")
GEMINI_ENDPOINT: str = os.getenv("GEMINI_ENDPOINT", "https://generativelanguage.googleapis.com")
GEMINI_MODEL: str = os.getenv("GEMINI_MODEL", "gemini-1.5-flash")

CUSTOM_API_KEY: str = os.getenv("CUSTOM_API_KEY", "")
CUSTOM_ENDPOINT: str = os.getenv("CUSTOM_ENDPOINT", "")
CUSTOM_MODEL: str = os.getenv("CUSTOM_MODEL", "")

# --- Generation ---
LLM_TEMPERATURE: float = float(os.getenv("LLM_TEMPERATURE", "0.7"))
LLM_MAX_TOKENS: int = int(os.getenv("LLM_MAX_TOKENS", "4096"))

# --- Session ---
CAPTURE_INTERVAL_SECONDS: float = float(os.getenv("CAPTURE_INTERVAL_SECONDS", "1.0"))
SETTINGS_FILE: str = os.getenv("DRAFTSPLICE_SETTINGS_FILE", "draftsplice_settings.json")

# --- Logging ---
LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
MAX_BODY_LOG_CHARS: int = int(os.getenv("MAX_BODY_LOG_CHARS", "500"))


def provider_settings_from_env():
    """Build a ProviderSettings from the environment variables above."""
    from draftsplice.models.completion import ProviderSettings

    return ProviderSettings.model_validate(
        {
            "activeProvider": ACTIVE_PROVIDER,
            "providers": {
                "openai": {"apiKey": OPENAI_API_KEY, "endpoint": OPENAI_ENDPOINT, "model": OPENAI_MODEL},
                "claude": {"apiKey": ANTHROPIC_API_KEY, "endpoint": ANTHROPIC_ENDPOINT, "model": ANTHROPIC_MODEL},
                "gemini": {"apiKey": GEMINI_API_KEY, "endpoint": GEMINI_ENDPOINT, "model": GEMINI_MODEL},
                "custom": {"apiKey": CUSTOM_API_KEY, "endpoint": CUSTOM_ENDPOINT, "model": CUSTOM_MODEL},
            },
        }
    )

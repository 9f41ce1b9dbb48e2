"""
Error kinds surfaced by the draft assistant.

Every message is a short single line meant to be shown to the user as is.
"""
from typing import Optional


class DraftspliceError(Exception):
    """Base class for all user-facing failures."""


class ConfigurationError(DraftspliceError):
    """Missing API key, endpoint or unknown provider. Raised before any network call."""


class ProviderError(DraftspliceError):
    """Transport or vendor failure of a completion call. Never retried."""

    def __init__(self, message: str, status_code: Optional[int] = None, provider: str = "") -> None:
        self.status_code = status_code
        self.provider = provider
        super().__init__(message)


class MalformedCompletionError(DraftspliceError):
    """Model output is not the requested JSON object. Always recovered by the parser."""

    def __init__(self, reason: str, raw_text: str) -> None:
        self.reason = reason
        self.raw_text = raw_text
        super().__init__(f"Malformed completion: {reason}")


class HostOperationError(DraftspliceError):
    """Raised by a mail host adapter when a read or write fails."""


class HostWriteError(DraftspliceError):
    """A subject or body write failed; the draft is left unmodified."""

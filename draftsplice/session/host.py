"""
Mail host boundary — asynchronous read / write of the compose item.

The core only talks to a host through this protocol; adapters raise
HostOperationError when the underlying client reports a failure.
"""
import asyncio
import logging
from pathlib import Path
from typing import Optional, Protocol

from draftsplice.completion.errors import HostOperationError

logger = logging.getLogger(__name__)


class MailHost(Protocol):
    """Compose item operations offered by the mail client."""

    async def get_body(self) -> str:
        """Current body as HTML."""
        ...

    async def set_body(self, html: str) -> None:
        """Replace the whole body with *html*."""
        ...

    async def set_subject(self, subject: str) -> None:
        ...


class FileMailHost:
    """
    Host backed by files: the body is read from *body_path* and written to
    *output_path* (defaults to the same file). The subject is written to
    *subject_path* when given and always kept in ``self.subject``.
    """

    def __init__(
        self,
        body_path: Path,
        output_path: Optional[Path] = None,
        subject_path: Optional[Path] = None,
    ) -> None:
        self.body_path = Path(body_path)
        self.output_path = Path(output_path) if output_path else self.body_path
        self.subject_path = Path(subject_path) if subject_path else None
        self.subject: str = ""

    async def get_body(self) -> str:
        try:
            return await asyncio.to_thread(self.body_path.read_text, encoding="utf-8")
        except OSError as e:
            raise HostOperationError(f"Failed to read email body: {e}") from e

    async def set_body(self, html: str) -> None:
        try:
            await asyncio.to_thread(self.output_path.write_text, html, encoding="utf-8")
        except OSError as e:
            raise HostOperationError(f"Failed to write email body: {e}") from e
        logger.info("Body written to %s (%d chars)", self.output_path, len(html))

    async def set_subject(self, subject: str) -> None:
        if self.subject_path is not None:
            try:
                await asyncio.to_thread(self.subject_path.write_text, subject, encoding="utf-8")
            except OSError as e:
                raise HostOperationError(f"Failed to write subject: {e}") from e
        self.subject = subject

"""
Compose session — process-local state fed by the periodic capture.

Single writer: ``capture()`` (driven by ``run_capture_loop`` every second)
is the only code that updates the draft text, the thread text and the
signature template. The template is taken from the first capture and is
never replaced afterwards: later captures happen while the user is typing
and would record their text as "signature".
"""
import asyncio
import logging
from typing import Optional

from draftsplice.completion.errors import HostOperationError
from draftsplice.config.constants import CONTEXT_THREAD_SEPARATOR, PREVIEW_THREAD_SEPARATOR
from draftsplice.config.settings import CAPTURE_INTERVAL_SECONDS
from draftsplice.models.compose_document import ComposeDocument
from draftsplice.models.segmentation import ExtractedText
from draftsplice.observability.metrics import record_capture
from draftsplice.segmentation.segmenter import split_for_extraction
from draftsplice.segmentation.signature import strip_signature
from draftsplice.segmentation.thread_cleaner import clean_thread_text
from draftsplice.session.host import MailHost

logger = logging.getLogger(__name__)


class ComposeSession:
    """Session context shared by the capture loop and user actions."""

    def __init__(self, include_thread: bool = True, signature_template: Optional[str] = None) -> None:
        self.include_thread = include_thread
        self.current_message_text: str = ""
        self.thread_text: str = ""
        self.last_body_html: str = ""
        self.capture_count: int = 0
        self._signature_template = signature_template

    @property
    def signature_template(self) -> Optional[str]:
        """Clean-state draft captured on the first read; None before it."""
        return self._signature_template

    @property
    def has_content(self) -> bool:
        return bool(self.current_message_text)

    def capture(self, html: str) -> ExtractedText:
        """Re-segment *html* and refresh the session text. Read-only on the document."""
        extracted = split_for_extraction(ComposeDocument(html).parse())

        if self._signature_template is None:
            self._signature_template = extracted.current_message_text.strip()
            logger.info("Signature template captured (%d chars)", len(self._signature_template))

        self.last_body_html = html
        self.current_message_text = strip_signature(
            extracted.current_message_text, self._signature_template
        )
        self.thread_text = clean_thread_text(extracted.thread_text) if self.include_thread else ""
        self.capture_count += 1
        return ExtractedText(
            current_message_text=self.current_message_text,
            thread_text=self.thread_text,
        )

    def build_context(self) -> str:
        """Prompt context: the draft, plus the cleaned thread when enabled."""
        context = self.current_message_text
        if self.include_thread and self.thread_text:
            context += CONTEXT_THREAD_SEPARATOR + self.thread_text
        return context

    def context_preview(self) -> str:
        if not self.has_content:
            return "(Waiting for content...)"
        preview = self.current_message_text
        if self.include_thread and self.thread_text:
            preview += PREVIEW_THREAD_SEPARATOR + self.thread_text
        return preview

    def status_text(self) -> str:
        if not self.has_content:
            return "Start typing your email..."
        body_chars = len(self.current_message_text)
        thread_chars = len(self.thread_text) if self.include_thread else 0
        if thread_chars:
            return f"Monitoring ({body_chars} + {thread_chars} thread = {body_chars + thread_chars} chars)"
        return f"Monitoring email ({body_chars} chars)"

    async def run_capture_loop(
        self,
        host: MailHost,
        interval: float = CAPTURE_INTERVAL_SECONDS,
        stop: Optional[asyncio.Event] = None,
    ) -> None:
        """Capture the host body every *interval* seconds until *stop* is set."""
        stop = stop or asyncio.Event()
        while not stop.is_set():
            try:
                html = await host.get_body()
            except HostOperationError as e:
                logger.warning("Capture skipped: %s", e)
                record_capture("skipped")
            else:
                self.capture(html)
                record_capture("captured")

            try:
                await asyncio.wait_for(stop.wait(), timeout=interval)
            except asyncio.TimeoutError:
                pass

"""
Draft Assistant — orchestrates the user-triggered actions.

    process         context → completion → CompletionResult
    insert_subject  CompletionResult.subject → host
    replace_body    fresh body → preserved fragments → recomposed body → host

Each action is terminal on failure: the error is raised once with a short
message and nothing is retried.
"""
import asyncio
import logging
from typing import Callable, Optional, Tuple

from draftsplice.completion.errors import ConfigurationError, HostOperationError, HostWriteError, ProviderError
from draftsplice.completion.parsing import missing_placeholders
from draftsplice.completion.providers import get_provider
from draftsplice.config.settings import provider_settings_from_env
from draftsplice.formatting.formatter import format_for_insertion, to_plain_text
from draftsplice.formatting.reconstructor import assemble_from_fragments
from draftsplice.models.completion import CompletionRequest, CompletionResult, ProviderSettings
from draftsplice.models.compose_document import ComposeDocument
from draftsplice.observability.metrics import record_completion, record_host_failure, timed_completion
from draftsplice.segmentation.segmenter import extract_preservable_fragments
from draftsplice.session.capture import ComposeSession
from draftsplice.session.host import MailHost

logger = logging.getLogger(__name__)


class DraftAssistant:
    """User actions over one compose session."""

    def __init__(
        self,
        host: MailHost,
        session: ComposeSession,
        settings_source: Callable[[], ProviderSettings] = provider_settings_from_env,
    ) -> None:
        self.host = host
        self.session = session
        self.settings_source = settings_source
        self.last_result: Optional[CompletionResult] = None

    def can_process(self, instruction: str) -> bool:
        return bool(self.session.current_message_text.strip()) and bool((instruction or "").strip())

    async def process(self, instruction: str) -> CompletionResult:
        """
        Send the captured draft (and thread) with *instruction* to the active provider.

        Raises:
            ValueError: nothing captured yet or empty instruction.
            ConfigurationError: provider not usable, raised before any network call.
            ProviderError: transport or vendor failure.
        """
        if not self.can_process(instruction):
            raise ValueError("Nothing to process: the draft or the instruction is empty")

        settings = self.settings_source()
        try:
            provider = get_provider(settings)
        except ConfigurationError:
            record_completion(settings.active_provider, "configuration_error")
            raise
        request = CompletionRequest(context=self.session.build_context(), instruction=instruction.strip())

        try:
            with timed_completion(provider.kind):
                result = await asyncio.to_thread(provider.complete_request, request)
        except ProviderError:
            record_completion(provider.kind, "provider_error")
            raise
        record_completion(provider.kind, "ok")

        dropped = missing_placeholders(request.context, result)
        if dropped:
            logger.warning("Completion dropped placeholders: %s", dropped)

        self.last_result = result
        return result

    async def insert_subject(self, result: Optional[CompletionResult] = None) -> bool:
        """Write the suggested subject. Returns False when there is none."""
        result = result or self.last_result
        if result is None or not result.has_subject:
            return False
        try:
            await self.host.set_subject(result.subject)
        except HostOperationError as e:
            logger.error("Subject write failed: %s", e)
            record_host_failure("set_subject")
            raise HostWriteError(f"Failed to insert subject: {e}") from e
        return True

    async def replace_body(self, result: Optional[CompletionResult] = None) -> Optional[str]:
        """
        Replace the draft region, keeping the signature and thread.

        The body is re-read right before writing so that fragments come
        from what the host holds now, not from the last capture.

        Returns:
            The HTML written, or None when the result has no body.
        """
        result = result or self.last_result
        if result is None or not result.has_body:
            return None

        try:
            html = await self.host.get_body()
        except HostOperationError as e:
            logger.error("Body read before replace failed: %s", e)
            record_host_failure("get_body")
            raise HostWriteError("Failed to read current email body") from e

        fragments = extract_preservable_fragments(
            ComposeDocument(html).parse(),
            self.session.signature_template,
        )
        body = assemble_from_fragments(result.body, fragments)

        try:
            await self.host.set_body(body)
        except HostOperationError as e:
            logger.error("Body write failed: %s", e)
            record_host_failure("set_body")
            raise HostWriteError(f"Failed to replace: {e}") from e

        logger.info(
            "Body replaced (signature kept=%s, thread kept=%s)",
            bool(fragments.signature_html),
            bool(fragments.thread_html),
        )
        return body

    def clipboard_payload(self, result: Optional[CompletionResult] = None) -> Tuple[str, str]:
        """(html, plain text) flavours of the result body for the clipboard."""
        result = result or self.last_result
        if result is None or not result.has_body:
            return "", ""
        return format_for_insertion(result.body), to_plain_text(result.body)

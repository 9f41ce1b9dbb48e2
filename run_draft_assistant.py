"""
Command-line driver for the draft assistant.

Reads:
  - an HTML file holding the compose body

Produces:
  - a segmentation summary on stdout
  - with --instruction: the completion result, and with --output the
    recomposed body (new draft + original signature + original thread)
"""
import argparse
import asyncio
import logging
import sys
from pathlib import Path

from draftsplice.completion.errors import DraftspliceError
from draftsplice.config.settings import LOG_LEVEL, SETTINGS_FILE, provider_settings_from_env
from draftsplice.models.compose_document import ComposeDocument
from draftsplice.segmentation.segmenter import segment
from draftsplice.session.assistant import DraftAssistant
from draftsplice.session.capture import ComposeSession
from draftsplice.session.host import FileMailHost
from draftsplice.storage.settings_store import JsonSettingsStore

# ---------------------------------------------------------------------------
# Setup logging
# ---------------------------------------------------------------------------
logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s [%(levelname)s] %(name)s — %(message)s",
    stream=sys.stdout,
)
logger = logging.getLogger("run_draft_assistant")


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Rewrite the draft region of a compose body.")
    parser.add_argument("body", type=Path, help="HTML file with the compose body")
    parser.add_argument("-i", "--instruction", default="", help="instruction sent with the draft")
    parser.add_argument("-o", "--output", type=Path, help="where to write the recomposed body")
    parser.add_argument("--no-thread", action="store_true", help="do not send the thread as context")
    parser.add_argument(
        "--clean-body",
        type=Path,
        help="HTML file with the body as it was when the compose window opened (signature template)",
    )
    parser.add_argument(
        "--settings",
        type=Path,
        help=f"provider settings file (e.g. {SETTINGS_FILE}); environment is used otherwise",
    )
    return parser.parse_args()


async def main(args: argparse.Namespace) -> int:
    host = FileMailHost(args.body, output_path=args.output)
    if args.clean_body:
        session = ComposeSession(include_thread=not args.no_thread)
        session.capture(await FileMailHost(args.clean_body).get_body())
    else:
        # No clean snapshot: closing phrases and contact lines still apply.
        session = ComposeSession(include_thread=not args.no_thread, signature_template="")

    # -----------------------------------------------------------------------
    # Capture
    # -----------------------------------------------------------------------
    html = await host.get_body()
    session.capture(html)
    result = segment(ComposeDocument(html), session.signature_template)

    print("\n" + "=" * 70)
    print("SEGMENTATION")
    print("=" * 70)
    print(f"draft       : {len(session.current_message_text)} chars")
    print(f"thread      : {len(session.thread_text)} chars")
    print(f"signature   : {len(result.signature_html)} chars of markup")
    print(f"thread html : {len(result.thread_html)} chars of markup")
    print("-" * 70)
    print(session.context_preview())
    print("=" * 70 + "\n")

    if not args.instruction:
        return 0

    # -----------------------------------------------------------------------
    # Completion
    # -----------------------------------------------------------------------
    settings_source = provider_settings_from_env
    if args.settings:
        settings_source = JsonSettingsStore(args.settings).get_provider_settings

    assistant = DraftAssistant(host, session, settings_source)
    completion = await assistant.process(args.instruction)

    print(f"Subject : {completion.subject or '(none)'}")
    print(f"Body    :\n{completion.body}\n")

    if args.output:
        await assistant.replace_body(completion)
        logger.info("Output saved in: %s", args.output)
    return 0


if __name__ == "__main__":
    arguments = parse_args()
    try:
        sys.exit(asyncio.run(main(arguments)))
    except (DraftspliceError, ValueError) as e:
        logger.error("%s", e)
        sys.exit(1)

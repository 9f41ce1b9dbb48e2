"""
Region Segmenter — splits compose markup into draft, signature and thread.

Two independent contracts over a NodeTree:
    A. split_for_extraction          → plain text for prompting
    B. extract_preservable_fragments → serialized markup to reattach

Contract B excludes the thread subtree before searching for the signature,
so the two fragments never capture the same markup.
"""
import logging
import re
from typing import AbstractSet, List, Optional

from draftsplice.config.constants import (
    SIGNATURE_BLOCK_PATTERNS,
    SIGNATURE_CONTAINER_MARKERS,
    SIGNATURE_PHRASE_CONTAINER_TAGS,
    SIGNATURE_TEMPLATE_CONTAINER_TAGS,
    TEMPLATE_MIN_LENGTH,
)
from draftsplice.models.compose_document import ComposeDocument
from draftsplice.models.node_tree import TEXT, NodeTree
from draftsplice.models.segmentation import ExtractedText, PreservedFragments, SegmentationResult
from draftsplice.observability.metrics import record_detection
from draftsplice.segmentation.thread_locator import locate_thread_start

logger = logging.getLogger(__name__)

_BLOCK_PHRASE_RES = [re.compile(p, re.IGNORECASE | re.MULTILINE) for p in SIGNATURE_BLOCK_PATTERNS]


# ======================================================================
# Contract A: text projection
# ======================================================================

def split_for_extraction(tree: NodeTree) -> ExtractedText:
    """
    Split the document text at the thread-start node.

    Text in document order strictly before the node is the current
    message; the node, its following siblings and everything after them
    is the thread.
    """
    thread_start = locate_thread_start(tree)
    if thread_start is None:
        return ExtractedText(current_message_text=tree.text_content().strip(), thread_text="")

    before: List[str] = []
    after: List[str] = []
    target = before
    for node in tree.iter_preorder():
        if node.index == thread_start:
            target = after
        if node.kind == TEXT:
            target.append(node.data)

    return ExtractedText(
        current_message_text="".join(before).strip(),
        thread_text="".join(after).strip(),
    )


# ======================================================================
# Contract B: preservable fragments
# ======================================================================

def extract_preservable_fragments(
    tree: NodeTree,
    signature_template: Optional[str] = None,
) -> PreservedFragments:
    """
    Capture the thread and signature blocks as markup.

    Each fragment is the top-level block holding the detected node plus
    all following top-level siblings. Both are empty when nothing is found,
    in which case the whole body is replaceable draft content.
    """
    excluded: set = set()
    thread_html = ""

    thread_start = locate_thread_start(tree)
    if thread_start is not None:
        block = tree.top_level_ancestor(thread_start)
        if block is not None:
            captured = [block] + tree.following_siblings(block)
            thread_html = tree.serialize_many(captured)
            excluded.update(captured)

    signature_html = ""
    signature_start = locate_signature_start(tree, signature_template, excluded)
    if signature_start is not None:
        block = tree.top_level_ancestor(signature_start)
        if block is not None:
            captured = [block] + tree.following_siblings(block, excluded)
            signature_html = tree.serialize_many(captured)

    logger.debug(
        "Preserved fragments: signature=%d chars, thread=%d chars",
        len(signature_html),
        len(thread_html),
    )
    return PreservedFragments(signature_html=signature_html, thread_html=thread_html)


def locate_signature_start(
    tree: NodeTree,
    signature_template: Optional[str] = None,
    excluded: AbstractSet[int] = frozenset(),
) -> Optional[int]:
    """
    Find the element where the signature starts in the non-excluded tree.

    Order: explicit signature containers, then the last block whose text
    belongs to the session template, then a closing phrase at a line start.
    """
    for marker in SIGNATURE_CONTAINER_MARKERS:
        node = tree.find_first(lambda n: n.matches(marker), excluded=excluded)
        if node is not None:
            logger.debug("Signature found by marker %s: %r", marker, node)
            record_detection("signature", "marker")
            return node.index

    template = (signature_template or "").strip()
    if len(template) > TEMPLATE_MIN_LENGTH:
        candidates = list(tree.elements(SIGNATURE_TEMPLATE_CONTAINER_TAGS, excluded))
        for node in reversed(candidates):
            text = tree.text_content(node.index, excluded).strip()
            if len(text) > TEMPLATE_MIN_LENGTH and text in template:
                logger.debug("Signature found by template: %r", node)
                record_detection("signature", "template")
                return node.index

    for node in tree.elements(SIGNATURE_PHRASE_CONTAINER_TAGS, excluded):
        text = tree.text_content(node.index, excluded)
        if any(pattern.search(text) for pattern in _BLOCK_PHRASE_RES):
            logger.debug("Signature found by closing phrase: %r", node)
            record_detection("signature", "phrase")
            return node.index

    record_detection("signature", "none")
    return None


# ======================================================================
# Combined
# ======================================================================

def segment(document: ComposeDocument, signature_template: Optional[str] = None) -> SegmentationResult:
    """Run both contracts, each over its own parse of *document*."""
    text = split_for_extraction(document.parse())
    fragments = extract_preservable_fragments(document.parse(), signature_template)
    return SegmentationResult.combine(text, fragments)

"""
Thread Boundary Locator — finds the node where quoted history starts.

Probe order (first hit wins):
    a. client markers (Outlook desktop / web, Gmail, blockquote, hr[tabindex=-1])
    b. header text ("From: ... Sent:" in en / fr / de, "Original Message")
    c. first plain <hr>
"""
import logging
import re
from typing import AbstractSet, Optional

from draftsplice.config.constants import (
    THREAD_HEADER_CONTAINER_TAGS,
    THREAD_HEADER_PATTERNS,
    THREAD_MARKERS,
)
from draftsplice.models.node_tree import NodeTree
from draftsplice.observability.metrics import record_detection

logger = logging.getLogger(__name__)

_HEADER_RES = [re.compile(p, re.IGNORECASE) for p in THREAD_HEADER_PATTERNS]


def locate_thread_start(tree: NodeTree, excluded: AbstractSet[int] = frozenset()) -> Optional[int]:
    """
    Return the index of the node marking the start of the thread, or None.

    None is a normal outcome: the whole document is then draft content.
    """
    for marker in THREAD_MARKERS:
        node = tree.find_first(lambda n: n.matches(marker), excluded=excluded)
        if node is not None:
            logger.debug("Thread start found by marker %s: %r", marker, node)
            record_detection("thread", "marker")
            return node.index

    node = tree.find_first(
        lambda n: has_thread_header(tree.text_content(n.index)),
        tags=THREAD_HEADER_CONTAINER_TAGS,
        excluded=excluded,
    )
    if node is not None:
        logger.debug("Thread start found by header text: %r", node)
        record_detection("thread", "header")
        return node.index

    node = tree.find_first(lambda n: True, tags=("hr",), excluded=excluded)
    if node is not None:
        logger.debug("Thread start found by plain <hr>: %r", node)
        record_detection("thread", "hr")
        return node.index

    record_detection("thread", "none")
    return None


def has_thread_header(text: str) -> bool:
    """True when *text* contains a reply header in a supported locale."""
    return any(pattern.search(text) for pattern in _HEADER_RES)

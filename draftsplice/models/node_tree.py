"""
NodeTree — immutable arena snapshot of parsed compose markup.

Nodes are referenced by index; each node carries its kind, tag, attribute
pairs, ordered child indices and parent index. Segmentation never mutates
a tree: "removing" a subtree means passing its index in ``excluded`` to
the next traversal.

The tree root is the ``<body>`` element when the markup has one (the same
children a browser exposes after assigning the markup to ``innerHTML``),
otherwise a synthetic ``#document`` node.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import AbstractSet, Callable, Iterable, Iterator, List, Optional, Tuple

from bs4 import (
    BeautifulSoup,
    CData,
    Comment,
    Declaration,
    Doctype,
    NavigableString,
    ProcessingInstruction,
    Tag,
)

from draftsplice.config.constants import VOID_ELEMENTS

ELEMENT = "element"
TEXT = "text"
COMMENT = "comment"
DECLARATION = "declaration"

_RAW_TEXT_ELEMENTS = frozenset({"script", "style"})
_NO_EXCLUSIONS: AbstractSet[int] = frozenset()


@dataclass(frozen=True)
class Node:
    """A single node of the arena."""

    index: int
    kind: str                                   # "element" | "text" | "comment" | "declaration"
    tag: str = ""
    attrs: Tuple[Tuple[str, str], ...] = ()
    children: Tuple[int, ...] = ()
    parent: Optional[int] = None
    data: str = ""                              # text / comment payload, or raw declaration markup

    @property
    def is_element(self) -> bool:
        return self.kind == ELEMENT

    def attr(self, name: str, default: Optional[str] = None) -> Optional[str]:
        for key, value in self.attrs:
            if key == name:
                return value
        return default

    def has_attr(self, name: str) -> bool:
        return any(key == name for key, _ in self.attrs)

    @property
    def classes(self) -> Tuple[str, ...]:
        return tuple((self.attr("class") or "").split())

    def matches(self, marker: dict) -> bool:
        """
        Match a minimal selector dict: ``tag``, ``id``, ``class`` and
        ``attrs`` (a value of None means "attribute present").
        Id and class comparisons are case-sensitive, as in CSS.
        """
        if not self.is_element:
            return False
        if "tag" in marker and self.tag != marker["tag"]:
            return False
        if "id" in marker and self.attr("id") != marker["id"]:
            return False
        if "class" in marker and marker["class"] not in self.classes:
            return False
        for name, value in marker.get("attrs", {}).items():
            if not self.has_attr(name):
                return False
            if value is not None and self.attr(name) != value:
                return False
        return True

    def __repr__(self) -> str:
        if self.is_element:
            return f"Node({self.index}, <{self.tag}>)"
        return f"Node({self.index}, {self.kind}, {self.data[:20]!r})"


@dataclass(frozen=True)
class NodeTree:
    """Immutable node arena plus traversal helpers."""

    nodes: Tuple[Node, ...]
    root: int = 0

    def __len__(self) -> int:
        return len(self.nodes)

    def __getitem__(self, index: int) -> Node:
        return self.nodes[index]

    # ------------------------------------------------------------------
    # Traversal
    # ------------------------------------------------------------------

    def iter_preorder(
        self,
        start: Optional[int] = None,
        excluded: AbstractSet[int] = _NO_EXCLUSIONS,
    ) -> Iterator[Node]:
        """Yield the subtree at *start* in document order, skipping excluded subtrees."""
        start = self.root if start is None else start
        stack = [start]
        while stack:
            index = stack.pop()
            if index in excluded:
                continue
            node = self.nodes[index]
            yield node
            stack.extend(reversed(node.children))

    def elements(
        self,
        tags: Optional[Iterable[str]] = None,
        excluded: AbstractSet[int] = _NO_EXCLUSIONS,
    ) -> Iterator[Node]:
        """Yield descendant elements of the root (root itself excluded) in document order."""
        wanted = set(tags) if tags is not None else None
        for node in self.iter_preorder(excluded=excluded):
            if node.index == self.root or not node.is_element:
                continue
            if wanted is None or node.tag in wanted:
                yield node

    def find_first(
        self,
        predicate: Callable[[Node], bool],
        tags: Optional[Iterable[str]] = None,
        excluded: AbstractSet[int] = _NO_EXCLUSIONS,
    ) -> Optional[Node]:
        for node in self.elements(tags, excluded):
            if predicate(node):
                return node
        return None

    def top_level_ancestor(self, index: int) -> Optional[int]:
        """Nearest ancestor-or-self that is a direct child of the root."""
        if index == self.root:
            return None
        node = self.nodes[index]
        while node.parent is not None and node.parent != self.root:
            node = self.nodes[node.parent]
        return node.index if node.parent == self.root else None

    def following_siblings(
        self,
        index: int,
        excluded: AbstractSet[int] = _NO_EXCLUSIONS,
    ) -> List[int]:
        parent = self.nodes[index].parent
        if parent is None:
            return []
        siblings = self.nodes[parent].children
        position = siblings.index(index)
        return [i for i in siblings[position + 1:] if i not in excluded]

    # ------------------------------------------------------------------
    # Projections
    # ------------------------------------------------------------------

    def text_content(
        self,
        index: Optional[int] = None,
        excluded: AbstractSet[int] = _NO_EXCLUSIONS,
    ) -> str:
        """Concatenated text nodes of a subtree (comments skipped)."""
        return "".join(
            node.data for node in self.iter_preorder(index, excluded) if node.kind == TEXT
        )

    def serialize(self, index: int) -> str:
        """Re-emit the markup of a subtree."""
        parts: List[str] = []
        self._serialize_into(index, parts)
        return "".join(parts)

    def serialize_many(self, indices: Iterable[int]) -> str:
        return "".join(self.serialize(i) for i in indices)

    def _serialize_into(self, index: int, parts: List[str]) -> None:
        node = self.nodes[index]
        if node.kind == TEXT:
            parent = self.nodes[node.parent] if node.parent is not None else None
            if parent is not None and parent.tag in _RAW_TEXT_ELEMENTS:
                parts.append(node.data)
            else:
                parts.append(_escape_text(node.data))
            return
        if node.kind == COMMENT:
            parts.append(f"<!--{node.data}-->")
            return
        if node.kind == DECLARATION:
            parts.append(node.data)
            return

        is_document = node.tag == "#document"
        if not is_document:
            attrs = "".join(f' {name}="{_escape_attr(value)}"' for name, value in node.attrs)
            parts.append(f"<{node.tag}{attrs}>")
            if node.tag in VOID_ELEMENTS:
                return
        for child in node.children:
            self._serialize_into(child, parts)
        if not is_document:
            parts.append(f"</{node.tag}>")


# ======================================================================
# Builder
# ======================================================================

def build_node_tree(html: str) -> NodeTree:
    """Parse *html* with BeautifulSoup and freeze it into a NodeTree."""
    soup = BeautifulSoup(html or "", "html.parser")
    body = soup.find("body")
    start = body if isinstance(body, Tag) else soup

    drafts: List[dict] = []

    def visit(source, parent: Optional[int]) -> Optional[int]:
        if isinstance(source, Doctype):
            return None

        index = len(drafts)
        if isinstance(source, (CData, Declaration, ProcessingInstruction)):
            drafts.append({"kind": DECLARATION, "data": _declaration_markup(source), "parent": parent})
            return index
        if isinstance(source, Comment):
            drafts.append({"kind": COMMENT, "data": str(source), "parent": parent})
            return index
        if isinstance(source, NavigableString):
            drafts.append({"kind": TEXT, "data": str(source), "parent": parent})
            return index

        tag = "#document" if source is soup else source.name.lower()
        attrs = tuple(
            (name, " ".join(value) if isinstance(value, list) else ("" if value is None else str(value)))
            for name, value in source.attrs.items()
        )
        draft = {"kind": ELEMENT, "tag": tag, "attrs": attrs, "parent": parent, "children": []}
        drafts.append(draft)
        for child in source.children:
            child_index = visit(child, index)
            if child_index is not None:
                draft["children"].append(child_index)
        return index

    visit(start, None)

    nodes = tuple(
        Node(
            index=i,
            kind=d["kind"],
            tag=d.get("tag", ""),
            attrs=d.get("attrs", ()),
            children=tuple(d.get("children", ())),
            parent=d["parent"],
            data=d.get("data", ""),
        )
        for i, d in enumerate(drafts)
    )
    return NodeTree(nodes=nodes, root=0)


def _declaration_markup(source: NavigableString) -> str:
    """
    Rebuild the markup html.parser consumed for a declaration-like node.

    Word emits downlevel-revealed conditionals (``<![if !supportLists]>``
    ... ``<![endif]>``) around list bullets; they come back as marked
    sections and must survive a round trip unchanged.
    """
    if isinstance(source, CData):
        return f"<![CDATA[{source}]]>"
    if isinstance(source, ProcessingInstruction):
        return f"<?{source}>"
    return f"<![{str(source).rstrip(']')}]>"


def _escape_text(value: str) -> str:
    return (
        value.replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace("\xa0", "&nbsp;")
    )


def _escape_attr(value: str) -> str:
    return value.replace("&", "&amp;").replace('"', "&quot;").replace("\xa0", "&nbsp;")

"""
ComposeDocument — snapshot of the markup of the email being authored.
"""
from dataclasses import dataclass

from draftsplice.models.node_tree import NodeTree, build_node_tree


@dataclass(frozen=True)
class ComposeDocument:
    """Raw compose markup captured at one point in time."""

    raw_html: str

    def parse(self) -> NodeTree:
        """
        Build a fresh NodeTree for this snapshot.

        Not cached: the host document keeps changing while the user types,
        so every capture cycle parses its own snapshot.
        """
        return build_node_tree(self.raw_html)

    @property
    def is_empty(self) -> bool:
        return not self.raw_html.strip()

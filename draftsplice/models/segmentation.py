"""
Segmentation results — plain-text projections and preservable fragments.
"""
from dataclasses import dataclass


@dataclass(frozen=True)
class ExtractedText:
    """Plain-text projection used only for prompting, never written back."""

    current_message_text: str = ""
    thread_text: str = ""

    @property
    def has_thread(self) -> bool:
        return bool(self.thread_text)


@dataclass(frozen=True)
class PreservedFragments:
    """Serialized markup reattached after a replacement draft."""

    signature_html: str = ""
    thread_html: str = ""

    @property
    def is_empty(self) -> bool:
        return not self.signature_html and not self.thread_html


@dataclass(frozen=True)
class SegmentationResult:
    """Full segmentation of one compose snapshot."""

    current_message_text: str = ""
    thread_text: str = ""
    signature_html: str = ""
    thread_html: str = ""

    @classmethod
    def combine(cls, text: ExtractedText, fragments: PreservedFragments) -> "SegmentationResult":
        return cls(
            current_message_text=text.current_message_text,
            thread_text=text.thread_text,
            signature_html=fragments.signature_html,
            thread_html=fragments.thread_html,
        )

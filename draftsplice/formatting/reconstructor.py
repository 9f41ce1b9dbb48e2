"""
Draft Reconstructor — splices a replacement draft with preserved fragments.
"""
from draftsplice.formatting.formatter import format_for_insertion
from draftsplice.models.segmentation import PreservedFragments


def assemble_replacement_body(new_body: str, signature_html: str = "", thread_html: str = "") -> str:
    """
    Full body to write back: formatted draft, then signature, then thread.

    Plain concatenation in that fixed order; the fragments are reattached
    exactly as extracted.
    """
    return format_for_insertion(new_body) + (signature_html or "") + (thread_html or "")


def assemble_from_fragments(new_body: str, fragments: PreservedFragments) -> str:
    return assemble_replacement_body(new_body, fragments.signature_html, fragments.thread_html)

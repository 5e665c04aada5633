"""Fragment discovery: candidate selection, extraction and classification in one sweep.

Key objects: Fragment, extract_fragments
"""
from utils.console import debug
from utils.text import shorten_for_display
from .classifier import rejection_reason
from .extractors import extract_code_text, is_marked_as_plantuml
from .selectors import select_candidate_nodes


class Fragment:
    """A code container holding diagram source, found by one scan pass."""

    __slots__ = ("node", "text", "index", "trusted")

    def __init__(self, node, text, index, trusted=False):
        self.node = node
        self.text = text
        self.index = index
        self.trusted = trusted

    def __repr__(self):
        return f"Fragment(#{self.index}, {shorten_for_display(self.text, 40)!r})"


def extract_fragments(root, is_processed=None, settings=None):
    """
    Find every diagram fragment under root, in document order.

    Args:
        root: lxml element to scan
        is_processed: optional predicate; nodes it accepts are skipped
            before any text is extracted
        settings: optional RenderSettings, only used for debug traces

    Returns:
        list of Fragment
    """
    candidates = select_candidate_nodes(root)
    debug(settings, f"Found {len(candidates)} code blocks")

    fragments = []
    for index, node in enumerate(candidates):
        if is_processed is not None and is_processed(node):
            continue

        text = extract_code_text(node)
        if not text:
            continue

        trusted = is_marked_as_plantuml(node)
        if trusted:
            fragments.append(Fragment(node, text, index, trusted=True))
            continue

        reason = rejection_reason(text)
        if reason is None:
            debug(settings, f"Recognised PlantUML #{index}")
            fragments.append(Fragment(node, text, index))
        else:
            debug(settings, f"Skipped block #{index} ({reason}): {shorten_for_display(text)}")

    debug(settings, f"Found {len(fragments)} PlantUML blocks")
    return fragments

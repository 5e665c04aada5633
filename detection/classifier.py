"""Decide whether a piece of text is PlantUML diagram source.

Key functions: rejection_reason, is_diagram_source
"""
from config.diagram_syntax import (
    ARROW_TOKENS,
    CODE_EXCLUSION_TOKENS,
    DOMAIN_KEYWORD_PATTERN,
    MARKER_PAIRS,
    MIN_SOURCE_LENGTH,
    STRUCTURAL_TOKENS,
    find_start_marker,
)


def rejection_reason(text):
    """
    Explain why text is not diagram source.

    Marked text (starting with an @start marker) needs the matching @end
    marker and at least one structural token. Unmarked text needs a domain
    keyword and an arrow, and must not look like ordinary program code.

    Returns:
        str or None: a short reason, or None when text qualifies
    """
    if not text:
        return "empty"
    trimmed = text.strip().lower()
    if len(trimmed) < MIN_SOURCE_LENGTH:
        return "too short"

    start_marker = find_start_marker(trimmed)
    if start_marker is not None:
        if MARKER_PAIRS[start_marker] not in trimmed:
            return f"missing {MARKER_PAIRS[start_marker]}"
        if not any(token in trimmed for token in STRUCTURAL_TOKENS):
            return "no diagram syntax between markers"
        return None

    if any(token in trimmed for token in CODE_EXCLUSION_TOKENS):
        return "looks like program code"
    if not DOMAIN_KEYWORD_PATTERN.search(trimmed):
        return "no diagram keyword"
    if not any(arrow in trimmed for arrow in ARROW_TOKENS):
        return "no arrow"
    return None


def is_diagram_source(text):
    """Return True if text qualifies as PlantUML source."""
    return rejection_reason(text) is None

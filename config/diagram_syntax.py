"""Diagram syntax tables shared by the codec and the classifier.

Key globals: DIAGRAM_TYPES, START_MARKERS, END_MARKERS, STRUCTURAL_TOKENS,
DOMAIN_KEYWORD_PATTERN, ARROW_TOKENS, CODE_EXCLUSION_TOKENS, MIN_SOURCE_LENGTH
"""
from bootstrap.primary_imports import re

# @start<type> ... @end<type>
DIAGRAM_TYPES = ("uml", "mindmap", "salt", "ditaa", "dot", "yaml", "json")

START_MARKERS = tuple(f"@start{t}" for t in DIAGRAM_TYPES)
END_MARKERS = tuple(f"@end{t}" for t in DIAGRAM_TYPES)
MARKER_PAIRS = dict(zip(START_MARKERS, END_MARKERS))

DEFAULT_START_MARKER = "@startuml"
DEFAULT_END_MARKER = "@enduml"

# Shorter than this is never diagram source
MIN_SOURCE_LENGTH = 5

# At least one must appear in a marked block (lower-cased comparison)
STRUCTURAL_TOKENS = (
    "->", "-->", "--|>", "|>", "<|", "*>", "<*",
    ":", "{",
    "participant ", "actor ", "class ", "interface ", "state ",
)

# Unmarked text needs a domain keyword and an arrow
DOMAIN_KEYWORD_PATTERN = re.compile(
    r"\b(?:participant|actor|boundary|control|entity|database"
    r"|activate|deactivate"
    r"|note\s+(?:left|right|over))\b"
    r"|\b(?:alt|else|opt|loop|par)\s"
)

ARROW_TOKENS = ("->", "-->", "--|>")

# Ordinary source code that happens to contain arrows
CODE_EXCLUSION_TOKENS = (
    "console.log", "function ", "const ", "let ", "var ",
    "import ", "export ",
)

# Class tokens on a code element that mark it as PlantUML without inspection
TRUSTED_CLASS_TOKENS = ("language-puml", "lang-puml")
TRUSTED_CLASS_SUBSTRING = "plantuml"


def find_start_marker(text):
    """Return the start marker text begins with (case-insensitive, after trimming), or None."""
    lowered = text.strip().lower()
    for marker in START_MARKERS:
        if lowered.startswith(marker):
            return marker
    return None

"""Diagram detection: finding PlantUML fragments in a document tree.

Scanner: Fragment, extract_fragments
Classifier: is_diagram_source, rejection_reason
Extractors: extract_code_text, is_marked_as_plantuml
Selectors: select_candidate_nodes, is_attached
Fingerprint: fingerprint, normalize_source
"""
from .scanner import Fragment, extract_fragments
from .classifier import is_diagram_source, rejection_reason
from .extractors import extract_code_text, is_marked_as_plantuml
from .selectors import select_candidate_nodes, is_attached
from .fingerprint import fingerprint, normalize_source

__all__ = [
    'Fragment',
    'extract_fragments',
    'is_diagram_source',
    'rejection_reason',
    'extract_code_text',
    'is_marked_as_plantuml',
    'select_candidate_nodes',
    'is_attached',
    'fingerprint',
    'normalize_source',
]

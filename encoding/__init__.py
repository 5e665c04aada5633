"""
Source-to-wire encoding for the remote PlantUML rendering service.

Codec: encode, wrap_source, encode64 (from encoding.plantuml)
URLs: apply_theme, prepare_source, build_image_url, generate_diagram_url (from encoding.urls)
"""
from .plantuml import encode, wrap_source, encode64, PLANTUML_ALPHABET
from .urls import apply_theme, prepare_source, build_image_url, generate_diagram_url, is_kroki_server

__all__ = [
    'encode',
    'wrap_source',
    'encode64',
    'PLANTUML_ALPHABET',
    'apply_theme',
    'prepare_source',
    'build_image_url',
    'generate_diagram_url',
    'is_kroki_server',
]

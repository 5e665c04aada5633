"""
Presentation of rendered diagrams: HTML replacement, styles, export and
notebook display.
"""
from .presenter import (
    HtmlPresenter,
    RenderError,
    CONTAINER_CLASS,
    ERROR_CLASS,
    IMAGE_CLASS,
)
from .exporters import parse_html_document, save_rendered_document, open_in_browser
from .notebook import display_artifact, display_source

__all__ = [
    'HtmlPresenter',
    'RenderError',
    'CONTAINER_CLASS',
    'ERROR_CLASS',
    'IMAGE_CLASS',
    'parse_html_document',
    'save_rendered_document',
    'open_in_browser',
    'display_artifact',
    'display_source',
]

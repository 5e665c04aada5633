"""Text extraction from code container elements.

Key functions: extract_code_text, find_code_element, is_marked_as_plantuml
"""
from bootstrap.primary_imports import copy
from config.diagram_syntax import TRUSTED_CLASS_SUBSTRING, TRUSTED_CLASS_TOKENS
from utils.tree import drop_keeping_tail
from .selectors import local_name

# Chrome around code blocks that must not leak into the diagram text
_CHROME_XPATH = (
    "descendant::*[contains(@class, 'toolbar') or contains(@class, 'header')"
    " or contains(@class, 'footer') or contains(@class, 'lang')"
    " or contains(@class, 'copy') or local-name()='button'"
    " or contains(concat(' ', normalize-space(@class), ' '), ' uml-error-badge ')]"
)

_LINE_XPATH = "descendant::*[contains(@class, 'code-line')]"

_CONTENT_AREA_XPATH = (
    "descendant::*[contains(concat(' ', normalize-space(@class), ' '), ' code-block-content ')"
    " or contains(@class, 'code-content')]"
)


def _string_value(element):
    """Concatenated text of element and its descendants (comments excluded)."""
    return element.xpath("string()")


def _first(element, xpath):
    matches = element.xpath(xpath)
    return matches[0] if matches else None


def find_code_element(element):
    """Return element itself if it is a <code>, else its first nested <code>, else None."""
    if local_name(element) == 'code':
        return element
    return _first(element, "descendant::*[local-name()='code']")


def is_marked_as_plantuml(element):
    """True when the container's code element carries a PlantUML language class."""
    code_el = find_code_element(element)
    if code_el is None:
        return False
    class_attr = code_el.get('class') or ''
    if TRUSTED_CLASS_SUBSTRING in class_attr.lower():
        return True
    return any(token in class_attr.split() for token in TRUSTED_CLASS_TOKENS)


def _text_without_chrome(element):
    clone = copy.deepcopy(element)
    clone.tail = None
    for chrome in clone.xpath(_CHROME_XPATH):
        drop_keeping_tail(chrome)
    return _string_value(clone).strip()


def extract_code_text(element):
    """
    Extract the code text held by a container element.

    Strategies are tried in order until one yields non-empty text:
    1. the element itself is a <code>
    2. a nested <code>
    3. line-structured children (editor "code-line" rows) joined with newlines
    4. an editor content area
    5. a nested <pre>
    6. the element's own text with toolbars, headers, footers, language
       labels, copy buttons and error badges removed

    Returns:
        str: the stripped text, or '' when nothing was found
    """
    if local_name(element) == 'code':
        text = _string_value(element).strip()
        if text:
            return text

    code_el = _first(element, "descendant::*[local-name()='code']")
    if code_el is not None:
        text = _string_value(code_el).strip()
        if text:
            return text

    lines = element.xpath(_LINE_XPATH)
    if lines:
        text = '\n'.join(_string_value(line) for line in lines).strip()
        if text:
            return text

    content_area = _first(element, _CONTENT_AREA_XPATH)
    if content_area is not None:
        text = _string_value(content_area).strip()
        if text:
            return text

    pre_el = _first(element, "descendant::*[local-name()='pre']")
    if pre_el is not None:
        text = _string_value(pre_el).strip()
        if text:
            return text

    return _text_without_chrome(element)

"""HTML presentation of rendered diagrams on an lxml tree.

The presenter owns every visible change: it inserts an image container in
front of a code node and hides the node, draws a failure badge after it,
and undoes both on restore. The coordinator never touches the tree itself.

Key objects: HtmlPresenter, RenderError
"""
from utils.console import warn
from utils.tree import drop_keeping_tail, qualified_tag
from .styles import HIDDEN_STYLE, container_style, error_badge_style, image_style

CONTAINER_CLASS = "uml-rendered-container"
IMAGE_CLASS = "uml-preview-img"
ERROR_CLASS = "uml-error-badge"
RENDERED_ATTR = "data-uml-rendered"
HASH_ATTR = "data-uml-hash"
# Set on the hidden code node so restore can bring back its inline style
HIDDEN_ATTR = "data-uml-hidden"
ORIGINAL_STYLE_ATTR = "data-uml-original-style"

IMAGE_ALT = "PlantUML Diagram"
ERROR_PREFIX = "PlantUML render failed: "


class RenderError(Exception):
    """A fragment could not be presented."""


def _has_class(element, token):
    return token in (element.get('class') or '').split()


class HtmlPresenter:
    """
    Presentation adapter for HTML documents parsed with lxml.

    apply_replacement returns the inserted container; the coordinator stores
    it as the marker handle and passes it back to restore.
    """

    def __init__(self, settings=None):
        self.settings = settings

    @property
    def _colors(self):
        return getattr(self.settings, "colors", None)

    def _make(self, reference, name, attrib):
        return reference.makeelement(qualified_tag(reference, name), attrib)

    def apply_replacement(self, node, descriptor, original_text=None):
        """Insert the diagram image before node and hide node."""
        if descriptor is None or not descriptor.ok:
            raise RenderError("encoding unavailable")
        if node.getparent() is None:
            raise RenderError("node is not attached to a document")

        self.clear_error(node)
        previous = self.find_container(node)
        if previous is not None:
            drop_keeping_tail(previous)

        container = self._make(node, 'div', {
            'class': CONTAINER_CLASS,
            RENDERED_ATTR: 'true',
            HASH_ATTR: descriptor.fingerprint,
            'style': container_style(self._colors),
        })
        img = self._make(node, 'img', {
            'class': IMAGE_CLASS,
            'src': descriptor.url,
            'alt': IMAGE_ALT,
            'style': image_style(),
        })
        if original_text:
            img.set('title', original_text.splitlines()[0][:120])
        container.append(img)
        node.addprevious(container)
        self._hide(node)
        return container

    def _hide(self, node):
        if node.get(HIDDEN_ATTR) != 'true':
            node.set(ORIGINAL_STYLE_ATTR, node.get('style') or '')
            node.set(HIDDEN_ATTR, 'true')
        node.set('style', HIDDEN_STYLE)

    def _unhide(self, node):
        if node.get(HIDDEN_ATTR) != 'true':
            return
        original = node.attrib.pop(ORIGINAL_STYLE_ATTR, '')
        if original:
            node.set('style', original)
        else:
            node.attrib.pop('style', None)
        del node.attrib[HIDDEN_ATTR]

    def find_container(self, node):
        """The rendered container directly in front of node, if any."""
        previous = node.getprevious()
        if previous is not None and previous.get(RENDERED_ATTR) == 'true':
            return previous
        return None

    def find_error(self, node):
        following = node.getnext()
        if following is not None and _has_class(following, ERROR_CLASS):
            return following
        return None

    def is_replaced(self, node):
        return node.get(HIDDEN_ATTR) == 'true' or self.find_container(node) is not None

    def show_error(self, node, message):
        """Show one failure badge right after node, replacing an earlier one."""
        if node.getparent() is None:
            warn(f"Cannot show render error for a detached node: {message}")
            return None
        self.clear_error(node)
        badge = self._make(node, 'div', {
            'class': ERROR_CLASS,
            'style': error_badge_style(self._colors),
        })
        badge.text = f"{ERROR_PREFIX}{message}"
        node.addnext(badge)
        return badge

    def clear_error(self, node):
        badge = self.find_error(node)
        if badge is not None:
            drop_keeping_tail(badge)

    def restore(self, node, handle=None):
        """Remove the container (and any badge) and unhide node."""
        container = handle if handle is not None else self.find_container(node)
        if container is not None and container.getparent() is not None:
            drop_keeping_tail(container)
        self.clear_error(node)
        self._unhide(node)

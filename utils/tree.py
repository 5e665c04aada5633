"""Small lxml tree helpers.

Key functions: drop_keeping_tail, qualified_tag
"""


def drop_keeping_tail(element):
    """Remove element from its parent but keep the text that follows it."""
    parent = element.getparent()
    if parent is None:
        return
    if element.tail:
        previous = element.getprevious()
        if previous is not None:
            previous.tail = (previous.tail or '') + element.tail
        else:
            parent.text = (parent.text or '') + element.tail
    parent.remove(element)


def qualified_tag(reference, name):
    """Tag name in the same namespace as reference (plain name for HTML trees)."""
    tag = reference.tag
    if isinstance(tag, str) and tag.startswith('{'):
        return tag[:tag.index('}') + 1] + name
    return name

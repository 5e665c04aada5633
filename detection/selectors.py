"""Tree queries: candidate code containers, document order, attachment.

Key functions: select_candidate_nodes, sort_in_document_order, is_attached,
local_name, has_class
"""


def _class_token(token):
    """XPath predicate matching a whole class token."""
    return f"contains(concat(' ', normalize-space(@class), ' '), ' {token} ')"


_LANGUAGE_TAGGED = "(contains(@class, 'language-') or contains(@class, 'lang-'))"

# Most specific first. Each entry: (name, xpath)
CANDIDATE_SELECTORS = (
    ("language-tagged pre",
     f"descendant-or-self::*[local-name()='pre'][*[local-name()='code'][{_LANGUAGE_TAGGED}]]"),
    ("language-tagged code",
     f"descendant-or-self::*[local-name()='code'][{_LANGUAGE_TAGGED}][not(parent::*[local-name()='pre'])]"),
    ("editor code block",
     f"descendant-or-self::*[{_class_token('code-block-wrapper')}]"
     f" | descendant-or-self::*[local-name()='pre'][contains(@class, 'code-block')]"),
    ("generic pre",
     "descendant-or-self::*[local-name()='pre']"),
)


def local_name(element):
    """Lower-case tag name without namespace; '' for comments and processing instructions."""
    tag = element.tag
    if not isinstance(tag, str):
        return ''
    return tag.rsplit('}', 1)[-1].lower()


def has_class(element, token):
    return token in (element.get('class') or '').split()


def _overlaps_selected(element, selected_ids):
    """True if element is, contains, or sits inside an already-selected candidate."""
    if id(element) in selected_ids:
        return True
    for ancestor in element.iterancestors():
        if id(ancestor) in selected_ids:
            return True
    for descendant in element.iterdescendants():
        if id(descendant) in selected_ids:
            return True
    return False


def sort_in_document_order(root, elements):
    """Return elements in the order a depth-first walk from root meets them."""
    wanted = {id(el): el for el in elements}
    ordered = []
    for el in root.iter():
        if wanted.get(id(el)) is el:
            ordered.append(el)
    return ordered


def _replacement_target(match, root):
    """A <pre> directly inside a .highlight wrapper is replaced together with the wrapper."""
    parent = match.getparent()
    if (match is not root and parent is not None and local_name(match) == 'pre'
            and has_class(parent, 'highlight')):
        return parent
    return match


def select_candidate_nodes(root):
    """
    Enumerate code containers under root that may hold diagram source.

    Selectors run in priority order so a fragment is attributed to the most
    specific container; a later match nested inside (or wrapping) an earlier
    one is dropped.

    Returns:
        list: target elements in document order
    """
    selected = []
    selected_ids = {}
    for _name, xpath in CANDIDATE_SELECTORS:
        for match in root.xpath(xpath):
            target = _replacement_target(match, root)
            if _overlaps_selected(target, selected_ids):
                continue
            selected.append(target)
            selected_ids[id(target)] = target
    return sort_in_document_order(root, selected)


def is_attached(element, root):
    """True while element is root or still has root among its ancestors."""
    if element is root:
        return True
    for ancestor in element.iterancestors():
        if ancestor is root:
            return True
    return False

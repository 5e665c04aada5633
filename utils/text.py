"""Text utility functions.

Key functions: shorten_for_display, normalize_line_endings
"""


def shorten_for_display(s, width=60, ellipsis='...'):
    """Collapse s to a single line and cut it to width characters, ending with ellipsis when cut."""
    flat = ' '.join(s.split())
    if len(flat) <= width:
        return flat
    return flat[:max(width - len(ellipsis), 0)] + ellipsis


def normalize_line_endings(s):
    """Convert CRLF and lone CR line endings to LF."""
    return s.replace('\r\n', '\n').replace('\r', '\n')

"""Content fingerprints used as artifact cache keys.

Key functions: normalize_source, fingerprint
"""
from bootstrap.primary_imports import re
from utils.text import normalize_line_endings

_SPACE_RUNS = re.compile(r"[ ]+")
_NEWLINE_RUNS = re.compile(r"\n+")
_BASE36_DIGITS = "0123456789abcdefghijklmnopqrstuvwxyz"


def normalize_source(text):
    """Trim, unify line endings, turn tabs into spaces, then collapse space runs and blank lines."""
    normalized = normalize_line_endings(text.strip())
    normalized = normalized.replace("\t", " ")
    normalized = _SPACE_RUNS.sub(" ", normalized)
    return _NEWLINE_RUNS.sub("\n", normalized)


def _rolling_hash32(s):
    """31-multiplier rolling hash over UTF-16 code units, as a signed 32-bit int."""
    h = 0
    units = s.encode("utf-16-le", "surrogatepass")
    for i in range(0, len(units), 2):
        h = (h * 31 + (units[i] | (units[i + 1] << 8))) & 0xFFFFFFFF
    if h & 0x80000000:
        h -= 1 << 32
    return h


def _to_base36(n):
    if n == 0:
        return "0"
    sign = "-" if n < 0 else ""
    n = abs(n)
    digits = []
    while n:
        n, rem = divmod(n, 36)
        digits.append(_BASE36_DIGITS[rem])
    return sign + "".join(reversed(digits))


def fingerprint(text):
    """
    Return the cache key for a fragment's text.

    Texts that differ only in surrounding whitespace, space/tab runs, blank
    lines or line-ending style share a key. The hash is 32-bit and lossy;
    collisions between different diagrams are tolerated.
    """
    return _to_base36(_rolling_hash32(normalize_source(text)))

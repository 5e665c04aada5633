"""PlantUML text encoding: UTF-8 -> raw DEFLATE -> PlantUML radix-64.

The remote server decodes exactly this format, so the alphabet order, the
headerless stream and the zero-padded trailing group must not change.
Key functions: wrap_source, encode64, encode
"""
from config.diagram_syntax import DEFAULT_END_MARKER, DEFAULT_START_MARKER, find_start_marker

# zlib is an optional part of a Python build; without it encoding is unavailable
try:
    import zlib
except ImportError:
    zlib = None

# Digits, upper case, lower case, then '-' and '_'
PLANTUML_ALPHABET = (
    "0123456789"
    "ABCDEFGHIJKLMNOPQRSTUVWXYZ"
    "abcdefghijklmnopqrstuvwxyz"
    "-_"
)

COMPRESSION_LEVEL = 9
# Negative window bits: raw DEFLATE stream, no zlib header or checksum
RAW_DEFLATE_WBITS = -15


def wrap_source(text):
    """Trim text and wrap it in @startuml/@enduml unless it already opens with a start marker."""
    code = text.strip()
    if find_start_marker(code) is None:
        code = f"{DEFAULT_START_MARKER}\n{code}\n{DEFAULT_END_MARKER}"
    return code


def _append3bytes(b1, b2, b3):
    """Pack three bytes into four 6-bit symbols."""
    c1 = b1 >> 2
    c2 = ((b1 & 0x3) << 4) | (b2 >> 4)
    c3 = ((b2 & 0xF) << 2) | (b3 >> 6)
    c4 = b3 & 0x3F
    return (PLANTUML_ALPHABET[c1 & 0x3F] + PLANTUML_ALPHABET[c2 & 0x3F]
            + PLANTUML_ALPHABET[c3 & 0x3F] + PLANTUML_ALPHABET[c4 & 0x3F])


def encode64(data):
    """
    Encode bytes with the PlantUML alphabet, 3 bytes -> 4 symbols.

    A trailing group of 1 or 2 bytes is zero-padded before packing and still
    yields 4 symbols; no padding character is emitted.

    Args:
        data: bytes (or any sequence of ints in 0..255)

    Returns:
        str: encoded text of length ceil(len(data) / 3) * 4
    """
    parts = []
    for i in range(0, len(data), 3):
        group = list(data[i:i + 3])
        group.extend([0] * (3 - len(group)))
        parts.append(_append3bytes(*group))
    return "".join(parts)


def _deflate_raw(data):
    compressor = zlib.compressobj(COMPRESSION_LEVEL, zlib.DEFLATED, RAW_DEFLATE_WBITS)
    return compressor.compress(data) + compressor.flush()


def encode(text):
    """
    Encode diagram source for a PlantUML server URL.

    Never raises: any failure (including a missing zlib) returns None, which
    callers treat as "encoding unavailable".

    Args:
        text: diagram source, with or without @start/@end markers

    Returns:
        str or None: the encoded reference
    """
    if zlib is None:
        print("Warning: zlib not available, cannot encode PlantUML source")
        return None
    try:
        code = wrap_source(text)
        compressed = _deflate_raw(code.encode("utf-8"))
        return encode64(compressed)
    except Exception as e:
        print(f"Warning: PlantUML encoding failed: {e}")
        return None

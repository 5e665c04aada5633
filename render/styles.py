"""Inline CSS for rendered containers and error badges.

Colours come from the [colors] table of settings_user.toml and may be CSS
names or hex values; webcolors normalises both to lowercase hex.
Key functions: normalize_color, container_style, image_style, error_badge_style
"""
import webcolors

from utils.console import warn

HIDDEN_STYLE = "display: none"

_FALLBACKS = {
    "container_background": "#ffffff",
    "error_background": "#fff3cd",
    "error_text": "#856404",
}


def normalize_color(value, fallback="#000000"):
    """Return value as a lowercase hex colour, or fallback if webcolors rejects it."""
    if not value:
        return fallback
    value = str(value).strip()
    try:
        if value.startswith('#'):
            return webcolors.normalize_hex(value)
        return webcolors.name_to_hex(value.lower())
    except ValueError as e:
        warn(f"Unrecognised colour {value!r} ({e}); using {fallback}")
        return fallback


def _color(colors, key):
    return normalize_color((colors or {}).get(key), _FALLBACKS[key])


def container_style(colors=None):
    background = _color(colors, "container_background")
    return (f"text-align: center; margin: 16px 0; padding: 16px; "
            f"background: {background}; border-radius: 4px; overflow-x: auto")


def image_style():
    return "max-width: 100%; height: auto; display: inline-block"


def error_badge_style(colors=None):
    background = _color(colors, "error_background")
    text = _color(colors, "error_text")
    return (f"color: {text}; background: {background}; padding: 8px; "
            f"margin-bottom: 8px; border-radius: 4px; font-size: 12px")

"""Theme injection and image URL construction for PlantUML servers.

Key functions: apply_theme, prepare_source, build_image_url, generate_diagram_url
"""
from config.runtime_settings import THEMES
from .plantuml import encode, wrap_source

# Themes the remote renderers know; "default" means no directive
SUPPORTED_THEMES = tuple(t for t in THEMES if t != "default")

# Kroki's PlantUML build ships without these
KROKI_UNSUPPORTED_THEMES = ("materia",)


def is_kroki_server(server_url):
    return "kroki.io" in (server_url or "")


def apply_theme(source, theme):
    """
    Insert a `!theme <name>` line right after the first @start line.

    The source is returned unchanged for an empty/default/unknown theme, when
    it already carries a theme or skinparam style directive, or when it has
    no @start line at all.
    """
    if not theme or theme == "default" or theme not in SUPPORTED_THEMES:
        return source
    if "!theme " in source or "skinparam style" in source:
        return source

    lines = source.split("\n")
    result = []
    theme_added = False
    for line in lines:
        result.append(line)
        if not theme_added and line.strip().startswith("@start"):
            result.append(f"!theme {theme}")
            theme_added = True
    return "\n".join(result)


def prepare_source(source, settings):
    """Wrap source in default markers if needed and apply the configured theme."""
    code = wrap_source(source)
    theme = settings.theme
    if is_kroki_server(settings.server_url) and theme in KROKI_UNSUPPORTED_THEMES:
        return code
    return apply_theme(code, theme)


def build_image_url(server_url, output_format, encoded):
    """Join server, format and encoded reference using the server's URL scheme."""
    base = server_url.rstrip("/")
    if is_kroki_server(base):
        return f"{base}/plantuml/{output_format}/{encoded}"
    return f"{base}/{output_format}/{encoded}"


def generate_diagram_url(source, settings, encoder=encode):
    """Return the image URL for source under settings, or None when encoding is unavailable."""
    encoded = encoder(prepare_source(source, settings))
    if not encoded:
        return None
    return build_image_url(settings.server_url, settings.output_format, encoded)

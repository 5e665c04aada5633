"""Runtime settings: server, output format, theme, timing, paths and colours.

User-editable settings are loaded from settings_user.toml in the project root.
Key objects: RenderSettings, load_settings, resolve_document_paths,
DEFAULT_SERVER_URL, SERVER_PRESETS, OUTPUT_FORMATS, THEMES
"""
from bootstrap.primary_imports import os
from utils.console import warn

# Resolved relative to this config module so it works regardless of cwd.
_SCRIPT_DIR = os.path.dirname(os.path.abspath(__file__))
_PROJECT_ROOT = os.path.dirname(_SCRIPT_DIR)  # config -> project root

# TOML parser: use built-in tomllib (Python 3.11+) or tomli for older Python
try:
    import tomllib
except ImportError:
    try:
        import tomli as tomllib
    except ImportError:
        tomllib = None

DEFAULT_SERVER_URL = "https://www.plantuml.com/plantuml"

SERVER_PRESETS = {
    "https://www.plantuml.com/plantuml": "Official server (recommended)",
    "https://kroki.io": "Kroki.io (fallback)",
    "http://www.plantuml.com/plantuml": "Official server over HTTP (fallback)",
}

OUTPUT_FORMATS = ("png", "svg")

THEMES = ("default", "materia", "spacelab", "cerulean-outline", "vibrant", "plain")

# Host messaging layer uses camelCase keys
MESSAGE_KEY_ALIASES = {
    "renderEnabled": "enabled",
    "debugMode": "debug",
    "serverUrl": "server_url",
    "outputFormat": "output_format",
    "plantUmlTheme": "theme",
    "debounceMs": "debounce_ms",
    "rescanDelayMs": "rescan_delay_ms",
}


def _get_default_settings():
    """Return default settings as nested tables, mirroring settings_user.toml."""
    return {
        "render": {
            "enabled": True,
            "debug": False,
            "server_url": DEFAULT_SERVER_URL,
            "output_format": "png",
            "theme": "default",
        },
        "timing": {
            "debounce_ms": 200,
            "rescan_delay_ms": 100,
            "poll_interval_ms": 500,
        },
        "paths": {
            "input_html": "_uml_inputs/document.html",
            "output_dir": "_uml_outputs",
            # Optional: separate base name for the rendered document.
            # If not set, the input file name is reused.
            "output_basename": None,
        },
        "output": {
            "open_in_browser": False,
        },
        "colors": {
            "container_background": "white",
            "error_background": "#fff3cd",
            "error_text": "#856404",
        },
    }


def _coerce_bool(name, value):
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().lower() in ("true", "false"):
        return value.strip().lower() == "true"
    if isinstance(value, int):
        return bool(value)
    raise ValueError(f"Invalid {name}: {value!r}. Must be true or false")


def _coerce_ms(name, value):
    try:
        ms = int(value)
    except (TypeError, ValueError):
        raise ValueError(f"Invalid {name}: {value!r}. Must be a whole number of milliseconds") from None
    if ms < 0:
        raise ValueError(f"Invalid {name}: {ms}. Must not be negative")
    return ms


def _coerce_field(name, value):
    """Validate and normalise one settings field. Raises ValueError on bad input."""
    if name in ("enabled", "debug"):
        return _coerce_bool(name, value)
    if name == "server_url":
        url = str(value).strip().rstrip("/")
        if not url:
            raise ValueError("Invalid server_url: must not be empty")
        if not url.lower().startswith(("http://", "https://")):
            raise ValueError(
                f"Invalid server_url: '{value}'. Must be an http(s) URL, e.g. one of: {', '.join(SERVER_PRESETS)}"
            )
        return url
    if name == "output_format":
        fmt = str(value).strip().lower()
        if fmt not in OUTPUT_FORMATS:
            raise ValueError(
                f"Invalid output_format: '{value}'. Must be one of: {', '.join(OUTPUT_FORMATS)}"
            )
        return fmt
    if name == "theme":
        theme = str(value).strip().lower()
        if theme not in THEMES:
            raise ValueError(f"Invalid theme: '{value}'. Must be one of: {', '.join(THEMES)}")
        return theme
    if name in ("debounce_ms", "rescan_delay_ms", "poll_interval_ms"):
        return _coerce_ms(name, value)
    raise KeyError(name)


class RenderSettings:
    """Settings consumed by the rendering pipeline.

    One instance is owned by each coordinator; `update` is the only way to
    change it after construction.
    """

    FIELDS = (
        "enabled",
        "debug",
        "server_url",
        "output_format",
        "theme",
        "debounce_ms",
        "rescan_delay_ms",
        "poll_interval_ms",
    )

    def __init__(self, enabled=True, debug=False, server_url=DEFAULT_SERVER_URL,
                 output_format="png", theme="default", debounce_ms=200,
                 rescan_delay_ms=100, poll_interval_ms=500, colors=None,
                 paths=None, output=None):
        defaults = _get_default_settings()
        self.enabled = _coerce_field("enabled", enabled)
        self.debug = _coerce_field("debug", debug)
        self.server_url = _coerce_field("server_url", server_url)
        self.output_format = _coerce_field("output_format", output_format)
        self.theme = _coerce_field("theme", theme)
        self.debounce_ms = _coerce_field("debounce_ms", debounce_ms)
        self.rescan_delay_ms = _coerce_field("rescan_delay_ms", rescan_delay_ms)
        self.poll_interval_ms = _coerce_field("poll_interval_ms", poll_interval_ms)
        self.colors = dict(defaults["colors"])
        self.colors.update({k: str(v).strip() for k, v in (colors or {}).items() if v})
        self.paths = dict(defaults["paths"])
        self.paths.update({k: v for k, v in (paths or {}).items() if v is not None})
        self.output = dict(defaults["output"])
        self.output.update({k: v for k, v in (output or {}).items() if v is not None})

    @property
    def is_kroki(self):
        return "kroki.io" in self.server_url

    @property
    def debounce_delay(self):
        return self.debounce_ms / 1000.0

    @property
    def rescan_delay(self):
        return self.rescan_delay_ms / 1000.0

    @property
    def poll_interval(self):
        return self.poll_interval_ms / 1000.0

    def update(self, changes):
        """
        Apply a partial update and return the fields that actually changed.

        Args:
            changes: dict of field -> new value. camelCase host keys are
                accepted; a None value resets the field to its default.

        Returns:
            dict: {field: (old_value, new_value)} for every changed field

        Raises:
            ValueError: if any value is invalid (nothing is applied then)
        """
        defaults = RenderSettings()
        staged = {}
        for key, value in (changes or {}).items():
            name = MESSAGE_KEY_ALIASES.get(key, key)
            if name not in self.FIELDS:
                warn(f"Unknown settings key '{key}' ignored")
                continue
            if value is None:
                value = getattr(defaults, name)
            staged[name] = _coerce_field(name, value)

        changed = {}
        for name, value in staged.items():
            old = getattr(self, name)
            if old != value:
                setattr(self, name, value)
                changed[name] = (old, value)
        return changed

    def as_dict(self):
        return {name: getattr(self, name) for name in self.FIELDS}

    def __repr__(self):
        fields = ", ".join(f"{k}={v!r}" for k, v in self.as_dict().items())
        return f"RenderSettings({fields})"


def _load_user_settings(settings_path=None):
    """Load settings_user.toml and merge it into the defaults. Returns the merged tables."""
    defaults = _get_default_settings()

    if settings_path is None:
        settings_path = os.path.join(_PROJECT_ROOT, "settings_user.toml")
    if not os.path.isfile(settings_path):
        return defaults

    if tomllib is None:
        raise ImportError(
            "Cannot load settings_user.toml: no TOML parser available. "
            "Use Python 3.11+ or install: pip install tomli"
        )

    try:
        with open(settings_path, "rb") as f:
            raw = tomllib.load(f)
    except Exception as e:
        raise ValueError(
            f"Error reading {os.path.basename(settings_path)}: {e}\n"
            f"Check the file for syntax errors (e.g. missing quotes, wrong brackets)."
        ) from e

    for table in ("render", "timing", "paths", "output", "colors"):
        section = raw.get(table) or {}
        if not isinstance(section, dict):
            raise ValueError(f"Invalid [{table}] section in {os.path.basename(settings_path)}: expected a table")
        for k, v in section.items():
            if v is None:
                continue
            if table in ("render", "timing") and k not in defaults[table]:
                warn(f"Unknown setting '{table}.{k}' ignored")
                continue
            defaults[table][k] = v

    return defaults


def load_settings(settings_path=None):
    """Build a RenderSettings from settings_user.toml (or defaults when the file is absent)."""
    cfg = _load_user_settings(settings_path)
    return RenderSettings(
        colors=cfg["colors"],
        paths=cfg["paths"],
        output=cfg["output"],
        **cfg["render"],
        **cfg["timing"],
    )


def _resolve_path(path_str, base):
    """Resolve path: if relative, join with base; if absolute, use as-is."""
    if not path_str or not isinstance(path_str, str):
        return None
    path_str = path_str.strip()
    if os.path.isabs(path_str):
        return path_str
    return os.path.join(base, path_str)


def resolve_document_paths(settings, base=_PROJECT_ROOT):
    """Return (input_html, output_html) absolute paths for the entry script."""
    input_html = _resolve_path(settings.paths.get("input_html"), base)
    output_dir = _resolve_path(settings.paths.get("output_dir"), base) or os.path.join(base, "_uml_outputs")
    basename = settings.paths.get("output_basename")
    if not basename:
        basename = os.path.splitext(os.path.basename(input_html or "document.html"))[0] + "_rendered"
    return input_html, os.path.join(output_dir, basename + ".html")


if __name__ == "__main__":
    """Quick self-check: print effective settings."""
    _settings = load_settings()
    print("Effective settings:")
    for _name, _value in _settings.as_dict().items():
        print(f"  {_name}: {_value}")
    print("  colors:", _settings.colors)
    print("  documents:", resolve_document_paths(_settings))

"""Console output helpers.

Warnings always print; pipeline traces print only when debug mode is on.
Key functions: debug, warn
"""

DEBUG_PREFIX = "[UMLRender]"


def debug(settings, *args):
    """Print args with the pipeline prefix if settings has debug enabled."""
    if settings is not None and getattr(settings, "debug", False):
        print(DEBUG_PREFIX, *args)


def warn(message):
    """Print a warning line."""
    print(f"Warning: {message}")

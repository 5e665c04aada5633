"""Dependency checks for the rendering pipeline.

Key functions: ensure_module, run_runtime_checks, check_compression_engine
"""
from .primary_imports import importlib, sys


def ensure_module(module_name, package_name=None):
    """Check if a module can be imported. Prints an install hint and returns False if not."""
    if package_name is None:
        package_name = module_name

    try:
        importlib.import_module(module_name)
        return True
    except ImportError:
        print(f"ERROR: Module {module_name} not found. Install it with: pip install {package_name}")
        return False


def run_runtime_checks():
    """Verify all required modules (lxml, webcolors, ipython) are available. Exit if not."""
    lxml_ok = ensure_module("lxml")
    webcolors_ok = ensure_module("webcolors")
    ipython_ok = ensure_module("IPython.display", "ipython")

    if not all([lxml_ok, webcolors_ok, ipython_ok]):
        print("ERROR: Not all required modules are installed. Please install them manually.")
        print("Required packages: lxml, webcolors, ipython")
        sys.exit(1)


def check_compression_engine():
    """Return True when zlib is importable.

    The codec degrades to "encoding unavailable" without it, so a missing
    engine is reported but never fatal.
    """
    try:
        importlib.import_module("zlib")
        return True
    except ImportError:
        print("Warning: zlib is not available in this Python build.")
        print("Diagrams will be reported as 'encoding unavailable' until Python is rebuilt with zlib.")
        return False

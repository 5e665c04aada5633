"""Delayed imports: modules requiring runtime dependency checks.

Loaded after run_runtime_checks() and check_compression_engine().
Includes: lxml (etree and html), IPython.display. Stdlib (re, os, etc.) come from primary_imports.
"""
# ruff: noqa: F401 - re-exports for other modules
from lxml import etree as ET
from lxml import html as LH
from IPython.display import SVG, Image, display

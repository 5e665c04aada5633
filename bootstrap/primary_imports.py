"""Primary imports: standard library modules shared across packages.

Loaded before runtime checks. Use delayed_imports for modules that require
lxml (checked by run_runtime_checks).
"""
# ruff: noqa: F401 - re-exports for other modules
import os
import sys
import importlib
import asyncio
import inspect
import copy
import re

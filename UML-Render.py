"""
UML-Render — Render PlantUML code blocks of an HTML document as diagrams.

Pipeline: HTML (_uml_inputs) → detect PlantUML blocks → encode → image
containers pointing at the rendering server → HTML (_uml_outputs).
Configuration and paths live in settings_user.toml (edit that file to change settings).

Copyright (c) 2025

This work is licensed under the Creative Commons Attribution-ShareAlike 4.0
International License. To view a copy of this license, visit
https://creativecommons.org/licenses/by-sa/4.0/ or see the LICENSE file
included with this distribution.
"""
from bootstrap.primary_imports import asyncio, os
from bootstrap.dependencies import run_runtime_checks, check_compression_engine

# --- Bootstrap: fail fast if dependencies are missing ---
run_runtime_checks()
check_compression_engine()

# --- Configuration: server, theme, timing, paths (edit settings_user.toml) ---
from config.runtime_settings import load_settings, resolve_document_paths

# --- Core pipeline: detect, encode, replace, export ---
from pipeline import render_document
from render import parse_html_document, save_rendered_document, open_in_browser

# %%  --- Main execution ---

if __name__ == "__main__":
    settings = load_settings()
    input_html, output_html = resolve_document_paths(settings)

    # --- Step 1: Parse the input document ---
    tree = parse_html_document(input_html)
    if tree is None:
        raise SystemExit(1)

    # --- Step 2: Replace every PlantUML block with its diagram ---
    _, summary = asyncio.run(render_document(tree.getroot(), settings))
    if summary is None:
        print("Rendering is disabled in settings_user.toml; document left unchanged.")
    else:
        print(f"Found {summary['found']} PlantUML blocks: "
              f"{summary['rendered']} rendered, {summary['cached']} from cache, "
              f"{summary['failed']} failed")

    # --- Step 3: Save and optionally open the rendered document ---
    saved = save_rendered_document(tree, output_html)
    if settings.output.get("open_in_browser") and saved and os.path.exists(saved):
        open_in_browser(saved)

    print("\nScript finished.")

"""Loading, saving and opening HTML documents.

Key functions: parse_html_document, save_rendered_document, open_in_browser
"""
import pathlib
import webbrowser

from bootstrap.primary_imports import os
from bootstrap.delayed_imports import ET, LH


def parse_html_document(file_path):
    """
    Parse an HTML file with lxml.

    Returns:
        lxml ElementTree, or None if the file is missing or unparseable
    """
    try:
        with open(file_path, 'rb') as html_file:
            return LH.parse(html_file)
    except OSError as e:
        print(f"Error: HTML document not found or unreadable at {file_path}: {e}")
    except (ET.ParserError, ET.XMLSyntaxError) as e:
        print(f"Error: could not parse HTML document {file_path}: {e}")
    return None


def save_rendered_document(tree, output_path):
    """Serialise the (mutated) document to output_path. Returns the path or None."""
    output_dir = os.path.dirname(output_path)
    if output_dir:
        os.makedirs(output_dir, exist_ok=True)
    if hasattr(tree, 'getroot'):
        doctype = tree.docinfo.doctype or '<!DOCTYPE html>'
        root = tree.getroot()
    else:
        doctype = '<!DOCTYPE html>'
        root = tree
    try:
        html = LH.tostring(root, encoding='unicode', method='html', doctype=doctype)
        with open(output_path, 'w', encoding='utf-8') as out:
            out.write(html)
    except OSError as e:
        print(f"Error: could not write rendered document to {output_path}: {e}")
        return None
    print(f"Rendered document saved to {output_path}")
    return output_path


def open_in_browser(path):
    """Open the given file in the default web browser, cross-platform."""
    html_file = pathlib.Path(path)
    if not html_file.is_file():
        print(f"Rendered document not found at {html_file}")
        return False
    try:
        webbrowser.open(html_file.resolve().as_uri())
    except Exception as e:
        print(f"Could not automatically open document in browser: {e}")
        return False
    return True

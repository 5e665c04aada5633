"""Inline display of rendered diagrams in Jupyter / IPython.

Key functions: display_artifact, display_source
"""
from bootstrap.delayed_imports import SVG, Image, display
from config.runtime_settings import RenderSettings
from detection.fingerprint import fingerprint
from encoding import encode, generate_diagram_url
from state.caches import ArtifactDescriptor


def display_artifact(descriptor, output_format="png"):
    """
    Display a rendered diagram inline.

    Returns True when something was handed to IPython, False otherwise.
    """
    if descriptor is None or not descriptor.ok:
        print("No diagram to display: encoding was unavailable")
        return False
    try:
        if output_format == "svg":
            display(SVG(url=descriptor.url))
        else:
            display(Image(url=descriptor.url, format=output_format))
    except Exception as e:
        print(f"Error displaying diagram from {descriptor.url}: {e}")
        return False
    return True


def display_source(source, settings=None, encoder=encode):
    """Encode PlantUML source and display it; returns the descriptor."""
    if settings is None:
        settings = RenderSettings()
    url = generate_diagram_url(source, settings, encoder=encoder)
    descriptor = ArtifactDescriptor(fingerprint(source), url, source)
    display_artifact(descriptor, settings.output_format)
    return descriptor

"""
Root pytest configuration and shared fixtures.

Provides HTML document builders, recording presenters and counting
encoders for the pipeline tests.
"""

import asyncio

import pytest
from lxml import html as LH

from config.runtime_settings import RenderSettings
from encoding import encode
from render import HtmlPresenter

SEQUENCE_SOURCE = "@startuml\nAlice -> Bob: hello\n@enduml"
OTHER_SOURCE = "@startuml\nBob -> Carol: bye\n@enduml"


def make_body(fragment_html):
    """Parse an HTML fragment into a full document and return its <body>."""
    document = LH.document_fromstring(f"<html><body>{fragment_html}</body></html>")
    return document.body


def plantuml_block(text=SEQUENCE_SOURCE, lang="plantuml"):
    return f'<pre><code class="language-{lang}">{text}</code></pre>'


def plain_pre(text=SEQUENCE_SOURCE):
    return f"<pre>{text}</pre>"


class CountingEncoder:
    """Encoder that records every call; returns None when failing is set."""

    def __init__(self, failing=False):
        self.calls = []
        self.failing = failing

    def __call__(self, text):
        self.calls.append(text)
        if self.failing:
            return None
        return encode(text)


class GatedEncoder:
    """Async encoder that waits on an event, so a pass can be held mid-flight."""

    def __init__(self):
        self.calls = []
        self.gate = None

    async def __call__(self, text):
        self.calls.append(text)
        if self.gate is None:
            self.gate = asyncio.Event()
        await self.gate.wait()
        return encode(text)

    def open(self):
        if self.gate is None:
            self.gate = asyncio.Event()
        self.gate.set()


class RecordingPresenter(HtmlPresenter):
    """HtmlPresenter that keeps a log of every call made by the coordinator."""

    def __init__(self, settings=None):
        super().__init__(settings)
        self.applied = []
        self.errors = []
        self.restored = []

    def apply_replacement(self, node, descriptor, original_text=None):
        handle = super().apply_replacement(node, descriptor, original_text)
        self.applied.append((node, descriptor))
        return handle

    def show_error(self, node, message):
        self.errors.append((node, message))
        return super().show_error(node, message)

    def restore(self, node, handle=None):
        self.restored.append(node)
        super().restore(node, handle)


@pytest.fixture
def html_body():
    """Factory fixture: html_body('<pre>...</pre>') -> <body> element."""
    return make_body


@pytest.fixture
def settings():
    """Settings with zero delays so scheduled passes fire immediately."""
    return RenderSettings(debounce_ms=0, rescan_delay_ms=0, poll_interval_ms=10)


@pytest.fixture
def counting_encoder():
    return CountingEncoder()


@pytest.fixture
def failing_encoder():
    return CountingEncoder(failing=True)


@pytest.fixture
def gated_encoder():
    return GatedEncoder()


@pytest.fixture
def recording_presenter(settings):
    return RecordingPresenter(settings)

"""
Scan-detect-cache-replace pipeline and its change sources.
"""
from .coordinator import (
    RenderCoordinator,
    render_document,
    watch_document,
    STATE_IDLE,
    STATE_SCANNING,
    STATE_DISABLED,
)
from .sources import ChangeSource, ManualChangeSource, TreePollingSource, tree_signature

__all__ = [
    'RenderCoordinator',
    'render_document',
    'watch_document',
    'STATE_IDLE',
    'STATE_SCANNING',
    'STATE_DISABLED',
    'ChangeSource',
    'ManualChangeSource',
    'TreePollingSource',
    'tree_signature',
]

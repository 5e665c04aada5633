"""Processed markers: which nodes have been replaced, and with which fingerprint.

Kept as a side table keyed by node identity so no assumption is made about
sibling order in the host tree.
Key objects: ProcessedMarker, ProcessedRegistry
"""


class ProcessedMarker:
    __slots__ = ("node", "fingerprint", "handle")

    def __init__(self, node, fingerprint, handle=None):
        # Holding the node keeps its lxml proxy, and so its id(), stable
        self.node = node
        self.fingerprint = fingerprint
        self.handle = handle


class ProcessedRegistry:
    """Side table node identity -> ProcessedMarker."""

    def __init__(self):
        self._markers = {}

    def mark(self, node, fingerprint, handle=None):
        marker = ProcessedMarker(node, fingerprint, handle)
        self._markers[id(node)] = marker
        return marker

    def get(self, node):
        marker = self._markers.get(id(node))
        if marker is not None and marker.node is node:
            return marker
        return None

    def is_marked(self, node):
        return self.get(node) is not None

    def unmark(self, node):
        marker = self.get(node)
        if marker is not None:
            del self._markers[id(node)]
        return marker

    def drain(self):
        """Remove and return every marker, in insertion order."""
        markers = list(self._markers.values())
        self._markers = {}
        return markers

    def __len__(self):
        return len(self._markers)

    def __iter__(self):
        return iter(list(self._markers.values()))

"""Session-scoped artifact cache keyed by content fingerprint.

Key objects: ArtifactDescriptor, ArtifactCache
"""


class ArtifactDescriptor:
    """What a fingerprint renders to: the image URL and the source that produced it."""

    __slots__ = ("fingerprint", "url", "source")

    def __init__(self, fingerprint, url, source):
        self.fingerprint = fingerprint
        # None when encoding was unavailable
        self.url = url
        self.source = source

    @property
    def ok(self):
        return bool(self.url)

    def __repr__(self):
        return f"ArtifactDescriptor({self.fingerprint!r}, url={self.url!r})"


class ArtifactCache:
    """
    Fingerprint -> ArtifactDescriptor store.

    No eviction and no TTL: entries are small and live for the session.
    `clear` swaps the whole mapping in one assignment, so a reader sees
    either the old contents or an empty cache, never a partial one.
    """

    def __init__(self):
        self._entries = {}

    def get(self, fingerprint):
        return self._entries.get(fingerprint)

    def put(self, fingerprint, descriptor):
        self._entries[fingerprint] = descriptor

    def clear(self):
        self._entries = {}

    def __contains__(self, fingerprint):
        return fingerprint in self._entries

    def __len__(self):
        return len(self._entries)

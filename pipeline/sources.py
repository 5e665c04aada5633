"""Change notification sources.

A source tells its subscribers that the watched subtree (or the viewport)
changed. Subscribers are plain callables taking no arguments; the
coordinator subscribes its notify_* methods and debounces on its side.

Key objects: ChangeSource, ManualChangeSource, TreePollingSource
"""
from bootstrap.primary_imports import asyncio
from bootstrap.delayed_imports import ET
from utils.console import warn


class ChangeSource:
    """Base subscription interface."""

    def __init__(self):
        self._callbacks = []

    def subscribe(self, callback):
        if callback not in self._callbacks:
            self._callbacks.append(callback)

    def unsubscribe(self, callback):
        if callback in self._callbacks:
            self._callbacks.remove(callback)

    @property
    def subscriber_count(self):
        return len(self._callbacks)

    def _notify(self):
        for callback in list(self._callbacks):
            try:
                callback()
            except Exception as e:
                warn(f"Change subscriber {callback!r} failed: {e}")


class ManualChangeSource(ChangeSource):
    """Source driven by the host: call emit() after mutating the tree."""

    def emit(self):
        self._notify()


def tree_signature(root):
    """Cheap structural signature of a subtree: element count and serialised hash."""
    serialised = ET.tostring(root, encoding='unicode', method='html')
    return sum(1 for _ in root.iter()), hash(serialised)


class TreePollingSource(ChangeSource):
    """
    Polls a subtree and notifies when its signature changes.

    Polling starts with the first subscriber and stops with the last, and
    needs a running asyncio loop at that point.
    """

    def __init__(self, root, interval=0.5, signature=tree_signature):
        super().__init__()
        self.root = root
        self.interval = interval
        self.signature = signature
        self._last = None
        self._task = None

    @property
    def running(self):
        return self._task is not None and not self._task.done()

    def subscribe(self, callback):
        super().subscribe(callback)
        if not self.running:
            self._last = self.signature(self.root)
            self._task = asyncio.get_running_loop().create_task(self._poll())

    def unsubscribe(self, callback):
        super().unsubscribe(callback)
        if not self._callbacks:
            self.stop()

    def stop(self):
        if self._task is not None:
            self._task.cancel()
            self._task = None

    def check(self):
        """Compare the current signature with the last one; notify on change."""
        current = self.signature(self.root)
        if current == self._last:
            return False
        self._last = current
        self._notify()
        return True

    async def _poll(self):
        while True:
            await asyncio.sleep(self.interval)
            self.check()

"""Incremental scan-detect-cache-replace pipeline.

A pass finds diagram fragments under a root element, reuses or builds an
artifact for each one and hands it to the presenter. Passes are mutually
exclusive: a request that arrives while one is running is dropped, and the
change sources make sure a later pass picks up whatever it missed.

Everything runs on one asyncio loop. The scanning flag is set before the
first await of a pass, so no second pass can start in between.

Key objects: RenderCoordinator
Key functions: render_document, watch_document
"""
from bootstrap.primary_imports import asyncio, inspect
from config.runtime_settings import RenderSettings
from detection import extract_fragments, fingerprint, is_attached
from encoding import build_image_url, encode, prepare_source
from render import HtmlPresenter
from state.caches import ArtifactCache, ArtifactDescriptor
from state.markers import ProcessedRegistry
from .sources import TreePollingSource
from utils.console import debug, warn
from utils.text import shorten_for_display

STATE_IDLE = "idle"
STATE_SCANNING = "scanning"
STATE_DISABLED = "disabled"

# Settings whose change makes cached URLs stale
_URL_FIELDS = ("server_url", "output_format", "theme")


async def _resolve(value):
    if inspect.isawaitable(value):
        return await value
    return value


def _empty_summary():
    return {"found": 0, "rendered": 0, "cached": 0, "skipped": 0, "failed": 0}


class RenderCoordinator:
    """
    Owns the artifact cache, the processed markers and the pass lifecycle
    for one document root.

    Args:
        root: lxml element whose subtree is scanned
        settings: RenderSettings (defaults when None)
        presenter: presentation adapter with apply_replacement, show_error,
            restore and is_replaced (HtmlPresenter when None)
        cache: ArtifactCache, shared between coordinators if passed in
        encoder: callable source -> encoded reference or None; may return
            an awaitable
        change_source: ChangeSource for structural changes of the subtree
        viewport_source: ChangeSource for viewport changes
    """

    def __init__(self, root, settings=None, presenter=None, cache=None, encoder=encode,
                 change_source=None, viewport_source=None):
        self.root = root
        self.settings = settings if settings is not None else RenderSettings()
        self.presenter = presenter if presenter is not None else HtmlPresenter(self.settings)
        self.cache = cache if cache is not None else ArtifactCache()
        self.encoder = encoder
        self.change_source = change_source
        self.viewport_source = viewport_source
        self.markers = ProcessedRegistry()
        self.pass_count = 0
        self.last_summary = None
        self._scanning = False
        self._running = False
        self._pending = None
        self._tasks = set()

    @property
    def state(self):
        if not self.settings.enabled:
            return STATE_DISABLED
        return STATE_SCANNING if self._scanning else STATE_IDLE

    @property
    def running(self):
        return self._running

    def is_processed(self, node):
        return self.markers.is_marked(node) or self.presenter.is_replaced(node)

    # --- Passes ---

    async def scan_and_replace(self):
        """
        Run one pass over the root.

        Returns:
            dict with counts found/rendered/cached/skipped/failed, or None
            when the pipeline is disabled or another pass is in progress
        """
        if not self.settings.enabled:
            debug(self.settings, "Rendering disabled, pass skipped")
            return None
        if self._scanning:
            debug(self.settings, "Pass already in progress, request dropped")
            return None
        self._scanning = True

        summary = _empty_summary()
        try:
            fragments = extract_fragments(self.root, self.is_processed, self.settings)
            summary["found"] = len(fragments)
            for fragment in fragments:
                if not self.settings.enabled:
                    debug(self.settings, "Rendering disabled mid-pass, stopping")
                    break
                outcome = await self._process_fragment(fragment)
                summary[outcome] += 1
        finally:
            self._scanning = False
            self.pass_count += 1

        self.last_summary = summary
        debug(self.settings, f"Pass {self.pass_count} finished: {summary}")
        return summary

    async def _process_fragment(self, fragment):
        node = fragment.node
        # The tree may have changed while an earlier fragment was awaited
        if self.is_processed(node) or not is_attached(node, self.root):
            return "skipped"
        try:
            key = fingerprint(fragment.text)
            descriptor = self.cache.get(key)
            cached = descriptor is not None
            if descriptor is None:
                descriptor = await self._build_descriptor(key, fragment.text)
                if descriptor.ok:
                    self.cache.put(key, descriptor)
                if (not self.settings.enabled or self.is_processed(node)
                        or not is_attached(node, self.root)):
                    return "skipped"

            handle = await _resolve(self.presenter.apply_replacement(node, descriptor, fragment.text))
            self.markers.mark(node, key, handle)
            debug(self.settings, f"Rendered #{fragment.index}{' (cached)' if cached else ''}: "
                                 f"{shorten_for_display(descriptor.url)}")
            return "cached" if cached else "rendered"
        except Exception as e:
            warn(f"PlantUML render failed for block #{fragment.index}: {e}")
            if is_attached(node, self.root):
                self.presenter.show_error(node, str(e))
            return "failed"

    async def _build_descriptor(self, key, text):
        code = prepare_source(text, self.settings)
        encoded = await _resolve(self.encoder(code))
        url = None
        if encoded:
            url = build_image_url(self.settings.server_url, self.settings.output_format, encoded)
        return ArtifactDescriptor(key, url, code)

    def restore_all(self):
        """Undo every replacement and clear the processed markers. Returns the count."""
        markers = self.markers.drain()
        for marker in markers:
            try:
                self.presenter.restore(marker.node, marker.handle)
            except Exception as e:
                warn(f"Could not restore block {marker.fingerprint}: {e}")
        debug(self.settings, f"Restored {len(markers)} blocks")
        return len(markers)

    # --- Scheduling ---

    def _spawn(self, coro):
        task = asyncio.get_running_loop().create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._task_done)
        return task

    def _task_done(self, task):
        self._tasks.discard(task)
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            warn(f"Scheduled pass failed: {error!r}")

    def _cancel_pending(self):
        if self._pending is not None:
            self._pending.cancel()
            self._pending = None

    def schedule_scan(self, delay=None):
        """
        Schedule a pass after delay seconds (the debounce delay by default).

        A new request replaces a pending one that has not fired yet. A pass
        that is already running is never cancelled.
        """
        if not self.settings.enabled:
            return None
        if delay is None:
            delay = self.settings.debounce_delay
        self._cancel_pending()
        self._pending = self._spawn(self._delayed_scan(delay))
        return self._pending

    async def _delayed_scan(self, delay):
        await asyncio.sleep(delay)
        self._pending = None
        await self.scan_and_replace()

    def notify_tree_changed(self):
        self.schedule_scan()

    def notify_viewport_changed(self):
        self.schedule_scan()

    # --- Lifecycle ---

    async def start(self):
        """Run the initial pass and subscribe to the change sources."""
        if self._running:
            return self.last_summary
        self._running = True
        debug(self.settings, "Starting")
        summary = await self.scan_and_replace()
        if self.change_source is not None:
            self.change_source.subscribe(self.notify_tree_changed)
        if self.viewport_source is not None:
            self.viewport_source.subscribe(self.notify_viewport_changed)
        return summary

    def stop(self):
        """Unsubscribe and drop any pending pass. Replacements stay in place."""
        if not self._running:
            return
        self._running = False
        if self.change_source is not None:
            self.change_source.unsubscribe(self.notify_tree_changed)
        if self.viewport_source is not None:
            self.viewport_source.unsubscribe(self.notify_viewport_changed)
        self._cancel_pending()
        debug(self.settings, "Stopped")

    async def settle(self):
        """Wait until no scheduled pass or pass task is left."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    # --- Host commands ---

    def rescan(self):
        """Forget every artifact, undo every replacement and scan again shortly."""
        self.cache.clear()
        self.restore_all()
        delay = self.settings.rescan_delay
        if self._running:
            return self.schedule_scan(delay)
        self._cancel_pending()
        self._pending = self._spawn(self._delayed_start(delay))
        return self._pending

    async def _delayed_start(self, delay):
        await asyncio.sleep(delay)
        self._pending = None
        await self.start()

    def apply_config_update(self, changes):
        """
        Apply a settings update from the host.

        Turning rendering off restores the document; turning it back on runs
        one fresh pass if the pipeline is running. A change of server, format
        or theme invalidates the cache; existing replacements are kept.

        Returns:
            dict: {field: (old, new)} for the fields that changed

        Raises:
            ValueError: if a value is invalid (nothing is applied)
        """
        changed = self.settings.update(changes)
        if any(name in changed for name in _URL_FIELDS):
            self.cache.clear()
            debug(self.settings, "Artifact cache cleared after settings change")
        if "enabled" in changed:
            if self.settings.enabled:
                if self._running:
                    self._spawn(self.scan_and_replace())
            else:
                self._cancel_pending()
                self.restore_all()
        return changed

    def handle_message(self, message):
        """
        Dispatch a host message.

        Supported actions: "rescan", "updateSettings" (remaining keys are
        settings, camelCase accepted).

        Returns:
            dict with "success" and, on failure, "error"
        """
        action = (message or {}).get("action")
        if action == "rescan":
            self.rescan()
            return {"success": True}
        if action == "updateSettings":
            changes = {k: v for k, v in message.items() if k != "action"}
            try:
                changed = self.apply_config_update(changes)
            except ValueError as e:
                warn(f"Rejected settings update: {e}")
                return {"success": False, "error": str(e)}
            return {"success": True, "changed": sorted(changed)}
        warn(f"Unknown host message action: {action!r}")
        return {"success": False, "error": f"Unknown action: {action}"}


async def render_document(root, settings=None, presenter=None, encoder=encode, cache=None):
    """
    One-shot rendering of a document: a single pass, no change sources.

    Returns:
        (RenderCoordinator, summary dict or None)
    """
    coordinator = RenderCoordinator(root, settings=settings, presenter=presenter,
                                    cache=cache, encoder=encoder)
    summary = await coordinator.start()
    await coordinator.settle()
    coordinator.stop()
    return coordinator, summary


async def watch_document(root, settings=None, presenter=None, encoder=encode, cache=None):
    """Start a coordinator on root that rescans whenever polling sees a change. Caller stops it."""
    if settings is None:
        settings = RenderSettings()
    source = TreePollingSource(root, interval=settings.poll_interval)
    coordinator = RenderCoordinator(root, settings=settings, presenter=presenter, cache=cache,
                                    encoder=encoder, change_source=source)
    await coordinator.start()
    return coordinator

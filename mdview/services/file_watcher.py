# mdview/services/file_watcher.py
from __future__ import annotations

import logging
import os
import threading
from collections.abc import Callable
from pathlib import Path

from watchdog.events import (
    EVENT_TYPE_CREATED,
    EVENT_TYPE_DELETED,
    EVENT_TYPE_MODIFIED,
    EVENT_TYPE_MOVED,
    FileSystemEvent,
    FileSystemEventHandler,
)
from watchdog.observers import Observer
from watchdog.observers.api import BaseObserver

from mdview.domain.interfaces import IChangeWatcher, IWatchHandle
from mdview.services.reload_signal import ReloadSignal
from mdview.utils.constants import DEBOUNCE_MS

logger = logging.getLogger(__name__)

# Content-changing events only: "opened"/"closed" fire on our own reads too.
_RELEVANT_EVENTS = frozenset(
    {EVENT_TYPE_CREATED, EVENT_TYPE_MODIFIED, EVENT_TYPE_MOVED, EVENT_TYPE_DELETED}
)


def _norm(p: str | bytes | os.PathLike[str]) -> str:
    return os.path.normcase(os.path.abspath(os.fsdecode(p)))


class Debouncer:
    """
    Trailing-edge debounce.

    Every `trigger()` restarts the quiescence window; `callback` runs once, on a
    timer thread, after `quiet_s` seconds pass with no further trigger.
    After `cancel()` returns the callback never runs again.
    """

    def __init__(self, quiet_s: float, callback: Callable[[], None]) -> None:
        self.quiet_s = quiet_s
        self._callback = callback
        self._lock = threading.Lock()
        self._timer: threading.Timer | None = None
        self._generation = 0
        self._closed = False

    def trigger(self) -> None:
        with self._lock:
            if self._closed:
                return
            if self._timer is not None:
                self._timer.cancel()
            self._generation += 1
            self._timer = threading.Timer(self.quiet_s, self._fire, args=(self._generation,))
            self._timer.daemon = True
            self._timer.start()

    def cancel(self) -> None:
        with self._lock:
            self._closed = True
            timer, self._timer = self._timer, None
        if timer is not None:
            timer.cancel()

    def _fire(self, generation: int) -> None:
        # Holding the lock through the callback makes cancel() wait for it.
        with self._lock:
            if self._closed or generation != self._generation:
                return
            self._timer = None
            try:
                self._callback()
            except Exception:
                logger.exception("Change callback failed")


class _DocumentEventHandler(FileSystemEventHandler):
    """Feeds events that touch one file into a debouncer."""

    def __init__(self, path: Path, debouncer: Debouncer) -> None:
        super().__init__()
        self._target = _norm(path)
        self._debouncer = debouncer

    def on_any_event(self, event: FileSystemEvent) -> None:
        try:
            if event.is_directory or event.event_type not in _RELEVANT_EVENTS:
                return
            paths = [event.src_path, getattr(event, "dest_path", "")]
            if any(p and _norm(p) == self._target for p in paths):
                self._debouncer.trigger()
        except Exception:
            logger.exception("Error handling filesystem event %r", event)


class WatchHandle(IWatchHandle):
    """
    A live subscription for one document path. `stop()` is synchronous: once it
    returns the observer thread has exited and no pending change will fire.
    """

    def __init__(
        self,
        path: Path,
        observer: BaseObserver | None,
        debouncer: Debouncer | None,
    ) -> None:
        self._path = path
        self._observer = observer
        self._debouncer = debouncer
        self._stopped = observer is None

    @property
    def path(self) -> Path:
        return self._path

    @property
    def active(self) -> bool:
        return not self._stopped

    def stop(self) -> None:
        if self._stopped:
            return
        self._stopped = True
        if self._observer is not None:
            self._observer.stop()
            self._observer.join()
        if self._debouncer is not None:
            self._debouncer.cancel()
        logger.debug("Stopped watching %s", self._path)

    def __enter__(self) -> WatchHandle:
        return self

    def __exit__(self, *exc) -> None:
        self.stop()

    def __repr__(self) -> str:
        state = "active" if self.active else "stopped"
        return f"WatchHandle({str(self._path)!r}, {state})"


class ChangeWatcher(IChangeWatcher):
    """
    Starts debounced watches that set the reload signal when the document changes.

    The file's directory is watched rather than the file itself so that editors
    saving through write-to-temp-then-rename keep being picked up.
    """

    def __init__(
        self,
        signal: ReloadSignal,
        *,
        debounce_ms: int = DEBOUNCE_MS,
        observer_factory: Callable[[], BaseObserver] = Observer,
    ) -> None:
        self.signal = signal
        self.debounce_ms = debounce_ms
        self._observer_factory = observer_factory

    def start(self, path: Path) -> WatchHandle:
        debouncer = Debouncer(self.debounce_ms / 1000.0, self._on_changed)
        handler = _DocumentEventHandler(path, debouncer)
        observer = self._observer_factory()
        observer.daemon = True
        try:
            observer.schedule(handler, str(path.parent), recursive=False)
            observer.start()
        except OSError as e:
            logger.error("Failed to watch %s: %s", path, e)
            debouncer.cancel()
            return WatchHandle(path, None, None)
        logger.debug("Watching %s (debounce %d ms)", path, self.debounce_ms)
        return WatchHandle(path, observer, debouncer)

    def _on_changed(self) -> None:
        logger.debug("Change detected")
        self.signal.mark_changed()

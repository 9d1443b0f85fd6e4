from __future__ import annotations

import threading


class ReloadSignal:
    """
    Single-slot dirty bit between the watcher thread and the UI thread.

    Not a counter: any number of `mark_changed()` calls between two
    `take_if_changed()` calls collapse into one pending reload.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._changed = False

    def mark_changed(self) -> None:
        with self._lock:
            self._changed = True

    def take_if_changed(self) -> bool:
        """Return whether a change was pending, clearing it in the same step."""
        with self._lock:
            changed, self._changed = self._changed, False
            return changed

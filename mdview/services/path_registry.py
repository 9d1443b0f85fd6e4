from __future__ import annotations

import threading
from pathlib import Path


class PathRegistry:
    """
    Holds the path of the document currently in view.

    Safe to read from the watcher thread while the UI thread replaces it;
    callers only ever get/set whole values, never read-modify-write.
    """

    def __init__(self, path: Path | None = None) -> None:
        self._lock = threading.Lock()
        self._path: Path | None = path

    def get(self) -> Path:
        with self._lock:
            if self._path is None:
                raise LookupError("No document path has been set")
            return self._path

    def set(self, path: Path) -> None:
        with self._lock:
            self._path = Path(path)

    def is_set(self) -> bool:
        with self._lock:
            return self._path is not None

from __future__ import annotations

import logging
import os
from collections.abc import Callable
from pathlib import Path

from mdview.domain.interfaces import (
    IChangeWatcher,
    IDisplaySurface,
    IDocumentRenderer,
    IWatchHandle,
)
from mdview.domain.models import canonicalize
from mdview.services.path_registry import PathRegistry

logger = logging.getLogger(__name__)


class FileSwitcher:
    """
    Points the viewer at a document: registry, watch and an immediate render.

    Owns the single live WatchHandle. The old handle is stopped (synchronously)
    before the new one is started, so a stale watch can't flag the new file.
    """

    def __init__(
        self,
        registry: PathRegistry,
        watcher: IChangeWatcher,
        renderer: IDocumentRenderer,
        surface: Callable[[], IDisplaySurface | None],
        *,
        on_path_changed: Callable[[Path], None] | None = None,
    ) -> None:
        self.registry = registry
        self.watcher = watcher
        self.renderer = renderer
        self._surface = surface
        self._on_path_changed = on_path_changed
        self._handle: IWatchHandle | None = None

    @property
    def handle(self) -> IWatchHandle | None:
        return self._handle

    def set_path_listener(self, listener: Callable[[Path], None] | None) -> None:
        self._on_path_changed = listener

    def switch_to(self, path: str | os.PathLike[str]) -> Path:
        """
        Show `path` now and watch it from here on. No scroll preservation:
        the previous offset means nothing in another document.
        """
        new_path = canonicalize(path)
        self.registry.set(new_path)

        self._stop_watch()
        self._handle = self.watcher.start(new_path)

        surface = self._surface()
        if surface is not None:
            surface.load(self.renderer.render(new_path))

        logger.info("Viewing %s", new_path)
        if self._on_path_changed is not None:
            self._on_path_changed(new_path)
        return new_path

    def close(self) -> None:
        self._stop_watch()

    def _stop_watch(self) -> None:
        handle, self._handle = self._handle, None
        if handle is not None:
            handle.stop()

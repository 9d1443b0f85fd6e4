from __future__ import annotations

import logging
from collections.abc import Callable

from mdview.domain.interfaces import IDisplaySurface, IDocumentRenderer
from mdview.services.path_registry import PathRegistry
from mdview.services.reload_signal import ReloadSignal
from mdview.utils.constants import SCROLL_RESTORE_JS, SCROLL_SAVE_JS

logger = logging.getLogger(__name__)


def inject_scroll_restore(document: str) -> str:
    """Insert the scroll-restore script before the document's closing </body>."""
    idx = document.rfind("</body>")
    if idx < 0:
        return document + SCROLL_RESTORE_JS
    return document[:idx] + SCROLL_RESTORE_JS + document[idx:]


class ReloadCoordinator:
    """
    Runs on the UI thread at a fixed interval and reloads the view when the
    watcher has flagged a change.

    The reload replaces the whole page, so the scroll position is handed over
    in two phases: the current page stores window.scrollY in sessionStorage,
    and a script injected into the new page reads it back after load and
    clears it.
    """

    def __init__(
        self,
        signal: ReloadSignal,
        registry: PathRegistry,
        renderer: IDocumentRenderer,
        surface: Callable[[], IDisplaySurface | None],
    ) -> None:
        self.signal = signal
        self.registry = registry
        self.renderer = renderer
        self._surface = surface

    def tick(self) -> bool:
        """Returns True if a reload was issued."""
        if not self.signal.take_if_changed():
            return False
        surface = self._surface()
        if surface is None:
            # Not shown yet; startup does the first render itself.
            return False

        # 1) old page saves its offset before it's discarded
        surface.evaluate(SCROLL_SAVE_JS)

        # 2-3) fresh render, restore script runs once the new page has loaded
        path = self.registry.get()
        document = inject_scroll_restore(self.renderer.render(path))

        # 4)
        surface.load(document)
        logger.debug("Reloaded %s", path)
        return True

from __future__ import annotations

from pathlib import Path

from mdview.domain.interfaces import IDisplaySurface, IDocumentRenderer, IFileService
from mdview.services.assets import AssetStore
from mdview.services.config.app_config import AppConfig, build_app_config
from mdview.services.file_service import FileService
from mdview.services.file_switcher import FileSwitcher
from mdview.services.file_watcher import ChangeWatcher
from mdview.services.markdown_renderer import DocumentRenderer, MarkdownRenderer
from mdview.services.path_registry import PathRegistry
from mdview.services.reload_coordinator import ReloadCoordinator
from mdview.services.reload_signal import ReloadSignal
from mdview.services.ui.adapters import QtFileDialogService, QtMessageService
from mdview.services.ui.main_window import MainWindow
from mdview.services.ui.ports import IFileDialogService, IMessageService
from mdview.utils.constants import APP_NAME


class Container:
    """
    Lightweight DI container.

    Builds the two pieces of state shared between the watcher thread and the UI
    thread (PathRegistry, ReloadSignal) exactly once and hands the same
    instances to everything that needs them.
    """

    def __init__(
        self,
        config: AppConfig | None = None,
        *,
        files: IFileService | None = None,
        renderer: IDocumentRenderer | None = None,
        watcher: ChangeWatcher | None = None,
        dialogs: IFileDialogService | None = None,
        messages: IMessageService | None = None,
    ) -> None:
        self.config = config or build_app_config()

        # Shared state
        self.registry = PathRegistry()
        self.signal = ReloadSignal()

        # Core services (defaults if not supplied)
        self.file_service: IFileService = files or FileService()
        self.renderer: IDocumentRenderer = renderer or DocumentRenderer(
            MarkdownRenderer(AssetStore(self.config.mermaid_path)), self.file_service
        )
        self.watcher = watcher or ChangeWatcher(self.signal, debounce_ms=self.config.debounce_ms)

        # Display surface arrives with the window; until then reloads are no-ops.
        self.surface: IDisplaySurface | None = None

        self.switcher = FileSwitcher(
            self.registry, self.watcher, self.renderer, self._current_surface
        )
        self.coordinator = ReloadCoordinator(
            self.signal, self.registry, self.renderer, self._current_surface
        )

        self.dialogs: IFileDialogService = dialogs or QtFileDialogService()
        self.messages: IMessageService = messages or QtMessageService()

    # ---------- Internals ----------

    def _current_surface(self) -> IDisplaySurface | None:
        return self.surface

    # ---------- UI factories ----------

    def build_main_window(
        self,
        *,
        start_path: Path | None = None,
        app_title: str = APP_NAME,
        **window_kwargs,
    ) -> MainWindow:
        """
        Create the Qt MainWindow, publish its display surface to the reload
        machinery and show `start_path` right away (not via the reload tick).
        """
        window = MainWindow(
            self.switcher,
            self.coordinator,
            dialogs=self.dialogs,
            messages=self.messages,
            poll_ms=self.config.poll_ms,
            window_size=self.config.window_size,
            app_title=app_title,
            version=self.config.get_version(),
            **window_kwargs,
        )
        self.surface = window.surface

        if start_path is not None:
            window.show_document(start_path)
        return window

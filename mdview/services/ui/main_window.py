from __future__ import annotations

import logging
from pathlib import Path

from PyQt6.QtCore import QEvent, QObject, QTimer
from PyQt6.QtGui import QAction, QKeySequence
from PyQt6.QtWidgets import QApplication, QMainWindow, QTextBrowser, QWidget

from mdview.domain.interfaces import IDisplaySurface
from mdview.services.file_switcher import FileSwitcher
from mdview.services.reload_coordinator import ReloadCoordinator
from mdview.services.ui.adapters.qt_web_surface import (
    QtWebDisplaySurface,
    TextBrowserDisplaySurface,
)
from mdview.services.ui.ports.dialogs import IFileDialogService
from mdview.services.ui.ports.messages import IMessageService
from mdview.utils.constants import (
    APP_NAME,
    DEFAULT_WINDOW_HEIGHT,
    DEFAULT_WINDOW_WIDTH,
    MARKDOWN_FILE_FILTER,
    RELOAD_POLL_MS,
    ZOOM_IN_JS,
    ZOOM_OUT_JS,
    ZOOM_RESET_JS,
)

logger = logging.getLogger(__name__)


class MainWindow(QMainWindow):
    """
    Thin window around the display surface. Rendering, watching and reload
    decisions live in the injected FileSwitcher / ReloadCoordinator; the window
    only drives them from the UI thread (menu actions, DnD, the reload timer).
    """

    def __init__(
        self,
        switcher: FileSwitcher,
        coordinator: ReloadCoordinator,
        *,
        dialogs: IFileDialogService,
        messages: IMessageService,
        view: QWidget | None = None,
        surface: IDisplaySurface | None = None,
        poll_ms: int = RELOAD_POLL_MS,
        window_size: tuple[int, int] = (DEFAULT_WINDOW_WIDTH, DEFAULT_WINDOW_HEIGHT),
        app_title: str = APP_NAME,
        version: str = "0.0.0",
    ) -> None:
        super().__init__()
        self.app_title = app_title
        self.version = version
        self.setWindowTitle(app_title)
        self.resize(*window_size)

        self.switcher = switcher
        self.coordinator = coordinator
        self.dialogs = dialogs
        self.messages = messages

        if view is None or surface is None:
            view, surface = self._create_display_surface()
        self.view = view
        self.surface: IDisplaySurface = surface
        self.setCentralWidget(self.view)

        self.switcher.set_path_listener(self._on_path_changed)

        # UI
        self._build_actions()
        self._build_menu()

        # Reload polling: the watcher thread only flips a flag; this timer turns
        # it into a reload on the UI thread.
        self.reload_timer = QTimer(self)
        self.reload_timer.setInterval(poll_ms)
        self.reload_timer.timeout.connect(self._on_reload_tick)
        self.reload_timer.start()

        # DnD + Finder "Open With"
        self.setAcceptDrops(True)
        app = QApplication.instance()
        if app is not None:
            app.installEventFilter(self)

    # ---------- UI creation ----------
    def _build_actions(self):
        self.act_about = QAction(f"About {self.app_title}", self, triggered=self._show_about)
        self.act_quit = QAction(
            f"Quit {self.app_title}",
            self,
            shortcut=QKeySequence.StandardKey.Quit,
            triggered=self._quit,
        )

        self.act_open = QAction(
            "Open…",
            self,
            shortcut=QKeySequence.StandardKey.Open,
            triggered=self._open_dialog,
        )
        self.act_close = QAction(
            "Close Window", self, shortcut=QKeySequence.StandardKey.Close, triggered=self.close
        )

        self.act_copy = QAction(
            "Copy", self, shortcut=QKeySequence.StandardKey.Copy, triggered=self._copy
        )
        self.act_select_all = QAction(
            "Select All",
            self,
            shortcut=QKeySequence.StandardKey.SelectAll,
            triggered=self._select_all,
        )

        self.act_zoom_in = QAction(
            "Zoom In", self, shortcut=QKeySequence.StandardKey.ZoomIn, triggered=self.zoom_in
        )
        self.act_zoom_out = QAction(
            "Zoom Out", self, shortcut=QKeySequence.StandardKey.ZoomOut, triggered=self.zoom_out
        )
        self.act_zoom_reset = QAction(
            "Actual Size", self, shortcut="Ctrl+0", triggered=self.reset_zoom
        )

    def _build_menu(self):
        m = self.menuBar()
        appm = m.addMenu(self.app_title)
        appm.addAction(self.act_about)
        appm.addSeparator()
        appm.addAction(self.act_quit)

        filem = m.addMenu("&File")
        filem.addAction(self.act_open)
        filem.addSeparator()
        filem.addAction(self.act_close)

        editm = m.addMenu("&Edit")
        editm.addAction(self.act_copy)
        editm.addAction(self.act_select_all)

        viewm = m.addMenu("&View")
        for a in (self.act_zoom_in, self.act_zoom_out, self.act_zoom_reset):
            viewm.addAction(a)

    # ---------- Documents ----------
    def show_document(self, path: Path) -> Path:
        """Switch to `path` unconditionally; a missing file shows an error page."""
        return self.switcher.switch_to(path)

    def open_path(self, path: Path) -> bool:
        """Switch to `path` if it exists (menu, DnD, file-open events)."""
        if not path.exists():
            logger.info("Not opening missing file %s", path)
            self.messages.warning(self, "Open", f"File not found:\n{path}")
            return False
        self.switcher.switch_to(path)
        return True

    def _open_dialog(self):
        registry = self.switcher.registry
        start_dir = str(registry.get().parent) if registry.is_set() else ""
        path = self.dialogs.get_open_file(self, "Open Markdown", start_dir, MARKDOWN_FILE_FILTER)
        if path is not None:
            self.open_path(path)

    def _on_path_changed(self, path: Path) -> None:
        self.setWindowTitle(path.name or self.app_title)

    def _on_reload_tick(self) -> None:
        self.coordinator.tick()

    # ---------- Actions ----------
    def zoom_in(self) -> None:
        self.surface.evaluate(ZOOM_IN_JS)

    def zoom_out(self) -> None:
        self.surface.evaluate(ZOOM_OUT_JS)

    def reset_zoom(self) -> None:
        self.surface.evaluate(ZOOM_RESET_JS)

    def _copy(self) -> None:
        if isinstance(self.view, QTextBrowser):
            self.view.copy()
            return
        from PyQt6.QtWebEngineCore import QWebEnginePage  # type: ignore

        self.view.triggerPageAction(QWebEnginePage.WebAction.Copy)

    def _select_all(self) -> None:
        if isinstance(self.view, QTextBrowser):
            self.view.selectAll()
            return
        from PyQt6.QtWebEngineCore import QWebEnginePage  # type: ignore

        self.view.triggerPageAction(QWebEnginePage.WebAction.SelectAll)

    def _show_about(self) -> None:
        self.messages.about(
            self,
            f"About {self.app_title}",
            f"{self.app_title} {self.version}\n\nLive Markdown viewer.",
        )

    def _quit(self) -> None:
        self.close()
        app = QApplication.instance()
        if app is not None:
            app.quit()

    # ---------- DnD ----------
    def dragEnterEvent(self, e):
        if e.mimeData().hasUrls():
            e.acceptProposedAction()

    def dropEvent(self, e):
        urls = e.mimeData().urls()
        if not urls:
            return
        local = urls[0].toLocalFile()
        if local:
            self.open_path(Path(local))

    # ---------- Finder / dock "open file" ----------
    def eventFilter(self, obj: QObject, event: QEvent) -> bool:
        if event.type() == QEvent.Type.FileOpen:
            local = event.file()
            if local:
                return self.open_path(Path(local))
        return super().eventFilter(obj, event)

    # ---------- Close ----------
    def closeEvent(self, event):
        self.reload_timer.stop()
        self.switcher.close()
        app = QApplication.instance()
        if app is not None:
            app.removeEventFilter(self)
        super().closeEvent(event)

    # ---------- Internal: display surface creation ----------
    def _create_display_surface(self) -> tuple[QWidget, IDisplaySurface]:
        """
        Prefer QWebEngineView (runs the Mermaid and scroll scripts), fall back to
        QTextBrowser so the viewer still works without Qt WebEngine.
        """
        try:
            from PyQt6.QtWebEngineWidgets import QWebEngineView  # type: ignore

            view = QWebEngineView(self)
            return view, QtWebDisplaySurface(view)
        except ImportError as e:
            logger.warning("Qt WebEngine unavailable (%s); using QTextBrowser", e)
            browser = QTextBrowser(self)
            browser.setOpenExternalLinks(True)
            return browser, TextBrowserDisplaySurface(browser)

# mdview/services/ui/adapters/qt_web_surface.py
from __future__ import annotations

import logging
from pathlib import Path

from PyQt6.QtCore import QTemporaryDir, QUrl
from PyQt6.QtWidgets import QTextBrowser, QWidget

from mdview.domain.interfaces import IDisplaySurface

logger = logging.getLogger(__name__)


class QtWebDisplaySurface(IDisplaySurface):
    """
    Display surface backed by a QWebEngineView.

    Documents are written to one scratch file per session and loaded by file://
    URL instead of setHtml(): setHtml() refuses content over 2 MB (an inlined
    Mermaid bundle is bigger than that) and gives the page an opaque origin with
    no sessionStorage, which the scroll handoff needs. Reusing the same file
    keeps the origin stable across reloads. The page is local content, so it
    is allowed to fetch remote scripts for the CDN Mermaid loader.
    """

    DOCUMENT_NAME = "mdview-preview.html"

    def __init__(self, view: QWidget, scratch_dir: Path | None = None) -> None:
        self.view = view
        self._allow_remote_scripts()
        self._tmp: QTemporaryDir | None = None
        if scratch_dir is None:
            self._tmp = QTemporaryDir()
            if not self._tmp.isValid():
                raise OSError(f"Cannot create scratch directory: {self._tmp.errorString()}")
            scratch_dir = Path(self._tmp.path())
        self.document_path = scratch_dir / self.DOCUMENT_NAME

    def load(self, document: str) -> None:
        self.document_path.write_text(document, encoding="utf-8")
        self.view.load(QUrl.fromLocalFile(str(self.document_path)))

    def evaluate(self, script: str) -> None:
        self.view.page().runJavaScript(script)

    def _allow_remote_scripts(self) -> None:
        from PyQt6.QtWebEngineCore import QWebEngineSettings  # type: ignore

        self.view.settings().setAttribute(
            QWebEngineSettings.WebAttribute.LocalContentCanAccessRemoteUrls, True
        )


class TextBrowserDisplaySurface(IDisplaySurface):
    """
    Fallback when Qt WebEngine isn't installed: static HTML, no scripts.
    Diagrams stay as code blocks and scroll position isn't carried over.
    """

    def __init__(self, view: QTextBrowser) -> None:
        self.view = view

    def load(self, document: str) -> None:
        self.view.setHtml(document)

    def evaluate(self, script: str) -> None:
        logger.debug("Scripts are not supported without Qt WebEngine; skipped")

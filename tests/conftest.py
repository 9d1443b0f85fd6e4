from __future__ import annotations

import os
import time
from collections.abc import Callable
from pathlib import Path

import pytest
from PyQt6.QtCore import QCoreApplication, Qt
from PyQt6.QtWidgets import QApplication

from mdview.services.assets import AssetStore
from mdview.services.file_service import FileService
from mdview.services.markdown_renderer import DocumentRenderer, MarkdownRenderer
from mdview.services.path_registry import PathRegistry
from mdview.services.reload_signal import ReloadSignal

# Headless by default; a real display can still be forced from the environment.
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

FAKE_MERMAID_JS = "/* fake mermaid bundle */ window.mermaid = { initialize: function () {} };"


# --- Fallback QApplication fixture (works with or without pytest-qt) ---
@pytest.fixture(scope="session")
def qapp():
    """Provide a QApplication for tests that need Qt.
    Creates one if not present; reuses existing otherwise.
    """
    app = QApplication.instance()
    created = False
    if app is None:
        # Lets Qt WebEngine start inside the same application.
        QCoreApplication.setAttribute(Qt.ApplicationAttribute.AA_ShareOpenGLContexts)
        app = QApplication([])
        created = True
    try:
        yield app
    finally:
        # Don't forcibly quit a shared app; only close if we created it here.
        if created:
            app.quit()


# --- Fakes ---


class FakeSurface:
    """Records what the core asks of the display surface, in order."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, str]] = []

    def load(self, document: str) -> None:
        self.calls.append(("load", document))

    def evaluate(self, script: str) -> None:
        self.calls.append(("evaluate", script))

    @property
    def loads(self) -> list[str]:
        return [arg for kind, arg in self.calls if kind == "load"]

    @property
    def scripts(self) -> list[str]:
        return [arg for kind, arg in self.calls if kind == "evaluate"]


class FakeHandle:
    def __init__(self, path: Path) -> None:
        self.path = path
        self.active = True
        self.stop_calls = 0

    def stop(self) -> None:
        self.stop_calls += 1
        self.active = False


class FakeWatcher:
    """Hands out FakeHandles and remembers them."""

    def __init__(self) -> None:
        self.handles: list[FakeHandle] = []

    def start(self, path: Path) -> FakeHandle:
        h = FakeHandle(path)
        self.handles.append(h)
        return h

    @property
    def live(self) -> list[FakeHandle]:
        return [h for h in self.handles if h.active]


def wait_until(predicate: Callable[[], bool], timeout: float = 3.0, interval: float = 0.02) -> bool:
    """Poll `predicate` until it is true or `timeout` seconds pass."""
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(interval)
    return predicate()


# --- Common fixtures ---


@pytest.fixture()
def mermaid_js(tmp_path: Path) -> Path:
    p = tmp_path / "mermaid.min.js"
    p.write_text(FAKE_MERMAID_JS, encoding="utf-8")
    return p


@pytest.fixture()
def asset_store(mermaid_js: Path) -> AssetStore:
    return AssetStore(mermaid_path=mermaid_js)


@pytest.fixture()
def renderer(asset_store: AssetStore) -> MarkdownRenderer:
    return MarkdownRenderer(asset_store)


@pytest.fixture()
def document_renderer(renderer: MarkdownRenderer) -> DocumentRenderer:
    return DocumentRenderer(renderer, FileService())


@pytest.fixture()
def registry() -> PathRegistry:
    return PathRegistry()


@pytest.fixture()
def signal() -> ReloadSignal:
    return ReloadSignal()


@pytest.fixture()
def surface() -> FakeSurface:
    return FakeSurface()


@pytest.fixture()
def fake_watcher() -> FakeWatcher:
    return FakeWatcher()


@pytest.fixture()
def doc_file(tmp_path: Path) -> Path:
    p = tmp_path / "doc.md"
    p.write_text("# Hi\n", encoding="utf-8")
    return p

from __future__ import annotations

from pathlib import Path
from typing import Optional, Protocol, runtime_checkable

from mdview.domain.models import DocumentPath, RenderedDocument


class IMarkdownRenderer(Protocol):
    """Convert Markdown text to a full HTML document string (including CSS and scripts)."""

    def to_html(self, markdown_text: str, *, title: str = "") -> RenderedDocument: ...


class IDocumentRenderer(Protocol):
    """Turn the file at `path` into a self-contained document. Never raises."""

    def render(self, path: DocumentPath) -> RenderedDocument: ...


class IFileService(Protocol):
    """Read text files."""

    def read_text(self, path: Path) -> str: ...


@runtime_checkable
class IDisplaySurface(Protocol):
    """
    The component that paints a loaded document and runs injected scripts.
    Only ever touched from the UI thread.
    """

    def load(self, document: RenderedDocument) -> None:
        """Replace everything currently shown with `document`."""
        ...

    def evaluate(self, script: str) -> None:
        """Run `script` against the current document for its side effects."""
        ...


class IWatchHandle(Protocol):
    """A live filesystem subscription bound to a single path."""

    @property
    def path(self) -> DocumentPath: ...

    @property
    def active(self) -> bool: ...

    def stop(self) -> None: ...


class IChangeWatcher(Protocol):
    def start(self, path: Path) -> IWatchHandle: ...


class IConfigService(Protocol):
    def get(self, section: str, key: str, default: Optional[str] = None) -> Optional[str]: ...
    def get_int(self, section: str, key: str, default: Optional[int] = None) -> Optional[int]: ...
    def app_version(self) -> str: ...

    @property
    def loaded_from(self) -> Optional[Path]: ...

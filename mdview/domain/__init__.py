"""Domain layer: interfaces and simple models."""

from .interfaces import (
    IChangeWatcher,
    IConfigService,
    IDisplaySurface,
    IDocumentRenderer,
    IFileService,
    IMarkdownRenderer,
    IWatchHandle,
)
from .models import DocumentPath, RenderedDocument, canonicalize

__all__ = [
    "IMarkdownRenderer",
    "IDocumentRenderer",
    "IFileService",
    "IDisplaySurface",
    "IChangeWatcher",
    "IWatchHandle",
    "IConfigService",
    "DocumentPath",
    "RenderedDocument",
    "canonicalize",
]

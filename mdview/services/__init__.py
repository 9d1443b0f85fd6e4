"""Concrete service implementations."""

from .file_service import FileService
from .markdown_renderer import DocumentRenderer, MarkdownRenderer
from .path_registry import PathRegistry
from .reload_signal import ReloadSignal

__all__ = [
    "FileService",
    "MarkdownRenderer",
    "DocumentRenderer",
    "PathRegistry",
    "ReloadSignal",
]

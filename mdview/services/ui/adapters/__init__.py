from __future__ import annotations

from .qt_dialogs import QtFileDialogService
from .qt_messages import QtMessageService
from .qt_web_surface import QtWebDisplaySurface, TextBrowserDisplaySurface

__all__ = [
    "QtFileDialogService",
    "QtMessageService",
    "QtWebDisplaySurface",
    "TextBrowserDisplaySurface",
]

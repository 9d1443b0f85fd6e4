from __future__ import annotations

from typing import Any

from PyQt6.QtWidgets import QMessageBox

from mdview.services.ui.ports.messages import IMessageService


class QtMessageService(IMessageService):
    """Qt-backed implementation for message dialogs."""

    def about(self, parent: Any | None, title: str, text: str) -> None:
        QMessageBox.about(parent, title, text)

    def warning(self, parent: Any | None, title: str, text: str) -> None:
        QMessageBox.warning(parent, title, text)

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class IMessageService(Protocol):
    """
    Abstract UI port for showing messages. Decouples the window logic from QMessageBox.
    """

    def about(self, parent: Any | None, title: str, text: str) -> None: ...
    def warning(self, parent: Any | None, title: str, text: str) -> None: ...

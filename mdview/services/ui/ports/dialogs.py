from __future__ import annotations

from pathlib import Path
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class IFileDialogService(Protocol):
    """
    Abstract UI port for file dialogs. Keeps the rest of the app decoupled from Qt.
    """

    def get_open_file(
            self,
            parent: Any | None,
            caption: str,
            start_dir: str | None,
            filter_str: str,
    ) -> Path | None:
        """Return a selected file path or None if cancelled."""
        ...

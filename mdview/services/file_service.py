from __future__ import annotations

from pathlib import Path

from mdview.domain.interfaces import IFileService


class FileService(IFileService):
    """Plain UTF-8 text reads."""

    def read_text(self, path: Path) -> str:
        return path.read_text(encoding="utf-8")

from __future__ import annotations

import os
from pathlib import Path

# Absolute, symlink-resolved path of the document being viewed.
DocumentPath = Path

# A complete standalone HTML document produced by one render call.
RenderedDocument = str


def canonicalize(path: str | os.PathLike[str]) -> Path:
    """
    Resolve `path` to an absolute, symlink-free form.
    Falls back to the literal path when the file can't be resolved (e.g. missing).
    """
    p = Path(path)
    try:
        return p.resolve(strict=True)
    except (OSError, RuntimeError):
        return p

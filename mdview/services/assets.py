# mdview/services/assets.py
from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from importlib import resources
from pathlib import Path

logger = logging.getLogger(__name__)

ASSET_PACKAGE = "mdview.assets"
STYLESHEET_NAME = "github-markdown.css"
MERMAID_BUNDLE_NAME = "mermaid.min.js"
MERMAID_FALLBACK_NAME = "mermaid-fallback.js"
MERMAID_ENV_VAR = "MDVIEW_MERMAID_JS"
# Loaded by the packaged fallback when no local bundle exists.
MERMAID_CDN_URL = "https://cdn.jsdelivr.net/npm/mermaid@11/dist/mermaid.min.js"

SYSTEM_MERMAID_PATHS = (
    Path("/usr/share/javascript/mermaid/mermaid.min.js"),
    Path("/usr/share/nodejs/mermaid/dist/mermaid.min.js"),
)


def _read_packaged(name: str) -> str | None:
    try:
        return resources.files(ASSET_PACKAGE).joinpath(name).read_text(encoding="utf-8")
    except (FileNotFoundError, OSError):
        return None


@dataclass(frozen=True)
class Assets:
    """Text that gets inlined verbatim into every rendered document."""

    stylesheet: str
    diagram_js: str
    diagram_source: str


class AssetStore:
    """
    Loads the stylesheet and diagram-rendering script once per process.

    Diagram script lookup order (first hit wins):
      1. Explicit path (config `[render] mermaid_js`, or MDVIEW_MERMAID_JS)
      2. Packaged mdview/assets/mermaid.min.js
      3. Distribution packages (Debian/Ubuntu install locations)
      4. Packaged loader that fetches MERMAID_CDN_URL at display time and
         leaves diagram source readable when offline
    """

    def __init__(self, mermaid_path: Path | None = None) -> None:
        self._mermaid_path = mermaid_path
        self._assets: Assets | None = None

    def get(self) -> Assets:
        if self._assets is None:
            self._assets = self._load()
            logger.info("Diagram script: %s", self._assets.diagram_source)
        return self._assets

    # -------------------- helpers --------------------

    def _load(self) -> Assets:
        css = _read_packaged(STYLESHEET_NAME)
        if css is None:
            raise FileNotFoundError(f"Packaged stylesheet missing: {STYLESHEET_NAME}")
        js, source = self._load_diagram_js()
        return Assets(stylesheet=css, diagram_js=js, diagram_source=source)

    def _load_diagram_js(self) -> tuple[str, str]:
        explicit = self._mermaid_path
        if explicit is None:
            env_value = os.environ.get(MERMAID_ENV_VAR, "").strip()
            if env_value:
                explicit = Path(env_value).expanduser()

        if explicit is not None:
            try:
                return explicit.read_text(encoding="utf-8"), str(explicit)
            except OSError as e:
                logger.warning("Could not read diagram script %s: %s", explicit, e)

        packaged = _read_packaged(MERMAID_BUNDLE_NAME)
        if packaged is not None:
            return packaged, f"{ASSET_PACKAGE}/{MERMAID_BUNDLE_NAME}"

        for path in SYSTEM_MERMAID_PATHS:
            if path.is_file():
                try:
                    return path.read_text(encoding="utf-8"), str(path)
                except OSError as e:
                    logger.warning("Could not read diagram script %s: %s", path, e)

        logger.warning(
            "No local Mermaid bundle found; diagrams load %s at display time. "
            "Place %s in the mdview/assets directory or set %s to work offline.",
            MERMAID_CDN_URL,
            MERMAID_BUNDLE_NAME,
            MERMAID_ENV_VAR,
        )
        fallback = _read_packaged(MERMAID_FALLBACK_NAME)
        if fallback is None:
            raise FileNotFoundError(f"Packaged diagram fallback missing: {MERMAID_FALLBACK_NAME}")
        return fallback, f"{ASSET_PACKAGE}/{MERMAID_FALLBACK_NAME}"

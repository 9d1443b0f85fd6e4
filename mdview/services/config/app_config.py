from __future__ import annotations

import re
import sys
from dataclasses import dataclass
from pathlib import Path

from mdview.domain.interfaces import IConfigService
from mdview.services.config.ini_config_service import IniConfigService
from mdview.utils.constants import (
    DEBOUNCE_MS,
    DEFAULT_WINDOW_HEIGHT,
    DEFAULT_WINDOW_WIDTH,
    RELOAD_POLL_MS,
)

_VERSION_RE = re.compile(r"^v?(\d+\.\d+\.\d+)(?:[-+].*)?$", re.IGNORECASE)

# Lower bounds keep a typo like `poll_ms = 0` from spinning the UI thread.
_MIN_INTERVAL_MS = 10


def _project_root_fallback() -> Path:
    """
    Best-effort project root resolution that also works in PyInstaller:
      - PyInstaller onefile/onedir uses sys._MEIPASS as bundle root
      - dev mode uses this file location to walk upward
    """
    meipass = getattr(sys, "_MEIPASS", None)  # type: ignore[attr-defined]
    if meipass:
        return Path(meipass)

    # mdview/services/config/app_config.py -> parents[3] = repository root
    return Path(__file__).resolve().parents[3]


def _read_version_file(version_path: Path) -> str | None:
    try:
        raw = version_path.read_text(encoding="utf-8").strip()
    except OSError:
        return None

    m = _VERSION_RE.match(raw)
    if not m:
        return None
    return m.group(1)


@dataclass(frozen=True)
class AppConfig:
    """
    Typed view over IniConfigService for the viewer's tunables.

      [watch]   debounce_ms  quiescence window for filesystem events
      [reload]  poll_ms      reload check interval on the UI thread
      [render]  mermaid_js   path to a Mermaid bundle to inline
      [window]  width/height initial window size
      [logging] level        root log level when --log-level isn't given

    Precedence for version:
      1) <project_root>/version file (semantic e.g. v1.0.5)
      2) [app] version
      3) "0.0.0"
    """

    ini: IConfigService
    project_root: Path

    @property
    def debounce_ms(self) -> int:
        v = self.ini.get_int("watch", "debounce_ms", DEBOUNCE_MS)
        return max(_MIN_INTERVAL_MS, v if v is not None else DEBOUNCE_MS)

    @property
    def poll_ms(self) -> int:
        v = self.ini.get_int("reload", "poll_ms", RELOAD_POLL_MS)
        return max(_MIN_INTERVAL_MS, v if v is not None else RELOAD_POLL_MS)

    @property
    def mermaid_path(self) -> Path | None:
        raw = (self.ini.get("render", "mermaid_js", "") or "").strip()
        return Path(raw).expanduser() if raw else None

    @property
    def window_size(self) -> tuple[int, int]:
        w = self.ini.get_int("window", "width", DEFAULT_WINDOW_WIDTH) or DEFAULT_WINDOW_WIDTH
        h = self.ini.get_int("window", "height", DEFAULT_WINDOW_HEIGHT) or DEFAULT_WINDOW_HEIGHT
        return w, h

    @property
    def log_level(self) -> str:
        return (self.ini.get("logging", "level", "WARNING") or "WARNING").strip().upper()

    def get_version(self) -> str:
        v = _read_version_file(self.project_root / "version")
        if v:
            return v

        v2 = (self.ini.app_version() or "").strip()
        if v2:
            m = _VERSION_RE.match(v2)
            return m.group(1) if m else v2

        return "0.0.0"

    @property
    def loaded_from(self) -> Path | None:
        return self.ini.loaded_from


def build_app_config(
    *, explicit_ini: Path | None = None, project_root: Path | None = None
) -> AppConfig:
    root = project_root or _project_root_fallback()
    ini = IniConfigService(explicit_path=explicit_ini, project_root=root)
    return AppConfig(ini=ini, project_root=root)

# mdview/services/config/ini_config_service.py
from __future__ import annotations

import configparser
import logging
import os
from pathlib import Path
from typing import Optional

try:
    from platformdirs import user_config_dir  # type: ignore
except ImportError:
    user_config_dir = None

from mdview.domain.interfaces import IConfigService

logger = logging.getLogger(__name__)


def candidate_paths(
    app_dir: str,
    file_name: str,
    *,
    explicit_path: Optional[Path] = None,
    project_root: Optional[Path] = None,
) -> list[Path]:
    r"""
    Where a viewer config may live, most specific first:
      1. --config
      2. user config dir (~/.config/mdview/config.ini, %APPDATA%\mdview\config.ini)
      3. <project_root>/config/config.ini (shipped defaults)
    """
    paths: list[Path] = []
    if explicit_path:
        paths.append(explicit_path)
    if user_config_dir:
        paths.append(Path(user_config_dir(app_dir)) / file_name)
    else:
        paths.append(Path(os.path.expanduser("~")) / ".config" / app_dir / file_name)
    if project_root:
        paths.append(project_root / "config" / file_name)
    return paths


class IniConfigService(IConfigService):
    """
    Reads the first usable INI file from `candidate_paths`. Files are not
    merged. One that can't be read or parsed is logged and the next is tried,
    so a broken user config never stops the viewer from starting.
    """

    DEFAULT_APP_DIR = "mdview"
    DEFAULT_FILE = "config.ini"

    def __init__(self, explicit_path: Optional[Path] = None, project_root: Optional[Path] = None):
        self._parser = configparser.ConfigParser()
        self._loaded_from: Optional[Path] = None

        for path in candidate_paths(
            self.DEFAULT_APP_DIR,
            self.DEFAULT_FILE,
            explicit_path=explicit_path,
            project_root=project_root,
        ):
            if self._try_read(path):
                break

    def _try_read(self, path: Path) -> bool:
        if not path.is_file():
            return False
        parser = configparser.ConfigParser()
        try:
            with path.open("r", encoding="utf-8") as fh:
                parser.read_file(fh)
        except (OSError, UnicodeDecodeError, configparser.Error) as e:
            logger.warning("Ignoring config file %s: %s", path, e)
            return False
        self._parser = parser
        self._loaded_from = path
        return True

    # ----- IConfigService -----

    def get(self, section: str, key: str, default: Optional[str] = None) -> Optional[str]:
        return self._parser.get(section, key, raw=True, fallback=default)

    def get_int(self, section: str, key: str, default: Optional[int] = None) -> Optional[int]:
        raw = self.get(section, key)
        if raw is None:
            return default
        try:
            return int(raw.strip())
        except ValueError:
            logger.warning("[%s] %s = %r is not an integer; using %s", section, key, raw, default)
            return default

    def app_version(self) -> str:
        return (self.get("app", "version") or "").strip() or "0.0.0"

    @property
    def loaded_from(self) -> Optional[Path]:
        """The file the settings came from, or None when running on defaults."""
        return self._loaded_from

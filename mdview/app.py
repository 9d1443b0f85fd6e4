from __future__ import annotations

import argparse
import logging
from collections.abc import Sequence
from pathlib import Path

from PyQt6.QtCore import QCoreApplication, Qt
from PyQt6.QtWidgets import QApplication

from mdview import __version__
from mdview.di.container import Container
from mdview.services.config.app_config import build_app_config
from mdview.utils.constants import APP_NAME, APP_ORG

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mdview",
        description="Live-updating Markdown viewer. Re-renders FILE whenever it changes on disk.",
    )
    parser.add_argument("file", type=Path, help="Markdown file to view")
    parser.add_argument("--config", type=Path, default=None, help="explicit INI config file")
    parser.add_argument(
        "--log-level",
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        type=str.upper,
        help="log level (default: [logging] level from config, else WARNING)",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def configure_logging(level: str) -> None:
    logging.basicConfig(level=getattr(logging, level, logging.WARNING), format=LOG_FORMAT)


def run_app(argv: Sequence[str]) -> int:
    """
    Parses the command line, bootstraps Qt, composes the application via the
    DI container and shows the file. A missing FILE argument exits with status 2.
    """
    args = build_parser().parse_args(list(argv)[1:])

    config = build_app_config(explicit_ini=args.config)
    configure_logging(args.log_level or config.log_level)
    logger.info("Config: %s", config.loaded_from or "built-in defaults")

    # Lets Qt WebEngine be imported after the QApplication exists.
    QCoreApplication.setAttribute(Qt.ApplicationAttribute.AA_ShareOpenGLContexts)
    QApplication.setOrganizationName(APP_ORG)
    QApplication.setApplicationName(APP_NAME)
    app = QApplication(list(argv[:1]))

    container = Container(config)
    win = container.build_main_window(start_path=args.file, app_title=APP_NAME)
    win.show()

    try:
        return app.exec()
    finally:
        container.switcher.close()

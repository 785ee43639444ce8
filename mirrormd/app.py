from __future__ import annotations

import logging
from collections.abc import Sequence
from pathlib import Path

from PyQt6.QtWidgets import QApplication

from mirrormd.di.container import Container
from mirrormd.services.config.app_config import build_app_config
from mirrormd.utils.constants import APP_NAME, APP_ORG
from mirrormd.utils.logging_setup import configure_logging

log = logging.getLogger(__name__)


def run_app(argv: Sequence[str]) -> int:
    """
    Bootstraps Qt, composes the editor via the DI container,
    and launches the main window.
    """
    cfg = build_app_config()
    configure_logging(cfg.get("logging", "level", "INFO") or "INFO")

    QApplication.setOrganizationName(APP_ORG)
    QApplication.setApplicationName(APP_NAME)
    QApplication.setApplicationVersion(cfg.get_version())
    app = QApplication(list(argv))

    container = Container.default(config=cfg)

    # Optional file path to open passed as first CLI argument
    start_path = Path(argv[1]) if len(argv) > 1 else None

    win = container.build_main_window(start_path=start_path, app_title=APP_NAME)
    win.show()

    try:
        return app.exec()
    finally:
        container.close()

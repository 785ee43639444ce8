from __future__ import annotations

import argparse
import logging
from collections.abc import Sequence
from pathlib import Path

import uvicorn

from mirrormd.di.server_container import ServerContainer
from mirrormd.services.config.app_config import ServerSettings, build_app_config
from mirrormd.utils.logging_setup import configure_logging
from mirrormd.web.app import create_app

log = logging.getLogger(__name__)


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(prog="mirrormd-server", description="Run the MirrorMD HTTP API.")
    p.add_argument("--config", type=Path, default=None, help="explicit config.ini path")
    p.add_argument("--host", default=None)
    p.add_argument("--port", type=int, default=None)
    return p.parse_args(list(argv))


def run_server(argv: Sequence[str]) -> int:
    """
    Compose the server from config and hand it to uvicorn.

    uvicorn installs the SIGINT/SIGTERM handlers; on either signal it runs the app
    lifespan shutdown, which closes the shared Chromium before the process exits.
    """
    args = _parse_args(argv)
    cfg = build_app_config(explicit_ini=args.config)
    settings = ServerSettings.from_config(cfg)
    configure_logging(settings.log_level)

    app = create_app(ServerContainer(settings, config=cfg))
    host = args.host or settings.host
    port = args.port or settings.port
    log.info("MirrorMD server listening on http://%s:%d", host, port)
    uvicorn.run(app, host=host, port=port, log_level=settings.log_level.lower())
    return 0

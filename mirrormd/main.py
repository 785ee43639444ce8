from __future__ import annotations

import sys

from mirrormd.app import run_app


def main() -> int:
    """Editor entrypoint (`mirrormd` console script or `python -m mirrormd.main`)."""
    return run_app(sys.argv)


def server_main() -> int:
    """HTTP API entrypoint (`mirrormd-server` console script)."""
    from mirrormd.web.server import run_server

    return run_server(sys.argv[1:])


if __name__ == "__main__":
    raise SystemExit(main())

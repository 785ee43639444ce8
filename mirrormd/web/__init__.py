"""HTTP API (FastAPI) for conversion, PDF export and saved files."""

from .app import create_app

__all__ = ["create_app"]

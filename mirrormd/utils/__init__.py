"""App constants and utilities."""

from .constants import (
    APP_NAME,
    APP_ORG,
    CSS_PREVIEW,
    HTML_TEMPLATE,
    MAX_EXPORT_SIZE,
    MAX_FILE_SIZE,
    MAX_RECENTS,
    SETTINGS_GEOMETRY,
    SETTINGS_RECENTS,
    SETTINGS_SPLITTER,
    SETTINGS_THEME,
)
from .logging_setup import configure_logging

__all__ = [
    "APP_ORG",
    "APP_NAME",
    "CSS_PREVIEW",
    "HTML_TEMPLATE",
    "SETTINGS_GEOMETRY",
    "SETTINGS_SPLITTER",
    "SETTINGS_RECENTS",
    "SETTINGS_THEME",
    "MAX_RECENTS",
    "MAX_FILE_SIZE",
    "MAX_EXPORT_SIZE",
    "configure_logging",
]

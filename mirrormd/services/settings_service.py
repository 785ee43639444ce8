from __future__ import annotations

from typing import Iterable

from PyQt6.QtCore import QByteArray, QSettings

from mirrormd.domain.interfaces import ISettingsService
from mirrormd.utils.constants import (
    SETTINGS_GEOMETRY,
    SETTINGS_RECENTS,
    SETTINGS_SPLITTER,
    SETTINGS_THEME,
)


class SettingsService(ISettingsService):
    """Persist small UI bits like geometry, splitter position, recent files and UI theme."""

    def __init__(self, qsettings: QSettings) -> None:
        self._s = qsettings

    def get_geometry(self) -> bytes | None:
        v = self._s.value(SETTINGS_GEOMETRY)
        return bytes(v) if isinstance(v, QByteArray) else None

    def set_geometry(self, blob: bytes) -> None:
        self._s.setValue(SETTINGS_GEOMETRY, QByteArray(blob))

    def get_splitter(self) -> bytes | None:
        v = self._s.value(SETTINGS_SPLITTER)
        return bytes(v) if isinstance(v, QByteArray) else None

    def set_splitter(self, blob: bytes) -> None:
        self._s.setValue(SETTINGS_SPLITTER, QByteArray(blob))

    def get_recent(self) -> list[str]:
        v = self._s.value(SETTINGS_RECENTS, [])
        if isinstance(v, str):
            # QSettings (INI) collapses one-element lists into a plain string
            return [v] if v else []
        return [str(x) for x in v] if isinstance(v, list) else []

    def set_recent(self, recent: Iterable[str]) -> None:
        self._s.setValue(SETTINGS_RECENTS, list(recent))

    def get_theme(self) -> str | None:
        v = self._s.value(SETTINGS_THEME)
        return str(v) if v else None

    def set_theme(self, theme: str) -> None:
        self._s.setValue(SETTINGS_THEME, theme)
        self._s.sync()

from __future__ import annotations

import logging
from enum import Enum

from PyQt6.QtCore import QObject, pyqtSignal

from mirrormd.domain.interfaces import ISettingsService

log = logging.getLogger(__name__)


class UiTheme(Enum):
    LIGHT = "light"
    DARK = "dark"

    @property
    def palette(self) -> str:
        """Solarized variant (body class and Pygments style) used by this theme."""
        return f"solarized-{self.value}"

    @property
    def toggle_label(self) -> str:
        # The toggle advertises the theme it switches to.
        return "☀️ Light" if self is UiTheme.DARK else "🌙 Dark"

    def opposite(self) -> UiTheme:
        return UiTheme.LIGHT if self is UiTheme.DARK else UiTheme.DARK


DEFAULT_THEME = UiTheme.DARK

# Editor chrome stylesheets (Qt widgets only; the preview is styled by its own CSS).
_CHROME_QSS: dict[UiTheme, str] = {
    UiTheme.LIGHT: (
        "QMainWindow, QDialog { background:#fdf6e3; color:#586e75; }"
        "QPlainTextEdit, QTextEdit { background:#fdf6e3; color:#586e75;"
        " selection-background-color:#eee8d5; border:none; }"
        "QToolBar, QStatusBar, QMenuBar { background:#eee8d5; color:#586e75; }"
    ),
    UiTheme.DARK: (
        "QMainWindow, QDialog { background:#002b36; color:#93a1a1; }"
        "QPlainTextEdit, QTextEdit { background:#002b36; color:#93a1a1;"
        " selection-background-color:#073642; border:none; }"
        "QToolBar, QStatusBar, QMenuBar { background:#073642; color:#93a1a1; }"
    ),
}


def chrome_stylesheet(theme: UiTheme) -> str:
    return _CHROME_QSS[theme]


class ThemeManager(QObject):
    """
    Current light/dark UI theme, persisted through SettingsService.

    set_theme() always persists; themeChanged fires only on an actual change.
    """

    themeChanged = pyqtSignal(object)  # UiTheme

    def __init__(self, settings: ISettingsService, parent: QObject | None = None) -> None:
        super().__init__(parent)
        self._settings = settings
        self._theme = self._load()

    def _load(self) -> UiTheme:
        stored = self._settings.get_theme()
        if stored is None:
            return DEFAULT_THEME
        try:
            return UiTheme(stored)
        except ValueError:
            log.warning("Ignoring unknown stored UI theme %r", stored)
            return DEFAULT_THEME

    def get_theme(self) -> UiTheme:
        return self._theme

    def set_theme(self, theme: UiTheme) -> None:
        changed = theme is not self._theme
        self._theme = theme
        self._settings.set_theme(theme.value)
        if changed:
            self.themeChanged.emit(theme)

    def toggle(self) -> UiTheme:
        self.set_theme(self._theme.opposite())
        return self._theme

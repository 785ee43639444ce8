import pytest

from mirrormd.services.theme_manager import ThemeManager, UiTheme, chrome_stylesheet


@pytest.fixture()
def themes(qapp, settings_service) -> ThemeManager:
    return ThemeManager(settings_service)


def _record(tm: ThemeManager) -> list:
    seen: list = []
    tm.themeChanged.connect(seen.append)
    return seen


def test_default_is_dark(themes: ThemeManager):
    assert themes.get_theme() is UiTheme.DARK


def test_set_theme_persists_and_emits(themes: ThemeManager, settings_service):
    seen = _record(themes)
    themes.set_theme(UiTheme.LIGHT)
    assert themes.get_theme() is UiTheme.LIGHT
    assert settings_service.get_theme() == "light"
    assert seen == [UiTheme.LIGHT]


def test_set_theme_is_idempotent(themes: ThemeManager, settings_service):
    seen = _record(themes)
    themes.set_theme(UiTheme.LIGHT)
    themes.set_theme(UiTheme.LIGHT)
    themes.set_theme(UiTheme.LIGHT)
    assert seen == [UiTheme.LIGHT]
    assert settings_service.get_theme() == "light"


def test_setting_current_theme_still_persists(themes: ThemeManager, settings_service):
    seen = _record(themes)
    themes.set_theme(UiTheme.DARK)
    assert seen == []
    assert settings_service.get_theme() == "dark"


def test_toggle(themes: ThemeManager):
    assert themes.toggle() is UiTheme.LIGHT
    assert themes.toggle() is UiTheme.DARK


def test_theme_survives_restart(qapp, settings_service):
    ThemeManager(settings_service).set_theme(UiTheme.LIGHT)
    assert ThemeManager(settings_service).get_theme() is UiTheme.LIGHT


def test_unknown_stored_value_falls_back_to_dark(qapp, settings_service):
    settings_service.set_theme("neon")
    assert ThemeManager(settings_service).get_theme() is UiTheme.DARK


def test_theme_metadata():
    assert UiTheme.DARK.palette == "solarized-dark"
    assert UiTheme.LIGHT.palette == "solarized-light"
    assert UiTheme.DARK.toggle_label == "☀️ Light"
    assert UiTheme.LIGHT.toggle_label == "🌙 Dark"
    assert UiTheme.DARK.opposite() is UiTheme.LIGHT
    assert "#002b36" in chrome_stylesheet(UiTheme.DARK)
    assert "#fdf6e3" in chrome_stylesheet(UiTheme.LIGHT)

from __future__ import annotations

from pathlib import Path

import pytest
from PyQt6.QtCore import QSettings, Qt
from PyQt6.QtTest import QTest
from PyQt6.QtWidgets import QApplication, QDialog, QTextEdit

from mirrormd.domain.errors import RenderError, ServerUnreachableError
from mirrormd.domain.interfaces import IExporter
from mirrormd.services.exporters.base import ExporterRegistryInst
from mirrormd.services.exporters.html_exporter import HtmlExporter
from mirrormd.services.file_service import FileService
from mirrormd.services.markdown_renderer import MarkdownRenderer
from mirrormd.services.settings_service import SettingsService
from mirrormd.services.theme_manager import UiTheme
from mirrormd.services.ui.export_dialog import ExportDialog
from mirrormd.services.ui.main_window import MainWindow

DEBOUNCE_MS = 30

# ------------------------------
# Fakes & helpers
# ------------------------------


class FakeMessages:
    """Records every message instead of opening dialogs or toasts."""

    def __init__(self, *, answer: bool = True) -> None:
        self.answer = answer
        self.notes: list[tuple[str, str]] = []
        self.errors: list[str] = []
        self.asked = 0

    def info(self, parent, title, text) -> None:
        self.notes.append(("info", text))

    def warning(self, parent, title, text) -> None:
        self.notes.append(("warning", text))

    def error(self, parent, title, text) -> None:
        self.errors.append(text)

    def notify(self, parent, text, *, level="info") -> None:
        self.notes.append((level, text))

    def ask(self, parent, title, text, kind=None) -> bool:
        self.asked += 1
        return self.answer

    def levels(self) -> list[str]:
        return [level for level, _ in self.notes]


class RecordingPdfExporter(IExporter):
    name = "pdf"
    label = "Export PDF…"
    file_ext = "pdf"
    needs_options = True

    def __init__(self, *, error: Exception | None = None) -> None:
        self.error = error
        self.calls: list[dict] = []

    def export(self, markdown_text, out_path, *, title=None, theme=None) -> None:
        self.calls.append(
            {"markdown": markdown_text, "out": out_path, "title": title, "theme": theme}
        )
        if self.error is not None:
            raise self.error
        out_path.write_bytes(b"%PDF-test")


@pytest.fixture()
def messages() -> FakeMessages:
    return FakeMessages()


@pytest.fixture()
def pdf_exporter() -> RecordingPdfExporter:
    return RecordingPdfExporter()


@pytest.fixture()
def exporter_registry(renderer, pdf_exporter) -> ExporterRegistryInst:
    reg = ExporterRegistryInst()
    reg.register(HtmlExporter(renderer))
    reg.register(pdf_exporter)
    return reg


def make_window(tmp_path, exporter_registry, messages, **kwargs) -> MainWindow:
    qs = QSettings(str(tmp_path / "settings.ini"), QSettings.Format.IniFormat)
    return MainWindow(
        renderer=MarkdownRenderer(),
        file_service=FileService(),
        settings=SettingsService(qs),
        messages=messages,
        exporter_registry=exporter_registry,
        debounce_ms=DEBOUNCE_MS,
        theme_render_delay_ms=10,
        use_web_engine=False,
        app_title="Test",
        **kwargs,
    )


@pytest.fixture()
def window(qapp, tmp_path, exporter_registry, messages) -> MainWindow:
    """
    Build a MainWindow with file-based QSettings (isolated per test), an injected
    exporter registry and a message recorder.
    """
    w = make_window(tmp_path, exporter_registry, messages)
    w.show()
    qapp.processEvents()
    return w


def export_action(window: MainWindow, name: str):
    labels = {"html": "Export HTML…", "pdf": "Export PDF…"}
    return next(a for a in window.export_actions if a.text() == labels[name])


def accept_dialog(monkeypatch, *, title: str | None = None):
    monkeypatch.setattr(ExportDialog, "exec", lambda self: QDialog.DialogCode.Accepted.value)
    if title is not None:
        monkeypatch.setattr(ExportDialog, "title", lambda self: title)


def save_to(monkeypatch, out: Path):
    monkeypatch.setattr(
        "mirrormd.services.ui.main_window.QFileDialog.getSaveFileName",
        lambda *a, **k: (str(out), ""),
    )


# ------------------------------
# Core window behavior tests
# ------------------------------


def test_window_initial_state(window: MainWindow):
    assert window.doc.path is None
    assert window.doc.modified is False
    assert window.last_html.lower().startswith("<!doctype html")
    assert 'class="solarized-dark"' in window.last_html
    assert window.stats_label.text() == "0 chars · 0 words"
    assert window.act_theme.text() == "☀️ Light"


def test_typing_is_debounced_into_one_render(window: MainWindow):
    before = window.scheduler.render_count
    window.editor.setPlainText("hello")
    window.editor.setPlainText("hello big")
    window.editor.setPlainText("hello big world")
    assert window.doc.modified is True
    assert "world" not in window.last_html

    QTest.qWait(DEBOUNCE_MS * 5)
    assert window.scheduler.render_count == before + 1
    assert "hello big world" in window.last_html
    assert window.stats_label.text() == "15 chars · 3 words"


def test_tab_inserts_two_spaces(window: MainWindow):
    window.editor.setFocus()
    QTest.keyClick(window.editor, Qt.Key.Key_Tab)
    assert window.editor.toPlainText() == "  "

    window.editor.setPlainText("abc")
    window.editor.selectAll()
    QTest.keyClick(window.editor, Qt.Key.Key_Tab)
    assert window.editor.toPlainText() == "  "


def test_window_open_save_cycle(tmp_path: Path, window: MainWindow):
    src = tmp_path / "a.md"
    src.write_text("# Hello", encoding="utf-8")

    assert window._open_path(src) is True
    assert window.doc.path == src
    assert window.doc.modified is False
    assert window.editor.toPlainText().startswith("# Hello")
    assert "<h1>Hello</h1>" in window.last_html
    assert window.windowTitle() == "a.md — Test"

    # edit -> modified
    window.editor.setPlainText("# Hello\nWorld")
    assert window.doc.modified is True

    dest = tmp_path / "b.md"
    assert window._write_to(dest) is True
    assert dest.read_text(encoding="utf-8").endswith("World")
    assert window.doc.modified is False


def test_window_write_failure_reports_error(
    monkeypatch, tmp_path: Path, window: MainWindow, messages
):
    def boom(path: Path, text: str) -> None:
        raise OSError("disk full")

    monkeypatch.setattr(window.file_service, "write_text_atomic", boom)
    assert window._write_to(tmp_path / "bad.md") is False
    assert "disk full" in messages.errors[0]


def test_open_failure_reports_error(tmp_path: Path, window: MainWindow, messages):
    assert window._open_path(tmp_path / "missing.md") is False
    assert messages.errors


def test_window_recents_persist_roundtrip(
    window: MainWindow, tmp_path: Path, qapp, exporter_registry, messages
):
    p = tmp_path / "r.md"
    p.write_text("ok", encoding="utf-8")
    window._open_path(p)
    assert str(p) in window.recents[:1]  # most recent

    window.close()
    qapp.processEvents()

    w2 = make_window(tmp_path, exporter_registry, messages)
    assert str(p) in w2.recents[:1]


def test_confirm_discard_asks_only_when_modified(window: MainWindow, messages):
    window.doc.modified = False
    assert window._confirm_discard() is True
    assert messages.asked == 0

    window.doc.modified = True
    messages.answer = False
    assert window._confirm_discard() is False
    messages.answer = True
    assert window._confirm_discard() is True
    assert messages.asked == 2


def test_window_toggles(window: MainWindow, qapp):
    window._toggle_wrap(False)
    assert window.editor.lineWrapMode() == QTextEdit.LineWrapMode.NoWrap
    window._toggle_wrap(True)
    assert window.editor.lineWrapMode() == QTextEdit.LineWrapMode.WidgetWidth

    window._toggle_preview(False)
    qapp.processEvents()
    assert window.preview.isVisible() is False
    window._toggle_preview(True)
    qapp.processEvents()
    assert window.preview.isVisible() is True


# ------------------------------
# Theme
# ------------------------------


def test_theme_toggle_restyles_and_rerenders(window: MainWindow):
    window.act_theme.trigger()
    assert window.themes.get_theme() is UiTheme.LIGHT
    assert window.act_theme.text() == "🌙 Dark"
    assert window.settings.get_theme() == "light"
    assert "#fdf6e3" in window.styleSheet()

    QTest.qWait(60)
    assert 'class="solarized-light"' in window.last_html


def test_theme_is_restored_on_next_start(
    window: MainWindow, tmp_path, exporter_registry, messages
):
    window.act_theme.trigger()
    w2 = make_window(tmp_path, exporter_registry, messages)
    assert w2.themes.get_theme() is UiTheme.LIGHT
    assert w2.act_theme.text() == "🌙 Dark"


# ------------------------------
# Export
# ------------------------------


def test_html_export_flows_through_registry(monkeypatch, tmp_path: Path, window: MainWindow, messages):
    window.editor.setPlainText("# Title\n\nText")
    out = tmp_path / "doc.html"
    save_to(monkeypatch, out)

    act = export_action(window, "html")
    act.trigger()

    data = out.read_text(encoding="utf-8").lower()
    assert data.startswith("<!doctype")
    assert "<h1>title</h1>" in data
    assert act.isEnabled()
    assert messages.levels()[-1] == "info"


def test_pdf_export_asks_for_title_and_theme(
    monkeypatch, tmp_path: Path, window: MainWindow, pdf_exporter
):
    src = tmp_path / "report.md"
    src.write_text("# Report", encoding="utf-8")
    window._open_path(src)

    seen = {}
    original_init = ExportDialog.__init__

    def spy_init(self, themes, **kwargs):
        themes = list(themes)
        seen["themes"] = [t["id"] for t in themes]
        seen["title"] = kwargs.get("title")
        seen["default"] = kwargs.get("default_theme")
        original_init(self, themes, **kwargs)

    monkeypatch.setattr(ExportDialog, "__init__", spy_init)
    accept_dialog(monkeypatch)
    out = tmp_path / "report.pdf"
    suggested = {}

    def fake_save(parent, caption, default, filt):
        suggested["name"] = default
        return str(out), ""

    monkeypatch.setattr("mirrormd.services.ui.main_window.QFileDialog.getSaveFileName", fake_save)

    act = export_action(window, "pdf")
    act.trigger()

    assert seen["title"] == "report"
    # no theme source configured: the local catalog is offered
    assert seen["themes"] == ["solarized-light", "solarized-dark", "printer"]
    assert seen["default"] == "solarized-light"
    assert suggested["name"] == "report.pdf"

    [call] = pdf_exporter.calls
    assert call["title"] == "report"
    assert call["theme"] == "solarized-light"
    assert out.read_bytes() == b"%PDF-test"
    assert act.isEnabled()


def test_pdf_export_untitled_document_title(monkeypatch, tmp_path, window, pdf_exporter):
    window.editor.setPlainText("# x")
    accept_dialog(monkeypatch)
    save_to(monkeypatch, tmp_path / "document.pdf")
    export_action(window, "pdf").trigger()
    assert pdf_exporter.calls[0]["title"] == "Document"


def test_pdf_export_cancelled_dialog(monkeypatch, tmp_path, window, pdf_exporter):
    window.editor.setPlainText("# x")
    monkeypatch.setattr(ExportDialog, "exec", lambda self: QDialog.DialogCode.Rejected.value)
    save_to(monkeypatch, tmp_path / "never.pdf")
    export_action(window, "pdf").trigger()
    assert pdf_exporter.calls == []


def test_theme_source_used_and_falls_back(qapp, tmp_path, exporter_registry, messages):
    remote = ([{"id": "printer", "name": "Printer Friendly", "description": ""}], "printer")
    w = make_window(tmp_path, exporter_registry, messages, pdf_theme_source=lambda: remote)
    assert w._pdf_theme_choices() == remote

    def unreachable():
        raise ServerUnreachableError("Network error")

    w2 = make_window(tmp_path, exporter_registry, messages, pdf_theme_source=unreachable)
    themes, default = w2._pdf_theme_choices()
    assert default == "solarized-light"
    assert len(themes) == 3


def test_blank_document_export_refused(monkeypatch, tmp_path, window, pdf_exporter, messages):
    window.editor.setPlainText("   \n")
    save_to(monkeypatch, tmp_path / "x.pdf")
    export_action(window, "pdf").trigger()
    assert pdf_exporter.calls == []
    assert messages.notes[-1][0] == "warning"
    assert "empty" in messages.notes[-1][1]


def test_oversized_document_export_refused(monkeypatch, tmp_path, window, pdf_exporter, messages):
    monkeypatch.setattr("mirrormd.services.ui.main_window.MAX_EXPORT_SIZE", 10)
    window.editor.setPlainText("x" * 11)
    save_to(monkeypatch, tmp_path / "x.pdf")
    export_action(window, "pdf").trigger()
    assert pdf_exporter.calls == []
    assert "too large" in messages.notes[-1][1]


@pytest.mark.parametrize(
    "error, expected",
    [
        (ServerUnreachableError("Network error. Please check your connection."), "server running"),
        (RenderError("PDF rendering failed. Please try again."), "Failed to export PDF"),
    ],
)
def test_pdf_export_failure_notifies_and_restores_action(
    monkeypatch, tmp_path, qapp, renderer, messages, error, expected
):
    failing = RecordingPdfExporter(error=error)
    reg = ExporterRegistryInst()
    reg.register(failing)
    w = make_window(tmp_path, reg, messages)
    w.editor.setPlainText("# x")
    accept_dialog(monkeypatch)
    save_to(monkeypatch, tmp_path / "x.pdf")

    act = export_action(w, "pdf")
    act.trigger()

    assert failing.calls
    level, text = messages.notes[-1]
    assert level == "error"
    assert expected in text
    assert act.isEnabled()
    assert QApplication.overrideCursor() is None


def test_suggested_names(window: MainWindow, tmp_path, exporter_registry):
    html, pdf = exporter_registry.get("html"), exporter_registry.get("pdf")
    assert window._suggested_export_name(pdf) == "document.pdf"
    assert window._suggested_export_name(html) == "document.html"
    window.doc.path = tmp_path / "Notes.markdown"
    assert window._suggested_export_name(pdf) == "Notes.pdf"
    assert window._suggested_export_name(html) == "Notes.html"


# ------------------------------
# Copy HTML / drag and drop
# ------------------------------


def test_copy_html_puts_fragment_on_clipboard(window: MainWindow, messages):
    window.editor.setPlainText("**bold**")
    window.act_copy_html.trigger()
    assert QApplication.clipboard().text() == "<p><strong>bold</strong></p>\n"
    assert messages.notes[-1] == ("info", "HTML copied to clipboard")


def test_drop_rejects_wrong_extension(tmp_path, window: MainWindow, messages):
    p = tmp_path / "image.png"
    p.write_bytes(b"\x89PNG")
    assert window.open_dropped(p) is False
    assert window.doc.path is None
    assert messages.notes[-1][0] == "warning"


def test_drop_rejects_large_file(monkeypatch, tmp_path, window: MainWindow, messages):
    monkeypatch.setattr("mirrormd.services.ui.main_window.MAX_FILE_SIZE", 4)
    p = tmp_path / "big.md"
    p.write_text("12345", encoding="utf-8")
    assert window.open_dropped(p) is False
    assert "too large" in messages.notes[-1][1]


@pytest.mark.parametrize("name", ["a.md", "b.MARKDOWN", "c.txt"])
def test_drop_opens_markdown(tmp_path, window: MainWindow, name):
    p = tmp_path / name
    p.write_text("# dropped", encoding="utf-8")
    assert window.open_dropped(p) is True
    assert window.doc.path == p
    assert "dropped" in window.last_html

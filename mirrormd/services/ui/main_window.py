from __future__ import annotations

import logging
from collections.abc import Callable
from pathlib import Path

from PyQt6.QtCore import QByteArray, Qt
from PyQt6.QtGui import QAction, QKeySequence
from PyQt6.QtWidgets import (
    QApplication,
    QDialog,
    QFileDialog,
    QLabel,
    QMainWindow,
    QMenu,
    QSplitter,
    QStatusBar,
    QTextBrowser,
    QTextEdit,
    QToolBar,
)

from mirrormd.domain.errors import MirrorMDError, ServerUnreachableError
from mirrormd.domain.interfaces import (
    IExporter,
    IExporterRegistry,
    IFileService,
    IMarkdownRenderer,
    ISettingsService,
)
from mirrormd.domain.models import Document
from mirrormd.services.exporters.base import ExporterRegistryInst
from mirrormd.services.pdf.pipeline import derive_pdf_filename
from mirrormd.services.pdf.themes import PdfThemeCatalog
from mirrormd.services.preview_scheduler import (
    DEFAULT_DEBOUNCE_MS,
    DEFAULT_THEME_RENDER_DELAY_MS,
    PreviewScheduler,
)
from mirrormd.services.theme_manager import ThemeManager, UiTheme, chrome_stylesheet
from mirrormd.services.ui.adapters.qt_messages import QtMessageService
from mirrormd.services.ui.export_dialog import ExportDialog, default_title
from mirrormd.services.ui.ports.messages import IMessageService
from mirrormd.utils.constants import (
    MARKDOWN_EXTENSIONS,
    MAX_EXPORT_SIZE,
    MAX_FILE_SIZE,
    MAX_RECENTS,
)

log = logging.getLogger(__name__)

ThemeSource = Callable[[], tuple[list[dict[str, str]], str]]

TAB_TEXT = "  "


def format_stats(doc: Document) -> str:
    return f"{doc.char_count} chars · {doc.word_count} words"


class MarkdownEditor(QTextEdit):
    """Plain-text editor pane; Tab inserts two spaces instead of moving focus."""

    def __init__(self, parent=None) -> None:
        super().__init__(parent)
        self.setAcceptRichText(False)
        self.setTabChangesFocus(False)

    def keyPressEvent(self, e):  # noqa: N802
        if e.key() == Qt.Key.Key_Tab and e.modifiers() == Qt.KeyboardModifier.NoModifier:
            # insertText replaces the selection, if any
            self.textCursor().insertText(TAB_TEXT)
            e.accept()
            return
        super().keyPressEvent(e)


class MainWindow(QMainWindow):
    """Thin PyQt window that delegates work to injected services (DIP)."""

    def __init__(
        self,
        renderer: IMarkdownRenderer,
        file_service: IFileService,
        settings: ISettingsService,
        *,
        theme_manager: ThemeManager | None = None,
        messages: IMessageService | None = None,
        exporter_registry: IExporterRegistry | None = None,
        pdf_theme_source: ThemeSource | None = None,
        debounce_ms: int = DEFAULT_DEBOUNCE_MS,
        theme_render_delay_ms: int = DEFAULT_THEME_RENDER_DELAY_MS,
        use_web_engine: bool = True,
        start_path: Path | None = None,
        app_title: str = "MirrorMD",
    ) -> None:
        super().__init__()
        self.app_title = app_title
        self.setWindowTitle(app_title)
        self.resize(1100, 700)

        self.renderer = renderer
        self.file_service = file_service
        self.settings = settings
        self.themes = theme_manager or ThemeManager(settings, self)
        self.messages: IMessageService = messages or QtMessageService()
        self._exporters = exporter_registry or ExporterRegistryInst()
        self._pdf_theme_source = pdf_theme_source

        self.doc = Document(path=None, text="", modified=False)
        self.recents: list[str] = self.settings.get_recent()
        self.last_html = ""

        # Widgets
        self.editor = MarkdownEditor(self)
        self.preview = self._create_preview_widget(use_web_engine)

        self.splitter = QSplitter(self)
        self.splitter.setOrientation(Qt.Orientation.Horizontal)
        self.splitter.addWidget(self.editor)
        self.splitter.addWidget(self.preview)
        self.splitter.setStretchFactor(0, 1)
        self.splitter.setStretchFactor(1, 1)
        self.setCentralWidget(self.splitter)

        self.scheduler = PreviewScheduler(
            self._render_preview,
            debounce_ms=debounce_ms,
            theme_delay_ms=theme_render_delay_ms,
            parent=self,
        )

        # Signals
        self.editor.textChanged.connect(self._on_text_changed)
        self.themes.themeChanged.connect(self._on_theme_changed)

        # UI
        self._build_actions()
        self._build_toolbar()
        self._build_menu()
        self.setStatusBar(QStatusBar(self))
        self.stats_label = QLabel(format_stats(self.doc), self)
        self.statusBar().addPermanentWidget(self.stats_label)
        self._apply_chrome(self.themes.get_theme())

        # Restore UI state
        geo = self.settings.get_geometry()
        if isinstance(geo, (bytes, bytearray)):
            self.restoreGeometry(QByteArray(geo))
        split = self.settings.get_splitter()
        if isinstance(split, (bytes, bytearray)):
            self.splitter.restoreState(QByteArray(split))

        # Load starting content
        if start_path:
            self._open_path(start_path)
        else:
            self._render_preview()

        # DnD
        self.setAcceptDrops(True)

    # ---------- UI creation ----------
    def _build_actions(self):
        self.exit_action = QAction("&Exit", self)
        self.exit_action.setShortcut("Ctrl+Q")
        self.exit_action.setStatusTip("Exit application")
        self.exit_action.triggered.connect(self.close)

        # File actions
        self.act_new = QAction(
            "New", self, shortcut=QKeySequence.StandardKey.New, triggered=self._new_file
        )
        self.act_open = QAction(
            "Open…",
            self,
            shortcut=QKeySequence.StandardKey.Open,
            triggered=self._open_dialog,
        )
        self.act_save = QAction(
            "Save", self, shortcut=QKeySequence.StandardKey.Save, triggered=self._save
        )
        self.act_save_as = QAction(
            "Save As…",
            self,
            shortcut=QKeySequence.StandardKey.SaveAs,
            triggered=self._save_as,
        )
        self.act_copy_html = QAction(
            "Copy HTML", self, shortcut="Ctrl+Shift+C", triggered=self._copy_html
        )
        self.act_theme = QAction(
            self.themes.get_theme().toggle_label,
            self,
            shortcut="Ctrl+Shift+L",
            triggered=self._toggle_theme,
        )
        self.act_toggle_wrap = QAction(
            "Toggle Wrap",
            self,
            checkable=True,
            checked=True,
            triggered=self._toggle_wrap,
        )
        self.act_toggle_preview = QAction(
            "Toggle Preview",
            self,
            checkable=True,
            checked=True,
            triggered=self._toggle_preview,
        )

        # Export actions from registry
        self.export_actions: list[QAction] = []
        for exporter in self._exporters.all():
            act = QAction(exporter.label, self)
            act.triggered.connect(
                lambda chk=False, e=exporter, a=act: self._export_with(e, a)
            )
            self.export_actions.append(act)

        self.recent_menu = QMenu("Open Recent", self)

    def _build_toolbar(self):
        tb = QToolBar("Main", self)
        tb.setMovable(False)
        for a in (self.act_new, self.act_open, self.act_save, self.act_save_as):
            tb.addAction(a)
        tb.addSeparator()
        for a in self.export_actions:
            tb.addAction(a)
        tb.addAction(self.act_copy_html)
        tb.addSeparator()
        tb.addAction(self.act_theme)
        self.addToolBar(tb)

    def _build_menu(self):
        m = self.menuBar()
        filem = m.addMenu("&File")
        filem.addAction(self.act_new)
        filem.addAction(self.act_open)
        filem.addMenu(self.recent_menu)
        filem.addSeparator()
        filem.addAction(self.act_save)
        filem.addAction(self.act_save_as)
        filem.addSeparator()
        for a in self.export_actions:
            filem.addAction(a)
        filem.addAction(self.act_copy_html)
        filem.addSeparator()
        filem.addAction(self.exit_action)
        self._refresh_recent_menu()

        viewm = m.addMenu("&View")
        viewm.addAction(self.act_theme)
        viewm.addAction(self.act_toggle_wrap)
        viewm.addAction(self.act_toggle_preview)

    def _refresh_recent_menu(self):
        self.recent_menu.clear()
        if not self.recents:
            na = QAction("(empty)", self)
            na.setEnabled(False)
            self.recent_menu.addAction(na)
            return
        for p in self.recents[:MAX_RECENTS]:
            self.recent_menu.addAction(
                QAction(p, self, triggered=lambda chk=False, x=p: self._open_path(Path(x)))
            )

    # ---------- File actions ----------
    def _new_file(self):
        if not self._confirm_discard():
            return
        self._load_document(Document(path=None, text="", modified=False))

    def _open_dialog(self):
        path_str, _ = QFileDialog.getOpenFileName(
            self,
            "Open Markdown",
            "",
            "Markdown (*.md *.markdown *.mdown);;Text (*.txt);;All files (*)",
        )
        if path_str:
            self._open_path(Path(path_str))

    def _open_path(self, path: Path) -> bool:
        if not self._confirm_discard():
            return False
        try:
            text = self.file_service.read_text(path)
        except (OSError, UnicodeDecodeError) as e:
            log.warning("Failed to open %s: %s", path, e)
            self.messages.error(self, "Open Error", f"Failed to open file:\n{e}")
            return False
        self._load_document(Document(path=path, text=text, modified=False))
        self._add_recent(path)
        return True

    def _load_document(self, doc: Document) -> None:
        self.doc = doc
        self.editor.setPlainText(doc.text)
        # setPlainText fires textChanged; a freshly loaded buffer is not dirty
        self.doc.modified = False
        self.scheduler.cancel()
        self._update_title()
        self._render_preview()

    def _save(self):
        if self.doc.path is None:
            self._save_as()
            return
        self._write_to(self.doc.path)

    def _save_as(self):
        start = str(self.doc.path) if self.doc.path else ""
        path_str, _ = QFileDialog.getSaveFileName(
            self, "Save As", start, "Markdown (*.md);;All files (*)"
        )
        if not path_str:
            return
        path = Path(path_str)
        if self._write_to(path):
            self.doc.path = path
            self._update_title()
            self._add_recent(path)

    def _write_to(self, path: Path) -> bool:
        try:
            self.file_service.write_text_atomic(path, self.editor.toPlainText())
        except OSError as e:
            log.warning("Failed to save %s: %s", path, e)
            self.messages.error(self, "Save Error", f"Failed to save file:\n{e}")
            return False
        self.doc.modified = False
        self._update_title()
        self.statusBar().showMessage(f"Saved: {path}", 3000)
        return True

    # ---------- Export ----------
    def _export_with(self, exporter: IExporter, action: QAction | None = None) -> bool:
        text = self.editor.toPlainText()
        if not text.strip():
            self.messages.notify(self, "Nothing to export: the document is empty.", level="warning")
            return False
        if len(text.encode("utf-8")) > MAX_EXPORT_SIZE:
            self.messages.notify(
                self,
                f"Document is too large to export (max {MAX_EXPORT_SIZE // (1024 * 1024)} MB).",
                level="warning",
            )
            return False

        title: str | None = None
        theme: str | None = self.themes.get_theme().value
        if exporter.needs_options:
            themes, default_theme = self._pdf_theme_choices()
            dlg = ExportDialog(
                themes,
                title=default_title(self.doc.path),
                default_theme=default_theme,
                parent=self,
            )
            if dlg.exec() != QDialog.DialogCode.Accepted.value:
                return False
            title, theme = dlg.title(), dlg.theme_id()

        filt = f"{exporter.name.upper()} (*.{exporter.file_ext})"
        out_str, _ = QFileDialog.getSaveFileName(
            self, exporter.label, self._suggested_export_name(exporter), filt
        )
        if not out_str:
            return False
        out = Path(out_str)

        if action is not None:
            action.setEnabled(False)
        self.statusBar().showMessage(f"Exporting {exporter.name.upper()}…")
        QApplication.setOverrideCursor(Qt.CursorShape.WaitCursor)
        try:
            exporter.export(text, out, title=title, theme=theme)
        except ServerUnreachableError as e:
            self.messages.notify(
                self, f"{e} Is the MirrorMD server running?", level="error"
            )
            return False
        except MirrorMDError as e:
            self.messages.notify(
                self, f"Failed to export {exporter.name.upper()}: {e}", level="error"
            )
            return False
        except OSError as e:
            log.warning("Failed to write %s: %s", out, e)
            self.messages.notify(self, f"Failed to write {out.name}: {e}", level="error")
            return False
        finally:
            QApplication.restoreOverrideCursor()
            self.statusBar().clearMessage()
            if action is not None:
                action.setEnabled(True)

        self.statusBar().showMessage(f"Exported {exporter.name.upper()}: {out}", 3000)
        self.messages.notify(self, f"Exported {out.name}", level="info")
        return True

    def _suggested_export_name(self, exporter: IExporter) -> str:
        if exporter.file_ext == "pdf":
            return derive_pdf_filename(self.doc.path.name if self.doc.path else None)
        stem = self.doc.path.stem if self.doc.path else "document"
        return f"{stem}.{exporter.file_ext or exporter.name}"

    def _pdf_theme_choices(self) -> tuple[list[dict[str, str]], str]:
        if self._pdf_theme_source is not None:
            try:
                return self._pdf_theme_source()
            except MirrorMDError as e:
                log.warning("Could not fetch PDF themes from the server: %s", e)
        catalog = PdfThemeCatalog()
        return [t.summary() for t in catalog.all()], catalog.default_id

    def _copy_html(self) -> None:
        QApplication.clipboard().setText(self.renderer.render(self.editor.toPlainText()))
        self.messages.notify(self, "HTML copied to clipboard", level="info")

    # ---------- View ----------
    def _toggle_theme(self) -> None:
        self.themes.toggle()

    def _on_theme_changed(self, theme: UiTheme) -> None:
        self._apply_chrome(theme)
        self.scheduler.notify_theme_changed()

    def _apply_chrome(self, theme: UiTheme) -> None:
        self.setStyleSheet(chrome_stylesheet(theme))
        self.act_theme.setText(theme.toggle_label)
        self.act_theme.setToolTip(f"Switch to {theme.opposite().value} theme")

    def _toggle_wrap(self, on: bool):
        mode = QTextEdit.LineWrapMode.WidgetWidth if on else QTextEdit.LineWrapMode.NoWrap
        self.editor.setLineWrapMode(mode)

    def _toggle_preview(self, on: bool):
        self.preview.setVisible(on)

    # ---------- Helpers ----------
    def _render_preview(self):
        self.doc.text = self.editor.toPlainText()
        self.last_html = self.renderer.to_html(self.doc.text, theme=self.themes.get_theme().value)
        # Both QWebEngineView and QTextBrowser implement setHtml(html).
        self.preview.setHtml(self.last_html)
        self.stats_label.setText(format_stats(self.doc))

    def _on_text_changed(self):
        self.doc.modified = True
        self._update_title()
        self.scheduler.notify_input()

    def _update_title(self):
        name = self.doc.display_name or "Untitled"
        star = " •" if self.doc.modified else ""
        self.setWindowTitle(f"{name}{star} — {self.app_title}")

    def _confirm_discard(self) -> bool:
        if not self.doc.modified:
            return True
        return self.messages.ask(self, "Discard changes?", "You have unsaved changes. Discard them?")

    def _add_recent(self, path: Path):
        s = str(path)
        if s in self.recents:
            self.recents.remove(s)
        self.recents.insert(0, s)
        self.recents = self.recents[:MAX_RECENTS]
        self.settings.set_recent(self.recents)
        self._refresh_recent_menu()

    # ---------- DnD ----------
    @staticmethod
    def drop_rejection(path: Path) -> str | None:
        """Reason a dropped file cannot be opened, or None when it is acceptable."""
        if path.suffix.lower() not in MARKDOWN_EXTENSIONS:
            return "Please drop a Markdown file (.md, .markdown or .txt)."
        try:
            size = path.stat().st_size
        except OSError as e:
            return f"Cannot read {path.name}: {e}"
        if size > MAX_FILE_SIZE:
            return f"File is too large (max {MAX_FILE_SIZE // (1024 * 1024)} MB)."
        return None

    def dragEnterEvent(self, e):  # noqa: N802
        if e.mimeData().hasUrls():
            e.acceptProposedAction()

    def dropEvent(self, e):  # noqa: N802
        urls = e.mimeData().urls()
        if not urls:
            return
        local = urls[0].toLocalFile()
        if local:
            self.open_dropped(Path(local))

    def open_dropped(self, path: Path) -> bool:
        reason = self.drop_rejection(path)
        if reason is not None:
            self.messages.notify(self, reason, level="warning")
            return False
        return self._open_path(path)

    # ---------- Close ----------
    def closeEvent(self, event):  # noqa: N802
        self.scheduler.cancel()
        self.settings.set_geometry(bytes(self.saveGeometry()))
        self.settings.set_splitter(bytes(self.splitter.saveState()))
        super().closeEvent(event)

    # ---------- Internal: preview creation ----------
    def _create_preview_widget(self, use_web_engine: bool):
        """
        Prefer QWebEngineView (full CSS support) and fall back to QTextBrowser when
        PyQt6-WebEngine is not installed.
        """
        if use_web_engine:
            try:
                from PyQt6.QtWebEngineWidgets import QWebEngineView  # type: ignore

                return QWebEngineView(self)
            except ImportError as e:
                log.info("QWebEngineView unavailable (%s); using QTextBrowser preview", e)
        w = QTextBrowser(self)
        w.setOpenExternalLinks(True)
        return w

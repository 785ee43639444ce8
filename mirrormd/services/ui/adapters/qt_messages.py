from __future__ import annotations

from typing import Any

from PyQt6.QtWidgets import QMessageBox

from mirrormd.services.ui.ports.messages import IMessageService, Question
from mirrormd.services.ui.toast import Toast


class QtMessageService(IMessageService):
    """Qt-backed implementation for message dialogs and toasts."""

    def __init__(self, *, toast_timeout_ms: int = 6000) -> None:
        self.toast_timeout_ms = toast_timeout_ms
        self.last_toast: Toast | None = None

    def info(self, parent: Any | None, title: str, text: str) -> None:
        QMessageBox.information(parent, title, text)

    def warning(self, parent: Any | None, title: str, text: str) -> None:
        QMessageBox.warning(parent, title, text)

    def error(self, parent: Any | None, title: str, text: str) -> None:
        QMessageBox.critical(parent, title, text)

    def notify(self, parent: Any, text: str, *, level: str = "info") -> None:
        toast = Toast(parent, text, level=level, timeout_ms=self.toast_timeout_ms)
        toast.show_toast()
        self.last_toast = toast

    def ask(
        self,
        parent: Any | None,
        title: str,
        text: str,
        kind: Question = Question.YES_NO,
    ) -> bool:
        resp = QMessageBox.question(
            parent,
            title,
            text,
            QMessageBox.StandardButton.Yes | QMessageBox.StandardButton.No,
        )
        return resp == QMessageBox.StandardButton.Yes

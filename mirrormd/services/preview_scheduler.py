from __future__ import annotations

from collections.abc import Callable
from enum import Enum, auto

from PyQt6.QtCore import QObject, QTimer

DEFAULT_DEBOUNCE_MS = 150
DEFAULT_THEME_RENDER_DELAY_MS = 100


class SchedulerState(Enum):
    IDLE = auto()
    PENDING = auto()


class PreviewScheduler(QObject):
    """
    Trailing-edge debounce between editor input and preview rendering.

        idle    --input-->   pending   (timer started)
        pending --input-->   pending   (timer restarted)
        pending --timeout--> idle      (one render)

    A theme change cancels any pending input render and forces one render
    after a short delay, so the new stylesheet is applied first.
    """

    def __init__(
        self,
        render: Callable[[], None],
        *,
        debounce_ms: int = DEFAULT_DEBOUNCE_MS,
        theme_delay_ms: int = DEFAULT_THEME_RENDER_DELAY_MS,
        parent: QObject | None = None,
    ) -> None:
        super().__init__(parent)
        self._render = render
        self.render_count = 0

        self._debounce = QTimer(self)
        self._debounce.setSingleShot(True)
        self._debounce.setInterval(max(0, debounce_ms))
        self._debounce.timeout.connect(self._fire)

        self._theme_timer = QTimer(self)
        self._theme_timer.setSingleShot(True)
        self._theme_timer.setInterval(max(0, theme_delay_ms))
        self._theme_timer.timeout.connect(self._fire)

    @property
    def state(self) -> SchedulerState:
        if self._debounce.isActive() or self._theme_timer.isActive():
            return SchedulerState.PENDING
        return SchedulerState.IDLE

    @property
    def debounce_ms(self) -> int:
        return self._debounce.interval()

    def notify_input(self) -> None:
        # QTimer.start() on an active timer restarts it
        self._debounce.start()

    def notify_theme_changed(self) -> None:
        self._debounce.stop()
        self._theme_timer.start()

    def flush(self) -> None:
        if self.state is SchedulerState.PENDING:
            self._fire()

    def cancel(self) -> None:
        self._debounce.stop()
        self._theme_timer.stop()

    def _fire(self) -> None:
        self.cancel()
        self.render_count += 1
        self._render()

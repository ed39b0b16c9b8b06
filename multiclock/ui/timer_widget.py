"""Countdown screen — renders ``Tick`` cues.

Layout (top → bottom):
    - Phase label (coloured per phase)
    - Remaining seconds (large)
    - Series line ("Series: 2 / 5", "Get Ready!", "Final Stretch")
    - PAUSE/RESUME and STOP buttons
"""

from __future__ import annotations

from PyQt6.QtCore import Qt, pyqtSignal
from PyQt6.QtWidgets import (
    QWidget, QVBoxLayout, QHBoxLayout, QLabel, QPushButton, QFrame,
)

from ..timer.cues import CueEvent, Tick
from ..timer.engine import SchedulerState, TickScheduler
from ..timer.sequencer import Phase
from .styles import PHASE_COLORS, pause_button_style


def describe_series(tick: Tick) -> str:
    if tick.phase is Phase.PREP:
        return "Get Ready!"
    if tick.phase is Phase.COOLDOWN:
        return "Final Stretch"
    if tick.phase is Phase.FINISHED:
        return "Great Job!"
    return f"Series: {tick.current_serie} / {tick.series}"


class TimerWidget(QWidget):
    """The countdown card shown while a workout runs."""

    stop_requested = pyqtSignal()

    def __init__(self, scheduler: TickScheduler, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self._scheduler = scheduler
        self._build_ui()
        self._connect_signals()
        self._apply_pause_look(False)

    # ── build ─────────────────────────────────────────────────────────────

    def _build_ui(self) -> None:
        root = QVBoxLayout(self)
        root.setContentsMargins(0, 0, 0, 0)

        card = QFrame(self)
        card.setObjectName("card")
        root.addWidget(card)

        layout = QVBoxLayout(card)
        layout.setContentsMargins(32, 24, 32, 28)
        layout.setSpacing(8)
        layout.setAlignment(Qt.AlignmentFlag.AlignCenter)

        self._phase_label = QLabel("", card)
        self._phase_label.setObjectName("phaseLabel")
        self._phase_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        layout.addWidget(self._phase_label)

        self._time_display = QLabel("", card)
        self._time_display.setObjectName("timeDisplay")
        self._time_display.setAlignment(Qt.AlignmentFlag.AlignCenter)
        layout.addWidget(self._time_display)

        self._series_display = QLabel("", card)
        self._series_display.setObjectName("seriesDisplay")
        self._series_display.setAlignment(Qt.AlignmentFlag.AlignCenter)
        layout.addWidget(self._series_display)

        layout.addSpacing(24)

        btn_row = QHBoxLayout()
        btn_row.setSpacing(12)
        btn_row.setAlignment(Qt.AlignmentFlag.AlignCenter)

        self._pause_btn = QPushButton("PAUSE", card)
        self._stop_btn = QPushButton("STOP", card)
        self._stop_btn.setObjectName("dangerButton")

        btn_row.addWidget(self._pause_btn)
        btn_row.addWidget(self._stop_btn)
        layout.addLayout(btn_row)

    # ── signals ───────────────────────────────────────────────────────────

    def _connect_signals(self) -> None:
        self._pause_btn.clicked.connect(self._scheduler.toggle_pause)
        self._stop_btn.clicked.connect(self.stop_requested)
        self._scheduler.cue.connect(self.render_cue)
        self._scheduler.state_changed.connect(self._on_state_changed)

    # ── slots ─────────────────────────────────────────────────────────────

    def render_cue(self, event: CueEvent) -> None:
        if not isinstance(event, Tick):
            return
        color = PHASE_COLORS.get(event.phase, "#ffffff")
        self._phase_label.setText(event.phase.value)
        self._phase_label.setStyleSheet(f"color: {color};")
        self._series_display.setText(describe_series(event))
        if event.phase is Phase.FINISHED:
            self._time_display.setText("DONE")
            self._pause_btn.setVisible(False)
        else:
            self._time_display.setText(str(event.remaining_seconds))
            self._pause_btn.setVisible(True)

    def _on_state_changed(self, state: SchedulerState) -> None:
        if state in (SchedulerState.RUNNING, SchedulerState.PAUSED):
            self._apply_pause_look(state == SchedulerState.PAUSED)

    def _apply_pause_look(self, paused: bool) -> None:
        self._pause_btn.setText("RESUME" if paused else "PAUSE")
        self._pause_btn.setStyleSheet(pause_button_style(paused))

    # ── accessors (used by the window and tests) ──────────────────────────

    @property
    def phase_text(self) -> str:
        return self._phase_label.text()

    @property
    def time_text(self) -> str:
        return self._time_display.text()

    @property
    def series_text(self) -> str:
        return self._series_display.text()

    @property
    def pause_button_text(self) -> str:
        return self._pause_btn.text()

"""Main application window for MultiClock."""

from __future__ import annotations

import logging

from PyQt6.QtCore import Qt, QTimer
from PyQt6.QtGui import QAction, QKeySequence
from PyQt6.QtWidgets import (
    QMainWindow, QWidget, QVBoxLayout, QStackedWidget,
    QStatusBar, QMessageBox,
)

from .audio.sounds import CuePlayer, SoundManager
from .power.wakelock import NullWakeLock, WakeLock, default_wake_lock
from .settings import Settings, load_settings, save_settings
from .timer.engine import SchedulerState, TickScheduler
from .timer.errors import InvalidConfigError
from .timer.sequencer import WorkoutConfig
from .ui.settings_dialog import SettingsDialog
from .ui.setup_widget import SetupWidget
from .ui.styles import build_stylesheet
from .ui.timer_widget import TimerWidget


log = logging.getLogger("multiclock.app")

GEOMETRY_SAVE_DELAY_MS = 500

STATUS_MESSAGES: dict[SchedulerState, str] = {
    SchedulerState.IDLE:     "Set up your workout",
    SchedulerState.RUNNING:  "Go!",
    SchedulerState.PAUSED:   "Paused",
    SchedulerState.FINISHED: "Workout complete",
    SchedulerState.STOPPED:  "Workout stopped",
}


class MultiClockApp(QMainWindow):
    """Main application window: setup screen ⇄ countdown screen."""

    def __init__(
        self,
        *,
        settings: Settings | None = None,
        wake_lock: WakeLock | None = None,
        sound_manager: SoundManager | None = None,
    ) -> None:
        super().__init__()
        self.setWindowTitle("MultiClock")
        self.setMinimumSize(380, 560)

        # ── geometry save timer ───────────────────────────────────────
        # debounced: restarted on every move/resize
        self._geometry_save_timer = QTimer(self)
        self._geometry_save_timer.setSingleShot(True)
        self._geometry_save_timer.setInterval(GEOMETRY_SAVE_DELAY_MS)
        self._geometry_save_timer.timeout.connect(self._remember_geometry)

        # ── settings ──────────────────────────────────────────────────
        self._settings: Settings = settings or load_settings()

        # ── scheduler ─────────────────────────────────────────────────
        self._wake_lock_stale = False
        if wake_lock is None:
            wake_lock = self._make_wake_lock()
        self._scheduler = TickScheduler(self, wake_lock=wake_lock)

        # ── sound ─────────────────────────────────────────────────────
        self._sound_manager = sound_manager or SoundManager(parent=self)
        self._sound_manager.set_volume(self._settings.sound_volume)
        self._sound_manager.set_enabled(self._settings.sound_enabled)
        self._cue_player = CuePlayer(self._sound_manager, self)

        self.setStyleSheet(build_stylesheet())

        # ── central widget ────────────────────────────────────────────
        central = QWidget()
        self.setCentralWidget(central)
        root_layout = QVBoxLayout(central)
        root_layout.setContentsMargins(16, 12, 16, 12)

        self._stack = QStackedWidget(central)
        root_layout.addWidget(self._stack)

        self._setup_widget = SetupWidget(
            self._settings.workout_config(), self._stack,
        )
        self._timer_widget = TimerWidget(self._scheduler, self._stack)
        self._stack.addWidget(self._setup_widget)
        self._stack.addWidget(self._timer_widget)

        self._status_bar = QStatusBar(self)
        self.setStatusBar(self._status_bar)
        self._status_bar.showMessage(STATUS_MESSAGES[SchedulerState.IDLE])

        # ── wire signals ──────────────────────────────────────────────
        self._setup_widget.start_requested.connect(self.start_workout)
        self._timer_widget.stop_requested.connect(self.stop_workout)
        self._scheduler.cue.connect(self._cue_player.play_cue)
        self._scheduler.state_changed.connect(self._on_state_changed)

        # ── menu + shortcuts ──────────────────────────────────────────
        self._build_menu_bar()

        self._restore_geometry()
        if self._settings.always_on_top:
            self.setWindowFlag(Qt.WindowType.WindowStaysOnTopHint, True)

    # ══════════════════════════════════════════════════════════════════
    #  WORKOUT CONTROL
    # ══════════════════════════════════════════════════════════════════

    @property
    def scheduler(self) -> TickScheduler:
        return self._scheduler

    @property
    def showing_timer(self) -> bool:
        return self._stack.currentWidget() is self._timer_widget

    def start_workout(self, config: WorkoutConfig) -> None:
        try:
            config.validate()
        except InvalidConfigError as exc:
            log.warning("Rejected workout: %s", exc)
            QMessageBox.warning(self, "Invalid workout", str(exc))
            return

        self._settings.remember_workout(config)
        save_settings(self._settings)

        if self._wake_lock_stale:
            self._scheduler.set_wake_lock(self._make_wake_lock())
            self._wake_lock_stale = False

        self._cue_player.cancel_pending()
        self._stack.setCurrentWidget(self._timer_widget)
        self._scheduler.start(config)

    def stop_workout(self) -> None:
        self._scheduler.stop()
        self._cue_player.cancel_pending()
        self._stack.setCurrentWidget(self._setup_widget)

    def toggle_pause(self) -> None:
        if self.showing_timer:
            self._scheduler.toggle_pause()

    def _on_state_changed(self, state: SchedulerState) -> None:
        self._status_bar.showMessage(STATUS_MESSAGES.get(state, ""))

    def _make_wake_lock(self) -> WakeLock:
        if self._settings.keep_screen_awake:
            return default_wake_lock()
        return NullWakeLock()

    # ══════════════════════════════════════════════════════════════════
    #  MENU BAR
    # ══════════════════════════════════════════════════════════════════

    def _build_menu_bar(self) -> None:
        menu_bar = self.menuBar()

        workout_menu = menu_bar.addMenu("Workout")

        pause_action = QAction("Pause / Resume", self)
        pause_action.setShortcut(QKeySequence(Qt.Key.Key_Space))
        pause_action.triggered.connect(self.toggle_pause)
        workout_menu.addAction(pause_action)

        stop_action = QAction("Stop", self)
        stop_action.setShortcut(QKeySequence(Qt.Key.Key_Escape))
        stop_action.triggered.connect(self._on_escape)
        workout_menu.addAction(stop_action)

        view_menu = menu_bar.addMenu("View")

        self._sound_action = QAction("Sound", self)
        self._sound_action.setCheckable(True)
        self._sound_action.setChecked(self._settings.sound_enabled)
        self._sound_action.toggled.connect(self._set_sound_enabled)
        view_menu.addAction(self._sound_action)

        self._aot_action = QAction("Always on Top", self)
        self._aot_action.setCheckable(True)
        self._aot_action.setChecked(self._settings.always_on_top)
        self._aot_action.toggled.connect(self._set_always_on_top)
        view_menu.addAction(self._aot_action)

        prefs_action = QAction("Preferences\u2026", self)
        prefs_action.setShortcut(QKeySequence.StandardKey.Preferences)
        prefs_action.setMenuRole(QAction.MenuRole.PreferencesRole)
        prefs_action.triggered.connect(self._open_settings)
        view_menu.addAction(prefs_action)

    def _on_escape(self) -> None:
        """Stop the workout (no-op on the setup screen)."""
        if self.showing_timer:
            self.stop_workout()

    def _set_sound_enabled(self, enabled: bool) -> None:
        self._settings.sound_enabled = enabled
        self._sound_manager.set_enabled(enabled)
        save_settings(self._settings)

    def _open_settings(self) -> None:
        def _preview_beep():
            self._sound_manager.set_volume(self._settings.sound_volume)
            self._sound_manager.set_enabled(self._settings.sound_enabled)
            self._sound_manager.play("phase_end")

        dlg = SettingsDialog(
            self._settings, self, sound_preview_callback=_preview_beep,
        )
        dlg.exec()
        self._apply_settings()

    def _apply_settings(self) -> None:
        """Push the current settings into the sound manager and wake lock."""
        s = self._settings
        self._sound_manager.set_volume(s.sound_volume)
        self._sound_manager.set_enabled(s.sound_enabled)
        self._sound_action.blockSignals(True)
        self._sound_action.setChecked(s.sound_enabled)
        self._sound_action.blockSignals(False)
        # takes effect on the next start_workout
        self._wake_lock_stale = True

    # ══════════════════════════════════════════════════════════════════
    #  WINDOW STATE (geometry, always-on-top)
    # ══════════════════════════════════════════════════════════════════

    def _restore_geometry(self) -> None:
        s = self._settings
        self.resize(max(s.window_width, 380), max(s.window_height, 560))
        if s.window_x is not None and s.window_y is not None:
            self.move(s.window_x, s.window_y)

    def _remember_geometry(self) -> None:
        """Write the window's position and size into settings.json."""
        if not self.isVisible():
            return
        s = self._settings
        s.window_x, s.window_y = self.x(), self.y()
        s.window_width, s.window_height = self.width(), self.height()
        save_settings(s)

    def _set_always_on_top(self, on_top: bool) -> None:
        self._settings.always_on_top = on_top
        save_settings(self._settings)
        was_visible = self.isVisible()
        self.setWindowFlag(Qt.WindowType.WindowStaysOnTopHint, on_top)
        # changing window flags hides the window
        if was_visible:
            self.show()

    # ══════════════════════════════════════════════════════════════════
    #  WINDOW EVENTS
    # ══════════════════════════════════════════════════════════════════

    def closeEvent(self, event) -> None:  # type: ignore[override]
        """Release the wake lock and timers before the window goes away."""
        self._geometry_save_timer.stop()
        self._remember_geometry()
        self._scheduler.stop()
        self._cue_player.cancel_pending()
        event.accept()

    def resizeEvent(self, event) -> None:  # type: ignore[override]
        super().resizeEvent(event)
        self._geometry_save_timer.start()

    def moveEvent(self, event) -> None:  # type: ignore[override]
        super().moveEvent(event)
        self._geometry_save_timer.start()

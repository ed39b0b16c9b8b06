"""Tests for the setup screen, countdown screen, and main window."""

import pytest
from PyQt6.QtWidgets import QMessageBox

from multiclock.app import MultiClockApp
from multiclock.power.wakelock import NullWakeLock
from multiclock.settings import Settings, load_settings
from multiclock.timer.cues import PhaseEndBeep, Tick
from multiclock.timer.engine import SchedulerState, TickScheduler
from multiclock.timer.sequencer import Phase, WorkoutConfig
from multiclock.ui.settings_dialog import SettingsDialog
from multiclock.ui.setup_widget import SetupWidget, format_duration
from multiclock.ui.styles import PHASE_COLORS
from multiclock.ui.timer_widget import TimerWidget, describe_series

from helpers import FakeSounds, FakeWakeLock, SignalCollector, run_to_end


# ═══════════════════════════════════════════════════════════════════════
#  SETUP SCREEN
# ═══════════════════════════════════════════════════════════════════════


@pytest.mark.usefixtures("qapp")
class TestSetupWidget:
    def test_prefilled_from_config(self):
        w = SetupWidget(WorkoutConfig(series=3, work_seconds=40,
                                      rest_seconds=15, cooldown_seconds=60))
        assert w.value("series") == 3
        assert w.value("work") == 40
        assert w.value("rest") == 15
        assert w.value("cooldown") == 60

    def test_change_value_clamps_at_zero(self):
        w = SetupWidget(WorkoutConfig(rest_seconds=5))
        w.change_value("rest", -5)
        w.change_value("rest", -5)
        assert w.value("rest") == 0

    def test_series_never_below_one(self):
        w = SetupWidget(WorkoutConfig(series=1))
        w.change_value("series", -1)
        assert w.value("series") == 1

    def test_config_reflects_values(self):
        w = SetupWidget(WorkoutConfig())
        w.change_value("series", 2)
        w.change_value("work", 5)
        config = w.config()
        assert config.series == 7
        assert config.work_seconds == 35

    def test_total_label(self):
        w = SetupWidget(WorkoutConfig(series=3, work_seconds=30,
                                      rest_seconds=10, cooldown_seconds=0))
        assert w._total_label.text().startswith(format_duration(115))
        assert "6 phases" in w._total_label.text()

    def test_total_label_counts_zero_work(self):
        w = SetupWidget(WorkoutConfig(series=2, work_seconds=0,
                                      rest_seconds=0, cooldown_seconds=0))
        assert w._total_label.text().startswith(format_duration(7))

    def test_start_requested(self):
        w = SetupWidget(WorkoutConfig(series=2))
        c = SignalCollector()
        w.start_requested.connect(c)
        w._start_btn.click()
        assert c.last == w.config()

    def test_set_config(self):
        w = SetupWidget()
        w.set_config(WorkoutConfig(series=9, work_seconds=10))
        assert w.value("series") == 9
        assert w.value("work") == 10

    def test_format_duration(self):
        assert format_duration(115) == "1:55"
        assert format_duration(5) == "0:05"


# ═══════════════════════════════════════════════════════════════════════
#  COUNTDOWN SCREEN
# ═══════════════════════════════════════════════════════════════════════


class TestDescribeSeries:
    def test_prep(self):
        assert describe_series(Tick(Phase.PREP, 5, 1, 3)) == "Get Ready!"

    def test_cooldown(self):
        assert describe_series(Tick(Phase.COOLDOWN, 5, 3, 3)) == "Final Stretch"

    def test_work_and_rest(self):
        assert describe_series(Tick(Phase.WORK, 5, 2, 3)) == "Series: 2 / 3"
        assert describe_series(Tick(Phase.REST, 5, 2, 3)) == "Series: 2 / 3"


@pytest.fixture
def timer_widget(qapp):
    sched = TickScheduler(wake_lock=FakeWakeLock())
    widget = TimerWidget(sched)
    yield widget, sched
    sched.stop()


class TestTimerWidget:
    def test_renders_initial_tick(self, timer_widget):
        widget, sched = timer_widget
        sched.start(WorkoutConfig(series=3))
        assert widget.phase_text == "PREP"
        assert widget.time_text == "5"
        assert widget.series_text == "Get Ready!"
        assert PHASE_COLORS[Phase.PREP] in widget._phase_label.styleSheet()

    def test_renders_work(self, timer_widget):
        widget, sched = timer_widget
        sched.start(WorkoutConfig(series=3, work_seconds=30))
        for _ in range(5):
            sched.on_tick()
        assert widget.phase_text == "WORK"
        assert widget.time_text == "30"
        assert widget.series_text == "Series: 1 / 3"

    def test_ignores_non_tick_cues(self, timer_widget):
        widget, sched = timer_widget
        sched.start(WorkoutConfig())
        widget.render_cue(PhaseEndBeep())
        assert widget.time_text == "5"

    def test_pause_button_text_follows_state(self, timer_widget):
        widget, sched = timer_widget
        sched.start(WorkoutConfig())
        assert widget.pause_button_text == "PAUSE"
        widget._pause_btn.click()
        assert sched.is_paused
        assert widget.pause_button_text == "RESUME"
        widget._pause_btn.click()
        assert sched.is_running
        assert widget.pause_button_text == "PAUSE"

    def test_finished_screen(self, timer_widget):
        widget, sched = timer_widget
        sched.start(WorkoutConfig(series=1, work_seconds=1, rest_seconds=0))
        run_to_end(sched)
        assert widget.phase_text == "FINISHED"
        assert widget.time_text == "DONE"
        assert widget.series_text == "Great Job!"
        assert widget._pause_btn.isHidden()

    def test_stop_button_requests_stop(self, timer_widget):
        widget, _sched = timer_widget
        c = SignalCollector()
        widget.stop_requested.connect(c)
        widget._stop_btn.click()
        assert len(c) == 1


# ═══════════════════════════════════════════════════════════════════════
#  MAIN WINDOW
# ═══════════════════════════════════════════════════════════════════════


@pytest.fixture
def window(qapp):
    win = MultiClockApp(
        settings=Settings(series=2, work=10, rest=5, cooldown=0),
        wake_lock=FakeWakeLock(),
        sound_manager=FakeSounds(),
    )
    yield win
    win.scheduler.stop()
    win.deleteLater()


class TestMainWindow:
    def test_starts_on_setup_screen(self, window):
        assert not window.showing_timer
        assert window.scheduler.state == SchedulerState.IDLE

    def test_setup_prefilled_from_settings(self, window):
        assert window._setup_widget.config() == WorkoutConfig(
            series=2, work_seconds=10, rest_seconds=5, cooldown_seconds=0,
        )

    def test_start_switches_to_timer(self, window):
        window.start_workout(WorkoutConfig(series=4, work_seconds=20))
        assert window.showing_timer
        assert window.scheduler.state == SchedulerState.RUNNING
        assert window._timer_widget.phase_text == "PREP"

    def test_start_remembers_workout(self, window):
        window.start_workout(WorkoutConfig(series=4, work_seconds=20,
                                           rest_seconds=0, cooldown_seconds=30))
        saved = load_settings()
        assert (saved.series, saved.work, saved.rest, saved.cooldown) == (4, 20, 0, 30)

    def test_invalid_workout_shows_warning(self, window, monkeypatch):
        shown: list[str] = []
        monkeypatch.setattr(
            QMessageBox, "warning",
            staticmethod(lambda parent, title, text: shown.append(text)),
        )
        window.start_workout(WorkoutConfig(series=0))
        assert len(shown) == 1
        assert not window.showing_timer
        assert window.scheduler.state == SchedulerState.IDLE

    def test_stop_returns_to_setup(self, window):
        window.start_workout(WorkoutConfig())
        window.stop_workout()
        assert not window.showing_timer
        assert window.scheduler.state == SchedulerState.STOPPED
        assert window._scheduler._wake_lock.release_calls == 1

    def test_cues_reach_sound_sink(self, window):
        window.start_workout(WorkoutConfig(series=1, work_seconds=3, rest_seconds=0))
        for _ in range(5):
            window.scheduler.on_tick()
        played = window._sound_manager.played
        assert played == ["countdown_prep"] * 3 + ["phase_end"]

    def test_toggle_pause_only_on_timer_screen(self, window):
        window.toggle_pause()
        assert window.scheduler.state == SchedulerState.IDLE
        window.start_workout(WorkoutConfig())
        window.toggle_pause()
        assert window.scheduler.is_paused

    def test_status_bar_follows_state(self, window):
        window.start_workout(WorkoutConfig())
        window.toggle_pause()
        assert window._status_bar.currentMessage() == "Paused"

    def test_sound_toggle_persists(self, window):
        window._sound_action.setChecked(False)
        assert window._sound_manager.enabled is False
        assert load_settings().sound_enabled is False

    def test_restart_after_finish(self, window):
        window.start_workout(WorkoutConfig(series=1, work_seconds=1, rest_seconds=0))
        run_to_end(window.scheduler)
        window.stop_workout()
        window.start_workout(WorkoutConfig(series=1, work_seconds=2, rest_seconds=0))
        assert window.scheduler.state == SchedulerState.RUNNING

    def test_apply_settings_updates_sound_and_menu(self, window):
        window._settings.sound_enabled = False
        window._settings.sound_volume = 30
        window._apply_settings()
        assert window._sound_manager.enabled is False
        assert window._sound_manager.volume == 30
        assert not window._sound_action.isChecked()

    def test_wake_lock_rebuilt_after_preferences(self, window):
        old_lock = window.scheduler._wake_lock
        window._settings.keep_screen_awake = False
        window._apply_settings()
        window.start_workout(WorkoutConfig())
        assert isinstance(window.scheduler._wake_lock, NullWakeLock)
        assert old_lock.acquire_calls == 0


# ═══════════════════════════════════════════════════════════════════════
#  PREFERENCES DIALOG
# ═══════════════════════════════════════════════════════════════════════


@pytest.mark.usefixtures("qapp")
class TestSettingsDialog:
    def test_populates_from_settings(self):
        s = Settings(sound_enabled=False, sound_volume=40, keep_screen_awake=False)
        dlg = SettingsDialog(s)
        assert not dlg._sound_cb.isChecked()
        assert dlg._vol_slider.value() == 40
        assert dlg._vol_label.text() == "40%"
        assert not dlg._awake_cb.isChecked()

    def test_populate_does_not_overwrite_settings(self):
        s = Settings(sound_enabled=False, keep_screen_awake=True)
        SettingsDialog(s)
        assert s.sound_enabled is False
        assert s.keep_screen_awake is True

    def test_toggle_saves_immediately(self):
        dlg = SettingsDialog(Settings())
        dlg._awake_cb.setChecked(False)
        assert dlg.settings.keep_screen_awake is False
        assert load_settings().keep_screen_awake is False

    def test_volume_saves_immediately(self):
        dlg = SettingsDialog(Settings())
        dlg._vol_slider.setValue(25)
        assert dlg._vol_label.text() == "25%"
        assert load_settings().sound_volume == 25

    def test_slider_release_plays_preview(self):
        previews: list[bool] = []
        dlg = SettingsDialog(
            Settings(), sound_preview_callback=lambda: previews.append(True),
        )
        dlg._vol_slider.sliderReleased.emit()
        assert previews == [True]

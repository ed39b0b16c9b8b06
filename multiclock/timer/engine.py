"""Tick-driven scheduler for interval workouts.

States
------
IDLE          Nothing started yet.
RUNNING       Counting down the current phase.
PAUSED        Ticks still arrive but are ignored.
FINISHED      The last phase ran out; the finish fanfare was emitted.
STOPPED       The user aborted the run.

Transitions
-----------
IDLE | FINISHED | STOPPED → RUNNING      (start)
RUNNING → PAUSED                          (pause)
PAUSED → RUNNING                          (resume)
RUNNING → FINISHED                        (last countdown reaches 0)
RUNNING | PAUSED | FINISHED → STOPPED     (stop)

Every tick produces its cues first and one ``Tick`` last.  The one-second
``QTimer`` keeps running while paused, so resuming never replays the
seconds that went by.
"""

from __future__ import annotations

import dataclasses
import logging
import threading
from dataclasses import dataclass
from enum import Enum

from PyQt6.QtCore import (
    QMetaObject, QObject, QThread, QTimer, Qt, pyqtSignal,
)

from ..power.wakelock import NullWakeLock, WakeLock
from .cues import (
    COUNTDOWN_FROM,
    CountdownBeep,
    CueEvent,
    FinishFanfare,
    PhaseEndBeep,
    Tick,
    countdown_pitch,
)
from .errors import InvalidStateTransitionError
from .sequencer import Phase, WorkoutConfig, advance


log = logging.getLogger("multiclock.timer")


# ── enums ─────────────────────────────────────────────────────────────────


class SchedulerState(Enum):
    IDLE = "idle"
    RUNNING = "running"
    PAUSED = "paused"
    FINISHED = "finished"
    STOPPED = "stopped"


# ── constants ─────────────────────────────────────────────────────────────

TICK_INTERVAL_MS = 1000

_ACTIVE_STATES = (SchedulerState.RUNNING, SchedulerState.PAUSED)


# ── run state ─────────────────────────────────────────────────────────────


@dataclass
class RunState:
    """Mutable position within one run.  Owned by a single scheduler."""

    phase: Phase
    current_serie: int
    remaining_seconds: int
    paused: bool = False


# ── scheduler ─────────────────────────────────────────────────────────────


class TickScheduler(QObject):
    """Qt-based interval workout scheduler.

    Signals
    -------
    cue(event: CueEvent)
        Every ``Tick``, ``CountdownBeep``, ``PhaseEndBeep`` and
        ``FinishFanfare``, in emission order.
    state_changed(new_state: SchedulerState)
        Emitted on every scheduler state transition.
    finished()
        Emitted once when a run completes naturally, after its cues.
    """

    cue = pyqtSignal(object)
    state_changed = pyqtSignal(object)
    finished = pyqtSignal()

    def __init__(
        self,
        parent: QObject | None = None,
        *,
        wake_lock: WakeLock | None = None,
        interval_ms: int = TICK_INTERVAL_MS,
    ) -> None:
        super().__init__(parent)

        self._wake_lock: WakeLock = wake_lock or NullWakeLock()
        self._wake_lock_held: bool = False

        # ── run state ─────────────────────────────────────────────────
        self._state: SchedulerState = SchedulerState.IDLE
        self._config: WorkoutConfig | None = None
        self._run: RunState | None = None
        self._elapsed: int = 0

        # ── serialisation ─────────────────────────────────────────────
        self._lock = threading.RLock()
        self._ticking: bool = False

        # ── Qt timer ──────────────────────────────────────────────────
        self._qt_timer = QTimer(self)
        self._qt_timer.setInterval(interval_ms)
        self._qt_timer.timeout.connect(self.on_tick)

    # ══════════════════════════════════════════════════════════════════
    #  PUBLIC PROPERTIES
    # ══════════════════════════════════════════════════════════════════

    @property
    def state(self) -> SchedulerState:
        return self._state

    @property
    def config(self) -> WorkoutConfig | None:
        return self._config

    @property
    def run_state(self) -> RunState | None:
        """A copy of the current run state, or None when there is no run."""
        with self._lock:
            if self._run is None:
                return None
            return dataclasses.replace(self._run)

    @property
    def phase(self) -> Phase | None:
        run = self._run
        return run.phase if run is not None else None

    @property
    def remaining(self) -> int:
        run = self._run
        return run.remaining_seconds if run is not None else 0

    @property
    def current_serie(self) -> int:
        run = self._run
        return run.current_serie if run is not None else 0

    @property
    def is_running(self) -> bool:
        """True when actively counting down (not paused)."""
        return self._state == SchedulerState.RUNNING

    @property
    def is_paused(self) -> bool:
        return self._state == SchedulerState.PAUSED

    @property
    def elapsed_seconds(self) -> int:
        """Ticks that moved the clock in the current run."""
        return self._elapsed

    @property
    def percent_complete(self) -> float:
        """0.0 → 1.0 progress through the whole workout."""
        if self._config is None:
            return 0.0
        if self._state == SchedulerState.FINISHED:
            return 1.0
        total = self._config.total_seconds
        if total <= 0:
            return 0.0
        return max(0.0, min(1.0, self._elapsed / total))

    # ══════════════════════════════════════════════════════════════════
    #  CONTROLS
    # ══════════════════════════════════════════════════════════════════

    def start(self, config: WorkoutConfig) -> None:
        """Begin a new run at PREP.

        Raises ``InvalidConfigError`` for a bad config and
        ``InvalidStateTransitionError`` if a run is already active.
        """
        config.validate()
        with self._lock:
            if self._state in _ACTIVE_STATES:
                raise InvalidStateTransitionError(
                    "a workout is already running; stop() it first"
                )
            self._config = config
            self._run = RunState(
                phase=Phase.PREP,
                current_serie=1,
                remaining_seconds=config.prep_seconds,
            )
            self._elapsed = 0
            self._state = SchedulerState.RUNNING
            first_tick = self._tick_event()

        log.info(
            "Workout started: %d series, work %ds, rest %ds, cooldown %ds",
            config.series, config.work_seconds,
            config.rest_seconds, config.cooldown_seconds,
        )
        self._acquire_wake_lock()
        self._qt_timer.start()
        self.state_changed.emit(SchedulerState.RUNNING)
        self.cue.emit(first_tick)

    def pause(self) -> None:
        """Freeze the countdown.  Calling it twice is the same as once."""
        with self._lock:
            if self._state != SchedulerState.RUNNING:
                return
            self._run.paused = True
            self._state = SchedulerState.PAUSED
        self.state_changed.emit(SchedulerState.PAUSED)

    def resume(self) -> None:
        """Continue counting from where ``pause`` left off."""
        with self._lock:
            if self._state != SchedulerState.PAUSED:
                return
            self._run.paused = False
            self._state = SchedulerState.RUNNING
        self.state_changed.emit(SchedulerState.RUNNING)

    def toggle_pause(self) -> None:
        if self._state == SchedulerState.PAUSED:
            self.resume()
        else:
            self.pause()

    def set_wake_lock(self, wake_lock: WakeLock | None) -> None:
        """Swap the wake-lock collaborator between runs."""
        with self._lock:
            if self._state in _ACTIVE_STATES:
                raise InvalidStateTransitionError(
                    "cannot change the wake lock while a workout is running"
                )
            self._wake_lock = wake_lock or NullWakeLock()

    def stop(self) -> None:
        """Abort the run.  Safe to call in any state."""
        with self._lock:
            if self._state in (SchedulerState.IDLE, SchedulerState.STOPPED):
                return
            previous = self._state
            self._run = None
            self._state = SchedulerState.STOPPED

        self._stop_tick_source()
        self._release_wake_lock()
        log.info("Workout stopped (was %s)", previous.value)
        self.state_changed.emit(SchedulerState.STOPPED)

    # ══════════════════════════════════════════════════════════════════
    #  TICK HANDLING
    # ══════════════════════════════════════════════════════════════════

    def on_tick(self) -> None:
        """Consume one elapsed second from the clock source."""
        with self._lock:
            if self._state == SchedulerState.IDLE:
                raise InvalidStateTransitionError(
                    "tick delivered before start()"
                )
            if self._ticking or self._run is None or self._state not in _ACTIVE_STATES:
                log.debug("Dropping tick in state %s", self._state.value)
                return
            if self._run.paused:
                return
            self._ticking = True
            events, done = self._count_down()

        try:
            if done:
                self._stop_tick_source()
                self._release_wake_lock()
                log.info("Workout finished after %d seconds", self._elapsed)
            for event in events:
                self.cue.emit(event)
            # a cue handler may have stopped the run
            if done and self._state is SchedulerState.FINISHED:
                self.state_changed.emit(SchedulerState.FINISHED)
                self.finished.emit()
        finally:
            self._ticking = False

    def _count_down(self) -> tuple[list[CueEvent], bool]:
        """Apply one second to the run state.  Caller holds the lock."""
        run = self._run
        run.remaining_seconds = max(0, run.remaining_seconds - 1)
        self._elapsed += 1

        events: list[CueEvent] = []
        done = False

        if 0 < run.remaining_seconds <= COUNTDOWN_FROM:
            events.append(CountdownBeep(countdown_pitch(run.phase)))

        if run.remaining_seconds == 0:
            events.append(PhaseEndBeep())
            step = advance(self._config, run.phase, run.current_serie)
            if step.is_terminal:
                run.phase = Phase.FINISHED
                self._state = SchedulerState.FINISHED
                events.append(FinishFanfare())
                done = True
            else:
                run.phase = step.phase
                run.current_serie = step.serie
                run.remaining_seconds = step.duration

        events.append(self._tick_event())
        return events, done

    def _tick_event(self) -> Tick:
        run = self._run
        return Tick(
            phase=run.phase,
            remaining_seconds=run.remaining_seconds,
            current_serie=run.current_serie,
            series=self._config.series,
        )

    # ══════════════════════════════════════════════════════════════════
    #  INTERNAL — collaborators
    # ══════════════════════════════════════════════════════════════════

    def _stop_tick_source(self) -> None:
        if QThread.currentThread() == self.thread():
            self._qt_timer.stop()
        else:
            # QTimer may only be stopped from the thread that owns it
            QMetaObject.invokeMethod(
                self._qt_timer, "stop", Qt.ConnectionType.QueuedConnection,
            )

    def _acquire_wake_lock(self) -> None:
        for attempt in (1, 2):
            try:
                self._wake_lock.acquire()
            except Exception as exc:
                log.warning(
                    "Could not acquire wake lock (attempt %d): %s",
                    attempt, exc,
                )
            else:
                self._wake_lock_held = True
                return

    def _release_wake_lock(self) -> None:
        if not self._wake_lock_held:
            return
        self._wake_lock_held = False
        try:
            self._wake_lock.release()
        except Exception as exc:
            log.warning("Could not release wake lock: %s", exc)

"""Shared test helpers for MultiClock."""

from multiclock.timer.cues import Tick
from multiclock.timer.engine import SchedulerState, TickScheduler


class SignalCollector:
    """Utility to capture pyqtSignal emissions into a list."""

    def __init__(self):
        self.items: list = []

    def slot(self, *args):
        self.items.append(args if len(args) > 1 else args[0] if args else None)

    def __call__(self, *args):
        self.slot(*args)

    def __len__(self):
        return len(self.items)

    def __getitem__(self, idx):
        return self.items[idx]

    @property
    def last(self):
        return self.items[-1] if self.items else None

    def of_type(self, cls) -> list:
        return [item for item in self.items if isinstance(item, cls)]

    def clear(self):
        self.items.clear()


class FakeWakeLock:
    """Wake lock that records calls and can be told to fail."""

    def __init__(self, fail_times: int = 0):
        self.fail_times = fail_times
        self.acquire_calls = 0
        self.release_calls = 0
        self.held = False

    def acquire(self):
        self.acquire_calls += 1
        if self.acquire_calls <= self.fail_times:
            raise OSError("no wake lock for you")
        self.held = True

    def release(self):
        self.release_calls += 1
        self.held = False


class FakeSounds:
    """Stands in for SoundManager; records every sound name played."""

    def __init__(self):
        self.played: list[str] = []
        self.volume = 100
        self.enabled = True

    def play(self, name: str) -> None:
        if self.enabled:
            self.played.append(name)

    def set_volume(self, level: int) -> None:
        self.volume = level

    def set_enabled(self, enabled: bool) -> None:
        self.enabled = enabled


def run_to_end(scheduler: TickScheduler, limit: int = 100_000) -> int:
    """Tick until the run finishes.  Returns the number of ticks used."""
    ticks = 0
    while scheduler.state != SchedulerState.FINISHED:
        assert ticks < limit, "workout never finished"
        scheduler.on_tick()
        ticks += 1
    return ticks


def phase_sequence(ticks: list[Tick]) -> list[tuple]:
    """Collapse consecutive Tick events into (phase, start_remaining, serie)."""
    seq: list[tuple] = []
    prev = None
    for t in ticks:
        key = (t.phase, t.current_serie)
        if key != prev:
            seq.append((t.phase, t.remaining_seconds, t.current_serie))
            prev = key
    return seq

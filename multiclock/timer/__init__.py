"""Timer package."""

from .cues import (
    CountdownBeep,
    CueEvent,
    FanfareNote,
    FinishFanfare,
    PhaseEndBeep,
    PitchClass,
    Tick,
)
from .engine import RunState, SchedulerState, TickScheduler
from .errors import (
    InvalidConfigError,
    InvalidStateTransitionError,
    MultiClockError,
)
from .sequencer import (
    PREP_SECONDS,
    NextStep,
    Phase,
    WorkoutConfig,
    advance,
    plan,
)

__all__ = [
    "TickScheduler",
    "SchedulerState",
    "RunState",
    "Phase",
    "WorkoutConfig",
    "NextStep",
    "PREP_SECONDS",
    "advance",
    "plan",
    "Tick",
    "CountdownBeep",
    "PhaseEndBeep",
    "FinishFanfare",
    "FanfareNote",
    "PitchClass",
    "CueEvent",
    "MultiClockError",
    "InvalidConfigError",
    "InvalidStateTransitionError",
]

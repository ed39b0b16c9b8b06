"""Cue events emitted by the scheduler.

Cues are plain immutable values.  The scheduler never draws or plays
anything itself; the timer screen and ``CuePlayer`` consume these in
emission order.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Union

from .sequencer import Phase


class PitchClass(Enum):
    """Countdown beep pitch in Hz.  PREP sounds lower than the rest."""

    PREP = 600
    PHASE = 880


PHASE_END_FREQUENCY = 1200
PHASE_END_DURATION = 0.4
COUNTDOWN_DURATION = 0.1

# Beeps fire while this many seconds (or fewer, above zero) remain.
COUNTDOWN_FROM = 3


@dataclass(frozen=True)
class Tick:
    phase: Phase
    remaining_seconds: int
    current_serie: int
    series: int


@dataclass(frozen=True)
class CountdownBeep:
    pitch: PitchClass

    @property
    def frequency(self) -> int:
        return self.pitch.value


@dataclass(frozen=True)
class PhaseEndBeep:
    frequency: int = PHASE_END_FREQUENCY
    duration: float = PHASE_END_DURATION


@dataclass(frozen=True)
class FanfareNote:
    delay_ms: int
    frequency: int
    duration: float


FANFARE_NOTES: tuple[FanfareNote, ...] = (
    FanfareNote(0, 600, 0.3),
    FanfareNote(200, 800, 0.3),
    FanfareNote(400, 1200, 0.8),
)


@dataclass(frozen=True)
class FinishFanfare:
    """Ascending triple tone.  The sink owns the note timing."""

    notes: tuple[FanfareNote, ...] = FANFARE_NOTES


CueEvent = Union[Tick, CountdownBeep, PhaseEndBeep, FinishFanfare]


def countdown_pitch(phase: Phase) -> PitchClass:
    return PitchClass.PREP if phase is Phase.PREP else PitchClass.PHASE

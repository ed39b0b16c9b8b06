"""Phase sequencing for interval workouts.

A workout always has the same shape::

    PREP → (WORK → REST) × series → COOLDOWN → FINISHED

The last serie has no REST after it.  REST and COOLDOWN phases with a
zero duration are skipped entirely; WORK is never skipped, even when
``work_seconds`` is 0.

Nothing in this module knows about time passing.  ``advance`` is a pure
function of the configuration and the current position, so it is safe
to call from anywhere.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable, NamedTuple

from .errors import InvalidConfigError, InvalidStateTransitionError


# ── enums ─────────────────────────────────────────────────────────────────


class Phase(Enum):
    PREP = "PREP"
    WORK = "WORK"
    REST = "REST"
    COOLDOWN = "COOLDOWN"
    FINISHED = "FINISHED"


# ── constants ─────────────────────────────────────────────────────────────

PREP_SECONDS = 5

# Phases that disappear from the run when configured with 0 seconds.
SKIPPABLE_PHASES = frozenset({Phase.REST, Phase.COOLDOWN})


# ── configuration ─────────────────────────────────────────────────────────


@dataclass(frozen=True)
class WorkoutConfig:
    """Immutable description of one workout.  Durations are in seconds."""

    series: int = 5
    work_seconds: int = 30
    rest_seconds: int = 10
    cooldown_seconds: int = 0
    prep_seconds: int = PREP_SECONDS

    def validate(self) -> "WorkoutConfig":
        """Raise ``InvalidConfigError`` unless every field is sane.

        Returns ``self`` so it can be chained.
        """
        for name in (
            "series", "work_seconds", "rest_seconds",
            "cooldown_seconds", "prep_seconds",
        ):
            value = getattr(self, name)
            # bool is an int subclass, but True series makes no sense
            if isinstance(value, bool) or not isinstance(value, int):
                raise InvalidConfigError(
                    f"{name} must be an integer, got {value!r}"
                )
            if value < 0:
                raise InvalidConfigError(f"{name} must be >= 0, got {value}")
        if self.series < 1:
            raise InvalidConfigError(
                f"series must be >= 1, got {self.series}"
            )
        return self

    @property
    def total_seconds(self) -> int:
        """Ticks from start to FINISHED.  A zero WORK still takes one tick."""
        return (
            self.prep_seconds
            + self.series * max(self.work_seconds, 1)
            + (self.series - 1) * self.rest_seconds
            + self.cooldown_seconds
        )


# ── transition results ────────────────────────────────────────────────────


class NextStep(NamedTuple):
    """Result of ``advance``: the next countdown, or the terminal marker."""

    phase: Phase
    duration: int
    serie: int

    @classmethod
    def terminal(cls, serie: int = 0) -> "NextStep":
        return cls(Phase.FINISHED, 0, serie)

    @property
    def is_terminal(self) -> bool:
        return self.phase is Phase.FINISHED


class PlannedPhase(NamedTuple):
    phase: Phase
    duration: int
    serie: int


# ── transition table ──────────────────────────────────────────────────────


def _after_prep(config: WorkoutConfig, serie: int) -> NextStep:
    return NextStep(Phase.WORK, config.work_seconds, serie)


def _after_work(config: WorkoutConfig, serie: int) -> NextStep:
    if serie < config.series:
        return NextStep(Phase.REST, config.rest_seconds, serie)
    if config.cooldown_seconds > 0:
        return NextStep(Phase.COOLDOWN, config.cooldown_seconds, serie)
    return NextStep.terminal(serie)


def _after_rest(config: WorkoutConfig, serie: int) -> NextStep:
    return NextStep(Phase.WORK, config.work_seconds, serie + 1)


def _after_cooldown(config: WorkoutConfig, serie: int) -> NextStep:
    return NextStep.terminal(serie)


TRANSITIONS: dict[Phase, Callable[[WorkoutConfig, int], NextStep]] = {
    Phase.PREP: _after_prep,
    Phase.WORK: _after_work,
    Phase.REST: _after_rest,
    Phase.COOLDOWN: _after_cooldown,
}


def advance(
    config: WorkoutConfig, current_phase: Phase, current_serie: int
) -> NextStep:
    """Return the countdown that follows *current_phase*.

    Zero-length REST/COOLDOWN phases are walked through, so the result
    is either terminal or a phase the scheduler should count down.
    """
    phase, serie = current_phase, current_serie
    while True:
        try:
            transition = TRANSITIONS[phase]
        except KeyError:
            raise InvalidStateTransitionError(
                f"cannot advance from {phase.value}"
            ) from None
        step = transition(config, serie)
        if step.is_terminal:
            return step
        if step.phase in SKIPPABLE_PHASES and step.duration == 0:
            phase, serie = step.phase, step.serie
            continue
        return step


def plan(config: WorkoutConfig) -> list[PlannedPhase]:
    """Every countdown of a run, in order, starting with PREP."""
    config.validate()
    phases = [PlannedPhase(Phase.PREP, config.prep_seconds, 1)]
    step = advance(config, Phase.PREP, 1)
    while not step.is_terminal:
        phases.append(PlannedPhase(step.phase, step.duration, step.serie))
        step = advance(config, step.phase, step.serie)
    return phases

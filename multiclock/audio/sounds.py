"""Tone synthesis and cue playback using numpy + QSoundEffect.

Every cue sound is a single sine tone with a short linear attack and an
exponential decay, generated as a WAV file.  Files are cached to disk
so subsequent app launches are instant.

Sound names
-----------
- ``countdown_prep`` — 600 Hz blip, last 3 s of PREP
- ``countdown``      — 880 Hz blip, last 3 s of every other phase
- ``phase_end``      — 1200 Hz, longer, when a phase runs out
- ``finish_low`` / ``finish_mid`` / ``finish_high`` — the finish fanfare
"""

from __future__ import annotations

import io
import logging
import wave
from pathlib import Path

import numpy as np

from PyQt6.QtCore import QObject, QTimer, QUrl
from PyQt6.QtMultimedia import QSoundEffect

from ..timer.cues import (
    COUNTDOWN_DURATION,
    CountdownBeep,
    CueEvent,
    FinishFanfare,
    PhaseEndBeep,
    PitchClass,
)


log = logging.getLogger("multiclock.audio")


# ── paths ────────────────────────────────────────────────────────────────

APP_SUPPORT_DIR = Path.home() / "Library" / "Application Support" / "MultiClock"
SOUNDS_DIR = APP_SUPPORT_DIR / "sounds"

SAMPLE_RATE = 44100

PEAK_GAIN = 0.2
ATTACK_S = 0.02
FLOOR_GAIN = 0.0001

# name → (frequency Hz, duration s)
TONES: dict[str, tuple[int, float]] = {
    "countdown_prep": (PitchClass.PREP.value, COUNTDOWN_DURATION),
    "countdown": (PitchClass.PHASE.value, COUNTDOWN_DURATION),
    "phase_end": (1200, 0.4),
    "finish_low": (600, 0.3),
    "finish_mid": (800, 0.3),
    "finish_high": (1200, 0.8),
}

SOUND_NAMES = tuple(TONES)


# ═══════════════════════════════════════════════════════════════════════════
#  WAV SYNTHESIS HELPERS
# ═══════════════════════════════════════════════════════════════════════════


def _beep_envelope(length: int) -> np.ndarray:
    """Linear rise to ``PEAK_GAIN`` in 20 ms, then exponential fall."""
    env = np.zeros(length, dtype=np.float64)
    a = min(int(SAMPLE_RATE * ATTACK_S), length)
    if a > 0:
        env[:a] = np.linspace(0.0, PEAK_GAIN, a)
    if length > a:
        env[a:] = np.geomspace(PEAK_GAIN, FLOOR_GAIN, length - a)
    return env


def _sine(freq: float, duration_s: float) -> np.ndarray:
    """Pure sine wave at *freq* Hz for *duration_s* seconds."""
    t = np.linspace(0, duration_s, int(SAMPLE_RATE * duration_s), endpoint=False)
    return np.sin(2 * np.pi * freq * t)


def _to_wav_bytes(samples: np.ndarray) -> bytes:
    """Convert a float64 numpy array (-1..1) to 16-bit PCM WAV bytes."""
    samples = np.clip(samples, -1.0, 1.0)
    int_samples = (samples * 32767).astype(np.int16)

    buf = io.BytesIO()
    with wave.open(buf, "wb") as wf:
        wf.setnchannels(1)
        wf.setsampwidth(2)
        wf.setframerate(SAMPLE_RATE)
        wf.writeframes(int_samples.tobytes())
    return buf.getvalue()


def generate_tone(freq: float, duration_s: float) -> bytes:
    """One enveloped sine beep as WAV bytes."""
    tone = _sine(freq, duration_s)
    # Trailing silence so QSoundEffect doesn't clip the tail
    padded = np.concatenate([
        tone * _beep_envelope(len(tone)),
        np.zeros(int(SAMPLE_RATE * 0.03)),
    ])
    return _to_wav_bytes(padded)


def sound_for_tone(freq: int, duration_s: float) -> str | None:
    """Name of the cached sound for a (frequency, duration) pair."""
    for name, (f, d) in TONES.items():
        if f == freq and abs(d - duration_s) < 1e-6:
            return name
    return None


# ═══════════════════════════════════════════════════════════════════════════
#  SOUND MANAGER
# ═══════════════════════════════════════════════════════════════════════════


class SoundManager(QObject):
    """Owns one ``QSoundEffect`` per entry in ``TONES``.

    WAV files are synthesised into *sounds_dir* the first time they are
    needed and reused on later launches.  Volume is 0-100.
    """

    DEFAULT_VOLUME = 80

    def __init__(
        self,
        parent: QObject | None = None,
        *,
        sounds_dir: Path | None = None,
    ) -> None:
        super().__init__(parent)
        self._level = self.DEFAULT_VOLUME
        self._enabled = True
        self._effects: dict[str, QSoundEffect] = {}

        cache = sounds_dir or SOUNDS_DIR
        cache.mkdir(parents=True, exist_ok=True)
        for name in SOUND_NAMES:
            self._effects[name] = self._effect_for(cache / f"{name}.wav", name)

    def _effect_for(self, wav: Path, name: str) -> QSoundEffect:
        if not wav.exists():
            freq, duration = TONES[name]
            wav.write_bytes(generate_tone(freq, duration))
            log.debug("Synthesised %s (%d Hz, %.2fs)", wav.name, freq, duration)
        effect = QSoundEffect(self)
        effect.setSource(QUrl.fromLocalFile(str(wav)))
        effect.setVolume(self._level / 100)
        return effect

    @property
    def volume(self) -> int:
        return self._level

    @property
    def enabled(self) -> bool:
        return self._enabled

    def set_volume(self, level: int) -> None:
        self._level = min(100, max(0, int(level)))
        for effect in self._effects.values():
            effect.setVolume(self._level / 100)

    def set_enabled(self, enabled: bool) -> None:
        self._enabled = bool(enabled)

    def play(self, name: str) -> None:
        """Start *name* from the top.  Silent while disabled."""
        if not self._enabled:
            return
        try:
            effect = self._effects[name]
        except KeyError:
            log.warning("Unknown sound %r", name)
            return
        effect.play()


# ═══════════════════════════════════════════════════════════════════════════
#  CUE PLAYER
# ═══════════════════════════════════════════════════════════════════════════


class CuePlayer(QObject):
    """Audio sink for scheduler cues.

    Connect ``TickScheduler.cue`` to ``play_cue``.  Fanfare notes are
    staggered with single-shot timers owned by this object, so
    ``cancel_pending`` can silence a fanfare that has not finished yet.
    """

    def __init__(self, sounds: SoundManager, parent: QObject | None = None) -> None:
        super().__init__(parent)
        self._sounds = sounds
        self._pending: list[QTimer] = []

    @property
    def pending_count(self) -> int:
        return len(self._pending)

    def play_cue(self, event: CueEvent) -> None:
        try:
            if isinstance(event, CountdownBeep):
                if event.pitch is PitchClass.PREP:
                    self._sounds.play("countdown_prep")
                else:
                    self._sounds.play("countdown")
            elif isinstance(event, PhaseEndBeep):
                self._sounds.play("phase_end")
            elif isinstance(event, FinishFanfare):
                self._play_fanfare(event)
        except Exception:
            log.exception("Failed to play cue %r", event)

    def cancel_pending(self) -> None:
        for timer in self._pending:
            timer.stop()
            timer.deleteLater()
        self._pending.clear()

    def _play_fanfare(self, fanfare: FinishFanfare) -> None:
        for note in fanfare.notes:
            name = sound_for_tone(note.frequency, note.duration)
            if name is None:
                log.debug("No cached sound for fanfare note %r", note)
                continue
            if note.delay_ms <= 0:
                self._sounds.play(name)
                continue
            timer = QTimer(self)
            timer.setSingleShot(True)
            timer.setInterval(note.delay_ms)
            timer.timeout.connect(
                lambda n=name, t=timer: self._fire_note(n, t)
            )
            self._pending.append(timer)
            timer.start()

    def _fire_note(self, name: str, timer: QTimer) -> None:
        if timer in self._pending:
            self._pending.remove(timer)
        timer.deleteLater()
        self._sounds.play(name)

"""Audio package."""

from .sounds import CuePlayer, SoundManager, SOUND_NAMES

__all__ = ["SoundManager", "CuePlayer", "SOUND_NAMES"]

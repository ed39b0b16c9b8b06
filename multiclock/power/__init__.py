"""Power management package."""

from .wakelock import CaffeinateWakeLock, NullWakeLock, WakeLock, default_wake_lock

__all__ = ["WakeLock", "NullWakeLock", "CaffeinateWakeLock", "default_wake_lock"]

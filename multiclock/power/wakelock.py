"""Keep the display awake while a workout is running.

The scheduler only needs ``acquire()`` and ``release()``.  On macOS the
lock is a ``caffeinate -d`` child process tied to our PID, so it also
goes away if the app crashes.  Everywhere else ``NullWakeLock`` is used.
"""

from __future__ import annotations

import logging
import os
import shutil
import subprocess
import sys
from typing import Protocol


log = logging.getLogger("multiclock.power")


class WakeLock(Protocol):
    def acquire(self) -> None: ...

    def release(self) -> None: ...

    @property
    def held(self) -> bool: ...


class NullWakeLock:
    """Wake lock that does nothing.  Tracks acquire/release for callers."""

    def __init__(self) -> None:
        self._held = False

    def acquire(self) -> None:
        self._held = True

    def release(self) -> None:
        self._held = False

    @property
    def held(self) -> bool:
        return self._held


class CaffeinateWakeLock:
    """Prevent display sleep by running ``caffeinate -d -w <pid>``."""

    def __init__(self, executable: str = "caffeinate") -> None:
        self._executable = executable
        self._proc: subprocess.Popen | None = None

    @property
    def held(self) -> bool:
        return self._proc is not None and self._proc.poll() is None

    def acquire(self) -> None:
        """Start the assertion process.  Raises ``OSError`` on failure."""
        if self.held:
            return
        self._proc = subprocess.Popen(
            [self._executable, "-d", "-w", str(os.getpid())],
            stdin=subprocess.DEVNULL,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
        )
        log.debug("caffeinate started (pid %s)", self._proc.pid)

    def release(self) -> None:
        proc, self._proc = self._proc, None
        if proc is None or proc.poll() is not None:
            return
        proc.terminate()
        try:
            proc.wait(timeout=1.0)
        except subprocess.TimeoutExpired:
            proc.kill()
            proc.wait()
        log.debug("caffeinate stopped")


def default_wake_lock() -> WakeLock:
    """The best wake lock available on this platform."""
    if sys.platform == "darwin" and shutil.which("caffeinate"):
        return CaffeinateWakeLock()
    return NullWakeLock()

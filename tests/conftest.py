"""Shared pytest fixtures for MultiClock tests."""

import os
import sys

import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from PyQt6.QtWidgets import QApplication

from multiclock.timer.engine import TickScheduler

from helpers import FakeWakeLock


@pytest.fixture(scope="session")
def qapp():
    """A single QApplication instance shared across the entire test run."""
    app = QApplication.instance() or QApplication(sys.argv)
    yield app


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path, monkeypatch):
    """Keep every test away from the real settings file."""
    monkeypatch.setattr("multiclock.settings.APP_SUPPORT_DIR", tmp_path)
    monkeypatch.setattr(
        "multiclock.settings.SETTINGS_PATH", tmp_path / "settings.json",
    )
    yield


@pytest.fixture
def wake_lock():
    return FakeWakeLock()


@pytest.fixture
def scheduler(qapp, wake_lock):
    """Fresh TickScheduler wired to a fake wake lock."""
    sched = TickScheduler(parent=None, wake_lock=wake_lock)
    yield sched
    sched.stop()

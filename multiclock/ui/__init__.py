"""UI package."""

from .settings_dialog import SettingsDialog
from .setup_widget import SetupWidget
from .timer_widget import TimerWidget

__all__ = [
    "SettingsDialog",
    "SetupWidget",
    "TimerWidget",
]

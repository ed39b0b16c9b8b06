"""Workout setup screen.

Layout (top → bottom):
    - One stepper row per field: SERIES, WORK, REST, COOLDOWN
    - Total duration of the planned run
    - START button
"""

from __future__ import annotations

from PyQt6.QtCore import Qt, pyqtSignal
from PyQt6.QtWidgets import (
    QWidget, QVBoxLayout, QHBoxLayout, QLabel, QPushButton, QFrame,
)

from ..timer.sequencer import WorkoutConfig, plan


# field name → (label, step, minimum, suffix)
FIELDS: dict[str, tuple[str, int, int, str]] = {
    "series":   ("SERIES", 1, 1, ""),
    "work":     ("WORK", 5, 0, "s"),
    "rest":     ("REST", 5, 0, "s"),
    "cooldown": ("COOLDOWN", 5, 0, "s"),
}


def format_duration(seconds: int) -> str:
    m, s = divmod(max(0, seconds), 60)
    return f"{m}:{s:02d}"


class SetupWidget(QWidget):
    """Collects a ``WorkoutConfig`` and asks for the workout to start."""

    start_requested = pyqtSignal(object)  # WorkoutConfig

    def __init__(
        self,
        config: WorkoutConfig | None = None,
        parent: QWidget | None = None,
    ) -> None:
        super().__init__(parent)
        config = config or WorkoutConfig()
        self._values: dict[str, int] = {
            "series": max(1, config.series),
            "work": max(0, config.work_seconds),
            "rest": max(0, config.rest_seconds),
            "cooldown": max(0, config.cooldown_seconds),
        }
        self._value_labels: dict[str, QLabel] = {}
        self._build_ui()
        self._refresh()

    # ── build ─────────────────────────────────────────────────────────────

    def _build_ui(self) -> None:
        root = QVBoxLayout(self)
        root.setContentsMargins(0, 0, 0, 0)

        card = QFrame(self)
        card.setObjectName("card")
        root.addWidget(card)

        layout = QVBoxLayout(card)
        layout.setContentsMargins(32, 24, 32, 28)
        layout.setSpacing(14)
        layout.setAlignment(Qt.AlignmentFlag.AlignCenter)

        for key, (label, step, _minimum, _suffix) in FIELDS.items():
            layout.addLayout(self._build_stepper(card, key, label, step))

        layout.addSpacing(8)

        self._total_label = QLabel(card)
        self._total_label.setObjectName("totalLabel")
        self._total_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        layout.addWidget(self._total_label)

        self._start_btn = QPushButton("START", card)
        self._start_btn.setObjectName("primaryButton")
        self._start_btn.clicked.connect(self._on_start)
        layout.addWidget(self._start_btn, alignment=Qt.AlignmentFlag.AlignCenter)

    def _build_stepper(
        self, parent: QWidget, key: str, label: str, step: int,
    ) -> QHBoxLayout:
        row = QHBoxLayout()
        row.setSpacing(10)

        name = QLabel(label, parent)
        name.setObjectName("fieldLabel")
        name.setMinimumWidth(110)
        row.addWidget(name)
        row.addStretch()

        minus = QPushButton("−", parent)
        minus.setObjectName("stepButton")
        minus.clicked.connect(lambda: self.change_value(key, -step))
        row.addWidget(minus)

        value = QLabel(parent)
        value.setObjectName("fieldValue")
        value.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self._value_labels[key] = value
        row.addWidget(value)

        plus = QPushButton("+", parent)
        plus.setObjectName("stepButton")
        plus.clicked.connect(lambda: self.change_value(key, step))
        row.addWidget(plus)
        return row

    # ── public ────────────────────────────────────────────────────────────

    def change_value(self, key: str, amount: int) -> None:
        """Nudge one field, never below its minimum."""
        minimum = FIELDS[key][2]
        self._values[key] = max(minimum, self._values[key] + amount)
        self._refresh()

    def value(self, key: str) -> int:
        return self._values[key]

    def config(self) -> WorkoutConfig:
        return WorkoutConfig(
            series=self._values["series"],
            work_seconds=self._values["work"],
            rest_seconds=self._values["rest"],
            cooldown_seconds=self._values["cooldown"],
        )

    def set_config(self, config: WorkoutConfig) -> None:
        self._values.update(
            series=max(1, config.series),
            work=max(0, config.work_seconds),
            rest=max(0, config.rest_seconds),
            cooldown=max(0, config.cooldown_seconds),
        )
        self._refresh()

    # ── internal ──────────────────────────────────────────────────────────

    def _refresh(self) -> None:
        for key, label in self._value_labels.items():
            suffix = FIELDS[key][3]
            label.setText(f"{self._values[key]}{suffix}")
        config = self.config()
        phases = plan(config)
        total = config.total_seconds
        self._total_label.setText(
            f"Total {format_duration(total)} · {len(phases)} phases"
        )

    def _on_start(self) -> None:
        self.start_requested.emit(self.config())

"""Preferences dialog for MultiClock.

Every control writes straight through to ``Settings`` and saves to disk;
the main window re-applies the settings once the dialog closes.
"""

from __future__ import annotations

from typing import Callable

from PyQt6.QtCore import Qt
from PyQt6.QtWidgets import (
    QCheckBox, QDialog, QDialogButtonBox, QGroupBox, QHBoxLayout,
    QLabel, QSlider, QVBoxLayout, QWidget,
)

from ..settings import Settings, save_settings


class SettingsDialog(QDialog):
    """Sound cue and screen wake preferences."""

    def __init__(
        self,
        settings: Settings,
        parent: QWidget | None = None,
        *,
        sound_preview_callback: Callable[[], None] | None = None,
    ) -> None:
        super().__init__(parent)
        self.setWindowTitle("Preferences")
        self.setModal(True)
        self.setMinimumWidth(340)

        self._settings = settings
        self._sound_preview = sound_preview_callback
        self._populating = False

        layout = QVBoxLayout(self)
        layout.setSpacing(14)
        layout.addWidget(self._build_sound_group())
        layout.addWidget(self._build_screen_group())

        buttons = QDialogButtonBox(QDialogButtonBox.StandardButton.Close, self)
        buttons.rejected.connect(self.accept)
        layout.addWidget(buttons)

        self._load_from_settings()

    @property
    def settings(self) -> Settings:
        return self._settings

    # ══════════════════════════════════════════════════════════════════
    #  SECTIONS
    # ══════════════════════════════════════════════════════════════════

    def _build_sound_group(self) -> QGroupBox:
        group = QGroupBox("Sound", self)
        col = QVBoxLayout(group)

        self._sound_cb = QCheckBox("Play countdown and finish cues", group)
        self._sound_cb.toggled.connect(self._on_sound_toggled)
        col.addWidget(self._sound_cb)

        row = QHBoxLayout()
        row.addWidget(QLabel("Volume", group))
        self._vol_slider = QSlider(Qt.Orientation.Horizontal, group)
        self._vol_slider.setRange(0, 100)
        self._vol_slider.setSingleStep(5)
        self._vol_slider.setPageStep(20)
        self._vol_slider.valueChanged.connect(self._on_volume_changed)
        self._vol_slider.sliderReleased.connect(self._preview)
        row.addWidget(self._vol_slider, 1)
        self._vol_label = QLabel(group)
        self._vol_label.setFixedWidth(40)
        self._vol_label.setAlignment(Qt.AlignmentFlag.AlignRight)
        row.addWidget(self._vol_label)
        col.addLayout(row)
        return group

    def _build_screen_group(self) -> QGroupBox:
        group = QGroupBox("Screen", self)
        col = QVBoxLayout(group)
        self._awake_cb = QCheckBox("Keep the display awake during a workout", group)
        self._awake_cb.toggled.connect(self._on_awake_toggled)
        col.addWidget(self._awake_cb)
        return group

    def _load_from_settings(self) -> None:
        s = self._settings
        self._populating = True
        try:
            self._sound_cb.setChecked(s.sound_enabled)
            self._vol_slider.setValue(s.sound_volume)
            self._awake_cb.setChecked(s.keep_screen_awake)
        finally:
            self._populating = False
        self._vol_label.setText(f"{s.sound_volume}%")
        self._vol_slider.setEnabled(s.sound_enabled)

    # ══════════════════════════════════════════════════════════════════
    #  HANDLERS
    # ══════════════════════════════════════════════════════════════════

    def _on_sound_toggled(self, checked: bool) -> None:
        self._vol_slider.setEnabled(checked)
        self._store("sound_enabled", checked)

    def _on_awake_toggled(self, checked: bool) -> None:
        self._store("keep_screen_awake", checked)

    def _on_volume_changed(self, value: int) -> None:
        self._vol_label.setText(f"{value}%")
        self._store("sound_volume", value)

    def _store(self, field: str, value) -> None:
        if self._populating:
            return
        setattr(self._settings, field, value)
        save_settings(self._settings)

    def _preview(self) -> None:
        """Sample beep at the new volume."""
        if self._sound_preview is not None:
            self._sound_preview()

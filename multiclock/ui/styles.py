"""QSS stylesheet and phase colors for MultiClock."""

from __future__ import annotations

from ..timer.sequencer import Phase

# ── phase colors (phase label + time display) ────────────────────────────

PHASE_COLORS: dict[Phase, str] = {
    Phase.PREP:     "#2979ff",   # blue
    Phase.WORK:     "#00e676",   # green
    Phase.REST:     "#ffb300",   # amber
    Phase.COOLDOWN: "#9c27b0",   # purple
    Phase.FINISHED: "#ffffff",
}

# ── pause button (background, text) per paused flag ──────────────────────

PAUSE_BUTTON_COLORS: dict[bool, tuple[str, str]] = {
    False: ("#ffb300", "white"),
    True:  ("#00e676", "black"),
}

# ── default palette ──────────────────────────────────────────────────────

PALETTE: dict[str, str] = {
    "bg":           "#121212",
    "bg_secondary": "#1e1e1e",
    "surface":      "#2a2a2a",
    "accent":       "#00e676",
    "text":         "#f5f5f5",
    "text_muted":   "#9e9e9e",
    "danger":       "#ff5252",
    "border":       "#333333",
}

# ── fonts (first installed wins) ─────────────────────────────────────────

FONT_CANDIDATES: tuple[str, ...] = ("SF Pro Rounded", "SF Pro", "Menlo")
FALLBACK_FONT = "Arial"

_font_cache: dict[str, str] = {}


def resolve_font_family() -> str:
    """First installed font from ``FONT_CANDIDATES``.

    Needs a QApplication; the answer is cached for the process.
    """
    if "family" not in _font_cache:
        from PyQt6.QtGui import QFontDatabase
        installed = set(QFontDatabase.families())
        _font_cache["family"] = next(
            (name for name in FONT_CANDIDATES if name in installed),
            FALLBACK_FONT,
        )
    return _font_cache["family"]


def pause_button_style(paused: bool) -> str:
    bg, fg = PAUSE_BUTTON_COLORS[paused]
    return f"background-color: {bg}; color: {fg}; border: none;"


# ── QSS builder ──────────────────────────────────────────────────────────


def build_stylesheet(palette: dict[str, str] | None = None) -> str:
    p = palette or PALETTE
    family = resolve_font_family()
    return f"""
    QMainWindow, QDialog {{ background: {p['bg']}; }}

    QWidget {{
        background: {p['bg']};
        color: {p['text']};
        font-family: "{family}", {FALLBACK_FONT};
        font-size: 15px;
    }}

    QStatusBar {{ color: {p['text_muted']}; font-size: 12px; }}

    /* setup screen */
    QFrame#card {{
        background: {p['bg_secondary']};
        border-radius: 16px;
        padding: 6px;
    }}
    QLabel#fieldLabel {{
        background: transparent;
        color: {p['text_muted']};
        font-size: 12px;
        font-weight: 700;
        letter-spacing: 2px;
    }}
    QLabel#fieldValue {{
        background: transparent;
        min-width: 80px;
        font-size: 30px;
        font-weight: 700;
    }}
    QLabel#totalLabel {{ color: {p['text_muted']}; font-size: 13px; }}

    /* countdown screen */
    QLabel#phaseLabel {{ font-size: 34px; font-weight: 900; letter-spacing: 3px; }}
    QLabel#timeDisplay {{ font-size: 128px; font-weight: 900; }}
    QLabel#seriesDisplay {{ color: {p['text_muted']}; font-size: 22px; }}

    /* buttons */
    QPushButton {{
        background: {p['surface']};
        color: {p['text']};
        border: none;
        border-radius: 22px;
        padding: 11px 26px;
        font-weight: 700;
    }}
    QPushButton:pressed {{ background: {p['border']}; }}
    QPushButton#stepButton {{
        min-width: 44px;
        max-width: 44px;
        min-height: 44px;
        max-height: 44px;
        padding: 0px;
        font-size: 22px;
    }}
    QPushButton#primaryButton {{
        background: {p['accent']};
        color: {p['bg']};
        border-radius: 28px;
        padding: 16px 48px;
        font-size: 18px;
        font-weight: 900;
    }}
    QPushButton#dangerButton {{
        background: {p['danger']};
        color: white;
        border-radius: 26px;
        padding: 14px 32px;
        font-size: 16px;
    }}
    """

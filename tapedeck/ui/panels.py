"""Multi-line panels: the drum step grid and parameter knobs.

Panels are lists of rows; a row is a list of ``(char, fg, bg)`` cells.
"""

from __future__ import annotations

from collections.abc import Sequence

from tapedeck.ui.widgets import ACCENT, DIM, FG, PLAYING_GREEN, TRACK_COLORS, Cell, Color

INSTRUMENT_LABELS = ("KICK", "SNR ", "HAT ", "CLAP", "TOM ", "RIM ")
STEP_COUNT = 16

_BLANK: Cell = (" ", None, None)
_KNOB_FACES = ("│◄  │", "│ ◄ │", "│ ● │", "│ ► │", "│  ►│")


def _blank_row(width: int) -> list[Cell]:
    return [_BLANK] * width


def _put(row: list[Cell], x: int, text: str, fg: Color | None) -> None:
    for offset, char in enumerate(text):
        col = x + offset
        if 0 <= col < len(row):
            row[col] = (char, fg, None)


def render_step_grid(
    patterns: Sequence[Sequence[bool]],
    current_step: int,
    selected_instrument: int,
    width: int,
) -> list[list[Cell]]:
    """One row per drum instrument: a label, then its 16 steps.

    Nothing is drawn when the grid is narrower than 30 columns.
    """
    if width < 30:
        return []
    start_x = 6
    step_width = max((width - 7) // STEP_COUNT, 1)

    rows = []
    for inst, name in enumerate(INSTRUMENT_LABELS):
        row = _blank_row(width)
        label_color = ACCENT if inst == selected_instrument else DIM
        _put(row, 0, f"{name:<5}", label_color)

        for step in range(STEP_COUNT):
            x = start_x + step * step_width
            if x >= width:
                break
            active = bool(patterns[inst][step])
            current = step == current_step
            if active and current:
                char, color = "█", ACCENT
            elif active:
                char, color = "■", TRACK_COLORS[inst % len(TRACK_COLORS)]
            elif current:
                char, color = "▪", PLAYING_GREEN
            elif step % 4 == 0:
                char, color = "·", FG
            else:
                char, color = "·", DIM
            _put(row, x, char, color)
        rows.append(row)
    return rows


def _indicator(value: float) -> int:
    if value != value:
        return 0
    return max(int(value * 4.0), 0)


def render_knob(label: str, value: float, selected: bool) -> list[list[Cell]]:
    """A small knob: box with position indicator, percentage, then the label."""
    value_text = f"{value * 100.0:.0f}%"
    width = max(7, len(label), len(value_text))
    cx = width // 2
    color = ACCENT if selected else FG

    index = _indicator(value)
    face = _KNOB_FACES[index] if index < len(_KNOB_FACES) else _KNOB_FACES[-1]

    rows = [_blank_row(width) for _ in range(5)]
    _put(rows[0], cx - 2, "╭───╮", DIM)
    _put(rows[1], cx - 2, face, color)
    _put(rows[2], cx - 2, "╰───╯", DIM)
    _put(rows[3], cx - len(value_text) // 2, value_text, color)
    _put(rows[4], max(cx - len(label) // 2, 0), label, DIM)
    return rows
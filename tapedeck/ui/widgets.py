"""Colour palette and single-line widgets rendered as rows of styled cells.

A row is a list of ``(char, fg, bg)`` cells; colours are RGB tuples or None.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Optional

from tapedeck.app import AppMode
from tapedeck.messages import RecordSource, TrackDisplay, TransportDisplay

Color = tuple[int, int, int]
Cell = tuple[str, Optional[Color], Optional[Color]]

BG: Color = (20, 20, 25)
FG: Color = (200, 200, 210)
DIM: Color = (80, 80, 90)
ACCENT: Color = (0, 200, 150)
RECORD_RED: Color = (220, 50, 50)
PLAYING_GREEN: Color = (50, 220, 100)
MUTE_YELLOW: Color = (220, 200, 50)
SOLO_BLUE: Color = (50, 150, 255)
TRACK_COLORS: tuple[Color, ...] = (
    (100, 200, 255),
    (255, 150, 100),
    (150, 255, 100),
    (255, 200, 50),
)
VU_GREEN: Color = (50, 220, 80)
VU_YELLOW: Color = (220, 220, 50)
VU_RED: Color = (220, 50, 50)
HEADER_BG: Color = (35, 35, 45)
SELECTED_BG: Color = (40, 45, 55)
WHITE: Color = (255, 255, 255)

_BLANK: Cell = (" ", None, None)


class _Row:
    """Cells of one line; writes past a fixed width are clipped."""

    def __init__(self, width: int | None = None) -> None:
        self._width = width
        self.cells: list[Cell] = [_BLANK] * width if width is not None else []

    def put(self, x: int, text: str, fg: Color | None, bg: Color | None = None) -> None:
        for offset, char in enumerate(text):
            col = x + offset
            if self._width is not None and col >= self._width:
                break
            if col >= len(self.cells):
                self.cells.extend([_BLANK] * (col + 1 - len(self.cells)))
            self.cells[col] = (char, fg, bg)


def _byte_len(text: str) -> int:
    return len(text.encode("utf-8"))


def _to_u16(value: float) -> int:
    if value != value:
        return 0
    return int(min(max(value, 0.0), 65535.0))


def render_key_hints(hints: Sequence[tuple[str, str]], width: int) -> list[Cell]:
    """Hint bar of ``key:description`` pairs; pairs that do not fit are dropped."""
    row = _Row(width)
    x = 1
    for key, desc in hints:
        if x + _byte_len(key) + _byte_len(desc) + 3 > width:
            break
        row.put(x, key, ACCENT)
        x += _byte_len(key)
        row.put(x, ":", DIM)
        x += 1
        row.put(x, desc, FG)
        x += _byte_len(desc) + 2
    return row.cells


def render_mode_indicator(current: AppMode, width: int) -> list[Cell]:
    """Mode tabs with the current one highlighted; blank when narrower than 30."""
    row = _Row(width)
    if width < 30:
        return row.cells
    x = 1
    for mode in AppMode:
        label = f" {mode.label()} "
        if mode is current:
            row.put(x, label, BG, ACCENT)
        else:
            row.put(x, label, DIM)
        x += len(label) + 1
    return row.cells


_TRANSPORT_ICONS = {
    TransportDisplay.STOPPED: ("■ STOP", DIM),
    TransportDisplay.PLAYING: ("▶ PLAY", PLAYING_GREEN),
    TransportDisplay.RECORDING: ("● REC ", RECORD_RED),
    TransportDisplay.PAUSED: ("❚❚PAUSE", MUTE_YELLOW),
}


def render_transport_bar(
    state: TransportDisplay,
    position: str,
    armed_track: int | None,
    record_source: RecordSource,
    loop_enabled: bool,
) -> list[Cell]:
    """Transport icon, position counter, armed track, record source and loop flag."""
    row = _Row()
    icon, color = _TRANSPORT_ICONS[state]
    row.put(1, icon, color)
    row.put(12, f"  {position}  ", ACCENT)

    x = 28
    if armed_track is not None:
        arm = f"ARM:T{armed_track + 1}"
        row.put(x, arm, RECORD_RED)
        x += len(arm) + 1

    src = f"SRC:{record_source.label()}"
    row.put(x, src, ACCENT)
    x += len(src) + 2

    row.put(x, "LOOP:ON" if loop_enabled else "LOOP:OFF", ACCENT)
    return row.cells


def render_vu_meter(label: str, level: float, peak: float, width: int) -> list[Cell]:
    """Horizontal level bar with a peak-hold marker; blank when narrower than 4."""
    row = _Row(width)
    if width < 4:
        return row.cells

    label_width = 4
    bar_start = label_width
    bar_width = max(width - (label_width + 1), 0)

    row.put(0, f"{label:<4}", FG)
    row.put(bar_start, "░" * bar_width, DIM)

    filled = min(_to_u16(level * bar_width), bar_width)
    for offset in range(filled):
        frac = offset / bar_width
        if frac < 0.6:
            color = VU_GREEN
        elif frac < 0.85:
            color = VU_YELLOW
        else:
            color = VU_RED
        row.put(bar_start + offset, "█", color)

    peak_pos = _to_u16(peak * bar_width)
    if 0 < peak_pos <= bar_width:
        row.put(bar_start + peak_pos - 1, "│", WHITE)
    return row.cells


def render_track_selector(
    tracks: Sequence[TrackDisplay], selected: int, width: int
) -> list[Cell]:
    """Track numbers with armed, mute and solo flags; blank when narrower than 20."""
    row = _Row(width)
    if width < 20:
        return row.cells
    x = 1
    for index, track in enumerate(tracks):
        color = TRACK_COLORS[index % len(TRACK_COLORS)] if index == selected else DIM
        row.put(x, f"T{index + 1}", color)
        x += 2
        if track.armed:
            row.put(x, "●", RECORD_RED)
        x += 1
        if track.muted:
            row.put(x, "M", MUTE_YELLOW)
        x += 1
        if track.solo:
            row.put(x, "S", SOLO_BLUE)
        x += 2
    return row.cells
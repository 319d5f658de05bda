"""Keyboard bindings: key presses to UI events, and the hint bar contents."""

from __future__ import annotations

from dataclasses import dataclass, field

from tapedeck.app import AppMode
from tapedeck.messages import UiEvent, UiEventKind

ESC = "Esc"
TAB = "Tab"
ENTER = "Enter"
LEFT = "Left"
RIGHT = "Right"
UP = "Up"
DOWN = "Down"

CTRL = "ctrl"
ALT = "alt"
SHIFT = "shift"

PROJECT_DIR = "tapedeck_project"

_SEEK_SMALL = 44100
_SEEK_LARGE = 44100 * 5


@dataclass(frozen=True)
class KeyPress:
    """A key press: a single character or a named key, plus held modifiers."""

    code: str
    modifiers: frozenset[str] = field(default_factory=frozenset)

    def __post_init__(self) -> None:
        object.__setattr__(self, "modifiers", frozenset(self.modifiers))


def _event(kind: UiEventKind, *args) -> UiEvent:
    return UiEvent(kind, args)


# Bottom row starts at C3 (MIDI 48), top row at C4 (MIDI 60).
_SYNTH_NOTES = {
    "z": 48, "s": 49, "x": 50, "d": 51, "c": 52, "v": 53,
    "g": 54, "b": 55, "h": 56, "n": 57, "j": 58, "m": 59,
    "q": 60, "2": 61, "w": 62, "3": 63, "e": 64, "4": 65,
    "5": 66, "t": 67, "6": 68, "y": 69, "7": 70, "u": 71,
}

_DRUM_INSTRUMENTS = {"1": 0, "2": 1, "3": 2, "4": 3, "5": 4, "6": 5}

_DRUM_STEPS = {
    "z": 0, "x": 1, "c": 2, "v": 3, "b": 4, "n": 5, "m": 6, ",": 7,
    "a": 8, "s": 9, "d": 10, "f": 11, "g": 12, "h": 13, "j": 14, "k": 15,
}

_TRACK_KEYS = {"1": 0, "2": 1, "3": 2, "4": 3}


def _global_key(key: KeyPress, mode: AppMode) -> UiEvent | None:
    code = key.code
    plain = not key.modifiers
    ctrl = CTRL in key.modifiers
    if code == ESC:
        return _event(UiEventKind.QUIT)
    if code == "q" and plain and mode is not AppMode.SYNTH:
        return _event(UiEventKind.QUIT)
    if code == "s" and ctrl:
        return _event(UiEventKind.SAVE_PROJECT)
    if code == "l" and ctrl:
        return _event(UiEventKind.LOAD_PROJECT, PROJECT_DIR)
    if code == "l" and plain:
        return _event(UiEventKind.TOGGLE_LOOP)
    simple = {
        " ": UiEventKind.TOGGLE_PLAY_PAUSE,
        TAB: UiEventKind.CYCLE_MODE,
        ENTER: UiEventKind.STOP_TRANSPORT,
        "i": UiEventKind.CYCLE_RECORD_SOURCE,
    }
    if code in simple:
        return _event(simple[code])
    return None


def _tape_key(key: KeyPress, selected_track: int) -> UiEvent | None:
    seeks = {
        LEFT: -_SEEK_SMALL,
        RIGHT: _SEEK_SMALL,
        "[": -_SEEK_LARGE,
        "]": _SEEK_LARGE,
    }
    if key.code in seeks:
        return _event(UiEventKind.SEEK, seeks[key.code])
    if key.code == "r":
        return _event(UiEventKind.START_RECORD)
    per_track = {
        "m": UiEventKind.MUTE_TRACK,
        "s": UiEventKind.SOLO_TRACK,
        "a": UiEventKind.ARM_TRACK,
    }
    if key.code in per_track:
        return _event(per_track[key.code], selected_track)
    return None


def _synth_key(key: KeyPress) -> UiEvent | None:
    code = key.code
    if code == "r":
        return _event(UiEventKind.START_RECORD)
    if code in _SYNTH_NOTES:
        return _event(UiEventKind.NOTE_ON, _SYNTH_NOTES[code], 0.8)
    if code == LEFT:
        return _event(UiEventKind.SELECT_ENGINE, 0)
    if code == RIGHT:
        return _event(UiEventKind.SELECT_ENGINE, 1)
    if code == UP:
        return _event(UiEventKind.SET_PARAM, 0, 0.05)
    if code == DOWN:
        return _event(UiEventKind.SET_PARAM, 0, -0.05)
    return None


def _drum_key(key: KeyPress) -> UiEvent | None:
    code = key.code
    if code in _DRUM_INSTRUMENTS:
        return _event(UiEventKind.SELECT_INSTRUMENT, _DRUM_INSTRUMENTS[code])
    if code in _DRUM_STEPS:
        # The instrument is filled in from the current selection.
        return _event(UiEventKind.TOGGLE_STEP, 0, _DRUM_STEPS[code])
    if code == UP:
        return _event(UiEventKind.SET_BPM, 1.0)
    if code == DOWN:
        return _event(UiEventKind.SET_BPM, -1.0)
    if code == "r":
        return _event(UiEventKind.START_RECORD)
    return None


def _mixer_key(key: KeyPress, selected_track: int) -> UiEvent | None:
    code = key.code
    if code == UP:
        return _event(UiEventKind.SET_LEVEL, selected_track, 0.05)
    if code == DOWN:
        return _event(UiEventKind.SET_LEVEL, selected_track, -0.05)
    if code == LEFT:
        return _event(UiEventKind.SET_PAN, selected_track, -0.1)
    if code == RIGHT:
        return _event(UiEventKind.SET_PAN, selected_track, 0.1)
    if code == "m":
        return _event(UiEventKind.MUTE_TRACK, selected_track)
    if code == "s":
        return _event(UiEventKind.SOLO_TRACK, selected_track)
    return None


def handle_key(key: KeyPress, mode: AppMode, selected_track: int) -> UiEvent | None:
    """Map a key press in ``mode`` to the UI event it requests, if any."""
    event = _global_key(key, mode)
    if event is not None:
        return event

    if key.code in _TRACK_KEYS and mode in (AppMode.TAPE, AppMode.MIXER):
        return _event(UiEventKind.SELECT_TRACK, _TRACK_KEYS[key.code])

    if mode is AppMode.TAPE:
        return _tape_key(key, selected_track)
    if mode is AppMode.SYNTH:
        return _synth_key(key)
    if mode is AppMode.DRUM:
        return _drum_key(key)
    return _mixer_key(key, selected_track)


_COMMON_HINTS = [
    ("Space", "Play/Pause"),
    ("L", "Loop"),
    ("Enter", "Stop"),
    ("Ctrl+S", "Save"),
    ("Ctrl+L", "Load"),
    ("I", "Input Src"),
    ("Tab", "Mode"),
    ("Esc", "Quit"),
]

_MODE_HINTS = {
    AppMode.TAPE: [
        ("R", "Record"),
        ("A", "Arm"),
        ("1-4", "Track"),
        ("M", "Mute"),
        ("S", "Solo"),
        ("[/]", "Seek"),
    ],
    AppMode.SYNTH: [
        ("Z-M", "Play"),
        ("R", "Record"),
        ("←/→", "Engine"),
        ("↑/↓", "Param"),
    ],
    AppMode.DRUM: [
        ("Z-K", "Steps"),
        ("1-6", "Inst"),
        ("↑/↓", "BPM"),
        ("R", "Record"),
    ],
    AppMode.MIXER: [
        ("1-4", "Track"),
        ("↑/↓", "Level"),
        ("←/→", "Pan"),
        ("M", "Mute"),
        ("S", "Solo"),
    ],
}


def key_hints(mode: AppMode) -> list[tuple[str, str]]:
    """(key, description) pairs for the hint bar: mode keys first, then global ones."""
    return _MODE_HINTS[mode] + _COMMON_HINTS
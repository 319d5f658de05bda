"""Messages exchanged between the UI, the control loop and the audio engine."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import Any


class RecordSource(Enum):
    """Which signal gets written to the armed track."""

    MIC = "MIC"
    INTERNAL = "INT"
    SYNTH = "SYNTH"
    DRUM = "DRUM"
    ALL = "ALL"

    def next(self) -> RecordSource:
        """Return the source that follows this one in the selection cycle."""
        return _RECORD_SOURCE_CYCLE[self]

    def label(self) -> str:
        """Short label shown in the transport bar."""
        return self.value


_RECORD_SOURCE_CYCLE = {
    RecordSource.INTERNAL: RecordSource.SYNTH,
    RecordSource.SYNTH: RecordSource.DRUM,
    RecordSource.DRUM: RecordSource.MIC,
    RecordSource.MIC: RecordSource.ALL,
    RecordSource.ALL: RecordSource.INTERNAL,
}


def _check_arity(kind: Enum, args: tuple, arity: dict) -> None:
    expected = arity.get(kind, 0)
    if len(args) != expected:
        raise TypeError(
            f"{kind.name} takes {expected} argument(s), got {len(args)}"
        )


class UiEventKind(Enum):
    """Kinds of requests raised by the user interface."""

    TOGGLE_PLAY_PAUSE = auto()
    TOGGLE_LOOP = auto()
    START_RECORD = auto()
    STOP_TRANSPORT = auto()
    CYCLE_RECORD_SOURCE = auto()
    SELECT_TRACK = auto()
    ARM_TRACK = auto()
    MUTE_TRACK = auto()
    SOLO_TRACK = auto()
    SEEK = auto()
    CYCLE_MODE = auto()
    SET_LEVEL = auto()
    SET_PAN = auto()
    NOTE_ON = auto()
    NOTE_OFF = auto()
    SELECT_ENGINE = auto()
    SET_PARAM = auto()
    TOGGLE_STEP = auto()
    SET_BPM = auto()
    SELECT_INSTRUMENT = auto()
    TOGGLE_TAPE_SIM = auto()
    SET_TAPE_SPEED = auto()
    TOGGLE_EFFECT = auto()
    SET_EFFECT_PARAM = auto()
    SAVE_PROJECT = auto()
    LOAD_PROJECT = auto()
    QUIT = auto()


_UI_ARITY = {
    UiEventKind.SELECT_TRACK: 1,
    UiEventKind.ARM_TRACK: 1,
    UiEventKind.MUTE_TRACK: 1,
    UiEventKind.SOLO_TRACK: 1,
    UiEventKind.SEEK: 1,
    UiEventKind.SET_LEVEL: 2,
    UiEventKind.SET_PAN: 2,
    UiEventKind.NOTE_ON: 2,
    UiEventKind.NOTE_OFF: 1,
    UiEventKind.SELECT_ENGINE: 1,
    UiEventKind.SET_PARAM: 2,
    UiEventKind.TOGGLE_STEP: 2,
    UiEventKind.SET_BPM: 1,
    UiEventKind.SELECT_INSTRUMENT: 1,
    UiEventKind.SET_TAPE_SPEED: 1,
    UiEventKind.TOGGLE_EFFECT: 2,
    UiEventKind.SET_EFFECT_PARAM: 4,
    UiEventKind.LOAD_PROJECT: 1,
}


@dataclass(frozen=True)
class UiEvent:
    """A user request together with its arguments."""

    kind: UiEventKind
    args: tuple[Any, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "args", tuple(self.args))
        _check_arity(self.kind, self.args, _UI_ARITY)


class AudioCmdKind(Enum):
    """Kinds of commands sent to the audio engine."""

    PLAY = auto()
    PAUSE = auto()
    SET_LOOP_ENABLED = auto()
    STOP = auto()
    RECORD = auto()
    STOP_RECORD = auto()
    SEEK = auto()
    SET_LEVEL = auto()
    SET_PAN = auto()
    SET_MUTE = auto()
    SET_SOLO = auto()
    NOTE_ON = auto()
    NOTE_OFF = auto()
    SELECT_ENGINE = auto()
    SET_PARAM = auto()
    TOGGLE_STEP = auto()
    SET_BPM = auto()
    TOGGLE_TAPE_SIM = auto()
    SET_TAPE_SPEED = auto()
    TOGGLE_EFFECT = auto()
    SET_EFFECT_PARAM = auto()
    SET_RECORD_SOURCE = auto()


_CMD_ARITY = {
    AudioCmdKind.SET_LOOP_ENABLED: 1,
    AudioCmdKind.RECORD: 1,
    AudioCmdKind.SEEK: 1,
    AudioCmdKind.SET_LEVEL: 2,
    AudioCmdKind.SET_PAN: 2,
    AudioCmdKind.SET_MUTE: 2,
    AudioCmdKind.SET_SOLO: 2,
    AudioCmdKind.NOTE_ON: 2,
    AudioCmdKind.NOTE_OFF: 1,
    AudioCmdKind.SELECT_ENGINE: 1,
    AudioCmdKind.SET_PARAM: 2,
    AudioCmdKind.TOGGLE_STEP: 2,
    AudioCmdKind.SET_BPM: 1,
    AudioCmdKind.SET_TAPE_SPEED: 1,
    AudioCmdKind.TOGGLE_EFFECT: 2,
    AudioCmdKind.SET_EFFECT_PARAM: 4,
    AudioCmdKind.SET_RECORD_SOURCE: 1,
}


@dataclass(frozen=True)
class AudioCmd:
    """A command for the audio engine together with its arguments."""

    kind: AudioCmdKind
    args: tuple[Any, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "args", tuple(self.args))
        _check_arity(self.kind, self.args, _CMD_ARITY)


class AudioMsgKind(Enum):
    """Kinds of status reports sent back by the audio engine."""

    POSITION = auto()
    CURRENT_STEP = auto()
    LEVELS = auto()
    PEAKS = auto()
    MASTER_LEVEL = auto()


_MSG_ARITY = {
    AudioMsgKind.POSITION: 1,
    AudioMsgKind.CURRENT_STEP: 1,
    AudioMsgKind.LEVELS: 1,
    AudioMsgKind.PEAKS: 1,
    AudioMsgKind.MASTER_LEVEL: 2,
}


@dataclass(frozen=True)
class AudioMsg:
    """A status report from the audio engine together with its payload."""

    kind: AudioMsgKind
    args: tuple[Any, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "args", tuple(self.args))
        _check_arity(self.kind, self.args, _MSG_ARITY)


class TransportDisplay(Enum):
    """Transport state as shown by the UI."""

    STOPPED = auto()
    PLAYING = auto()
    RECORDING = auto()
    PAUSED = auto()


@dataclass
class TrackDisplay:
    """Per-track flags and mixer settings shown by the UI."""

    armed: bool = False
    muted: bool = False
    solo: bool = False
    level: float = 0.8
    pan: float = 0.0
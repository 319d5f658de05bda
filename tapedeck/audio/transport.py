"""Tape transport: playhead, record state and looping."""

from __future__ import annotations

from enum import Enum, auto

from tapedeck.constants import TRACK_SAMPLES


class TransportState(Enum):
    """Motion state of the tape."""

    STOPPED = auto()
    PLAYING = auto()
    RECORDING = auto()
    PAUSED = auto()


class Transport:
    """Playhead position and record/loop state, advanced one sample at a time."""

    def __init__(self) -> None:
        self.state = TransportState.STOPPED
        self.position = 0
        self.recording_track: int | None = None
        # Furthest sample position reached.
        self.max_position = 0
        self._loop_enabled = True
        self._loop_end: int | None = None

    @property
    def loop_enabled(self) -> bool:
        """Whether playback wraps at the loop end; disabling clears the loop end."""
        return self._loop_enabled

    @loop_enabled.setter
    def loop_enabled(self, enabled: bool) -> None:
        self._loop_enabled = enabled
        if not enabled:
            self._loop_end = None

    @property
    def loop_end(self) -> int | None:
        """Sample position at which looping wraps; only kept while looping is on."""
        return self._loop_end

    @loop_end.setter
    def loop_end(self, value: int | None) -> None:
        if self._loop_enabled and value is not None and value > 0:
            self._loop_end = value
        else:
            self._loop_end = None

    def play(self) -> None:
        if self.state in (TransportState.STOPPED, TransportState.PAUSED):
            self.state = TransportState.PLAYING

    def pause(self) -> None:
        if self.state is TransportState.PLAYING:
            self.state = TransportState.PAUSED
        elif self.state is TransportState.PAUSED:
            self.state = TransportState.PLAYING

    def stop(self) -> None:
        self.state = TransportState.STOPPED
        self.recording_track = None
        self.position = 0

    def record(self, track: int) -> None:
        self.state = TransportState.RECORDING
        self.recording_track = track

    def stop_record(self) -> None:
        self.recording_track = None
        self.state = TransportState.PLAYING

    def seek(self, pos: int) -> None:
        """Move the playhead, clamped to the loop or tape end."""
        end = TRACK_SAMPLES
        if self._loop_enabled and self._loop_end is not None:
            end = self._loop_end
        self.position = max(0, min(pos, max(end - 1, 0)))

    def advance(self) -> bool:
        """Step one sample forward; returns whether the tape is moving."""
        if not self.is_playing():
            return False
        self.position += 1
        if (
            self._loop_enabled
            and self._loop_end is not None
            and self.position >= self._loop_end
        ):
            self.position = 0
        self.max_position = max(self.max_position, self.position)
        return True

    def is_playing(self) -> bool:
        return self.state in (TransportState.PLAYING, TransportState.RECORDING)
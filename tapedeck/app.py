"""Application mode and UI-side state."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from tapedeck.constants import SAMPLE_RATE, TRACK_COUNT
from tapedeck.messages import RecordSource, TrackDisplay, TransportDisplay


class AppMode(Enum):
    """Screen the user is working in."""

    TAPE = "TAPE"
    SYNTH = "SYNTH"
    DRUM = "DRUM"
    MIXER = "MIXER"

    def next(self) -> AppMode:
        """Return the mode that follows this one."""
        modes = list(AppMode)
        return modes[(modes.index(self) + 1) % len(modes)]

    def label(self) -> str:
        """Label shown in the mode indicator."""
        return self.value


def _per_track(factory):
    return field(default_factory=lambda: [factory() for _ in range(TRACK_COUNT)])


@dataclass
class AppState:
    """Everything the UI needs to draw a frame."""

    mode: AppMode = AppMode.TAPE
    selected_track: int = 0
    transport: TransportDisplay = TransportDisplay.STOPPED
    loop_enabled: bool = True
    position: int = 0
    track_displays: list[TrackDisplay] = _per_track(TrackDisplay)
    levels: list[float] = _per_track(float)
    peaks: list[float] = _per_track(float)
    master_level: tuple[float, float] = (0.0, 0.0)
    should_quit: bool = False
    synth_engine: int = 0
    synth_params: list[float] = field(default_factory=lambda: [0.5] * 4)
    bpm: float = 120.0
    selected_instrument: int = 0
    drum_patterns: list[list[bool]] = field(
        default_factory=lambda: [[False] * 16 for _ in range(6)]
    )
    current_step: int = 0
    tape_sim_enabled: bool = False
    tape_speed: float = 1.0
    waveform_data: list[list[float]] = _per_track(list)
    effect_names: list[list[str]] = _per_track(lambda: [""] * 3)
    effect_bypassed: list[list[bool]] = _per_track(lambda: [False] * 3)
    record_source: RecordSource = RecordSource.INTERNAL

    def position_secs(self) -> float:
        """Playhead position in seconds."""
        return self.position / SAMPLE_RATE

    def position_display(self) -> str:
        """Playhead position formatted as MM:SS.ss."""
        secs = self.position_secs()
        mins = int(secs / 60.0)
        return f"{mins:02d}:{secs % 60.0:05.2f}"
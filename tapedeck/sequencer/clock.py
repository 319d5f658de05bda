"""Tempo clock deriving 16th-note steps from the sample position."""

from __future__ import annotations

from tapedeck.constants import SAMPLE_RATE

MIN_BPM = 40.0
MAX_BPM = 300.0
STEPS = 16


class SequencerClock:
    """Maps sample positions to steps of a 16-step bar."""

    def __init__(self, bpm: float) -> None:
        self._bpm = bpm
        self._last_step: int | None = None

    @property
    def bpm(self) -> float:
        """Tempo in beats per minute; assignments are clamped to 40-300."""
        return self._bpm

    @bpm.setter
    def bpm(self, value: float) -> None:
        self._bpm = min(max(value, MIN_BPM), MAX_BPM)

    def tick(self, sample_position: int) -> tuple[int, bool]:
        """Return the step at ``sample_position`` and whether it differs from the last one."""
        samples_per_beat = int(SAMPLE_RATE * 60.0 / self._bpm)
        samples_per_step = max(samples_per_beat // 4, 1)
        step = (sample_position // samples_per_step) % STEPS
        is_new = step != self._last_step
        self._last_step = step
        return step, is_new

    def reset(self) -> None:
        """Forget the last step so the next tick reports a new one."""
        self._last_step = None
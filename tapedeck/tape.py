"""Tape character simulation and variable-speed reading."""

from __future__ import annotations

import math
from collections.abc import Sequence

from tapedeck.constants import SAMPLE_RATE

_U32 = 0xFFFFFFFF


class TapeSimulation:
    """Saturation, high-frequency rolloff, hiss, and wow/flutter modulation."""

    def __init__(self) -> None:
        self.enabled = False
        self._wow_phase = 0.0
        self.wow_depth = 0.002
        self.wow_rate = 1.0
        self._flutter_phase = 0.0
        self.flutter_depth = 0.0003
        self.flutter_rate = 8.0
        self.drive = 2.0
        self._noise_state = 42
        self.hiss_level = 0.005
        self.rolloff_freq = 14000.0
        self._lp_left = 0.0
        self._lp_right = 0.0

    def process_stereo(self, left: float, right: float) -> tuple[float, float]:
        """Return the processed stereo pair; unchanged while disabled."""
        if not self.enabled:
            return left, right

        norm = math.tanh(self.drive)
        left = math.tanh(left * self.drive) / norm
        right = math.tanh(right * self.drive) / norm

        rc = 1.0 / (2.0 * math.pi * self.rolloff_freq)
        dt = 1.0 / SAMPLE_RATE
        alpha = dt / (rc + dt)
        self._lp_left += alpha * (left - self._lp_left)
        self._lp_right += alpha * (right - self._lp_right)

        self._noise_state = (self._noise_state * 1664525 + 1013904223) & _U32
        noise = self._noise_state / _U32 * 2.0 - 1.0
        return (
            self._lp_left + noise * self.hiss_level,
            self._lp_right + noise * self.hiss_level * 0.8,
        )

    def pitch_offset(self) -> float:
        """Advance the wow and flutter LFOs and return their offset in samples."""
        wow = math.sin(self._wow_phase * math.tau) * self.wow_depth * SAMPLE_RATE
        self._wow_phase += self.wow_rate / SAMPLE_RATE
        if self._wow_phase >= 1.0:
            self._wow_phase -= 1.0

        flutter = (
            math.sin(self._flutter_phase * math.tau) * self.flutter_depth * SAMPLE_RATE
        )
        self._flutter_phase += self.flutter_rate / SAMPLE_RATE
        if self._flutter_phase >= 1.0:
            self._flutter_phase -= 1.0

        return wow + flutter


class SpeedControl:
    """Playback speed and cubic-interpolated reads at fractional positions."""

    def __init__(self) -> None:
        self._speed = 1.0
        self._fractional_pos = 0.0

    @property
    def speed(self) -> float:
        """Speed multiplier; assignments are clamped to 0.25-4.0."""
        return self._speed

    @speed.setter
    def speed(self, value: float) -> None:
        self._speed = min(max(value, 0.25), 4.0)

    def advance(self, base_position: int) -> float:
        """Return the read position for ``base_position``."""
        self._fractional_pos = float(base_position)
        return self._fractional_pos

    def read_interpolated(self, buffer: Sequence[float], position: float) -> float:
        """Sample of ``buffer`` at ``position`` using cubic Hermite interpolation."""
        length = len(buffer)
        if length < 4:
            return 0.0

        pos = max(position, 0.0)
        idx = int(pos)
        frac = pos - idx

        if idx + 2 >= length:
            return buffer[idx] if idx < length else 0.0

        y0 = buffer[idx - 1] if idx > 0 else buffer[0]
        y1 = buffer[idx]
        y2 = buffer[idx + 1]
        y3 = buffer[idx + 2]

        a = -0.5 * y0 + 1.5 * y1 - 1.5 * y2 + 0.5 * y3
        b = y0 - 2.5 * y1 + 2.0 * y2 - 0.5 * y3
        c = -0.5 * y0 + 0.5 * y2
        return ((a * frac + b) * frac + c) * frac + y1
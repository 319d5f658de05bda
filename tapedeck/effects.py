"""Per-track audio effects and the chain that applies them."""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import Enum, auto

from tapedeck.constants import SAMPLE_RATE


def _clamp(value: float, low: float, high: float) -> float:
    return min(max(value, low), high)


class Effect(ABC):
    """An audio processor with indexed parameters and a bypass switch."""

    name: str = ""
    PARAM_NAMES: tuple[str, ...] = ()

    def __init__(self) -> None:
        self.bypassed = False

    @abstractmethod
    def process(self, samples: Iterable[float]) -> list[float]:
        """Return the processed copy of ``samples``."""

    @abstractmethod
    def set_param(self, index: int, value: float) -> None:
        """Set parameter ``index``; unknown indices are ignored."""

    @property
    def param_count(self) -> int:
        return len(self.PARAM_NAMES)

    def param_name(self, index: int) -> str:
        """Display name of parameter ``index``, or an empty string."""
        if 0 <= index < len(self.PARAM_NAMES):
            return self.PARAM_NAMES[index]
        return ""


@dataclass
class EffectChain:
    """Effects applied in order, skipping the bypassed ones."""

    effects: list[Effect] = field(default_factory=list)

    def process(self, samples: Iterable[float]) -> list[float]:
        result = list(samples)
        for effect in self.effects:
            if not effect.bypassed:
                result = effect.process(result)
        return result

    def add(self, effect: Effect) -> None:
        self.effects.append(effect)


class Reverb(Effect):
    """Four feedback delay lines of unequal length for a diffuse tail."""

    name = "REVERB"
    PARAM_NAMES = ("MIX", "DECAY")
    _LENGTHS = (1557, 1617, 1491, 1422)

    def __init__(self) -> None:
        super().__init__()
        self._lines = [[0.0] * length for length in self._LENGTHS]
        self._write_positions = [0] * len(self._LENGTHS)
        self.mix = 0.3
        self.decay = 0.6

    def process(self, samples: Iterable[float]) -> list[float]:
        out = []
        for dry in samples:
            wet = 0.0
            for i, line in enumerate(self._lines):
                pos = self._write_positions[i]
                delayed = line[(pos + 1) % len(line)]
                wet += delayed * 0.25
                line[pos] = dry + delayed * self.decay
                self._write_positions[i] = (pos + 1) % len(line)
            out.append(dry * (1.0 - self.mix) + wet * self.mix)
        return out

    def set_param(self, index: int, value: float) -> None:
        if index == 0:
            self.mix = _clamp(value, 0.0, 1.0)
        elif index == 1:
            self.decay = _clamp(value, 0.1, 0.95)


class Delay(Effect):
    """Feedback echo with up to two seconds of delay."""

    name = "DELAY"
    PARAM_NAMES = ("TIME", "FDBK", "MIX")

    def __init__(self) -> None:
        super().__init__()
        self._buffer = [0.0] * (SAMPLE_RATE * 2)
        self._write_pos = 0
        self.time = 0.375
        self.feedback = 0.4
        self.mix = 0.3

    def process(self, samples: Iterable[float]) -> list[float]:
        size = len(self._buffer)
        delay_samples = max(min(int(self.time * SAMPLE_RATE), size - 1), 1)
        out = []
        for sample in samples:
            delayed = self._buffer[(self._write_pos + size - delay_samples) % size]
            self._buffer[self._write_pos] = sample + delayed * self.feedback
            self._write_pos = (self._write_pos + 1) % size
            out.append(sample * (1.0 - self.mix) + delayed * self.mix)
        return out

    def set_param(self, index: int, value: float) -> None:
        if index == 0:
            self.time = _clamp(value, 0.01, 2.0)
        elif index == 1:
            self.feedback = _clamp(value, 0.0, 0.9)
        elif index == 2:
            self.mix = _clamp(value, 0.0, 1.0)


class FilterMode(Enum):
    LOW_PASS = auto()
    HIGH_PASS = auto()
    BAND_PASS = auto()


class Filter(Effect):
    """State-variable filter with selectable output."""

    name = "FILTER"
    PARAM_NAMES = ("CUTOFF", "RESO", "MODE")

    def __init__(self) -> None:
        super().__init__()
        self.cutoff = 0.5
        self.resonance = 0.3
        self.mode = FilterMode.LOW_PASS
        self._lp = 0.0
        self._bp = 0.0

    def process(self, samples: Iterable[float]) -> list[float]:
        f = _clamp(self.cutoff * self.cutoff, 0.001, 0.99)
        q = 1.0 - _clamp(self.resonance, 0.0, 0.95)
        out = []
        for sample in samples:
            self._lp += f * self._bp
            hp = sample - self._lp - q * self._bp
            self._bp += f * hp
            if self.mode is FilterMode.LOW_PASS:
                out.append(self._lp)
            elif self.mode is FilterMode.HIGH_PASS:
                out.append(hp)
            else:
                out.append(self._bp)
        return out

    def set_param(self, index: int, value: float) -> None:
        if index == 0:
            self.cutoff = _clamp(value, 0.01, 1.0)
        elif index == 1:
            self.resonance = _clamp(value, 0.0, 0.95)
        elif index == 2:
            if value < 0.33:
                self.mode = FilterMode.LOW_PASS
            elif value < 0.66:
                self.mode = FilterMode.HIGH_PASS
            else:
                self.mode = FilterMode.BAND_PASS


class Distortion(Effect):
    """Normalised tanh saturation blended with the dry signal."""

    name = "DIST"
    PARAM_NAMES = ("DRIVE", "MIX")

    def __init__(self) -> None:
        super().__init__()
        self.drive = 2.0
        self.mix = 0.5

    def process(self, samples: Iterable[float]) -> list[float]:
        norm = math.tanh(self.drive)
        return [
            dry * (1.0 - self.mix) + math.tanh(dry * self.drive) / norm * self.mix
            for dry in samples
        ]

    def set_param(self, index: int, value: float) -> None:
        if index == 0:
            self.drive = _clamp(value, 1.0, 10.0)
        elif index == 1:
            self.mix = _clamp(value, 0.0, 1.0)


class Chorus(Effect):
    """Short delay modulated by a sine LFO."""

    name = "CHORUS"
    PARAM_NAMES = ("RATE", "DEPTH", "MIX")

    def __init__(self) -> None:
        super().__init__()
        self._buffer = [0.0] * SAMPLE_RATE
        self._write_pos = 0
        self._lfo_phase = 0.0
        self.rate = 0.5
        self.depth = 0.003
        self.mix = 0.5

    def process(self, samples: Iterable[float]) -> list[float]:
        size = len(self._buffer)
        out = []
        for dry in samples:
            self._buffer[self._write_pos] = dry
            lfo = math.sin(self._lfo_phase * math.tau)
            delay_samples = int(max(self.depth * SAMPLE_RATE * (1.0 + lfo) * 0.5, 1.0))
            delayed = self._buffer[(self._write_pos + size - delay_samples) % size]
            self._write_pos = (self._write_pos + 1) % size
            self._lfo_phase += self.rate / SAMPLE_RATE
            if self._lfo_phase >= 1.0:
                self._lfo_phase -= 1.0
            out.append(dry * (1.0 - self.mix) + delayed * self.mix)
        return out

    def set_param(self, index: int, value: float) -> None:
        if index == 0:
            self.rate = _clamp(value, 0.1, 5.0)
        elif index == 1:
            self.depth = _clamp(value, 0.001, 0.02)
        elif index == 2:
            self.mix = _clamp(value, 0.0, 1.0)
"""Common interface of the synthesiser engines."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence


def midi_to_freq(note: int) -> float:
    """Frequency in Hz of MIDI ``note`` in equal temperament (A4 = 440 Hz)."""
    return 440.0 * 2.0 ** ((note - 69) / 12.0)


class SynthEngine(ABC):
    """A polyphonic instrument played by note events."""

    name: str = ""
    PARAM_NAMES: tuple[str, ...] = ()

    @abstractmethod
    def note_on(self, note: int, velocity: float) -> None:
        """Start sounding ``note``."""

    @abstractmethod
    def note_off(self, note: int) -> None:
        """Release ``note``."""

    @abstractmethod
    def process(self, output: Sequence[float]) -> list[float]:
        """Return ``output`` with the next block of this engine's signal added."""

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
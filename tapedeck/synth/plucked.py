"""Karplus-Strong plucked-string synthesiser."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field

from tapedeck.constants import SAMPLE_RATE
from tapedeck.synth.core import SynthEngine, midi_to_freq

MAX_VOICES = 8
_U32 = 0xFFFFFFFF


@dataclass
class _StringVoice:
    delay_line: list[float] = field(default_factory=lambda: [0.0] * 1024)
    write_pos: int = 0
    active: bool = False
    note: int = 0
    envelope: float = 0.0
    releasing: bool = False
    prev_sample: float = 0.0


class StringSynth(SynthEngine):
    """A noise burst circulating in a damped, averaging delay line."""

    name = "STRING"
    PARAM_NAMES = ("BRIGHT", "DAMP", "ATTACK", "DECAY")

    def __init__(self) -> None:
        self._voices = [_StringVoice() for _ in range(MAX_VOICES)]
        self.brightness = 0.5
        self.damping = 0.996
        self.attack = 0.001
        self.decay = 2.0

    def note_on(self, note: int, velocity: float) -> None:
        """Pluck ``note``: fill a pitch-length delay line with seeded noise."""
        slot = next((i for i, v in enumerate(self._voices) if not v.active), 0)
        delay_len = min(max(int(SAMPLE_RATE / midi_to_freq(note)), 2), 4096)

        rng_state = (note * 1664525 + 1013904223) & _U32
        delay_line = []
        for _ in range(delay_len):
            rng_state = (rng_state * 1664525 + 1013904223) & _U32
            delay_line.append((rng_state / _U32 * 2.0 - 1.0) * self.brightness)

        self._voices[slot] = _StringVoice(
            delay_line=delay_line, active=True, note=note, envelope=1.0
        )

    def note_off(self, note: int) -> None:
        for voice in self._voices:
            if voice.active and voice.note == note:
                voice.releasing = True

    def _next_sample(self, decay_rate: float) -> float:
        total = 0.0
        for voice in self._voices:
            if not voice.active:
                continue
            if voice.releasing:
                voice.envelope -= decay_rate
                if voice.envelope <= 0.0:
                    voice.active = False
                    continue

            length = len(voice.delay_line)
            if length < 2:
                voice.active = False
                continue

            current = voice.delay_line[voice.write_pos]
            filtered = (current + voice.prev_sample) * 0.5 * self.damping
            voice.prev_sample = current
            voice.delay_line[voice.write_pos] = filtered
            voice.write_pos = (voice.write_pos + 1) % length

            total += filtered * voice.envelope * 0.4
        return total

    def process(self, output: Sequence[float]) -> list[float]:
        decay_rate = 1.0 / max(self.decay * SAMPLE_RATE, 1.0)
        return [sample + self._next_sample(decay_rate) for sample in output]

    def set_param(self, index: int, value: float) -> None:
        if index == 0:
            self.brightness = min(max(value, 0.1), 1.0)
        elif index == 1:
            self.damping = 0.99 + value * 0.009
        elif index == 2:
            self.attack = min(max(value, 0.001), 0.1)
        elif index == 3:
            self.decay = min(max(value, 0.1), 10.0)
"""Polyphonic sine-wave synthesiser."""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass

from tapedeck.constants import SAMPLE_RATE
from tapedeck.synth.core import SynthEngine, midi_to_freq

MAX_VOICES = 8


@dataclass
class _SineVoice:
    phase: float = 0.0
    freq: float = 0.0
    active: bool = False
    envelope: float = 0.0
    note: int = 0
    releasing: bool = False


class SineSynth(SynthEngine):
    """Pure sine voices with a linear attack/release envelope."""

    name = "SINE"
    PARAM_NAMES = ("DETUNE", "--", "ATTACK", "DECAY")

    def __init__(self) -> None:
        self._voices = [_SineVoice() for _ in range(MAX_VOICES)]
        self.attack = 0.01
        self.decay = 0.3

    def note_on(self, note: int, velocity: float) -> None:
        """Start ``note`` on a free voice, or on the first voice if all are busy."""
        slot = next((i for i, v in enumerate(self._voices) if not v.active), 0)
        self._voices[slot] = _SineVoice(freq=midi_to_freq(note), active=True, note=note)

    def note_off(self, note: int) -> None:
        for voice in self._voices:
            if voice.active and voice.note == note:
                voice.releasing = True

    def _next_sample(self, attack_rate: float, decay_rate: float) -> float:
        total = 0.0
        for voice in self._voices:
            if not voice.active:
                continue
            if voice.releasing:
                voice.envelope -= decay_rate
                if voice.envelope <= 0.0:
                    voice.active = False
                    voice.envelope = 0.0
                    continue
            elif voice.envelope < 1.0:
                voice.envelope = min(voice.envelope + attack_rate, 1.0)

            total += math.sin(voice.phase * math.tau) * voice.envelope * 0.3

            voice.phase += voice.freq / SAMPLE_RATE
            if voice.phase >= 1.0:
                voice.phase -= 1.0
        return total

    def process(self, output: Sequence[float]) -> list[float]:
        attack_rate = 1.0 / max(self.attack * SAMPLE_RATE, 1.0)
        decay_rate = 1.0 / max(self.decay * SAMPLE_RATE, 1.0)
        return [sample + self._next_sample(attack_rate, decay_rate) for sample in output]

    def set_param(self, index: int, value: float) -> None:
        # Parameters 0 and 1 have no effect on a pure sine.
        if index == 2:
            self.attack = min(max(value, 0.001), 2.0)
        elif index == 3:
            self.decay = min(max(value, 0.01), 5.0)
"""Polyphonic two-operator FM synthesiser."""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass

from tapedeck.constants import SAMPLE_RATE
from tapedeck.synth.core import SynthEngine, midi_to_freq

MAX_VOICES = 8


@dataclass
class _FmVoice:
    carrier_phase: float = 0.0
    mod_phase: float = 0.0
    freq: float = 0.0
    active: bool = False
    envelope: float = 0.0
    note: int = 0
    releasing: bool = False


class FmSynth(SynthEngine):
    """Sine carrier frequency-modulated by a sine at a whole-number ratio."""

    name = "FM"
    PARAM_NAMES = ("RATIO", "MOD IX", "ATTACK", "DECAY")

    def __init__(self) -> None:
        self._voices = [_FmVoice() for _ in range(MAX_VOICES)]
        self.ratio = 2.0
        self.mod_index = 1.5
        self.attack = 0.01
        self.decay = 0.8

    def note_on(self, note: int, velocity: float) -> None:
        """Start ``note`` on a free voice, or on the first voice if all are busy."""
        slot = next((i for i, v in enumerate(self._voices) if not v.active), 0)
        self._voices[slot] = _FmVoice(freq=midi_to_freq(note), active=True, note=note)

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
                    continue
            elif voice.envelope < 1.0:
                voice.envelope = min(voice.envelope + attack_rate, 1.0)

            mod_freq = voice.freq * self.ratio
            modulator = math.sin(voice.mod_phase * math.tau)
            carrier_freq = voice.freq + modulator * self.mod_index * voice.freq
            carrier = math.sin(voice.carrier_phase * math.tau)

            total += carrier * voice.envelope * 0.25

            voice.carrier_phase += carrier_freq / SAMPLE_RATE
            voice.mod_phase += mod_freq / SAMPLE_RATE
            if voice.carrier_phase >= 1.0:
                voice.carrier_phase -= 1.0
            if voice.mod_phase >= 1.0:
                voice.mod_phase -= 1.0
        return total

    def process(self, output: Sequence[float]) -> list[float]:
        attack_rate = 1.0 / max(self.attack * SAMPLE_RATE, 1.0)
        decay_rate = 1.0 / max(self.decay * SAMPLE_RATE, 1.0)
        return [sample + self._next_sample(attack_rate, decay_rate) for sample in output]

    def set_param(self, index: int, value: float) -> None:
        if index == 0:
            # Round half away from zero; anything below one becomes one.
            self.ratio = max(float(math.floor(value * 8.0 + 0.5)), 1.0)
        elif index == 1:
            self.mod_index = value * 5.0
        elif index == 2:
            self.attack = min(max(value, 0.001), 2.0)
        elif index == 3:
            self.decay = min(max(value, 0.01), 5.0)
"""Polyphonic filtered-noise synthesiser, suited to percussion."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from tapedeck.constants import SAMPLE_RATE
from tapedeck.synth.core import SynthEngine

MAX_VOICES = 8
_U32 = 0xFFFFFFFF


@dataclass
class _NoiseVoice:
    active: bool = False
    note: int = 0
    envelope: float = 0.0
    releasing: bool = False
    rng_state: int = 12345
    filter_lp: float = 0.0
    filter_bp: float = 0.0


class NoiseSynth(SynthEngine):
    """White noise per voice through a state-variable lowpass filter."""

    name = "NOISE"
    PARAM_NAMES = ("CUTOFF", "RESO", "ATTACK", "DECAY")

    def __init__(self) -> None:
        self._voices = [_NoiseVoice() for _ in range(MAX_VOICES)]
        self.cutoff = 0.4
        self.resonance = 0.3
        self.attack = 0.001
        self.decay = 0.2

    def note_on(self, note: int, velocity: float) -> None:
        """Start ``note`` with a noise generator seeded from the note number."""
        slot = next((i for i, v in enumerate(self._voices) if not v.active), 0)
        self._voices[slot] = _NoiseVoice(
            active=True,
            note=note,
            rng_state=(note * 1664525 + 1013904223) & _U32,
        )

    def note_off(self, note: int) -> None:
        for voice in self._voices:
            if voice.active and voice.note == note:
                voice.releasing = True

    def _next_sample(
        self, attack_rate: float, decay_rate: float, f: float, q: float
    ) -> float:
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

            voice.rng_state = (voice.rng_state * 1664525 + 1013904223) & _U32
            noise = voice.rng_state / _U32 * 2.0 - 1.0

            voice.filter_lp += f * voice.filter_bp
            hp = noise - voice.filter_lp - q * voice.filter_bp
            voice.filter_bp += f * hp

            total += voice.filter_lp * voice.envelope * 0.3
        return total

    def process(self, output: Sequence[float]) -> list[float]:
        attack_rate = 1.0 / max(self.attack * SAMPLE_RATE, 1.0)
        decay_rate = 1.0 / max(self.decay * SAMPLE_RATE, 1.0)
        f = min(max(self.cutoff * self.cutoff * 0.99, 0.001), 0.99)
        q = 1.0 - min(max(self.resonance, 0.0), 0.95)
        return [
            sample + self._next_sample(attack_rate, decay_rate, f, q)
            for sample in output
        ]

    def set_param(self, index: int, value: float) -> None:
        if index == 0:
            self.cutoff = min(max(value, 0.01), 1.0)
        elif index == 1:
            self.resonance = min(max(value, 0.0), 0.95)
        elif index == 2:
            self.attack = min(max(value, 0.001), 2.0)
        elif index == 3:
            self.decay = min(max(value, 0.01), 5.0)
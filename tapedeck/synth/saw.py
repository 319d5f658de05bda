"""Polyphonic band-limited sawtooth synthesiser with a simple filter."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from tapedeck.constants import SAMPLE_RATE
from tapedeck.synth.core import SynthEngine, midi_to_freq

MAX_VOICES = 8


@dataclass
class _SawVoice:
    phase: float = 0.0
    freq: float = 0.0
    active: bool = False
    envelope: float = 0.0
    note: int = 0
    releasing: bool = False
    filter_state: float = 0.0


class SawSynth(SynthEngine):
    """PolyBLEP sawtooth voices through a one-pole lowpass with resonance emphasis."""

    name = "SAW"
    PARAM_NAMES = ("CUTOFF", "RESO", "ATTACK", "DECAY")

    def __init__(self) -> None:
        self._voices = [_SawVoice() for _ in range(MAX_VOICES)]
        self.cutoff = 0.5
        self.resonance = 0.3
        self.attack = 0.01
        self.decay = 0.5

    def note_on(self, note: int, velocity: float) -> None:
        """Start ``note`` on a free voice, or on the first voice if all are busy."""
        slot = next((i for i, v in enumerate(self._voices) if not v.active), 0)
        self._voices[slot] = _SawVoice(freq=midi_to_freq(note), active=True, note=note)

    def note_off(self, note: int) -> None:
        for voice in self._voices:
            if voice.active and voice.note == note:
                voice.releasing = True

    def _next_sample(self, attack_rate: float, decay_rate: float, coeff: float) -> float:
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

            t = voice.phase
            dt = voice.freq / SAMPLE_RATE
            raw = 2.0 * t - 1.0
            if t < dt:
                t_norm = t / dt
                raw += 2.0 * t_norm - t_norm * t_norm - 1.0
            elif t > 1.0 - dt:
                t_norm = (t - 1.0) / dt
                raw += t_norm * t_norm + 2.0 * t_norm + 1.0

            voice.filter_state += coeff * (raw - voice.filter_state)
            filtered = voice.filter_state + self.resonance * (voice.filter_state - raw)
            total += filtered * voice.envelope * 0.25

            voice.phase += voice.freq / SAMPLE_RATE
            if voice.phase >= 1.0:
                voice.phase -= 1.0
        return total

    def process(self, output: Sequence[float]) -> list[float]:
        attack_rate = 1.0 / max(self.attack * SAMPLE_RATE, 1.0)
        decay_rate = 1.0 / max(self.decay * SAMPLE_RATE, 1.0)
        coeff = min(max(self.cutoff * self.cutoff, 0.001), 0.999)
        return [
            sample + self._next_sample(attack_rate, decay_rate, coeff)
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
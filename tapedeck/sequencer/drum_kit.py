"""Synthesised drum voices."""

from __future__ import annotations

import math
from dataclasses import dataclass, field

from tapedeck.constants import SAMPLE_RATE

_U32 = 0xFFFFFFFF


@dataclass
class DrumVoice:
    """Decaying oscillator with pitch sweep and a noise component."""

    freq: float
    decay: float
    noise_state: int
    noise_amount: float
    pitch_decay: float
    pitch_amount: float
    phase: float = 0.0
    envelope: float = 0.0
    active: bool = False
    pitch_env: float = 0.0

    def trigger(self) -> None:
        self.phase = 0.0
        self.envelope = 1.0
        self.pitch_env = 1.0
        self.active = True

    def process(self) -> float:
        """Produce the next sample; silence when not sounding."""
        if not self.active:
            return 0.0

        self.pitch_env *= self.pitch_decay
        freq = self.freq + self.pitch_amount * self.pitch_env

        osc = math.sin(self.phase * math.tau)
        self.phase += freq / SAMPLE_RATE
        if self.phase >= 1.0:
            self.phase -= 1.0

        self.noise_state = (self.noise_state * 1664525 + 1013904223) & _U32
        noise = self.noise_state / _U32 * 2.0 - 1.0

        sample = osc * (1.0 - self.noise_amount) + noise * self.noise_amount

        self.envelope *= self.decay
        if self.envelope < 0.001:
            self.active = False

        return sample * self.envelope


def _default_voices() -> list[DrumVoice]:
    return [
        # Kick: long boom
        DrumVoice(freq=55.0, decay=0.99995, noise_state=1, noise_amount=0.05,
                  pitch_decay=0.999, pitch_amount=200.0),
        # Snare: crack with noise tail
        DrumVoice(freq=180.0, decay=0.99992, noise_state=2, noise_amount=0.6,
                  pitch_decay=0.998, pitch_amount=80.0),
        # Hi-hat: bright noise
        DrumVoice(freq=800.0, decay=0.99984, noise_state=3, noise_amount=0.95,
                  pitch_decay=0.999, pitch_amount=0.0),
        # Clap: noise burst
        DrumVoice(freq=400.0, decay=0.99988, noise_state=4, noise_amount=0.8,
                  pitch_decay=0.997, pitch_amount=50.0),
        # Tom: medium boom
        DrumVoice(freq=100.0, decay=0.99994, noise_state=5, noise_amount=0.1,
                  pitch_decay=0.9995, pitch_amount=150.0),
        # Rim: short click
        DrumVoice(freq=600.0, decay=0.99980, noise_state=6, noise_amount=0.3,
                  pitch_decay=0.996, pitch_amount=100.0),
    ]


@dataclass
class DrumKit:
    """Six drum voices summed into one signal."""

    voices: list[DrumVoice] = field(default_factory=_default_voices)
    names: list[str] = field(
        default_factory=lambda: ["KICK", "SNARE", "HAT", "CLAP", "TOM", "RIM"]
    )

    def trigger(self, instrument: int) -> None:
        """Start ``instrument``; unknown indices are ignored."""
        if 0 <= instrument < len(self.voices):
            self.voices[instrument].trigger()

    def process(self) -> float:
        return sum(voice.process() for voice in self.voices) * 0.5
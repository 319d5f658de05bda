"""Per-track gain, pan, mute and solo mixed down to stereo."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field

from tapedeck.constants import TRACK_COUNT


@dataclass
class MixerState:
    """Mixer settings for every track."""

    levels: list[float] = field(default_factory=lambda: [0.8] * TRACK_COUNT)
    pans: list[float] = field(default_factory=lambda: [0.0] * TRACK_COUNT)
    mutes: list[bool] = field(default_factory=lambda: [False] * TRACK_COUNT)
    solos: list[bool] = field(default_factory=lambda: [False] * TRACK_COUNT)

    def track_gain(self, track: int) -> tuple[float, float]:
        """Left and right gain for ``track``."""
        if self.mutes[track]:
            return (0.0, 0.0)
        if any(self.solos) and not self.solos[track]:
            return (0.0, 0.0)
        level = self.levels[track]
        pan = self.pans[track]
        return (level * (1.0 - max(pan, 0.0)), level * (1.0 + min(pan, 0.0)))

    def mix(self, track_samples: Sequence[float]) -> tuple[float, float]:
        """Mix one sample per track into a stereo pair."""
        left = right = 0.0
        for track, sample in enumerate(track_samples[:TRACK_COUNT]):
            gain_l, gain_r = self.track_gain(track)
            left += sample * gain_l
            right += sample * gain_r
        return (left, right)
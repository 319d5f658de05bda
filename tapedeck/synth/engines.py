"""Registry of the available synthesiser engines."""

from __future__ import annotations

from tapedeck.synth.core import SynthEngine
from tapedeck.synth.fm import FmSynth
from tapedeck.synth.noise import NoiseSynth
from tapedeck.synth.plucked import StringSynth
from tapedeck.synth.saw import SawSynth
from tapedeck.synth.sine import SineSynth

_ENGINES: tuple[type[SynthEngine], ...] = (
    SineSynth,
    SawSynth,
    FmSynth,
    StringSynth,
    NoiseSynth,
)

ENGINE_COUNT = len(_ENGINES)
ENGINE_NAMES = tuple(engine.name for engine in _ENGINES)


def create_engine(index: int) -> SynthEngine:
    """Build a fresh engine by index; unknown indices give the sine engine."""
    if 0 <= index < ENGINE_COUNT:
        return _ENGINES[index]()
    return SineSynth()
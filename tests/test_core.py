import pytest

from tapedeck.synth.core import SynthEngine, midi_to_freq


class _Silent(SynthEngine):
    name = "SILENT"
    PARAM_NAMES = ("ONE", "TWO")

    def __init__(self):
        self.notes = set()
        self.gain = 0.0

    def note_on(self, note, velocity):
        self.notes.add(note)

    def note_off(self, note):
        self.notes.discard(note)

    def process(self, output):
        return [s + self.gain for s in output]

    def set_param(self, index, value):
        if index == 0:
            self.gain = value


def test_a4_is_440():
    assert midi_to_freq(69) == pytest.approx(440.0)


def test_middle_c_frequency():
    assert midi_to_freq(60) == pytest.approx(261.6255653, rel=1e-6)


@pytest.mark.parametrize("note", [30, 48, 60, 69, 100])
def test_octave_doubles_frequency(note):
    assert midi_to_freq(note + 12) == pytest.approx(2.0 * midi_to_freq(note))


def test_frequency_rises_with_note():
    freqs = [midi_to_freq(n) for n in range(0, 128)]
    assert freqs == sorted(freqs)
    assert len(set(freqs)) == len(freqs)


def test_engine_is_abstract():
    with pytest.raises(TypeError):
        SynthEngine()


def test_param_names_from_subclass():
    engine = _Silent()
    assert engine.param_count == 2
    assert SynthEngine.param_name(engine, 0) == "ONE"
    assert SynthEngine.param_name(engine, 1) == "TWO"
    assert SynthEngine.param_name(engine, 2) == ""
    assert SynthEngine.param_name(engine, -1) == ""
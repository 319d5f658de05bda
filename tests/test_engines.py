import pytest

from tapedeck.synth.engines import ENGINE_COUNT, ENGINE_NAMES, create_engine
from tapedeck.synth.sine import SineSynth


def test_engine_names_in_order():
    names = [create_engine(i).name for i in range(ENGINE_COUNT)]
    assert names == ["SINE", "SAW", "FM", "STRING", "NOISE"]
    assert list(ENGINE_NAMES) == names


@pytest.mark.parametrize("index", range(5))
def test_create_engine_matches_name(index):
    assert create_engine(index).name == ENGINE_NAMES[index]


@pytest.mark.parametrize("index", [5, 99, -1])
def test_unknown_index_gives_sine(index):
    engine = create_engine(index)
    assert isinstance(engine, SineSynth)
    assert engine.name == "SINE"
    assert engine.param_name(0) == "DETUNE"


def test_created_engines_are_independent():
    first = create_engine(0)
    second = create_engine(0)
    first.note_on(60, 1.0)
    assert second.process([0.0] * 100) == [0.0] * 100
    assert any(v != 0.0 for v in first.process([0.0] * 100))


@pytest.mark.parametrize("index", range(5))
def test_every_engine_has_four_params(index):
    engine = create_engine(index)
    assert engine.param_count == 4
    assert all(engine.param_name(i) for i in range(4))
import pytest

from tapedeck.synth.plucked import StringSynth


def test_silent_without_notes():
    synth = StringSynth()
    assert synth.process([0.0] * 20) == [0.0] * 20


@pytest.mark.parametrize("note", [0, 45, 60, 127])
def test_pluck_produces_bounded_sound(note):
    synth = StringSynth()
    synth.note_on(note, 1.0)
    out = synth.process([0.0] * 500)
    assert any(abs(v) > 0.0 for v in out)
    assert all(abs(v) <= 0.4 for v in out)


def test_pluck_decays_over_time():
    synth = StringSynth()
    synth.note_on(60, 1.0)
    early = max(abs(v) for v in synth.process([0.0] * 500))
    synth.process([0.0] * 20000)
    late = max(abs(v) for v in synth.process([0.0] * 500))
    assert late < early


def test_release_returns_to_silence():
    synth = StringSynth()
    synth.set_param(3, 0.1)
    synth.note_on(60, 1.0)
    synth.note_off(60)
    synth.process([0.0] * 4500)
    assert synth.process([0.0] * 20) == [0.0] * 20


def test_brightness_scales_pluck():
    dull, bright = StringSynth(), StringSynth()
    dull.set_param(0, 0.1)
    bright.set_param(0, 1.0)
    dull.note_on(60, 1.0)
    bright.note_on(60, 1.0)
    dull_peak = max(abs(v) for v in dull.process([0.0] * 300))
    bright_peak = max(abs(v) for v in bright.process([0.0] * 300))
    assert bright_peak > dull_peak


def test_param_ranges_and_names():
    synth = StringSynth()
    synth.set_param(0, 0.0)
    synth.set_param(2, 1.0)
    synth.set_param(3, 0.0)
    assert synth.brightness == 0.1
    assert synth.attack == 0.1
    assert synth.decay == 0.1
    synth.set_param(1, 0.0)
    assert synth.damping == pytest.approx(0.99)
    assert synth.name == "STRING"
    assert synth.param_name(1) == "DAMP"
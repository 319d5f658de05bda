from tapedeck.synth.sine import SineSynth


def test_silent_without_notes():
    synth = SineSynth()
    assert synth.process([0.0] * 64) == [0.0] * 64


def test_adds_to_existing_signal():
    synth = SineSynth()
    assert synth.process([0.5, -0.25]) == [0.5, -0.25]


def test_note_produces_bounded_sound():
    synth = SineSynth()
    synth.note_on(69, 0.8)
    out = synth.process([0.0] * 2000)
    assert len(out) == 2000
    assert any(abs(v) > 0.01 for v in out)
    assert all(abs(v) <= 0.3 + 1e-9 for v in out)


def test_release_returns_to_silence():
    synth = SineSynth()
    synth.set_param(3, 0.01)
    synth.note_on(60, 0.8)
    synth.process([0.0] * 1000)
    synth.note_off(60)
    synth.process([0.0] * 1000)
    assert synth.process([0.0] * 100) == [0.0] * 100


def test_note_off_of_other_note_keeps_playing():
    synth = SineSynth()
    synth.set_param(3, 0.01)
    synth.note_on(60, 0.8)
    synth.process([0.0] * 500)
    synth.note_off(61)
    synth.process([0.0] * 1000)
    assert any(abs(v) > 0.01 for v in synth.process([0.0] * 500))


def test_param_clamping_and_names():
    synth = SineSynth()
    synth.set_param(2, 100.0)
    synth.set_param(3, 0.0)
    assert synth.attack == 2.0
    assert synth.decay == 0.01
    assert synth.param_name(2) == "ATTACK"
    assert synth.param_name(7) == ""
    assert synth.name == "SINE"
    assert synth.param_count == 4


def test_output_is_deterministic():
    a, b = SineSynth(), SineSynth()
    a.note_on(64, 0.8)
    b.note_on(64, 0.8)
    assert a.process([0.0] * 300) == b.process([0.0] * 300)
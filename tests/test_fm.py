from tapedeck.synth.fm import FmSynth


def test_silent_without_notes():
    synth = FmSynth()
    assert synth.process([0.0] * 40) == [0.0] * 40


def test_note_produces_bounded_sound():
    synth = FmSynth()
    synth.note_on(60, 0.8)
    out = synth.process([0.0] * 2000)
    assert any(abs(v) > 0.01 for v in out)
    assert all(abs(v) <= 0.25 + 1e-9 for v in out)


def test_release_returns_to_silence():
    synth = FmSynth()
    synth.set_param(3, 0.01)
    synth.note_on(72, 0.8)
    synth.process([0.0] * 800)
    synth.note_off(72)
    synth.process([0.0] * 1000)
    assert synth.process([0.0] * 50) == [0.0] * 50


def test_ratio_never_below_one():
    synth = FmSynth()
    synth.set_param(0, 0.0)
    assert synth.ratio == 1.0
    synth.set_param(0, -3.0)
    assert synth.ratio == 1.0


def test_ratio_is_whole_number():
    synth = FmSynth()
    for value in (0.1, 0.33, 0.61, 0.99):
        synth.set_param(0, value)
        assert synth.ratio == int(synth.ratio)
        assert synth.ratio >= 1.0


def test_envelope_params_clamped():
    synth = FmSynth()
    synth.set_param(2, 50.0)
    synth.set_param(3, -1.0)
    assert synth.attack == 2.0
    assert synth.decay == 0.01


def test_names():
    synth = FmSynth()
    assert synth.name == "FM"
    assert synth.param_name(1) == "MOD IX"
    assert synth.param_name(4) == ""
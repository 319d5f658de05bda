from tapedeck.synth.noise import NoiseSynth


def test_silent_without_notes():
    synth = NoiseSynth()
    assert synth.process([0.0] * 16) == [0.0] * 16


def test_note_produces_sound():
    synth = NoiseSynth()
    synth.note_on(40, 1.0)
    out = synth.process([0.0] * 1000)
    assert len(out) == 1000
    assert max(abs(v) for v in out) > 0.001


def test_same_note_same_noise_different_note_differs():
    a, b, c = NoiseSynth(), NoiseSynth(), NoiseSynth()
    a.note_on(50, 1.0)
    b.note_on(50, 1.0)
    c.note_on(51, 1.0)
    out_a = a.process([0.0] * 200)
    assert out_a == b.process([0.0] * 200)
    assert out_a != c.process([0.0] * 200)


def test_release_returns_to_silence():
    synth = NoiseSynth()
    synth.set_param(3, 0.01)
    synth.note_on(30, 1.0)
    synth.process([0.0] * 300)
    synth.note_off(30)
    synth.process([0.0] * 1000)
    assert synth.process([0.0] * 30) == [0.0] * 30


def test_param_clamping():
    synth = NoiseSynth()
    synth.set_param(0, 0.0)
    synth.set_param(1, 1.0)
    synth.set_param(2, 10.0)
    synth.set_param(3, 10.0)
    assert synth.cutoff == 0.01
    assert synth.resonance == 0.95
    assert synth.attack == 2.0
    assert synth.decay == 5.0


def test_names():
    synth = NoiseSynth()
    assert synth.name == "NOISE"
    assert synth.param_name(0) == "CUTOFF"
    assert synth.param_name(-1) == ""
import pytest

from tapedeck.audio.mixer import MixerState


def test_default_gain_is_centered_level():
    mixer = MixerState()
    left, right = mixer.track_gain(0)
    assert left == right == mixer.levels[0]


def test_mute_silences_track():
    mixer = MixerState()
    mixer.mutes[2] = True
    assert mixer.track_gain(2) == (0.0, 0.0)
    assert mixer.track_gain(1) != (0.0, 0.0)


def test_solo_silences_other_tracks():
    mixer = MixerState()
    mixer.solos[1] = True
    assert mixer.track_gain(0) == (0.0, 0.0)
    assert mixer.track_gain(3) == (0.0, 0.0)
    assert mixer.track_gain(1) == (mixer.levels[1], mixer.levels[1])


def test_mute_beats_solo():
    mixer = MixerState()
    mixer.solos[0] = True
    mixer.mutes[0] = True
    assert mixer.track_gain(0) == (0.0, 0.0)


def test_hard_pan_right_and_left():
    mixer = MixerState()
    mixer.pans[0] = 1.0
    mixer.pans[1] = -1.0
    assert mixer.track_gain(0) == (0.0, mixer.levels[0])
    assert mixer.track_gain(1) == (mixer.levels[1], 0.0)


def test_pan_is_mirror_symmetric():
    mixer = MixerState()
    mixer.pans[0] = 0.3
    mixer.pans[1] = -0.3
    left_a, right_a = mixer.track_gain(0)
    left_b, right_b = mixer.track_gain(1)
    assert left_a == pytest.approx(right_b)
    assert right_a == pytest.approx(left_b)


def test_mix_single_track_uses_its_gain():
    mixer = MixerState()
    mixer.pans[2] = 0.5
    gain_l, gain_r = mixer.track_gain(2)
    left, right = mixer.mix([0.0, 0.0, 0.5, 0.0])
    assert left == pytest.approx(0.5 * gain_l)
    assert right == pytest.approx(0.5 * gain_r)


def test_mix_silence():
    assert MixerState().mix([0.0] * 4) == (0.0, 0.0)


def test_mix_is_additive():
    mixer = MixerState()
    a = mixer.mix([0.5, 0.0, 0.0, 0.0])
    b = mixer.mix([0.0, 0.25, 0.0, 0.0])
    both = mixer.mix([0.5, 0.25, 0.0, 0.0])
    assert both[0] == pytest.approx(a[0] + b[0])
    assert both[1] == pytest.approx(a[1] + b[1])
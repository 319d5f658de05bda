import math

import pytest

from tapedeck.constants import SAMPLE_RATE
from tapedeck.effects import (
    Chorus,
    Delay,
    Distortion,
    EffectChain,
    Filter,
    FilterMode,
    Reverb,
)


def test_distortion_dry_mix_passes_through():
    dist = Distortion()
    dist.set_param(1, 0.0)
    assert dist.process([0.3, -0.2]) == pytest.approx([0.3, -0.2])


def test_distortion_full_scale_input_stays_full_scale():
    dist = Distortion()
    dist.set_param(1, 1.0)
    out = dist.process([1.0, -1.0])
    assert out == pytest.approx([1.0, -1.0])


def test_distortion_drive_is_clamped():
    dist = Distortion()
    dist.set_param(0, 100.0)
    assert dist.drive == 10.0
    dist.set_param(0, -5.0)
    assert dist.drive == 1.0


def test_reverb_dry_only():
    rev = Reverb()
    rev.set_param(0, 0.0)
    samples = [1.0, 0.5, -0.25, 0.0]
    assert rev.process(samples) == pytest.approx(samples)


def test_reverb_wet_only_starts_silent():
    rev = Reverb()
    rev.set_param(0, 1.0)
    out = rev.process([1.0] + [0.0] * 10)
    assert out == pytest.approx([0.0] * 11)


def test_reverb_tail_appears_later():
    rev = Reverb()
    rev.set_param(0, 1.0)
    out = rev.process([1.0] + [0.0] * 2000)
    assert max(abs(v) for v in out) > 0.0


def test_delay_echo_arrives_after_delay_time():
    delay = Delay()
    delay.set_param(0, 0.01)
    delay.set_param(2, 1.0)
    lag = int(0.01 * SAMPLE_RATE)
    out = delay.process([1.0] + [0.0] * (lag + 5))
    assert all(v == 0.0 for v in out[:lag])
    assert out[lag] == pytest.approx(1.0)


def test_delay_param_clamps():
    delay = Delay()
    delay.set_param(1, 5.0)
    assert delay.feedback == 0.9
    delay.set_param(0, 10.0)
    assert delay.time == 2.0


def test_filter_mode_selection():
    flt = Filter()
    flt.set_param(2, 0.5)
    assert flt.mode is FilterMode.HIGH_PASS
    flt.set_param(2, 0.9)
    assert flt.mode is FilterMode.BAND_PASS
    flt.set_param(2, 0.0)
    assert flt.mode is FilterMode.LOW_PASS


def test_lowpass_settles_on_dc():
    flt = Filter()
    out = flt.process([1.0] * 3000)
    assert out[-1] == pytest.approx(1.0, abs=1e-3)


def test_highpass_removes_dc():
    flt = Filter()
    flt.set_param(2, 0.5)
    out = flt.process([1.0] * 3000)
    assert out[-1] == pytest.approx(0.0, abs=1e-3)


def test_chorus_dry_mix_passes_through():
    chorus = Chorus()
    chorus.set_param(2, 0.0)
    samples = [math.sin(i * 0.1) for i in range(100)]
    assert chorus.process(samples) == pytest.approx(samples)


def test_param_names():
    assert Chorus().param_name(1) == "DEPTH"
    assert Delay().param_name(1) == "FDBK"
    assert Filter().param_name(7) == ""
    assert Reverb().param_count == 2


def test_unknown_param_is_ignored():
    dist = Distortion()
    dist.set_param(9, 0.1)
    assert (dist.drive, dist.mix) == (2.0, 0.5)


def test_chain_skips_bypassed_effects():
    dist = Distortion()
    dist.set_param(1, 1.0)
    dist.bypassed = True
    chain = EffectChain()
    chain.add(dist)
    assert chain.process([0.3]) == pytest.approx([0.3])
    dist.bypassed = False
    assert chain.process([0.3]) != pytest.approx([0.3])


def test_chain_applies_in_order():
    first = Reverb()
    first.set_param(0, 0.0)
    second = Distortion()
    second.set_param(1, 1.0)
    chain = EffectChain([first, second])
    assert chain.process([1.0]) == pytest.approx([1.0])
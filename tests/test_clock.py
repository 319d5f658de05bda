from tapedeck.constants import SAMPLE_RATE
from tapedeck.sequencer.clock import SequencerClock


def test_first_tick_is_new_step_zero():
    clock = SequencerClock(120.0)
    assert clock.tick(0) == (0, True)


def test_repeat_tick_is_not_new():
    clock = SequencerClock(120.0)
    clock.tick(0)
    step, is_new = clock.tick(1)
    assert step == 0
    assert is_new is False


def test_one_beat_is_four_steps():
    clock = SequencerClock(120.0)
    clock.tick(0)
    assert clock.tick(SAMPLE_RATE // 2) == (4, True)


def test_reset_makes_next_tick_new():
    clock = SequencerClock(120.0)
    clock.tick(0)
    clock.reset()
    assert clock.tick(0)[1] is True


def test_steps_stay_in_range():
    clock = SequencerClock(300.0)
    steps = {clock.tick(pos)[0] for pos in range(0, SAMPLE_RATE * 4, 97)}
    assert steps == set(range(16))


def test_bpm_setter_clamps():
    clock = SequencerClock(120.0)
    clock.bpm = 10.0
    assert clock.bpm == 40.0
    clock.bpm = 1000.0
    assert clock.bpm == 300.0


def test_constructor_keeps_bpm():
    assert SequencerClock(120.0).bpm == 120.0


def test_faster_tempo_advances_sooner():
    slow = SequencerClock(60.0)
    fast = SequencerClock(240.0)
    pos = SAMPLE_RATE // 3
    assert fast.tick(pos)[0] > slow.tick(pos)[0]
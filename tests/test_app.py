import pytest

from tapedeck.app import AppMode, AppState
from tapedeck.constants import SAMPLE_RATE, TRACK_COUNT
from tapedeck.messages import RecordSource, TransportDisplay


def test_mode_cycle():
    assert AppMode.TAPE.next() is AppMode.SYNTH
    assert AppMode.SYNTH.next() is AppMode.DRUM
    assert AppMode.DRUM.next() is AppMode.MIXER
    assert AppMode.MIXER.next() is AppMode.TAPE


@pytest.mark.parametrize(
    ("mode", "expected"),
    [
        (AppMode.TAPE, "TAPE"),
        (AppMode.SYNTH, "SYNTH"),
        (AppMode.DRUM, "DRUM"),
        (AppMode.MIXER, "MIXER"),
    ],
)
def test_mode_labels(mode, expected):
    assert AppMode.label(mode) == expected


def test_defaults():
    state = AppState()
    assert state.mode is AppMode.TAPE
    assert state.transport is TransportDisplay.STOPPED
    assert state.loop_enabled is True
    assert state.record_source is RecordSource.INTERNAL
    assert state.bpm == 120.0
    assert len(state.track_displays) == TRACK_COUNT
    assert len(state.drum_patterns) == 6
    assert all(len(row) == 16 and not any(row) for row in state.drum_patterns)
    assert state.synth_params == [0.5] * 4


def test_states_do_not_share_lists():
    a = AppState()
    b = AppState()
    a.drum_patterns[0][0] = True
    a.track_displays[1].armed = True
    assert b.drum_patterns[0][0] is False
    assert b.track_displays[1].armed is False


def test_track_displays_are_distinct_objects():
    state = AppState()
    state.track_displays[0].muted = True
    assert [t.muted for t in state.track_displays[1:]] == [False] * (TRACK_COUNT - 1)


def test_position_secs():
    state = AppState(position=SAMPLE_RATE * 3)
    assert state.position_secs() == 3.0


def test_position_display_zero():
    assert AppState().position_display() == "00:00.00"


def test_position_display_over_a_minute():
    state = AppState(position=SAMPLE_RATE * 65)
    assert state.position_display() == "01:05.00"
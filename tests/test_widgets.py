from tapedeck.app import AppMode
from tapedeck.messages import RecordSource, TrackDisplay, TransportDisplay
from tapedeck.ui.widgets import (
    ACCENT,
    DIM,
    FG,
    TRACK_COLORS,
    render_key_hints,
    render_mode_indicator,
    render_track_selector,
    render_transport_bar,
    render_vu_meter,
)


def text_of(cells):
    return "".join(ch for ch, _, _ in cells)


def test_key_hints_layout_and_colors():
    cells = render_key_hints([("Space", "Play/Pause"), ("L", "Loop")], 40)
    text = text_of(cells)
    assert len(cells) == 40
    assert text.startswith(" Space:Play/Pause")
    assert "L:Loop" in text
    assert cells[1][1] == ACCENT
    assert cells[text.index(":")][1] == DIM
    assert cells[text.index("Play")][1] == FG


def test_key_hints_dropped_when_too_narrow():
    cells = render_key_hints([("Space", "Play/Pause")], 10)
    assert len(cells) == 10
    assert text_of(cells).strip() == ""


def test_mode_indicator_highlights_current():
    cells = render_mode_indicator(AppMode.SYNTH, 40)
    text = text_of(cells)
    label = f" {AppMode.SYNTH.label()} "
    start = text.index(label)
    assert all(bg == ACCENT for _, _, bg in cells[start:start + len(label)])
    tape = text.index(f" {AppMode.TAPE.label()} ")
    assert cells[tape + 1][1] == DIM
    positions = [text.index(mode.label()) for mode in AppMode]
    assert positions == sorted(positions)


def test_mode_indicator_blank_when_narrow():
    cells = render_mode_indicator(AppMode.TAPE, 29)
    assert len(cells) == 29
    assert text_of(cells).strip() == ""


def test_transport_bar_contents():
    cells = render_transport_bar(
        TransportDisplay.STOPPED, "00:01.50", None, RecordSource.MIC, False
    )
    text = text_of(cells)
    assert text[1:].startswith("■ STOP")
    assert "00:01.50" in text
    assert text.index("00:01.50") > text.index("■ STOP")
    assert f"SRC:{RecordSource.MIC.label()}" in text
    assert text.endswith("LOOP:OFF")
    assert "ARM:T" not in text


def test_transport_bar_armed_and_looping():
    cells = render_transport_bar(
        TransportDisplay.RECORDING, "00:00.00", 1, RecordSource.INTERNAL, True
    )
    text = text_of(cells)
    assert "ARM:T2" in text
    assert text.index("ARM:T") < text.index("SRC:")
    assert text.endswith("LOOP:ON")
    assert "● REC" in text


def test_vu_meter_full_and_empty():
    full = text_of(render_vu_meter("T1", 1.0, 0.0, 20))
    assert len(full) == 20
    assert "░" not in full
    assert full.count("█") == len(full) - 5
    empty = text_of(render_vu_meter("T1", 0.0, 0.0, 20))
    assert "█" not in empty
    assert empty.startswith("T1")


def test_vu_meter_peak_marker_at_top():
    text = text_of(render_vu_meter("L", 0.0, 1.0, 20))
    assert text.rstrip()[-1] == "│"


def test_vu_meter_blank_when_narrow():
    cells = render_vu_meter("T1", 1.0, 1.0, 3)
    assert text_of(cells) == "   "


def test_track_selector_flags_and_selection():
    tracks = [TrackDisplay() for _ in range(4)]
    tracks[0].armed = True
    tracks[1].muted = True
    tracks[2].solo = True
    cells = render_track_selector(tracks, 2, 40)
    text = text_of(cells)
    assert "●" in text and "M" in text and "S" in text
    assert cells[text.index("T3")][1] == TRACK_COLORS[2]
    assert cells[text.index("T1")][1] == DIM
    order = [text.index(f"T{i + 1}") for i in range(4)]
    assert order == sorted(order)


def test_track_selector_blank_when_narrow():
    cells = render_track_selector([TrackDisplay() for _ in range(4)], 0, 19)
    assert text_of(cells).strip() == ""
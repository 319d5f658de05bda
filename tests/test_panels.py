import pytest

from tapedeck.ui.panels import INSTRUMENT_LABELS, render_knob, render_step_grid
from tapedeck.ui.widgets import ACCENT, DIM, PLAYING_GREEN


def _text(row):
    return "".join(cell[0] for cell in row)


def _empty_patterns():
    return [[False] * 16 for _ in range(6)]


def test_step_grid_too_narrow_draws_nothing():
    assert render_step_grid(_empty_patterns(), 0, 0, 29) == []


def test_step_grid_has_one_row_per_instrument_with_labels():
    rows = render_step_grid(_empty_patterns(), 0, 0, 71)
    assert len(rows) == len(INSTRUMENT_LABELS)
    for row, name in zip(rows, INSTRUMENT_LABELS):
        assert len(row) == 71
        assert _text(row).startswith(name.strip())


@pytest.mark.parametrize("width", [30, 50, 71, 120])
def test_step_grid_draws_sixteen_steps(width):
    rows = render_step_grid(_empty_patterns(), 3, 0, width)
    for row in rows:
        step_chars = [c for c in _text(row)[6:] if c != " "]
        assert len(step_chars) == 16


def test_step_grid_marks_current_and_active_steps():
    patterns = _empty_patterns()
    patterns[1][0] = True
    patterns[1][5] = True
    rows = render_step_grid(patterns, 0, 1, 40)
    kick_steps = [c for c in _text(rows[0])[6:] if c != " "]
    snare_steps = [c for c in _text(rows[1])[6:] if c != " "]
    assert kick_steps[0] == "▪"
    assert snare_steps[0] == "█"
    assert snare_steps[5] == "■"
    assert kick_steps[5] == "·"


def test_step_grid_current_marker_color():
    rows = render_step_grid(_empty_patterns(), 0, 0, 40)
    marker = next(cell for cell in rows[2] if cell[0] == "▪")
    assert marker[1] == PLAYING_GREEN


def test_step_grid_highlights_selected_instrument_label():
    rows = render_step_grid(_empty_patterns(), 0, 2, 40)
    assert rows[2][0][1] == ACCENT
    assert rows[0][0][1] == DIM


def test_knob_shows_value_and_label():
    rows = render_knob("FREQ", 0.5, True)
    texts = [_text(r) for r in rows]
    assert "●" in texts[1]
    assert "50%" in texts[3]
    assert texts[4].strip() == "FREQ"
    assert "╭───╮" in texts[0]
    assert "╰───╯" in texts[2]


@pytest.mark.parametrize(
    "value, face",
    [(0.0, "│◄  │"), (0.3, "│ ◄ │"), (0.8, "│ ► │"), (1.0, "│  ►│"), (-1.0, "│◄  │")],
)
def test_knob_indicator_position(value, face):
    rows = render_knob("X", value, False)
    assert face in _text(rows[1])


def test_knob_selected_uses_accent():
    face_selected = [c for c in render_knob("A", 0.5, True)[1] if c[0] == "●"]
    face_plain = [c for c in render_knob("A", 0.5, False)[1] if c[0] == "●"]
    assert face_selected[0][1] == ACCENT
    assert face_plain[0][1] != ACCENT


def test_knob_rows_share_width_with_long_label():
    rows = render_knob("VERYLONGLABEL", 0.25, False)
    widths = {len(r) for r in rows}
    assert widths == {len("VERYLONGLABEL")}
    assert _text(rows[4]) == "VERYLONGLABEL"
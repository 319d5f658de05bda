"""Terminal front end: event handling, screen composition and the main loop."""

from __future__ import annotations

import argparse
import os
import queue
import sys
import threading
import time
from pathlib import Path

from tapedeck.app import AppMode, AppState
from tapedeck.audio.buffer import SharedBuffers, downsample_track
from tapedeck.audio.engine import AudioEngine
from tapedeck.constants import BUFFER_SIZE, SAMPLE_RATE, TRACK_COUNT, TRACK_SAMPLES, UI_FPS
from tapedeck.keymap import (
    CTRL,
    DOWN,
    ENTER,
    ESC,
    LEFT,
    RIGHT,
    TAB,
    UP,
    KeyPress,
    handle_key,
    key_hints,
)
from tapedeck.messages import (
    AudioCmd,
    AudioCmdKind,
    AudioMsg,
    AudioMsgKind,
    TrackDisplay,
    TransportDisplay,
    UiEvent,
    UiEventKind,
)
from tapedeck.project import ProjectMeta, load_project, save_project
from tapedeck.synth.engines import ENGINE_COUNT, ENGINE_NAMES
from tapedeck.ui.panels import render_knob, render_step_grid
from tapedeck.ui.widgets import (
    render_key_hints,
    render_mode_indicator,
    render_track_selector,
    render_transport_bar,
    render_vu_meter,
)

PROJECT_NAME = "tapedeck_project"
NOTE_DURATION = 0.2
WAVEFORM_WIDTH = 200

_DRUM_NAMES = ("KICK", "SNARE", "HAT", "CLAP", "TOM", "RIM")
_KNOB_LABELS = ("FREQ", "RESO", "ATTACK", "DECAY")


def _clamp(value: float, low: float, high: float) -> float:
    return min(max(value, low), high)


def _send(commands: queue.Queue, kind: AudioCmdKind, *args) -> None:
    try:
        commands.put_nowait(AudioCmd(kind, args))
    except queue.Full:
        pass


def _toggle_play_pause(state: AppState, commands: queue.Queue) -> None:
    if state.transport in (TransportDisplay.STOPPED, TransportDisplay.PAUSED):
        state.transport = TransportDisplay.PLAYING
        _send(commands, AudioCmdKind.PLAY)
    elif state.transport is TransportDisplay.PLAYING:
        state.transport = TransportDisplay.PAUSED
        _send(commands, AudioCmdKind.PAUSE)
    else:
        state.transport = TransportDisplay.PLAYING
        _send(commands, AudioCmdKind.STOP_RECORD)


def _save(state: AppState, buffers: SharedBuffers) -> None:
    meta = ProjectMeta(PROJECT_NAME)
    meta.bpm = state.bpm
    for display, track in zip(state.track_displays, meta.tracks):
        track.level = display.level
        track.pan = display.pan
        track.muted = display.muted
        track.solo = display.solo
        track.armed = display.armed
    try:
        save_project(Path(PROJECT_NAME), meta, buffers)
    except (OSError, ValueError) as exc:
        print(f"Save error: {exc}", file=sys.stderr)


def _send_track(commands: queue.Queue, index: int, display: TrackDisplay) -> None:
    _send(commands, AudioCmdKind.SET_LEVEL, index, display.level)
    _send(commands, AudioCmdKind.SET_PAN, index, display.pan)
    _send(commands, AudioCmdKind.SET_MUTE, index, display.muted)
    _send(commands, AudioCmdKind.SET_SOLO, index, display.solo)


def _load(state: AppState, path: str, commands: queue.Queue, buffers: SharedBuffers) -> None:
    try:
        meta = load_project(Path(path), buffers)
    except (OSError, ValueError) as exc:
        print(f"Load error: {exc}", file=sys.stderr)
        return

    state.bpm = _clamp(meta.bpm, 40.0, 300.0)
    _send(commands, AudioCmdKind.SET_BPM, state.bpm)

    armed_assigned = False
    for index in range(TRACK_COUNT):
        if index < len(meta.tracks):
            track = meta.tracks[index]
            display = state.track_displays[index]
            display.level = _clamp(track.level, 0.0, 1.0)
            display.pan = _clamp(track.pan, -1.0, 1.0)
            display.muted = track.muted
            display.solo = track.solo
            display.armed = track.armed and not armed_assigned
            armed_assigned = armed_assigned or display.armed
        else:
            state.track_displays[index] = TrackDisplay()
        _send_track(commands, index, state.track_displays[index])


def handle_ui_event(
    state: AppState,
    event: UiEvent,
    commands: queue.Queue,
    buffers: SharedBuffers | None,
) -> None:
    """Apply ``event`` to ``state`` and queue the audio commands it implies."""
    kind, args = event.kind, tuple(event.args)

    if kind is UiEventKind.QUIT:
        state.should_quit = True
    elif kind is UiEventKind.TOGGLE_PLAY_PAUSE:
        _toggle_play_pause(state, commands)
    elif kind is UiEventKind.TOGGLE_LOOP:
        state.loop_enabled = not state.loop_enabled
        _send(commands, AudioCmdKind.SET_LOOP_ENABLED, state.loop_enabled)
    elif kind is UiEventKind.START_RECORD:
        armed = next((i for i, t in enumerate(state.track_displays) if t.armed), None)
        if armed is not None:
            state.transport = TransportDisplay.RECORDING
            _send(commands, AudioCmdKind.RECORD, armed)
    elif kind is UiEventKind.STOP_TRANSPORT:
        state.transport = TransportDisplay.STOPPED
        state.position = 0
        state.current_step = 0
        _send(commands, AudioCmdKind.STOP)
    elif kind is UiEventKind.SELECT_TRACK:
        if 0 <= args[0] < TRACK_COUNT:
            state.selected_track = args[0]
    elif kind is UiEventKind.ARM_TRACK:
        track = args[0]
        if 0 <= track < TRACK_COUNT:
            was_armed = state.track_displays[track].armed
            for display in state.track_displays:
                display.armed = False
            state.track_displays[track].armed = not was_armed
    elif kind is UiEventKind.MUTE_TRACK:
        track = args[0]
        if 0 <= track < TRACK_COUNT:
            display = state.track_displays[track]
            display.muted = not display.muted
            _send(commands, AudioCmdKind.SET_MUTE, track, display.muted)
    elif kind is UiEventKind.SOLO_TRACK:
        track = args[0]
        if 0 <= track < TRACK_COUNT:
            display = state.track_displays[track]
            display.solo = not display.solo
            _send(commands, AudioCmdKind.SET_SOLO, track, display.solo)
    elif kind is UiEventKind.SEEK:
        new_pos = int(_clamp(state.position + args[0], 0, max(TRACK_SAMPLES - 1, 0)))
        state.position = new_pos
        _send(commands, AudioCmdKind.SEEK, new_pos)
    elif kind is UiEventKind.CYCLE_MODE:
        state.mode = state.mode.next()
    elif kind is UiEventKind.CYCLE_RECORD_SOURCE:
        state.record_source = state.record_source.next()
        _send(commands, AudioCmdKind.SET_RECORD_SOURCE, state.record_source)
    elif kind is UiEventKind.SET_LEVEL:
        track, delta = args
        if 0 <= track < TRACK_COUNT:
            display = state.track_displays[track]
            display.level = _clamp(display.level + delta, 0.0, 1.0)
            _send(commands, AudioCmdKind.SET_LEVEL, track, display.level)
    elif kind is UiEventKind.SET_PAN:
        track, delta = args
        if 0 <= track < TRACK_COUNT:
            display = state.track_displays[track]
            display.pan = _clamp(display.pan + delta, -1.0, 1.0)
            _send(commands, AudioCmdKind.SET_PAN, track, display.pan)
    elif kind is UiEventKind.NOTE_ON:
        _send(commands, AudioCmdKind.NOTE_ON, *args)
    elif kind is UiEventKind.NOTE_OFF:
        _send(commands, AudioCmdKind.NOTE_OFF, args[0])
    elif kind is UiEventKind.SELECT_ENGINE:
        step = -1 if args[0] == 0 else 1
        state.synth_engine = (state.synth_engine + step) % ENGINE_COUNT
        _send(commands, AudioCmdKind.SELECT_ENGINE, state.synth_engine)
    elif kind is UiEventKind.SET_PARAM:
        index, delta = args
        if 0 <= index < 4:
            state.synth_params[index] = _clamp(state.synth_params[index] + delta, 0.0, 1.0)
            _send(commands, AudioCmdKind.SET_PARAM, index, state.synth_params[index])
    elif kind is UiEventKind.TOGGLE_STEP:
        instrument, step = args
        inst = state.selected_instrument if state.mode is AppMode.DRUM else instrument
        if 0 <= inst < 6 and 0 <= step < 16:
            state.drum_patterns[inst][step] = not state.drum_patterns[inst][step]
            _send(commands, AudioCmdKind.TOGGLE_STEP, inst, step)
    elif kind is UiEventKind.SET_BPM:
        state.bpm = _clamp(state.bpm + args[0], 40.0, 300.0)
        _send(commands, AudioCmdKind.SET_BPM, state.bpm)
    elif kind is UiEventKind.SELECT_INSTRUMENT:
        if 0 <= args[0] < 6:
            state.selected_instrument = args[0]
    elif kind is UiEventKind.TOGGLE_TAPE_SIM:
        state.tape_sim_enabled = not state.tape_sim_enabled
        _send(commands, AudioCmdKind.TOGGLE_TAPE_SIM)
    elif kind is UiEventKind.SET_TAPE_SPEED:
        state.tape_speed = args[0]
        _send(commands, AudioCmdKind.SET_TAPE_SPEED, args[0])
    elif kind is UiEventKind.TOGGLE_EFFECT:
        track, slot = args
        if 0 <= track < TRACK_COUNT and 0 <= slot < 3:
            state.effect_bypassed[track][slot] = not state.effect_bypassed[track][slot]
            _send(commands, AudioCmdKind.TOGGLE_EFFECT, track, slot)
    elif kind is UiEventKind.SET_EFFECT_PARAM:
        _send(commands, AudioCmdKind.SET_EFFECT_PARAM, *args)
    elif kind is UiEventKind.SAVE_PROJECT:
        if buffers is not None:
            _save(state, buffers)
    elif kind is UiEventKind.LOAD_PROJECT:
        if buffers is not None:
            _load(state, args[0], commands, buffers)


def apply_audio_message(state: AppState, msg: AudioMsg) -> None:
    """Copy a status report from the audio engine into ``state``."""
    kind, args = msg.kind, tuple(msg.args)
    if kind is AudioMsgKind.POSITION:
        state.position = args[0]
    elif kind is AudioMsgKind.CURRENT_STEP:
        state.current_step = args[0]
    elif kind is AudioMsgKind.LEVELS:
        state.levels = list(args[0])
    elif kind is AudioMsgKind.PEAKS:
        state.peaks = list(args[0])
    elif kind is AudioMsgKind.MASTER_LEVEL:
        state.master_level = (args[0], args[1])


def _text(row) -> str:
    return "".join(cell[0] for cell in row).rstrip()


def _tape_lines(state: AppState, width: int) -> list[str]:
    lines = [_text(render_track_selector(state.track_displays, state.selected_track, width))]
    for index in range(TRACK_COUNT):
        lines.append(
            _text(render_vu_meter(f"T{index + 1} ", state.levels[index], state.peaks[index], width))
        )
    armed = next((i for i, t in enumerate(state.track_displays) if t.armed), None)
    lines.append("")
    lines.append(
        _text(
            render_transport_bar(
                state.transport,
                state.position_display(),
                armed,
                state.record_source,
                state.loop_enabled,
            )
        )
    )
    return lines


def _synth_lines(state: AppState, width: int) -> list[str]:
    selector = "".join(
        f" [{name}] " if index == state.synth_engine else f"  {name}  "
        for index, name in enumerate(ENGINE_NAMES)
    )
    column = max(width // 4, 7)
    knobs = [
        [_text(row) for row in render_knob(label, state.synth_params[i], i == 0)]
        for i, label in enumerate(_KNOB_LABELS)
    ]
    knob_lines = [
        "".join(knob[row].ljust(column) for knob in knobs).rstrip()
        for row in range(len(knobs[0]))
    ]
    return [selector, "", *knob_lines, "",
            "  Z S X D C V G B H N J M  │  Q 2 W 3 E 4 5 T 6 Y 7 U"]


def _drum_lines(state: AppState, width: int) -> list[str]:
    info = (
        f"  BPM: {state.bpm:.0f}  │  Step: {state.current_step + 1:2}/16"
        f"  │  Inst: {_DRUM_NAMES[state.selected_instrument]}"
    )
    grid = [
        _text(row)
        for row in render_step_grid(
            state.drum_patterns, state.current_step, state.selected_instrument, width
        )
    ]
    return [info, "", *grid, "", "  Z-K:Toggle Steps  1-6:Instrument  ↑/↓:BPM  R:Record"]


def _pan_text(pan: float) -> str:
    if pan < -0.05:
        return f"◄{abs(pan) * 100.0:.0f}"
    if pan > 0.05:
        return f"{pan * 100.0:.0f}►"
    return "  C  "


def _mixer_lines(state: AppState, width: int) -> list[str]:
    lines = []
    for index, display in enumerate(state.track_displays):
        marker = ">" if index == state.selected_track else " "
        flags = ("M " if display.muted else "") + ("S" if display.solo else "")
        lines.append(
            f"{marker} Track {index + 1}  {display.level * 100.0:.0f}%"
            f"  pan {_pan_text(display.pan).strip()}  {flags}".rstrip()
        )
        lines.append(
            _text(render_vu_meter("", state.levels[index], state.peaks[index], width))
        )
    left, right = state.master_level
    lines.append("  MASTER")
    lines.append(_text(render_vu_meter("L ", left, left * 1.2, width)))
    lines.append(_text(render_vu_meter("R ", right, right * 1.2, width)))
    return lines


_MODE_RENDERERS = {
    AppMode.TAPE: _tape_lines,
    AppMode.SYNTH: _synth_lines,
    AppMode.DRUM: _drum_lines,
    AppMode.MIXER: _mixer_lines,
}


def render_screen(state: AppState, width: int) -> list[str]:
    """Text lines for the whole screen: mode tabs, the mode's view, key hints."""
    header = _text(render_mode_indicator(state.mode, width))
    body = _MODE_RENDERERS[state.mode](state, width)
    footer = _text(render_key_hints(key_hints(state.mode), width))
    return [header, "", *body, "", footer]


def _audio_loop(engine: AudioEngine, stop: threading.Event) -> None:
    period = BUFFER_SIZE / SAMPLE_RATE
    deadline = time.monotonic()
    while not stop.is_set():
        engine.render(BUFFER_SIZE)
        deadline += period
        delay = deadline - time.monotonic()
        if delay > 0:
            stop.wait(delay)
        else:
            deadline = time.monotonic()


def _key_from_curses(curses, key) -> KeyPress | None:
    if isinstance(key, int):
        named = {
            curses.KEY_LEFT: LEFT,
            curses.KEY_RIGHT: RIGHT,
            curses.KEY_UP: UP,
            curses.KEY_DOWN: DOWN,
            curses.KEY_ENTER: ENTER,
        }
        return KeyPress(named[key]) if key in named else None
    if key == "\x1b":
        return KeyPress(ESC)
    if key == "\t":
        return KeyPress(TAB)
    if key in ("\n", "\r"):
        return KeyPress(ENTER)
    if len(key) == 1 and "\x01" <= key <= "\x1a":
        return KeyPress(chr(ord(key) + ord("a") - 1), frozenset({CTRL}))
    return KeyPress(key)


def _run(stdscr, engine: AudioEngine) -> None:
    import curses

    curses.raw()
    curses.curs_set(0)
    stdscr.nodelay(True)
    stdscr.keypad(True)

    state = AppState()
    commands = engine.commands
    active_notes: dict[int, float] = {}
    frame_duration = 1.0 / UI_FPS
    frame_count = 0

    while True:
        frame_start = time.monotonic()

        while True:
            try:
                msg = engine.messages.get_nowait()
            except queue.Empty:
                break
            apply_audio_message(state, msg)

        try:
            raw_key = stdscr.get_wch()
        except curses.error:
            raw_key = None
        if raw_key is not None:
            key = _key_from_curses(curses, raw_key)
            event = handle_key(key, state.mode, state.selected_track) if key else None
            if event is not None:
                if event.kind is UiEventKind.NOTE_ON:
                    active_notes[event.args[0]] = time.monotonic()
                if event.kind in (UiEventKind.SAVE_PROJECT, UiEventKind.LOAD_PROJECT):
                    with engine.lock:
                        handle_ui_event(state, event, commands, engine.buffers)
                else:
                    handle_ui_event(state, event, commands, engine.buffers)

        now = time.monotonic()
        for note in [n for n, t in active_notes.items() if now - t >= NOTE_DURATION]:
            del active_notes[note]
            _send(commands, AudioCmdKind.NOTE_OFF, note)

        if state.should_quit:
            break

        if frame_count % 30 == 0 and engine.lock.acquire(blocking=False):
            try:
                state.waveform_data = [
                    downsample_track(track, WAVEFORM_WIDTH) for track in engine.buffers.tracks
                ]
            finally:
                engine.lock.release()

        frame_count += 1
        height, width = stdscr.getmaxyx()
        stdscr.erase()
        for y, line in enumerate(render_screen(state, width)[:height]):
            try:
                stdscr.addnstr(y, 0, line, max(width - 1, 0))
            except curses.error:
                pass
        stdscr.refresh()

        elapsed = time.monotonic() - frame_start
        if elapsed < frame_duration:
            time.sleep(frame_duration - elapsed)


def main(argv: list[str] | None = None) -> int:
    """Run the deck in the terminal."""
    parser = argparse.ArgumentParser(
        prog="tapedeck", description="Terminal-based 4-track cassette recorder"
    )
    parser.parse_args(argv)

    import curses
    import locale

    locale.setlocale(locale.LC_ALL, "")
    os.environ.setdefault("ESCDELAY", "25")

    engine = AudioEngine()
    print("Warning: no audio output device available; the engine runs silently.",
          file=sys.stderr)
    stop = threading.Event()
    audio_thread = threading.Thread(target=_audio_loop, args=(engine, stop), daemon=True)
    audio_thread.start()
    try:
        curses.wrapper(_run, engine)
    finally:
        stop.set()
        audio_thread.join(timeout=1.0)
    return 0


if __name__ == "__main__":
    sys.exit(main())
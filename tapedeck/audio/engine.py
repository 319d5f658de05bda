"""Real-time mixing engine: transport, tape tracks, synth, drums and metering.

The engine renders stereo frames on demand. Commands arrive on a queue,
status reports leave on another, and microphone input is fed in separately.
"""

from __future__ import annotations

import math
import queue
import threading
from collections import deque
from collections.abc import Iterable

from tapedeck.audio.buffer import SharedBuffers, write_sample
from tapedeck.audio.mixer import MixerState
from tapedeck.audio.transport import Transport
from tapedeck.constants import CHANNEL_CAPACITY, SAMPLE_RATE, TRACK_COUNT, TRACK_SAMPLES
from tapedeck.effects import EffectChain
from tapedeck.messages import AudioCmd, AudioCmdKind, AudioMsg, AudioMsgKind, RecordSource
from tapedeck.sequencer.clock import SequencerClock
from tapedeck.sequencer.drum_kit import DrumKit
from tapedeck.synth.engines import create_engine
from tapedeck.tape import TapeSimulation

COUNT_IN_BEATS = 4
CLICK_LEN_SAMPLES = max(SAMPLE_RATE // 40, 1)
REPORT_INTERVAL = SAMPLE_RATE // 30

_SYNTH_SOURCES = (RecordSource.SYNTH, RecordSource.ALL, RecordSource.INTERNAL)
_DRUM_SOURCES = (RecordSource.DRUM, RecordSource.ALL, RecordSource.INTERNAL)
_MIC_SOURCES = (RecordSource.MIC, RecordSource.ALL)


def _clamp(value: float, low: float, high: float) -> float:
    return min(max(value, low), high)


def detect_loop_end(buffers: SharedBuffers, exclude_track: int | None) -> int | None:
    """Length of the longest recorded track, ignoring ``exclude_track``; None if all empty."""
    longest = max(
        (
            min(track.sample_count(), TRACK_SAMPLES)
            for index, track in enumerate(buffers.tracks)
            if index != exclude_track
        ),
        default=0,
    )
    return longest if longest > 0 else None


def samples_per_beat(bpm: float) -> int:
    """Samples in one beat at ``bpm`` (clamped to 40-300), at least one."""
    return max(int(SAMPLE_RATE * 60.0 / _clamp(bpm, 40.0, 300.0)), 1)


class LevelMeter:
    """Accumulates RMS and a slowly decaying peak."""

    def __init__(self) -> None:
        self._sum_sq = 0.0
        self._count = 0
        self._peak = 0.0

    def push(self, sample: float) -> None:
        self._sum_sq += sample * sample
        self._count += 1
        self._peak = max(self._peak, abs(sample))

    def take_rms(self) -> float:
        """RMS since the last call; resets the accumulator."""
        if self._count == 0:
            return 0.0
        rms = math.sqrt(self._sum_sq / self._count)
        self._sum_sq = 0.0
        self._count = 0
        return rms

    def take_peak(self) -> float:
        """Current peak; the held value then decays slightly."""
        peak = self._peak
        self._peak *= 0.995
        return peak


class AudioEngine:
    """Renders the deck's stereo output one block at a time."""

    def __init__(
        self,
        commands: queue.Queue | None = None,
        messages: queue.Queue | None = None,
        buffers: SharedBuffers | None = None,
    ) -> None:
        self.commands: queue.Queue = commands or queue.Queue(maxsize=CHANNEL_CAPACITY)
        self.messages: queue.Queue = messages or queue.Queue(maxsize=CHANNEL_CAPACITY)
        self.buffers = buffers if buffers is not None else SharedBuffers()
        self.lock = threading.Lock()

        self.transport = Transport()
        self.mixer = MixerState()
        self.synth = create_engine(0)
        self.effect_chains = [EffectChain() for _ in range(TRACK_COUNT)]
        self.drum_kit = DrumKit()
        self.clock = SequencerClock(120.0)
        self.drum_patterns = [[False] * 16 for _ in range(6)]
        self.tape_sim = TapeSimulation()
        self.record_source = RecordSource.INTERNAL

        self._track_meters = [LevelMeter() for _ in range(TRACK_COUNT)]
        self._master_left = LevelMeter()
        self._master_right = LevelMeter()
        self._report_counter = 0
        self._free_counter = 0

        self._mic_ring: deque[float] = deque(maxlen=SAMPLE_RATE)
        self._mic_lock = threading.Lock()

        self._pending_record_track: int | None = None
        self._count_in_remaining = 0
        self._count_in_to_next_click = 0
        self._count_in_click_index = 0
        self._click_remaining = 0
        self._click_phase = 0.0
        self._click_freq = 1600.0
        self._click_amp = 0.0

    # --- plumbing -------------------------------------------------------

    def _send(self, kind: AudioMsgKind, *args) -> None:
        try:
            self.messages.put_nowait(AudioMsg(kind, args))
        except queue.Full:
            pass

    def feed_input(self, samples: Iterable[float]) -> None:
        """Append microphone samples; only the latest second is kept."""
        with self._mic_lock:
            self._mic_ring.extend(samples)

    def _drain_mic(self) -> list[float]:
        if not self._mic_lock.acquire(blocking=False):
            return []
        try:
            taken = list(self._mic_ring)
            self._mic_ring.clear()
            return taken
        finally:
            self._mic_lock.release()

    def _set_loop_end(self, end: int | None) -> None:
        if self.transport.loop_enabled and end is not None and end > 0:
            self.transport.loop_end = end
        else:
            self.transport.loop_end = None

    def _refresh_loop_end(self, exclude_track: int | None) -> None:
        if not self.lock.acquire(blocking=False):
            return
        try:
            self._set_loop_end(detect_loop_end(self.buffers, exclude_track))
        finally:
            self.lock.release()

    def _cancel_count_in(self) -> None:
        self._pending_record_track = None
        self._count_in_remaining = 0
        self._count_in_to_next_click = 0
        self._click_remaining = 0

    # --- commands -------------------------------------------------------

    def _handle_command(self, cmd: AudioCmd) -> None:
        kind, args = cmd.kind, cmd.args
        transport = self.transport
        if kind is AudioCmdKind.PLAY:
            if transport.loop_enabled:
                self._refresh_loop_end(None)
            transport.play()
        elif kind is AudioCmdKind.SET_LOOP_ENABLED:
            enabled = bool(args[0])
            transport.loop_enabled = enabled
            if enabled:
                self._refresh_loop_end(None)
            else:
                transport.loop_end = None
        elif kind is AudioCmdKind.PAUSE:
            transport.pause()
        elif kind is AudioCmdKind.STOP:
            self._cancel_count_in()
            transport.stop()
            self.clock.reset()
            self._send(AudioMsgKind.CURRENT_STEP, 0)
        elif kind is AudioCmdKind.RECORD:
            track = args[0]
            self._pending_record_track = track
            self._count_in_remaining = samples_per_beat(self.clock.bpm) * COUNT_IN_BEATS
            self._count_in_to_next_click = 0
            self._count_in_click_index = 0
            self._click_remaining = 0
            if transport.loop_enabled:
                self._refresh_loop_end(track)
            transport.play()
        elif kind is AudioCmdKind.STOP_RECORD:
            self._cancel_count_in()
            if transport.loop_enabled and transport.loop_end is None:
                self._set_loop_end(min(transport.position, TRACK_SAMPLES))
            transport.stop_record()
        elif kind is AudioCmdKind.SEEK:
            transport.seek(args[0])
        elif kind in (
            AudioCmdKind.SET_LEVEL,
            AudioCmdKind.SET_PAN,
            AudioCmdKind.SET_MUTE,
            AudioCmdKind.SET_SOLO,
        ):
            track, value = args
            if 0 <= track < TRACK_COUNT:
                target = {
                    AudioCmdKind.SET_LEVEL: self.mixer.levels,
                    AudioCmdKind.SET_PAN: self.mixer.pans,
                    AudioCmdKind.SET_MUTE: self.mixer.mutes,
                    AudioCmdKind.SET_SOLO: self.mixer.solos,
                }[kind]
                target[track] = value
        elif kind is AudioCmdKind.NOTE_ON:
            self.synth.note_on(*args)
        elif kind is AudioCmdKind.NOTE_OFF:
            self.synth.note_off(args[0])
        elif kind is AudioCmdKind.SELECT_ENGINE:
            self.synth = create_engine(args[0])
        elif kind is AudioCmdKind.SET_PARAM:
            self.synth.set_param(*args)
        elif kind is AudioCmdKind.TOGGLE_STEP:
            inst, step = args
            if 0 <= inst < 6 and 0 <= step < 16:
                self.drum_patterns[inst][step] = not self.drum_patterns[inst][step]
        elif kind is AudioCmdKind.SET_BPM:
            self.clock.bpm = _clamp(args[0], 40.0, 300.0)
        elif kind is AudioCmdKind.TOGGLE_TAPE_SIM:
            self.tape_sim.enabled = not self.tape_sim.enabled
        elif kind is AudioCmdKind.SET_TAPE_SPEED:
            pass  # variable-speed playback is not wired into the output path
        elif kind is AudioCmdKind.TOGGLE_EFFECT:
            track, slot = args
            if 0 <= track < TRACK_COUNT and 0 <= slot < len(self.effect_chains[track].effects):
                effect = self.effect_chains[track].effects[slot]
                effect.bypassed = not effect.bypassed
        elif kind is AudioCmdKind.SET_EFFECT_PARAM:
            track, slot, param, value = args
            if 0 <= track < TRACK_COUNT and 0 <= slot < len(self.effect_chains[track].effects):
                self.effect_chains[track].effects[slot].set_param(param, value)
        elif kind is AudioCmdKind.SET_RECORD_SOURCE:
            self.record_source = args[0]

    def _drain_commands(self) -> None:
        while True:
            try:
                cmd = self.commands.get_nowait()
            except queue.Empty:
                return
            self._handle_command(cmd)

    # --- rendering ------------------------------------------------------

    def _advance_count_in(self) -> None:
        track = self._pending_record_track
        if track is None:
            return
        if self._count_in_remaining == 0:
            # Recording starts at the loop start for tighter overdubs.
            self.transport.seek(0)
            self.clock.reset()
            self._send(AudioMsgKind.CURRENT_STEP, 0)
            self.transport.record(track)
            self._pending_record_track = None
            return
        if self._count_in_to_next_click == 0:
            accented = self._count_in_click_index % COUNT_IN_BEATS == 0
            self._click_freq = 1900.0 if accented else 1500.0
            self._click_amp = 0.32 if accented else 0.22
            self._click_phase = 0.0
            self._click_remaining = CLICK_LEN_SAMPLES
            self._count_in_click_index += 1
            self._count_in_to_next_click = samples_per_beat(self.clock.bpm)
        self._count_in_to_next_click = max(self._count_in_to_next_click - 1, 0)
        self._count_in_remaining = max(self._count_in_remaining - 1, 0)

    def _metronome(self) -> float:
        if self._click_remaining <= 0:
            return 0.0
        env = self._click_remaining / CLICK_LEN_SAMPLES
        value = math.sin(self._click_phase * math.tau) * self._click_amp * env
        self._click_phase += self._click_freq / SAMPLE_RATE
        if self._click_phase >= 1.0:
            self._click_phase -= 1.0
        self._click_remaining -= 1
        return value

    def _report(self) -> None:
        self._report_counter += 1
        if self._report_counter < REPORT_INTERVAL:
            return
        self._report_counter = 0
        self._send(AudioMsgKind.POSITION, self.transport.position)
        self._send(AudioMsgKind.LEVELS, [m.take_rms() for m in self._track_meters])
        self._send(AudioMsgKind.PEAKS, [m.take_peak() for m in self._track_meters])
        self._send(
            AudioMsgKind.MASTER_LEVEL,
            self._master_left.take_rms(),
            self._master_right.take_rms(),
        )

    def _frame(self, locked: bool, mic: list[float], mic_pos: int) -> tuple[float, float, int]:
        transport = self.transport
        playing = transport.is_playing() and transport.position < TRACK_SAMPLES

        synth_sample = self.synth.process([0.0])[0]

        seq_pos = transport.position if playing else self._free_counter
        self._free_counter += 1
        step, new_step = self.clock.tick(seq_pos)
        if new_step:
            self._send(AudioMsgKind.CURRENT_STEP, step)
            for inst, pattern in enumerate(self.drum_patterns):
                if pattern[step]:
                    self.drum_kit.trigger(inst)
        drum_sample = self.drum_kit.process()

        self._advance_count_in()
        metronome = self._metronome()

        rec_track = transport.recording_track
        if rec_track is not None and transport.position < TRACK_SAMPLES:
            rec_sample = 0.0
            if self.record_source in _MIC_SOURCES and mic_pos < len(mic):
                rec_sample += mic[mic_pos]
                mic_pos += 1
            if self.record_source in _SYNTH_SOURCES:
                rec_sample += synth_sample
            if self.record_source in _DRUM_SOURCES:
                rec_sample += drum_sample
            if locked:
                write_sample(self.buffers, rec_track, transport.position, rec_sample)

        if playing:
            track_samples = []
            for index in range(TRACK_COUNT):
                sample = self.buffers.tracks[index].read(transport.position) if locked else 0.0
                chain = self.effect_chains[index]
                if chain.effects:
                    sample = chain.process([sample])[0]
                track_samples.append(sample)
                self._track_meters[index].push(sample)

            left, right = self.mixer.mix(track_samples)
            recording = transport.recording_track is not None
            # Skip the live monitor path of a source that is being recorded.
            if not recording or self.record_source not in _SYNTH_SOURCES:
                left += synth_sample * 0.5
                right += synth_sample * 0.5
            if not recording or self.record_source not in _DRUM_SOURCES:
                left += drum_sample * 0.5
                right += drum_sample * 0.5
            left += metronome
            right += metronome
            left, right = self.tape_sim.process_stereo(left, right)
            transport.advance()
        else:
            left = right = (synth_sample + drum_sample) * 0.5 + metronome

        self._master_left.push(left)
        self._master_right.push(right)
        self._report()
        return _clamp(left, -1.0, 1.0), _clamp(right, -1.0, 1.0), mic_pos

    def render(self, frame_count: int) -> list[tuple[float, float]]:
        """Process pending commands and render ``frame_count`` stereo frames."""
        self._drain_commands()
        mic = self._drain_mic()
        mic_pos = 0
        # Never block: if the tape is busy, skip tape I/O for this block.
        locked = self.lock.acquire(blocking=False)
        frames = []
        try:
            for _ in range(frame_count):
                left, right, mic_pos = self._frame(locked, mic, mic_pos)
                frames.append((left, right))
        finally:
            if locked:
                self.lock.release()
        return frames
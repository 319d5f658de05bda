# tapedeck

A four-track cassette recorder with a terminal screen. It has a built-in
polyphonic synthesizer, a 16-step drum machine, a small mixer, looping with
overdub count-in, and saves a session as WAV files plus a JSON description.

The package uses only the standard library. The screen is drawn with `curses`,
so the `tapedeck` command needs a platform where Python ships `curses`
(Linux, macOS and other Unix-like systems).

## Installing

```
pip install .
```

To run the test suite:

```
pip install ".[test]"
pytest
```

## What it does not do

The package does not talk to a sound card. The `tapedeck` command runs the
audio engine in a background thread at the real sample rate, but the rendered
stereo frames are not sent to any output device, and it prints a warning saying
so when it starts. Nothing is captured from a microphone either: the MIC record
source only records samples handed to `AudioEngine.feed_input`, which the
command never does. What you can do in the terminal is sequence and arrange
(record synth and drum parts onto tracks, mix, loop, save and load projects);
to hear the result, render frames from Python or open the saved WAV files in
another program.

The engine also supports per-track effect chains, tape simulation and a tape
speed setting, but the keyboard has no bindings for them and effect chains
start empty.

## Running

```
tapedeck
```

The screen has four modes, cycled with `Tab`: **TAPE**, **SYNTH**, **DRUM** and
**MIXER**. The top line shows the mode tabs and the bottom line lists the keys
for the current mode, as far as the terminal width allows.

### Keys available everywhere

| Key      | Action                                                     |
|----------|------------------------------------------------------------|
| Space    | Play / pause (while recording: stop recording, keep playing) |
| Enter    | Stop and rewind to the start                               |
| L        | Toggle looping                                             |
| I        | Cycle the record source: INT, SYNTH, DRUM, MIC, ALL        |
| Ctrl+S   | Save the project to `tapedeck_project/`                    |
| Ctrl+L   | Load the project from `tapedeck_project/`                  |
| Tab      | Next mode                                                  |
| Esc      | Quit (`Q` also quits outside SYNTH mode)                   |

### TAPE

`1`-`4` select a track, `A` arms it for recording (only one track is armed at a
time), `R` records onto the armed track, `M` mutes, `S` solos, `←`/`→` seek by
one second and `[`/`]` by five. Recording starts with a four-beat click
count-in at the current tempo and then begins at position zero, so overdubs
line up with what is already on tape. With looping on, the loop end is the
length of the longest other recorded track.

The view shows the track flags, a level meter per track and a transport line
with the state, position, armed track, record source and loop flag.

### SYNTH

The keyboard is a two-octave piano: `Z S X D C V G B H N J M` play C3 to B3 and
`Q 2 W 3 E 4 5 T 6 Y 7 U` play C4 to B4. Notes are released automatically
200 ms after the key press. `←`/`→` switch between the five engines (SINE, SAW,
FM, STRING, NOISE), `↑`/`↓` change the first engine parameter by 5 % and `R`
records.

### DRUM

Six voices (KICK, SNARE, HAT, CLAP, TOM, RIM) are selected with `1`-`6`. The
keys `Z X C V B N M ,` and `A S D F G H J K` toggle steps 1-16 of the selected
voice. `↑`/`↓` change the tempo by one BPM between 40 and 300, and `R` records.
The drums keep running against a free counter while the tape is stopped.

### MIXER

`1`-`4` select a channel, `↑`/`↓` change its level, `←`/`→` its pan, and `M`
and `S` mute and solo it. The view lists each channel with its level, pan,
flags and meter, plus the master left/right meters.

## Record sources

| Source | What is written to the armed track |
|--------|------------------------------------|
| INT    | synth and drums                    |
| SYNTH  | synth only                         |
| DRUM   | drums only                         |
| MIC    | microphone input only              |
| ALL    | synth, drums and microphone        |

While a source is being recorded it is left out of the live monitor mix, so it
is not added twice.

## Project files

Saving writes `tapedeck_project/meta.json` with the project name, tempo, track
count, sample rate and each track's level, pan, mute, solo, arm state and file
name, plus one 32-bit float mono WAV file per track that holds audio
(`track_1.wav` to `track_4.wav`, 44.1 kHz). Loading accepts 8-, 16-, 24- and
32-bit integer or 32-bit float WAV files and averages multichannel files down
to mono; a track whose file is missing is left empty.

## Using the pieces in Python

The parts of the deck are ordinary classes and functions. The transport keeps
the play head and wraps it at the loop end:

```python
from tapedeck.audio.transport import Transport

transport = Transport()
transport.play()
transport.seek(12_345)
transport.advance()
print(transport.position)  # 12346
```

The sequencer clock turns a sample position into a sixteenth-note step:

```python
from tapedeck.sequencer.clock import SequencerClock

clock = SequencerClock(120.0)
step, is_new = clock.tick(0)  # (0, True)
```

`tapedeck.audio.engine.AudioEngine` renders the whole deck: put
`tapedeck.messages.AudioCmd` objects on its `commands` queue, call
`render(frame_count)` to get a list of `(left, right)` frames, and read status
reports (`AudioMsg`) from its `messages` queue. `feed_input` supplies
microphone samples.

Synth engines are created by index with `tapedeck.synth.engines.create_engine`,
effects (`Reverb`, `Delay`, `Filter`, `Distortion`, `Chorus`, `EffectChain`)
live in `tapedeck.effects`, tape simulation and cubic-interpolated reads in
`tapedeck.tape`, and `tapedeck.project` holds `ProjectMeta`, `save_project`,
`load_project` and `read_wav_mono`. `tapedeck.keymap.handle_key` maps a
`KeyPress` to a UI event, and `tapedeck.main.render_screen` returns the screen
as text lines.
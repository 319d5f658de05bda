from tapedeck.sequencer.drum_kit import DrumKit


def test_names():
    assert DrumKit().names == ["KICK", "SNARE", "HAT", "CLAP", "TOM", "RIM"]


def test_idle_kit_is_silent():
    kit = DrumKit()
    assert all(kit.process() == 0.0 for _ in range(100))


def test_trigger_unknown_instrument_is_ignored():
    kit = DrumKit()
    kit.trigger(6)
    kit.trigger(-1)
    assert not any(v.active for v in kit.voices)
    assert kit.process() == 0.0


def test_trigger_starts_only_that_voice():
    kit = DrumKit()
    kit.trigger(1)
    assert [v.active for v in kit.voices] == [False, True, False, False, False, False]
    assert kit.voices[1].envelope == 1.0


def test_triggered_kit_makes_sound():
    kit = DrumKit()
    kit.trigger(0)
    samples = [kit.process() for _ in range(200)]
    assert max(abs(s) for s in samples) > 0.0


def test_voice_output_is_bounded():
    kit = DrumKit()
    voice = kit.voices[3]
    voice.trigger()
    assert all(abs(voice.process()) <= 1.0 for _ in range(5000))


def test_voice_decays_to_silence():
    kit = DrumKit()
    voice = kit.voices[2]
    voice.trigger()
    for _ in range(200_000):
        voice.process()
        if not voice.active:
            break
    assert voice.active is False
    assert voice.process() == 0.0


def test_envelope_decreases():
    kit = DrumKit()
    voice = kit.voices[5]
    voice.trigger()
    voice.process()
    first = voice.envelope
    voice.process()
    assert voice.envelope < first < 1.0


def test_retrigger_resets_envelope():
    kit = DrumKit()
    kit.trigger(4)
    for _ in range(1000):
        kit.process()
    kit.trigger(4)
    assert kit.voices[4].envelope == 1.0
    assert kit.voices[4].phase == 0.0
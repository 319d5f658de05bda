"""Track buffers, transport, mixer and the audio engine."""
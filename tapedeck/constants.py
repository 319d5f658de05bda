"""Fixed audio and timing parameters shared across the deck."""

SAMPLE_RATE = 44_100
BUFFER_SIZE = 512
TRACK_COUNT = 4
# Maximum recording duration in seconds.
MAX_DURATION_SECS = 360
# Total samples per (mono) track.
TRACK_SAMPLES = SAMPLE_RATE * MAX_DURATION_SECS
# UI refresh rate target.
UI_FPS = 60
# Queue capacity for inter-thread messages.
CHANNEL_CAPACITY = 1024
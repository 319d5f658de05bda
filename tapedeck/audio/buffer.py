"""Per-track sample storage and direct writes into it."""

from __future__ import annotations

from array import array
from dataclasses import dataclass, field

from tapedeck.constants import TRACK_COUNT, TRACK_SAMPLES

_ITEM_BYTES = array("f").itemsize


class TrackBuffer:
    """Mono 32-bit float samples for one track.

    ``length`` marks how much of ``data`` holds recorded audio; anything past
    it reads as silence. Storage grows on demand up to ``TRACK_SAMPLES``.
    """

    def __init__(self) -> None:
        self.data = array("f")
        self.length = 0

    def read(self, pos: int) -> float:
        """Sample at ``pos``, or 0.0 outside the recorded region."""
        if 0 <= pos < self.length and pos < len(self.data):
            return self.data[pos]
        return 0.0

    def has_data(self) -> bool:
        """Whether anything has been recorded."""
        return self.length > 0

    def sample_count(self) -> int:
        """Number of recorded samples."""
        return self.length


@dataclass
class SharedBuffers:
    """The buffers of all tracks."""

    tracks: list[TrackBuffer] = field(
        default_factory=lambda: [TrackBuffer() for _ in range(TRACK_COUNT)]
    )


def downsample_track(buffer: TrackBuffer, width: int) -> list[float]:
    """Peak-per-column waveform of the recorded part of ``buffer``."""
    length = buffer.sample_count()
    if length == 0 or width == 0:
        return [0.0] * width
    per_pixel = length // width
    if per_pixel == 0:
        return [0.0] * width
    peaks = []
    for column in range(width):
        start = column * per_pixel
        end = min(start + per_pixel, length)
        peaks.append(max((abs(v) for v in buffer.data[start:end]), default=0.0))
    return peaks


def write_sample(buffers: SharedBuffers, track: int, position: int, sample: float) -> None:
    """Store ``sample`` on ``track`` at ``position``, extending the recorded length.

    Positions at or beyond the track capacity are ignored.
    """
    if position < 0:
        raise ValueError(f"negative sample position: {position}")
    if position >= TRACK_SAMPLES:
        return
    buffer = buffers.tracks[track]
    missing = position + 1 - len(buffer.data)
    if missing > 0:
        buffer.data.frombytes(bytes(missing * _ITEM_BYTES))
    buffer.data[position] = sample
    if position >= buffer.length:
        buffer.length = position + 1
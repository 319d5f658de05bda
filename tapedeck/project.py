"""Project metadata and saving/loading projects as WAV files plus JSON."""

from __future__ import annotations

import json
import struct
import sys
from array import array
from dataclasses import asdict, dataclass, field
from os import PathLike
from pathlib import Path
from typing import Any, Callable

from tapedeck.audio.buffer import SharedBuffers
from tapedeck.constants import SAMPLE_RATE, TRACK_COUNT, TRACK_SAMPLES

META_FILENAME = "meta.json"

_FORMAT_PCM = 1
_FORMAT_FLOAT = 3
_FORMAT_EXTENSIBLE = 0xFFFE


@dataclass
class TrackMeta:
    """Saved mixer settings and audio file name of one track."""

    index: int
    level: float = 0.8
    pan: float = 0.0
    muted: bool = False
    solo: bool = False
    armed: bool = False
    filename: str = ""

    def __post_init__(self) -> None:
        if not self.filename:
            self.filename = f"track_{self.index + 1}.wav"


def _default_tracks() -> list[TrackMeta]:
    return [TrackMeta(index=i) for i in range(TRACK_COUNT)]


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _is_uint(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value >= 0


def _is_bool(value: Any) -> bool:
    return isinstance(value, bool)


def _is_str(value: Any) -> bool:
    return isinstance(value, str)


def _field(data: Any, key: str, check: Callable[[Any], bool], what: str) -> Any:
    if not isinstance(data, dict) or key not in data:
        raise ValueError(f"project metadata is missing field {key!r}")
    value = data[key]
    if not check(value):
        raise ValueError(f"project metadata field {key!r} must be {what}")
    return value


def _track_from_dict(data: Any) -> TrackMeta:
    return TrackMeta(
        index=_field(data, "index", _is_uint, "a non-negative integer"),
        level=float(_field(data, "level", _is_number, "a number")),
        pan=float(_field(data, "pan", _is_number, "a number")),
        muted=_field(data, "muted", _is_bool, "a boolean"),
        solo=_field(data, "solo", _is_bool, "a boolean"),
        armed=_field(data, "armed", _is_bool, "a boolean"),
        filename=_field(data, "filename", _is_str, "a string"),
    )


@dataclass
class ProjectMeta:
    """Everything about a project except the audio itself."""

    name: str
    bpm: float = 120.0
    track_count: int = TRACK_COUNT
    sample_rate: int = SAMPLE_RATE
    tracks: list[TrackMeta] = field(default_factory=_default_tracks)

    def to_dict(self) -> dict[str, Any]:
        """Plain JSON-ready representation."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Any) -> ProjectMeta:
        """Build metadata from its JSON form; raises ValueError on bad input."""
        tracks = _field(data, "tracks", lambda v: isinstance(v, list), "a list")
        return cls(
            name=_field(data, "name", _is_str, "a string"),
            bpm=float(_field(data, "bpm", _is_number, "a number")),
            track_count=_field(data, "track_count", _is_uint, "a non-negative integer"),
            sample_rate=_field(data, "sample_rate", _is_uint, "a non-negative integer"),
            tracks=[_track_from_dict(track) for track in tracks],
        )


def _write_wav_float(path: Path, samples: array) -> None:
    data = array("f", samples)
    if sys.byteorder == "big":
        data.byteswap()
    payload = data.tobytes()
    fmt = struct.pack(
        "<HHIIHH", _FORMAT_FLOAT, 1, SAMPLE_RATE, SAMPLE_RATE * 4, 4, 32
    )
    with path.open("wb") as handle:
        handle.write(b"RIFF")
        handle.write(struct.pack("<I", 4 + 8 + len(fmt) + 8 + len(payload)))
        handle.write(b"WAVE")
        handle.write(b"fmt " + struct.pack("<I", len(fmt)) + fmt)
        handle.write(b"data" + struct.pack("<I", len(payload)))
        handle.write(payload)


def save_project(
    directory: str | PathLike[str], meta: ProjectMeta, buffers: SharedBuffers
) -> None:
    """Write every recorded track as 32-bit float WAV and the metadata as JSON."""
    directory = Path(directory)
    directory.mkdir(parents=True, exist_ok=True)

    for index, buffer in enumerate(buffers.tracks[:TRACK_COUNT]):
        length = buffer.sample_count()
        if length == 0:
            continue
        if index >= len(meta.tracks):
            raise ValueError(f"project metadata has no entry for track {index + 1}")
        samples = buffer.data[:length]
        if len(samples) < length:
            samples.extend([0.0] * (length - len(samples)))
        _write_wav_float(directory / meta.tracks[index].filename, samples)

    (directory / META_FILENAME).write_text(
        json.dumps(meta.to_dict(), indent=2), encoding="utf-8"
    )


def load_project(
    directory: str | PathLike[str], buffers: SharedBuffers
) -> ProjectMeta:
    """Read a saved project into ``buffers`` and return its metadata.

    Tracks whose audio file is missing are left empty.
    """
    directory = Path(directory)
    text = (directory / META_FILENAME).read_text(encoding="utf-8")
    meta = ProjectMeta.from_dict(json.loads(text))

    for buffer in buffers.tracks:
        buffer.length = 0

    for buffer, track in zip(buffers.tracks[:TRACK_COUNT], meta.tracks):
        path = directory / track.filename
        if not path.exists():
            continue
        samples = read_wav_mono(path)[:TRACK_SAMPLES]
        buffer.data = array("f", samples)
        buffer.length = len(samples)

    return meta


def _chunks(raw: bytes) -> dict[bytes, bytes]:
    found: dict[bytes, bytes] = {}
    pos = 12
    while pos + 8 <= len(raw):
        chunk_id = raw[pos:pos + 4]
        (size,) = struct.unpack_from("<I", raw, pos + 4)
        found.setdefault(chunk_id, raw[pos + 8:pos + 8 + size])
        pos += 8 + size + (size & 1)
    return found


def _native(typecode: str, data: bytes) -> array:
    values = array(typecode)
    values.frombytes(data)
    if sys.byteorder == "big":
        values.byteswap()
    return values


def read_wav_mono(path: str | PathLike[str]) -> list[float]:
    """Decode a WAV file to mono floats, averaging interleaved channels.

    Supports 32-bit float and 8, 16, 24 and 32-bit integer PCM.
    """
    path = Path(path)
    raw = path.read_bytes()
    if len(raw) < 12 or raw[:4] != b"RIFF" or raw[8:12] != b"WAVE":
        raise ValueError(f"{path} is not a WAV file")

    chunks = _chunks(raw)
    fmt = chunks.get(b"fmt ")
    data = chunks.get(b"data")
    if fmt is None or len(fmt) < 16:
        raise ValueError(f"{path} has no valid format chunk")
    if data is None:
        raise ValueError(f"{path} has no data chunk")

    tag, channels, _rate, _byte_rate, _align, bits = struct.unpack_from("<HHIIHH", fmt)
    if tag == _FORMAT_EXTENSIBLE and len(fmt) >= 26:
        (tag,) = struct.unpack_from("<H", fmt, 24)
    if tag not in (_FORMAT_PCM, _FORMAT_FLOAT):
        raise ValueError(f"Unsupported WAV format in {path} (format tag {tag})")
    if channels == 0:
        raise ValueError(f"{path} declares zero channels")

    is_float = tag == _FORMAT_FLOAT
    width = bits // 8
    if width:
        data = data[:len(data) - len(data) % width]

    if is_float and bits == 32:
        samples = list(_native("f", data))
    elif not is_float and bits == 8:
        samples = [(byte - 128) / 127 for byte in data]
    elif not is_float and bits == 16:
        samples = [v / 32767 for v in _native("h", data)]
    elif not is_float and bits == 24:
        denom = float(1 << 23)
        samples = [
            int.from_bytes(data[i:i + 3], "little", signed=True) / denom
            for i in range(0, len(data), 3)
        ]
    elif not is_float and bits == 32:
        denom = float(1 << 31)
        samples = [
            v / denom
            for (v,) in struct.iter_unpack("<i", data)
        ]
    else:
        kind = "Float" if is_float else "Int"
        raise ValueError(f"Unsupported WAV format in {path} ({bits}-bit {kind})")

    if channels == 1:
        return samples
    return [sum(frame) / channels for frame in zip(*[iter(samples)] * channels)]
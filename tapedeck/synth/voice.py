"""Polyphonic voice allocation with oldest-note stealing."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass


@dataclass
class _Voice:
    note: int = 0
    active: bool = False
    age: int = 0


class VoiceAllocator:
    """Assigns notes to a fixed number of voice slots."""

    def __init__(self, max_voices: int) -> None:
        self.max_voices = max_voices
        self._voices = [_Voice() for _ in range(max_voices)]

    def _next_age(self) -> int:
        return max((v.age for v in self._voices), default=0) + 1

    def _find_active(self, note: int) -> int | None:
        return next(
            (i for i, v in enumerate(self._voices) if v.active and v.note == note),
            None,
        )

    def note_on(self, note: int) -> int:
        """Allocate a voice for ``note`` and return its index.

        A note already sounding keeps its voice; otherwise a free voice is
        taken, or the oldest one is stolen.
        """
        if not self._voices:
            raise ValueError("allocator has no voices")
        index = self._find_active(note)
        if index is not None:
            self._voices[index].age = self._next_age()
            return index

        index = next((i for i, v in enumerate(self._voices) if not v.active), None)
        if index is None:
            index = min(range(len(self._voices)), key=lambda i: self._voices[i].age)

        age = self._next_age()
        voice = self._voices[index]
        voice.note = note
        voice.active = True
        voice.age = age
        return index

    def note_off(self, note: int) -> int | None:
        """Release ``note``; returns its voice index, or None if it was not sounding."""
        index = self._find_active(note)
        if index is not None:
            self._voices[index].active = False
        return index

    def active_voices(self) -> Iterator[tuple[int, int]]:
        """Yield ``(voice_index, note)`` for every sounding voice."""
        for index, voice in enumerate(self._voices):
            if voice.active:
                yield index, voice.note
"""Step patterns for the drum sequencer."""

from __future__ import annotations

from dataclasses import dataclass, field

STEP_COUNT = 16


@dataclass
class Pattern:
    """On/off state of each of the 16 steps for one instrument."""

    steps: list[bool] = field(default_factory=lambda: [False] * STEP_COUNT)

    def toggle(self, step: int) -> None:
        """Flip ``step``; steps outside the bar are ignored."""
        if 0 <= step < STEP_COUNT:
            self.steps[step] = not self.steps[step]

    def is_active(self, step: int) -> bool:
        return 0 <= step < STEP_COUNT and self.steps[step]


class PatternBank:
    """One pattern per instrument."""

    def __init__(self, instrument_count: int) -> None:
        self.patterns = [Pattern() for _ in range(instrument_count)]
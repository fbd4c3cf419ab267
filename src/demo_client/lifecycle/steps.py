"""Step selection for the demo viewer. Pure, no I/O."""

from dataclasses import dataclass

from demo_client.types import Demo, Step


@dataclass
class StepViewModel:
    """
    Tracks which step of a demo is active.

    active_index always lies in [0, len(steps) - 1], or is 0 when there
    are no steps. Updating from a new snapshot re-clamps the index, so a
    steps list that shrinks (or empties) never leaves it dangling.

    Attributes:
        steps: Steps of the latest snapshot, sorted by step_number
        active_index: Position of the selected step in steps
    """

    steps: tuple[Step, ...] = ()
    active_index: int = 0

    def update(self, demo: Demo | None) -> None:
        """Take the steps of a new snapshot, keeping the selection if it still fits."""
        self.steps = demo.steps if demo is not None else ()
        self.active_index = self._clamp(self.active_index)

    def select(self, index: int) -> Step | None:
        """Select a step by position; out-of-range indices are clamped."""
        self.active_index = self._clamp(index)
        return self.active_step

    def next(self) -> Step | None:
        return self.select(self.active_index + 1)

    def previous(self) -> Step | None:
        return self.select(self.active_index - 1)

    @property
    def active_step(self) -> Step | None:
        if not self.steps:
            return None
        return self.steps[self.active_index]

    def _clamp(self, index: int) -> int:
        if not self.steps:
            return 0
        return max(0, min(index, len(self.steps) - 1))

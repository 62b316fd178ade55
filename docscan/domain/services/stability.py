"""Stability tracking - temporal consistency of detected quadrilaterals."""

from __future__ import annotations

from ...config import STABILITY_THRESHOLD, STABILITY_TOLERANCE
from ..value_objects.geometry import Quadrilateral


class StabilityTracker:
    """Bounded history of accepted quadrilaterals for one scanning session.

    A detection is stable once the last `threshold` accepted quads,
    including the current one, all have every corner within `tolerance`
    pixels of the current quad. Any missed frame clears the history.

    Not safe for concurrent use; give each session its own tracker.
    """

    def __init__(
        self,
        threshold: int = STABILITY_THRESHOLD,
        tolerance: float = STABILITY_TOLERANCE
    ):
        if threshold < 1:
            raise ValueError(f"threshold must be >= 1, got {threshold}")
        self.threshold = threshold
        self.tolerance = tolerance
        self._history: list[Quadrilateral] = []

    @property
    def history(self) -> tuple[Quadrilateral, ...]:
        return tuple(self._history)

    def __len__(self) -> int:
        return len(self._history)

    def record(self, quad: Quadrilateral) -> None:
        """Append a quad; past 2x threshold entries keep only the last threshold."""
        self._history.append(quad)
        if len(self._history) > self.threshold * 2:
            self._history = self._history[-self.threshold:]

    def is_stable(self, quad: Quadrilateral) -> bool:
        """Check quad against the most recent threshold entries."""
        if len(self._history) < self.threshold:
            return False
        return all(
            quad.is_close_to(previous, self.tolerance)
            for previous in self._history[-self.threshold:]
        )

    def update(self, quad: Quadrilateral) -> bool:
        """Record a successful detection and report whether it is stable."""
        self.record(quad)
        return self.is_stable(quad)

    def record_miss(self) -> None:
        """A frame without a detection restarts stability from scratch."""
        self._history.clear()

    def reset(self) -> None:
        """Forget all history, e.g. when a scanning session ends."""
        self._history.clear()

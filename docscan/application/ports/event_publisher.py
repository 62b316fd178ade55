"""Event Publisher port - progress of a scan run."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Callable, Iterable, Protocol, runtime_checkable

from ...domain.entities.detection import DetectionResult


class ScanStage(str, Enum):
    """Points in a batch run at which events are published."""
    BATCH_START = "batch_start"
    PROCESSING = "processing"
    DETECTION = "detection"
    BATCH_COMPLETE = "batch_complete"


@dataclass(frozen=True, slots=True)
class ScanEvent:
    """Event during a scan run.

    Detection events carry the frame's DetectionResult so listeners can
    show the outline without re-running the detector.
    """
    stage: ScanStage
    message: str
    progress: float | None = None  # 0.0 to 1.0
    image_path: Path | None = None
    detection: DetectionResult | None = None

    @property
    def document_found(self) -> bool:
        return self.detection is not None and self.detection.detected


ScanCallback = Callable[[ScanEvent], None]


@runtime_checkable
class EventPublisher(Protocol):
    """Port for publishing scan events."""

    def publish(self, event: ScanEvent) -> None:
        ...

    def subscribe(self, callback: ScanCallback, stages: Iterable[ScanStage] | None = None) -> None:
        """Subscribe to all events, or only to the given stages."""
        ...


class SimpleEventPublisher:
    """Synchronous in-process publisher."""

    def __init__(self):
        self._subscribers: list[tuple[ScanCallback, frozenset[ScanStage] | None]] = []

    def publish(self, event: ScanEvent) -> None:
        for callback, stages in self._subscribers:
            if stages is None or event.stage in stages:
                callback(event)

    def subscribe(self, callback: ScanCallback, stages: Iterable[ScanStage] | None = None) -> None:
        self._subscribers.append((callback, None if stages is None else frozenset(stages)))

    def unsubscribe(self, callback: ScanCallback) -> None:
        self._subscribers = [entry for entry in self._subscribers if entry[0] != callback]

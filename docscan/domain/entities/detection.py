"""Detection and capture results."""

from __future__ import annotations

from dataclasses import dataclass

from ...exceptions import DetectionError
from ..value_objects.geometry import Quadrilateral
from .image import PixelArray


@dataclass(frozen=True, slots=True)
class DetectionResult:
    """Outcome of analysing one frame."""
    detected: bool
    quad: Quadrilateral | None
    confidence: float
    stable: bool

    def __post_init__(self) -> None:
        if self.detected != (self.quad is not None):
            raise ValueError("quad must be present exactly when detected is True")
        if self.stable and not self.detected:
            raise ValueError("an undetected frame cannot be stable")
        if not 0.0 <= self.confidence <= 1.0:
            raise ValueError(f"confidence out of range: {self.confidence}")

    @classmethod
    def not_detected(cls) -> DetectionResult:
        return cls(detected=False, quad=None, confidence=0.0, stable=False)

    def to_dict(self) -> dict:
        """Plain representation for reports and logs."""
        return {
            "detected": self.detected,
            "quad": None if self.quad is None else {
                role: [point.x, point.y]
                for role, point in zip(
                    ("top_left", "top_right", "bottom_right", "bottom_left"),
                    self.quad,
                )
            },
            "confidence": self.confidence,
            "stable": self.stable,
        }


@dataclass(frozen=True, slots=True)
class DetectionOutcome:
    """Detection result plus the fault, if the pipeline broke.

    Lets callers tell a frame with no document apart from an internal error.
    """
    result: DetectionResult
    error: DetectionError | None = None

    @property
    def faulted(self) -> bool:
        return self.error is not None

    @classmethod
    def failure(cls, error: DetectionError) -> DetectionOutcome:
        """Create a faulted outcome that degrades to not detected."""
        return cls(result=DetectionResult.not_detected(), error=error)


@dataclass(frozen=True, slots=True)
class CaptureResult:
    """Result of correcting and enhancing one capture."""
    success: bool
    image: PixelArray | None = None
    corrected: bool = False
    enhanced: bool = False
    error_message: str | None = None
    processing_time_ms: float = 0.0

    @classmethod
    def failure(cls, error: str) -> CaptureResult:
        """Create a failure result."""
        return cls(success=False, error_message=error)

    @classmethod
    def success_result(
        cls,
        image: PixelArray,
        corrected: bool,
        enhanced: bool,
        error_message: str | None = None,
        processing_time_ms: float = 0.0
    ) -> CaptureResult:
        """Create a success result.

        error_message may carry the reason a fallback was taken.
        """
        return cls(
            success=True,
            image=image,
            corrected=corrected,
            enhanced=enhanced,
            error_message=error_message,
            processing_time_ms=processing_time_ms
        )

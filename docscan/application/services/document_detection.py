"""Document detection service - per-frame pipeline plus stability."""

from __future__ import annotations

import logging

from ...core.image_ops import analysis_size, resize_for_analysis
from ...domain.entities.detection import DetectionOutcome, DetectionResult
from ...domain.entities.image import as_pixel_array
from ...domain.services.contours import iter_contours
from ...domain.services.preprocessing import preprocess
from ...domain.services.quadrilateral import select_best_quadrilateral
from ...domain.services.stability import StabilityTracker
from ...domain.value_objects.config import ScanConfig
from ...domain.value_objects.geometry import Quadrilateral
from ...exceptions import DetectionError

logger = logging.getLogger(__name__)


class DocumentDetector:
    """Detect a document in successive frames of one scanning session.

    Each call analyses a single frame: resize to the analysis width,
    build the edge map, trace contours, pick the best quadrilateral and
    map it back to frame coordinates. Stability is judged against the
    quads accepted in earlier frames of the same session.

    Not safe for concurrent use. Use one detector per session.
    """

    def __init__(self, config: ScanConfig | None = None):
        self._config = config or ScanConfig()
        self._detection = self._config.to_detection_config()
        self._tracker = StabilityTracker(
            threshold=self._detection.stability_threshold,
            tolerance=self._detection.stability_tolerance
        )

    @property
    def config(self) -> ScanConfig:
        return self._config

    @property
    def tracker(self) -> StabilityTracker:
        return self._tracker

    def detect_document(self, frame, analysis_width: int | None = None) -> DetectionResult:
        """Analyse one frame.

        Internal faults are logged and reported as not detected.

        Args:
            frame: numpy RGB(A) array, PIL image or Image entity
            analysis_width: Override for the configured analysis width

        Returns:
            DetectionResult with corners in the frame's coordinates
        """
        return self.analyze(frame, analysis_width).result

    def analyze(self, frame, analysis_width: int | None = None) -> DetectionOutcome:
        """Like detect_document, but keeps the fault if the pipeline broke."""
        width = analysis_width if analysis_width is not None else self._detection.analysis_width
        if width < 1:
            logger.warning(f"Cannot analyse frame at width {width}")
            self._tracker.record_miss()
            return DetectionOutcome.failure(DetectionError(f"analysis_width must be positive, got {width}"))

        try:
            quad, confidence = self._locate(frame, width)
        except Exception as e:
            logger.exception("Document detection failed")
            self._tracker.record_miss()
            return DetectionOutcome.failure(DetectionError(f"{type(e).__name__}: {e}"))

        if quad is None:
            self._tracker.record_miss()
            return DetectionOutcome(result=DetectionResult.not_detected())

        stable = self._tracker.update(quad)
        logger.debug(f"Detected document, confidence {confidence:.3f}, stable={stable}")
        return DetectionOutcome(result=DetectionResult(
            detected=True,
            quad=quad,
            confidence=confidence,
            stable=stable
        ))

    def reset_detection(self) -> None:
        """End the session; the next frame starts with an empty history."""
        self._tracker.reset()

    def _locate(self, frame, analysis_width: int) -> tuple[Quadrilateral | None, float]:
        pixels = as_pixel_array(frame)
        height, width = pixels.shape[:2]
        if width == 0 or height == 0:
            return None, 0.0

        _, target_height = analysis_size(width, height, analysis_width)
        if target_height < 1:
            return None, 0.0

        analysis, scale = resize_for_analysis(pixels, analysis_width)
        edges = preprocess(analysis, self._detection.edge_threshold)

        contours = iter_contours(
            edges,
            max_steps=self._detection.max_trace_steps,
            min_points=self._detection.min_contour_points
        )
        quad, confidence = select_best_quadrilateral(
            contours,
            frame_width=analysis.shape[1],
            frame_height=analysis.shape[0],
            config=self._detection
        )
        if quad is None:
            return None, 0.0

        return quad.scale(1 / scale), min(confidence, 1.0)

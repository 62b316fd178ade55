"""Batch processor for scanning still images from disk."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Iterable

from ...config import SUPPORTED_IMAGE_EXTENSIONS
from ...core.image_ops import draw_detection_overlay
from ...domain.entities.detection import CaptureResult, DetectionResult
from ...domain.entities.image import Image
from ...domain.value_objects.config import EnhancementOptions, ScanConfig
from ..ports.event_publisher import EventPublisher, ScanEvent, ScanStage, SimpleEventPublisher
from .capture import CaptureService
from .document_detection import DocumentDetector

logger = logging.getLogger(__name__)


@dataclass
class ScanRecord:
    """Outcome for one input file."""
    path: Path
    detection: DetectionResult
    capture: CaptureResult
    output_path: Path | None = None
    overlay_path: Path | None = None

    def to_dict(self) -> dict:
        return {
            "path": str(self.path),
            "success": self.capture.success,
            "detection": self.detection.to_dict(),
            "corrected": self.capture.corrected,
            "enhanced": self.capture.enhanced,
            "output": None if self.output_path is None else str(self.output_path),
            "overlay": None if self.overlay_path is None else str(self.overlay_path),
            "error": self.capture.error_message,
            "processing_time_ms": self.capture.processing_time_ms,
        }


@dataclass
class BatchResult:
    """Result of batch processing."""
    total: int
    successful: int
    failed: int
    detected: int
    processing_time_ms: float
    results: list[ScanRecord]

    @property
    def success_rate(self) -> float:
        """Calculate success rate."""
        if self.total == 0:
            return 0.0
        return self.successful / self.total

    def to_dict(self) -> dict:
        """JSON-ready summary."""
        return {
            "total": self.total,
            "successful": self.successful,
            "failed": self.failed,
            "detected": self.detected,
            "processing_time_ms": self.processing_time_ms,
            "files": [record.to_dict() for record in self.results],
        }


class BatchProcessor:
    """Scan multiple images: detect, correct, enhance, save.

    Every file is treated as its own session, so the stability history is
    reset between files.
    """

    def __init__(
        self,
        config: ScanConfig | None = None,
        event_publisher: EventPublisher | None = None,
        save_overlay: bool = False
    ):
        self._config = config or ScanConfig()
        self._detector = DocumentDetector(self._config)
        self._capture = CaptureService(self._config)
        self._events = event_publisher or SimpleEventPublisher()
        self._save_overlay = save_overlay

    def scan_file(
        self,
        file_path: Path,
        output_dir: Path,
        options: EnhancementOptions | None = None
    ) -> ScanRecord:
        """Scan a single file and save the result.

        Raises:
            ImageProcessingError: If the file cannot be read or written
        """
        source = Image.from_file(file_path)
        pixels = source.to_array()

        self._detector.reset_detection()
        detection = self._detector.detect_document(pixels)
        if detection.detected:
            logger.info(f"{file_path.name}: document found (confidence {detection.confidence:.2f})")
        else:
            logger.info(f"{file_path.name}: no document found, keeping full frame")

        self._events.publish(ScanEvent(
            stage=ScanStage.DETECTION,
            message=f"{'Detected' if detection.detected else 'No document in'} {file_path.name}",
            image_path=file_path,
            detection=detection
        ))

        capture = self._capture.process_capture(pixels, detection.quad, options)
        record = ScanRecord(path=file_path, detection=detection, capture=capture)
        if not capture.success or capture.image is None:
            return record

        record.output_path = output_dir / f"scanned_{file_path.name}"
        Image.from_array(capture.image, source_path=file_path).save(record.output_path)

        if self._save_overlay:
            record.overlay_path = output_dir / f"overlay_{file_path.name}"
            overlay = draw_detection_overlay(pixels, detection)
            Image.from_array(overlay, source_path=file_path).save(record.overlay_path)

        return record

    def process_files(
        self,
        files: list[Path],
        output_dir: Path,
        options: EnhancementOptions | None = None,
        progress_callback: Callable[[int, int, str], None] | None = None,
        continue_on_error: bool = True
    ) -> BatchResult:
        """Process multiple files.

        Args:
            files: List of image files to process
            output_dir: Directory to save results
            options: Enhancement settings; defaults to the configured ones
            progress_callback: Optional callback(current, total, message)
            continue_on_error: Keep going after a failed file

        Returns:
            Batch processing result
        """
        start_time = time.time()

        results: list[ScanRecord] = []
        successful = 0
        failed = 0
        detected = 0

        output_dir.mkdir(parents=True, exist_ok=True)

        self._events.publish(ScanEvent(
            stage=ScanStage.BATCH_START,
            message=f"Starting batch of {len(files)} files",
            progress=0.0
        ))

        with self._capture:
            for i, file_path in enumerate(files, 1):
                if progress_callback:
                    progress_callback(i, len(files), f"Scanning {file_path.name}")

                self._events.publish(ScanEvent(
                    stage=ScanStage.PROCESSING,
                    message=f"Scanning {file_path.name}",
                    progress=(i - 1) / len(files),
                    image_path=file_path
                ))

                try:
                    record = self.scan_file(file_path, output_dir, options)
                except Exception as e:
                    logger.exception(f"Error scanning {file_path.name}")
                    record = ScanRecord(
                        path=file_path,
                        detection=DetectionResult.not_detected(),
                        capture=CaptureResult.failure(str(e))
                    )

                results.append(record)
                if record.detection.detected:
                    detected += 1

                if record.capture.success:
                    successful += 1
                else:
                    failed += 1
                    logger.error(f"Failed {file_path.name}: {record.capture.error_message}")
                    if not continue_on_error:
                        break

        elapsed = (time.time() - start_time) * 1000

        self._events.publish(ScanEvent(
            stage=ScanStage.BATCH_COMPLETE,
            message=f"Batch complete: {successful}/{len(files)} succeeded",
            progress=1.0
        ))

        return BatchResult(
            total=len(files),
            successful=successful,
            failed=failed,
            detected=detected,
            processing_time_ms=elapsed,
            results=results
        )

    def process_directory(
        self,
        input_dir: Path,
        output_dir: Path,
        extensions: tuple[str, ...] = SUPPORTED_IMAGE_EXTENSIONS,
        **kwargs
    ) -> BatchResult:
        """Process all images in directory.

        Args:
            input_dir: Input directory
            output_dir: Output directory
            extensions: File extensions to process
            **kwargs: Additional args for process_files

        Returns:
            Batch processing result
        """
        files = [
            f for f in input_dir.iterdir()
            if f.is_file() and f.suffix.lower() in extensions
        ]
        files.sort()

        return self.process_files(files, output_dir, **kwargs)

    def subscribe_to_events(
        self,
        callback: Callable[[ScanEvent], None],
        stages: Iterable[ScanStage] | None = None
    ) -> None:
        """Subscribe to scan events, optionally only some stages."""
        self._events.subscribe(callback, stages)

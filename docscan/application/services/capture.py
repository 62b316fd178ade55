"""Capture service - perspective correction and enhancement of a capture."""

from __future__ import annotations

import logging
import time
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Any, Mapping

import numpy as np

from ...domain.entities.detection import CaptureResult
from ...domain.entities.image import as_pixel_array
from ...domain.services.enhancement import enhance_document
from ...domain.services.perspective import apply_perspective_correction
from ...domain.value_objects.config import EnhancementOptions, ScanConfig
from ...domain.value_objects.geometry import Quadrilateral
from ...exceptions import ImageProcessingError

logger = logging.getLogger(__name__)

OptionsLike = EnhancementOptions | Mapping[str, Any]


class CaptureService:
    """Turn a captured frame into a flat, enhanced page.

    Full-resolution warps can be slow, so process_capture_async runs them
    on a worker pool owned by the service. Use as a context manager or
    call close() to release the pool.
    """

    def __init__(self, config: ScanConfig | None = None, max_workers: int = 1):
        self._config = config or ScanConfig()
        self._max_workers = max_workers
        self._executor: ThreadPoolExecutor | None = None

    def __enter__(self) -> CaptureService:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def close(self) -> None:
        """Shut down the worker pool, waiting for pending captures."""
        if self._executor is not None:
            self._executor.shutdown(wait=True)
            self._executor = None

    def correct(
        self,
        image,
        quad: Quadrilateral,
        output_width: int | None = None,
        output_height: int | None = None
    ) -> np.ndarray:
        """Warp the quad region of image onto an upright rectangle.

        Raises:
            PerspectiveCorrectionError: If the warp cannot be produced
        """
        return apply_perspective_correction(as_pixel_array(image), quad, output_width, output_height)

    def process_capture(
        self,
        image,
        quad: Quadrilateral | None = None,
        options: OptionsLike | None = None
    ) -> CaptureResult:
        """Correct and enhance a capture.

        When there is no quad, perspective correction is disabled, or the
        warp fails, the uncorrected capture is used instead and the result
        reports corrected=False.

        Args:
            image: Captured frame (numpy array, PIL image or Image entity)
            quad: Document corners in the frame's coordinates
            options: Enhancement settings; defaults to the configured ones

        Returns:
            CaptureResult with the output buffer

        Raises:
            ValidationError: If options are invalid
        """
        start_time = time.time()

        if options is None:
            options = self._config.enhancement
        if options is not None:
            options = EnhancementOptions.parse(options)

        try:
            pixels = as_pixel_array(image)
        except ImageProcessingError as e:
            logger.error(f"Cannot read capture: {e}")
            return CaptureResult.failure(str(e))

        output: np.ndarray | None = None
        fallback_reason: str | None = None

        if quad is not None and self._config.correct_perspective:
            try:
                output = apply_perspective_correction(pixels, quad)
            except Exception as e:
                logger.warning(f"Perspective correction failed, using uncorrected capture: {e}")
                fallback_reason = str(e)

        corrected = output is not None
        if output is None:
            output = np.array(pixels, copy=True)

        if options is not None:
            enhance_document(output, options)

        elapsed = (time.time() - start_time) * 1000
        logger.info(
            f"Capture processed in {elapsed:.0f}ms "
            f"({output.shape[1]}x{output.shape[0]}, corrected={corrected})"
        )

        return CaptureResult.success_result(
            image=output,
            corrected=corrected,
            enhanced=options is not None,
            error_message=fallback_reason,
            processing_time_ms=elapsed
        )

    def process_capture_async(
        self,
        image,
        quad: Quadrilateral | None = None,
        options: OptionsLike | None = None
    ) -> Future[CaptureResult]:
        """Submit process_capture to the worker pool."""
        if self._executor is None:
            self._executor = ThreadPoolExecutor(
                max_workers=self._max_workers,
                thread_name_prefix="docscan-capture"
            )
        return self._executor.submit(self.process_capture, image, quad, options)

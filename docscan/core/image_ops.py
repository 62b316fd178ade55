"""OpenCV-backed image operations used around the detection core."""

import logging
import math

import cv2
import numpy as np
import numpy.typing as npt

from ..domain.entities.detection import DetectionResult

logger = logging.getLogger(__name__)

# Type aliases
ImageArray = npt.NDArray[np.uint8]  # HxWx3 or HxWx4, RGB order

# Overlay colors (RGB)
STABLE_COLOR = (34, 197, 94)
UNSTABLE_COLOR = (245, 158, 11)


def analysis_size(width: int, height: int, analysis_width: int) -> tuple[int, int]:
    """Target size for analysis, preserving aspect ratio.

    Args:
        width: Source width
        height: Source height
        analysis_width: Width to analyse at

    Returns:
        Tuple of (analysis_width, analysis_height)
    """
    scale = analysis_width / width
    return analysis_width, int(math.floor(height * scale + 0.5))


def resize_for_analysis(
    img: ImageArray,
    analysis_width: int
) -> tuple[ImageArray, float]:
    """Resize a frame so its width equals analysis_width.

    Shrinking uses area interpolation, enlarging uses bilinear. A frame
    already at the analysis width is returned unchanged.

    Args:
        img: Input frame
        analysis_width: Target width

    Returns:
        Tuple of (resized frame, scale factor applied)
    """
    h, w = img.shape[:2]
    target_w, target_h = analysis_size(w, h, analysis_width)
    scale = target_w / w

    if (target_w, target_h) == (w, h):
        return img, scale

    interpolation = cv2.INTER_AREA if scale < 1 else cv2.INTER_LINEAR
    resized = cv2.resize(img, (target_w, target_h), interpolation=interpolation)
    logger.debug(f"Resized frame {w}x{h} -> {target_w}x{target_h}")
    return resized, scale


def draw_detection_overlay(
    img: ImageArray,
    result: DetectionResult,
    thickness: int = 3
) -> ImageArray:
    """Draw the detected quadrilateral on a copy of the image.

    The outline is green once the detection is stable, amber before that.

    Args:
        img: Frame the detection was made on
        result: Detection result in that frame's coordinates
        thickness: Line thickness in pixels

    Returns:
        Annotated copy of img
    """
    canvas = np.ascontiguousarray(img.copy())
    if not result.detected:
        return canvas

    corners = np.rint([[p.x, p.y] for p in result.quad]).astype(np.int32)
    color = STABLE_COLOR if result.stable else UNSTABLE_COLOR
    if canvas.shape[2] == 4:
        color = color + (255,)

    cv2.polylines(
        canvas, [corners.reshape(-1, 1, 2)], isClosed=True,
        color=color, thickness=thickness
    )
    for x, y in corners:
        cv2.circle(canvas, (int(x), int(y)), thickness * 2, color, -1)

    return canvas

"""Frame preprocessing - grayscale, smoothing, gradients and edge map."""

from __future__ import annotations

import numpy as np
import numpy.typing as npt

from ...config import DETECTION_CONFIG

GrayArray = npt.NDArray[np.uint8]  # HxW

GAUSSIAN_KERNEL = np.array([[1, 2, 1], [2, 4, 2], [1, 2, 1]], dtype=np.int32)
GAUSSIAN_KERNEL_SUM = 16
SOBEL_X = np.array([[-1, 0, 1], [-2, 0, 2], [-1, 0, 1]], dtype=np.int32)
SOBEL_Y = np.array([[-1, -2, -1], [0, 0, 0], [1, 2, 1]], dtype=np.int32)


def convolve3x3(values: np.ndarray, kernel: np.ndarray) -> np.ndarray:
    """Correlate a 2D array with a 3x3 kernel over interior pixels.

    Returns an array of shape (H-2, W-2) aligned with values[1:-1, 1:-1].
    Integer inputs produce exact integer sums.
    """
    h, w = values.shape
    acc = np.zeros((h - 2, w - 2), dtype=np.result_type(values, kernel, np.int32))
    for ky in range(3):
        for kx in range(3):
            weight = kernel[ky, kx]
            if weight:
                acc += weight * values[ky:h - 2 + ky, kx:w - 2 + kx]
    return acc


def to_grayscale(pixels: np.ndarray) -> GrayArray:
    """Luminance grayscale of an RGB(A) buffer, rounded to 8 bits."""
    rgb = pixels[:, :, :3].astype(np.float64)
    gray = 0.299 * rgb[:, :, 0] + 0.587 * rgb[:, :, 1] + 0.114 * rgb[:, :, 2]
    return np.floor(gray + 0.5).astype(np.uint8)


def gaussian_blur(gray: GrayArray) -> GrayArray:
    """3x3 Gaussian smoothing; the 1-pixel border is left at zero."""
    blurred = np.zeros_like(gray)
    h, w = gray.shape
    if h < 3 or w < 3:
        return blurred
    acc = convolve3x3(gray.astype(np.int32), GAUSSIAN_KERNEL)
    blurred[1:-1, 1:-1] = (acc + GAUSSIAN_KERNEL_SUM // 2) // GAUSSIAN_KERNEL_SUM
    return blurred


def sobel_magnitude(gray: GrayArray) -> GrayArray:
    """Sobel gradient magnitude capped at 255; the border is left at zero."""
    edges = np.zeros_like(gray)
    h, w = gray.shape
    if h < 3 or w < 3:
        return edges
    values = gray.astype(np.int32)
    gx = convolve3x3(values, SOBEL_X).astype(np.float64)
    gy = convolve3x3(values, SOBEL_Y).astype(np.float64)
    magnitude = np.minimum(255.0, np.sqrt(gx * gx + gy * gy))
    edges[1:-1, 1:-1] = np.rint(magnitude).astype(np.uint8)
    return edges


def threshold(edges: GrayArray, cutoff: int = DETECTION_CONFIG.edge_threshold) -> GrayArray:
    """Binary map: 255 where edges exceed cutoff, 0 elsewhere."""
    return np.where(edges > cutoff, 255, 0).astype(np.uint8)


def preprocess(
    pixels: np.ndarray,
    cutoff: int = DETECTION_CONFIG.edge_threshold
) -> GrayArray:
    """Run the full preprocessing chain on an analysis-resolution buffer.

    Args:
        pixels: HxWx3 or HxWx4 uint8 buffer
        cutoff: Gradient magnitude threshold

    Returns:
        Binary edge map (0/255) of shape HxW
    """
    gray = to_grayscale(pixels)
    blurred = gaussian_blur(gray)
    edges = sobel_magnitude(blurred)
    return threshold(edges, cutoff)

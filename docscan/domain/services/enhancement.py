"""Document enhancement - scan-style tone, color mode and sharpening."""

from __future__ import annotations

from typing import Any, Mapping

import numpy as np

from ...exceptions import ImageProcessingError
from ..value_objects.config import ColorMode, EnhancementOptions
from .preprocessing import convolve3x3

SHARPEN_KERNEL = np.array([[0, -1, 0], [-1, 5, -1], [0, -1, 0]], dtype=np.int32)

# Background flattening window (exclusive luminance bounds) and strength
BACKGROUND_LOW = 40
BACKGROUND_HIGH = 180
BACKGROUND_DIVISOR = 400

BW_THRESHOLD = 128


def _luminance(r: np.ndarray, g: np.ndarray, b: np.ndarray) -> np.ndarray:
    return 0.299 * r + 0.587 * g + 0.114 * b


def enhance_document(
    image: np.ndarray,
    options: EnhancementOptions | Mapping[str, Any]
) -> np.ndarray:
    """Apply enhancement to an RGB(A) buffer in place.

    Per pixel: brightness, contrast, color mode, optional background
    flattening, then clamp and round. Sharpening runs as a separate pass.
    Alpha is left untouched.

    Args:
        image: Writable HxWx3 or HxWx4 uint8 buffer
        options: Enhancement settings; mappings are validated

    Returns:
        The same buffer, for convenience

    Raises:
        ValidationError: If options are invalid
        ImageProcessingError: If image is not a writable 8-bit RGB(A) buffer
    """
    options = EnhancementOptions.parse(options)
    _check_buffer(image)

    rgb = image[:, :, :3].astype(np.float64)
    r, g, b = rgb[:, :, 0], rgb[:, :, 1], rgb[:, :, 2]

    brightness_factor = options.brightness / 100
    r = r * brightness_factor
    g = g * brightness_factor
    b = b * brightness_factor

    contrast_factor = ((options.contrast - 100) / 100) * 255
    contrast_scale = (255 + contrast_factor) / 255
    r = (r - 128) * contrast_scale + 128
    g = (g - 128) * contrast_scale + 128
    b = (b - 128) * contrast_scale + 128

    if options.mode in (ColorMode.GRAYSCALE, ColorMode.BW):
        gray = _luminance(r, g, b)
        if options.mode == ColorMode.BW:
            gray = np.where(gray > BW_THRESHOLD, 255.0, 0.0)
        r = g = b = gray

    if options.remove_background:
        lum = _luminance(r, g, b)
        shadowed = (lum > BACKGROUND_LOW) & (lum < BACKGROUND_HIGH)
        boost = np.where(shadowed, 1 + (BACKGROUND_HIGH - lum) / BACKGROUND_DIVISOR, 1.0)
        r = r * boost
        g = g * boost
        b = b * boost

    for channel, values in enumerate((r, g, b)):
        image[:, :, channel] = np.clip(np.floor(values + 0.5), 0, 255).astype(np.uint8)

    if options.sharpen:
        apply_sharpen(image)

    return image


def apply_sharpen(image: np.ndarray) -> np.ndarray:
    """Sharpen RGB channels in place; the outer ring of pixels is untouched.

    The convolution reads from a snapshot taken before the pass.
    """
    h, w = image.shape[:2]
    if h < 3 or w < 3:
        return image

    snapshot = image[:, :, :3].astype(np.int32)
    for channel in range(3):
        acc = convolve3x3(snapshot[:, :, channel], SHARPEN_KERNEL)
        image[1:-1, 1:-1, channel] = np.clip(acc, 0, 255).astype(np.uint8)
    return image


def _check_buffer(image: object) -> None:
    if not isinstance(image, np.ndarray):
        raise ImageProcessingError(f"Expected a numpy pixel buffer, got {type(image).__name__}")
    if image.dtype != np.uint8 or image.ndim != 3 or image.shape[2] not in (3, 4):
        raise ImageProcessingError(
            f"Expected an HxWx3 or HxWx4 uint8 buffer, got {image.dtype} {image.shape}"
        )
    if not image.flags.writeable:
        raise ImageProcessingError("Pixel buffer is read-only")

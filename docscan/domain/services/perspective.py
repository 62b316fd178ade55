"""Perspective correction - bilinear corner-blend warp onto a rectangle."""

from __future__ import annotations

import logging
import math

import numpy as np

from ...exceptions import PerspectiveCorrectionError
from ..value_objects.geometry import Quadrilateral

logger = logging.getLogger(__name__)

# Destination rows sampled per block; bounds the float working set
_ROWS_PER_BLOCK = 256


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def output_size(quad: Quadrilateral) -> tuple[int, int]:
    """Derive (width, height) from the longer of each pair of opposite edges."""
    top, bottom, left, right = quad.edge_lengths()
    return _round_half_up(max(top, bottom)), _round_half_up(max(left, right))


def _normalized(size: int) -> np.ndarray:
    if size == 1:
        return np.zeros(1, dtype=np.float64)
    return np.arange(size, dtype=np.float64) / (size - 1)


def apply_perspective_correction(
    source: np.ndarray,
    quad: Quadrilateral,
    output_width: int | None = None,
    output_height: int | None = None
) -> np.ndarray:
    """Map the quadrilateral region of source onto an upright rectangle.

    Each destination pixel's normalized position (u, v) blends the four
    corners into a source coordinate, which is then sampled with 2x2
    bilinear interpolation. Neighbour indices are clamped to the source.

    Args:
        source: HxWxC uint8 pixel buffer
        quad: Ordered document corners in source pixel coordinates
        output_width: Output width (derived from the quad when None or 0)
        output_height: Output height (derived from the quad when None or 0)

    Returns:
        New uint8 buffer of shape (output_height, output_width, C)

    Raises:
        PerspectiveCorrectionError: If the inputs cannot produce an image
    """
    src = np.asarray(source)
    if src.ndim != 3 or src.shape[0] == 0 or src.shape[1] == 0:
        raise PerspectiveCorrectionError(f"Source must be a non-empty HxWxC image, got shape {src.shape}")

    if not all(math.isfinite(c) for p in quad for c in (p.x, p.y)):
        raise PerspectiveCorrectionError(f"Quadrilateral has non-finite corners: {quad}")

    derived_width, derived_height = output_size(quad)
    out_w = output_width or derived_width
    out_h = output_height or derived_height
    if out_w < 1 or out_h < 1:
        raise PerspectiveCorrectionError(f"Degenerate output size {out_w}x{out_h}")

    src_h, src_w, channels = src.shape
    tl, tr, br, bl = quad
    u = _normalized(out_w)[np.newaxis, :]
    v_all = _normalized(out_h)

    logger.debug(f"Warping {src_w}x{src_h} source onto {out_w}x{out_h}")

    output = np.empty((out_h, out_w, channels), dtype=np.uint8)
    for row in range(0, out_h, _ROWS_PER_BLOCK):
        v = v_all[row:row + _ROWS_PER_BLOCK, np.newaxis]

        w_tl = (1 - u) * (1 - v)
        w_tr = u * (1 - v)
        w_br = u * v
        w_bl = (1 - u) * v
        src_x = w_tl * tl.x + w_tr * tr.x + w_br * br.x + w_bl * bl.x
        src_y = w_tl * tl.y + w_tr * tr.y + w_br * br.y + w_bl * bl.y

        x0f = np.floor(src_x)
        y0f = np.floor(src_y)
        fx = (src_x - x0f)[..., np.newaxis]
        fy = (src_y - y0f)[..., np.newaxis]
        x0 = np.clip(x0f, 0, src_w - 1).astype(np.intp)
        y0 = np.clip(y0f, 0, src_h - 1).astype(np.intp)
        x1 = np.clip(x0f + 1, 0, src_w - 1).astype(np.intp)
        y1 = np.clip(y0f + 1, 0, src_h - 1).astype(np.intp)

        value = (
            (1 - fx) * (1 - fy) * src[y0, x0] +
            fx * (1 - fy) * src[y0, x1] +
            (1 - fx) * fy * src[y1, x0] +
            fx * fy * src[y1, x1]
        )
        output[row:row + _ROWS_PER_BLOCK] = np.clip(np.floor(value + 0.5), 0, 255).astype(np.uint8)

    return output

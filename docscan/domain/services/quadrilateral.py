"""Quadrilateral selection - filter and score simplified contours."""

from __future__ import annotations

import logging
from typing import Iterable, Sequence

import numpy as np

from ...config import DETECTION_CONFIG, DetectionConfig
from ..value_objects.geometry import Point, Quadrilateral
from .simplification import simplify_polygon

logger = logging.getLogger(__name__)


def polygon_area(points: np.ndarray) -> float:
    """Calculate polygon area using shoelace formula."""
    pts = np.asarray(points, dtype=np.float64).reshape(-1, 2)
    if len(pts) < 3:
        return 0.0
    x, y = pts[:, 0], pts[:, 1]
    return abs(float(np.sum(x * np.roll(y, -1) - np.roll(x, -1) * y)) / 2)


def is_convex(points: np.ndarray) -> bool:
    """Check for a consistent turn direction around the polygon.

    Collinear vertices (zero cross product) do not count as a sign change.
    """
    pts = np.asarray(points, dtype=np.float64).reshape(-1, 2)
    if len(pts) < 3:
        return False

    nxt = np.roll(pts, -1, axis=0)
    d1 = nxt - pts
    d2 = np.roll(pts, -2, axis=0) - nxt
    cross = d1[:, 0] * d2[:, 1] - d1[:, 1] * d2[:, 0]
    signs = np.sign(cross[cross != 0])
    return bool(np.all(signs == signs[0])) if len(signs) else True


def find_corners(points: np.ndarray) -> np.ndarray:
    """Reduce a polygon to four corners by coordinate extremes.

    Picks min(x+y) as top-left, max(x-y) as top-right, max(x+y) as
    bottom-right and min(x-y) as bottom-left. Polygons with four or fewer
    vertices are returned unchanged.
    """
    pts = np.asarray(points).reshape(-1, 2)
    if len(pts) <= 4:
        return pts

    sums = pts[:, 0] + pts[:, 1]
    diffs = pts[:, 0] - pts[:, 1]
    return pts[[
        int(np.argmin(sums)),
        int(np.argmax(diffs)),
        int(np.argmax(sums)),
        int(np.argmin(diffs)),
    ]]


def order_points(points: Sequence[Point] | np.ndarray) -> Quadrilateral:
    """Label four points as top-left, top-right, bottom-right, bottom-left.

    The two smallest-y points form the top pair and the other two the
    bottom pair; each pair is ordered by x. Sorting is stable.
    """
    pts = [
        p if isinstance(p, Point) else Point(float(p[0]), float(p[1]))
        for p in points
    ]
    if len(pts) != 4:
        raise ValueError(f"order_points needs exactly 4 points, got {len(pts)}")

    by_y = sorted(pts, key=lambda p: p.y)
    top = sorted(by_y[:2], key=lambda p: p.x)
    bottom = sorted(by_y[2:], key=lambda p: p.x)

    return Quadrilateral(
        top_left=top[0],
        top_right=top[1],
        bottom_right=bottom[1],
        bottom_left=bottom[0]
    )


def score_quadrilateral(
    corners: np.ndarray,
    area: float,
    max_area: float,
    config: DetectionConfig = DETECTION_CONFIG
) -> tuple[Quadrilateral, float]:
    """Order corners and score them by area and closeness to a document ratio."""
    quad = order_points(corners)
    width = quad.top_left.distance_to(quad.top_right)
    height = quad.top_left.distance_to(quad.bottom_left)

    area_score = min(area / max_area, 1.0)

    short_side = min(width, height)
    if short_side > 0:
        aspect_ratio = max(width, height) / short_side
        aspect_score = 1 - min(abs(aspect_ratio - config.reference_aspect_ratio) / 2, 1.0)
    else:
        aspect_score = 0.0

    score = area_score * config.area_weight + aspect_score * config.aspect_weight
    return quad, score


def select_best_quadrilateral(
    contours: Iterable[np.ndarray],
    frame_width: int,
    frame_height: int,
    config: DetectionConfig = DETECTION_CONFIG
) -> tuple[Quadrilateral | None, float]:
    """Find the highest-scoring document-like quadrilateral.

    Args:
        contours: (N, 2) point arrays, e.g. from iter_contours
        frame_width: Width of the analysed frame
        frame_height: Height of the analysed frame
        config: Detection constants

    Returns:
        Tuple of (best quad or None, confidence in [0, 1])
    """
    frame_area = frame_width * frame_height
    min_area = frame_area * config.min_area_ratio
    max_area = frame_area * config.max_area_ratio

    best_quad: Quadrilateral | None = None
    best_score = 0.0
    candidates = 0

    for contour in contours:
        epsilon = config.simplify_epsilon_ratio * len(contour)
        simplified = simplify_polygon(contour, epsilon)

        if not config.min_vertices <= len(simplified) <= config.max_vertices:
            continue

        corners = find_corners(simplified)
        if len(corners) != 4:
            continue

        area = polygon_area(corners)
        # Both bounds exclusive
        if not (min_area < area < max_area) or not is_convex(corners):
            continue

        candidates += 1
        quad, score = score_quadrilateral(corners, area, max_area, config)
        if score > best_score:
            best_score = score
            best_quad = quad

    logger.debug(f"{candidates} candidate quadrilaterals, best score {best_score:.3f}")
    return best_quad, best_score

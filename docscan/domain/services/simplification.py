"""Polygon simplification - Douglas-Peucker."""

from __future__ import annotations

import numpy as np
import numpy.typing as npt

PointArray = npt.NDArray[np.float64]  # Shape (N, 2)


def perpendicular_distance(
    points: np.ndarray,
    line_start: np.ndarray,
    line_end: np.ndarray
) -> npt.NDArray[np.float64]:
    """Distance of each point to the line through line_start and line_end.

    The projection parameter t is left unclamped, so points beyond either
    end are measured to the extended line, not to the nearer endpoint.
    A zero-length chord falls back to the distance from line_start.

    Args:
        points: (N, 2) array of points
        line_start: (2,) chord start
        line_end: (2,) chord end

    Returns:
        (N,) array of distances
    """
    points = np.asarray(points, dtype=np.float64).reshape(-1, 2)
    sx, sy = float(line_start[0]), float(line_start[1])
    dx = float(line_end[0]) - sx
    dy = float(line_end[1]) - sy
    px = points[:, 0] - sx
    py = points[:, 1] - sy

    if dx == 0 and dy == 0:
        return np.sqrt(px ** 2 + py ** 2)

    t = (px * dx + py * dy) / (dx * dx + dy * dy)
    return np.sqrt((px - t * dx) ** 2 + (py - t * dy) ** 2)


def simplify_polygon(points: np.ndarray, epsilon: float) -> PointArray:
    """Reduce a polyline with Douglas-Peucker.

    Uses an explicit work stack instead of recursion; the kept vertices
    are the same as the recursive formulation. Within a span the first
    point of maximum distance is the split point.

    Args:
        points: (N, 2) array of points, treated as an open polyline
        epsilon: Distance tolerance (>= 0)

    Returns:
        (M, 2) array of kept points in original order
    """
    if epsilon < 0:
        raise ValueError(f"epsilon must be >= 0, got {epsilon}")

    pts = np.asarray(points, dtype=np.float64).reshape(-1, 2)
    n = len(pts)
    if n < 3:
        return pts.copy()

    keep = np.zeros(n, dtype=bool)
    keep[0] = keep[-1] = True
    stack = [(0, n - 1)]

    while stack:
        first, last = stack.pop()
        if last - first < 2:
            continue
        dists = perpendicular_distance(pts[first + 1:last], pts[first], pts[last])
        idx = int(np.argmax(dists))
        if dists[idx] > epsilon:
            split = first + 1 + idx
            keep[split] = True
            stack.append((split, last))
            stack.append((first, split))

    return pts[keep]

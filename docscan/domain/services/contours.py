"""Contour extraction - 8-connected boundary tracing over a binary edge map."""

from __future__ import annotations

from typing import Iterator

import numpy as np
import numpy.typing as npt

from ...config import DETECTION_CONFIG

ContourArray = npt.NDArray[np.int32]  # Shape (N, 2), columns (x, y)

# Direction vectors for 8-connectivity: E, SE, S, SW, W, NW, N, NE
_DX = (1, 1, 0, -1, -1, -1, 0, 1)
_DY = (0, 1, 1, 1, 0, -1, -1, -1)

# A cycle of walk states and the offset of one state within it
_CycleRef = tuple[ContourArray, int]


def iter_contours(
    edges: np.ndarray,
    max_steps: int = DETECTION_CONFIG.max_trace_steps,
    min_points: int = DETECTION_CONFIG.min_contour_points,
) -> Iterator[ContourArray]:
    """Yield traced boundaries in order of discovery.

    Interior pixels are scanned row-major; each unvisited edge pixel
    (value 255) starts a new trace. Contours with min_points points or
    fewer are dropped.

    Args:
        edges: Binary edge map (0/255), shape HxW
        max_steps: Hard cap on moves per trace
        min_points: Contours must be longer than this

    Yields:
        (N, 2) int32 arrays of (x, y) points
    """
    height, width = edges.shape
    if height < 3 or width < 3:
        return

    grid = edges == 255
    on = grid.ravel().tolist()
    visited = bytearray(height * width)
    cycles: dict[int, _CycleRef] = {}

    for y, x in (np.argwhere(grid[1:-1, 1:-1]) + 1).tolist():
        if visited[y * width + x]:
            continue
        contour = _trace(on, visited, cycles, x, y, width, height, max_steps)
        if len(contour) > min_points:
            yield contour


def find_contours(
    edges: np.ndarray,
    max_steps: int = DETECTION_CONFIG.max_trace_steps,
    min_points: int = DETECTION_CONFIG.min_contour_points,
) -> list[ContourArray]:
    """Trace all boundaries of an edge map. See iter_contours."""
    return list(iter_contours(edges, max_steps, min_points))


def _trace(
    on: list[bool],
    visited: bytearray,
    cycles: dict[int, _CycleRef],
    x: int,
    y: int,
    width: int,
    height: int,
    max_steps: int,
) -> ContourArray:
    """Follow one boundary from (x, y) until it closes, dead-ends or hits the cap.

    The walk is deterministic in (pixel, direction). Once it re-enters a
    state lying on a cycle it can never reach its start pixel again: the
    start was unvisited when the trace began while every cycle pixel is
    visited. The rest of the walk is then the cycle repeated up to the cap.
    """
    points: list[tuple[int, int]] = []
    states: list[int] = []
    seen: dict[int, int] = {}
    cx, cy, direction = x, y, 0
    steps = 0

    while True:
        state = (cy * width + cx) * 8 + direction
        known = cycles.get(state)
        if known is None and state in seen:
            known = _register_cycle(cycles, points, states, seen[state])
        if known is not None:
            cycle, offset = known
            return _extend_periodic(points, cycle, offset, max_steps - len(points))

        seen[state] = len(points)
        points.append((cx, cy))
        states.append(state)
        visited[cy * width + cx] = 1

        # Search clockwise starting one direction before the incoming one
        for i in range(8):
            new_dir = (direction + 7 + i) % 8
            nx = cx + _DX[new_dir]
            ny = cy + _DY[new_dir]
            if 0 <= nx < width and 0 <= ny < height and on[ny * width + nx]:
                cx, cy, direction = nx, ny, new_dir
                break
        else:
            break

        steps += 1
        if (cx == x and cy == y) or steps >= max_steps:
            break

    return np.array(points, dtype=np.int32).reshape(-1, 2)


def _register_cycle(
    cycles: dict[int, _CycleRef],
    points: list[tuple[int, int]],
    states: list[int],
    start: int,
) -> _CycleRef:
    """Record the states from index start onward as one cycle."""
    cycle = np.array(points[start:], dtype=np.int32).reshape(-1, 2)
    for offset, state in enumerate(states[start:]):
        cycles[state] = (cycle, offset)
    return cycle, 0


def _extend_periodic(
    points: list[tuple[int, int]],
    cycle: ContourArray,
    offset: int,
    remaining: int,
) -> ContourArray:
    head = np.array(points, dtype=np.int32).reshape(-1, 2)
    if remaining <= 0:
        return head
    indices = (offset + np.arange(remaining)) % len(cycle)
    return np.concatenate([head, cycle[indices]])

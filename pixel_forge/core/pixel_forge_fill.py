#!/usr/bin/env python3
"""
Region fill for a single layer grid.

Finds the 4-connected region of cells sharing the start cell's color.
Membership is decided on the packed uint32 cell values, and every cell is
visited at most once, so a fill costs O(N^2) in the worst case.
"""

# Standard library imports
from typing import TYPE_CHECKING, Callable, Optional

# Third-party imports
import numpy as np

if TYPE_CHECKING:
    from .pixel_forge_models import Grid

NEIGHBOR_OFFSETS = ((1, 0), (-1, 0), (0, 1), (0, -1))


def flood_fill_region(
    grid: "Grid",
    x: int,
    y: int,
    on_visit: Optional[Callable[[int, int], None]] = None,
) -> list[tuple[int, int]]:
    """Collect the connected region containing (x, y).

    Args:
        grid: The grid to inspect (not modified)
        x: Start column
        y: Start row
        on_visit: Optional hook called once per cell taken off the stack

    Returns:
        Cells of the region in traversal order, empty if (x, y) is out of range
    """
    size = grid.size
    if not (0 <= x < size and 0 <= y < size):
        return []

    packed = grid.packed()
    target = packed[y, x]
    visited = np.zeros((size, size), dtype=bool)

    region = []
    visited[y, x] = True
    stack = [(x, y)]

    while stack:
        cx, cy = stack.pop()
        if on_visit is not None:
            on_visit(cx, cy)
        region.append((cx, cy))

        for dx, dy in NEIGHBOR_OFFSETS:
            nx, ny = cx + dx, cy + dy
            if (
                0 <= nx < size
                and 0 <= ny < size
                and not visited[ny, nx]
                and packed[ny, nx] == target
            ):
                visited[ny, nx] = True
                stack.append((nx, ny))

    return region

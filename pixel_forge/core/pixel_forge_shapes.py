#!/usr/bin/env python3
"""
Line and rectangle-outline rasterizers.

Pure functions from two grid coordinates to the cells to paint. Nothing here
touches a grid; painting the result is left to the caller.
"""

# Standard library imports
from typing import Union

from .pixel_forge_constants import TOOL_LINE, TOOL_RECTANGLE
from .pixel_forge_exceptions import ToolError

Point = tuple[int, int]


def _bresenham(x0: int, y0: int, x1: int, y1: int) -> list[Point]:
    """Get all points on a line using Bresenham's algorithm"""
    points = []

    dx = abs(x1 - x0)
    dy = abs(y1 - y0)

    sx = 1 if x0 < x1 else -1
    sy = 1 if y0 < y1 else -1

    err = dx - dy
    x, y = x0, y0

    while True:
        points.append((x, y))

        if x == x1 and y == y1:
            break

        e2 = 2 * err

        if e2 > -dy:
            err -= dy
            x += sx

        if e2 < dx:
            err += dx
            y += sy

    return points


def line_cells(start: Point, end: Point) -> list[Point]:
    """Cells of the inclusive line from start to end.

    The walk always begins at the lexicographically smaller endpoint, so
    swapping the endpoints yields the same cells, returned in reverse.
    """
    start = (int(start[0]), int(start[1]))
    end = (int(end[0]), int(end[1]))

    if start <= end:
        return _bresenham(start[0], start[1], end[0], end[1])
    return _bresenham(end[0], end[1], start[0], start[1])[::-1]


def rectangle_outline_cells(corner_a: Point, corner_b: Point) -> list[Point]:
    """Border cells of the rectangle spanned by two opposite corners."""
    min_x, max_x = sorted((int(corner_a[0]), int(corner_b[0])))
    min_y, max_y = sorted((int(corner_a[1]), int(corner_b[1])))

    cells = []
    seen = set()

    def emit(point: Point) -> None:
        if point not in seen:
            seen.add(point)
            cells.append(point)

    for x in range(min_x, max_x + 1):
        emit((x, min_y))
        emit((x, max_y))
    for y in range(min_y, max_y + 1):
        emit((min_x, y))
        emit((max_x, y))

    return cells


SHAPE_RASTERIZERS = {
    TOOL_LINE: line_cells,
    TOOL_RECTANGLE: rectangle_outline_cells,
}


def shape_cells(tool: Union[str, object], anchor: Point, current: Point) -> list[Point]:
    """Rasterize the shape a shape tool would draw between two cells.

    Args:
        tool: "line" or "rectangle" (a ToolType with those names also works)
        anchor: Cell where the drag started
        current: Cell the drag is at now

    Raises:
        ToolError: If the tool does not draw shapes
    """
    name = tool if isinstance(tool, str) else getattr(tool, "name", "")
    rasterizer = SHAPE_RASTERIZERS.get(str(name).lower())
    if rasterizer is None:
        raise ToolError(f"{tool!r} is not a shape tool")
    return rasterizer(anchor, current)

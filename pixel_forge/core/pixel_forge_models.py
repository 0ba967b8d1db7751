#!/usr/bin/env python3
"""
Core data models for Pixel Forge
These models handle the raster state without any UI dependencies
"""

# Standard library imports
import itertools
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from typing import NamedTuple, Optional

# Third-party imports
import numpy as np

from .pixel_forge_constants import (
    ALPHA_EMPTY,
    CHANNELS,
    GRID_SIZE,
    LAYER_ID_PREFIX,
    LAYER_NAME_TEMPLATE,
    MAX_GRID_SIZE,
    MIN_GRID_SIZE,
)
from .pixel_forge_exceptions import (
    LastLayerDeletionRefused,
    UnknownLayerIdError,
    ValidationError,
)
from .pixel_forge_fill import flood_fill_region
from .pixel_forge_utils import debug_log, hex_to_rgba, in_bounds, rgba_to_hex


class Cell(NamedTuple):
    """Integer grid coordinate"""

    x: int
    y: int


def pack_rgba(rgba) -> int:
    """Pack an RGBA quadruple into the uint32 used by Grid.packed()"""
    return int(np.array(rgba, dtype=np.uint8).view(np.uint32)[0])


@dataclass(eq=False)
class Grid:
    """
    Square matrix of optional colors
    Cells are stored as RGBA uint8, alpha 0 meaning empty
    """

    size: int = GRID_SIZE
    data: Optional[np.ndarray] = None
    version: int = 0

    def __post_init__(self):
        """Validate the size and ensure data matches it"""
        if not MIN_GRID_SIZE <= self.size <= MAX_GRID_SIZE:
            raise ValidationError(
                f"Grid size must be {MIN_GRID_SIZE}-{MAX_GRID_SIZE}, got {self.size}"
            )
        expected = (self.size, self.size, CHANNELS)
        if self.data is None or self.data.shape != expected:
            self.data = np.zeros(expected, dtype=np.uint8)
        else:
            self.data = np.ascontiguousarray(self.data, dtype=np.uint8)

    def in_bounds(self, x: int, y: int) -> bool:
        return in_bounds(x, y, self.size)

    def packed(self) -> np.ndarray:
        """Read-only (size, size) uint32 view, one value per cell"""
        view = self.data.view(np.uint32).reshape(self.size, self.size)
        view.flags.writeable = False
        return view

    def get_cell(self, x: int, y: int) -> Optional[str]:
        """Get the color at coordinates, None when empty or out of range"""
        if not self.in_bounds(x, y):
            return None
        return rgba_to_hex(self.data[y, x])

    def set_cell(self, x: int, y: int, color: Optional[str]) -> bool:
        """
        Set a cell to a color, or empty it with None
        Returns True if the cell was changed
        """
        if not self.in_bounds(x, y):
            return False
        rgba = hex_to_rgba(color)
        if tuple(int(c) for c in self.data[y, x]) == rgba:
            return False
        self.data[y, x] = rgba
        self.version += 1
        return True

    def paint_cells(self, cells: Iterable[tuple[int, int]], color: Optional[str]) -> list[Cell]:
        """
        Paint every in-bounds cell with one color as a single batch
        Returns the cells that actually changed
        """
        rgba = hex_to_rgba(color)
        target = pack_rgba(rgba)
        packed = self.packed()

        changed = []
        seen = set()
        for x, y in cells:
            if (x, y) in seen or not self.in_bounds(x, y):
                continue
            seen.add((x, y))
            if int(packed[y, x]) != target:
                changed.append(Cell(x, y))

        if changed:
            xs = [c.x for c in changed]
            ys = [c.y for c in changed]
            self.data[ys, xs] = rgba
            self.version += 1
        return changed

    def fill(self, x: int, y: int, color: Optional[str], on_visit=None) -> list[Cell]:
        """
        Flood fill from coordinates
        Returns list of changed cells
        """
        rgba = hex_to_rgba(color)
        if not self.in_bounds(x, y):
            return []
        if int(self.packed()[y, x]) == pack_rgba(rgba):
            return []

        region = flood_fill_region(self, x, y, on_visit=on_visit)
        return self.paint_cells(region, color)

    def clear(self) -> bool:
        """Reset every cell to empty, returns True if anything was erased"""
        if self.is_empty():
            return False
        self.data[...] = 0
        self.version += 1
        return True

    def is_empty(self) -> bool:
        return not np.any(self.data[..., 3] != ALPHA_EMPTY)

    def to_rows(self) -> list[list[Optional[str]]]:
        """Row-major matrix of colors, rows[y][x]"""
        return [
            [rgba_to_hex(self.data[y, x]) for x in range(self.size)]
            for y in range(self.size)
        ]


@dataclass
class Layer:
    """Named, independently visible owner of one Grid"""

    id: str
    name: str
    visible: bool = True
    grid: Grid = field(default_factory=Grid)

    @property
    def version(self) -> int:
        return self.grid.version


class LayerStore:
    """
    Ordered stack of layers, bottom to top, with one active layer
    Always holds at least one layer
    """

    def __init__(self, grid_size: int = GRID_SIZE) -> None:
        self.grid_size = grid_size
        self._id_counter = itertools.count(1)
        self._layers: list[Layer] = []

        first = self._create_layer()
        self._layers.append(first)
        self._active_layer_id = first.id

    def _create_layer(self) -> Layer:
        layer_id = f"{LAYER_ID_PREFIX}{next(self._id_counter)}"
        name = LAYER_NAME_TEMPLATE.format(number=len(self._layers) + 1)
        return Layer(id=layer_id, name=name, grid=Grid(size=self.grid_size))

    # Queries
    def __len__(self) -> int:
        return len(self._layers)

    def __iter__(self) -> Iterator[Layer]:
        return iter(list(self._layers))

    def __contains__(self, layer_id: object) -> bool:
        return self.get_layer(layer_id) is not None  # type: ignore[arg-type]

    @property
    def layers(self) -> list[Layer]:
        """Layers in stack order, bottom first"""
        return list(self._layers)

    @property
    def active_layer_id(self) -> str:
        return self._active_layer_id

    @property
    def active_layer(self) -> Layer:
        return self.require_layer(self._active_layer_id)

    def get_layer(self, layer_id: str) -> Optional[Layer]:
        for layer in self._layers:
            if layer.id == layer_id:
                return layer
        return None

    def require_layer(self, layer_id: str) -> Layer:
        layer = self.get_layer(layer_id)
        if layer is None:
            raise UnknownLayerIdError(f"No layer with id {layer_id!r}")
        return layer

    def index_of(self, layer_id: str) -> int:
        """Stack position of a layer, -1 if absent"""
        for index, layer in enumerate(self._layers):
            if layer.id == layer_id:
                return index
        return -1

    def signature(self) -> tuple[tuple[str, int, bool], ...]:
        """Changes whenever the composited result could change"""
        return tuple((layer.id, layer.version, layer.visible) for layer in self._layers)

    # Stack operations
    def add_layer(self) -> str:
        """Append a new empty layer on top and make it active"""
        layer = self._create_layer()
        self._layers.append(layer)
        self._active_layer_id = layer.id
        debug_log("LAYERS", f"Added {layer.name} ({layer.id})")
        return layer.id

    def delete_layer(self, layer_id: str) -> bool:
        """
        Remove a layer from the stack
        Returns False for an unknown id

        Raises:
            LastLayerDeletionRefused: If only one layer remains
        """
        if len(self._layers) <= 1:
            debug_log("LAYERS", "Refused to delete the last layer", "WARNING")
            raise LastLayerDeletionRefused("At least one layer must remain")

        index = self.index_of(layer_id)
        if index < 0:
            debug_log("LAYERS", f"Delete ignored, unknown layer {layer_id}", "DEBUG")
            return False

        if self._active_layer_id == layer_id:
            replacement = next(
                candidate for candidate in self._layers if candidate.id != layer_id
            )
            self._active_layer_id = replacement.id

        removed = self._layers.pop(index)
        debug_log("LAYERS", f"Deleted {removed.name} ({removed.id})")
        return True

    def set_active_layer(self, layer_id: str) -> bool:
        if self.get_layer(layer_id) is None:
            return False
        self._active_layer_id = layer_id
        return True

    def toggle_visibility(self, layer_id: str) -> bool:
        """Flip a layer's visibility, returns False for an unknown id"""
        layer = self.get_layer(layer_id)
        if layer is None:
            return False
        layer.visible = not layer.visible
        debug_log("LAYERS", f"{layer.name} visible={layer.visible}", "DEBUG")
        return True

    # Cell operations
    def set_cell(self, layer_id: str, x: int, y: int, color: Optional[str]) -> bool:
        layer = self.get_layer(layer_id)
        if layer is None:
            return False
        return layer.grid.set_cell(x, y, color)

    def read_cell(self, layer_id: str, x: int, y: int) -> Optional[str]:
        layer = self.get_layer(layer_id)
        if layer is None:
            return None
        return layer.grid.get_cell(x, y)

    def paint_cells(
        self, layer_id: str, cells: Iterable[tuple[int, int]], color: Optional[str]
    ) -> list[Cell]:
        layer = self.get_layer(layer_id)
        if layer is None:
            return []
        return layer.grid.paint_cells(cells, color)

    def fill(self, layer_id: str, x: int, y: int, color: Optional[str]) -> list[Cell]:
        layer = self.get_layer(layer_id)
        if layer is None:
            return []
        return layer.grid.fill(x, y, color)

    def clear(self, layer_id: str) -> bool:
        layer = self.get_layer(layer_id)
        if layer is None:
            return False
        return layer.grid.clear()

#!/usr/bin/env python3
"""
Edit session: the single coordinator between gesture input and raster state.

The session owns the layer store, the compositor and the tool manager, and
tracks the in-progress gesture as one of three states:

    Idle                              no gesture in progress
    StrokeDrag(tool, last_cell)       pencil/eraser stroke
    ShapeDrag(tool, anchor, last)     line/rectangle being previewed

Shapes are painted only when a gesture ends on the grid. Ending off the grid,
or cancelling, returns to Idle without painting.
"""

# Standard library imports
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Callable, Optional, Union

from .pixel_forge_compositor import Compositor
from .pixel_forge_constants import DEFAULT_COLOR, EXPORT_FILE_NAME, EXPORT_SCALE, GRID_SIZE
from .pixel_forge_managers import (
    EyedropperTool,
    FillTool,
    ShapeTool,
    StrokeTool,
    ToolManager,
    ToolType,
)
from .pixel_forge_models import Cell, LayerStore
from .pixel_forge_shapes import shape_cells
from .pixel_forge_utils import debug_log

CHANGE_IMAGE = "image"
CHANGE_LAYERS = "layers"
CHANGE_TOOL = "tool"
CHANGE_COLOR = "color"
CHANGE_PREVIEW = "preview"


class GestureType(Enum):
    START = "start"
    MOVE = "move"
    END = "end"


@dataclass(frozen=True)
class GestureEvent:
    """One pointer event, cell is None when the pointer is off the grid"""

    type: GestureType
    cell: Optional[Cell] = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "GestureEvent":
        """Build from {"type": "start|move|end", "cell": {"x": int, "y": int} | None}"""
        cell_data = data.get("cell")
        cell = None
        if cell_data is not None:
            cell = Cell(int(cell_data["x"]), int(cell_data["y"]))
        return cls(GestureType(data["type"]), cell)


@dataclass(frozen=True)
class Idle:
    pass


@dataclass(frozen=True)
class StrokeDrag:
    tool: ToolType
    last_cell: Cell


@dataclass(frozen=True)
class ShapeDrag:
    tool: ToolType
    anchor: Cell
    last_cell: Cell


GestureState = Union[Idle, StrokeDrag, ShapeDrag]
IDLE = Idle()


class EditSession:
    """Routes gestures to tools and exposes the flattened raster"""

    def __init__(
        self,
        grid_size: int = GRID_SIZE,
        color: str = DEFAULT_COLOR,
        layer_store: Optional[LayerStore] = None,
    ) -> None:
        self.layer_store = layer_store if layer_store is not None else LayerStore(grid_size)
        self.compositor = Compositor(self.layer_store)
        self.tool_manager = ToolManager(color)
        self.tool_manager.set_color_picked_callback(self._handle_color_picked)

        self._state: GestureState = IDLE
        self._listeners: list[Callable[[str], None]] = []

    # ------------------------------------------------------------------
    # Observation
    # ------------------------------------------------------------------

    def add_change_listener(self, listener: Callable[[str], None]) -> None:
        """Register a callable receiving the kind of each change"""
        self._listeners.append(listener)

    def remove_change_listener(self, listener: Callable[[str], None]) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _notify(self, kind: str) -> None:
        for listener in list(self._listeners):
            listener(kind)

    @property
    def state(self) -> GestureState:
        return self._state

    @property
    def is_dragging(self) -> bool:
        return not isinstance(self._state, Idle)

    @property
    def grid_size(self) -> int:
        return self.layer_store.grid_size

    @property
    def current_tool(self) -> ToolType:
        return self.tool_manager.current_tool

    @property
    def current_color(self) -> str:
        return self.tool_manager.current_color

    @property
    def active_layer_id(self) -> str:
        return self.layer_store.active_layer_id

    # ------------------------------------------------------------------
    # Tool and color
    # ------------------------------------------------------------------

    def set_tool(self, tool: Union[ToolType, str]) -> None:
        """Select a tool; an unfinished drag is abandoned"""
        new_tool = ToolType.from_value(tool)
        if self.is_dragging:
            self.cancel_gesture()
        if new_tool != self.tool_manager.current_tool:
            self.tool_manager.set_tool(new_tool)
            self._notify(CHANGE_TOOL)

    def set_color(self, color: str) -> bool:
        """Set the drawing color, malformed values are ignored"""
        previous = self.tool_manager.current_color
        if not self.tool_manager.set_color(color):
            return False
        if self.tool_manager.current_color != previous:
            self._notify(CHANGE_COLOR)
        return True

    def _handle_color_picked(self, color: str) -> None:
        self.set_color(color)
        self.set_tool(ToolType.PENCIL)

    # ------------------------------------------------------------------
    # Gestures
    # ------------------------------------------------------------------

    def _resolve_cell(self, cell: Optional[tuple[int, int]]) -> Optional[Cell]:
        """Normalize to a Cell, None when missing or off the grid"""
        if cell is None:
            return None
        resolved = Cell(int(cell[0]), int(cell[1]))
        if not (0 <= resolved.x < self.grid_size and 0 <= resolved.y < self.grid_size):
            return None
        return resolved

    def handle_event(self, event: GestureEvent) -> None:
        """Dispatch a gesture event from the input collaborator"""
        if event.type is GestureType.START:
            self.gesture_start(event.cell)
        elif event.type is GestureType.MOVE:
            self.gesture_move(event.cell)
        else:
            self.gesture_end(event.cell)

    def gesture_start(self, cell: Optional[tuple[int, int]]) -> None:
        c = self._resolve_cell(cell)
        if c is None:
            return
        if self.is_dragging:
            self.cancel_gesture()

        tool = self.tool_manager.get_tool()
        color = self.tool_manager.current_color
        grid = self.layer_store.active_layer.grid

        if isinstance(tool, StrokeTool):
            changed = tool.on_press(c.x, c.y, color, grid)
            self._state = StrokeDrag(tool.tool_type, c)
            if changed:
                self._notify(CHANGE_IMAGE)
        elif isinstance(tool, FillTool):
            changed = tool.on_press(c.x, c.y, color, grid)
            debug_log("SESSION", f"Filled {len(changed)} cells from {tuple(c)}", "DEBUG")
            if changed:
                self._notify(CHANGE_IMAGE)
        elif isinstance(tool, EyedropperTool):
            # Adopting the color happens in the picked callback
            tool.on_press(c.x, c.y, color, grid)
        elif isinstance(tool, ShapeTool):
            self._state = ShapeDrag(tool.tool_type, c, c)
            self._notify(CHANGE_PREVIEW)

    def gesture_move(self, cell: Optional[tuple[int, int]]) -> None:
        c = self._resolve_cell(cell)
        if c is None:
            return

        state = self._state
        if isinstance(state, StrokeDrag):
            tool = self.tool_manager.get_tool(state.tool)
            grid = self.layer_store.active_layer.grid
            changed = tool.on_move(c.x, c.y, self.tool_manager.current_color, grid)
            self._state = replace(state, last_cell=c)
            if changed:
                self._notify(CHANGE_IMAGE)
        elif isinstance(state, ShapeDrag):
            if c != state.last_cell:
                self._state = replace(state, last_cell=c)
                self._notify(CHANGE_PREVIEW)

    def gesture_end(self, cell: Optional[tuple[int, int]] = None) -> None:
        state = self._state
        if isinstance(state, Idle):
            return

        c = self._resolve_cell(cell)
        if c is None:
            self.cancel_gesture()
            return

        self._state = IDLE
        tool = self.tool_manager.get_tool(state.tool)
        grid = self.layer_store.active_layer.grid

        if isinstance(state, ShapeDrag) and isinstance(tool, ShapeTool):
            # Commit exactly what was last previewed
            end = state.last_cell
            changed = tool.commit(state.anchor, end, self.tool_manager.current_color, grid)
            debug_log(
                "SESSION",
                f"Committed {state.tool.value} {tuple(state.anchor)}->{tuple(end)}, "
                f"{len(changed)} cells changed",
                "DEBUG",
            )
            self._notify(CHANGE_PREVIEW)
            if changed:
                self._notify(CHANGE_IMAGE)
        else:
            tool.on_release(c.x, c.y, self.tool_manager.current_color, grid)

    def cancel_gesture(self) -> None:
        """Abandon the current drag without committing a shape"""
        state = self._state
        if isinstance(state, Idle):
            return
        self._state = IDLE
        debug_log("SESSION", f"Abandoned {state.tool.value} gesture", "DEBUG")
        if isinstance(state, ShapeDrag):
            self._notify(CHANGE_PREVIEW)

    # ------------------------------------------------------------------
    # Preview and output
    # ------------------------------------------------------------------

    def get_preview_cells(
        self,
        tool: Union[ToolType, str],
        anchor: tuple[int, int],
        current: tuple[int, int],
    ) -> set[Cell]:
        """Cells a shape tool would paint, no mutation"""
        return {Cell(x, y) for x, y in shape_cells(ToolType.from_value(tool), anchor, current)}

    def preview_cells(self) -> set[Cell]:
        """Preview overlay for the shape currently being dragged"""
        state = self._state
        if not isinstance(state, ShapeDrag):
            return set()
        cells = self.get_preview_cells(state.tool, state.anchor, state.last_cell)
        return {c for c in cells if self._resolve_cell(c) is not None}

    def get_flattened_raster(self) -> list[list[Optional[str]]]:
        return self.compositor.flatten()

    def export_image(self, scale_px: int = EXPORT_SCALE) -> tuple[bytes, str]:
        """Encoded image plus a suggested file name"""
        return self.compositor.export_raster(scale_px), EXPORT_FILE_NAME

    # ------------------------------------------------------------------
    # Layers
    # ------------------------------------------------------------------

    def read_cell(self, x: int, y: int, layer_id: Optional[str] = None) -> Optional[str]:
        """Color at a cell of the given (default: active) layer"""
        return self.layer_store.read_cell(layer_id or self.active_layer_id, x, y)

    def add_layer(self) -> str:
        self.cancel_gesture()
        layer_id = self.layer_store.add_layer()
        self._notify(CHANGE_LAYERS)
        return layer_id

    def delete_layer(self, layer_id: str) -> bool:
        """
        Delete a layer

        Raises:
            LastLayerDeletionRefused: If it is the only layer
        """
        removed = self.layer_store.delete_layer(layer_id)
        if removed:
            self.cancel_gesture()
            self._notify(CHANGE_LAYERS)
            self._notify(CHANGE_IMAGE)
        return removed

    def set_active_layer(self, layer_id: str) -> bool:
        if layer_id == self.active_layer_id:
            return layer_id in self.layer_store
        if layer_id not in self.layer_store:
            return False
        self.cancel_gesture()
        self.layer_store.set_active_layer(layer_id)
        self._notify(CHANGE_LAYERS)
        return True

    def toggle_visibility(self, layer_id: str) -> bool:
        if not self.layer_store.toggle_visibility(layer_id):
            return False
        self._notify(CHANGE_LAYERS)
        self._notify(CHANGE_IMAGE)
        return True

    def clear_layer(self, layer_id: str) -> bool:
        if not self.layer_store.clear(layer_id):
            return False
        self._notify(CHANGE_IMAGE)
        return True

    def clear_active_layer(self) -> bool:
        return self.clear_layer(self.active_layer_id)

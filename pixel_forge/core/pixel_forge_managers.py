#!/usr/bin/env python3
"""
Drawing tools and the tool manager for Pixel Forge
Tools act on a single layer grid; gesture bookkeeping lives in the edit session
"""

# Standard library imports
from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Callable, Optional, Union

from .pixel_forge_constants import (
    DEFAULT_COLOR,
    TOOL_ERASER,
    TOOL_EYEDROPPER,
    TOOL_FILL,
    TOOL_LINE,
    TOOL_PENCIL,
    TOOL_RECTANGLE,
)
from .pixel_forge_exceptions import InvalidColorError, ToolError
from .pixel_forge_models import Cell, Grid
from .pixel_forge_shapes import line_cells, rectangle_outline_cells
from .pixel_forge_utils import debug_color, debug_log, parse_hex_color


class ToolType(Enum):
    """Available drawing tools"""

    PENCIL = TOOL_PENCIL
    ERASER = TOOL_ERASER
    FILL = TOOL_FILL
    EYEDROPPER = TOOL_EYEDROPPER
    LINE = TOOL_LINE
    RECTANGLE = TOOL_RECTANGLE

    @classmethod
    def from_value(cls, tool: Union["ToolType", str]) -> "ToolType":
        """Resolve a ToolType or tool name (case-insensitive)"""
        if isinstance(tool, ToolType):
            return tool
        try:
            return cls(str(tool).lower())
        except ValueError:
            raise ToolError(f"Unknown tool: {tool}") from None


class Tool(ABC):
    """Abstract base class for drawing tools"""

    tool_type: ToolType

    @abstractmethod
    def on_press(self, x: int, y: int, color: str, grid: Grid) -> Any:
        """Handle gesture start"""

    def on_move(self, x: int, y: int, color: str, grid: Grid) -> Any:
        """Handle gesture move, no action by default"""

    def on_release(self, x: int, y: int, color: str, grid: Grid) -> Any:
        """Handle gesture end, no action by default"""


class StrokeTool(Tool):
    """Free-hand tool that paints every visited cell while dragging"""

    def paint_value(self, color: str) -> Optional[str]:
        return color

    def on_press(self, x: int, y: int, color: str, grid: Grid) -> bool:
        """Paint the pressed cell"""
        return grid.set_cell(x, y, self.paint_value(color))

    def on_move(self, x: int, y: int, color: str, grid: Grid) -> bool:
        """Continue the stroke at the new cell"""
        return grid.set_cell(x, y, self.paint_value(color))


class PencilTool(StrokeTool):
    """Paints the current color"""

    tool_type = ToolType.PENCIL


class EraserTool(StrokeTool):
    """Empties cells"""

    tool_type = ToolType.ERASER

    def paint_value(self, color: str) -> Optional[str]:
        return None


class FillTool(Tool):
    """Flood fill tool"""

    tool_type = ToolType.FILL

    def on_press(self, x: int, y: int, color: str, grid: Grid) -> list[Cell]:
        """Perform flood fill"""
        return grid.fill(x, y, color)


class EyedropperTool(Tool):
    """Color picker tool"""

    tool_type = ToolType.EYEDROPPER

    def __init__(self) -> None:
        self.picked_callback: Optional[Callable[[str], None]] = None

    def on_press(self, x: int, y: int, color: str, grid: Grid) -> Optional[str]:
        """Pick color at position, None for an empty cell"""
        picked_color = grid.get_cell(x, y)
        if picked_color is not None and self.picked_callback:
            self.picked_callback(picked_color)
        return picked_color


class ShapeTool(Tool):
    """Tool that previews while dragging and paints once on release"""

    @abstractmethod
    def cells(self, anchor: tuple[int, int], current: tuple[int, int]) -> list[tuple[int, int]]:
        """Rasterize the shape between the anchor and the current cell"""

    def on_press(self, x: int, y: int, color: str, grid: Grid) -> None:
        """Nothing is painted until the gesture ends"""

    def commit(
        self, anchor: tuple[int, int], end: tuple[int, int], color: str, grid: Grid
    ) -> list[Cell]:
        """Paint the whole shape in one batch"""
        return grid.paint_cells(self.cells(anchor, end), color)


class LineTool(ShapeTool):
    tool_type = ToolType.LINE

    def cells(self, anchor, current):
        return line_cells(anchor, current)


class RectangleTool(ShapeTool):
    tool_type = ToolType.RECTANGLE

    def cells(self, anchor, current):
        return rectangle_outline_cells(anchor, current)


class ToolManager:
    """Manages drawing tools and tool state"""

    def __init__(self, color: str = DEFAULT_COLOR) -> None:
        self.tools: dict[ToolType, Tool] = {
            ToolType.PENCIL: PencilTool(),
            ToolType.ERASER: EraserTool(),
            ToolType.FILL: FillTool(),
            ToolType.EYEDROPPER: EyedropperTool(),
            ToolType.LINE: LineTool(),
            ToolType.RECTANGLE: RectangleTool(),
        }
        self.current_tool = ToolType.PENCIL
        self.current_color = parse_hex_color(color)

    def set_tool(self, tool_type: Union[ToolType, str]) -> ToolType:
        """Set the current tool (accepts ToolType enum or string)"""
        self.current_tool = ToolType.from_value(tool_type)
        debug_log("TOOL", f"Tool changed to {self.current_tool.name}")
        return self.current_tool

    @property
    def current_tool_name(self) -> str:
        """Get the name of the current tool"""
        return self.current_tool.value

    def get_tool(self, tool_type: Optional[Union[ToolType, str]] = None) -> Tool:
        """Get tool instance (current tool if no type specified)"""
        if tool_type is None:
            return self.tools[self.current_tool]
        return self.tools[ToolType.from_value(tool_type)]

    def set_color(self, color: str) -> bool:
        """
        Set the current drawing color
        Returns False and keeps the previous color if the value is malformed
        """
        try:
            self.current_color = parse_hex_color(color)
        except InvalidColorError as e:
            debug_log("TOOL", f"Rejected color: {e}", "WARNING")
            return False
        debug_log("TOOL", f"Color changed to {debug_color(self.current_color)}", "DEBUG")
        return True

    def set_color_picked_callback(self, callback: Callable[[str], None]) -> None:
        """Set callback for the eyedropper tool"""
        picker = self.tools[ToolType.EYEDROPPER]
        if isinstance(picker, EyedropperTool):
            picker.picked_callback = callback

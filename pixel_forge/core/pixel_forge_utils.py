#!/usr/bin/env python3
"""
Common utilities for Pixel Forge
Extracted to avoid duplication between modules
"""

# Standard library imports
import logging
import re
from typing import Optional

from .logging_config import get_logger
from .pixel_forge_constants import ALPHA_EMPTY, ALPHA_OPAQUE, EMPTY_RGBA, HEX_COLOR_PATTERN
from .pixel_forge_exceptions import InvalidColorError

# ================================================================================
# Debug Configuration
# ================================================================================

DEBUG_MODE = True  # Set to False to disable debug logging

_HEX_COLOR_RE = re.compile(HEX_COLOR_PATTERN)

RGBA = tuple[int, int, int, int]


# ================================================================================
# Debug Logging Utilities
# ================================================================================


def debug_log(category: str, message: str, level: str = "INFO") -> None:
    """Category-tagged logging routed through the pixel_forge logger tree

    Args:
        category: Category for the log message (e.g., "SESSION", "LAYERS", "EXPORT")
        message: The log message to emit
        level: Log level ("INFO", "WARNING", "ERROR", "DEBUG")
    """
    if not DEBUG_MODE:
        return

    numeric_level = getattr(logging, level.upper(), logging.INFO)
    get_logger(category.lower()).log(numeric_level, message)


def debug_exception(category: str, exception: Exception) -> None:
    """Log exceptions with full traceback

    Args:
        category: Category for the log message
        exception: The exception to log
    """
    get_logger(category.lower()).error(
        f"Exception: {type(exception).__name__}: {exception!s}",
        exc_info=DEBUG_MODE,
    )


# ================================================================================
# Color Validation Utilities
# ================================================================================


def is_valid_hex_color(value: object) -> bool:
    """Check whether a value is a '#rrggbb' color string"""
    return isinstance(value, str) and _HEX_COLOR_RE.fullmatch(value) is not None


def parse_hex_color(value: object) -> str:
    """Validate a '#rrggbb' color and return it in lowercase

    Raises:
        InvalidColorError: If the value does not match the pattern
    """
    if not is_valid_hex_color(value):
        raise InvalidColorError(f"expected '#rrggbb', got {value!r}")
    return value.lower()  # type: ignore[union-attr]


def hex_to_rgba(color: Optional[str]) -> RGBA:
    """Convert a color (or None for empty) to an RGBA cell value"""
    if color is None:
        return EMPTY_RGBA
    color = parse_hex_color(color)
    return (
        int(color[1:3], 16),
        int(color[3:5], 16),
        int(color[5:7], 16),
        ALPHA_OPAQUE,
    )


def rgba_to_hex(rgba) -> Optional[str]:
    """Convert an RGBA cell value back to a color, None when transparent"""
    if int(rgba[3]) == ALPHA_EMPTY:
        return None
    return f"#{int(rgba[0]):02x}{int(rgba[1]):02x}{int(rgba[2]):02x}"


def debug_color(color: Optional[str]) -> str:
    """Format color information for debugging"""
    if color is None:
        return "empty"
    r, g, b, _ = hex_to_rgba(color)
    return f"{color} (RGB: {(r, g, b)})"


# ================================================================================
# Geometry Utilities
# ================================================================================


def in_bounds(x: int, y: int, size: int) -> bool:
    """Check that (x, y) lies inside a size x size grid"""
    return 0 <= x < size and 0 <= y < size

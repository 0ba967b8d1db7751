#!/usr/bin/env python3
"""
Constants for Pixel Forge
Centralizes all magic numbers and configuration values
"""

# ============================================================================
# GRID CONSTANTS
# ============================================================================

GRID_SIZE = 32  # Cells per side of every layer grid
MIN_GRID_SIZE = 1
MAX_GRID_SIZE = 256  # Small fixed canvases only

# RGBA storage
CHANNELS = 4  # R, G, B, A per cell
ALPHA_OPAQUE = 255
ALPHA_EMPTY = 0
EMPTY_RGBA = (0, 0, 0, 0)

# ============================================================================
# COLOR CONSTANTS
# ============================================================================

DEFAULT_COLOR = "#00fff7"
HEX_COLOR_PATTERN = r"#[0-9A-Fa-f]{6}"

# Preset palette, five rows of six
PRESET_PALETTE = [
    # Neon
    "#00fff7", "#39ff14", "#ff2d6a", "#ffd700", "#ff6b00", "#8b5cf6",
    # Pastels
    "#ff9ff3", "#54a0ff", "#5f27cd", "#00d2d3", "#1dd1a1", "#feca57",
    # Basics
    "#ffffff", "#c8d6e5", "#8395a7", "#576574", "#222f3e", "#000000",
    # Earth tones
    "#ff6b6b", "#ee5a24", "#f79f1f", "#a3cb38", "#009432", "#0652dd",
    # Skin tones
    "#fcd5b5", "#e8beac", "#d4a574", "#b8763c", "#8d5524", "#5c3317",
]
PRESET_PALETTE_COLUMNS = 6

# ============================================================================
# LAYER CONSTANTS
# ============================================================================

LAYER_ID_PREFIX = "layer-"
LAYER_NAME_TEMPLATE = "Layer {number}"

# ============================================================================
# TOOL CONSTANTS
# ============================================================================

TOOL_PENCIL = "pencil"
TOOL_ERASER = "eraser"
TOOL_FILL = "fill"
TOOL_EYEDROPPER = "eyedropper"
TOOL_LINE = "line"
TOOL_RECTANGLE = "rectangle"

# ============================================================================
# EXPORT CONSTANTS
# ============================================================================

EXPORT_SCALE = 10  # Output pixels per grid cell
EXPORT_FILE_NAME = "pixel-art.png"
EXPORT_FORMAT = "PNG"

# ============================================================================
# SETTINGS CONSTANTS
# ============================================================================

APP_NAME = "pixel_forge"
MAX_RECENT_COLORS = 12

# ============================================================================
# TIMING CONSTANTS
# ============================================================================

STATUS_MESSAGE_TIMEOUT = 3000  # Status bar message duration in milliseconds

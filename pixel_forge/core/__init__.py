"""Core pixel grid editing modules"""

# Make key classes available at package level
from .pixel_forge_compositor import Compositor
from .pixel_forge_controller import PixelForgeController
from .pixel_forge_models import Cell, Grid, Layer, LayerStore
from .pixel_forge_session import EditSession, GestureEvent, GestureType

__all__ = [
    "Cell",
    "Compositor",
    "EditSession",
    "GestureEvent",
    "GestureType",
    "Grid",
    "Layer",
    "LayerStore",
    "PixelForgeController",
]

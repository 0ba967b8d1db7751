#!/usr/bin/env python3
"""
Compositing and export for the layer stack
Flattens visible layers into one raster and encodes it as a PNG
"""

# Standard library imports
import io
from typing import Optional

# Third-party imports
import numpy as np
from PIL import Image

from .pixel_forge_constants import ALPHA_EMPTY, CHANNELS, EXPORT_FORMAT, EXPORT_SCALE
from .pixel_forge_exceptions import ExportError, ValidationError
from .pixel_forge_models import LayerStore
from .pixel_forge_utils import debug_log, rgba_to_hex


class Compositor:
    """Projects a LayerStore onto a single raster, recomputed on demand"""

    def __init__(self, layer_store: LayerStore) -> None:
        self.layer_store = layer_store
        self._cached_signature: Optional[tuple] = None
        self._cached_rgba: Optional[np.ndarray] = None

    def flatten_rgba(self) -> np.ndarray:
        """
        Composite visible layers bottom to top
        The topmost visible non-empty cell wins; returns a fresh (N, N, 4) array
        """
        signature = self.layer_store.signature()
        if signature != self._cached_signature or self._cached_rgba is None:
            size = self.layer_store.grid_size
            result = np.zeros((size, size, CHANNELS), dtype=np.uint8)

            for layer in self.layer_store.layers:
                if not layer.visible:
                    continue
                mask = layer.grid.data[..., 3] != ALPHA_EMPTY
                result[mask] = layer.grid.data[mask]

            self._cached_rgba = result
            self._cached_signature = signature

        return self._cached_rgba.copy()

    def flatten(self) -> list[list[Optional[str]]]:
        """Flattened raster as rows[y][x] of colors or None"""
        rgba = self.flatten_rgba()
        size = rgba.shape[0]
        return [[rgba_to_hex(rgba[y, x]) for x in range(size)] for y in range(size)]

    def render_image(self, scale_px: int = EXPORT_SCALE) -> Image.Image:
        """Build the scaled RGBA image, one scale_px block per cell"""
        if not isinstance(scale_px, int) or scale_px < 1:
            raise ValidationError(f"Export scale must be a positive integer, got {scale_px!r}")

        rgba = self.flatten_rgba()
        scaled = np.repeat(np.repeat(rgba, scale_px, axis=0), scale_px, axis=1)
        return Image.fromarray(np.ascontiguousarray(scaled))

    def export_raster(self, scale_px: int = EXPORT_SCALE) -> bytes:
        """Encode the flattened raster as PNG bytes"""
        image = self.render_image(scale_px)

        buffer = io.BytesIO()
        try:
            image.save(buffer, format=EXPORT_FORMAT)
        except (OSError, ValueError) as e:
            raise ExportError(f"Could not encode {EXPORT_FORMAT}: {e}") from e

        data = buffer.getvalue()
        debug_log(
            "EXPORT",
            f"Encoded {image.width}x{image.height} {EXPORT_FORMAT} ({len(data)} bytes)",
            "DEBUG",
        )
        return data

#!/usr/bin/env python3
"""
Qt controller for Pixel Forge
Adapts the edit session to signals for the rendering layer and runs exports
"""

# Standard library imports
import os
from pathlib import Path
from typing import Any, Optional, Union

# Third-party imports
from PyQt6.QtCore import QObject, pyqtSignal

from .logging_config import setup_logging
from .pixel_forge_constants import (
    EXPORT_FILE_NAME,
    PRESET_PALETTE,
    PRESET_PALETTE_COLUMNS,
    STATUS_MESSAGE_TIMEOUT,
)
from .pixel_forge_exceptions import PixelForgeError, format_error_message
from .pixel_forge_models import Cell
from .pixel_forge_session import (
    CHANGE_COLOR,
    CHANGE_IMAGE,
    CHANGE_LAYERS,
    CHANGE_PREVIEW,
    CHANGE_TOOL,
    EditSession,
    GestureEvent,
)
from .pixel_forge_settings import SettingsManager
from .pixel_forge_utils import debug_exception, debug_log
from .pixel_forge_workers import ExportSaveWorker


class PixelForgeController(QObject):
    """Controller coordinating the edit session with the UI"""

    # Signals
    imageChanged = pyqtSignal()
    previewChanged = pyqtSignal()
    layersChanged = pyqtSignal()
    toolChanged = pyqtSignal(str)  # tool name
    colorChanged = pyqtSignal(str)  # '#rrggbb'
    statusMessage = pyqtSignal(str, int)  # message, timeout
    error = pyqtSignal(str)
    exportFinished = pyqtSignal(str)  # saved path

    def __init__(self, settings: Optional[SettingsManager] = None, parent=None):
        super().__init__(parent)

        self.settings = settings if settings is not None else SettingsManager()
        setup_logging(
            self.settings.get("log_level", "INFO"),
            self.settings.get("log_file") or None,
        )
        self.session = EditSession(
            grid_size=self.settings.get_grid_size(),
            color=self.settings.get_default_color(),
        )
        self.session.add_change_listener(self._on_session_change)

        self.save_worker: Optional[ExportSaveWorker] = None

    def _on_session_change(self, kind: str) -> None:
        """Translate session change kinds into signals"""
        if kind == CHANGE_IMAGE:
            self.imageChanged.emit()
        elif kind == CHANGE_PREVIEW:
            self.previewChanged.emit()
        elif kind == CHANGE_LAYERS:
            self.layersChanged.emit()
        elif kind == CHANGE_TOOL:
            self.toolChanged.emit(self.session.current_tool.value)
        elif kind == CHANGE_COLOR:
            color = self.session.current_color
            self.settings.add_recent_color(color)
            self.colorChanged.emit(color)

    def _report(self, operation: str, error: Exception) -> None:
        debug_exception("CONTROLLER", error)
        self.error.emit(format_error_message(operation, error))

    # Input
    def handle_gesture(self, event: Union[GestureEvent, dict[str, Any]]) -> None:
        """Forward a gesture event (object or {'type', 'cell'} mapping)"""
        if isinstance(event, dict):
            event = GestureEvent.from_dict(event)
        self.session.handle_event(event)

    def cancel_gesture(self) -> None:
        self.session.cancel_gesture()

    # Tool operations
    def set_tool(self, tool_name: str) -> None:
        try:
            self.session.set_tool(tool_name)
        except PixelForgeError as e:
            self._report("select tool", e)

    def set_color(self, color: str) -> bool:
        if not self.session.set_color(color):
            self.statusMessage.emit(f"Ignored invalid color {color!r}", STATUS_MESSAGE_TIMEOUT)
            return False
        return True

    def get_current_tool_name(self) -> str:
        return self.session.current_tool.value

    def get_palette_rows(self) -> list[list[str]]:
        """Preset colors grouped into palette rows"""
        return [
            PRESET_PALETTE[i:i + PRESET_PALETTE_COLUMNS]
            for i in range(0, len(PRESET_PALETTE), PRESET_PALETTE_COLUMNS)
        ]

    def get_recent_colors(self) -> list[str]:
        return self.settings.get_recent_colors()

    # Layer operations
    def add_layer(self) -> str:
        return self.session.add_layer()

    def delete_layer(self, layer_id: str) -> bool:
        try:
            return self.session.delete_layer(layer_id)
        except PixelForgeError as e:
            self._report("delete layer", e)
            return False

    def toggle_visibility(self, layer_id: str) -> bool:
        return self.session.toggle_visibility(layer_id)

    def set_active_layer(self, layer_id: str) -> bool:
        return self.session.set_active_layer(layer_id)

    def clear_canvas(self) -> None:
        """Clear the active layer"""
        if self.session.clear_active_layer():
            self.statusMessage.emit("Layer cleared", STATUS_MESSAGE_TIMEOUT)

    # Views for the rendering layer
    def get_flattened_raster(self) -> list[list[Optional[str]]]:
        return self.session.get_flattened_raster()

    def get_preview_cells(self) -> set[Cell]:
        return self.session.preview_cells()

    # Export
    def export_image(self, scale_px: Optional[int] = None) -> tuple[bytes, str]:
        scale = scale_px if scale_px is not None else self.settings.get_export_scale()
        return self.session.export_image(scale)

    def suggested_export_path(self) -> Path:
        directory = self.settings.get_last_export_dir() or os.getcwd()
        return Path(directory) / EXPORT_FILE_NAME

    def create_export_worker(
        self, file_path: Optional[Union[str, Path]] = None, scale_px: Optional[int] = None
    ) -> Optional[ExportSaveWorker]:
        """Encode the image and prepare a worker that writes it"""
        try:
            image_bytes, _ = self.export_image(scale_px)
        except PixelForgeError as e:
            self._report("export image", e)
            return None

        target = Path(file_path) if file_path is not None else self.suggested_export_path()
        worker = ExportSaveWorker(image_bytes, target)
        worker.error.connect(self._handle_export_error)
        worker.saved.connect(self._handle_export_saved)
        self.save_worker = worker

        debug_log("CONTROLLER", f"Exporting image: {target.name}")
        return worker

    def export_to_file(
        self, file_path: Optional[Union[str, Path]] = None, scale_px: Optional[int] = None
    ) -> Optional[ExportSaveWorker]:
        """Encode and write the image in a background thread"""
        worker = self.create_export_worker(file_path, scale_px)
        if worker is not None:
            worker.start()
        return worker

    def _handle_export_error(self, error_msg: str) -> None:
        debug_log("CONTROLLER", f"Export error: {error_msg}", "ERROR")
        self.error.emit(f"Failed to export image: {error_msg}")

    def _handle_export_saved(self, file_path: str) -> None:
        self.settings.set_last_export_dir(str(Path(file_path).parent))
        self.statusMessage.emit(f"Exported {Path(file_path).name}", STATUS_MESSAGE_TIMEOUT)
        self.exportFinished.emit(file_path)

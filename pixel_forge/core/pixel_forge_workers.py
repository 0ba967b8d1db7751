"""
Worker thread for writing exported images to disk.

The worker receives an already-encoded byte buffer, so it never reads or
mutates editor state while it runs.
"""

# Standard library imports
import traceback
from pathlib import Path
from typing import Optional, Union

# Third-party imports
from PyQt6.QtCore import QObject, QThread, pyqtSignal

from .pixel_forge_utils import debug_log


class BaseWorker(QThread):
    """Base worker class for async operations.

    Signals:
        progress: Emitted with progress percentage (0-100)
        error: Emitted with error message when operation fails
        finished: Emitted when operation completes successfully
    """

    progress = pyqtSignal(int, str)  # Progress percentage 0-100, optional message
    error = pyqtSignal(str)  # Error message
    finished = pyqtSignal()  # Operation completed

    def __init__(
        self,
        file_path: Optional[Union[str, Path]] = None,
        parent: Optional[QObject] = None,
    ):
        """Initialize the base worker.

        Args:
            file_path: Optional file path (string or Path object)
            parent: Parent QObject for proper cleanup
        """
        super().__init__(parent)
        self._is_cancelled = False
        self._file_path: Optional[Path] = Path(file_path) if file_path is not None else None

    def cancel(self) -> None:
        """Cancel the operation."""
        self._is_cancelled = True

    def is_cancelled(self) -> bool:
        return self._is_cancelled

    @property
    def file_path(self) -> Optional[Path]:
        """Get the file path as a Path object (read-only)."""
        return self._file_path

    def emit_progress(self, value: int, message: str = "") -> None:
        if not self._is_cancelled:
            self.progress.emit(value, message)

    def emit_error(self, message: str) -> None:
        if not self._is_cancelled:
            self.error.emit(message)

    def emit_finished(self) -> None:
        if not self._is_cancelled:
            self.finished.emit()


class ExportSaveWorker(BaseWorker):
    """Worker for saving an encoded image asynchronously.

    Signals:
        saved: Emitted with the written path when the file is saved
    """

    saved = pyqtSignal(str)  # Saved file path

    def __init__(
        self,
        image_bytes: bytes,
        file_path: Union[str, Path],
        parent: Optional[QObject] = None,
    ):
        """Initialize the export save worker.

        Args:
            image_bytes: Encoded image data to write
            file_path: Destination path (string or Path object)
            parent: Parent QObject for proper cleanup
        """
        super().__init__(file_path, parent)
        self.image_bytes = image_bytes

    def run(self) -> None:
        """Write the image file in background thread."""
        try:
            if self.file_path is None:
                self.emit_error("No file path provided")
                return

            if not self.image_bytes:
                self.emit_error("No image data to save")
                return

            self.emit_progress(0, "Preparing to save...")

            if self.is_cancelled():
                return

            self.file_path.parent.mkdir(parents=True, exist_ok=True)

            self.emit_progress(50, "Writing image to disk...")
            try:
                self.file_path.write_bytes(self.image_bytes)
            except OSError as e:
                debug_log("WORKER", f"Failed to save image: {type(e).__name__}: {e}", "ERROR")
                self.emit_error(f"Failed to save image: {e!s}")
                return

            debug_log("WORKER", f"Saved {len(self.image_bytes)} bytes to {self.file_path}")

            if self.is_cancelled():
                return

            self.emit_progress(100, "Save complete!")
            self.saved.emit(str(self.file_path))
            self.emit_finished()

        except Exception as e:
            self.emit_error(
                f"Unexpected error saving file: {e!s}\n{traceback.format_exc()}"
            )

#!/usr/bin/env python3
"""
Custom exceptions and error handling utilities for Pixel Forge.

This module defines domain-specific exceptions and provides utilities
for consistent error handling across the application.
"""


class PixelForgeError(Exception):
    """Base exception for all Pixel Forge errors"""
    pass


class ValidationError(PixelForgeError):
    """Raised when input validation fails"""
    pass


class InvalidColorError(ValidationError):
    """Raised when a color is not a '#rrggbb' string"""
    pass


class ToolError(PixelForgeError):
    """Raised when tool operations fail"""
    pass


class LayerError(PixelForgeError):
    """Raised when layer operations fail"""
    pass


class LastLayerDeletionRefused(LayerError):
    """Raised when deleting the only remaining layer"""
    pass


class UnknownLayerIdError(LayerError):
    """Raised when a layer id is not in the store"""
    pass


class ExportError(PixelForgeError):
    """Raised when encoding or writing an exported image fails"""
    pass


def format_error_message(operation: str, error: Exception) -> str:
    """
    Format an error message for user display.

    Args:
        operation: Description of the operation that failed
        error: The exception that was raised

    Returns:
        User-friendly error message
    """
    if isinstance(error, FileNotFoundError):
        return f"File not found during {operation}"
    elif isinstance(error, PermissionError):
        return f"Permission denied during {operation}"
    elif isinstance(error, OSError) and error.errno == 28:  # No space left
        return f"Disk full - cannot complete {operation}"
    elif isinstance(error, LastLayerDeletionRefused):
        return "Cannot delete the last remaining layer"
    elif isinstance(error, InvalidColorError):
        return f"Invalid color: {error}"
    elif isinstance(error, ValidationError):
        return f"Invalid input: {error}"
    elif isinstance(error, ExportError):
        return f"Export failed: {error}"
    else:
        return f"Failed to {operation}: {error}"

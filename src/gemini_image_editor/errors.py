"""Exceptions raised by the file and Gemini edges of the editor."""

from __future__ import annotations


class ImageEditorError(Exception):
    """Base class for every failure the editor session reports."""


class ImageDecodeError(ImageEditorError):
    """The uploaded file could not be turned into an inline image payload."""


class GenerationError(ImageEditorError):
    """The Gemini call did not produce an edited image."""


class NoImageDataError(GenerationError):
    """Gemini answered, but none of the content parts carried image bytes."""


class MissingApiKeyError(GenerationError):
    """No Gemini API key was configured."""

"""Edit an uploaded image with a text prompt using the Gemini image model."""

from gemini_image_editor.image_payload import SourceImage
from gemini_image_editor.session import EditorSession, SessionState
from gemini_image_editor.settings import EditorSettings, load_settings

__all__ = [
    "EditorSession",
    "EditorSettings",
    "SessionState",
    "SourceImage",
    "load_settings",
]

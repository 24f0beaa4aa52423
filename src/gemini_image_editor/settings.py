"""Runtime settings for the image editor.

Values come from the process environment, optionally populated from a
``.env`` file. The resulting :class:`EditorSettings` is passed explicitly to
the Gemini service so the rest of the code never touches ``os.environ``.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

# Gemini model to invoke. Adjust this if Google changes the model identifier.
DEFAULT_MODEL_NAME: str = "gemini-2.5-flash-image"

# Gemini does not reliably annotate returned bytes, so results are always
# rendered with this media type.
OUTPUT_MEDIA_TYPE: str = "image/png"

LOG_FORMAT: str = "%(asctime)s %(levelname)s %(name)s: %(message)s"


@dataclass(frozen=True, slots=True)
class EditorSettings:
    """Configuration injected into the Gemini service."""

    api_key: Optional[str] = None
    model_name: str = DEFAULT_MODEL_NAME
    output_media_type: str = OUTPUT_MEDIA_TYPE
    log_level: str = "INFO"


def load_settings(env_file: Optional[Path] = None) -> EditorSettings:
    """Build settings from the environment (via .env).

    A missing API key is not an error here: it surfaces as a failed
    generation the first time the service is called.
    """

    load_dotenv(dotenv_path=env_file)
    api_key = os.getenv("GEMINI_API_KEY") or os.getenv("API_KEY") or None

    return EditorSettings(
        api_key=api_key,
        model_name=os.getenv("GEMINI_IMAGE_MODEL") or DEFAULT_MODEL_NAME,
        log_level=(os.getenv("LOG_LEVEL") or "INFO").upper(),
    )


def configure_logging(level: str = "INFO") -> None:
    """Send editor logs to stderr. Safe to call on every page rerun."""

    logging.basicConfig(level=level, format=LOG_FORMAT)
    logging.getLogger("gemini_image_editor").setLevel(level)

"""Gemini image-edit calls.

The editor sends one ``user`` content block (the source image followed by
the prompt text), asks for an image-only reply, and renders the first inline
image that comes back.
"""

from __future__ import annotations

import base64
import logging
from typing import Iterable, Optional, Protocol

from google import genai
from google.genai import types as genai_types

from gemini_image_editor.errors import MissingApiKeyError, NoImageDataError
from gemini_image_editor.image_payload import SourceImage
from gemini_image_editor.settings import OUTPUT_MEDIA_TYPE, EditorSettings

logger = logging.getLogger(__name__)


class ImageEditService(Protocol):
    """Anything that can turn a source image and a prompt into a display URL."""

    async def edit(self, source: SourceImage, prompt: str) -> str: ...


def build_edit_content(source: SourceImage, prompt: str) -> genai_types.Content:
    """Assemble the single ``user`` content block: image first, prompt second."""

    return genai_types.Content(
        role="user",
        parts=[
            genai_types.Part(
                inline_data=genai_types.Blob(
                    mime_type=source.media_type,
                    data=source.raw_bytes(),
                )
            ),
            genai_types.Part(text=prompt),
        ],
    )


def iter_response_parts(response: genai_types.GenerateContentResponse) -> Iterable[genai_types.Part]:
    """Yield the content parts of the first candidate, if any."""

    candidates = response.candidates or []
    if not candidates:
        return
    content = candidates[0].content
    if not content or not content.parts:
        return
    yield from content.parts


def first_image_url(
    response: genai_types.GenerateContentResponse,
    media_type: str = OUTPUT_MEDIA_TYPE,
) -> str:
    """Return a data URL for the first inline image in ``response``."""

    for part in iter_response_parts(response):
        inline = getattr(part, "inline_data", None)
        if not inline or not getattr(inline, "data", None):
            continue
        payload = base64.b64encode(inline.data).decode("ascii")
        return f"data:{media_type};base64,{payload}"

    raise NoImageDataError("No image data found in the API response.")


class GeminiImageService:
    """Edit images through ``client.aio.models.generate_content``."""

    def __init__(self, settings: EditorSettings, client: Optional[genai.Client] = None) -> None:
        self._settings = settings
        self._client = client

    @property
    def client(self) -> genai.Client:
        if self._client is None:
            if not self._settings.api_key:
                raise MissingApiKeyError(
                    "GEMINI_API_KEY was not found. Set it in your .env file before running."
                )
            self._client = genai.Client(api_key=self._settings.api_key)
        return self._client

    async def edit(self, source: SourceImage, prompt: str) -> str:
        """Send one edit request and return the edited image as a data URL."""

        user_content = build_edit_content(source, prompt)
        logger.info(
            "Requesting edit from %s (%s, payload length %d)",
            self._settings.model_name,
            source.media_type,
            len(source.encoded_payload),
        )

        response = await self.client.aio.models.generate_content(
            model=self._settings.model_name,
            contents=[user_content],
            config=genai_types.GenerateContentConfig(
                response_modalities=["IMAGE"],
            ),
        )

        return first_image_url(response, self._settings.output_media_type)

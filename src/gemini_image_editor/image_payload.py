"""Turn uploaded files into inline image payloads.

Browsers hand uploads over as ``data:<media type>;base64,<payload>`` URLs.
The editor keeps that representation: the data URL is what gets rendered,
and the media type and payload parsed back out of it are what gets sent to
Gemini.
"""

from __future__ import annotations

import asyncio
import base64
import mimetypes
import re
from dataclasses import dataclass
from typing import Any, Optional

from gemini_image_editor.errors import ImageDecodeError

_MEDIA_TYPE_PATTERN = re.compile(r":(.*?);")


@dataclass(frozen=True, slots=True)
class SourceImage:
    """An uploaded image, ready for display and for the Gemini request."""

    display_url: str
    encoded_payload: str
    media_type: str

    def raw_bytes(self) -> bytes:
        return base64.b64decode(self.encoded_payload)


def encode_data_url(data: bytes, media_type: str) -> str:
    payload = base64.b64encode(data).decode("ascii")
    return f"data:{media_type};base64,{payload}"


def parse_data_url(url: str) -> SourceImage:
    """Split a base64 data URL into its media type and payload."""

    header, _, payload = url.partition(",")
    if not header or not payload:
        raise ImageDecodeError("Invalid file format")

    match = _MEDIA_TYPE_PATTERN.search(header)
    if not match or not match.group(1):
        raise ImageDecodeError("Could not determine MIME type")

    return SourceImage(display_url=url, encoded_payload=payload, media_type=match.group(1))


def declared_media_type(file: Any) -> Optional[str]:
    """Return the content type the file picker declared, or guess it from the name."""

    media_type = getattr(file, "type", None)
    if media_type:
        return media_type

    name = getattr(file, "name", None)
    if not name:
        return None
    guessed, _ = mimetypes.guess_type(str(name))
    return guessed


def _read_all(file: Any) -> bytes:
    getvalue = getattr(file, "getvalue", None)
    data = getvalue() if callable(getvalue) else file.read()
    if isinstance(data, str):
        raise ImageDecodeError("File was opened in text mode")
    if not isinstance(data, (bytes, bytearray, memoryview)):
        raise ImageDecodeError(f"Reading the file returned {type(data).__name__}, not bytes")
    return bytes(data)


async def read_source_image(file: Any) -> SourceImage:
    """Read ``file`` fully and return it as a :class:`SourceImage`.

    Every failure, including I/O errors, is raised as ``ImageDecodeError``.
    """

    try:
        data = await asyncio.to_thread(_read_all, file)
    except ImageDecodeError:
        raise
    except Exception as exc:  # noqa: BLE001 - readers raise their own error types.
        raise ImageDecodeError(f"Could not read file: {exc}") from exc

    # An unknown type still yields a data URL; parsing it below rejects it.
    media_type = declared_media_type(file) or ""
    return parse_data_url(encode_data_url(data, media_type))


def data_url_bytes(url: str) -> bytes:
    """Decode the payload of a base64 data URL."""

    return parse_data_url(url).raw_bytes()

"""Test configuration for pytest."""

from __future__ import annotations

import asyncio
import base64
import io
import os
from types import SimpleNamespace
from typing import Callable, List, Optional

import pytest
from google.genai import types as genai_types

# Smallest valid PNG: a single transparent pixel.
PNG_PIXEL = base64.b64decode(
    "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJAAAADUlEQVR42mNk+M9QDwADhgGAWjR9awAAAABJRU5ErkJggg=="
)


def pytest_configure(config: pytest.Config) -> None:
    config.addinivalue_line("markers", "ai: real API tests that may cost money")
    config.addinivalue_line("markers", "slow: tests expected to run longer than ~1 second")


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    run_ai = os.getenv("RUN_AI_TESTS") == "1"
    skip_marker = pytest.mark.skip(reason="Set RUN_AI_TESTS=1 to run AI integration tests.")

    if run_ai:
        return

    for item in items:
        if "ai" in item.keywords:
            item.add_marker(skip_marker)


class FakeUpload(io.BytesIO):
    """Stands in for the file the browser picker hands over."""

    def __init__(self, data: bytes, name: str = "photo.png", type: Optional[str] = "image/png") -> None:
        super().__init__(data)
        self.name = name
        self.type = type


class BrokenUpload:
    name = "broken.png"
    type = "image/png"

    def read(self) -> bytes:
        raise OSError("disk went away")


class FakeModels:
    """Records ``generate_content`` calls and replays a canned outcome."""

    def __init__(self, response=None, error: Optional[BaseException] = None) -> None:
        self.response = response
        self.error = error
        self.calls: List[dict] = []

    async def generate_content(self, *, model, contents, config):
        self.calls.append({"model": model, "contents": contents, "config": config})
        if self.error is not None:
            raise self.error
        return self.response


class FakeEditService:
    """In-memory replacement for ``GeminiImageService``.

    When ``gate`` is set the call parks until the test releases it.
    """

    def __init__(self, result: str = "data:image/png;base64,RURJVA==", error: Optional[BaseException] = None) -> None:
        self.result = result
        self.error = error
        self.calls: List[tuple] = []
        self.gate: Optional[asyncio.Event] = None
        self.started: Optional[asyncio.Event] = None
        self.on_call: Optional[Callable[[], None]] = None

    async def edit(self, source, prompt: str) -> str:
        self.calls.append((source, prompt))
        if self.on_call is not None:
            self.on_call()
        if self.started is not None:
            self.started.set()
        if self.gate is not None:
            await self.gate.wait()
        if self.error is not None:
            raise self.error
        return self.result


@pytest.fixture
def png_bytes() -> bytes:
    return PNG_PIXEL


@pytest.fixture
def make_upload() -> Callable[..., FakeUpload]:
    return FakeUpload


@pytest.fixture
def broken_upload() -> BrokenUpload:
    return BrokenUpload()


@pytest.fixture
def fake_service() -> FakeEditService:
    return FakeEditService()


@pytest.fixture
def make_fake_client() -> Callable[..., SimpleNamespace]:
    def factory(response=None, error: Optional[BaseException] = None) -> SimpleNamespace:
        return SimpleNamespace(aio=SimpleNamespace(models=FakeModels(response=response, error=error)))

    return factory


@pytest.fixture
def make_response() -> Callable[..., genai_types.GenerateContentResponse]:
    def factory(*parts: genai_types.Part) -> genai_types.GenerateContentResponse:
        return genai_types.GenerateContentResponse(
            candidates=[
                genai_types.Candidate(
                    content=genai_types.Content(role="model", parts=list(parts)),
                )
            ]
        )

    return factory


def image_part(data: bytes, mime_type: str = "image/png") -> genai_types.Part:
    return genai_types.Part(inline_data=genai_types.Blob(data=data, mime_type=mime_type))


@pytest.fixture
def make_image_part() -> Callable[..., genai_types.Part]:
    return image_part


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch) -> pytest.MonkeyPatch:
    """Remove editor variables and restore them (or their absence) afterwards."""

    for name in ("GEMINI_API_KEY", "API_KEY", "GEMINI_IMAGE_MODEL", "LOG_LEVEL"):
        # setenv first so teardown also undoes values a .env file loads.
        monkeypatch.setenv(name, "placeholder")
        monkeypatch.delenv(name)
    return monkeypatch

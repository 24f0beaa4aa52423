"""The interactive editor session.

:class:`SessionState` is an immutable value. The module-level functions are
pure transitions from one state to the next; :class:`EditorSession` strings
them together around the two places where the editor waits: reading the
uploaded file and calling Gemini.

Every generation is tagged with a request id. A settlement whose id is no
longer the active one (the user pressed "Start Over" or uploaded another
image in the meantime) is dropped instead of overwriting fresher state.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Any, Optional, Tuple

from gemini_image_editor.errors import ImageDecodeError
from gemini_image_editor.gemini_client import ImageEditService
from gemini_image_editor.image_payload import SourceImage, read_source_image

logger = logging.getLogger(__name__)

FILE_ERROR_MESSAGE = "Could not process file. Please try another image."
MISSING_INPUT_MESSAGE = "Please provide a prompt and an image."
UNKNOWN_ERROR_MESSAGE = "An unknown error occurred."
GENERATION_ERROR_PREFIX = "Generation failed: "


@dataclass(frozen=True, slots=True)
class SessionState:
    source_image: Optional[SourceImage] = None
    result_image: Optional[str] = None
    prompt_text: str = ""
    pending: bool = False
    last_error: Optional[str] = None
    request_counter: int = 0
    active_request_id: Optional[int] = None

    @property
    def can_generate(self) -> bool:
        return not self.pending and self.source_image is not None and bool(self.prompt_text.strip())


# ---------------------------------------------------------------------------
# Pure transitions


def begin_upload(state: SessionState) -> SessionState:
    """Clear the previous result and error, and orphan any in-flight request."""

    return replace(state, result_image=None, last_error=None, pending=False, active_request_id=None)


def upload_succeeded(state: SessionState, image: SourceImage) -> SessionState:
    return replace(state, source_image=image, result_image=None, last_error=None)


def upload_failed(state: SessionState) -> SessionState:
    return replace(state, last_error=FILE_ERROR_MESSAGE)


def update_prompt(state: SessionState, text: str) -> SessionState:
    return replace(state, prompt_text=text)


def begin_generation(state: SessionState) -> Tuple[SessionState, Optional[int]]:
    """Start a generation.

    Returns the new state and the request id to settle later, or ``None``
    when no request should be sent.
    """

    if state.pending:
        return state, None

    if not state.prompt_text.strip() or state.source_image is None:
        return replace(state, last_error=MISSING_INPUT_MESSAGE), None

    request_id = state.request_counter + 1
    started = replace(
        state,
        pending=True,
        last_error=None,
        result_image=None,
        request_counter=request_id,
        active_request_id=request_id,
    )
    return started, request_id


def generation_succeeded(state: SessionState, request_id: int, image_url: str) -> SessionState:
    if state.active_request_id != request_id:
        return state
    return replace(state, pending=False, active_request_id=None, result_image=image_url, last_error=None)


def generation_failed(state: SessionState, request_id: int, message: str) -> SessionState:
    if state.active_request_id != request_id:
        return state
    return replace(state, pending=False, active_request_id=None, result_image=None, last_error=message)


def reset(state: SessionState) -> SessionState:
    """Back to the empty session. Only the request counter survives."""

    return SessionState(request_counter=state.request_counter)


def describe_generation_error(exc: BaseException) -> str:
    return f"{GENERATION_ERROR_PREFIX}{str(exc) or UNKNOWN_ERROR_MESSAGE}"


# ---------------------------------------------------------------------------
# Session driver


class EditorSession:
    """Holds the current :class:`SessionState` and runs the user's actions.

    None of the public coroutines raise: failures end up in
    ``state.last_error``.
    """

    def __init__(self, service: ImageEditService, state: Optional[SessionState] = None) -> None:
        self.service = service
        self.state = state or SessionState()

    async def load_image(self, file: Any) -> SessionState:
        self.state = begin_upload(self.state)
        name = getattr(file, "name", None) or "<unnamed>"

        try:
            image = await read_source_image(file)
        except ImageDecodeError:
            logger.exception("Could not process uploaded file %s", name)
            self.state = upload_failed(self.state)
            return self.state

        logger.info("Loaded %s as %s", name, image.media_type)
        self.state = upload_succeeded(self.state, image)
        return self.state

    def update_prompt(self, text: str) -> SessionState:
        self.state = update_prompt(self.state, text)
        return self.state

    async def generate(self) -> SessionState:
        self.state, request_id = begin_generation(self.state)
        if request_id is None:
            if self.state.pending:
                logger.warning("Generation already in flight; ignoring request")
            return self.state

        source = self.state.source_image
        prompt = self.state.prompt_text
        logger.info("Generation %d started", request_id)
        logger.debug("Generation %d prompt: %r", request_id, prompt)

        try:
            image_url = await self.service.edit(source, prompt)
        except Exception as exc:  # noqa: BLE001 - every failure is reported to the user.
            logger.exception("Generation %d failed", request_id)
            settled = generation_failed(self.state, request_id, describe_generation_error(exc))
        else:
            logger.info("Generation %d finished", request_id)
            settled = generation_succeeded(self.state, request_id, image_url)

        if settled is self.state:
            logger.debug("Discarding stale result of generation %d", request_id)
        self.state = settled
        return self.state

    def reset(self) -> SessionState:
        self.state = reset(self.state)
        return self.state

"""Streamlit page for the Gemini image editor.

Usage:
    streamlit run src/gemini_image_editor/app.py
"""

from __future__ import annotations

import asyncio

import streamlit as st

from gemini_image_editor.gemini_client import GeminiImageService
from gemini_image_editor.image_payload import data_url_bytes
from gemini_image_editor.session import EditorSession
from gemini_image_editor.settings import EditorSettings, configure_logging, load_settings

ACCEPTED_TYPES = ["png", "jpg", "jpeg", "gif", "webp"]
PROMPT_KEY = "prompt_input"
SESSION_KEY = "editor_session"
UPLOADER_NONCE_KEY = "uploader_nonce"


def ensure_state(settings: EditorSettings) -> EditorSession:
    """Initialize session_state keys and return the editor session."""

    defaults = {
        SESSION_KEY: lambda: EditorSession(GeminiImageService(settings)),
        UPLOADER_NONCE_KEY: lambda: 0,
        PROMPT_KEY: lambda: "",
    }
    for key, factory in defaults.items():
        if key not in st.session_state:
            st.session_state[key] = factory()

    session: EditorSession = st.session_state[SESSION_KEY]
    # The aio client is bound to the event loop that first used it, and each
    # rerun drives its coroutines with a fresh asyncio.run().
    session.service = GeminiImageService(settings)
    return session


def uploader_key() -> str:
    return f"uploader-{st.session_state[UPLOADER_NONCE_KEY]}"


def on_upload(session: EditorSession, key: str) -> None:
    uploaded = st.session_state.get(key)
    if uploaded is None:
        return
    asyncio.run(session.load_image(uploaded))


def on_start_over(session: EditorSession) -> None:
    session.reset()
    st.session_state[UPLOADER_NONCE_KEY] += 1
    st.session_state[PROMPT_KEY] = ""


def render_uploader(session: EditorSession, label: str) -> None:
    key = uploader_key()
    st.file_uploader(
        label,
        type=ACCEPTED_TYPES,
        help="PNG, JPG, GIF up to 10MB",
        key=key,
        on_change=on_upload,
        args=(session, key),
    )


def render_result(session: EditorSession) -> None:
    state = session.state
    if state.result_image:
        st.image(data_url_bytes(state.result_image), caption="Edited")
    else:
        st.info("✨ Your edited image will appear here.")


def render_editor(session: EditorSession) -> None:
    state = session.state
    original_col, edited_col = st.columns(2)

    with original_col:
        st.subheader("Original")
        st.image(state.source_image.raw_bytes(), caption="Original")
        render_uploader(session, "Upload a different image")

    with edited_col:
        st.subheader("Edited")
        edited_slot = st.empty()
        with edited_slot.container():
            render_result(session)

    prompt = st.text_input(
        "Prompt",
        key=PROMPT_KEY,
        placeholder="e.g., Add a retro filter, make it black and white...",
        disabled=state.pending,
    )
    session.update_prompt(prompt)

    generate_clicked = st.button(
        "✨ Generate",
        type="primary",
        disabled=not session.state.can_generate,
    )
    st.button("↩ Start Over", on_click=on_start_over, args=(session,))

    if generate_clicked:
        with edited_slot.container():
            with st.spinner("Editing your image..."):
                asyncio.run(session.generate())
        with edited_slot.container():
            render_result(session)


def main() -> None:
    settings = load_settings()
    configure_logging(settings.log_level)

    st.set_page_config(page_title="Gemini Image Editor", page_icon="✨", layout="wide")
    session = ensure_state(settings)

    st.title("Gemini Image Editor")
    st.caption("Transform your photos with a simple text prompt.")

    if session.state.source_image is None:
        render_uploader(session, "Click to upload or drag and drop")
    else:
        render_editor(session)

    # Read after render_editor: a generation may have just settled.
    if session.state.last_error:
        st.error(session.state.last_error)


if __name__ == "__main__":
    main()

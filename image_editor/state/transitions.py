"""Pure state transitions, one per user or network event.

Every function takes the current :class:`EditorState` and returns the next
one; none of them touch I/O. Transitions triggered by a finished request
carry the token of the request and are ignored once that token is stale.
"""

from __future__ import annotations

from dataclasses import replace

from image_editor.image.types import SourceImage

from .model import EditorState, GenerationResult, RequestState

MISSING_INPUT_MESSAGE = "Please upload an image and enter a prompt."
INTERRUPTED_MESSAGE = "The request was interrupted before it completed."


def initial_state() -> EditorState:
    return EditorState()


def upload(state: EditorState, source: SourceImage) -> EditorState:
    """New source image: prior preview, result and error no longer apply."""

    return replace(
        state,
        source=source,
        preview=None,
        result=None,
        error=None,
        request_state=RequestState.IDLE,
        request_token=state.request_token + 1,
    )


def preview_ready(state: EditorState, source: SourceImage, preview: str) -> EditorState:
    if state.source is not source:
        return state
    return replace(state, preview=preview)


def preview_failed(state: EditorState, source: SourceImage, message: str) -> EditorState:
    if state.source is not source:
        return state
    return replace(state, preview=None, error=message)


def change_prompt(state: EditorState, text: str) -> EditorState:
    return replace(state, prompt=text)


def reject_generate(state: EditorState) -> EditorState:
    return replace(state, error=MISSING_INPUT_MESSAGE)


def start_generate(state: EditorState) -> EditorState:
    return replace(
        state,
        result=None,
        error=None,
        request_state=RequestState.IN_FLIGHT,
        request_token=state.request_token + 1,
    )


def finish_success(state: EditorState, token: int, data_uri: str) -> EditorState:
    if token != state.request_token:
        return state
    return replace(
        state,
        result=GenerationResult(data_uri=data_uri),
        error=None,
        request_state=RequestState.SUCCEEDED,
    )


def finish_failure(state: EditorState, token: int, message: str) -> EditorState:
    if token != state.request_token:
        return state
    return replace(
        state,
        result=GenerationResult(failure=message),
        error=message,
        request_state=RequestState.FAILED,
    )


def clear_in_flight(state: EditorState, token: int) -> EditorState:
    """Ensure the request identified by ``token`` no longer counts as running."""

    if token != state.request_token or state.request_state is not RequestState.IN_FLIGHT:
        return state
    return finish_failure(state, token, INTERRUPTED_MESSAGE)


def reset(state: EditorState) -> EditorState:
    return replace(initial_state(), request_token=state.request_token + 1)


__all__ = [
    "INTERRUPTED_MESSAGE",
    "MISSING_INPUT_MESSAGE",
    "change_prompt",
    "clear_in_flight",
    "finish_failure",
    "finish_success",
    "initial_state",
    "preview_failed",
    "preview_ready",
    "reject_generate",
    "reset",
    "start_generate",
    "upload",
]

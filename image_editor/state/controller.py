from __future__ import annotations

import logging
from typing import Awaitable, Callable, List

from image_editor.errors import ReadError
from image_editor.image.encoder import ImageSource, encode_file
from image_editor.image.gemini.interfaces import EditEngineProtocol
from image_editor.image.types import EncodedPayload, SourceImage

from . import transitions
from .model import EditorState, RequestState

LOGGER = logging.getLogger("image_editor.controller")

UNKNOWN_ERROR_MESSAGE = "An unknown error occurred."

StateListener = Callable[[EditorState], None]
Encoder = Callable[[ImageSource], Awaitable[EncodedPayload]]


def _error_message(exc: BaseException) -> str:
    return str(exc).strip() or UNKNOWN_ERROR_MESSAGE


class EditorController:
    """Binds user actions to the encoder and the edit engine.

    State lives in one immutable :class:`EditorState`; every action commits
    the result of a pure transition and notifies subscribers, which is how a
    presentation layer re-renders.
    """

    def __init__(
        self,
        engine: EditEngineProtocol,
        *,
        encoder: Encoder = encode_file,
        initial: EditorState | None = None,
    ) -> None:
        self._engine = engine
        self._encode = encoder
        self._state = initial or transitions.initial_state()
        self._listeners: List[StateListener] = []

    @property
    def state(self) -> EditorState:
        return self._state

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def _commit(self, state: EditorState) -> EditorState:
        if state is self._state:
            return state
        self._state = state
        for listener in list(self._listeners):
            listener(state)
        return state

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------
    async def on_upload(self, source: SourceImage) -> EditorState:
        self._commit(transitions.upload(self._state, source))
        try:
            preview = await self._encode(source)
        except ReadError as exc:
            LOGGER.warning("preview for %r failed: %s", source, exc)
            return self._commit(transitions.preview_failed(self._state, source, _error_message(exc)))
        return self._commit(transitions.preview_ready(self._state, source, preview.data_uri))

    def on_prompt_change(self, text: str) -> EditorState:
        return self._commit(transitions.change_prompt(self._state, text))

    async def on_generate(self) -> EditorState:
        state = self._state
        if state.source is None or not state.prompt:
            return self._commit(transitions.reject_generate(state))
        if state.request_state is RequestState.IN_FLIGHT:
            LOGGER.debug("generate ignored: request %d still in flight", state.request_token)
            return state

        state = self._commit(transitions.start_generate(state))
        token = state.request_token
        source, prompt = state.source, state.prompt
        try:
            payload = await self._encode(source)
            data_uri = await self._engine.request_edit(payload.data, payload.media_type, prompt)
        except Exception as exc:
            LOGGER.error("generation %d failed: %s", token, exc)
            self._commit(transitions.finish_failure(self._state, token, _error_message(exc)))
        else:
            if token != self._state.request_token:
                LOGGER.info("discarding stale result of generation %d", token)
            self._commit(transitions.finish_success(self._state, token, data_uri))
        finally:
            self._commit(transitions.clear_in_flight(self._state, token))
        return self._state

    def on_reset(self) -> EditorState:
        return self._commit(transitions.reset(self._state))


__all__ = ["EditorController", "StateListener", "UNKNOWN_ERROR_MESSAGE"]

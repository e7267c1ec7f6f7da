from __future__ import annotations

import base64
import logging
from dataclasses import dataclass
from typing import Any, Callable, Iterable, Optional, TypeVar

from google import genai
from google.genai import types

from image_editor.config import DEFAULT_API_KEY_ENV, DEFAULT_MODEL, GeminiConfig, resolve_api_key
from image_editor.errors import ConfigurationError, EmptyResponse, GenerationRefused
from image_editor.image.types import EncodedPayload

from .interfaces import EditEngineProtocol

LOGGER = logging.getLogger("image_editor.gemini")

_T = TypeVar("_T")

NORMAL_FINISH = "STOP"


def _first(items: Iterable[_T] | None, predicate: Callable[[_T], bool]) -> Optional[_T]:
    """First element of ``items`` satisfying ``predicate``, in declared order."""

    for item in items or ():
        if predicate(item):
            return item
    return None


def _has_inline_image(part: Any) -> bool:
    blob = getattr(part, "inline_data", None)
    return blob is not None and bool(getattr(blob, "data", None))


def _reason_name(value: Any) -> str | None:
    if value is None:
        return None
    raw = getattr(value, "value", value)
    if isinstance(raw, str):
        return raw or None
    name = getattr(value, "name", None)
    return str(name) if name else str(value)


def _as_base64(data: Any) -> str:
    if isinstance(data, (bytes, bytearray)):
        return base64.b64encode(bytes(data)).decode("ascii")
    return str(data)


def extract_image_data_uri(response: Any) -> str:
    """Interpret a ``generate_content`` response.

    Returns the first inline image of the first candidate as a data URI, or
    raises :class:`GenerationRefused` / :class:`EmptyResponse`.
    """

    candidate = _first(getattr(response, "candidates", None), lambda _: True)
    content = getattr(candidate, "content", None)
    image_part = _first(getattr(content, "parts", None), _has_inline_image)

    if image_part is not None:
        blob = image_part.inline_data
        mime_type = getattr(blob, "mime_type", None) or "image/png"
        return f"data:{mime_type};base64,{_as_base64(blob.data)}"

    finish_reason = _reason_name(getattr(candidate, "finish_reason", None))
    if finish_reason and finish_reason != NORMAL_FINISH:
        feedback = getattr(response, "prompt_feedback", None)
        block_reason = _reason_name(getattr(feedback, "block_reason", None))
        message = f"Image generation failed. Reason: {finish_reason}."
        if block_reason:
            message += f" (Details: {block_reason})."
        message += " Please modify your prompt and try again."
        raise GenerationRefused(message, finish_reason=finish_reason, block_reason=block_reason)

    raise EmptyResponse(
        "No image data found in the API response. The response may have been empty or blocked."
    )


def build_contents(encoded_image: str, media_type: str, prompt: str) -> types.Content:
    """Image part first, instruction second."""

    image_bytes = EncodedPayload(data=encoded_image, media_type=media_type).decode()
    return types.Content(
        role="user",
        parts=[
            types.Part.from_bytes(data=image_bytes, mime_type=media_type),
            types.Part.from_text(text=prompt),
        ],
    )


@dataclass
class GeminiEditClient(EditEngineProtocol):
    """Single-shot image edit requests against a Gemini image model.

    No retries, timeouts or rate limiting: every call is one attempt and
    any SDK error reaches the caller unchanged.
    """

    model: str = DEFAULT_MODEL
    api_key_env: tuple[str, ...] = DEFAULT_API_KEY_ENV
    base_url: Optional[str] = None
    client: Optional[Any] = None

    @classmethod
    def from_config(cls, config: GeminiConfig, *, client: Any = None) -> "GeminiEditClient":
        return cls(
            model=config.model,
            api_key_env=tuple(config.api_key_env),
            base_url=config.base_url,
            client=client,
        )

    def _ensure_client(self, api_key: str) -> Any:
        if self.client is None:
            kwargs: dict[str, Any] = {"api_key": api_key}
            if self.base_url:
                kwargs["http_options"] = types.HttpOptions(base_url=self.base_url)
            self.client = genai.Client(**kwargs)
        return self.client

    async def request_edit(self, encoded_image: str, media_type: str, prompt: str) -> str:
        api_key = resolve_api_key(self.api_key_env)
        if not api_key:
            env_name = self.api_key_env[0] if self.api_key_env else "API_KEY"
            raise ConfigurationError(f"{env_name} environment variable is not set.")
        if not encoded_image:
            raise ValueError("Encoded image must not be empty.")
        if not prompt:
            raise ValueError("Prompt must not be empty.")

        contents = build_contents(encoded_image, media_type, prompt)
        client = self._ensure_client(api_key)
        LOGGER.info("requesting edit from model=%s media_type=%s prompt_chars=%d", self.model, media_type, len(prompt))
        try:
            response = await client.aio.models.generate_content(
                model=self.model,
                contents=contents,
                config=types.GenerateContentConfig(response_modalities=["IMAGE"]),
            )
        except Exception as exc:
            LOGGER.error("Gemini API call failed: %s", exc)
            raise

        return extract_image_data_uri(response)


__all__ = ["GeminiEditClient", "NORMAL_FINISH", "build_contents", "extract_image_data_uri"]

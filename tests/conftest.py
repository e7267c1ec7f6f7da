from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace
import sys
from typing import Any, Callable

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from image_editor.image.types import SourceImage

PNG_TEN_BYTES = b"\x89PNG\r\n\x1a\n\x00\x00"


class FakeModels:
    """Stands in for ``client.aio.models`` of the google-genai SDK."""

    def __init__(self, response: Any = None, error: BaseException | None = None) -> None:
        self.response = response
        self.error = error
        self.calls: list[dict[str, Any]] = []

    async def generate_content(self, *, model: str, contents: Any, config: Any) -> Any:
        self.calls.append({"model": model, "contents": contents, "config": config})
        if self.error is not None:
            raise self.error
        return self.response


def fake_client(models: FakeModels) -> SimpleNamespace:
    return SimpleNamespace(aio=SimpleNamespace(models=models))


def inline_part(mime_type: str, data: Any) -> SimpleNamespace:
    return SimpleNamespace(text=None, inline_data=SimpleNamespace(mime_type=mime_type, data=data))


def text_part(text: str) -> SimpleNamespace:
    return SimpleNamespace(text=text, inline_data=None)


def make_response(
    *parts: SimpleNamespace,
    finish_reason: Any = "STOP",
    block_reason: Any = None,
    candidates: bool = True,
) -> SimpleNamespace:
    feedback = SimpleNamespace(block_reason=block_reason) if block_reason is not None else None
    if not candidates:
        return SimpleNamespace(candidates=[], prompt_feedback=feedback)
    candidate = SimpleNamespace(
        content=SimpleNamespace(parts=list(parts)),
        finish_reason=finish_reason,
    )
    return SimpleNamespace(candidates=[candidate], prompt_feedback=feedback)


@pytest.fixture()
def png_source() -> SourceImage:
    return SourceImage(content=PNG_TEN_BYTES, media_type="image/png", name="stars.png")


@pytest.fixture()
def api_key(monkeypatch: pytest.MonkeyPatch) -> str:
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)
    monkeypatch.setenv("API_KEY", "test-key")
    return "test-key"


@pytest.fixture()
def no_api_key(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("API_KEY", raising=False)
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)


@pytest.fixture()
def models_factory() -> Callable[..., FakeModels]:
    return FakeModels

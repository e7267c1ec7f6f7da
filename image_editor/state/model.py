"""Immutable snapshots of the editor's UI-facing state."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from image_editor.image.types import SourceImage


class RequestState(str, Enum):
    IDLE = "idle"
    IN_FLIGHT = "in_flight"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass(frozen=True)
class GenerationResult:
    """Either an edited image (as a data URI) or the reason none was produced."""

    data_uri: Optional[str] = None
    failure: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        return self.data_uri is not None


@dataclass(frozen=True)
class EditorState:
    """One consistent view of the editor.

    ``request_token`` identifies the latest generation attempt. It takes no
    part in equality so a reset state compares equal to a fresh one.
    """

    source: Optional[SourceImage] = None
    preview: Optional[str] = None
    prompt: str = ""
    result: Optional[GenerationResult] = None
    error: Optional[str] = None
    request_state: RequestState = RequestState.IDLE
    request_token: int = field(default=0, compare=False)

    @property
    def is_loading(self) -> bool:
        return self.request_state is RequestState.IN_FLIGHT

    @property
    def can_generate(self) -> bool:
        return not self.is_loading and self.source is not None and bool(self.prompt)

    @property
    def edited_image(self) -> Optional[str]:
        if self.result is None:
            return None
        return self.result.data_uri


__all__ = ["EditorState", "GenerationResult", "RequestState"]

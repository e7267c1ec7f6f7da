"""Edit images with natural-language instructions using Gemini."""

from __future__ import annotations

from importlib import import_module
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:  # pragma: no cover - type checking helper
    from .config import EditorConfig, load_config
    from .image.encoder import encode_file
    from .image.gemini import GeminiEditClient
    from .state import EditorController, EditorState, RequestState

__all__ = [
    "EditorConfig",
    "EditorController",
    "EditorState",
    "GeminiEditClient",
    "RequestState",
    "encode_file",
    "load_config",
]

_EXPORTS = {
    "EditorConfig": ".config",
    "load_config": ".config",
    "encode_file": ".image.encoder",
    "GeminiEditClient": ".image.gemini",
    "EditorController": ".state",
    "EditorState": ".state",
    "RequestState": ".state",
}


def __getattr__(name: str) -> Any:  # pragma: no cover - dispatch helper
    target = _EXPORTS.get(name)
    if target is None:
        raise AttributeError(name)
    module = import_module(target, __name__)
    value = getattr(module, name)
    globals()[name] = value
    return value

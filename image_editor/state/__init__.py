"""Application state container for the editor."""

from .controller import EditorController, UNKNOWN_ERROR_MESSAGE
from .model import EditorState, GenerationResult, RequestState

__all__ = [
    "EditorController",
    "EditorState",
    "GenerationResult",
    "RequestState",
    "UNKNOWN_ERROR_MESSAGE",
]

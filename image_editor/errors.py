"""Failure taxonomy shared by the encoder, the Gemini client and the controller.

Transport failures are intentionally absent: whatever the ``google-genai``
SDK raises while talking to the service propagates unchanged.
"""

from __future__ import annotations


class EditorError(RuntimeError):
    """Base class for failures surfaced to the user."""


class ReadError(EditorError):
    """Raised when an image cannot be read or rendered as base64 text."""


class UnsupportedImageError(ReadError):
    """Raised when an uploaded file is not an ``image/*`` payload."""


class ConfigurationError(EditorError):
    """Raised when the API credential is missing."""


class GenerationRefused(EditorError):
    """The service finished without an image for a non-``STOP`` reason."""

    def __init__(self, message: str, *, finish_reason: str, block_reason: str | None = None) -> None:
        super().__init__(message)
        self.finish_reason = finish_reason
        self.block_reason = block_reason


class EmptyResponse(EditorError):
    """The service returned neither an image nor a refusal reason."""


__all__ = [
    "ConfigurationError",
    "EditorError",
    "EmptyResponse",
    "GenerationRefused",
    "ReadError",
    "UnsupportedImageError",
]

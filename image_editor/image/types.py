from __future__ import annotations

import base64
import binascii
from dataclasses import dataclass

from image_editor.errors import ReadError


@dataclass(frozen=True)
class SourceImage:
    """The user's original upload; replaced wholesale, never mutated."""

    content: bytes
    media_type: str
    name: str | None = None

    def __repr__(self) -> str:
        return f"SourceImage(name={self.name!r}, media_type={self.media_type!r}, size={len(self.content)})"


@dataclass(frozen=True)
class EncodedPayload:
    """Base64 text of an image plus its declared media type."""

    data: str
    media_type: str

    @property
    def data_uri(self) -> str:
        return f"data:{self.media_type};base64,{self.data}"

    def decode(self) -> bytes:
        try:
            return base64.b64decode(self.data, validate=True)
        except (ValueError, binascii.Error) as exc:
            raise ReadError("Encoded image is not valid base64 data.") from exc


__all__ = ["EncodedPayload", "SourceImage"]

"""Turn uploaded images into base64 text suitable for the Gemini request."""

from __future__ import annotations

import asyncio
import base64
import binascii
import logging
import mimetypes
from pathlib import Path
from typing import Any, BinaryIO, Union

from image_editor.errors import ReadError

from .types import EncodedPayload, SourceImage

LOGGER = logging.getLogger("image_editor.encoder")

DEFAULT_MEDIA_TYPE = "application/octet-stream"

ImageSource = Union[SourceImage, bytes, bytearray, str, Path, BinaryIO]


def split_data_uri(uri: str) -> EncodedPayload:
    """Split ``data:<type>;base64,<data>`` into its media type and payload."""

    header, sep, data = uri.partition(",")
    if not sep or not header.startswith("data:"):
        raise ReadError("Expected a base64 data URI.")
    meta = header[len("data:"):]
    media_type, _, encoding = meta.partition(";")
    if encoding.lower() != "base64":
        raise ReadError("Only base64 data URIs are supported.")
    return EncodedPayload(data=data, media_type=media_type or DEFAULT_MEDIA_TYPE)


def to_data_uri(payload: EncodedPayload) -> str:
    return payload.data_uri


def _guess_media_type(source: Any) -> str | None:
    declared = getattr(source, "content_type", None) or getattr(source, "media_type", None)
    if isinstance(declared, str) and declared:
        return declared
    name = getattr(source, "name", None)
    if isinstance(source, (str, Path)):
        name = str(source)
    if isinstance(name, str) and name:
        guessed, _ = mimetypes.guess_type(name)
        return guessed
    return None


def _read_raw(source: ImageSource) -> bytes | str:
    if isinstance(source, SourceImage):
        return source.content
    if isinstance(source, (bytes, bytearray)):
        return bytes(source)
    if isinstance(source, (str, Path)):
        return Path(source).read_bytes()
    reader = getattr(source, "read", None)
    if reader is None:
        raise ReadError(f"Cannot read image from {type(source).__name__}.")
    return reader()


def _encode_raw(raw: object, media_type: str | None) -> EncodedPayload:
    if isinstance(raw, (bytes, bytearray)):
        data = base64.b64encode(bytes(raw)).decode("ascii")
        return EncodedPayload(data=data, media_type=media_type or DEFAULT_MEDIA_TYPE)
    if isinstance(raw, str) and raw.startswith("data:"):
        payload = split_data_uri(raw)
        try:
            payload.data.encode("ascii")
            base64.b64decode(payload.data, validate=True)
        except (UnicodeEncodeError, ValueError, binascii.Error) as exc:
            raise ReadError("Failed to read file as data URL.") from exc
        if media_type and payload.media_type == DEFAULT_MEDIA_TYPE:
            return EncodedPayload(data=payload.data, media_type=media_type)
        return payload
    raise ReadError("Failed to read file as data URL.")


async def encode_file(source: ImageSource, media_type: str | None = None) -> EncodedPayload:
    """Read ``source`` completely and return its base64 text and media type.

    ``source`` may be a :class:`SourceImage`, raw bytes, a filesystem path or
    a binary file object. A read primitive that already yields a data URL has
    its ``data:<type>;base64,`` prefix stripped. Any failure of the read is
    reported as :class:`ReadError`.
    """

    declared = media_type
    if declared is None:
        declared = source.media_type if isinstance(source, SourceImage) else _guess_media_type(source)
    try:
        raw = await asyncio.to_thread(_read_raw, source)
    except ReadError:
        raise
    except (OSError, ValueError) as exc:
        LOGGER.warning("image read failed: %s", exc)
        raise ReadError(f"Failed to read image: {exc}") from exc
    if raw is None:
        raise ReadError("Failed to read file as data URL.")
    payload = _encode_raw(raw, declared)
    LOGGER.debug("encoded %d base64 characters as %s", len(payload.data), payload.media_type)
    return payload


__all__ = ["DEFAULT_MEDIA_TYPE", "ImageSource", "encode_file", "split_data_uri", "to_data_uri"]

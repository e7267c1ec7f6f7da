"""Upload surface: admit only ``image/*`` files into the editor."""

from __future__ import annotations

import io
import logging
import mimetypes
from pathlib import Path
from typing import Optional

from PIL import Image, UnidentifiedImageError

from image_editor.errors import ReadError, UnsupportedImageError
from image_editor.image.types import SourceImage

LOGGER = logging.getLogger("image_editor.upload")


def is_image_media_type(media_type: Optional[str]) -> bool:
    return bool(media_type) and str(media_type).lower().startswith("image/")


def detect_media_type(content: bytes, name: Optional[str] = None) -> Optional[str]:
    """Sniff the media type with Pillow, falling back to the file name."""

    try:
        with Image.open(io.BytesIO(content)) as img:
            fmt = img.format
    except (UnidentifiedImageError, OSError, ValueError):
        fmt = None
    if fmt:
        mime = Image.MIME.get(fmt.upper())
        if mime:
            return mime
    if name:
        guessed, _ = mimetypes.guess_type(name)
        return guessed
    return None


def source_from_bytes(
    content: bytes,
    *,
    name: Optional[str] = None,
    media_type: Optional[str] = None,
) -> SourceImage:
    declared = media_type or detect_media_type(content, name)
    if not is_image_media_type(declared):
        raise UnsupportedImageError(f"Unsupported file type: {declared or 'unknown'}. Please choose an image.")
    return SourceImage(content=bytes(content), media_type=str(declared), name=name)


def load_source_image(path: Path, *, media_type: Optional[str] = None) -> SourceImage:
    path = Path(path)
    try:
        content = path.read_bytes()
    except OSError as exc:
        raise ReadError(f"Failed to read {path}: {exc}") from exc
    source = source_from_bytes(content, name=path.name, media_type=media_type)
    LOGGER.debug("loaded %s (%s, %d bytes)", path, source.media_type, len(content))
    return source


__all__ = ["detect_media_type", "is_image_media_type", "load_source_image", "source_from_bytes"]

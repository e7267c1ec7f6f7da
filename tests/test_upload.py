from __future__ import annotations

import io
from pathlib import Path

import pytest

Image = pytest.importorskip("PIL.Image")

from image_editor.errors import ReadError, UnsupportedImageError
from image_editor.upload import detect_media_type, is_image_media_type, load_source_image, source_from_bytes


def _png_bytes() -> bytes:
    buffer = io.BytesIO()
    Image.new("RGB", (4, 4), color=(200, 40, 90)).save(buffer, format="PNG")
    return buffer.getvalue()


def test_load_source_image_sniffs_png(tmp_path: Path) -> None:
    path = tmp_path / "no_extension"
    path.write_bytes(_png_bytes())

    source = load_source_image(path)

    assert source.media_type == "image/png"
    assert source.name == "no_extension"
    assert source.content == path.read_bytes()


def test_detect_media_type_falls_back_to_file_name() -> None:
    assert detect_media_type(b"not really a jpeg", "holiday.jpg") == "image/jpeg"
    assert detect_media_type(b"not an image") is None


def test_declared_media_type_skips_sniffing() -> None:
    source = source_from_bytes(b"\x89PNG\r\n\x1a\n\x00\x00", media_type="image/png")

    assert source.media_type == "image/png"
    assert len(source.content) == 10


def test_non_image_upload_is_rejected(tmp_path: Path) -> None:
    path = tmp_path / "notes.txt"
    path.write_text("hello", encoding="utf-8")

    with pytest.raises(UnsupportedImageError, match="text/plain"):
        load_source_image(path)


def test_missing_upload_raises_read_error(tmp_path: Path) -> None:
    with pytest.raises(ReadError):
        load_source_image(tmp_path / "gone.png")


@pytest.mark.parametrize(
    "media_type,expected",
    [("image/png", True), ("IMAGE/JPEG", True), ("text/plain", False), ("", False), (None, False)],
)
def test_is_image_media_type(media_type, expected) -> None:
    assert is_image_media_type(media_type) is expected

from __future__ import annotations

import asyncio
import base64
import io
from pathlib import Path

import pytest

from image_editor.errors import ReadError
from image_editor.image.encoder import encode_file, split_data_uri, to_data_uri
from image_editor.image.types import EncodedPayload, SourceImage


class _DataUrlReader:
    """Read primitive that hands back a data URL instead of raw bytes."""

    name = "sketch.gif"

    def __init__(self, result: object) -> None:
        self._result = result

    def read(self) -> object:
        return self._result


def test_encoding_reproduces_original_bytes() -> None:
    original = bytes(range(256)) * 3

    payload = asyncio.run(encode_file(original, "image/png"))

    assert payload.media_type == "image/png"
    assert base64.b64decode(payload.data) == original
    assert payload.decode() == original


def test_source_image_keeps_declared_media_type() -> None:
    source = SourceImage(content=b"\x89PNG\r\n\x1a\n\x00\x00", media_type="image/png")

    payload = asyncio.run(encode_file(source))

    assert payload == EncodedPayload(data=base64.b64encode(source.content).decode("ascii"), media_type="image/png")


def test_path_media_type_is_guessed_from_suffix(tmp_path: Path) -> None:
    image = tmp_path / "photo.jpg"
    image.write_bytes(b"\xff\xd8\xff\xe0fake")

    payload = asyncio.run(encode_file(image))

    assert payload.media_type == "image/jpeg"
    assert payload.decode() == b"\xff\xd8\xff\xe0fake"


def test_binary_stream_is_read_fully() -> None:
    stream = io.BytesIO(b"ABC")

    payload = asyncio.run(encode_file(stream, "image/webp"))

    assert payload.data == "QUJD"
    assert payload.media_type == "image/webp"


def test_data_url_prefix_is_stripped() -> None:
    reader = _DataUrlReader("data:image/gif;base64,R0lGODlh")

    payload = asyncio.run(encode_file(reader))

    assert payload.data == "R0lGODlh"
    assert payload.media_type == "image/gif"


@pytest.mark.parametrize("result", [None, "plain text", 42, "data:image/png;base64,@@@"])
def test_uninterpretable_read_raises_read_error(result: object) -> None:
    with pytest.raises(ReadError):
        asyncio.run(encode_file(_DataUrlReader(result)))


def test_closed_stream_raises_read_error() -> None:
    stream = io.BytesIO(b"ABC")
    stream.close()

    with pytest.raises(ReadError):
        asyncio.run(encode_file(stream, "image/png"))


def test_missing_file_raises_read_error(tmp_path: Path) -> None:
    with pytest.raises(ReadError):
        asyncio.run(encode_file(tmp_path / "missing.png"))


def test_data_uri_helpers_are_inverse() -> None:
    payload = EncodedPayload(data="QUJD", media_type="image/png")

    uri = to_data_uri(payload)

    assert uri == "data:image/png;base64,QUJD"
    assert split_data_uri(uri) == payload


@pytest.mark.parametrize("uri", ["QUJD", "data:image/png,QUJD", "http://example.com/a.png"])
def test_split_data_uri_rejects_malformed_input(uri: str) -> None:
    with pytest.raises(ReadError):
        split_data_uri(uri)

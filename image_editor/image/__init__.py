"""Image payloads: source uploads, base64 encoding and the Gemini client."""

from .encoder import encode_file, split_data_uri, to_data_uri
from .types import EncodedPayload, SourceImage

__all__ = ["EncodedPayload", "SourceImage", "encode_file", "split_data_uri", "to_data_uri"]

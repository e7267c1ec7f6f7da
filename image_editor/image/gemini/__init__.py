"""Gemini image edit client."""

from .adapter import GeminiEditClient, build_contents, extract_image_data_uri
from .interfaces import EditEngineProtocol

__all__ = ["EditEngineProtocol", "GeminiEditClient", "build_contents", "extract_image_data_uri"]

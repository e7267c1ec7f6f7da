from __future__ import annotations

from typing import Protocol


class EditEngineProtocol(Protocol):
    async def request_edit(self, encoded_image: str, media_type: str, prompt: str) -> str:
        """Send one edit request and return the result image as a data URI."""

from __future__ import annotations

import asyncio
import io
from pathlib import Path

import pytest
from rich.console import Console

from image_editor.logging_utils import create_logger


def _logger(level: str = "INFO", logfile: Path | None = None):
    buffer = io.StringIO()
    console = Console(file=buffer, width=200, color_system=None)
    return create_logger(level, logfile, console=console), buffer


def test_messages_below_level_are_dropped() -> None:
    logger, buffer = _logger("WARN")

    logger.log("upload", "hidden", level="INFO")
    logger.log("upload", "shown", level="ERROR")

    output = buffer.getvalue()
    assert "hidden" not in output
    assert "[ERROR] [UPLOAD  ] shown" in output


def test_timed_awaits_and_renders_result() -> None:
    logger, buffer = _logger()

    async def work(value: int) -> int:
        return value * 2

    result = asyncio.run(logger.timed("generate", lambda value: f"got {value}", work, 21))

    assert result == 42
    assert "got 42 (ms=" in buffer.getvalue()


def test_timed_logs_and_reraises_errors() -> None:
    logger, buffer = _logger()

    async def broken() -> None:
        raise RuntimeError("quota exhausted")

    with pytest.raises(RuntimeError):
        asyncio.run(logger.timed("generate", "never", broken))

    assert "error: quota exhausted" in buffer.getvalue()


def test_logfile_receives_plain_lines(tmp_path: Path) -> None:
    logfile = tmp_path / "logs" / "run.log"
    logger, _ = _logger(logfile=logfile)

    logger.log("save", "written [bold]out.png[/bold]")
    logger.close()

    assert "written [bold]out.png[/bold]" in logfile.read_text(encoding="utf-8")

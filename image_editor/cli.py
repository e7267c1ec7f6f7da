"""Command line front end: upload one image, describe the edit, save the result.

Usage:
    image-editor photo.png --prompt "Add a retro cinematic filter"
    image-editor photo.jpg -p "Make the sky look like a galaxy" -o out/galaxy.png

The API key is read from ``API_KEY`` (or ``GEMINI_API_KEY``); a ``.env`` file
in the working directory is honoured.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import mimetypes
from pathlib import Path
from typing import Optional, Sequence

from dotenv import load_dotenv

from image_editor.config import EditorConfig, LoggingConfig, load_config
from image_editor.errors import ReadError
from image_editor.image.encoder import split_data_uri
from image_editor.image.types import EncodedPayload
from image_editor.image.gemini import GeminiEditClient
from image_editor.logging_utils import RunLogger, create_logger
from image_editor.state import EditorController, RequestState
from image_editor.upload import load_source_image

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_USAGE = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="image-editor",
        description="Edit an image with a natural-language instruction using Gemini.",
    )
    parser.add_argument("image", type=Path, help="image file to edit")
    parser.add_argument("-p", "--prompt", required=True, help="description of the edit")
    parser.add_argument("-o", "--output", type=Path, default=None, help="where to write the edited image")
    parser.add_argument("-c", "--config", type=Path, default=None, help="YAML or JSON(C) configuration file")
    parser.add_argument("--model", default=None, help="override the Gemini model name")
    parser.add_argument("--log-level", default=None, help="DEBUG, INFO, WARN or ERROR")
    return parser


def default_output_path(config: EditorConfig, image: Path, media_type: str) -> Path:
    extension = mimetypes.guess_extension(media_type) or ".png"
    if extension == ".jpe":
        extension = ".jpg"
    return config.storage.output_dir / f"{image.stem}_edited{extension}"


def save_result(payload: EncodedPayload, output: Path) -> Path:
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_bytes(payload.decode())
    return output


async def run_edit(
    args: argparse.Namespace,
    config: EditorConfig,
    logger: RunLogger,
    *,
    engine: Optional[GeminiEditClient] = None,
) -> int:
    try:
        source = load_source_image(args.image)
    except ReadError as exc:
        logger.log("upload", str(exc), level="ERROR")
        return EXIT_USAGE

    controller = EditorController(engine or GeminiEditClient.from_config(config.gemini))
    await logger.timed(
        "upload",
        lambda _: f"{source.name} ({source.media_type}, {len(source.content)} bytes)",
        controller.on_upload,
        source,
    )
    controller.on_prompt_change(args.prompt)
    state = await logger.timed(
        "generate",
        lambda state: f"request finished: {state.request_state.value}",
        controller.on_generate,
    )

    if state.request_state is not RequestState.SUCCEEDED:
        logger.log("generate", f"Error: {state.error}", level="ERROR")
        return EXIT_FAILED

    payload = split_data_uri(state.edited_image or "")
    output = args.output or default_output_path(config, args.image, payload.media_type)
    save_result(payload, output)
    logger.log("save", f"edited image written to {output}")
    return EXIT_OK


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    load_dotenv()

    try:
        config = load_config(args.config) if args.config else EditorConfig()
        if args.model:
            config.gemini.model = args.model
        if args.log_level:
            config.logging = LoggingConfig(level=args.log_level, file=config.logging.file)
    except (OSError, ValueError) as exc:
        parser.error(f"invalid configuration: {exc}")

    logging.basicConfig(
        level=logging.DEBUG if config.logging.level == "DEBUG" else logging.WARNING,
        format="%(asctime)s [%(levelname)s] %(name)s - %(message)s",
    )
    logger = create_logger(config.logging.level, config.logging.file)
    try:
        return asyncio.run(run_edit(args, config, logger))
    finally:
        logger.close()


if __name__ == "__main__":  # pragma: no cover - manual execution
    raise SystemExit(main())

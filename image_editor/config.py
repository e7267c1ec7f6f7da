from __future__ import annotations

import json
import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, Mapping, Optional

import yaml


DEFAULT_MODEL = "gemini-2.5-flash-image"
DEFAULT_API_KEY_ENV: tuple[str, ...] = ("API_KEY", "GEMINI_API_KEY")
LOG_LEVELS = ("DEBUG", "INFO", "WARN", "ERROR")


@dataclass
class GeminiConfig:
    model: str = DEFAULT_MODEL
    api_key_env: tuple[str, ...] = DEFAULT_API_KEY_ENV
    base_url: Optional[str] = None

    def resolve_api_key(self) -> Optional[str]:
        return resolve_api_key(self.api_key_env)


@dataclass
class StorageConfig:
    output_dir: Path = Path("output")


@dataclass
class LoggingConfig:
    level: str = "INFO"
    file: Optional[Path] = None

    def __post_init__(self) -> None:
        level = str(self.level).upper().strip()
        if level == "WARNING":
            level = "WARN"
        if level not in LOG_LEVELS:
            raise ValueError(f"Unknown log level '{self.level}'")
        self.level = level


@dataclass
class EditorConfig:
    gemini: GeminiConfig = field(default_factory=GeminiConfig)
    storage: StorageConfig = field(default_factory=StorageConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any] | None) -> "EditorConfig":
        raw = raw or {}
        gemini_data = _section(raw, "gemini")
        storage_data = _section(raw, "storage")
        logging_data = _section(raw, "logging")

        key_env = gemini_data.get("api_key_env")
        if isinstance(key_env, str):
            api_key_env = (key_env,)
        elif isinstance(key_env, Iterable):
            api_key_env = tuple(str(name) for name in key_env if name)
        else:
            api_key_env = DEFAULT_API_KEY_ENV

        gemini = GeminiConfig(
            model=str(gemini_data.get("model") or DEFAULT_MODEL),
            api_key_env=api_key_env or DEFAULT_API_KEY_ENV,
            base_url=_text(gemini_data.get("base_url")),
        )
        storage = StorageConfig(
            output_dir=Path(str(storage_data.get("output_dir", "output"))),
        )
        log_file = _text(logging_data.get("file"))
        logging_cfg = LoggingConfig(
            level=str(logging_data.get("level", "INFO")),
            file=Path(log_file) if log_file else None,
        )
        return cls(gemini=gemini, storage=storage, logging=logging_cfg)


def resolve_api_key(names: Iterable[str]) -> Optional[str]:
    """Return the first non-empty credential found in the environment."""

    for name in names:
        value = os.getenv(name)
        if value and value.strip():
            return value.strip()
    return None


def load_config(path: Path) -> EditorConfig:
    text = path.read_text(encoding="utf-8")
    suffix = path.suffix.lower()
    if suffix in {".json", ".jsonc"}:
        data = json.loads(_strip_jsonc(text))
    else:
        data = yaml.safe_load(text)
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ValueError("Configuration file must contain a mapping at the top level")
    return EditorConfig.from_dict(data)


# Double-quoted strings are matched first so comment markers inside them survive.
_JSONC_TOKEN = re.compile(r'"(?:\\.|[^"\\])*"|//[^\r\n]*|/\*.*?\*/', re.DOTALL)


def _strip_jsonc(payload: str) -> str:
    return _JSONC_TOKEN.sub(lambda match: match.group(0) if match.group(0).startswith('"') else "", payload)


def _text(value: Any) -> str | None:
    """Stripped string value, ``None`` for blanks and non-strings."""

    if not isinstance(value, str):
        return None
    return value.strip() or None


def _section(raw: Mapping[str, Any], key: str) -> Dict[str, Any]:
    value = raw.get(key)
    return dict(value) if isinstance(value, Mapping) else {}


__all__ = [
    "DEFAULT_API_KEY_ENV",
    "DEFAULT_MODEL",
    "EditorConfig",
    "GeminiConfig",
    "LoggingConfig",
    "StorageConfig",
    "load_config",
    "resolve_api_key",
]

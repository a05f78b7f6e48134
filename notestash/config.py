"""Configuration management for notestash."""

import codecs
import json
from enum import StrEnum
from pathlib import Path

from pydantic import BaseModel, field_validator

from notestash.storage.base import DEFAULT_BUFFER_SIZE, RetryPolicy


class Backend(StrEnum):
    LOCAL = "local"
    GCS = "gcs"
    MEMORY = "memory"


class NotestashConfig(BaseModel):
    namespace: str = "anonymous"
    bucket: str = "notestash"
    encoding: str = "utf-8"
    backend: Backend = Backend.LOCAL
    local_root: Path | None = None
    gcs_project: str | None = None
    read_buffer_size: int = DEFAULT_BUFFER_SIZE
    retry: RetryPolicy = RetryPolicy()

    @field_validator("encoding")
    @classmethod
    def _known_encoding(cls, value: str) -> str:
        try:
            codecs.lookup(value)
        except LookupError as e:
            raise ValueError(f"unknown text encoding {value!r}") from e
        return value


def _config_dir() -> Path:
    return Path.home() / ".notestash"


def _config_path() -> Path:
    return _config_dir() / "config.json"


def objects_dir(config: NotestashConfig) -> Path:
    """Return the root directory for the local backend."""
    return config.local_root or _config_dir() / "objects"


def ensure_dirs() -> None:
    """Create the notestash home directory."""
    _config_dir().mkdir(exist_ok=True)


def load_config() -> NotestashConfig:
    """Load config from ~/.notestash/config.json, returning defaults if missing."""
    path = _config_path()
    if not path.exists():
        return NotestashConfig()
    text = path.read_text()
    return NotestashConfig.model_validate_json(text)


def save_config(config: NotestashConfig) -> None:
    """Save config to ~/.notestash/config.json."""
    ensure_dirs()
    path = _config_path()
    path.write_text(json.dumps(config.model_dump(mode="json"), indent=2) + "\n")

"""Application configuration: settings schema and config.yaml loader"""

import os
from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import BaseModel, Field

from mdsite.core.models import Author


CONFIG_FILE = "config.yaml"
ENV_PREFIX = "MDSITE_"


class Settings(BaseModel):
    app_name:         str = "mdsite"
    content_dir:      str = Field(default="content", description="Root directory of the document tree")
    log_level:        str = Field(default="INFO", pattern="^(DEBUG|INFO|WARNING|ERROR)$")
    asset_prefix:     str = Field(default="/posts", description="URL prefix for rewritten bundle image paths")
    highlight_style:  str = Field(default="dracula", description="Pygments style for fenced code blocks")
    words_per_minute: int = Field(default=200, ge=1, description="Reading speed used for reading time")
    default_author:   Optional[Author] = Field(default=None, description="Author applied to documents without one")


# Nested fields (default_author) are only configurable through config.yaml.
_ENV_FIELDS = [name for name, f in Settings.model_fields.items() if f.annotation in (str, int)]


def load_config(overrides: dict[str, Any] = None) -> Settings:
    """Load Settings from config.yaml, then MDSITE_<FIELD> env vars, then non-None CLI overrides."""
    data: dict[str, Any] = {}
    if Path(CONFIG_FILE).exists():
        try:
            data = yaml.safe_load(Path(CONFIG_FILE).read_text()) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid {CONFIG_FILE}: {e}") from e
        if not isinstance(data, dict):
            raise ValueError(f"Invalid {CONFIG_FILE}: expected a mapping, got {type(data).__name__}")

    for name in _ENV_FIELDS:
        if val := os.getenv(f"{ENV_PREFIX}{name.upper()}"):
            data[name] = val

    if overrides:
        data.update({k: v for k, v in overrides.items() if v is not None})
    return Settings(**data)

"""Application configuration: settings schema and pagewrap.yaml loader"""

import os
from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import BaseModel, Field


CONFIG_FILE = "pagewrap.yaml"


class Settings(BaseModel):
    app_name:          str = "pagewrap"
    cache_max_entries: int = Field(default=1024, ge=1, description="Max wrapped pages kept in the LRU cache")
    convert_timeout:   float = Field(default=0, ge=0, description="Seconds before a markdown conversion is abandoned; 0 disables")
    parser_config:     str = Field(default="commonmark", description="MarkdownIt parser preset name")
    layout:            Optional[str] = Field(default=None, description="Layout component import path wrapped around each page")
    output_dir:        str = Field(default="dist", description="Directory for assembled components + JSON files")
    log_level:         str = Field(default="warning", pattern="^(debug|info|warning|error)$", description="Minimum level of logged events")
    site:              dict[str, Any] = Field(default_factory=dict, description="Site configuration passed to every page")


def load_config(overrides: dict[str, Any] = None) -> Settings:
    """Load Settings from pagewrap.yaml, then PAGEWRAP_<FIELD> env vars, then non-None CLI overrides."""
    data: dict[str, Any] = {}
    if Path(CONFIG_FILE).exists():
        try:
            data = yaml.safe_load(Path(CONFIG_FILE).read_text()) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid {CONFIG_FILE}: {e}") from e
        if not isinstance(data, dict):
            raise ValueError(f"Invalid {CONFIG_FILE}: expected a mapping, got {type(data).__name__}")

    for name in Settings.model_fields:
        if name == "site":
            continue
        if val := os.getenv(f"PAGEWRAP_{name.upper()}"):
            data[name] = val

    if overrides:
        data.update({k: v for k, v in overrides.items() if v is not None})
    return Settings(**data)

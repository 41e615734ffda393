from __future__ import annotations

import json
import os
from dataclasses import replace
from pathlib import Path
from typing import Any

import jsonschema
import yaml
from jsonschema.exceptions import ValidationError

from ..models.config_models import ExtractorConfig

"""Config loader.

Responsibilities:
- Load YAML config (config/extractor.yml by default)
- Validate keys against the packaged config_schema.json
- Apply defaults for missing keys
- Apply environment overrides (SHEET_EXTRACTOR_*), typically from .env
"""

__all__ = [
    "DEFAULT_CONFIG_PATH",
    "SCHEMA_PATH",
    "ConfigError",
    "apply_env_overrides",
    "load_config",
]

DEFAULT_CONFIG_PATH = Path("config/extractor.yml")
SCHEMA_PATH = Path(__file__).parent / "config_schema.json"

ENV_OUTPUT_DIR = "SHEET_EXTRACTOR_OUTPUT_DIR"
ENV_MAX_PREVIEW_ROWS = "SHEET_EXTRACTOR_MAX_PREVIEW_ROWS"


class ConfigError(Exception):
    pass


def _validate_config_schema(data: dict[str, Any]) -> None:
    """Validate config data against the JSON schema.

    Raises:
        ConfigError: schema file missing or unreadable, or data rejected by the
            schema (unknown keys, wrong types, out-of-range values)
    """
    if not SCHEMA_PATH.exists():
        raise ConfigError(f"config schema not found: {SCHEMA_PATH}")

    try:
        schema = json.loads(SCHEMA_PATH.read_text(encoding="utf-8"))
        jsonschema.validate(data, schema)
    except json.JSONDecodeError as e:
        raise ConfigError(f"invalid schema file: {e}") from e
    except ValidationError as e:
        raise ConfigError(f"config validation failed: {e.message}") from e


def _normalize_extensions(raw: list[str]) -> tuple[str, ...]:
    # 大文字小文字を区別しない比較のため小文字化、重複除去 (順序維持)
    return tuple(dict.fromkeys(ext.lower() for ext in raw))


def apply_env_overrides(cfg: ExtractorConfig) -> ExtractorConfig:
    """Return ``cfg`` with SHEET_EXTRACTOR_* environment values applied."""
    updates: dict[str, Any] = {}
    out_dir = os.getenv(ENV_OUTPUT_DIR)
    if out_dir:
        updates["output_directory"] = out_dir
    max_rows = os.getenv(ENV_MAX_PREVIEW_ROWS)
    if max_rows:
        try:
            value = int(max_rows)
        except ValueError as e:
            raise ConfigError(f"{ENV_MAX_PREVIEW_ROWS} must be an integer: {max_rows!r}") from e
        if value < 1:
            raise ConfigError(f"{ENV_MAX_PREVIEW_ROWS} must be >= 1: {value}")
        updates["max_preview_rows"] = value
    if not updates:
        return cfg
    return replace(cfg, **updates)


def load_config(path: Path) -> ExtractorConfig:
    if not path.exists():
        raise ConfigError(f"config file not found: {path}")
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid yaml: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"config root must be a mapping: {path}")

    _validate_config_schema(data)

    defaults = ExtractorConfig()
    extensions = data.get("allowed_extensions")
    return ExtractorConfig(
        allowed_extensions=(
            _normalize_extensions(extensions) if extensions else defaults.allowed_extensions
        ),
        max_preview_rows=data.get("max_preview_rows", defaults.max_preview_rows),
        output_directory=data.get("output_directory", defaults.output_directory),
        json_indent=data.get("json_indent", defaults.json_indent),
        csv_sheet_name=data.get("csv_sheet_name", defaults.csv_sheet_name),
        error_log_directory=data.get("error_log_directory", defaults.error_log_directory),
    )

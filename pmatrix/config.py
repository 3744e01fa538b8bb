"""
P-MATRIX -- Configuration System

All configuration is Pydantic-validated and loaded from:
1. config/default.yaml (or any YAML file passed explicitly)
2. Environment variables (overrides)

Only tool behaviour is configurable here. Protocol constants (versions,
partition thresholds, the mode/level table) are fixed in code.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, SettingsConfigDict

# ─── Sub-configs ──────────────────────────────────────────────────


class LoggingConfig(BaseModel):
    level: str = "WARNING"
    format: Literal["console", "json"] = "console"


class OutputConfig(BaseModel):
    # Indentation for emitted records; 0 prints compact single-line JSON
    indent: int = Field(default=2, ge=0)
    report_format: Literal["text", "json"] = "text"


# ─── Root Configuration ──────────────────────────────────────────


class PMatrixConfig(BaseSettings):
    """
    Root configuration. Loads from YAML, overridable by env vars.
    """

    model_config = SettingsConfigDict(
        env_prefix="PMATRIX_",
        env_nested_delimiter="__",
        env_ignore_empty=True,
        extra="ignore",
    )

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        # PMATRIX_<SECTION>__<KEY> variables win over values loaded from YAML
        return env_settings, init_settings, dotenv_settings, file_secret_settings


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge override into base."""
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def load_config(config_path: str | Path | None = None) -> PMatrixConfig:
    """
    Load configuration from YAML file, then apply environment variable overrides.
    A missing file is not an error; defaults apply.

    PMATRIX_LOG_LEVEL and PMATRIX_LOG_FORMAT are read here. Nested variables
    such as PMATRIX_OUTPUT__INDENT are read and validated by pydantic-settings.
    """
    raw: dict[str, Any] = {}

    if config_path:
        path = Path(config_path)
        if path.exists():
            with open(path) as f:
                raw = yaml.safe_load(f) or {}

    env: dict[str, Any] = {}
    if log_level := os.environ.get("PMATRIX_LOG_LEVEL"):
        env.setdefault("logging", {})["level"] = log_level
    if log_format := os.environ.get("PMATRIX_LOG_FORMAT"):
        env.setdefault("logging", {})["format"] = log_format

    return PMatrixConfig(**_deep_merge(raw, env))

"""
Runtime settings.

Defaults live on the model; any field can be overridden with an
environment variable named ``VERSIONFS_<FIELD>`` (e.g. VERSIONFS_PAGE_SIZE).
"""
from __future__ import annotations
import os
from typing import Mapping, Optional
from pydantic import BaseModel, Field, field_validator

ENV_PREFIX = "VERSIONFS_"


class Settings(BaseModel):
    page_size: int = Field(default=10, ge=1)    # nodes per page in tree layouts
    log_level: str = "WARNING"
    host: str = "127.0.0.1"
    port: int = Field(default=8000, ge=1, le=65535)

    @field_validator("log_level")
    @classmethod
    def known_level(cls, v: str) -> str:
        level = v.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {v}")
        return level


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """Build Settings from ``environ`` (defaults to os.environ)."""
    env = os.environ if environ is None else environ
    overrides = {}
    for field in Settings.model_fields:
        value = env.get(ENV_PREFIX + field.upper())
        if value is not None:
            overrides[field] = value
    return Settings(**overrides)

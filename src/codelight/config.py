"""Centralised configuration using pydantic-settings.

All environment variables are read through the Settings class.
Consumers call ``get_settings()`` to obtain a cached, validated instance.
Tests construct ``Settings(_env_file=None, ...)`` directly for isolation.
"""

from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

# src/codelight/config.py  ->  parent x3  ->  project root
_PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent

EmptySpecPolicy = Literal["ignore", "error"]

DEFAULT_STYLE_TAG = "default"


# ---------------------------------------------------------------------------
# Sub-models (one per configuration domain)
# ---------------------------------------------------------------------------
class AnnotatorConfig(BaseModel):
    """Line annotation behaviour."""

    separator: str = ""
    default_style_tag: str = DEFAULT_STYLE_TAG
    balance_tags: bool = True
    empty_spec: EmptySpecPolicy = "ignore"

    @field_validator("separator")
    @classmethod
    def separator_is_empty_or_newline(cls, value: str) -> str:
        if value not in ("", "\n"):
            msg = "ANNOTATOR__SEPARATOR must be empty or a single newline"
            raise ValueError(msg)
        return value

    @field_validator("default_style_tag")
    @classmethod
    def style_tag_not_blank(cls, value: str) -> str:
        if not value.strip():
            msg = "ANNOTATOR__DEFAULT_STYLE_TAG must not be blank"
            raise ValueError(msg)
        return value.strip()


class PageConfig(BaseModel):
    """Selectors and class names used by the whole-page pass."""

    directive_selector: str = ".lines-highlight"
    code_block_class: str = "highlight"
    pending_class: str = "all-new"
    prompt_glyph: str = "❯"
    prompt_error_class: str = "err"
    prompt_class: str = "browser-prompt"
    sidebar_link_selector: str = ".sidebar a"
    active_class: str = "active"


class AppConfig(BaseModel):
    """Runtime configuration."""

    log_dir: Path = Path("logs")


# ---------------------------------------------------------------------------
# Root settings
# ---------------------------------------------------------------------------
class Settings(BaseSettings):
    """Settings with automatic .env loading and type validation.

    Environment variables use double-underscore delimiter for nesting:
    ``ANNOTATOR__SEPARATOR``, ``PAGE__PENDING_CLASS``, ``APP__LOG_DIR``, etc.
    """

    model_config = SettingsConfigDict(
        env_file=_PROJECT_ROOT / ".env",
        env_nested_delimiter="__",
        extra="ignore",
    )

    annotator: AnnotatorConfig = AnnotatorConfig()
    page: PageConfig = PageConfig()
    app: AppConfig = AppConfig()


# ---------------------------------------------------------------------------
# Singleton access
# ---------------------------------------------------------------------------
@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return a cached Settings instance.

    Call ``get_settings.cache_clear()`` in tests to reset.
    """
    settings = Settings()

    env_file = settings.model_config.get("env_file")
    if env_file is not None and Path(str(env_file)).is_file():
        logger.info("Settings loaded .env from: %s", env_file)
    else:
        logger.info("Settings: no .env file found, using env vars and defaults")

    return settings

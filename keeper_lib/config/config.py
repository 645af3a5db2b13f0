"""Operator configuration for the Character Keeper server.

The only required setting is the engine connection string, which comes
from the environment (`UPSTASH_REDIS_URL`, optionally via a `.env` file).
Everything else lives in an optional YAML file at
`data/config/server_config.yml`:

    log_level: INFO
    allowed_origins:
      - http://localhost:4200
    fetch_timeout_seconds: 10
    fetch_max_bytes: 5242880
    redis_timeout_seconds: 5
    feature_flags:
      keeper_use_brotli: true
"""
from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Dict, List, Optional

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError as PydanticValidationError

from keeper_lib.errors import ConfigurationError
from keeper_lib.middleware.cors import DEFAULT_ALLOWED_ORIGINS

logger = logging.getLogger(__name__)

CONFIG_PATH = Path("data/config/server_config.yml")
REDIS_URL_ENV = "UPSTASH_REDIS_URL"


class ServerConfig(BaseModel):
    log_level: str = "WARNING"
    allowed_origins: List[str] = Field(default_factory=lambda: list(DEFAULT_ALLOWED_ORIGINS))
    fetch_timeout_seconds: float = Field(default=10.0, gt=0)
    fetch_max_bytes: int = Field(default=5 * 1024 * 1024, gt=0)
    redis_timeout_seconds: float = Field(default=5.0, gt=0)
    feature_flags: Dict[str, bool] = Field(default_factory=dict)

    def has_feature_flag(self, name: str) -> bool:
        return bool(self.feature_flags.get(name, False))


def load_server_config(path: Optional[Path] = None) -> ServerConfig:
    """Load the YAML server config; a missing file yields defaults."""
    cfg_path = path or CONFIG_PATH
    if not cfg_path.exists():
        logger.debug("No server config at %s; using defaults", cfg_path)
        return ServerConfig()
    try:
        with cfg_path.open("r", encoding="utf-8") as f:
            raw = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigurationError(f"invalid server config {cfg_path}: {e}") from e
    if not isinstance(raw, dict):
        raise ConfigurationError(f"invalid server config {cfg_path}: expected mapping")
    try:
        return ServerConfig.model_validate(raw)
    except PydanticValidationError as e:
        raise ConfigurationError(f"invalid server config {cfg_path}: {e}") from e


def resolve_redis_url(explicit: Optional[str] = None, env_file: Optional[str] = ".env") -> str:
    """Return the engine connection string or raise ConfigurationError.

    An explicit value wins; otherwise `.env` (if present) is loaded without
    overriding the real environment and `UPSTASH_REDIS_URL` is read.
    """
    if explicit:
        return explicit
    if env_file and os.path.exists(env_file):
        load_dotenv(env_file, override=False)
    else:
        logger.debug("No .env file found, using environment variables")
    url = os.environ.get(REDIS_URL_ENV, "").strip()
    if not url:
        raise ConfigurationError(f"{REDIS_URL_ENV} environment variable is not set")
    return url

"""Configuration management for the JobTrack service.

Loads from YAML config file with environment variable overrides.
Pattern: JOBTRACK__{SECTION}__{KEY} overrides nested YAML keys.
Example: JOBTRACK__PAGINATION__DEFAULT_PAGE_SIZE=25
"""

import os
from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, Field


DEFAULT_CONFIG_PATH = "config/jobtrack.yml"
DEFAULT_DB_URL = "sqlite:///data/jobtrack.db"


class DatabaseConfig(BaseModel):
    url: str = DEFAULT_DB_URL
    echo: bool = False


class AuthConfig(BaseModel):
    secret_key: str = "change-me-in-production"  # from env: JWT_SECRET_KEY
    algorithm: str = "HS256"
    owner_claim: str = "sub"  # claim carrying the provider's user id


class PaginationConfig(BaseModel):
    default_page_size: int = Field(default=10, ge=1)
    max_page_size: int = Field(default=100, ge=1)


class AppConfig(BaseModel):
    database: DatabaseConfig = DatabaseConfig()
    auth: AuthConfig = AuthConfig()
    pagination: PaginationConfig = PaginationConfig()
    cors_origins: list[str] = [
        "http://localhost:3000",
        "http://localhost:5173",
    ]
    log_level: str = "INFO"


def _apply_env_overrides(config_dict: dict, prefix: str = "JOBTRACK") -> dict:
    """Merge ``JOBTRACK__<SECTION>__<KEY>`` variables into the YAML-derived dict.

    ``JOBTRACK__PAGINATION__MAX_PAGE_SIZE=50`` becomes
    ``{"pagination": {"max_page_size": 50}}``. "true"/"false" and plain digits
    are coerced; everything else (secrets, URLs, claim names) stays a string.
    """
    for key, value in os.environ.items():
        if not key.startswith(f"{prefix}__"):
            continue
        parts = key[len(prefix) + 2 :].lower().split("__")
        target = config_dict
        for part in parts[:-1]:
            target = target.setdefault(part, {})
        # bools and ints only; pydantic validates the rest
        if value.lower() in ("true", "false"):
            value = value.lower() == "true"
        elif value.isdigit():
            value = int(value)
        target[parts[-1]] = value
    return config_dict


def load_config(config_path: Optional[str] = None) -> AppConfig:
    """Load configuration from YAML file with env overrides.

    Priority: env vars > YAML file > defaults
    """
    config_dict = {}

    # 1. Load YAML if exists
    if config_path is None:
        config_path = os.getenv("JOBTRACK_CONFIG", DEFAULT_CONFIG_PATH)
    path = Path(config_path)
    if path.exists():
        with open(path) as f:
            config_dict = yaml.safe_load(f) or {}

    # 2. Apply env overrides
    config_dict = _apply_env_overrides(config_dict)

    # 3. Dedicated env vars (common deployment pattern)
    database = config_dict.setdefault("database", {})
    if os.getenv("DATABASE_URL"):
        url = os.environ["DATABASE_URL"]
        # Heroku/Cloud SQL style: postgres:// → postgresql://
        if url.startswith("postgres://"):
            url = url.replace("postgres://", "postgresql://", 1)
        database["url"] = url

    auth = config_dict.setdefault("auth", {})
    if os.getenv("JWT_SECRET_KEY"):
        auth["secret_key"] = os.environ["JWT_SECRET_KEY"]

    if os.getenv("LOG_LEVEL"):
        config_dict["log_level"] = os.environ["LOG_LEVEL"]

    return AppConfig(**config_dict)


# Singleton for the service
_config: Optional[AppConfig] = None


def get_config() -> AppConfig:
    global _config
    if _config is None:
        _config = load_config()
    return _config


def reload_config(config_path: Optional[str] = None) -> AppConfig:
    global _config
    _config = load_config(config_path)
    return _config

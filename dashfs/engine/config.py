"""
dashfs Configuration — Load and validate dashfs.yaml.

Usage:
    from dashfs.engine.config import load_config
    config = load_config("dashfs.yaml")
"""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional

import yaml
from pydantic import BaseModel, Field, field_validator


# ---------------------------------------------------------------------------
# Pydantic models for dashfs.yaml
# ---------------------------------------------------------------------------

class DatabaseConfig(BaseModel):
    url: str = "sqlite:///dashfs.db"
    pool_size: int = 10
    max_overflow: int = 20
    pool_timeout: int = 30
    pool_recycle: int = 1800
    pool_pre_ping: bool = True
    create_tables: bool = False


class RedisConfig(BaseModel):
    url: str = "redis://localhost:6379/0"
    enabled: bool = False
    db: int = 3


class CacheConfig(BaseModel):
    namespace_ttl: int = 600


class ActivityConfig(BaseModel):
    workers: int = 2
    recent_limit: int = 20

    @field_validator("workers")
    @classmethod
    def validate_workers(cls, v: int) -> int:
        if v < 1:
            raise ValueError(f"activity.workers must be at least 1, got {v}")
        return v


class SecurityConfig(BaseModel):
    super_admins: List[str] = Field(default_factory=list)


class LoggingConfig(BaseModel):
    level: str = "INFO"
    format: str = "json"
    directory: Optional[str] = ".dashfs/logs"

    @field_validator("format")
    @classmethod
    def validate_format(cls, v: str) -> str:
        if v not in ("json", "text"):
            raise ValueError(f"logging.format must be json/text, got '{v}'")
        return v


class DashFSConfig(BaseModel):
    """Root model for dashfs.yaml."""
    name: str = "dashfs"
    environment: str = "dev"

    database: DatabaseConfig = DatabaseConfig()
    redis: RedisConfig = RedisConfig()
    cache: CacheConfig = CacheConfig()
    activity: ActivityConfig = ActivityConfig()
    security: SecurityConfig = SecurityConfig()
    logging: LoggingConfig = LoggingConfig()

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        if v not in ("dev", "staging", "prod"):
            raise ValueError(f"environment must be dev/staging/prod, got '{v}'")
        return v


# ---------------------------------------------------------------------------
# Loading
# ---------------------------------------------------------------------------

def find_config_file(start: Optional[Path] = None) -> Optional[Path]:
    """Walk up from *start* (default CWD) looking for dashfs.yaml."""
    current = start or Path.cwd()
    for parent in [current, *current.parents]:
        candidate = parent / "dashfs.yaml"
        if candidate.exists():
            return candidate
    return None


def load_config(config_path: Optional[str] = None) -> DashFSConfig:
    """
    Load and validate dashfs.yaml.

    Args:
        config_path: Explicit path. If None, auto-discovers from CWD upwards.

    Returns:
        Validated DashFSConfig. Defaults when no file exists.
    """
    if config_path is None:
        found = find_config_file()
        if found is None:
            return DashFSConfig()
        path = found
    else:
        path = Path(config_path)

    if not path.exists():
        return DashFSConfig()

    with open(path, "r", encoding="utf-8") as f:
        raw = yaml.safe_load(f) or {}

    # Allow the top-level settings to be nested under "dashfs:"
    service = raw.get("dashfs", {})
    config_data = {
        "name": service.get("name", raw.get("name", "dashfs")),
        "environment": service.get("environment", raw.get("environment", "dev")),
        "database": raw.get("database", {}),
        "redis": raw.get("redis", {}),
        "cache": raw.get("cache", {}),
        "activity": raw.get("activity", {}),
        "security": raw.get("security", {}),
        "logging": raw.get("logging", {}),
    }
    return DashFSConfig(**config_data)

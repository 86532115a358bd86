"""Configuration loading and validation."""

from pathlib import Path

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field

from ats_cache.keys import CacheTTL


class CacheConfig(BaseModel):
    """Cache sizing and TTL configuration (seconds)."""

    max_size: int = Field(default=100, ge=1)
    default_ttl: float = Field(default=CacheTTL.MEDIUM, gt=0)
    metrics_ttl: float = CacheTTL.MEDIUM
    list_ttl: float = CacheTTL.SHORT


class DatabaseConfig(BaseModel):
    """SQLite database configuration."""

    path: str = "ats.db"


class MonitoringConfig(BaseModel):
    """Logging configuration."""

    structured_logging: bool = False
    log_file: str | None = None
    log_level: str = "INFO"


class ServerConfig(BaseModel):
    """HTTP server configuration."""

    host: str = "127.0.0.1"
    port: int = 8080


class AppConfig(BaseModel):
    """Top-level application configuration."""

    cache: CacheConfig = Field(default_factory=CacheConfig)
    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    monitoring: MonitoringConfig = Field(default_factory=MonitoringConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)


def load_config(path: Path) -> AppConfig:
    """Load config from a YAML file."""
    load_dotenv(path.parent / ".env", override=False)
    return AppConfig(**(yaml.safe_load(path.read_text()) or {}))

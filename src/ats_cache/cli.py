"""CLI entry point for ats-cache."""

import json
import logging
from dataclasses import asdict
from pathlib import Path
from typing import Annotated

import typer

from ats_cache import __version__
from ats_cache.cache import BoundedTTLCache
from ats_cache.config import AppConfig, load_config
from ats_cache.dashboard.service import DashboardService
from ats_cache.db import Database
from ats_cache.monitoring.logging import configure_logging

logger = logging.getLogger(__name__)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"ats-cache {__version__}")
        raise typer.Exit()


app = typer.Typer(name="ats-cache", help="ATS Cache: cached recruiting dashboard backend")


@app.callback()
def main(
    version: Annotated[
        bool, typer.Option("--version", "-V", help="Show version and exit", callback=_version_callback, is_eager=True)
    ] = False,
) -> None:
    """ATS Cache: cached recruiting dashboard backend."""


DEFAULT_CONFIG = Path("config.yaml")

ConfigOption = Annotated[Path, typer.Option("--config", "-c", help="Path to config.yaml")]
DbOption = Annotated[Path | None, typer.Option("--db", help="Path to SQLite database (overrides config)")]


def _load_config(config_path: Path) -> AppConfig:
    """Load config from file, warning if the file does not exist."""
    if config_path.exists():
        return load_config(config_path)
    logger.warning("Config file %s not found, using defaults", config_path)
    return AppConfig()


def _build_service(cfg: AppConfig, db_path: Path | None) -> DashboardService:
    """Wire one cache and one database into a DashboardService."""
    db = Database(db_path if db_path is not None else Path(cfg.database.path))
    cache = BoundedTTLCache(max_size=cfg.cache.max_size, default_ttl=cfg.cache.default_ttl)
    return DashboardService(db, cache, cfg.cache)


@app.command()
def metrics(
    config: ConfigOption = DEFAULT_CONFIG,
    db: DbOption = None,
) -> None:
    """Print dashboard metrics as JSON."""
    cfg = _load_config(config)
    configure_logging(cfg.monitoring)
    service = _build_service(cfg, db)
    try:
        typer.echo(json.dumps(service.metrics().model_dump(mode="json"), indent=2))
    finally:
        service.db.close()


@app.command("cache-stats")
def cache_stats(
    config: ConfigOption = DEFAULT_CONFIG,
    db: DbOption = None,
    reads: Annotated[int, typer.Option("--reads", "-n", help="Number of metric reads to perform", min=1)] = 3,
) -> None:
    """Read dashboard metrics repeatedly and print the resulting cache counters."""
    cfg = _load_config(config)
    configure_logging(cfg.monitoring)
    service = _build_service(cfg, db)
    try:
        for _ in range(reads):
            service.metrics()
        typer.echo(json.dumps(asdict(service.cache.stats()), indent=2))
    finally:
        service.db.close()


@app.command()
def serve(
    config: ConfigOption = DEFAULT_CONFIG,
    db: DbOption = None,
    host: Annotated[str | None, typer.Option("--host", help="Bind address")] = None,
    port: Annotated[int | None, typer.Option("--port", help="Port")] = None,
) -> None:
    """Start the HTTP API server."""
    cfg = _load_config(config)
    configure_logging(cfg.monitoring)

    # Fall back to config values when CLI flags are not provided
    resolved_host = host if host is not None else cfg.server.host
    resolved_port = port if port is not None else cfg.server.port

    from ats_cache.dashboard.api import create_app  # noqa: PLC0415

    service = _build_service(cfg, db)
    try:
        import uvicorn  # noqa: PLC0415

        fastapi_app = create_app(service)
        typer.echo(f"API starting on http://{resolved_host}:{resolved_port}")
        uvicorn.run(fastapi_app, host=resolved_host, port=resolved_port, log_level="info")
    except ImportError:
        typer.echo("Server requires optional dependencies: pip install ats-cache[server]")
        raise typer.Exit(code=1)
    finally:
        service.db.close()

"""FastAPI HTTP API over the cached dashboard service."""

from dataclasses import asdict
from typing import Any

from pydantic import BaseModel

from ats_cache import __version__
from ats_cache.dashboard.service import DashboardService
from ats_cache.models import ApplicationCreate, ApplicationStatusUpdate, CandidateCreate, JobCreate


def create_app(service: DashboardService) -> Any:
    """Create and return the FastAPI application.

    Responses use the ``{"success": ..., "data" | "error": ...}`` envelope.
    ``ValueError`` maps to 400 and ``LookupError`` to 404.

    Args:
        service: Cached dashboard service shared by every request.

    Returns:
        A FastAPI application instance.
    """
    from fastapi import FastAPI, Request  # noqa: PLC0415
    from fastapi.responses import JSONResponse  # noqa: PLC0415

    app = FastAPI(title="ATS Cache Dashboard", version=__version__)

    @app.exception_handler(LookupError)
    def not_found(_request: Request, exc: LookupError) -> JSONResponse:
        return JSONResponse({"success": False, "error": _message(exc)}, status_code=404)

    @app.exception_handler(ValueError)
    def bad_request(_request: Request, exc: ValueError) -> JSONResponse:
        return JSONResponse({"success": False, "error": _message(exc)}, status_code=400)

    @app.get("/api/health")
    def api_health() -> JSONResponse:
        return JSONResponse({"status": "ok", "version": __version__})

    @app.get("/api/dashboard/metrics")
    def api_dashboard_metrics() -> JSONResponse:
        return _ok(service.metrics())

    @app.get("/api/candidates")
    def api_candidates(search: str | None = None) -> JSONResponse:
        return _ok(service.candidates(search=search))

    @app.post("/api/candidates")
    def api_create_candidate(body: CandidateCreate) -> JSONResponse:
        return _ok(service.create_candidate(body), status_code=201)

    @app.get("/api/jobs")
    def api_jobs(status: str | None = None) -> JSONResponse:
        return _ok(service.jobs(status=status))

    @app.post("/api/jobs")
    def api_create_job(body: JobCreate) -> JSONResponse:
        return _ok(service.create_job(body), status_code=201)

    @app.get("/api/applications")
    def api_applications(status: str | None = None, job_id: int | None = None) -> JSONResponse:
        return _ok(service.applications(status=status, job_id=job_id))

    @app.post("/api/applications")
    def api_create_application(body: ApplicationCreate) -> JSONResponse:
        return _ok(service.create_application(body), status_code=201)

    @app.patch("/api/applications/{application_id}")
    def api_update_application(application_id: int, body: ApplicationStatusUpdate) -> JSONResponse:
        return _ok(service.update_application_status(application_id, body.status.value))

    @app.get("/api/cache")
    def api_cache_stats() -> JSONResponse:
        return JSONResponse({"success": True, "data": asdict(service.cache.stats())})

    @app.delete("/api/cache")
    def api_invalidate_cache(pattern: str = "all") -> JSONResponse:
        removed = service.invalidate(pattern)
        return JSONResponse({"success": True, "data": {"pattern": pattern, "removed": removed}})

    return app


def _ok(payload: BaseModel | list[Any], status_code: int = 200) -> Any:
    """Wrap a model or list of models in the success envelope."""
    from fastapi.responses import JSONResponse  # noqa: PLC0415

    return JSONResponse({"success": True, "data": _serialize(payload)}, status_code=status_code)


def _serialize(payload: BaseModel | list[Any]) -> Any:
    if isinstance(payload, list):
        return [_serialize(item) for item in payload]
    return payload.model_dump(mode="json")


def _message(exc: Exception) -> str:
    # KeyError wraps its message in quotes when stringified.
    return str(exc.args[0]) if exc.args else type(exc).__name__

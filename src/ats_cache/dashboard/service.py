"""Read-through cached access to dashboard metrics and list views."""

import logging

from ats_cache.cache import BoundedTTLCache
from ats_cache.config import CacheConfig
from ats_cache.db import Database
from ats_cache.keys import CacheKey, get_or_set, invalidate_cache
from ats_cache.models import (
    Application,
    ApplicationCreate,
    Candidate,
    CandidateCreate,
    DashboardMetrics,
    Job,
    JobCreate,
)

logger = logging.getLogger(__name__)


class DashboardService:
    """Serve ATS reads from a shared cache and invalidate it on writes.

    Only unfiltered list views and the dashboard aggregate are cached.
    Filtered queries always go to the database, since their results
    could not be invalidated by resource name alone.
    """

    def __init__(self, db: Database, cache: BoundedTTLCache, config: CacheConfig | None = None) -> None:
        self._db = db
        self._cache = cache
        self._config = config or CacheConfig()

    @property
    def cache(self) -> BoundedTTLCache:
        return self._cache

    @property
    def db(self) -> Database:
        return self._db

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def metrics(self) -> DashboardMetrics:
        return get_or_set(
            self._cache,
            CacheKey.DASHBOARD_METRICS.value,
            self._db.dashboard_metrics,
            self._config.metrics_ttl,
        )

    def candidates(self, *, search: str | None = None) -> list[Candidate]:
        if search:
            return self._db.list_candidates(search=search)
        return get_or_set(
            self._cache, CacheKey.CANDIDATES_LIST.value, self._db.list_candidates, self._config.list_ttl
        )

    def jobs(self, *, status: str | None = None) -> list[Job]:
        if status:
            return self._db.list_jobs(status=status)
        return get_or_set(self._cache, CacheKey.JOBS_LIST.value, self._db.list_jobs, self._config.list_ttl)

    def applications(self, *, status: str | None = None, job_id: int | None = None) -> list[Application]:
        if status or job_id is not None:
            return self._db.list_applications(status=status, job_id=job_id)
        return get_or_set(
            self._cache, CacheKey.APPLICATIONS_LIST.value, self._db.list_applications, self._config.list_ttl
        )

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def create_candidate(self, data: CandidateCreate) -> Candidate:
        candidate = self._db.add_candidate(data)
        self._invalidate_after_write("candidates")
        return candidate

    def create_job(self, data: JobCreate) -> Job:
        job = self._db.add_job(data)
        self._invalidate_after_write("jobs")
        return job

    def create_application(self, data: ApplicationCreate) -> Application:
        application = self._db.add_application(data)
        self._invalidate_after_write("applications")
        return application

    def update_application_status(self, application_id: int, status: str) -> Application:
        application = self._db.update_application_status(application_id, status)
        self._invalidate_after_write("applications")
        return application

    def invalidate(self, pattern: str) -> list[str]:
        return invalidate_cache(self._cache, pattern)

    def _invalidate_after_write(self, resource: str) -> None:
        # Every write changes at least one dashboard count.
        invalidate_cache(self._cache, resource)
        invalidate_cache(self._cache, "dashboard")

"""SQLite database for candidates, jobs and applications."""

import sqlite3
from pathlib import Path

from ats_cache.models import (
    Application,
    ApplicationCreate,
    ApplicationStatus,
    Candidate,
    CandidateCreate,
    DashboardMetrics,
    Job,
    JobCreate,
    JobStatus,
    TopJob,
)

QUALIFIED_SCORE = 70.0
TOP_JOBS_LIMIT = 5
RECENT_APPLICATIONS_LIMIT = 10

_APPLICATION_SELECT = """
    SELECT a.*,
           c.first_name || ' ' || c.last_name AS candidate_name,
           j.title AS job_title
    FROM applications a
    JOIN candidates c ON a.candidate_id = c.id
    JOIN jobs j ON a.job_id = j.id
"""


class Database:
    """SQLite store that the cache fronts; always the source of truth."""

    def __init__(self, path: Path | str) -> None:
        self._conn = sqlite3.connect(str(path), check_same_thread=False)
        self._conn.row_factory = sqlite3.Row
        self._conn.execute("PRAGMA foreign_keys = ON")
        self._create_tables()

    def _create_tables(self) -> None:
        self._conn.execute("""
            CREATE TABLE IF NOT EXISTS candidates (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                first_name TEXT NOT NULL,
                last_name TEXT NOT NULL,
                email TEXT UNIQUE NOT NULL,
                phone TEXT NOT NULL DEFAULT '',
                location TEXT NOT NULL DEFAULT '',
                source TEXT NOT NULL DEFAULT 'other',
                created_at DATETIME DEFAULT CURRENT_TIMESTAMP
            )
        """)
        self._conn.execute("""
            CREATE TABLE IF NOT EXISTS jobs (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                title TEXT NOT NULL,
                department TEXT NOT NULL,
                location TEXT NOT NULL DEFAULT '',
                status TEXT NOT NULL DEFAULT 'draft'
                    CHECK (status IN ('draft', 'active', 'paused', 'closed')),
                is_remote INTEGER NOT NULL DEFAULT 0,
                created_at DATETIME DEFAULT CURRENT_TIMESTAMP
            )
        """)
        self._conn.execute("""
            CREATE TABLE IF NOT EXISTS applications (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                candidate_id INTEGER NOT NULL REFERENCES candidates(id) ON DELETE CASCADE,
                job_id INTEGER NOT NULL REFERENCES jobs(id) ON DELETE CASCADE,
                status TEXT NOT NULL DEFAULT 'new'
                    CHECK (status IN ('new', 'reviewing', 'interview', 'offer', 'hired', 'rejected')),
                applied_date DATETIME DEFAULT CURRENT_TIMESTAMP,
                ai_score REAL,
                UNIQUE (candidate_id, job_id)
            )
        """)
        self._conn.commit()

    # ------------------------------------------------------------------
    # Candidates
    # ------------------------------------------------------------------

    def add_candidate(self, data: CandidateCreate) -> Candidate:
        """Insert a candidate and return the stored record.

        Raises:
            ValueError: If a candidate with the same email already exists.
        """
        try:
            cursor = self._conn.execute(
                "INSERT INTO candidates (first_name, last_name, email, phone, location, source)"
                " VALUES (?, ?, ?, ?, ?, ?)",
                (data.first_name, data.last_name, data.email.lower(), data.phone, data.location, data.source),
            )
        except sqlite3.IntegrityError as exc:
            raise ValueError(f"Candidate with email {data.email} already exists") from exc
        self._conn.commit()
        return self.get_candidate(cursor.lastrowid or 0)

    def get_candidate(self, candidate_id: int) -> Candidate:
        row = self._conn.execute("SELECT * FROM candidates WHERE id = ?", (candidate_id,)).fetchone()
        if row is None:
            raise LookupError(f"Candidate {candidate_id} not found")
        return Candidate.from_row(dict(row))

    def list_candidates(self, *, search: str | None = None, limit: int = 100) -> list[Candidate]:
        """Return candidates, newest first, optionally filtered by name or email."""
        query = "SELECT * FROM candidates"
        params: list[str | int] = []
        if search:
            query += " WHERE first_name LIKE ? OR last_name LIKE ? OR email LIKE ?"
            pattern = f"%{search}%"
            params.extend([pattern, pattern, pattern])
        query += " ORDER BY id DESC LIMIT ?"
        params.append(limit)
        rows = self._conn.execute(query, params).fetchall()
        return [Candidate.from_row(dict(row)) for row in rows]

    # ------------------------------------------------------------------
    # Jobs
    # ------------------------------------------------------------------

    def add_job(self, data: JobCreate) -> Job:
        cursor = self._conn.execute(
            "INSERT INTO jobs (title, department, location, status, is_remote) VALUES (?, ?, ?, ?, ?)",
            (data.title, data.department, data.location, JobStatus(data.status).value, int(data.is_remote)),
        )
        self._conn.commit()
        return self.get_job(cursor.lastrowid or 0)

    def get_job(self, job_id: int) -> Job:
        row = self._conn.execute("SELECT * FROM jobs WHERE id = ?", (job_id,)).fetchone()
        if row is None:
            raise LookupError(f"Job {job_id} not found")
        return Job.from_row(dict(row))

    def list_jobs(self, *, status: str | None = None, limit: int = 100) -> list[Job]:
        """Return jobs, newest first.

        Raises:
            ValueError: If ``status`` is not a known job status.
        """
        query = "SELECT * FROM jobs"
        params: list[str | int] = []
        if status:
            query += " WHERE status = ?"
            params.append(JobStatus(status).value)
        query += " ORDER BY id DESC LIMIT ?"
        params.append(limit)
        rows = self._conn.execute(query, params).fetchall()
        return [Job.from_row(dict(row)) for row in rows]

    # ------------------------------------------------------------------
    # Applications
    # ------------------------------------------------------------------

    def add_application(self, data: ApplicationCreate) -> Application:
        """Record a candidate applying to a job.

        Raises:
            LookupError: If the candidate or job does not exist.
            ValueError: If the candidate already applied to this job.
        """
        self.get_candidate(data.candidate_id)
        self.get_job(data.job_id)
        try:
            cursor = self._conn.execute(
                "INSERT INTO applications (candidate_id, job_id, ai_score) VALUES (?, ?, ?)",
                (data.candidate_id, data.job_id, data.ai_score),
            )
        except sqlite3.IntegrityError as exc:
            raise ValueError(f"Candidate {data.candidate_id} already applied to job {data.job_id}") from exc
        self._conn.commit()
        return self.get_application(cursor.lastrowid or 0)

    def get_application(self, application_id: int) -> Application:
        row = self._conn.execute(_APPLICATION_SELECT + " WHERE a.id = ?", (application_id,)).fetchone()
        if row is None:
            raise LookupError(f"Application {application_id} not found")
        return Application.from_row(dict(row))

    def list_applications(
        self,
        *,
        status: str | None = None,
        job_id: int | None = None,
        limit: int = 100,
    ) -> list[Application]:
        """Return applications with candidate and job names, most recent first."""
        query = _APPLICATION_SELECT
        conditions: list[str] = []
        params: list[str | int] = []
        if status:
            conditions.append("a.status = ?")
            params.append(ApplicationStatus(status).value)
        if job_id is not None:
            conditions.append("a.job_id = ?")
            params.append(job_id)
        if conditions:
            query += " WHERE " + " AND ".join(conditions)
        query += " ORDER BY a.applied_date DESC, a.id DESC LIMIT ?"
        params.append(limit)
        rows = self._conn.execute(query, params).fetchall()
        return [Application.from_row(dict(row)) for row in rows]

    def update_application_status(self, application_id: int, status: str) -> Application:
        """Move an application to a new pipeline stage.

        Raises:
            ValueError: If ``status`` is not a known application status.
            LookupError: If the application does not exist.
        """
        new_status = ApplicationStatus(status)
        cursor = self._conn.execute(
            "UPDATE applications SET status = ? WHERE id = ?",
            (new_status.value, application_id),
        )
        self._conn.commit()
        if cursor.rowcount == 0:
            raise LookupError(f"Application {application_id} not found")
        return self.get_application(application_id)

    # ------------------------------------------------------------------
    # Dashboard aggregates
    # ------------------------------------------------------------------

    def _count(self, query: str) -> int:
        row = self._conn.execute(query).fetchone()
        return int(row[0] or 0)

    def dashboard_metrics(self) -> DashboardMetrics:
        """Run the aggregate queries behind the dashboard. Not cheap; callers cache it."""
        by_status = {
            row["status"]: row["count"]
            for row in self._conn.execute(
                "SELECT status, COUNT(*) AS count FROM applications GROUP BY status ORDER BY status"
            ).fetchall()
        }
        top_rows = self._conn.execute(
            """
            SELECT j.id, j.title, j.department,
                   COUNT(a.id) AS applications,
                   COUNT(CASE WHEN a.ai_score >= ? THEN 1 END) AS qualified
            FROM jobs j
            LEFT JOIN applications a ON a.job_id = j.id
            WHERE j.status = 'active'
            GROUP BY j.id
            ORDER BY applications DESC, j.id
            LIMIT ?
            """,
            (QUALIFIED_SCORE, TOP_JOBS_LIMIT),
        ).fetchall()
        avg_row = self._conn.execute("SELECT AVG(ai_score) FROM applications WHERE ai_score IS NOT NULL").fetchone()

        return DashboardMetrics(
            total_jobs=self._count("SELECT COUNT(*) FROM jobs"),
            active_jobs=self._count("SELECT COUNT(*) FROM jobs WHERE status = 'active'"),
            total_candidates=self._count("SELECT COUNT(*) FROM candidates"),
            total_applications=self._count("SELECT COUNT(*) FROM applications"),
            new_applications_today=self._count(
                "SELECT COUNT(*) FROM applications WHERE DATE(applied_date) = DATE('now')"
            ),
            applications_by_status=by_status,
            top_jobs=[TopJob(**dict(row)) for row in top_rows],
            recent_applications=self.list_applications(limit=RECENT_APPLICATIONS_LIMIT),
            average_ai_score=round(avg_row[0] or 0.0, 1),
        )

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def close(self) -> None:
        """Close the database connection."""
        self._conn.close()

    def __enter__(self) -> "Database":
        return self

    def __exit__(self, *_args: object) -> None:
        self.close()

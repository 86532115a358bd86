"""Pydantic models for ATS records and dashboard payloads."""

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, computed_field


class JobStatus(str, Enum):
    """Publication status of a job opening."""

    DRAFT = "draft"
    ACTIVE = "active"
    PAUSED = "paused"
    CLOSED = "closed"


class ApplicationStatus(str, Enum):
    """Pipeline stage of an application."""

    NEW = "new"
    REVIEWING = "reviewing"
    INTERVIEW = "interview"
    OFFER = "offer"
    HIRED = "hired"
    REJECTED = "rejected"


class Candidate(BaseModel):
    """A person in the talent pool."""

    id: int
    first_name: str
    last_name: str
    email: str
    phone: str = ""
    location: str = ""
    source: str = "other"
    created_at: str = ""

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "Candidate":
        return cls(**{k: row[k] for k in cls.model_fields if k in row and row[k] is not None})


class Job(BaseModel):
    """An opening candidates can apply to."""

    id: int
    title: str
    department: str
    location: str = ""
    status: JobStatus = JobStatus.DRAFT
    is_remote: bool = False
    created_at: str = ""

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "Job":
        return cls(
            id=row["id"],
            title=row["title"],
            department=row["department"],
            location=row["location"] or "",
            status=JobStatus(row["status"]),
            is_remote=bool(row["is_remote"]),
            created_at=row["created_at"] or "",
        )


class Application(BaseModel):
    """A candidate's application to a job, with joined display names."""

    id: int
    candidate_id: int
    job_id: int
    status: ApplicationStatus = ApplicationStatus.NEW
    applied_date: str = ""
    ai_score: float | None = None
    candidate_name: str = ""
    job_title: str = ""

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "Application":
        return cls(
            id=row["id"],
            candidate_id=row["candidate_id"],
            job_id=row["job_id"],
            status=ApplicationStatus(row["status"]),
            applied_date=row["applied_date"] or "",
            ai_score=row["ai_score"],
            candidate_name=row.get("candidate_name") or "",
            job_title=row.get("job_title") or "",
        )


class CandidateCreate(BaseModel):
    """Fields accepted when adding a candidate."""

    first_name: str = Field(min_length=1)
    last_name: str = Field(min_length=1)
    email: str = Field(pattern=r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
    phone: str = ""
    location: str = ""
    source: str = "other"


class JobCreate(BaseModel):
    """Fields accepted when posting a job."""

    title: str = Field(min_length=1)
    department: str = Field(min_length=1)
    location: str = ""
    status: JobStatus = JobStatus.ACTIVE
    is_remote: bool = False


class ApplicationCreate(BaseModel):
    """Fields accepted when a candidate applies to a job."""

    candidate_id: int
    job_id: int
    ai_score: float | None = Field(default=None, ge=0, le=100)


class ApplicationStatusUpdate(BaseModel):
    """Body of a status change request."""

    status: ApplicationStatus


class TopJob(BaseModel):
    """An active job ranked by application volume."""

    id: int
    title: str
    department: str
    applications: int
    qualified: int

    @computed_field  # type: ignore[prop-decorator]
    @property
    def conversion_rate(self) -> float:
        return round(self.qualified / self.applications * 100, 1) if self.applications else 0.0


class DashboardMetrics(BaseModel):
    """Aggregate counts shown on the recruiting dashboard."""

    total_jobs: int = 0
    active_jobs: int = 0
    total_candidates: int = 0
    total_applications: int = 0
    new_applications_today: int = 0
    applications_by_status: dict[str, int] = Field(default_factory=dict)
    top_jobs: list[TopJob] = Field(default_factory=list)
    recent_applications: list[Application] = Field(default_factory=list)
    average_ai_score: float = 0.0

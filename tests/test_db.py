"""Tests for SQLite database layer."""

from pathlib import Path

import pytest
from ats_cache.db import Database
from ats_cache.models import (
    ApplicationCreate,
    ApplicationStatus,
    CandidateCreate,
    JobCreate,
    JobStatus,
)


@pytest.fixture
def db(tmp_path: Path):
    with Database(tmp_path / "test.db") as database:
        yield database


def _candidate(db: Database, first: str = "Sarah", last: str = "Chen", email: str | None = None):
    return db.add_candidate(
        CandidateCreate(first_name=first, last_name=last, email=email or f"{first.lower()}@example.com")
    )


def _job(db: Database, title: str = "Senior AI Engineer", status: JobStatus = JobStatus.ACTIVE):
    return db.add_job(JobCreate(title=title, department="Engineering", status=status))


def test_add_and_get_candidate(db):
    candidate = _candidate(db, email="Sarah.Chen@Example.com")
    assert candidate.id > 0
    assert candidate.full_name == "Sarah Chen"
    assert candidate.email == "sarah.chen@example.com"
    assert db.get_candidate(candidate.id) == candidate


def test_duplicate_candidate_email_rejected(db):
    _candidate(db)
    with pytest.raises(ValueError, match="already exists"):
        _candidate(db)


def test_missing_candidate_raises_lookup_error(db):
    with pytest.raises(LookupError):
        db.get_candidate(999)


def test_list_candidates_newest_first_and_search(db):
    _candidate(db, "Sarah", "Chen")
    _candidate(db, "Michael", "Rodriguez")
    assert [c.first_name for c in db.list_candidates()] == ["Michael", "Sarah"]
    assert [c.last_name for c in db.list_candidates(search="rodri")] == ["Rodriguez"]


def test_list_jobs_filtered_by_status(db):
    _job(db, "Product Manager", JobStatus.ACTIVE)
    _job(db, "UX Designer", JobStatus.DRAFT)
    assert len(db.list_jobs()) == 2
    assert [j.title for j in db.list_jobs(status="draft")] == ["UX Designer"]


def test_list_jobs_unknown_status_raises(db):
    with pytest.raises(ValueError):
        db.list_jobs(status="archived")


def test_add_application_joins_names(db):
    candidate = _candidate(db)
    job = _job(db)
    application = db.add_application(ApplicationCreate(candidate_id=candidate.id, job_id=job.id, ai_score=92))
    assert application.status is ApplicationStatus.NEW
    assert application.candidate_name == "Sarah Chen"
    assert application.job_title == "Senior AI Engineer"
    assert application.ai_score == 92


def test_add_application_requires_existing_rows(db):
    job = _job(db)
    with pytest.raises(LookupError, match="Candidate"):
        db.add_application(ApplicationCreate(candidate_id=42, job_id=job.id))


def test_duplicate_application_rejected(db):
    candidate = _candidate(db)
    job = _job(db)
    db.add_application(ApplicationCreate(candidate_id=candidate.id, job_id=job.id))
    with pytest.raises(ValueError, match="already applied"):
        db.add_application(ApplicationCreate(candidate_id=candidate.id, job_id=job.id))


def test_update_application_status(db):
    candidate = _candidate(db)
    job = _job(db)
    application = db.add_application(ApplicationCreate(candidate_id=candidate.id, job_id=job.id))
    updated = db.update_application_status(application.id, "interview")
    assert updated.status is ApplicationStatus.INTERVIEW
    assert [a.id for a in db.list_applications(status="interview")] == [application.id]


def test_update_application_status_errors(db):
    with pytest.raises(LookupError):
        db.update_application_status(7, "offer")
    with pytest.raises(ValueError):
        db.update_application_status(7, "ghosted")


def test_dashboard_metrics_empty(db):
    metrics = db.dashboard_metrics()
    assert metrics.total_jobs == 0
    assert metrics.applications_by_status == {}
    assert metrics.top_jobs == []
    assert metrics.recent_applications == []
    assert metrics.average_ai_score == 0.0


def test_dashboard_metrics_aggregates(db):
    engineer = _job(db, "Senior AI Engineer")
    pm = _job(db, "Product Manager")
    _job(db, "UX Designer", JobStatus.CLOSED)
    sarah = _candidate(db, "Sarah", "Chen")
    michael = _candidate(db, "Michael", "Rodriguez")
    emily = _candidate(db, "Emily", "Wong")

    db.add_application(ApplicationCreate(candidate_id=sarah.id, job_id=engineer.id, ai_score=92))
    db.add_application(ApplicationCreate(candidate_id=michael.id, job_id=engineer.id, ai_score=60))
    app = db.add_application(ApplicationCreate(candidate_id=emily.id, job_id=pm.id, ai_score=79))
    db.update_application_status(app.id, "offer")

    metrics = db.dashboard_metrics()
    assert metrics.total_jobs == 3
    assert metrics.active_jobs == 2
    assert metrics.total_candidates == 3
    assert metrics.total_applications == 3
    assert metrics.new_applications_today == 3
    assert metrics.applications_by_status == {"new": 2, "offer": 1}
    assert [(j.title, j.applications, j.qualified) for j in metrics.top_jobs] == [
        ("Senior AI Engineer", 2, 1),
        ("Product Manager", 1, 1),
    ]
    assert metrics.top_jobs[0].conversion_rate == 50.0
    assert [a.candidate_name for a in metrics.recent_applications] == ["Emily Wong", "Michael Rodriguez", "Sarah Chen"]
    assert metrics.recent_applications[0].status.value == "offer"
    assert metrics.average_ai_score == 77.0


def test_db_context_manager_closes(tmp_path: Path):
    with Database(tmp_path / "test.db") as db:
        _job(db)
    with pytest.raises(Exception):
        db.list_jobs()


def test_dashboard_metrics_caps_recent_applications(db):
    job = _job(db)
    for i in range(12):
        candidate = _candidate(db, f"Person{i}", "Test")
        db.add_application(ApplicationCreate(candidate_id=candidate.id, job_id=job.id))
    recent = db.dashboard_metrics().recent_applications
    assert len(recent) == 10
    assert recent[0].candidate_name == "Person11 Test"

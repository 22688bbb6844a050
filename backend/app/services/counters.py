"""
Maintenance of the denormalized `Job.applications_count`.

The counter is only ever moved inside the same session/transaction as the
Application insert or delete that causes it (see services/lifecycle.py), and it is
changed with an SQL expression so two requests updating the same job cannot lose
each other's increment.
"""
import logging

from sqlalchemy import case, func
from sqlalchemy.orm import Session

from ..models.application import Application
from ..models.job import Job

logger = logging.getLogger(__name__)


def adjust_applications_count(db: Session, job_id: int, delta: int) -> None:
    """Add `delta` to the job's counter (never below zero). Does not commit."""
    new_value = Job.applications_count + delta
    db.query(Job).filter(Job.id == int(job_id)).update(
        {Job.applications_count: case((new_value < 0, 0), else_=new_value)},
        synchronize_session=False,
    )


def live_application_counts(db: Session, job_ids: list[int]) -> dict[int, int]:
    """Count live applications per job straight from the applications table."""
    if not job_ids:
        return {}
    rows = (
        db.query(Application.job_id, func.count(Application.id))
        .filter(Application.job_id.in_([int(j) for j in job_ids]))
        .group_by(Application.job_id)
        .all()
    )
    counts = {int(job_id): 0 for job_id in job_ids}
    for job_id, count in rows:
        counts[int(job_id)] = int(count)
    return counts


def recount_applications(db: Session, job_id: int | None = None) -> list[dict]:
    """
    Recompute counters from live rows and fix the ones that drifted.

    Returns one entry per corrected job: {"job_id", "stored", "actual"}.
    """
    q = db.query(Job)
    if job_id is not None:
        q = q.filter(Job.id == int(job_id))
    jobs = q.all()
    actual = live_application_counts(db, [j.id for j in jobs])

    corrected: list[dict] = []
    for job in jobs:
        stored = int(job.applications_count or 0)
        live = actual.get(int(job.id), 0)
        if stored != live:
            corrected.append({"job_id": int(job.id), "stored": stored, "actual": live})
            job.applications_count = live

    if corrected:
        db.commit()
        logger.info("Corrected applications_count on %d job(s)", len(corrected))
    return corrected

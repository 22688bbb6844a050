"""
Application lifecycle.

    pending --(update_status / accept / reject)--> reviewed | shortlisted | rejected | hired

Status changes are free-form: any of the five values may replace any other,
including a move back to pending. Every change to a non-pending status (and every
accept/reject) stamps `reviewed_at`. Only the applicant may delete, and only while
the application is still pending.

Creating or deleting an Application moves `Job.applications_count` in the same
transaction as the row itself.

Duplicate protection is a read-then-write check (`check_can_apply`), not a DB
constraint: two requests racing on the same (job, applicant) can both pass the
check and both insert. Counters stay consistent with rows in that case.
"""
import logging
from datetime import datetime

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from ..models.application import Application
from ..models.choices import APP_HIRED, APP_PENDING, APP_REJECTED, JOB_ACTIVE
from ..models.job import Job
from ..utils.dates import as_utc, utcnow
from ..utils.error_handlers import (
    DomainRuleViolation,
    NotFoundError,
    get_error_message,
    handle_database_error,
)
from ..utils.validation import validate_application_status
from .counters import adjust_applications_count
from .policy import Action, Actor, enforce

logger = logging.getLogger(__name__)


# Largest id a BIGINT/SQLite INTEGER column can hold; anything above cannot exist.
MAX_ID = 2**63 - 1


def _id_in_range(entity_id: int) -> bool:
    return 1 <= int(entity_id) <= MAX_ID


def _load_application(db: Session, application_id: int) -> Application:
    if not _id_in_range(application_id):
        raise NotFoundError(get_error_message("application_not_found"))
    application = (
        db.query(Application)
        .options(joinedload(Application.job), joinedload(Application.applicant))
        .filter(Application.id == int(application_id))
        .first()
    )
    if not application:
        raise NotFoundError(get_error_message("application_not_found"))
    return application


def find_job(db: Session, job_id: int) -> Job | None:
    if not _id_in_range(job_id):
        return None
    return (
        db.query(Job)
        .options(joinedload(Job.poster))
        .filter(Job.id == int(job_id))
        .first()
    )


def load_job(db: Session, job_id: int) -> Job:
    """The job with `job_id`, or NotFoundError."""
    job = find_job(db, job_id)
    if not job:
        raise NotFoundError(get_error_message("job_not_found"))
    return job


def find_existing_application(db: Session, *, job_id: int, applicant_id: int) -> Application | None:
    return (
        db.query(Application)
        .filter(Application.job_id == int(job_id), Application.applicant_id == int(applicant_id))
        .order_by(Application.created_at.asc())
        .first()
    )


def deadline_passed(job: Job, now: datetime | None = None) -> bool:
    """True only when `now` is strictly after the deadline."""
    deadline = as_utc(job.application_deadline)
    if deadline is None:
        return False
    return as_utc(now or utcnow()) > deadline


def check_can_apply(db: Session, actor: Actor, job_id: int, *, now: datetime | None = None) -> Job:
    """Preconditions for a new application; returns the target job."""
    enforce(actor, Action.APPLICATION_CREATE)

    job = find_job(db, job_id)
    if not job or job.status != JOB_ACTIVE:
        raise NotFoundError(get_error_message("job_not_active"))

    if deadline_passed(job, now):
        raise DomainRuleViolation(get_error_message("deadline_passed"))

    if find_existing_application(db, job_id=job.id, applicant_id=actor.id):
        raise DomainRuleViolation(get_error_message("already_applied"))

    return job


def record_application(
    db: Session,
    actor: Actor,
    job: Job,
    *,
    cover_letter: str,
    resume: str,
) -> Application:
    """Insert the application and bump the job counter in one transaction."""
    application = Application(
        job_id=job.id,
        applicant_id=actor.id,
        cover_letter=cover_letter,
        resume=resume,
        status=APP_PENDING,
    )
    try:
        db.add(application)
        db.flush()
        adjust_applications_count(db, job.id, +1)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        raise handle_database_error(e, "creating application") from e

    db.refresh(application)
    logger.info("User %s applied to job %s (application %s)", actor.id, job.id, application.id)
    return application


def apply_to_job(
    db: Session,
    actor: Actor,
    *,
    job_id: int,
    cover_letter: str,
    resume: str,
    now: datetime | None = None,
) -> Application:
    job = check_can_apply(db, actor, job_id, now=now)
    return record_application(db, actor, job, cover_letter=cover_letter, resume=resume)


def get_application(db: Session, actor: Actor, application_id: int) -> Application:
    application = _load_application(db, application_id)
    enforce(actor, Action.APPLICATION_READ, application)
    return application


def list_my_applications(db: Session, actor: Actor) -> list[Application]:
    enforce(actor, Action.APPLICATION_LIST_OWN)
    return (
        db.query(Application)
        .options(joinedload(Application.job))
        .filter(Application.applicant_id == actor.id)
        .order_by(Application.created_at.desc(), Application.id.desc())
        .all()
    )


def list_job_applications(db: Session, actor: Actor, job_id: int) -> list[Application]:
    job = load_job(db, job_id)
    enforce(actor, Action.APPLICATION_LIST_BY_JOB, job)
    return (
        db.query(Application)
        .options(joinedload(Application.applicant))
        .filter(Application.job_id == job.id)
        .order_by(Application.created_at.desc(), Application.id.desc())
        .all()
    )


def update_status(
    db: Session,
    actor: Actor,
    application_id: int,
    *,
    status: str,
    notes: str | None = None,
    now: datetime | None = None,
) -> Application:
    status = validate_application_status(status)
    application = _load_application(db, application_id)
    enforce(actor, Action.APPLICATION_UPDATE_STATUS, application)

    previous = application.status
    application.status = status
    if notes:
        application.notes = notes
    if status != APP_PENDING:
        application.reviewed_at = now or utcnow()

    try:
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        raise handle_database_error(e, "updating application status") from e

    db.refresh(application)
    logger.info(
        "Application %s moved %s -> %s by user %s",
        application.id, previous, status, actor.id,
    )
    return application


def accept_application(
    db: Session, actor: Actor, application_id: int, *, notes: str | None = None, now: datetime | None = None
) -> Application:
    return update_status(db, actor, application_id, status=APP_HIRED, notes=notes, now=now)


def reject_application(
    db: Session, actor: Actor, application_id: int, *, notes: str | None = None, now: datetime | None = None
) -> Application:
    return update_status(db, actor, application_id, status=APP_REJECTED, notes=notes, now=now)


def withdraw_application(db: Session, actor: Actor, application_id: int) -> int:
    """Delete a pending application and decrement its job counter. Returns the job id."""
    application = _load_application(db, application_id)
    enforce(actor, Action.APPLICATION_DELETE, application)

    job_id = int(application.job_id)
    try:
        db.delete(application)
        db.flush()
        adjust_applications_count(db, job_id, -1)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        raise handle_database_error(e, "deleting application") from e

    logger.info("Application %s withdrawn by user %s (job %s)", application_id, actor.id, job_id)
    return job_id

import logging

from fastapi import APIRouter, Depends, Query
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from ..config import JOBS_MAX_PAGE_SIZE, JOBS_PAGE_SIZE
from ..database import get_db
from ..models.choices import JOB_ACTIVE
from ..models.job import Job
from ..models.user import User
from ..schemas.job import JobCreate, JobUpdate
from ..services.counters import live_application_counts
from ..services.job_listing import JobFilter, search_jobs
from ..services.lifecycle import load_job
from ..services.policy import Action, Actor, decide, enforce
from ..utils.dependencies import get_current_actor, get_optional_user
from ..utils.roles import employer_jobs_viewer, job_poster
from ..utils.validation import (
    parse_iso_datetime,
    validate_integer_field,
    validate_job_status,
    validate_job_type,
    validate_string_field,
    validate_string_list,
)
from ..utils.error_handlers import (
    NotFoundError,
    ValidationError,
    get_error_message,
    handle_database_error,
)
from .payloads import dump_list, job_to_public

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/jobs", tags=["Jobs"])

# (payload key, column, max length, label)
_TEXT_FIELDS = (
    ("title", "title", 150, "Job title"),
    ("description", "description", 20000, "Job description"),
    ("company", "company", 255, "Company name"),
    ("location", "location", 255, "Location"),
    ("category", "category", 100, "Category"),
)
MAX_SALARY = 10**9


def _collect_job_fields(payload: JobCreate | JobUpdate, *, partial: bool) -> dict:
    """
    Validate a create/update payload and map it onto Job column values.

    For partial updates only the keys the client actually sent are returned.
    """
    data = payload.model_dump(exclude_unset=partial)
    values: dict = {}

    for key, column, max_length, label in _TEXT_FIELDS:
        if not partial or key in data:
            values[column] = validate_string_field(
                data.get(key), key, min_length=1, max_length=max_length, label=label
            )

    if not partial or "type" in data:
        values["job_type"] = validate_job_type(data.get("type"))

    if not partial:
        values["status"] = validate_job_status(data.get("status"))
    elif data.get("status") is not None:
        values["status"] = validate_job_status(data["status"])

    salary = data.get("salary")
    if salary:
        if "min" in salary:
            values["salary_min"] = validate_integer_field(
                salary["min"], "salary.min", min_value=0, max_value=MAX_SALARY, required=False, label="Salary min"
            )
        if "max" in salary:
            values["salary_max"] = validate_integer_field(
                salary["max"], "salary.max", min_value=0, max_value=MAX_SALARY, required=False, label="Salary max"
            )
        if salary.get("currency") is not None:
            currency = validate_string_field(
                salary["currency"], "salary.currency", min_length=3, max_length=5, label="Currency"
            )
            values["salary_currency"] = currency.upper()

    requirements = data.get("requirements")
    if requirements:
        if "experience" in requirements:
            values["experience"] = validate_string_field(
                requirements["experience"], "requirements.experience", max_length=255, required=False
            )
        if "education" in requirements:
            values["education"] = validate_string_field(
                requirements["education"], "requirements.education", max_length=255, required=False
            )
        if "skills" in requirements:
            values["required_skills"] = dump_list(
                validate_string_list(requirements["skills"], "requirements.skills")
            )

    if "benefits" in data and (data["benefits"] is not None or partial):
        values["benefits"] = dump_list(validate_string_list(data["benefits"], "benefits"))

    if "application_deadline" in data and (data["application_deadline"] is not None or partial):
        values["application_deadline"] = parse_iso_datetime(data["application_deadline"], "applicationDeadline")

    return values


def _check_salary_range(job: Job) -> None:
    if job.salary_min is not None and job.salary_max is not None and job.salary_min > job.salary_max:
        raise ValidationError(
            "Salary min must not exceed salary max", details={"field": "salary"}
        )


@router.post("", status_code=201)
def create_job(
    payload: JobCreate,
    db: Session = Depends(get_db),
    actor: Actor = Depends(job_poster),
):
    values = _collect_job_fields(payload, partial=False)
    values.setdefault("salary_currency", "USD")

    job = Job(posted_by_id=actor.id, applications_count=0, **values)
    _check_salary_range(job)

    try:
        db.add(job)
        db.commit()
        db.refresh(job)
    except SQLAlchemyError as e:
        db.rollback()
        raise handle_database_error(e, "creating job") from e

    logger.info("User %s created job %s (%s)", actor.id, job.id, job.status)
    return {"success": True, "job": job_to_public(job)}


@router.get("")
def list_jobs(
    search: str | None = Query(default=None, max_length=200),
    location: str | None = Query(default=None, max_length=255),
    job_type: str | None = Query(default=None, alias="type", max_length=20),
    category: str | None = Query(default=None, max_length=100),
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=JOBS_PAGE_SIZE, ge=1, le=JOBS_MAX_PAGE_SIZE),
    sort_by: str = Query(default="createdAt", alias="sortBy"),
    sort_order: str = Query(default="desc", alias="sortOrder", max_length=4),
    db: Session = Depends(get_db),
):
    """Public listing; only active jobs are ever returned."""
    result = search_jobs(
        db,
        JobFilter(
            search=search,
            location=location,
            job_type=job_type,
            category=category,
            sort_by=sort_by,
            sort_order=sort_order,
            page=page,
            page_size=limit,
        ),
    )
    return {
        "success": True,
        "jobs": [job_to_public(j) for j in result.jobs],
        "totalPages": result.total_pages,
        "currentPage": result.page,
        "total": result.total,
    }


@router.get("/employer/my-jobs")
def my_jobs(
    db: Session = Depends(get_db),
    actor: Actor = Depends(employer_jobs_viewer),
):
    jobs = (
        db.query(Job)
        .options(joinedload(Job.poster))
        .filter(Job.posted_by_id == actor.id)
        .order_by(Job.created_at.desc(), Job.id.desc())
        .all()
    )
    counts = live_application_counts(db, [j.id for j in jobs])
    logger.debug("Found %d jobs for employer %s", len(jobs), actor.id)
    return {
        "success": True,
        "jobs": [job_to_public(j, applications_count=counts.get(j.id, 0)) for j in jobs],
    }


@router.get("/{job_id:int}")
def get_job(
    job_id: int,
    db: Session = Depends(get_db),
    user: User | None = Depends(get_optional_user),
):
    job = load_job(db, job_id)

    # Closed/draft jobs exist only for their owner and admins.
    if job.status != JOB_ACTIVE:
        if user is None or not decide(Actor.from_user(user), Action.JOB_VIEW_UNPUBLISHED, job):
            raise NotFoundError(get_error_message("job_not_found"))

    return {"success": True, "job": job_to_public(job)}


@router.put("/{job_id:int}")
def update_job(
    job_id: int,
    payload: JobUpdate,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    job = load_job(db, job_id)
    enforce(actor, Action.JOB_UPDATE, job)

    values = _collect_job_fields(payload, partial=True)
    previous_status = job.status
    for column, value in values.items():
        setattr(job, column, value)
    _check_salary_range(job)

    try:
        db.commit()
        db.refresh(job)
    except SQLAlchemyError as e:
        db.rollback()
        raise handle_database_error(e, "updating job") from e

    if job.status != previous_status:
        logger.info("Job %s status %s -> %s by user %s", job.id, previous_status, job.status, actor.id)
    return {"success": True, "job": job_to_public(job)}


@router.delete("/{job_id:int}")
def delete_job(
    job_id: int,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    job = load_job(db, job_id)
    enforce(actor, Action.JOB_DELETE, job)

    removed = len(job.applications)
    try:
        # Applications go with the job (ORM cascade).
        db.delete(job)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        raise handle_database_error(e, "deleting job") from e

    logger.info("User %s deleted job %s and %d application(s)", actor.id, job_id, removed)
    return {
        "success": True,
        "message": "Job deleted successfully",
        "deleted_job_id": int(job_id),
        "deleted_applications": removed,
    }

"""JSON shapes returned by the API (camelCase keys, ISO-8601 UTC timestamps)."""
import json
import logging

from ..models.application import Application
from ..models.job import Job
from ..models.user import User
from ..utils.dates import isoformat

logger = logging.getLogger(__name__)


def load_list(raw: str | None) -> list[str]:
    if not raw:
        return []
    try:
        parsed = json.loads(raw)
    except ValueError:
        logger.warning("Ignoring malformed JSON list column: %r", raw[:80])
        return []
    if not isinstance(parsed, list):
        return []
    return [str(x) for x in parsed]


def dump_list(values: list[str] | None) -> str | None:
    return json.dumps(values, ensure_ascii=False) if values else None


def user_profile(user: User) -> dict:
    return {
        "phone": user.phone,
        "location": user.location,
        "bio": user.bio,
        "skills": load_list(user.skills),
        "experience": user.experience,
        "education": user.education,
        "resume": user.resume_url,
    }


def user_company(user: User) -> dict:
    return {
        "name": user.company_name,
        "description": user.company_description,
        "website": user.company_website,
        "location": user.company_location,
    }


def user_to_public(user: User) -> dict:
    return {
        "id": user.id,
        "name": user.name,
        "email": user.email,
        "role": user.role,
        "profile": user_profile(user),
        "company": user_company(user),
        "createdAt": isoformat(user.created_at),
    }


def _poster_brief(user: User | None) -> dict | None:
    if user is None:
        return None
    return {"id": user.id, "name": user.name, "company": user_company(user)}


def job_to_public(job: Job, *, applications_count: int | None = None) -> dict:
    return {
        "id": job.id,
        "title": job.title,
        "description": job.description,
        "company": job.company,
        "location": job.location,
        "type": job.job_type,
        "category": job.category,
        "salary": {
            "min": job.salary_min,
            "max": job.salary_max,
            "currency": job.salary_currency or "USD",
        },
        "requirements": {
            "experience": job.experience,
            "education": job.education,
            "skills": load_list(job.required_skills),
        },
        "benefits": load_list(job.benefits),
        "applicationDeadline": isoformat(job.application_deadline),
        "postedBy": _poster_brief(job.poster),
        "status": job.status,
        "applicationsCount": int(
            applications_count if applications_count is not None else (job.applications_count or 0)
        ),
        "createdAt": isoformat(job.created_at),
        "updatedAt": isoformat(job.updated_at),
    }


def _job_brief(job: Job | None) -> dict | None:
    if job is None:
        return None
    return {
        "id": job.id,
        "title": job.title,
        "company": job.company,
        "location": job.location,
        "type": job.job_type,
        "status": job.status,
        "postedBy": job.posted_by_id,
    }


def _applicant_brief(user: User | None) -> dict | None:
    if user is None:
        return None
    return {
        "id": user.id,
        "name": user.name,
        "email": user.email,
        "profile": user_profile(user),
    }


def application_to_public(application: Application) -> dict:
    return {
        "id": application.id,
        "job": _job_brief(application.job),
        "applicant": _applicant_brief(application.applicant),
        "coverLetter": application.cover_letter,
        "resume": application.resume,
        "status": application.status,
        "notes": application.notes,
        "appliedAt": isoformat(application.created_at),
        "reviewedAt": isoformat(application.reviewed_at),
        "updatedAt": isoformat(application.updated_at),
    }

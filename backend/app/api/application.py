import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..database import get_db
from ..schemas.application import ApplicationCreate, ReviewNotes, StatusUpdate
from ..services import lifecycle
from ..services.policy import Actor
from ..utils.dependencies import get_current_actor
from ..utils.roles import jobseeker_only, own_applications_viewer
from ..utils.validation import validate_string_field
from .payloads import application_to_public

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/applications", tags=["Applications"])


@router.post("", status_code=201)
def apply_for_job(
    payload: ApplicationCreate,
    db: Session = Depends(get_db),
    actor: Actor = Depends(jobseeker_only),
):
    cover_letter = validate_string_field(
        payload.cover_letter, "coverLetter", max_length=10000, label="Cover letter"
    )
    resume = validate_string_field(payload.resume, "resume", max_length=500, label="Resume")

    application = lifecycle.apply_to_job(
        db,
        actor,
        job_id=payload.job_id,
        cover_letter=cover_letter,
        resume=resume,
    )
    return {"success": True, "application": application_to_public(application)}


@router.get("/my-applications")
def my_applications(
    db: Session = Depends(get_db),
    actor: Actor = Depends(own_applications_viewer),
):
    items = lifecycle.list_my_applications(db, actor)
    return {"success": True, "applications": [application_to_public(a) for a in items]}


@router.get("/job/{job_id:int}")
def job_applications(
    job_id: int,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    items = lifecycle.list_job_applications(db, actor, job_id)
    return {"success": True, "applications": [application_to_public(a) for a in items]}


@router.put("/{application_id:int}/status")
def update_application_status(
    application_id: int,
    payload: StatusUpdate,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    application = lifecycle.update_status(
        db, actor, application_id, status=payload.status, notes=payload.notes
    )
    return {"success": True, "application": application_to_public(application)}


@router.put("/{application_id:int}/accept")
def accept_application(
    application_id: int,
    payload: ReviewNotes | None = None,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    notes = payload.notes if payload else None
    application = lifecycle.accept_application(db, actor, application_id, notes=notes)
    return {"success": True, "application": application_to_public(application)}


@router.put("/{application_id:int}/reject")
def reject_application(
    application_id: int,
    payload: ReviewNotes | None = None,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    notes = payload.notes if payload else None
    application = lifecycle.reject_application(db, actor, application_id, notes=notes)
    return {"success": True, "application": application_to_public(application)}


@router.get("/{application_id:int}")
def application_details(
    application_id: int,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    application = lifecycle.get_application(db, actor, application_id)
    return {"success": True, "application": application_to_public(application)}


@router.delete("/{application_id:int}")
def delete_application(
    application_id: int,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    job_id = lifecycle.withdraw_application(db, actor, application_id)
    return {
        "success": True,
        "message": "Application deleted successfully",
        "deleted_application_id": int(application_id),
        "job_id": job_id,
    }

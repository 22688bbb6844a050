from fastapi import APIRouter, Depends
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
import logging

from ..database import get_db
from ..models.user import User
from ..schemas.auth import CompanyFields, LoginRequest, ProfileFields, ProfileUpdate, RegisterRequest
from ..utils.dependencies import get_current_user
from ..utils.jwt import create_access_token
from ..utils.security import hash_password, verify_password
from ..utils.validation import (
    validate_email,
    validate_password,
    validate_role,
    validate_string_field,
    validate_string_list,
)
from ..utils.error_handlers import (
    UnauthorizedError,
    ValidationError,
    get_error_message,
    handle_database_error,
)
from .payloads import dump_list, user_to_public

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Auth"])


def _apply_profile(user: User, profile: ProfileFields | None) -> None:
    if profile is None:
        return
    fields = profile.model_dump(exclude_unset=True)
    if "phone" in fields:
        user.phone = validate_string_field(fields["phone"], "profile.phone", max_length=50, required=False)
    if "location" in fields:
        user.location = validate_string_field(fields["location"], "profile.location", max_length=255, required=False)
    if "bio" in fields:
        user.bio = validate_string_field(fields["bio"], "profile.bio", max_length=5000, required=False)
    if "skills" in fields:
        user.skills = dump_list(validate_string_list(fields["skills"], "profile.skills"))
    if "experience" in fields:
        user.experience = validate_string_field(fields["experience"], "profile.experience", max_length=5000, required=False)
    if "education" in fields:
        user.education = validate_string_field(fields["education"], "profile.education", max_length=5000, required=False)
    if "resume" in fields:
        user.resume_url = validate_string_field(fields["resume"], "profile.resume", max_length=500, required=False)


def _apply_company(user: User, company: CompanyFields | None) -> None:
    if company is None:
        return
    fields = company.model_dump(exclude_unset=True)
    if "name" in fields:
        user.company_name = validate_string_field(fields["name"], "company.name", max_length=255, required=False)
    if "description" in fields:
        user.company_description = validate_string_field(
            fields["description"], "company.description", max_length=5000, required=False
        )
    if "website" in fields:
        user.company_website = validate_string_field(fields["website"], "company.website", max_length=255, required=False)
    if "location" in fields:
        user.company_location = validate_string_field(fields["location"], "company.location", max_length=255, required=False)


def _token_response(user: User) -> dict:
    token = create_access_token({"sub": str(user.id), "role": user.role})
    return {
        "success": True,
        "user": user_to_public(user),
        "access_token": token,
        "token_type": "bearer",
    }


@router.post("/register", status_code=201)
def register(payload: RegisterRequest, db: Session = Depends(get_db)):
    name = validate_string_field(payload.name, "name", min_length=1, max_length=255, label="Name")
    email = validate_email(payload.email)
    validate_password(payload.password)
    role = validate_role(payload.role)

    existing = db.query(User).filter(User.email == email).first()
    if existing:
        raise ValidationError(get_error_message("email_exists"), details={"field": "email"})

    try:
        hashed = hash_password(payload.password)
    except ValueError:
        raise ValidationError(get_error_message("weak_password"), details={"field": "password"}) from None

    user = User(name=name, email=email, password=hashed, role=role)
    _apply_profile(user, payload.profile)
    _apply_company(user, payload.company)

    try:
        db.add(user)
        db.commit()
        db.refresh(user)
    except SQLAlchemyError as e:
        db.rollback()
        raise handle_database_error(e, "creating user") from e

    logger.info("Registered user %s as %s", user.id, user.role)
    return _token_response(user)


@router.post("/login")
def login(payload: LoginRequest, db: Session = Depends(get_db)):
    email = validate_email(payload.email)
    if not payload.password:
        raise ValidationError("Password is required", details={"field": "password"})

    user = db.query(User).filter(User.email == email).first()
    if not user or not verify_password(payload.password, user.password):
        logger.info("Failed login for %s", email)
        raise UnauthorizedError(get_error_message("invalid_credentials"))

    return _token_response(user)


@router.get("/me")
def me(user: User = Depends(get_current_user)):
    return {"success": True, "user": user_to_public(user)}


@router.put("/profile")
def update_profile(
    payload: ProfileUpdate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    if payload.name is not None:
        user.name = validate_string_field(payload.name, "name", min_length=1, max_length=255, label="Name")
    _apply_profile(user, payload.profile)
    _apply_company(user, payload.company)

    try:
        db.commit()
        db.refresh(user)
    except SQLAlchemyError as e:
        db.rollback()
        raise handle_database_error(e, "updating profile") from e

    return {"success": True, "user": user_to_public(user)}


@router.post("/logout")
def logout():
    return {"success": True, "message": "Logged out successfully"}

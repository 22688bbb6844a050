"""
Authorization policy.

`decide(actor, action, target)` is a pure function: it looks only at the actor's
id/role and at the ownership fields of the target (`posted_by_id` on jobs,
`applicant_id`, `status` and `job.posted_by_id` on applications). Routers and
services call `enforce(...)`, which turns a denial into the right error:

- plain denial -> ForbiddenError (403)
- denial caused by the target's state rather than the actor -> DomainRuleViolation (400)

Entity existence is checked by the caller before the policy runs, so "not found"
never comes out of here.
"""
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable

from ..models.choices import APP_PENDING, ROLE_ADMIN, ROLE_EMPLOYER, ROLE_JOBSEEKER
from ..utils.error_handlers import DomainRuleViolation, ForbiddenError, get_error_message

logger = logging.getLogger(__name__)


class Action(str, Enum):
    JOB_CREATE = "job:create"
    JOB_UPDATE = "job:update"
    JOB_DELETE = "job:delete"
    JOB_VIEW_UNPUBLISHED = "job:view_unpublished"
    JOB_LIST_OWN = "job:list_own"
    APPLICATION_CREATE = "application:create"
    APPLICATION_UPDATE_STATUS = "application:update_status"
    APPLICATION_DELETE = "application:delete"
    APPLICATION_READ = "application:read"
    APPLICATION_LIST_BY_JOB = "application:list_by_job"
    APPLICATION_LIST_OWN = "application:list_own"


@dataclass(frozen=True)
class Actor:
    id: int
    role: str

    @property
    def is_admin(self) -> bool:
        return self.role == ROLE_ADMIN

    @classmethod
    def from_user(cls, user: Any) -> "Actor":
        return cls(id=int(user.id), role=str(user.role))


@dataclass(frozen=True)
class Decision:
    allowed: bool
    reason: str | None = None  # ERROR_MESSAGES key
    rule_violation: bool = False

    def __bool__(self) -> bool:
        return self.allowed


ALLOW = Decision(True)


def _deny(reason: str) -> Decision:
    return Decision(False, reason)


def _same_id(a: Any, b: Any) -> bool:
    return a is not None and b is not None and int(a) == int(b)


def _owns_job(actor: Actor, job: Any) -> bool:
    return job is not None and _same_id(getattr(job, "posted_by_id", None), actor.id)


def _job_create(actor: Actor, target: Any) -> Decision:
    if actor.role in (ROLE_EMPLOYER, ROLE_ADMIN):
        return ALLOW
    return _deny("employer_only")


def _job_owner_or_admin(actor: Actor, job: Any) -> Decision:
    if actor.is_admin or _owns_job(actor, job):
        return ALLOW
    return _deny("not_job_owner")


def _job_list_own(actor: Actor, target: Any) -> Decision:
    if actor.role in (ROLE_EMPLOYER, ROLE_ADMIN):
        return ALLOW
    return _deny("forbidden")


def _application_create(actor: Actor, target: Any) -> Decision:
    if actor.role == ROLE_JOBSEEKER:
        return ALLOW
    return _deny("jobseeker_only")


def _application_review(actor: Actor, application: Any) -> Decision:
    if actor.is_admin or _owns_job(actor, getattr(application, "job", None)):
        return ALLOW
    return _deny("not_application_reviewer")


def _application_delete(actor: Actor, application: Any) -> Decision:
    if not _same_id(getattr(application, "applicant_id", None), actor.id):
        return _deny("not_application_owner")
    if getattr(application, "status", None) != APP_PENDING:
        return Decision(False, "application_reviewed", rule_violation=True)
    return ALLOW


def _application_read(actor: Actor, application: Any) -> Decision:
    if actor.is_admin:
        return ALLOW
    if _same_id(getattr(application, "applicant_id", None), actor.id):
        return ALLOW
    if _owns_job(actor, getattr(application, "job", None)):
        return ALLOW
    return _deny("not_application_viewer")


def _application_list_by_job(actor: Actor, job: Any) -> Decision:
    if actor.is_admin or _owns_job(actor, job):
        return ALLOW
    return _deny("not_job_applications_viewer")


def _application_list_own(actor: Actor, target: Any) -> Decision:
    if actor.role == ROLE_JOBSEEKER:
        return ALLOW
    return _deny("jobseeker_only")


_RULES: dict[Action, Callable[[Actor, Any], Decision]] = {
    Action.JOB_CREATE: _job_create,
    Action.JOB_UPDATE: _job_owner_or_admin,
    Action.JOB_DELETE: _job_owner_or_admin,
    Action.JOB_VIEW_UNPUBLISHED: _job_owner_or_admin,
    Action.JOB_LIST_OWN: _job_list_own,
    Action.APPLICATION_CREATE: _application_create,
    Action.APPLICATION_UPDATE_STATUS: _application_review,
    Action.APPLICATION_DELETE: _application_delete,
    Action.APPLICATION_READ: _application_read,
    Action.APPLICATION_LIST_BY_JOB: _application_list_by_job,
    Action.APPLICATION_LIST_OWN: _application_list_own,
}


def decide(actor: Actor, action: Action, target: Any = None) -> Decision:
    """Return whether `actor` may perform `action` on `target`."""
    rule = _RULES.get(action)
    if rule is None:
        return _deny("forbidden")
    return rule(actor, target)


def enforce(actor: Actor, action: Action, target: Any = None) -> None:
    """Raise unless `decide` allows the action."""
    decision = decide(actor, action, target)
    if decision.allowed:
        return
    message = get_error_message(decision.reason or "forbidden")
    logger.warning(
        "Denied %s for user %s (%s): %s",
        action.value, actor.id, actor.role, decision.reason,
    )
    if decision.rule_violation:
        raise DomainRuleViolation(message)
    raise ForbiddenError(message)

from fastapi import Depends

from ..services.policy import Action, Actor, enforce
from .dependencies import get_current_actor


def _action_required(action: Action):
    """Dependency that resolves the caller and checks a role-level (target-free) action."""
    def check_action(actor: Actor = Depends(get_current_actor)) -> Actor:
        enforce(actor, action)
        return actor
    return check_action


job_poster = _action_required(Action.JOB_CREATE)
employer_jobs_viewer = _action_required(Action.JOB_LIST_OWN)
jobseeker_only = _action_required(Action.APPLICATION_CREATE)
own_applications_viewer = _action_required(Action.APPLICATION_LIST_OWN)

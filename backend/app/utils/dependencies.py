import logging

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from ..database import get_db
from ..models.user import User
from ..services.policy import Actor
from .error_handlers import UnauthorizedError, get_error_message
from .jwt import decode_access_token

logger = logging.getLogger(__name__)

_bearer = HTTPBearer(auto_error=False)


def _user_from_token(db: Session, token: str) -> User | None:
    claims = decode_access_token(token)
    if not claims:
        return None
    try:
        user_id = int(claims.get("sub"))
    except (TypeError, ValueError):
        return None
    return db.query(User).filter(User.id == user_id).first()


def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(_bearer),
    db: Session = Depends(get_db),
) -> User:
    """Resolve the bearer token to a User; anything else is NotAuthenticated."""
    if credentials is None or not credentials.credentials:
        raise UnauthorizedError(get_error_message("unauthorized"))
    user = _user_from_token(db, credentials.credentials)
    if user is None:
        logger.info("Rejected bearer token (invalid, expired or unknown user)")
        raise UnauthorizedError(get_error_message("session_expired"))
    return user


def get_optional_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(_bearer),
    db: Session = Depends(get_db),
) -> User | None:
    """Like get_current_user, but anonymous callers get None instead of a 401."""
    if credentials is None or not credentials.credentials:
        return None
    return _user_from_token(db, credentials.credentials)


def get_current_actor(user: User = Depends(get_current_user)) -> Actor:
    return Actor.from_user(user)

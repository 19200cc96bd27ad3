import logging
from datetime import datetime, timezone

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError
from sqlalchemy.orm import Session

from medtrack.core.errors import InvalidRole
from medtrack.core.security import decode_subject
from medtrack.db.deps import get_db
from medtrack.models.enums import Role
from medtrack.models.user import User
from medtrack.repositories.user_repo import get_by_email
from medtrack.services import access_policy, user_service

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


def get_bearer_token(creds: HTTPAuthorizationCredentials | None = Depends(bearer_scheme)) -> str:
    if creds is None or not creds.credentials:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authenticated")
    if creds.scheme.lower() != "bearer":
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid auth scheme")
    return creds.credentials


def get_current_user(db: Session = Depends(get_db), token: str = Depends(get_bearer_token)) -> User:
    try:
        email = decode_subject(token)
    except JWTError:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token")
    if not email:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token")

    user = get_by_email(db, email)
    if not user:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="User not found")
    return user


def get_current_role_list(db: Session = Depends(get_db), user: User = Depends(get_current_user)) -> list[Role]:
    try:
        return user_service.current_roles(db, user)
    except InvalidRole as exc:
        logger.warning("Rejected stored role for %s: %s", user.email, exc)
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Stored role is not recognised")


def get_current_roles(roles: list[Role] = Depends(get_current_role_list)) -> frozenset[Role]:
    return frozenset(roles)


def get_now() -> datetime:
    return datetime.now(timezone.utc)


def require_roles(*required: Role):
    def _checker(roles: frozenset[Role] = Depends(get_current_roles)) -> frozenset[Role]:
        if not access_policy.can_access(roles, required):
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Insufficient permissions")
        return roles
    return _checker

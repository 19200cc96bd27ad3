from sqlalchemy.orm import Session

from medtrack.core.security import create_access_token, hash_password, verify_password
from medtrack.repositories.user_repo import create_user, get_by_email


class AuthError(Exception):
    pass


def register(db: Session, email: str, password: str, full_name: str = "") -> str:
    """Create an account without any role; an admin assigns one later."""
    if get_by_email(db, email):
        raise AuthError("Email already registered")

    user = create_user(db, email=email, password_hash=hash_password(password), full_name=full_name)
    return create_access_token(subject=user.email)


def login(db: Session, email: str, password: str) -> str:
    user = get_by_email(db, email)
    if not user or not verify_password(password, user.password_hash):
        raise AuthError("Invalid credentials")

    return create_access_token(subject=user.email)

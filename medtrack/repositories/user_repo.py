from typing import Iterable

from sqlalchemy import select
from sqlalchemy.orm import Session

from medtrack.models.user import User


def normalize_email(email: str) -> str:
    return email.lower().strip()


def get(db: Session, user_id: str) -> User | None:
    return db.get(User, user_id)


def get_by_email(db: Session, email: str) -> User | None:
    return db.scalar(select(User).where(User.email == normalize_email(email)))


def list_users(db: Session) -> Iterable[User]:
    return db.scalars(select(User).order_by(User.created_at.desc(), User.email.asc())).all()


def create_user(db: Session, *, email: str, password_hash: str, full_name: str = "") -> User:
    user = User(
        email=normalize_email(email),
        full_name=full_name.strip(),
        password_hash=password_hash,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user

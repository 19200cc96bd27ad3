from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from medtrack.db.base import as_text
from medtrack.models.enums import Role
from medtrack.models.user import UserRoleAssignment


def list_roles(db: Session, user_id: str) -> list[str]:
    """Stored role strings in assignment order, unvalidated."""
    return list(
        db.scalars(
            select(as_text(UserRoleAssignment.role))
            .where(UserRoleAssignment.user_id == user_id)
            .order_by(UserRoleAssignment.id.asc())
        ).all()
    )


def add_role(db: Session, user_id: str, role: Role, *, commit: bool = True) -> bool:
    existing = db.scalar(
        select(UserRoleAssignment).where(
            UserRoleAssignment.user_id == user_id,
            UserRoleAssignment.role == role,
        )
    )
    if existing:
        return False
    db.add(UserRoleAssignment(user_id=user_id, role=role))
    if commit:
        db.commit()
    else:
        db.flush()
    return True


def remove_role(db: Session, user_id: str, role: Role, *, commit: bool = True) -> bool:
    result = db.execute(
        delete(UserRoleAssignment).where(
            UserRoleAssignment.user_id == user_id,
            UserRoleAssignment.role == role,
        )
    )
    if commit:
        db.commit()
    return result.rowcount > 0


def replace_roles(db: Session, user_id: str, role: Role, *, commit: bool = True) -> None:
    db.execute(delete(UserRoleAssignment).where(UserRoleAssignment.user_id == user_id))
    db.add(UserRoleAssignment(user_id=user_id, role=role))
    if commit:
        db.commit()
    else:
        db.flush()

import logging
from typing import Iterable

from sqlalchemy.orm import Session

from medtrack.core.errors import MedTrackError
from medtrack.models.enums import ActionType, Entity, Role
from medtrack.models.user import User
from medtrack.repositories import audit_log_repo, role_repo, user_repo
from medtrack.services import access_policy


logger = logging.getLogger(__name__)


class UserError(MedTrackError):
    pass


def get_user_or_fail(db: Session, user_id: str) -> User:
    user = user_repo.get(db, user_id)
    if not user:
        raise UserError("User not found")
    return user


def current_roles(db: Session, user: User) -> list[Role]:
    """Roles in assignment order, validated against the closed role set."""
    return [access_policy.parse_role(r) for r in role_repo.list_roles(db, user.id)]


def list_users_with_roles(db: Session, *, roles: Iterable) -> list[tuple[User, list[Role]]]:
    access_policy.ensure_access(roles, access_policy.USER_MANAGERS, "manage users")
    return [(u, current_roles(db, u)) for u in user_repo.list_users(db)]


def _audit_role_change(db: Session, actor: User, target: User, action: ActionType, role: Role) -> None:
    audit_log_repo.create_log(
        db,
        entity=Entity.USER_ROLE,
        action=action,
        user_id=actor.id,
        details=f"user_id={target.id} role={role.value}",
        commit=False,
    )
    db.commit()
    logger.info("Role %s %s for %s by %s", role.value, action.value.lower(), target.email, actor.email)


def assign_role(db: Session, *, actor: User, roles: Iterable, user_id: str, role) -> list[Role]:
    """Replace every role of ``user_id`` with ``role``."""
    access_policy.ensure_access(roles, access_policy.USER_MANAGERS, "assign roles")
    new_role = access_policy.parse_role(role)
    target = get_user_or_fail(db, user_id)
    role_repo.replace_roles(db, target.id, new_role, commit=False)
    _audit_role_change(db, actor, target, ActionType.UPDATE, new_role)
    return current_roles(db, target)


def grant_role(db: Session, *, actor: User, roles: Iterable, user_id: str, role) -> list[Role]:
    access_policy.ensure_access(roles, access_policy.USER_MANAGERS, "grant roles")
    new_role = access_policy.parse_role(role)
    target = get_user_or_fail(db, user_id)
    if role_repo.add_role(db, target.id, new_role, commit=False):
        _audit_role_change(db, actor, target, ActionType.CREATE, new_role)
    return current_roles(db, target)


def revoke_role(db: Session, *, actor: User, roles: Iterable, user_id: str, role) -> list[Role]:
    access_policy.ensure_access(roles, access_policy.USER_MANAGERS, "revoke roles")
    old_role = access_policy.parse_role(role)
    target = get_user_or_fail(db, user_id)
    if role_repo.remove_role(db, target.id, old_role, commit=False):
        _audit_role_change(db, actor, target, ActionType.DELETE, old_role)
    return current_roles(db, target)

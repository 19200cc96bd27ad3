from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from medtrack.api.deps import get_current_role_list, get_current_roles, get_current_user
from medtrack.api.errors import to_http_error
from medtrack.core.errors import MedTrackError
from medtrack.db.deps import get_db
from medtrack.models.enums import Role
from medtrack.models.user import User
from medtrack.schemas.user import (
    NavigationItemResponse,
    RoleAssignRequest,
    RolesResponse,
    UserListResponse,
    UserMeResponse,
    UserWithRolesResponse,
)
from medtrack.services import access_policy, user_service

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/me", response_model=UserMeResponse)
def me(user: User = Depends(get_current_user), roles: list[Role] = Depends(get_current_role_list)):
    primary = access_policy.primary_role(roles)
    return UserMeResponse(
        id=user.id,
        email=user.email,
        full_name=user.full_name,
        roles=roles,
        primary_role=primary,
        role_label=access_policy.ROLE_LABELS[primary] if primary else "No role",
    )


@router.get("/me/navigation", response_model=list[NavigationItemResponse])
def my_navigation(roles: frozenset[Role] = Depends(get_current_roles)):
    return [
        NavigationItemResponse(
            path=item.path,
            label=item.label,
            required_roles=sorted(item.required_roles, key=list(Role).index),
        )
        for item in access_policy.visible_navigation(roles)
    ]


@router.get("/", response_model=UserListResponse)
def list_users(db: Session = Depends(get_db), roles: frozenset[Role] = Depends(get_current_roles)):
    try:
        rows = user_service.list_users_with_roles(db, roles=roles)
    except MedTrackError as exc:
        raise to_http_error(exc)
    items = [
        UserWithRolesResponse(
            id=u.id,
            email=u.email,
            full_name=u.full_name,
            roles=user_roles,
            created_at=u.created_at,
        )
        for u, user_roles in rows
    ]
    return UserListResponse(items=items, total=len(items))


@router.put("/{user_id}/role", response_model=RolesResponse)
def assign_role(
    user_id: str,
    payload: RoleAssignRequest,
    db: Session = Depends(get_db),
    actor: User = Depends(get_current_user),
    roles: frozenset[Role] = Depends(get_current_roles),
):
    try:
        assigned = user_service.assign_role(db, actor=actor, roles=roles, user_id=user_id, role=payload.role)
    except MedTrackError as exc:
        raise to_http_error(exc)
    return RolesResponse(user_id=user_id, roles=assigned)


@router.post("/{user_id}/roles", response_model=RolesResponse)
def grant_role(
    user_id: str,
    payload: RoleAssignRequest,
    db: Session = Depends(get_db),
    actor: User = Depends(get_current_user),
    roles: frozenset[Role] = Depends(get_current_roles),
):
    try:
        granted = user_service.grant_role(db, actor=actor, roles=roles, user_id=user_id, role=payload.role)
    except MedTrackError as exc:
        raise to_http_error(exc)
    return RolesResponse(user_id=user_id, roles=granted)


@router.delete("/{user_id}/roles/{role}", response_model=RolesResponse)
def revoke_role(
    user_id: str,
    role: str,
    db: Session = Depends(get_db),
    actor: User = Depends(get_current_user),
    roles: frozenset[Role] = Depends(get_current_roles),
):
    try:
        remaining = user_service.revoke_role(db, actor=actor, roles=roles, user_id=user_id, role=role)
    except MedTrackError as exc:
        raise to_http_error(exc)
    return RolesResponse(user_id=user_id, roles=remaining)

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from medtrack.api.deps import require_roles
from medtrack.db.deps import get_db
from medtrack.models.enums import ActionType, Entity
from medtrack.repositories import audit_log_repo
from medtrack.schemas.audit_log import AuditLogListResponse
from medtrack.services import access_policy

router = APIRouter(prefix="/audit", tags=["audit"])


@router.get(
    "/",
    response_model=AuditLogListResponse,
    dependencies=[Depends(require_roles(*access_policy.USER_MANAGERS))],
)
def list_audit_logs(
    db: Session = Depends(get_db),
    entity: Entity | None = Query(None),
    action: ActionType | None = Query(None),
    user_id: str | None = Query(None),
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
):
    items, total = audit_log_repo.list_logs(
        db,
        entity=entity,
        action=action,
        user_id=user_id,
        limit=limit,
        offset=offset,
    )
    return AuditLogListResponse(items=items, total=total, limit=limit, offset=offset)

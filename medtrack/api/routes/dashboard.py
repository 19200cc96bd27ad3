from datetime import datetime

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from medtrack.api.deps import get_now, require_roles
from medtrack.api.errors import to_http_error
from medtrack.core.errors import MedTrackError
from medtrack.db.deps import get_db
from medtrack.schemas.dashboard import SummaryResponse
from medtrack.schemas.order import OrderResponse
from medtrack.services import access_policy, dashboard_service

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get("/summary", response_model=SummaryResponse, dependencies=[Depends(require_roles(*access_policy.ALL_ROLES))])
def summary(
    db: Session = Depends(get_db),
    now: datetime = Depends(get_now),
    recent_limit: int | None = Query(None, ge=0, le=50),
):
    try:
        stats = dashboard_service.build_summary(db, now, recent_limit)
    except MedTrackError as exc:
        raise to_http_error(exc)
    return SummaryResponse(
        total_items=stats.total_items,
        low_stock_count=stats.low_stock_count,
        expiring_count=stats.expiring_count,
        pending_orders=stats.pending_orders,
        total_value=stats.total_value,
        recent_orders=[OrderResponse.model_validate(o) for o in stats.recent_orders],
    )

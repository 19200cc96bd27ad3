from datetime import datetime

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from medtrack.api.deps import get_now, require_roles
from medtrack.core.config import settings
from medtrack.db.deps import get_db
from medtrack.schemas.alert import AlertItem, AlertsResponse, ExpiryAlertItem, SkippedRecord
from medtrack.services import access_policy, dashboard_service

router = APIRouter(prefix="/alerts", tags=["alerts"])


@router.get("/", response_model=AlertsResponse, dependencies=[Depends(require_roles(*access_policy.ALERT_VIEWERS))])
def list_alerts(db: Session = Depends(get_db), now: datetime = Depends(get_now)):
    report = dashboard_service.build_alert_report(db, now)
    return AlertsResponse(
        low_stock=[AlertItem.model_validate(item) for item in report.low_stock],
        expiring=[
            ExpiryAlertItem(
                **AlertItem.model_validate(entry.item).model_dump(),
                days_until_expiry=entry.days_until_expiry,
                expired=entry.expired,
            )
            for entry in report.expiring
        ],
        skipped=[SkippedRecord(record_id=r.record_id, reason=r.reason) for r in report.skipped],
        window_days=settings.expiry_window_days,
    )

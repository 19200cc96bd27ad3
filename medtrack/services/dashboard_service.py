from dataclasses import dataclass
from datetime import datetime

from sqlalchemy.orm import Session

from medtrack.core.config import settings
from medtrack.schemas.snapshot import InventoryItem
from medtrack.services import alert_engine, snapshot_service
from medtrack.services.snapshot_service import RejectedRecord


@dataclass(frozen=True)
class ExpiryEntry:
    item: InventoryItem
    days_until_expiry: int
    expired: bool


@dataclass(frozen=True)
class AlertReport:
    low_stock: list[InventoryItem]
    expiring: list[ExpiryEntry]
    skipped: list[RejectedRecord]


def build_alert_report(db: Session, now: datetime) -> AlertReport:
    snapshot = snapshot_service.load_inventory(db, skip_invalid=True)
    classification = alert_engine.classify(snapshot.items, now, settings.expiry_window_days)
    expiring = [
        ExpiryEntry(
            item=item,
            days_until_expiry=alert_engine.days_until_expiry(item, now),
            expired=alert_engine.is_expired(item, now),
        )
        for item in classification.expiring_or_expired
    ]
    return AlertReport(low_stock=classification.low_stock, expiring=expiring, skipped=snapshot.rejected)


def build_summary(db: Session, now: datetime, recent_limit: int | None = None) -> alert_engine.SummaryStats:
    inventory = snapshot_service.load_inventory(db)
    orders = snapshot_service.load_orders(db)
    limit = settings.recent_orders_limit if recent_limit is None else recent_limit
    return alert_engine.aggregate(
        inventory.items,
        orders.items,
        now,
        recent_limit=limit,
        window_days=settings.expiry_window_days,
    )

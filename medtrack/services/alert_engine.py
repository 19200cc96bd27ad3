"""Stock and expiry alerts derived from an inventory snapshot.

All functions take the reference instant explicitly and compare expiry at
calendar-day granularity: the time-of-day part of ``now`` never matters.
"""
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from decimal import Decimal
from typing import Sequence

from medtrack.core.errors import InvalidData
from medtrack.models.enums import AlertKind, OrderStatus
from medtrack.schemas.snapshot import InventoryItem, OrderRecord


EXPIRY_WINDOW_DAYS = 30
RECENT_ORDERS_LIMIT = 5


@dataclass(frozen=True)
class AlertClassification:
    low_stock: list[InventoryItem] = field(default_factory=list)
    expiring_or_expired: list[InventoryItem] = field(default_factory=list)


@dataclass(frozen=True)
class ItemStatus:
    low_stock: bool
    expiring_soon: bool
    expired: bool
    days_until_expiry: int
    alerts: frozenset[AlertKind] = frozenset()


@dataclass(frozen=True)
class SummaryStats:
    total_items: int
    low_stock_count: int
    expiring_count: int
    pending_orders: int
    total_value: Decimal
    recent_orders: list[OrderRecord]


def _reference_date(now) -> date:
    if isinstance(now, datetime):
        return now.date()
    if isinstance(now, date):
        return now
    raise InvalidData(f"Reference time is not a date or datetime: {now!r}")


def _expiry_of(item: InventoryItem) -> date:
    expiry = item.expiry_date
    # datetime is a date subclass; a timestamp here means the record skipped validation
    if not isinstance(expiry, date) or isinstance(expiry, datetime):
        raise InvalidData(f"Malformed expiry date: {expiry!r}", record_id=item.id)
    return expiry


def is_low_stock(item: InventoryItem) -> bool:
    return item.quantity_on_hand <= item.reorder_level


def expiry_horizon(now, window_days: int = EXPIRY_WINDOW_DAYS) -> date:
    return _reference_date(now) + timedelta(days=window_days)


def is_expiring_soon(item: InventoryItem, now, window_days: int = EXPIRY_WINDOW_DAYS) -> bool:
    return _expiry_of(item) <= expiry_horizon(now, window_days)


def days_until_expiry(item: InventoryItem, now) -> int:
    # Whole calendar days, so any part of a day left already counts as one.
    return (_expiry_of(item) - _reference_date(now)).days


def is_expired(item: InventoryItem, now) -> bool:
    return days_until_expiry(item, now) <= 0


def item_alerts(item: InventoryItem, now, window_days: int = EXPIRY_WINDOW_DAYS) -> set[AlertKind]:
    kinds: set[AlertKind] = set()
    if is_low_stock(item):
        kinds.add(AlertKind.LOW_STOCK)
    if is_expired(item, now):
        kinds.add(AlertKind.EXPIRED)
    elif is_expiring_soon(item, now, window_days):
        kinds.add(AlertKind.EXPIRING_SOON)
    return kinds


def item_status(item: InventoryItem, now, window_days: int = EXPIRY_WINDOW_DAYS) -> ItemStatus:
    return ItemStatus(
        low_stock=is_low_stock(item),
        expiring_soon=is_expiring_soon(item, now, window_days),
        expired=is_expired(item, now),
        days_until_expiry=days_until_expiry(item, now),
        alerts=frozenset(item_alerts(item, now, window_days)),
    )


def classify(items: Sequence[InventoryItem], now, window_days: int = EXPIRY_WINDOW_DAYS) -> AlertClassification:
    return AlertClassification(
        low_stock=[i for i in items if is_low_stock(i)],
        expiring_or_expired=[i for i in items if is_expiring_soon(i, now, window_days)],
    )


def inventory_value(items: Sequence[InventoryItem]) -> Decimal:
    return sum((Decimal(i.quantity_on_hand) * i.unit_price for i in items), Decimal("0"))


def recent_orders(orders: Sequence[OrderRecord], limit: int = RECENT_ORDERS_LIMIT) -> list[OrderRecord]:
    # sorted() stays stable with reverse=True, so equal timestamps keep input order
    return sorted(orders, key=lambda o: o.created_at, reverse=True)[:limit]


def aggregate(
    items: Sequence[InventoryItem],
    orders: Sequence[OrderRecord],
    now,
    recent_limit: int = RECENT_ORDERS_LIMIT,
    window_days: int = EXPIRY_WINDOW_DAYS,
) -> SummaryStats:
    if recent_limit < 0:
        raise InvalidData(f"recent_limit must be non-negative, got {recent_limit}")
    classification = classify(items, now, window_days)
    return SummaryStats(
        total_items=len(items),
        low_stock_count=len(classification.low_stock),
        expiring_count=len(classification.expiring_or_expired),
        pending_orders=sum(1 for o in orders if o.status == OrderStatus.PENDING),
        total_value=inventory_value(items),
        recent_orders=recent_orders(orders, recent_limit),
    )

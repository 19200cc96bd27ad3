from decimal import Decimal
from typing import Any, Tuple

from sqlalchemy import func, or_, select
from sqlalchemy.orm import Session

from medtrack.db.base import as_text
from medtrack.models.enums import OrderStatus, OrderType
from medtrack.models.order import Order

RECORD_COLUMNS = (
    Order.id,
    as_text(Order.order_type),
    as_text(Order.status),
    as_text(Order.total_amount),
    Order.notes,
    Order.created_by,
    Order.created_at,
)


def get(db: Session, order_id: str) -> Order | None:
    return db.get(Order, order_id)


def get_record(db: Session, order_id: str) -> dict[str, Any] | None:
    row = db.execute(select(*RECORD_COLUMNS).where(Order.id == order_id)).mappings().first()
    return dict(row) if row else None


def list_orders(
    db: Session,
    *,
    search: str | None = None,
    status: OrderStatus | None = None,
    limit: int = 50,
    offset: int = 0,
) -> Tuple[list[dict[str, Any]], int]:
    """Raw order records, newest first, with the unpaginated total."""
    filters = []
    if search:
        filters.append(
            or_(
                Order.id.contains(search),
                Order.notes.ilike(f"%{search}%"),
            )
        )
    if status is not None:
        filters.append(Order.status == status)

    stmt = select(*RECORD_COLUMNS).where(*filters).order_by(Order.created_at.desc(), Order.id.asc())
    total = db.scalar(select(func.count()).select_from(stmt.subquery())) or 0
    rows = db.execute(stmt.offset(offset).limit(limit)).mappings()
    return [dict(row) for row in rows], total


def list_records_oldest_first(db: Session) -> list[dict[str, Any]]:
    # Ties on created_at keep insertion order once sorted newest first downstream
    stmt = select(*RECORD_COLUMNS).order_by(Order.created_at.asc(), Order.id.asc())
    return [dict(row) for row in db.execute(stmt).mappings()]


def create_order(
    db: Session,
    *,
    order_type: OrderType,
    total_amount: Decimal,
    notes: str,
    created_by: str,
    status: OrderStatus = OrderStatus.PENDING,
) -> Order:
    order = Order(
        order_type=order_type,
        status=status,
        total_amount=total_amount,
        notes=notes,
        created_by=created_by,
    )
    db.add(order)
    db.commit()
    db.refresh(order)
    return order


def set_status(db: Session, order: Order, status: OrderStatus, *, commit: bool = True) -> Order:
    order.status = status
    db.add(order)
    if commit:
        db.commit()
        db.refresh(order)
    else:
        db.flush()
    return order

from datetime import date
from decimal import Decimal
from typing import Any, Tuple

from sqlalchemy import func, or_, select
from sqlalchemy.orm import Session

from medtrack.db.base import as_text
from medtrack.models.medicine import Medicine

# Date and Numeric columns are read as text; the snapshot layer validates them.
RECORD_COLUMNS = (
    Medicine.id,
    Medicine.name,
    Medicine.batch_no,
    Medicine.category,
    Medicine.manufacturer,
    as_text(Medicine.expiry_date),
    Medicine.quantity,
    as_text(Medicine.unit_price),
    Medicine.reorder_level,
    Medicine.supplier_id,
    Medicine.created_at,
)


def get(db: Session, medicine_id: str) -> Medicine | None:
    return db.get(Medicine, medicine_id)


def get_record(db: Session, medicine_id: str) -> dict[str, Any] | None:
    row = db.execute(select(*RECORD_COLUMNS).where(Medicine.id == medicine_id)).mappings().first()
    return dict(row) if row else None


def list_medicines(
    db: Session,
    *,
    search: str | None = None,
    limit: int | None = None,
    offset: int = 0,
) -> Tuple[list[dict[str, Any]], int]:
    """Raw medicine records ordered by name, with the unpaginated total."""
    filters = []
    if search:
        pattern = f"%{search.strip()}%"
        filters.append(
            or_(
                Medicine.name.ilike(pattern),
                Medicine.batch_no.ilike(pattern),
                Medicine.category.ilike(pattern),
            )
        )

    stmt = select(*RECORD_COLUMNS).where(*filters).order_by(Medicine.name.asc(), Medicine.id.asc())
    total = db.scalar(select(func.count()).select_from(stmt.subquery())) or 0
    if offset:
        stmt = stmt.offset(offset)
    if limit is not None:
        stmt = stmt.limit(limit)
    return [dict(row) for row in db.execute(stmt).mappings()], total


def create_medicine(
    db: Session,
    *,
    name: str,
    batch_no: str,
    category: str,
    manufacturer: str,
    expiry_date: date,
    quantity: int,
    unit_price: Decimal,
    reorder_level: int,
    supplier_id: str | None,
) -> Medicine:
    medicine = Medicine(
        name=name,
        batch_no=batch_no,
        category=category,
        manufacturer=manufacturer,
        expiry_date=expiry_date,
        quantity=quantity,
        unit_price=unit_price,
        reorder_level=reorder_level,
        supplier_id=supplier_id,
    )
    db.add(medicine)
    db.commit()
    db.refresh(medicine)
    return medicine


def update_medicine(db: Session, medicine: Medicine, **changes) -> Medicine:
    for name, value in changes.items():
        if value is not None:
            setattr(medicine, name, value)
    db.add(medicine)
    db.commit()
    db.refresh(medicine)
    return medicine


def delete_medicine(db: Session, medicine: Medicine) -> None:
    db.delete(medicine)
    db.commit()

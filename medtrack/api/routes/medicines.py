from datetime import datetime
from typing import Any, Mapping

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from sqlalchemy.orm import Session

from medtrack.api.deps import get_current_roles, get_current_user, get_now, require_roles
from medtrack.api.errors import to_http_error
from medtrack.core.config import settings
from medtrack.core.errors import MedTrackError
from medtrack.db.deps import get_db
from medtrack.models.enums import AlertKind, Role
from medtrack.models.medicine import Medicine
from medtrack.models.user import User
from medtrack.repositories import medicine_repo
from medtrack.schemas.medicine import (
    MedicineCreate,
    MedicineListResponse,
    MedicineResponse,
    MedicineStatus,
    MedicineUpdate,
)
from medtrack.services import access_policy, alert_engine, inventory_service, snapshot_service

router = APIRouter(prefix="/medicines", tags=["medicines"])

read_access = require_roles(*access_policy.ALL_ROLES)


def _to_response(record: Mapping[str, Any], now: datetime) -> MedicineResponse:
    try:
        item = snapshot_service.parse_inventory_item(record)
    except MedTrackError as exc:
        raise to_http_error(exc)
    item_status = alert_engine.item_status(item, now, settings.expiry_window_days)
    return MedicineResponse(
        id=item.id,
        name=item.name,
        batch_no=item.batch_number,
        category=item.category,
        manufacturer=item.manufacturer,
        expiry_date=item.expiry_date,
        quantity=item.quantity_on_hand,
        unit_price=item.unit_price,
        reorder_level=item.reorder_level,
        supplier_id=record["supplier_id"],
        created_at=record["created_at"],
        status=MedicineStatus(
            low_stock=item_status.low_stock,
            expiring_soon=item_status.expiring_soon,
            expired=item_status.expired,
            days_until_expiry=item_status.days_until_expiry,
            alerts=sorted(item_status.alerts, key=list(AlertKind).index),
        ),
    )


def _reload(db: Session, medicine: Medicine, now: datetime) -> MedicineResponse:
    return _to_response(medicine_repo.get_record(db, medicine.id), now)


@router.get("/", response_model=MedicineListResponse, dependencies=[Depends(read_access)])
def list_medicines(
    db: Session = Depends(get_db),
    now: datetime = Depends(get_now),
    search: str | None = Query(None, max_length=100),
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
):
    items, total = medicine_repo.list_medicines(db, search=search, limit=limit, offset=offset)
    return MedicineListResponse(
        items=[_to_response(m, now) for m in items],
        total=total,
        limit=limit,
        offset=offset,
    )


@router.get("/{medicine_id}", response_model=MedicineResponse, dependencies=[Depends(read_access)])
def get_medicine(medicine_id: str, db: Session = Depends(get_db), now: datetime = Depends(get_now)):
    record = medicine_repo.get_record(db, medicine_id)
    if not record:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Medicine not found")
    return _to_response(record, now)


@router.post("/", response_model=MedicineResponse, status_code=status.HTTP_201_CREATED)
def create_medicine(
    payload: MedicineCreate,
    db: Session = Depends(get_db),
    now: datetime = Depends(get_now),
    user: User = Depends(get_current_user),
    roles: frozenset[Role] = Depends(get_current_roles),
):
    try:
        medicine = inventory_service.create_medicine(db, user=user, roles=roles, **payload.model_dump())
    except MedTrackError as exc:
        raise to_http_error(exc)
    return _reload(db, medicine, now)


@router.patch("/{medicine_id}", response_model=MedicineResponse)
def update_medicine(
    medicine_id: str,
    payload: MedicineUpdate,
    db: Session = Depends(get_db),
    now: datetime = Depends(get_now),
    user: User = Depends(get_current_user),
    roles: frozenset[Role] = Depends(get_current_roles),
):
    try:
        medicine = inventory_service.update_medicine(
            db,
            user=user,
            roles=roles,
            medicine_id=medicine_id,
            **payload.model_dump(exclude_unset=True),
        )
    except MedTrackError as exc:
        raise to_http_error(exc)
    return _reload(db, medicine, now)


@router.delete("/{medicine_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_medicine(
    medicine_id: str,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
    roles: frozenset[Role] = Depends(get_current_roles),
):
    try:
        inventory_service.delete_medicine(db, user=user, roles=roles, medicine_id=medicine_id)
    except MedTrackError as exc:
        raise to_http_error(exc)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

from typing import Any, Mapping

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from medtrack.api.deps import get_current_roles, get_current_user, require_roles
from medtrack.api.errors import to_http_error
from medtrack.core.errors import MedTrackError
from medtrack.db.deps import get_db
from medtrack.models.enums import OrderStatus, Role
from medtrack.models.user import User
from medtrack.repositories import order_repo
from medtrack.schemas.order import (
    OrderCreate,
    OrderListResponse,
    OrderResponse,
    OrderStatusUpdate,
    OrderTransitionsResponse,
)
from medtrack.services import access_policy, order_service, order_workflow, snapshot_service

router = APIRouter(prefix="/orders", tags=["orders"])

read_access = require_roles(*access_policy.ALL_ROLES)


def _to_response(record: Mapping[str, Any]) -> OrderResponse:
    try:
        return OrderResponse.model_validate(snapshot_service.parse_order(record))
    except MedTrackError as exc:
        raise to_http_error(exc)


def _get_record_or_404(db: Session, order_id: str) -> Mapping[str, Any]:
    record = order_repo.get_record(db, order_id)
    if not record:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Order not found")
    return record


@router.get("/", response_model=OrderListResponse, dependencies=[Depends(read_access)])
def list_orders(
    db: Session = Depends(get_db),
    search: str | None = Query(None, max_length=100),
    order_status: OrderStatus | None = Query(None, alias="status"),
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
):
    records, total = order_repo.list_orders(db, search=search, status=order_status, limit=limit, offset=offset)
    items = [_to_response(r) for r in records]
    return OrderListResponse(items=items, total=total, limit=limit, offset=offset)


@router.get("/{order_id}", response_model=OrderResponse, dependencies=[Depends(read_access)])
def get_order(order_id: str, db: Session = Depends(get_db)):
    return _to_response(_get_record_or_404(db, order_id))


@router.get("/{order_id}/transitions", response_model=OrderTransitionsResponse, dependencies=[Depends(read_access)])
def get_transitions(order_id: str, db: Session = Depends(get_db)):
    order = _to_response(_get_record_or_404(db, order_id))
    return OrderTransitionsResponse(
        order_id=order.id,
        status=order.status,
        allowed=order_workflow.next_statuses(order.status),
        terminal=order_workflow.is_terminal(order.status),
    )


@router.post("/", response_model=OrderResponse, status_code=status.HTTP_201_CREATED)
def create_order(
    payload: OrderCreate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
    roles: frozenset[Role] = Depends(get_current_roles),
):
    try:
        return order_service.create_order(
            db,
            user=user,
            roles=roles,
            order_type=payload.order_type,
            total_amount=payload.total_amount,
            notes=payload.notes,
        )
    except MedTrackError as exc:
        raise to_http_error(exc)


@router.post("/{order_id}/status", response_model=OrderResponse)
def change_status(
    order_id: str,
    payload: OrderStatusUpdate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
    roles: frozenset[Role] = Depends(get_current_roles),
):
    try:
        return order_service.change_status(db, user=user, roles=roles, order_id=order_id, target=payload.status)
    except MedTrackError as exc:
        raise to_http_error(exc)

import logging
from decimal import Decimal
from typing import Iterable

from sqlalchemy.orm import Session

from medtrack.core.errors import MedTrackError
from medtrack.models.enums import ActionType, Entity, OrderStatus, OrderType
from medtrack.models.order import Order
from medtrack.models.user import User
from medtrack.repositories import audit_log_repo, order_repo
from medtrack.services import access_policy, order_workflow


logger = logging.getLogger(__name__)


class OrderError(MedTrackError):
    """Domain errors for order operations."""


def get_order_or_fail(db: Session, order_id: str) -> Order:
    order = order_repo.get(db, order_id)
    if not order:
        raise OrderError("Order not found")
    return order


def create_order(
    db: Session,
    *,
    user: User,
    roles: Iterable,
    order_type: OrderType,
    total_amount: Decimal,
    notes: str = "",
) -> Order:
    access_policy.ensure_access(roles, access_policy.ORDER_CREATORS, "create orders")
    order = order_repo.create_order(
        db,
        order_type=order_type,
        total_amount=total_amount,
        notes=notes,
        created_by=user.id,
        status=order_workflow.INITIAL_STATUS,
    )
    audit_log_repo.create_log(
        db,
        entity=Entity.ORDER,
        action=ActionType.CREATE,
        user_id=user.id,
        details=f"order_id={order.id} type={order.order_type.value}",
    )
    return order


def change_status(db: Session, *, user: User, roles: Iterable, order_id: str, target: OrderStatus) -> Order:
    order = get_order_or_fail(db, order_id)
    previous = order.status
    order_workflow.validate_transition(previous, target, roles)

    order_repo.set_status(db, order, target, commit=False)
    audit_log_repo.create_log(
        db,
        entity=Entity.ORDER,
        action=ActionType.UPDATE,
        user_id=user.id,
        details=f"order_id={order.id} status={previous.value}->{target.value}",
        commit=False,
    )
    db.commit()
    db.refresh(order)
    logger.info("Order %s moved %s -> %s by %s", order.id, previous.value, target.value, user.email)
    return order

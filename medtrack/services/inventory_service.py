import logging
from datetime import date
from decimal import Decimal
from typing import Iterable

from sqlalchemy.orm import Session

from medtrack.core.errors import MedTrackError
from medtrack.models.enums import ActionType, Entity
from medtrack.models.medicine import Medicine
from medtrack.models.user import User
from medtrack.repositories import audit_log_repo, medicine_repo
from medtrack.services import access_policy


logger = logging.getLogger(__name__)


class InventoryError(MedTrackError):
    """Domain errors for medicine operations."""


def get_medicine_or_fail(db: Session, medicine_id: str) -> Medicine:
    medicine = medicine_repo.get(db, medicine_id)
    if not medicine:
        raise InventoryError("Medicine not found")
    return medicine


def create_medicine(
    db: Session,
    *,
    user: User,
    roles: Iterable,
    name: str,
    batch_no: str,
    category: str,
    manufacturer: str,
    expiry_date: date,
    quantity: int,
    unit_price: Decimal,
    reorder_level: int,
) -> Medicine:
    access_policy.ensure_access(roles, access_policy.INVENTORY_EDITORS, "add medicines")
    medicine = medicine_repo.create_medicine(
        db,
        name=name,
        batch_no=batch_no,
        category=category,
        manufacturer=manufacturer,
        expiry_date=expiry_date,
        quantity=quantity,
        unit_price=unit_price,
        reorder_level=reorder_level,
        supplier_id=user.id,
    )
    audit_log_repo.create_log(
        db,
        entity=Entity.MEDICINE,
        action=ActionType.CREATE,
        user_id=user.id,
        details=f"medicine_id={medicine.id} batch={medicine.batch_no}",
    )
    return medicine


def update_medicine(db: Session, *, user: User, roles: Iterable, medicine_id: str, **changes) -> Medicine:
    access_policy.ensure_access(roles, access_policy.INVENTORY_EDITORS, "edit medicines")
    medicine = get_medicine_or_fail(db, medicine_id)
    updated = medicine_repo.update_medicine(db, medicine, **changes)
    changed = ",".join(sorted(k for k, v in changes.items() if v is not None))
    audit_log_repo.create_log(
        db,
        entity=Entity.MEDICINE,
        action=ActionType.UPDATE,
        user_id=user.id,
        details=f"medicine_id={updated.id} fields={changed}",
    )
    return updated


def delete_medicine(db: Session, *, user: User, roles: Iterable, medicine_id: str) -> None:
    access_policy.ensure_access(roles, access_policy.INVENTORY_EDITORS, "delete medicines")
    medicine = get_medicine_or_fail(db, medicine_id)
    details = f"medicine_id={medicine.id} batch={medicine.batch_no}"
    medicine_repo.delete_medicine(db, medicine)
    audit_log_repo.create_log(
        db,
        entity=Entity.MEDICINE,
        action=ActionType.DELETE,
        user_id=user.id,
        details=details,
    )
    logger.info("Medicine deleted: %s by %s", details, user.email)

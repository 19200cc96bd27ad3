"""Boundary between stored rows and the pure alerting core.

Rows are turned into frozen ``InventoryItem`` / ``OrderRecord`` entities here.
Malformed records either fail the whole load (``InvalidData``) or, with
``skip_invalid=True``, are left out and reported back to the caller.
"""
import logging
from dataclasses import dataclass, field
from typing import Any, Generic, Iterable, Mapping, TypeVar

from pydantic import BaseModel, ValidationError
from sqlalchemy.orm import Session

from medtrack.core.errors import InvalidData
from medtrack.repositories import medicine_repo, order_repo
from medtrack.schemas.snapshot import InventoryItem, OrderRecord


logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)


@dataclass(frozen=True)
class RejectedRecord:
    record_id: str | None
    reason: str


@dataclass
class Snapshot(Generic[T]):
    items: list[T] = field(default_factory=list)
    rejected: list[RejectedRecord] = field(default_factory=list)


def _describe(exc: ValidationError) -> str:
    return "; ".join(
        f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in exc.errors()
    )


def _parse(model: type[T], record: Mapping[str, Any]) -> T:
    try:
        return model.model_validate(dict(record))
    except ValidationError as exc:
        record_id = record.get("id")
        raise InvalidData(_describe(exc), record_id=str(record_id) if record_id is not None else None) from exc


def _parse_all(model: type[T], records: Iterable[Mapping[str, Any]], skip_invalid: bool) -> Snapshot[T]:
    snapshot: Snapshot[T] = Snapshot()
    for record in records:
        try:
            snapshot.items.append(_parse(model, record))
        except InvalidData as exc:
            if not skip_invalid:
                raise
            logger.warning("Skipping malformed %s record %s: %s", model.__name__, exc.record_id, exc)
            snapshot.rejected.append(RejectedRecord(record_id=exc.record_id, reason=str(exc)))
    return snapshot


def parse_inventory_item(record: Mapping[str, Any]) -> InventoryItem:
    return _parse(InventoryItem, record)


def parse_order(record: Mapping[str, Any]) -> OrderRecord:
    return _parse(OrderRecord, record)


def parse_inventory(records: Iterable[Mapping[str, Any]], *, skip_invalid: bool = False) -> Snapshot[InventoryItem]:
    return _parse_all(InventoryItem, records, skip_invalid)


def parse_orders(records: Iterable[Mapping[str, Any]], *, skip_invalid: bool = False) -> Snapshot[OrderRecord]:
    return _parse_all(OrderRecord, records, skip_invalid)


def load_inventory(db: Session, *, skip_invalid: bool = False) -> Snapshot[InventoryItem]:
    records, _ = medicine_repo.list_medicines(db)
    return parse_inventory(records, skip_invalid=skip_invalid)


def load_orders(db: Session, *, skip_invalid: bool = False) -> Snapshot[OrderRecord]:
    return parse_orders(order_repo.list_records_oldest_first(db), skip_invalid=skip_invalid)

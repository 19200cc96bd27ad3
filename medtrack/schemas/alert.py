from datetime import date
from decimal import Decimal

from pydantic import BaseModel, ConfigDict


class AlertItem(BaseModel):
    id: str
    name: str
    batch_number: str
    quantity_on_hand: int
    reorder_level: int
    expiry_date: date
    unit_price: Decimal
    model_config = ConfigDict(from_attributes=True)


class ExpiryAlertItem(AlertItem):
    days_until_expiry: int
    expired: bool


class SkippedRecord(BaseModel):
    record_id: str | None
    reason: str


class AlertsResponse(BaseModel):
    low_stock: list[AlertItem]
    expiring: list[ExpiryAlertItem]
    skipped: list[SkippedRecord]
    window_days: int

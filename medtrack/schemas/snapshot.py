from datetime import date, datetime
from decimal import Decimal

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from medtrack.models.enums import OrderStatus, OrderType


class InventoryItem(BaseModel):
    """Validated, read-only view of one medicine row."""

    id: str
    name: str
    batch_number: str = Field(validation_alias=AliasChoices("batch_number", "batch_no"))
    category: str = "General"
    manufacturer: str = ""
    expiry_date: date
    quantity_on_hand: int = Field(validation_alias=AliasChoices("quantity_on_hand", "quantity"))
    unit_price: Decimal
    reorder_level: int
    model_config = ConfigDict(frozen=True)

    @field_validator("category", mode="before")
    @classmethod
    def default_category(cls, v):
        return "General" if v is None else v

    @field_validator("manufacturer", mode="before")
    @classmethod
    def default_manufacturer(cls, v):
        return "" if v is None else v


class OrderRecord(BaseModel):
    id: str
    order_type: OrderType
    status: OrderStatus
    total_amount: Decimal
    notes: str = ""
    created_by: str
    created_at: datetime
    model_config = ConfigDict(frozen=True)

    @field_validator("notes", mode="before")
    @classmethod
    def default_notes(cls, v):
        return "" if v is None else v

from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from medtrack.models.enums import AlertKind


def _not_blank(v: str | None) -> str | None:
    if v is None:
        return v
    normalized = v.strip()
    if not normalized:
        raise ValueError("must not be blank")
    return normalized


class MedicineBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=150, examples=["Paracetamol 500mg"])
    batch_no: str = Field(..., min_length=1, max_length=50, examples=["BATCH-001"])
    category: str = Field("General", max_length=100, examples=["Analgesic"])
    manufacturer: str = Field("", max_length=150, examples=["Sun Pharma"])
    expiry_date: date = Field(examples=["2026-12-31"])
    quantity: int = Field(0, ge=0, examples=[120])
    unit_price: Decimal = Field(Decimal("0"), ge=0, max_digits=12, decimal_places=2, examples=["2.50"])
    reorder_level: int = Field(10, ge=0, examples=[10])

    @field_validator("name", "batch_no")
    @classmethod
    def not_blank(cls, v):
        return _not_blank(v)


class MedicineCreate(MedicineBase):
    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "name": "Paracetamol 500mg",
                "batch_no": "BATCH-001",
                "category": "Analgesic",
                "manufacturer": "Sun Pharma",
                "expiry_date": "2026-12-31",
                "quantity": 120,
                "unit_price": "2.50",
                "reorder_level": 10,
            }
        }
    )


class MedicineUpdate(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=150)
    batch_no: str | None = Field(None, min_length=1, max_length=50)
    category: str | None = Field(None, max_length=100)
    manufacturer: str | None = Field(None, max_length=150)
    expiry_date: date | None = None
    quantity: int | None = Field(None, ge=0)
    unit_price: Decimal | None = Field(None, ge=0, max_digits=12, decimal_places=2)
    reorder_level: int | None = Field(None, ge=0)

    @field_validator("name", "batch_no")
    @classmethod
    def not_blank(cls, v):
        return _not_blank(v)


class MedicineStatus(BaseModel):
    low_stock: bool
    expiring_soon: bool
    expired: bool
    days_until_expiry: int
    alerts: list[AlertKind] = []


class MedicineResponse(MedicineBase):
    id: str
    unit_price: Decimal
    supplier_id: str | None
    created_at: datetime
    status: MedicineStatus
    model_config = ConfigDict(from_attributes=True)


class MedicineListResponse(BaseModel):
    items: list[MedicineResponse]
    total: int
    limit: int
    offset: int

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from medtrack.models.enums import OrderStatus, OrderType


class OrderCreate(BaseModel):
    order_type: OrderType = Field(OrderType.PURCHASE, examples=["purchase"])
    total_amount: Decimal = Field(Decimal("0"), ge=0, max_digits=12, decimal_places=2, examples=["1500.00"])
    notes: str = Field("", max_length=2000, examples=["Monthly restock"])


class OrderStatusUpdate(BaseModel):
    status: OrderStatus = Field(examples=["approved"])


class OrderResponse(BaseModel):
    id: str
    order_type: OrderType
    status: OrderStatus
    total_amount: Decimal
    notes: str
    created_by: str
    created_at: datetime
    model_config = ConfigDict(
        from_attributes=True,
        json_schema_extra={
            "example": {
                "id": "5c1d2a9e-8f3b-4c7a-b1e2-0d9f8a7b6c5d",
                "order_type": "purchase",
                "status": "pending",
                "total_amount": "1500.00",
                "notes": "Monthly restock",
                "created_by": "0b5e4c1e-3a55-4d0f-9a39-1f2f0c6c8a10",
                "created_at": "2026-02-17T10:00:00Z",
            }
        },
    )


class OrderListResponse(BaseModel):
    items: list[OrderResponse]
    total: int
    limit: int
    offset: int


class OrderTransitionsResponse(BaseModel):
    order_id: str
    status: OrderStatus
    allowed: list[OrderStatus]
    terminal: bool

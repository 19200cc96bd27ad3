from decimal import Decimal

from pydantic import BaseModel

from medtrack.schemas.order import OrderResponse


class SummaryResponse(BaseModel):
    total_items: int
    low_stock_count: int
    expiring_count: int
    pending_orders: int
    total_value: Decimal
    recent_orders: list[OrderResponse]

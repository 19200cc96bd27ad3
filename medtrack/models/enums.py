import enum


class Role(enum.Enum):
    ADMIN = "admin"
    SUPPLIER = "supplier"
    PHARMACIST = "pharmacist"


class OrderType(enum.Enum):
    PURCHASE = "purchase"
    ISSUE = "issue"


class OrderStatus(enum.Enum):
    PENDING = "pending"
    APPROVED = "approved"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class AlertKind(enum.Enum):
    LOW_STOCK = "low_stock"
    EXPIRING_SOON = "expiring_soon"
    EXPIRED = "expired"


class Entity(enum.Enum):
    MEDICINE = "MEDICINE"
    ORDER = "ORDER"
    USER_ROLE = "USER_ROLE"


class ActionType(enum.Enum):
    CREATE = "CREATE"
    UPDATE = "UPDATE"
    DELETE = "DELETE"


def enum_values(enum_cls: type[enum.Enum]) -> list[str]:
    """Persist members by value so stored strings match the API vocabulary."""
    return [member.value for member in enum_cls]

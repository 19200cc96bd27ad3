from medtrack.models.audit_log import AuditLog
from medtrack.models.medicine import Medicine
from medtrack.models.order import Order
from medtrack.models.user import User, UserRoleAssignment

__all__ = ["AuditLog", "Medicine", "Order", "User", "UserRoleAssignment"]

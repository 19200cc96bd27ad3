import logging

from fastapi import HTTPException, status

from medtrack.core.errors import InvalidData, InvalidRole, InvalidTransition, MedTrackError, Unauthorized
from medtrack.services.inventory_service import InventoryError
from medtrack.services.order_service import OrderError
from medtrack.services.user_service import UserError

logger = logging.getLogger(__name__)

_STATUS_BY_ERROR: tuple[tuple[type[MedTrackError], int], ...] = (
    (InvalidRole, status.HTTP_400_BAD_REQUEST),
    (Unauthorized, status.HTTP_403_FORBIDDEN),
    (InvalidTransition, status.HTTP_409_CONFLICT),
    (InvalidData, 422),
    (InventoryError, status.HTTP_404_NOT_FOUND),
    (OrderError, status.HTTP_404_NOT_FOUND),
    (UserError, status.HTTP_404_NOT_FOUND),
)


def to_http_error(exc: MedTrackError) -> HTTPException:
    """Translate a domain error into the HTTP error the routes raise."""
    for error_type, status_code in _STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            if status_code == status.HTTP_403_FORBIDDEN:
                logger.warning("Forbidden: %s", exc)
            return HTTPException(status_code=status_code, detail=str(exc))
    logger.error("Unmapped domain error: %s: %s", type(exc).__name__, exc)
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Internal error")

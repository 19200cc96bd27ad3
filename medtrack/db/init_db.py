"""Create all tables. Run on app startup."""
from medtrack.db import session as db_session
from medtrack.db.base import Base
import medtrack.models  # noqa: F401


def init_db() -> None:
    Base.metadata.create_all(bind=db_session.engine)

from sqlalchemy import String, cast
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    pass


def as_text(column):
    """Select ``column`` as its stored text, skipping the type's result processing."""
    return cast(column, String).label(column.key)

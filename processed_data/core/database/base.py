"""Declarative base for the ISPyB tables read by this service.

ISPyB is owned and migrated elsewhere; the models only describe the
columns this service selects. Table names are the ISPyB class-style names
(``ProcessingJob``, ``AutoProcScalingStatistics``), so the automatic
``__tablename__`` keeps the class name unchanged.
"""

from __future__ import annotations

from sqlalchemy import MetaData
from sqlalchemy.orm import DeclarativeBase, declared_attr

# Consistent naming convention for constraints created by test fixtures
NAMING_CONVENTION = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}


class Base(DeclarativeBase):
    """Declarative base with ISPyB table naming."""

    metadata = MetaData(naming_convention=NAMING_CONVENTION)

    @declared_attr.directive
    def __tablename__(cls) -> str:
        """Use the class name as the table name (ISPyB convention)."""
        return cls.__name__

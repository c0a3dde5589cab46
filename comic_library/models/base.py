"""
Base models and mixins for SQLAlchemy ORM.

Provides the declarative base, the integer surrogate key mixin,
and common utilities for all library models.
"""

from typing import Any

from sqlalchemy import Column, Integer
from sqlalchemy.orm import declarative_base


# SQLAlchemy declarative base for all ORM models
Base = declarative_base()


class IntegerIdMixin:
    """
    Mixin that adds an auto-incrementing integer primary key column.

    The store assigns the value on insert. An instance whose id is None
    or 0 has not been persisted yet.

    Attributes:
        id: Integer primary key
    """

    id = Column(
        Integer,
        primary_key=True,
        autoincrement=True,
        doc="Surrogate integer primary key"
    )

    @property
    def is_persisted(self) -> bool:
        """True when the instance carries a store-assigned identifier."""
        return self.id is not None and self.id > 0


class ModelMixin:
    """
    Mixin providing common model utilities.

    Adds helper methods for serialization and representation.
    """

    def to_dict(self) -> dict[str, Any]:
        """
        Convert model instance to dictionary.

        Returns:
            Dictionary with all column values

        Note:
            Only includes columns, not relationships.
        """
        return {
            column.name: getattr(self, column.name)
            for column in self.__table__.columns
        }

    def __repr__(self) -> str:
        attrs = ", ".join(
            f"{key}={repr(value)}"
            for key, value in self.to_dict().items()
            if key in ["id", "name", "title", "issue_number"]  # Key identifying fields
        )
        return f"{self.__class__.__name__}({attrs})"

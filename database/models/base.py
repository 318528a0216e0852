from enum import Enum as PyEnum
from typing import Type

from sqlalchemy import Enum
from sqlalchemy.orm import declarative_base

Base = declarative_base()


def enum_column_type(enum_cls: Type[PyEnum]) -> Enum:
    """Store a Python enum by value as a VARCHAR (portable across Postgres and SQLite)."""
    return Enum(
        enum_cls,
        native_enum=False,
        length=32,
        values_callable=lambda members: [m.value for m in members],
        validate_strings=True,
    )

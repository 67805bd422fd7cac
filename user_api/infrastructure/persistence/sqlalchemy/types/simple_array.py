"""
SQLAlchemy TypeDecorator for flat lists.

``SimpleArray`` stores a list of scalar values as one comma separated TEXT
value, which keeps the column portable across SQLite and PostgreSQL.
Elements may be members of an enum class, which are stored by value and
restored as members.
"""

import enum
from typing import Any

from sqlalchemy import types


class SimpleArray(types.TypeDecorator):
    """
    SQLAlchemy type decorator for comma separated lists.

    Args:
        enum_class: Optional enum whose members are stored by value
    """

    impl = types.Text
    cache_ok = True

    SEPARATOR = ","

    def __init__(self, enum_class: type[enum.Enum] | None = None, *args: Any, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.enum_class = enum_class

    def process_bind_param(self, value, dialect):
        """
        Process the value before binding to SQL statement.

        Args:
            value: List of values or None
            dialect: SQLAlchemy dialect

        Returns:
            Comma separated text, or None
        """
        if value is None:
            return None

        if not isinstance(value, list | tuple):
            raise ValueError(f"Expected list or tuple, got {type(value)}: {value}")

        items = [str(item.value) if isinstance(item, enum.Enum) else str(item) for item in value]
        for item in items:
            if self.SEPARATOR in item:
                raise ValueError(f"Simple array elements must not contain {self.SEPARATOR!r}: {item!r}")
        return self.SEPARATOR.join(items)

    def process_result_value(self, value, dialect):
        """
        Process the database value before returning it to Python.

        Args:
            value: Value from database
            dialect: SQLAlchemy dialect

        Returns:
            List of values (enum members when ``enum_class`` is set)
        """
        if not value:
            return []

        items = value.split(self.SEPARATOR)
        if self.enum_class is None:
            return items
        return [self.enum_class(item) for item in items]

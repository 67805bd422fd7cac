"""
Unit tests for the SimpleArray type decorator.

Tests that lists, including lists of enum members, are stored as comma
separated text and restored unchanged.
"""

import pytest
from sqlalchemy import Column, Integer, MetaData, Table, create_engine, text
from sqlalchemy.orm import Session

from user_api.domain.enums import Role
from user_api.infrastructure.persistence.sqlalchemy.types import SimpleArray


class TestSimpleArray:
    """Tests for the SimpleArray SQLAlchemy TypeDecorator."""

    def setup_method(self) -> None:
        """Set up a fresh metadata and engine for each test."""
        self.metadata = MetaData()
        self.test_table = Table(
            "test_simple_array",
            self.metadata,
            Column("id", Integer, primary_key=True),
            Column("roles", SimpleArray(Role), nullable=True),
            Column("tags", SimpleArray(), nullable=True),
        )
        self.engine = create_engine("sqlite:///:memory:")
        self.metadata.create_all(self.engine)

    def teardown_method(self) -> None:
        self.engine.dispose()

    def test_enum_members_round_trip(self) -> None:
        roles = [Role.USER, Role.ADMIN, Role.WORKER]

        with Session(self.engine) as session:
            session.execute(self.test_table.insert().values(id=1, roles=roles))
            session.commit()

            stored = session.execute(text("SELECT roles FROM test_simple_array")).scalar_one()
            result = session.execute(self.test_table.select()).fetchone()

        assert stored == "USER,ADMIN,WORKER"
        assert result.roles == roles
        assert all(isinstance(role, Role) for role in result.roles)

    def test_plain_values_are_restored_as_strings(self) -> None:
        with Session(self.engine) as session:
            session.execute(self.test_table.insert().values(id=1, tags=["a", 2]))
            session.commit()

            result = session.execute(self.test_table.select()).fetchone()

        assert result.tags == ["a", "2"]

    def test_null_and_empty_values(self) -> None:
        with Session(self.engine) as session:
            session.execute(self.test_table.insert().values(id=1, roles=None, tags=[]))
            session.commit()

            result = session.execute(self.test_table.select()).fetchone()

        assert result.roles == []
        assert result.tags == []

    def test_bind_param_rejects_non_sequences(self) -> None:
        with pytest.raises(ValueError, match="Expected list or tuple"):
            SimpleArray().process_bind_param("USER", None)

    def test_bind_param_rejects_separator_in_elements(self) -> None:
        with pytest.raises(ValueError, match="must not contain"):
            SimpleArray().process_bind_param(["a,b"], None)

    def test_bind_param_none(self) -> None:
        assert SimpleArray(Role).process_bind_param(None, None) is None

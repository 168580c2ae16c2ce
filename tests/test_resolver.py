"""
Unit tests for resolver.py
"""

import pytest

from loaddumper.errors import UnknownColumn
from loaddumper.models import Column, StorageKind, Table, ValueKind
from loaddumper.resolver import ColumnResolver


class TestColumnResolver:
    """Tests for ColumnResolver.resolve."""

    @pytest.fixture
    def table(self):
        return Table(
            name="Posts",
            columns=(
                Column("title", ValueKind.TEXT),
                Column("Zeta", ValueKind.TEXT),
                Column("author", ValueKind.REFERENCE, target="Users"),
                Column("_private", ValueKind.INTEGER),
            ),
        )

    def test_identity_primary_column(self, table):
        plan = ColumnResolver.resolve(table)
        assert plan.primary_column_name == "_id"

    def test_key_primary_column(self):
        table = Table(name="Users", storage=StorageKind.KEY_ORDERED, key_kind=ValueKind.TEXT)
        plan = ColumnResolver.resolve(table)
        assert plan.primary_column_name == "_key"
        assert plan.columns == ()
        assert plan.column_names == ["_key"]

    def test_default_sorted_by_code_point(self, table):
        """Test default order is case sensitive, code point ascending."""
        plan = ColumnResolver.resolve(table)
        assert [col.name for col in plan.columns] == ["Zeta", "_private", "author", "title"]

    def test_explicit_order_kept(self, table):
        plan = ColumnResolver.resolve(table, ["title", "author"])
        assert plan.column_names == ["_id", "title", "author"]

    def test_empty_selection_means_default(self, table):
        assert ColumnResolver.resolve(table, []) == ColumnResolver.resolve(table)

    def test_unknown_column(self, table):
        with pytest.raises(UnknownColumn) as exc_info:
            ColumnResolver.resolve(table, ["title", "body"])
        assert exc_info.value.table == "Posts"
        assert exc_info.value.name == "body"

    def test_primary_column_is_not_selectable(self, table):
        with pytest.raises(UnknownColumn):
            ColumnResolver.resolve(table, ["_id"])

"""
Column selection for table dumps.
"""

import logging
from typing import Optional, Sequence

from .models import DumpPlan, Table


class ColumnResolver:
    """Builds the dump plan for a table."""

    @staticmethod
    def resolve(table: Table, columns: Optional[Sequence[str]] = None) -> DumpPlan:
        """
        Resolve the columns to dump.

        Args:
            table: Table schema.
            columns: Explicit column names in output order. When empty or
                None, every declared column is dumped, sorted by name.

        Returns:
            DumpPlan with the primary column name and the selected columns.

        Raises:
            UnknownColumn: if an explicit name is not declared on the table.
        """
        if columns:
            selected = tuple(table.column(name) for name in columns)
        else:
            # str ordering compares code points, which matches UTF-8 byte order
            selected = tuple(sorted(table.columns, key=lambda col: col.name))

        logging.debug(
            f"Table '{table.name}' dump plan: {table.primary_column_name} + "
            f"{[col.name for col in selected]}"
        )
        return DumpPlan(primary_column_name=table.primary_column_name, columns=selected)

"""
Table dumping: renders a table's records as a replayable load script.
"""

import gzip
import logging
from pathlib import Path
from typing import Any, Optional, TextIO

from .encoder import ValueEncoder, encode_text
from .errors import DumpError, ScriptSyntaxError, StorageUnavailable
from .models import DumpOptions, DumpPlan, Record, Table, TableStats
from .resolver import ColumnResolver
from .storage import Storage


class TableDumper:
    """Handles dumping of individual tables."""

    LOAD_COMMAND = "load --table"

    def __init__(self, storage: Storage, output_settings: Optional[dict[str, Any]] = None):
        self.storage = storage
        self.output_settings = output_settings or {}
        self.encoder = ValueEncoder(storage.primary_value_of)

    def dump(self, table_name: str, options: Optional[DumpOptions] = None) -> str:
        """
        Render a table as a load script.

        The whole script is built in memory, so a failure part way through
        never yields a partial result.

        Args:
            table_name: Name of the table to dump.
            options: Dump options (explicit column selection).

        Returns:
            The load script text, newline terminated.
        """
        return self._render(table_name, options)[0]

    def _render(self, table_name: str, options: Optional[DumpOptions]) -> tuple[str, int]:
        options = options or DumpOptions()
        table = self.storage.get_table(table_name)
        if not table.name or any(ch.isspace() for ch in table.name):
            raise ScriptSyntaxError(f"Table name cannot follow a load command: {table.name!r}")
        plan = ColumnResolver.resolve(table, options.columns)

        rows = [self._header_row(plan)]
        try:
            for record in self.storage.records(table):
                rows.append(self._record_row(table, plan, record))
        except DumpError:
            raise
        except Exception as e:
            raise StorageUnavailable(f"Failed to enumerate table '{table.name}': {e}") from e

        lines = [f"{self.LOAD_COMMAND} {table.name}", "[", ",\n".join(rows), "]"]
        return "\n".join(lines) + "\n", len(rows) - 1

    @staticmethod
    def _header_row(plan: DumpPlan) -> str:
        return '[' + ','.join(encode_text(name) for name in plan.column_names) + ']'

    def _record_row(self, table: Table, plan: DumpPlan, record: Record) -> str:
        tokens = [self.encoder.encode_primary(table.primary_kind, record.primary)]
        tokens.extend(
            self.encoder.encode(record.get(col.name), col.kind, col.is_vector)
            for col in plan.columns
        )
        return '[' + ','.join(tokens) + ']'

    def dump_table(
        self,
        table_name: str,
        output_path: Path,
        options: Optional[DumpOptions] = None
    ) -> TableStats:
        """
        Dump a table to file.

        Args:
            table_name: Name of the table to dump.
            output_path: Path for the output file.
            options: Dump options (explicit column selection).

        Returns:
            TableStats with dump statistics.
        """
        stats = TableStats(table=table_name, file_path=str(output_path))

        try:
            logging.info(f"Dumping table '{table_name}'")
            script, stats.rows_dumped = self._render(table_name, options)

            output_path, file_handle = self._open_output_file(output_path)
            stats.file_path = str(output_path)
            try:
                file_handle.write(script)
            finally:
                file_handle.close()

            stats.success = True
        except (DumpError, OSError) as e:
            stats.error = str(e)
            logging.error(f"Error dumping table '{table_name}': {e}")

        return stats

    def _open_output_file(self, output_path: Path) -> tuple[Path, TextIO]:
        """Open output file with optional compression."""
        if self.output_settings.get('compress', False):
            output_path = Path(str(output_path) + '.gz')
            file_handle = gzip.open(output_path, 'wt', encoding='utf-8')
        else:
            file_handle = open(output_path, 'w', encoding='utf-8')

        return output_path, file_handle

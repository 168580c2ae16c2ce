"""
Multi-table dump orchestration for the load script dumper.
"""

import fnmatch
import logging
import re
from datetime import datetime
from pathlib import Path
from typing import Any, Optional

from .config import ConfigLoader
from .connection import DatabaseConnection
from .errors import DumpError
from .models import DumpOptions, DumpStats, TableStats
from .storage import Schema
from .table_dumper import TableDumper


class DatabaseDumper:
    """Dumps every configured table to its own load script file."""

    def __init__(self, config: ConfigLoader):
        self.config = config
        self.output_settings = config.get_output_settings()
        self.stats = DumpStats()

    def _compile_exclusion_patterns(self, exclude_patterns: list[str]) -> list[re.Pattern]:
        """
        Pre-compile exclusion patterns to regex for faster matching.

        Converts fnmatch patterns to compiled regex patterns.
        """
        return [re.compile(fnmatch.translate(pattern)) for pattern in exclude_patterns]

    def _is_table_excluded(self, table_name: str, compiled_patterns: list[re.Pattern]) -> bool:
        """Check if a table matches one of the exclusion patterns."""
        for compiled in compiled_patterns:
            if compiled.match(table_name):
                logging.debug(f"Table '{table_name}' excluded by pattern '{compiled.pattern}'")
                return True
        return False

    def run(
        self,
        table_filter: Optional[str] = None,
        instance_filter: Optional[str] = None,
        columns: Optional[list[str]] = None
    ) -> DumpStats:
        """Run the dump process for all configured tables.

        Args:
            table_filter: If specified, only dump this table
            instance_filter: If specified, only dump tables from this instance
            columns: Explicit column selection overriding the configured one
        """
        output_dir = Path(self.output_settings.get('directory', './dumps'))
        output_dir.mkdir(parents=True, exist_ok=True)

        timestamp = datetime.now().strftime('%Y%m%d_%H%M%S')
        schema = self.config.get_schema()
        dumps = self._filter_dumps(table_filter, instance_filter)
        if columns:
            dumps = [dict(d, columns=columns) for d in dumps]

        logging.info(f"Starting dump of {len(dumps)} table(s)")

        by_instance: dict[str, list[dict[str, Any]]] = {}
        for dump in dumps:
            by_instance.setdefault(dump.get('instance', ConfigLoader.DEFAULT_INSTANCE), []).append(dump)

        for instance_name, instance_dumps in by_instance.items():
            self._dump_instance(instance_name, instance_dumps, schema, output_dir, timestamp)

        return self.stats

    def _filter_dumps(
        self,
        table_filter: Optional[str],
        instance_filter: Optional[str]
    ) -> list[dict[str, Any]]:
        """Filter dumps based on provided filters and exclusion patterns."""
        dumps = self.config.get_dumps()

        exclude_patterns = self.output_settings.get('exclude_tables', [])
        if exclude_patterns:
            compiled = self._compile_exclusion_patterns(exclude_patterns)
            original_count = len(dumps)
            dumps = [d for d in dumps if not self._is_table_excluded(d['table'], compiled)]
            excluded_count = original_count - len(dumps)
            if excluded_count > 0:
                logging.info(f"Excluded {excluded_count} table(s) matching exclusion patterns")

        if table_filter:
            dumps = [d for d in dumps if d['table'] == table_filter]
            if not dumps:
                logging.warning(f"No table named '{table_filter}' found in configuration")

        if instance_filter:
            dumps = [
                d for d in dumps
                if d.get('instance', ConfigLoader.DEFAULT_INSTANCE) == instance_filter
            ]
            if not dumps:
                logging.warning(f"No tables found for instance '{instance_filter}'")

        return dumps

    def _dump_instance(
        self,
        instance_name: str,
        dumps: list[dict[str, Any]],
        schema: Schema,
        output_dir: Path,
        timestamp: str
    ) -> None:
        """Dump the tables served by one MySQL instance."""
        try:
            instance_config = self.config.get_instance(instance_name)

            with DatabaseConnection(
                host=instance_config['host'],
                port=instance_config.get('port', DatabaseConnection.DEFAULT_PORT),
                user=instance_config['user'],
                password=instance_config['password'],
                database=instance_config.get('database'),
                schema=schema
            ) as conn:
                dumper = TableDumper(conn, self.output_settings)
                for dump in dumps:
                    self._record(self._dump_single_table(dumper, dump, output_dir, timestamp))

        except (DumpError, ValueError, KeyError) as e:
            logging.error(f"Error dumping instance '{instance_name}': {e}")
            self.stats.errors.append({
                'instance': instance_name,
                'table': None,
                'error': str(e)
            })

    def _dump_single_table(
        self,
        dumper: TableDumper,
        dump: dict[str, Any],
        output_dir: Path,
        timestamp: str
    ) -> TableStats:
        """Dump a single table and return stats."""
        table_name = dump['table']
        options = DumpOptions.from_config(dump)
        logging.debug(f"Table '{table_name}' columns: {options.columns or 'all'}")

        if self.output_settings.get('timestamp_suffix', True):
            output_path = output_dir / f"{table_name}_{timestamp}.grn"
        else:
            output_path = output_dir / f"{table_name}.grn"

        return dumper.dump_table(table_name, output_path, options)

    def _record(self, table_stats: TableStats) -> None:
        """Add a table result to the run totals and log it."""
        self.stats.tables.append(table_stats)
        self.stats.total_tables += 1
        self.stats.total_rows += table_stats.rows_dumped

        if table_stats.success:
            logging.info(f"  ✓ {table_stats.table}: {table_stats.rows_dumped} rows")
        else:
            logging.error(f"  ✗ {table_stats.table}: {table_stats.error}")
            self.stats.errors.append({
                'instance': None,
                'table': table_stats.table,
                'error': table_stats.error
            })

"""
Utility functions for the load script dumper.
"""

import logging
import sys
from pathlib import Path
from typing import Any

from .errors import DumpError
from .models import DumpOptions
from .resolver import ColumnResolver
from .storage import Schema


def setup_logging(log_settings: dict[str, Any]) -> None:
    """Setup logging configuration."""
    log_level = getattr(logging, log_settings.get('level', 'INFO').upper())
    log_file = log_settings.get('file')

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=log_level,
        format='%(asctime)s - %(levelname)s - %(message)s',
        handlers=handlers,
        force=True
    )


def print_dry_run_info(dumps: list[dict[str, Any]], schema: Schema) -> None:
    """Log what would be dumped in dry-run mode."""
    for dump in dumps:
        table_name = dump['table']
        instance = dump.get('instance', 'primary')
        if table_name not in schema:
            logging.warning(f"Would skip table: {table_name} (not in schema)")
            continue

        table = schema.get_table(table_name)
        try:
            plan = ColumnResolver.resolve(table, DumpOptions.from_config(dump).columns)
        except DumpError as e:
            logging.warning(f"Would fail table: {table_name} ({e})")
            continue

        logging.info(f"Would dump table: {table_name} from instance: {instance}")
        logging.info(f"  - columns: {', '.join(format_plan_display(plan.column_names))}")


def format_plan_display(column_names: list[str]) -> list[str]:
    """Quote column names the way the load header does."""
    return [f'"{name}"' for name in column_names]

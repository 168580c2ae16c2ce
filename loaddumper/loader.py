"""
Replay of load scripts into in-memory storage.
"""

import json
import logging
from datetime import timedelta
from decimal import Decimal
from typing import Any

from .encoder import EPOCH
from .errors import ScriptSyntaxError
from .models import Column, StorageKind, Table, ValueKind
from .storage import MemoryStorage
from .table_dumper import TableDumper

LOAD_PREFIX = TableDumper.LOAD_COMMAND + " "


def parse_script(text: str) -> tuple[str, list[str], list[list[Any]]]:
    """
    Split a load script into table name, header and data rows.

    Fractional numbers are parsed as Decimal so time values keep their
    exact digits.
    """
    first_line, _, body = text.partition("\n")
    if not first_line.startswith(LOAD_PREFIX):
        raise ScriptSyntaxError(f"Expected '{LOAD_PREFIX.strip()}', got: {first_line!r}")
    table_name = first_line[len(LOAD_PREFIX):].strip()
    if not table_name or ' ' in table_name:
        raise ScriptSyntaxError(f"Invalid table name: {table_name!r}")

    try:
        rows = json.loads(body, parse_float=Decimal)
    except json.JSONDecodeError as e:
        raise ScriptSyntaxError(f"Invalid load body: {e}") from e

    if not isinstance(rows, list) or not rows:
        raise ScriptSyntaxError("Load body must be an array starting with a header row")
    header, data = rows[0], rows[1:]
    if not isinstance(header, list) or not all(isinstance(name, str) for name in header):
        raise ScriptSyntaxError("Header row must be an array of column names")
    for row in data:
        if not isinstance(row, list) or len(row) != len(header):
            raise ScriptSyntaxError(f"Row does not match header: {row!r}")
    return table_name, header, data


def _decode_time(value: Any) -> Any:
    if value is None:
        return None
    micro = int((Decimal(value) * 1000000).to_integral_value())
    return EPOCH + timedelta(microseconds=micro)


def _decode_cell(col: Column, value: Any) -> Any:
    if value is None or col.kind != ValueKind.TIME:
        return value
    if col.is_vector:
        return [_decode_time(item) for item in value]
    return _decode_time(value)


def load_script(storage: MemoryStorage, text: str) -> int:
    """
    Replay a load script into storage.

    Returns:
        Number of records loaded.
    """
    table_name, header, rows = parse_script(text)
    table: Table = storage.get_table(table_name)

    primary_name = header[0] if header else None
    if primary_name != table.primary_column_name:
        raise ScriptSyntaxError(
            f"First column of '{table_name}' must be '{table.primary_column_name}'"
        )
    columns = [table.column(name) for name in header[1:]]

    for row in rows:
        primary = row[0]
        if table.storage == StorageKind.IDENTITY_ORDERED and (
            isinstance(primary, bool) or not isinstance(primary, int)
        ):
            raise ScriptSyntaxError(f"Invalid _id: {primary!r}")
        values = {col.name: _decode_cell(col, value) for col, value in zip(columns, row[1:])}
        storage.add(table_name, primary, **values)

    logging.info(f"Loaded {len(rows)} record(s) into '{table_name}'")
    return len(rows)

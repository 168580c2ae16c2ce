"""
MySQL-backed record storage for the load script dumper.
"""

import json
import logging
from datetime import datetime, timezone
from typing import Any, Iterator, Optional

import mysql.connector
from mysql.connector import Error as MySQLError

from .errors import StorageUnavailable
from .models import Column, Record, RecordRef, Table, ValueKind
from .storage import Schema


class DatabaseConnection:
    """Manages a MySQL connection and serves records laid out per a Schema.

    Each schema table maps to a MySQL table of the same name with a primary
    column ``_id`` (identity ordered) or ``_key`` (key ordered). Vector cells
    are stored as JSON text, times as UTC ``DATETIME(6)``, and reference cells
    hold the referenced record's primary value.
    """

    DEFAULT_PORT = 3306
    DEFAULT_CHARSET = 'utf8mb4'

    def __init__(
        self,
        host: str,
        port: int,
        user: str,
        password: str,
        database: Optional[str] = None,
        schema: Optional[Schema] = None
    ):
        self.host = host
        self.port = port
        self.user = user
        self.password = password
        self.database = database
        self.schema = schema or Schema()
        self.connection = None

    def __enter__(self) -> "DatabaseConnection":
        """Context manager entry - establish connection."""
        self.connect()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        """Context manager exit - close connection."""
        self.disconnect()

    def connect(self) -> None:
        """Establish database connection."""
        try:
            self.connection = mysql.connector.connect(
                host=self.host,
                port=self.port,
                user=self.user,
                password=self.password,
                database=self.database,
                charset=self.DEFAULT_CHARSET,
                use_unicode=True
            )
            logging.info(f"Connected to {self.host}:{self.port}/{self.database or 'N/A'}")
        except MySQLError as e:
            logging.error(f"Failed to connect to database: {e}")
            raise StorageUnavailable(f"Failed to connect to database: {e}") from e

    def disconnect(self) -> None:
        """Close database connection."""
        if self.connection and self.connection.is_connected():
            self.connection.close()
            logging.debug("Database connection closed")

    def execute_query(self, query: str, params: Optional[tuple] = None) -> list[tuple]:
        """Execute a query and return results."""
        if self.connection is None:
            raise StorageUnavailable("Not connected")
        cursor = self.connection.cursor()
        try:
            cursor.execute(query, params)
            return cursor.fetchall()
        except MySQLError as e:
            raise StorageUnavailable(str(e)) from e
        finally:
            cursor.close()

    def get_table(self, name: str) -> Table:
        return self.schema.get_table(name)

    def _build_select_query(self, table: Table) -> str:
        """Build the SELECT returning rows in native order."""
        primary = table.primary_column_name
        quoted_columns = ', '.join(
            [f'`{primary}`'] + [f'`{col.name}`' for col in table.columns]
        )
        order = f'BINARY `{primary}`' if table.primary_kind == ValueKind.TEXT else f'`{primary}`'
        return f"SELECT {quoted_columns} FROM `{table.name}` ORDER BY {order} ASC"

    def records(self, table: Table) -> Iterator[Record]:
        """Stream records through an unbuffered cursor."""
        if self.connection is None:
            raise StorageUnavailable("Not connected")
        query = self._build_select_query(table)
        logging.debug(f"Enumerating '{table.name}' with query: {query}")

        cursor = self.connection.cursor(buffered=False)
        try:
            cursor.execute(query)
            for row in cursor:
                yield Record(
                    primary=self._convert_primary(table, row[0]),
                    values={
                        col.name: self._convert_value(col, raw)
                        for col, raw in zip(table.columns, row[1:])
                    }
                )
        except MySQLError as e:
            raise StorageUnavailable(f"Failed to read table '{table.name}': {e}") from e
        finally:
            try:
                # an abandoned generator leaves rows pending on the connection
                if self.connection.unread_result:
                    self.connection.consume_results()
            finally:
                cursor.close()

    def count(self, table: Table) -> int:
        results = self.execute_query(f"SELECT COUNT(*) FROM `{table.name}`")
        return results[0][0]

    def primary_value_of(self, ref: RecordRef) -> tuple[ValueKind, Any]:
        target = self.get_table(ref.table)
        return target.primary_kind, ref.primary

    @staticmethod
    def _convert_primary(table: Table, raw: Any) -> Any:
        if table.primary_kind == ValueKind.TEXT and isinstance(raw, (bytes, bytearray)):
            return raw.decode('utf-8')
        return raw

    def _convert_value(self, col: Column, raw: Any) -> Any:
        if raw is None:
            return None
        if col.is_vector:
            if isinstance(raw, (bytes, bytearray)):
                raw = raw.decode('utf-8')
            items = json.loads(raw) if isinstance(raw, str) else raw
            return [self._convert_scalar(col, item) for item in items]
        return self._convert_scalar(col, raw)

    @staticmethod
    def _convert_scalar(col: Column, raw: Any) -> Any:
        if raw is None:
            return None
        if col.kind == ValueKind.BOOLEAN:
            return bool(raw)
        if col.kind == ValueKind.TIME:
            # vector elements come back from JSON as ISO strings
            if isinstance(raw, str):
                raw = datetime.fromisoformat(raw)
            if isinstance(raw, datetime) and raw.tzinfo is None:
                return raw.replace(tzinfo=timezone.utc)
            return raw
        if col.kind == ValueKind.REFERENCE:
            if isinstance(raw, (bytes, bytearray)):
                raw = raw.decode('utf-8')
            return RecordRef(table=col.target, primary=raw)
        if col.kind == ValueKind.TEXT and isinstance(raw, (bytes, bytearray)):
            return raw.decode('utf-8')
        return raw

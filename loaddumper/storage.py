"""
Schema definitions and in-memory record storage.
"""

import logging
from typing import Any, Iterator, Optional, Protocol

from .errors import StorageUnavailable
from .models import Column, Record, RecordRef, StorageKind, Table, ValueKind


class Storage(Protocol):
    """What the dumper needs from a storage backend."""

    def get_table(self, name: str) -> Table:
        ...

    def records(self, table: Table) -> Iterator[Record]:
        """Yield records in the table's native order."""
        ...

    def count(self, table: Table) -> int:
        ...

    def primary_value_of(self, ref: RecordRef) -> tuple[ValueKind, Any]:
        ...


class Schema:
    """Table definitions by name."""

    def __init__(self, tables: Optional[list[Table]] = None):
        self.tables: dict[str, Table] = {}
        for table in tables or []:
            self.add(table)

    def add(self, table: Table) -> None:
        self.tables[table.name] = table

    def __contains__(self, name: str) -> bool:
        return name in self.tables

    def __iter__(self) -> Iterator[Table]:
        return iter(self.tables.values())

    def get_table(self, name: str) -> Table:
        if name not in self.tables:
            raise StorageUnavailable(f"Table '{name}' not found")
        return self.tables[name]

    def validate(self) -> None:
        """Check that reference columns point at declared tables."""
        for table in self.tables.values():
            for col in table.columns:
                if col.kind == ValueKind.REFERENCE and col.target not in self.tables:
                    raise ValueError(
                        f"Column '{table.name}.{col.name}' references "
                        f"unknown table '{col.target}'"
                    )

    @classmethod
    def from_config(cls, schema_config: dict[str, Any]) -> "Schema":
        """
        Build a schema from the ``schema`` section of the configuration.

        Example::

            Users:
              type: patricia_trie
              key_type: text
              columns:
                name: text
            Posts:
              columns:
                author: {type: reference, target: Users}
                tags: {type: text, vector: true}
        """
        schema = cls()
        for name, table_config in (schema_config or {}).items():
            table_config = table_config or {}
            key_type = table_config.get('key_type')
            columns = []
            for col_name, col_config in (table_config.get('columns') or {}).items():
                if isinstance(col_config, str):
                    col_config = {'type': col_config}
                columns.append(Column(
                    name=col_name,
                    kind=ValueKind.from_name(col_config['type']),
                    is_vector=bool(col_config.get('vector', False)),
                    target=col_config.get('target'),
                ))
            schema.add(Table(
                name=name,
                storage=StorageKind.from_name(
                    table_config.get('type', 'key' if key_type else 'identity')
                ),
                key_kind=ValueKind.from_name(key_type) if key_type else None,
                columns=tuple(columns),
            ))
        schema.validate()
        return schema


def _sort_key(kind: ValueKind, key: Any) -> Any:
    if kind == ValueKind.TEXT:
        return key.encode('utf-8')
    return key


class MemoryStorage:
    """In-process record storage.

    Identity-ordered tables assign ids from 1 upwards and never reuse them.
    Key-ordered tables enumerate by ascending key; text keys compare by
    their UTF-8 bytes.
    """

    def __init__(self, schema: Schema):
        self.schema = schema
        self._records: dict[str, dict[Any, dict[str, Any]]] = {
            table.name: {} for table in schema
        }
        self._next_ids: dict[str, int] = {table.name: 1 for table in schema}

    def get_table(self, name: str) -> Table:
        return self.schema.get_table(name)

    def add(self, table_name: str, key: Any = None, **values: Any) -> Record:
        """
        Add a record, or update it when the key already exists.

        Args:
            table_name: Target table.
            key: Record key for key-ordered tables. For identity-ordered
                tables an explicit id may be given; it must not be lower
                than the next id to assign.
            **values: Column values. Plain values given for reference
                columns are wrapped into RecordRef.
        """
        table = self.get_table(table_name)
        for name in values:
            table.column(name)

        if table.storage == StorageKind.KEY_ORDERED:
            if key is None:
                raise ValueError(f"Table '{table_name}' needs a key")
            primary = key
        else:
            primary = self._assign_id(table_name, key)

        stored = self._records[table_name].setdefault(primary, {})
        for name, value in values.items():
            stored[name] = self._wrap_references(table.column(name), value)

        logging.debug(f"Stored record {primary!r} in '{table_name}'")
        return Record(primary=primary, values=dict(stored))

    def _assign_id(self, table_name: str, requested: Optional[int]) -> int:
        next_id = self._next_ids[table_name]
        if requested is None:
            requested = next_id
        elif requested < next_id:
            raise ValueError(
                f"Id {requested} of table '{table_name}' is already assigned"
            )
        self._next_ids[table_name] = requested + 1
        return requested

    def _wrap_references(self, col: Column, value: Any) -> Any:
        if col.kind != ValueKind.REFERENCE or value is None:
            return value
        if col.is_vector:
            return [self._wrap_reference(col.target, item) for item in value]
        return self._wrap_reference(col.target, value)

    def _wrap_reference(self, target: str, value: Any) -> Any:
        if value is None:
            return None
        if isinstance(value, Record):
            value = value.primary
        if not isinstance(value, RecordRef):
            value = RecordRef(table=target, primary=value)
        target_table = self.get_table(value.table)
        records = self._records[target_table.name]
        if target_table.storage == StorageKind.KEY_ORDERED and value.primary not in records:
            records[value.primary] = {}
        return value

    def delete(self, table_name: str, primary: Any) -> None:
        table = self.get_table(table_name)
        try:
            del self._records[table.name][primary]
        except KeyError:
            raise StorageUnavailable(
                f"Record {primary!r} not found in '{table_name}'"
            ) from None

    def records(self, table: Table) -> Iterator[Record]:
        records = self._records.get(table.name)
        if records is None:
            raise StorageUnavailable(f"Table '{table.name}' not found")
        primary_kind = table.primary_kind
        for primary in sorted(records, key=lambda key: _sort_key(primary_kind, key)):
            yield Record(primary=primary, values=dict(records[primary]))

    def count(self, table: Table) -> int:
        return len(self._records.get(table.name, {}))

    def primary_value_of(self, ref: RecordRef) -> tuple[ValueKind, Any]:
        target = self.get_table(ref.table)
        return target.primary_kind, ref.primary

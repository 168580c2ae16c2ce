"""
Data models and enums for the load script dumper.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

from .errors import UnknownColumn, UnsupportedValueKind


class StorageKind(Enum):
    """How a table addresses and enumerates its records."""
    IDENTITY_ORDERED = "identity"
    KEY_ORDERED = "key"

    @classmethod
    def from_name(cls, name: Optional[str]) -> "StorageKind":
        """Map a schema table type to a storage kind.

        Groonga-style names are accepted as aliases: ``array`` is identity
        ordered, ``hash`` and ``patricia_trie`` are key ordered.
        """
        if name is None:
            return cls.IDENTITY_ORDERED
        normalized = name.lower()
        if normalized in ('identity', 'array'):
            return cls.IDENTITY_ORDERED
        if normalized in ('key', 'hash', 'patricia_trie'):
            return cls.KEY_ORDERED
        raise ValueError(f"Unknown table type: {name}")


class ValueKind(Enum):
    """Declared value kind of a column or key."""
    TEXT = "text"
    INTEGER = "integer"
    UNSIGNED_INTEGER = "unsigned_integer"
    BOOLEAN = "boolean"
    TIME = "time"
    REFERENCE = "reference"

    @classmethod
    def from_name(cls, name: str) -> "ValueKind":
        kind = _VALUE_KIND_ALIASES.get(str(name).lower())
        if kind is None:
            raise UnsupportedValueKind(name)
        return kind

    @property
    def is_numeric(self) -> bool:
        return self in (ValueKind.INTEGER, ValueKind.UNSIGNED_INTEGER)


_VALUE_KIND_ALIASES = {
    'text': ValueKind.TEXT,
    'shorttext': ValueKind.TEXT,
    'longtext': ValueKind.TEXT,
    'int': ValueKind.INTEGER,
    'integer': ValueKind.INTEGER,
    'int32': ValueKind.INTEGER,
    'int64': ValueKind.INTEGER,
    'uint': ValueKind.UNSIGNED_INTEGER,
    'uint32': ValueKind.UNSIGNED_INTEGER,
    'uint64': ValueKind.UNSIGNED_INTEGER,
    'unsigned_integer': ValueKind.UNSIGNED_INTEGER,
    'bool': ValueKind.BOOLEAN,
    'boolean': ValueKind.BOOLEAN,
    'time': ValueKind.TIME,
    'reference': ValueKind.REFERENCE,
}

KEY_KINDS = (ValueKind.TEXT, ValueKind.INTEGER, ValueKind.UNSIGNED_INTEGER)


@dataclass(frozen=True)
class Column:
    """Declared column of a table."""
    name: str
    kind: ValueKind
    is_vector: bool = False
    target: Optional[str] = None

    def __post_init__(self):
        if self.kind == ValueKind.REFERENCE and not self.target:
            raise ValueError(f"Reference column '{self.name}' needs a target table")


@dataclass(frozen=True)
class Table:
    """Table schema: storage kind, key kind and declared columns."""
    name: str
    storage: StorageKind = StorageKind.IDENTITY_ORDERED
    key_kind: Optional[ValueKind] = None
    columns: tuple[Column, ...] = ()

    def __post_init__(self):
        if self.storage == StorageKind.KEY_ORDERED and self.key_kind not in KEY_KINDS:
            raise ValueError(
                f"Key-ordered table '{self.name}' needs a text or integer key type, "
                f"got {self.key_kind}"
            )
        names = [col.name for col in self.columns]
        if len(names) != len(set(names)):
            raise ValueError(f"Duplicate column names in table '{self.name}'")

    @property
    def primary_column_name(self) -> str:
        return "_key" if self.storage == StorageKind.KEY_ORDERED else "_id"

    @property
    def primary_kind(self) -> ValueKind:
        """Kind of the primary value: the key kind, or an unsigned id."""
        if self.storage == StorageKind.KEY_ORDERED:
            return self.key_kind
        return ValueKind.UNSIGNED_INTEGER

    def column(self, name: str) -> Column:
        for col in self.columns:
            if col.name == name:
                return col
        raise UnknownColumn(self.name, name)


@dataclass(frozen=True)
class RecordRef:
    """Pointer to a record of another table, by primary value."""
    table: str
    primary: Any


@dataclass
class Record:
    """A stored record: its primary value and column values."""
    primary: Any
    values: dict[str, Any] = field(default_factory=dict)

    def get(self, column: str) -> Any:
        return self.values.get(column)


@dataclass(frozen=True)
class DumpPlan:
    """Columns of one dump, primary column excluded."""
    primary_column_name: str
    columns: tuple[Column, ...]

    @property
    def column_names(self) -> list[str]:
        return [self.primary_column_name] + [col.name for col in self.columns]


@dataclass
class DumpOptions:
    """Caller options for a single table dump."""
    columns: Optional[list[str]] = None

    @classmethod
    def from_config(cls, dump_config: dict[str, Any]) -> "DumpOptions":
        columns = dump_config.get('columns')
        if isinstance(columns, str):
            columns = [name.strip() for name in columns.split(',') if name.strip()]
        return cls(columns=list(columns) if columns else None)


@dataclass
class TableStats:
    """Statistics for a single table dump."""
    table: str
    rows_dumped: int = 0
    file_path: str = ""
    success: bool = False
    error: Optional[str] = None


@dataclass
class DumpStats:
    """Overall dump statistics."""
    tables: list[TableStats] = field(default_factory=list)
    total_tables: int = 0
    total_rows: int = 0
    errors: list[dict[str, Any]] = field(default_factory=list)

"""
Load Script Dumper
==================
Serializes stored tables into replayable ``load --table`` scripts:
- Identity-ordered (``_id``) and key-ordered (``_key``) tables
- Default or explicit column selection
- Text, integer, unsigned integer, boolean, time and reference columns,
  scalar or vector
- In-memory and MySQL-backed storage
- Pagination and load script replay
"""

from .config import ConfigLoader
from .connection import DatabaseConnection
from .database_dumper import DatabaseDumper
from .encoder import ValueEncoder
from .errors import (
    DumpError,
    InvalidValue,
    ScriptSyntaxError,
    StorageUnavailable,
    TooLargePage,
    TooLargePageSize,
    TooSmallPage,
    TooSmallPageSize,
    UnknownColumn,
    UnsupportedValueKind,
)
from .loader import load_script, parse_script
from .main import main
from .models import (
    Column,
    DumpOptions,
    DumpPlan,
    DumpStats,
    Record,
    RecordRef,
    StorageKind,
    Table,
    TableStats,
    ValueKind,
)
from .pagination import Page, paginate
from .resolver import ColumnResolver
from .storage import MemoryStorage, Schema, Storage
from .table_dumper import TableDumper
from .utils import print_dry_run_info, setup_logging

__version__ = "1.0.0"

__all__ = [
    # Main entry point
    "main",
    # Core classes
    "ColumnResolver",
    "ConfigLoader",
    "DatabaseConnection",
    "DatabaseDumper",
    "MemoryStorage",
    "Schema",
    "Storage",
    "TableDumper",
    "ValueEncoder",
    # Models
    "Column",
    "DumpOptions",
    "DumpPlan",
    "DumpStats",
    "Record",
    "RecordRef",
    "StorageKind",
    "Table",
    "TableStats",
    "ValueKind",
    # Errors
    "DumpError",
    "InvalidValue",
    "ScriptSyntaxError",
    "StorageUnavailable",
    "TooLargePage",
    "TooLargePageSize",
    "TooSmallPage",
    "TooSmallPageSize",
    "UnknownColumn",
    "UnsupportedValueKind",
    # Utilities
    "Page",
    "load_script",
    "paginate",
    "parse_script",
    "print_dry_run_info",
    "setup_logging",
]

"""
Exceptions raised while dumping, paginating and replaying load scripts.
"""


class DumpError(Exception):
    """Base class for all dumper errors."""


class UnknownColumn(DumpError):
    """A column selection names a column the table does not declare."""

    def __init__(self, table: str, name: str):
        self.table = table
        self.name = name
        super().__init__(f"Unknown column '{name}' in table '{table}'")


class UnsupportedValueKind(DumpError):
    """A value kind outside the set the encoder knows."""

    def __init__(self, kind):
        self.kind = kind
        super().__init__(f"Unsupported value kind: {kind!r}")


class InvalidValue(DumpError):
    """A cell value that cannot be rendered with its column's kind."""

    def __init__(self, kind, value):
        self.kind = kind
        self.value = value
        super().__init__(f"Cannot encode {value!r} as {getattr(kind, 'value', kind)}")


class StorageUnavailable(DumpError):
    """The storage layer failed to describe, enumerate or resolve records."""


class ScriptSyntaxError(DumpError):
    """A load script does not follow the load grammar."""


class PaginationError(DumpError):
    """Base class for invalid page requests."""


class TooSmallPage(PaginationError):
    pass


class TooLargePage(PaginationError):
    pass


class TooSmallPageSize(PaginationError):
    pass


class TooLargePageSize(PaginationError):
    pass

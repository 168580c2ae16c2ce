"""
Page windows over a table's records.
"""

import math
from dataclasses import dataclass, field
from itertools import islice
from typing import Any, Optional, Sequence, Union

from .errors import TooLargePage, TooLargePageSize, TooSmallPage, TooSmallPageSize
from .models import Record, Table
from .storage import Storage

DEFAULT_PAGE_SIZE = 10


@dataclass
class Page:
    """One page of records."""
    current_page: int
    page_size: int
    n_pages: int
    n_records: int
    records: list[Record] = field(default_factory=list)

    @property
    def record_range_in_page(self) -> range:
        """1-based, inclusive positions of the records on this page."""
        first = (self.current_page - 1) * self.page_size + 1
        last = min(self.current_page * self.page_size, self.n_records)
        return range(first, last + 1)

    @property
    def have_previous_page(self) -> bool:
        return self.current_page > 1

    @property
    def previous_page(self) -> Optional[int]:
        return self.current_page - 1 if self.have_previous_page else None

    @property
    def have_next_page(self) -> bool:
        return self.current_page < self.n_pages

    @property
    def next_page(self) -> Optional[int]:
        return self.current_page + 1 if self.have_next_page else None

    @property
    def keys(self) -> list[Any]:
        return [record.primary for record in self.records]


SortKey = Union[str, Sequence[str]]

DIRECTIONS = {
    'asc': False,
    'ascending': False,
    'desc': True,
    'descending': True,
}


def _normalize_sort_keys(table: Table, sort_keys: Sequence[SortKey]) -> list[tuple[str, bool]]:
    """Turn ``["number"]``/``[["number", "desc"]]`` into (column, reverse) pairs."""
    normalized = []
    for sort_key in sort_keys:
        if isinstance(sort_key, str):
            name, direction = sort_key, 'asc'
        elif len(sort_key) == 1:
            name, direction = sort_key[0], 'asc'
        else:
            name, direction = sort_key[0], sort_key[1]
        if direction.lower() not in DIRECTIONS:
            raise ValueError(f"Unknown sort direction: {direction}")
        if name != table.primary_column_name:
            table.column(name)
        normalized.append((name, DIRECTIONS[direction.lower()]))
    return normalized


def _sort_value(table: Table, record: Record, name: str) -> Any:
    value = record.primary if name == table.primary_column_name else record.get(name)
    # nulls sort first when ascending
    return (value is not None, value)


def _sorted_records(storage: Storage, table: Table, sort_keys: Sequence[SortKey]) -> list[Record]:
    keys = _normalize_sort_keys(table, sort_keys)
    records = list(storage.records(table))
    # stable sorts applied from the least significant key
    for name, reverse in reversed(keys):
        records.sort(key=lambda record: _sort_value(table, record, name), reverse=reverse)
    return records


def paginate(
    storage: Storage,
    table_name: str,
    page: int = 1,
    size: int = DEFAULT_PAGE_SIZE,
    sort_keys: Optional[Sequence[SortKey]] = None
) -> Page:
    """
    Cut one page out of a table.

    Args:
        storage: Storage serving the table.
        table_name: Table to paginate.
        page: 1-based page number.
        size: Records per page.
        sort_keys: Column names, or (column, direction) pairs with direction
            ``asc``/``desc``, ordering the records before slicing. Native
            order is used when omitted.

    Raises:
        TooSmallPageSize: size < 1.
        TooLargePageSize: size exceeds the record count (an empty table
            accepts a size of 1).
        TooSmallPage: page < 1.
        TooLargePage: page beyond the last page.
        UnknownColumn: a sort key names an undeclared column.
    """
    table = storage.get_table(table_name)
    n_records = storage.count(table)

    if size < 1:
        raise TooSmallPageSize(f"page size must be >= 1: {size}")
    max_size = max(n_records, 1)
    if size > max_size:
        raise TooLargePageSize(f"page size must be <= {max_size}: {size}")

    n_pages = max(math.ceil(n_records / size), 1)
    if page < 1:
        raise TooSmallPage(f"page must be >= 1: {page}")
    if page > n_pages:
        raise TooLargePage(f"page must be <= {n_pages}: {page}")

    offset = (page - 1) * size
    if sort_keys:
        records = _sorted_records(storage, table, sort_keys)[offset:offset + size]
    else:
        records = list(islice(storage.records(table), offset, offset + size))
    return Page(
        current_page=page,
        page_size=size,
        n_pages=n_pages,
        n_records=n_records,
        records=records,
    )

"""
Value encoding for load scripts.
"""

import json
import math
from datetime import date, datetime, timezone
from typing import Any, Callable

from .errors import InvalidValue, UnsupportedValueKind
from .models import RecordRef, ValueKind

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
MICROSECONDS = 10 ** 6

ReferenceResolver = Callable[[RecordRef], tuple[ValueKind, Any]]


def encode_text(value: Any) -> str:
    """Quote a string with JSON escaping; non-ASCII passes through verbatim."""
    if not isinstance(value, str):
        raise InvalidValue(ValueKind.TEXT, value)
    return json.dumps(value, ensure_ascii=False)


def encode_integer(value: Any) -> str:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidValue(ValueKind.INTEGER, value)
    return str(value)


def encode_unsigned_integer(value: Any) -> str:
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise InvalidValue(ValueKind.UNSIGNED_INTEGER, value)
    return str(value)


def encode_boolean(value: Any) -> str:
    if not isinstance(value, bool):
        raise InvalidValue(ValueKind.BOOLEAN, value)
    return 'true' if value else 'false'


def encode_time(value: Any) -> str:
    """Render an instant as epoch seconds, always with a fractional part.

    Naive datetimes are taken as UTC. Plain numbers are taken as epoch
    seconds already; floats are rounded to microseconds like datetimes.
    """
    if isinstance(value, datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        delta = value - EPOCH
        total = (delta.days * 86400 + delta.seconds) * MICROSECONDS + delta.microseconds
        return _format_microseconds(total)
    if isinstance(value, date):
        raise InvalidValue(ValueKind.TIME, value)
    if isinstance(value, bool):
        raise InvalidValue(ValueKind.TIME, value)
    if isinstance(value, int):
        return f"{value}.0"
    if isinstance(value, float) and math.isfinite(value):
        return _format_microseconds(round(value * MICROSECONDS))
    raise InvalidValue(ValueKind.TIME, value)


def _format_microseconds(total: int) -> str:
    sign = '-' if total < 0 else ''
    seconds, fraction = divmod(abs(total), MICROSECONDS)
    digits = f"{fraction:06d}".rstrip('0') or '0'
    return f"{sign}{seconds}.{digits}"


class ValueEncoder:
    """Encodes cell values into load script tokens.

    Formatters are looked up by declared value kind. Reference cells are
    resolved through ``resolve_reference`` and encoded with the primary kind
    of the referenced table.
    """

    def __init__(self, resolve_reference: ReferenceResolver):
        self.resolve_reference = resolve_reference

        self._formatters: dict[ValueKind, Callable[[Any], str]] = {
            ValueKind.TEXT: encode_text,
            ValueKind.INTEGER: encode_integer,
            ValueKind.UNSIGNED_INTEGER: encode_unsigned_integer,
            ValueKind.BOOLEAN: encode_boolean,
            ValueKind.TIME: encode_time,
            ValueKind.REFERENCE: self._encode_reference,
        }

    def encode(self, value: Any, kind: ValueKind, is_vector: bool = False) -> str:
        """Encode one cell; vectors become a bracketed comma separated list."""
        formatter = self._formatters.get(kind)
        if formatter is None:
            raise UnsupportedValueKind(kind)

        if value is None:
            return 'null'
        if is_vector:
            if isinstance(value, (str, bytes)) or not hasattr(value, '__iter__'):
                raise InvalidValue(kind, value)
            return '[' + ','.join(
                'null' if element is None else formatter(element)
                for element in value
            ) + ']'
        return formatter(value)

    def encode_primary(self, kind: ValueKind, value: Any) -> str:
        """Encode a record's key or id."""
        if kind not in (ValueKind.TEXT, ValueKind.INTEGER, ValueKind.UNSIGNED_INTEGER):
            raise UnsupportedValueKind(kind)
        return self._formatters[kind](value)

    def _encode_reference(self, value: Any) -> str:
        kind, primary = self.resolve_reference(value)
        return self.encode_primary(kind, primary)

"""Accessors for `Value`s and `Row`s.

Three families, for three levels of confidence about a column's type:

- ``to_*``: narrow a value the caller knows the type of; raises
  TagMismatchError otherwise, Null included.
- ``read_*``: look a column up by name (first match wins) and return its
  payload, or None when the column is absent or carries another variant.
- ``as_*``: return the payload of a value when the variant matches, None for
  Null or any other variant.
"""
from collections.abc import Callable, Sequence
from typing import Any

from pgrow.exceptions import TagMismatchError
from pgrow.types import Bool, Bytea, Date, Decimal, HStore, Int, Long, Number
from pgrow.types import Short, String, TimeWithTimeZone, Uuid, Value

__all__ = [
    'find_value',
    'to_bool', 'to_int', 'to_long', 'to_string', 'to_datetime', 'to_float',
    'read_int', 'read_long', 'read_string', 'read_date', 'read_bool',
    'read_decimal', 'read_number', 'read_uuid', 'read_bytea', 'read_hstore',
    'as_int', 'as_short', 'as_long', 'as_date', 'as_bool',
    'as_time_with_time_zone', 'as_decimal', 'as_bytea', 'as_hstore', 'as_uuid',
    'as_number',
]


def find_value(row: Sequence[tuple[str, Value]], name: str) -> Value | None:
    """Return the value of the first column called `name`, or None."""
    for column, value in row:
        if column == name:
            return value
    return None


def _converter(variant: type, description: str) -> Callable[[Value], Any]:
    def convert(value: Value) -> Any:
        if isinstance(value, variant):
            return value.value
        raise TagMismatchError(description, value)
    return convert


to_bool = _converter(Bool, 'a boolean value')
to_int = _converter(Int, 'an integer')
to_long = _converter(Long, 'a long')
to_string = _converter(String, 'a string')
to_datetime = _converter(Date, 'a DateTime')
to_float = _converter(Number, 'a floating number')


def _reader(variant: type) -> Callable[[Sequence[tuple[str, Value]], str], Any]:
    def read(row: Sequence[tuple[str, Value]], name: str) -> Any:
        value = find_value(row, name)
        if isinstance(value, variant):
            return value.value
        return None
    read.__doc__ = f'Read column `name` as {variant.__name__}, or None.'
    return read


read_int = _reader(Int)
read_long = _reader(Long)
read_string = _reader(String)
read_date = _reader(Date)
read_bool = _reader(Bool)
read_decimal = _reader(Decimal)
read_number = _reader(Number)
read_uuid = _reader(Uuid)
read_bytea = _reader(Bytea)
read_hstore = _reader(HStore)


def _optional(variant: type) -> Callable[[Value], Any]:
    def extract(value: Value) -> Any:
        if isinstance(value, variant):
            return value.value
        return None
    extract.__doc__ = f'Payload of a {variant.__name__} value; None for Null or other variants.'
    return extract


as_int = _optional(Int)
as_short = _optional(Short)
as_long = _optional(Long)
as_date = _optional(Date)
as_bool = _optional(Bool)
as_time_with_time_zone = _optional(TimeWithTimeZone)
as_decimal = _optional(Decimal)
as_bytea = _optional(Bytea)
as_hstore = _optional(HStore)
as_uuid = _optional(Uuid)
as_number = _optional(Number)

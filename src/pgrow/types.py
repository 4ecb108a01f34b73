"""
Consolidated type definitions for typed data access.

This module provides:
- Value variants: the closed set of values exchanged with PostgreSQL
- Row and Table: ordered (column, value) pairs and ordered sequences of rows
- Column: column metadata from cursor descriptions
- postgres_types: PostgreSQL type oids that steer integer width and JSON handling
"""
import datetime
import decimal
import uuid
from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, ClassVar, Self, Union

from psycopg.postgres import types as pg_types

INT16_MIN, INT16_MAX = -2**15, 2**15 - 1
INT32_MIN, INT32_MAX = -2**31, 2**31 - 1
INT64_MIN, INT64_MAX = -2**63, 2**63 - 1


def _require(variant: str, value: Any, kinds: type | tuple[type, ...]) -> None:
    """Reject a missing payload or one of the wrong runtime type."""
    if value is None:
        raise TypeError(f'{variant} requires a value, got None')
    if not isinstance(value, kinds):
        raise TypeError(f'{variant} expects {kinds}, got {type(value).__name__}')


def _require_int(variant: str, value: Any, low: int, high: int) -> None:
    if isinstance(value, bool):
        raise TypeError(f'{variant} expects int, got bool')
    _require(variant, value, int)
    if not low <= value <= high:
        raise ValueError(f'{variant} value {value} out of range [{low}, {high}]')


# Value variants

@dataclass(frozen=True, slots=True)
class Null:
    """Database NULL."""
    tag: ClassVar[str] = 'null'


@dataclass(frozen=True, slots=True)
class Bool:
    value: bool
    tag: ClassVar[str] = 'bool'

    def __post_init__(self):
        _require('Bool', self.value, bool)


@dataclass(frozen=True, slots=True)
class Short:
    """16-bit integer (`smallint`)."""
    value: int
    tag: ClassVar[str] = 'short'

    def __post_init__(self):
        _require_int('Short', self.value, INT16_MIN, INT16_MAX)


@dataclass(frozen=True, slots=True)
class Int:
    """32-bit integer (`integer`)."""
    value: int
    tag: ClassVar[str] = 'int'

    def __post_init__(self):
        _require_int('Int', self.value, INT32_MIN, INT32_MAX)


@dataclass(frozen=True, slots=True)
class Long:
    """64-bit integer (`bigint`)."""
    value: int
    tag: ClassVar[str] = 'long'

    def __post_init__(self):
        _require_int('Long', self.value, INT64_MIN, INT64_MAX)


@dataclass(frozen=True, slots=True)
class Number:
    """Double precision float."""
    value: float
    tag: ClassVar[str] = 'number'

    def __post_init__(self):
        _require('Number', self.value, float)


@dataclass(frozen=True, slots=True)
class Decimal:
    """Fixed-point `numeric`."""
    value: decimal.Decimal
    tag: ClassVar[str] = 'decimal'

    def __post_init__(self):
        _require('Decimal', self.value, decimal.Decimal)


@dataclass(frozen=True, slots=True)
class String:
    value: str
    tag: ClassVar[str] = 'string'

    def __post_init__(self):
        _require('String', self.value, str)


@dataclass(frozen=True, slots=True)
class Date:
    """Timestamp without time zone."""
    value: datetime.datetime
    tag: ClassVar[str] = 'date'

    def __post_init__(self):
        _require('Date', self.value, datetime.datetime)
        if self.value.tzinfo is not None:
            raise ValueError('Date expects a naive datetime, use TimeWithTimeZone')


@dataclass(frozen=True, slots=True)
class TimeWithTimeZone:
    """Timestamp with time zone offset."""
    value: datetime.datetime
    tag: ClassVar[str] = 'time_with_time_zone'

    def __post_init__(self):
        _require('TimeWithTimeZone', self.value, datetime.datetime)
        if self.value.tzinfo is None:
            raise ValueError('TimeWithTimeZone expects an aware datetime, use Date')


@dataclass(frozen=True, slots=True)
class Uuid:
    value: uuid.UUID
    tag: ClassVar[str] = 'uuid'

    def __post_init__(self):
        _require('Uuid', self.value, uuid.UUID)


@dataclass(frozen=True, slots=True)
class Bytea:
    value: bytes
    tag: ClassVar[str] = 'bytea'

    def __post_init__(self):
        _require('Bytea', self.value, bytes)


@dataclass(frozen=True, slots=True)
class HStore:
    """String-keyed `hstore` mapping.

    The payload is stored as a read-only copy. PostgreSQL allows NULL hstore
    values, so values may be None; keys are always strings.
    """
    value: Mapping[str, str | None]
    tag: ClassVar[str] = 'hstore'

    def __post_init__(self):
        _require('HStore', self.value, Mapping)
        for key, item in self.value.items():
            if not isinstance(key, str) or not (item is None or isinstance(item, str)):
                raise TypeError(f'HStore expects str keys and str values, got {key!r}: {item!r}')
        object.__setattr__(self, 'value', MappingProxyType(dict(self.value)))

    def __hash__(self) -> int:
        return hash(frozenset(self.value.items()))


@dataclass(frozen=True, slots=True)
class Jsonb:
    """JSON text sent with an explicit `jsonb` parameter type.

    Write-only: reading a json/jsonb column never produces this variant.
    """
    value: str
    tag: ClassVar[str] = 'jsonb'

    def __post_init__(self):
        _require('Jsonb', self.value, str)


Value = Union[Null, Bool, Short, Int, Long, Number, Decimal, String, Date,
              TimeWithTimeZone, Uuid, Bytea, HStore, Jsonb]

VALUE_TYPES: tuple[type, ...] = (
    Null, Bool, Short, Int, Long, Number, Decimal, String, Date,
    TimeWithTimeZone, Uuid, Bytea, HStore, Jsonb,
    )

Row = tuple[tuple[str, Value], ...]
Table = tuple[Row, ...]


# Type Resolution - PostgreSQL type oids

_oid = lambda x: pg_types.get(x).oid

integer_types: dict[int, type] = {
    _oid('int2'): Short,
    _oid('int4'): Int,
    _oid('int8'): Long,
}

json_types: frozenset[int] = frozenset({_oid('json'), _oid('jsonb')})


# Column - Metadata from cursor descriptions

@dataclass(frozen=True, slots=True)
class Column:
    """Result column metadata."""
    name: str
    type_code: int | None = None

    @classmethod
    def from_cursor_description(cls, description_item: Any) -> Self:
        """Create a Column from a psycopg cursor description item."""
        return cls(name=getattr(description_item, 'name', None) or description_item[0],
                   type_code=getattr(description_item, 'type_code', None))


def columns_from_cursor_description(cursor: Any) -> list[Column]:
    """Create Column objects from cursor description."""
    if cursor.description is None:
        return []
    return [Column.from_cursor_description(desc) for desc in cursor.description]

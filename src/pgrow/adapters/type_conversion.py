"""
Value conversion between Python runtime values and `Value` variants.

Database → Python (decode):
1. The driver hands over a native value (int, str, Decimal, datetime, ...)
2. `decode` maps it to exactly one `Value` variant, or fails with
   UnsupportedTypeError naming the runtime type and column

Python → Database (encode):
1. `encode` unboxes a `Value` into the native value psycopg adapts
2. Variants that need an explicit wire type (only Jsonb) carry a WireType

There is no fallback coercion in either direction: a str is never read as a
number and an unknown object is never stringified.

Usage:
    value = decode(raw, column='id', type_code=23)
    wire_value, wire_type = encode(value)
"""
import datetime
import decimal
import logging
import uuid
from collections.abc import Mapping
from enum import Enum
from typing import Any

from pgrow.exceptions import UnsupportedTypeError
from pgrow.types import INT32_MAX, INT32_MIN, INT64_MAX, INT64_MIN, VALUE_TYPES
from pgrow.types import Bool, Bytea, Date, Decimal, HStore, Int, Jsonb, Long
from pgrow.types import Null, Number, Short, String, TimeWithTimeZone, Uuid
from pgrow.types import Value, integer_types, json_types

logger = logging.getLogger(__name__)


class WireType(Enum):
    """Explicit parameter types that override psycopg's own adaptation."""
    JSONB = 'jsonb'


def _full_name(value: Any) -> str:
    kind = type(value)
    if kind.__module__ == 'builtins':
        return kind.__qualname__
    return f'{kind.__module__}.{kind.__qualname__}'


def _decode_int(raw: int, column: str | None, type_code: int | None) -> Value:
    """Pick the integer variant from the column type, else from magnitude."""
    variant = integer_types.get(type_code)
    if variant is not None:
        return variant(raw)
    if INT32_MIN <= raw <= INT32_MAX:
        return Int(raw)
    if INT64_MIN <= raw <= INT64_MAX:
        return Long(raw)
    raise UnsupportedTypeError(_full_name(raw), column)


def _decode_mapping(raw: Mapping, column: str | None) -> Value:
    if all(isinstance(k, str) and (v is None or isinstance(v, str)) for k, v in raw.items()):
        return HStore(raw)
    raise UnsupportedTypeError(_full_name(raw), column)


def decode(raw: Any, column: str | None = None, type_code: int | None = None) -> Value:
    """Convert a native value read from the database into a `Value`.

    Args:
        raw: Value produced by the driver for one field
        column: Column name, used in error messages
        type_code: PostgreSQL type oid of the column, when known

    Returns
        The matching `Value` variant; `Null` for None

    Raises
        UnsupportedTypeError: For runtime types without a variant, integers
            beyond 64 bits, and any json/jsonb column
    """
    if raw is None:
        return Null()

    if type_code in json_types:
        raise UnsupportedTypeError(_full_name(raw), column)

    if isinstance(raw, bool):
        return Bool(raw)

    if isinstance(raw, int):
        return _decode_int(raw, column, type_code)

    if isinstance(raw, float):
        return Number(raw)

    if isinstance(raw, decimal.Decimal):
        return Decimal(raw)

    if isinstance(raw, str):
        return String(raw)

    if isinstance(raw, datetime.datetime):
        if raw.tzinfo is not None:
            return TimeWithTimeZone(raw)
        return Date(raw)

    if isinstance(raw, datetime.date):
        return Date(datetime.datetime.combine(raw, datetime.time()))

    if isinstance(raw, uuid.UUID):
        return Uuid(raw)

    if isinstance(raw, bytes | bytearray | memoryview):
        return Bytea(bytes(raw))

    if isinstance(raw, Mapping):
        return _decode_mapping(raw, column)

    raise UnsupportedTypeError(_full_name(raw), column)


def encode(value: Value) -> tuple[Any, WireType | None]:
    """Convert a `Value` into the native value bound on a command.

    Returns
        Tuple of (wire value, explicit wire type or None)
    """
    if not isinstance(value, VALUE_TYPES):
        raise UnsupportedTypeError(_full_name(value))

    if isinstance(value, Null):
        return None, None

    if isinstance(value, HStore):
        return dict(value.value), None

    if isinstance(value, Jsonb):
        return value.value, WireType.JSONB

    return value.value, None


def value_as_object(value: Value) -> Any:
    """Unbox a value for a required record field; Null becomes None."""
    if isinstance(value, Null):
        return None
    if isinstance(value, HStore):
        return dict(value.value)
    return value.value


def value_as_optional_object(value: Value) -> Any:
    """Unbox a value for an Optional record field.

    Python spells a present optional as the bare value and an absent one as
    None, so this only differs from `value_as_object` in intent.
    """
    if isinstance(value, Null):
        return None
    return value_as_object(value)

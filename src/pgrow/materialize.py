"""
Typed records from rows.

A target shape is described by its fields in constructor order and whether
each one is optional. Shapes are derived for dataclasses and NamedTuple
classes, or registered explicitly for anything else:

    @dataclass
    class User:
        id: int
        email: str
        nickname: str | None

    users = materialize_all(User, execute_table(props))
"""
import dataclasses
import logging
import threading
import types
import typing
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass
from functools import lru_cache
from typing import Any, TypeVar

from pgrow.adapters.type_conversion import value_as_object
from pgrow.adapters.type_conversion import value_as_optional_object
from pgrow.exceptions import MissingFieldError
from pgrow.row import find_value
from pgrow.types import Row, Table

__all__ = [
    'ShapeDescriptor',
    'register_shape',
    'shape_of',
    'materialize',
    'materialize_all',
    'map_each_row',
]

logger = logging.getLogger(__name__)

T = TypeVar('T')


@dataclass(frozen=True)
class ShapeDescriptor:
    """How to build `target`: field names with optionality, and a factory
    called positionally in field order.
    """
    target: type
    fields: tuple[tuple[str, bool], ...]
    factory: Callable[..., Any]


_SHAPE_REGISTRY: dict[type, ShapeDescriptor] = {}
_registry_lock = threading.RLock()


def register_shape(cls: type, fields: Sequence[tuple[str, bool]],
                   factory: Callable[..., Any] | None = None) -> ShapeDescriptor:
    """Register the shape of a class that is neither a dataclass nor a NamedTuple.

    Args:
        cls: target class
        fields: (name, optional) pairs in constructor order
        factory: positional constructor, defaults to `cls`

    Returns
        the registered descriptor
    """
    descriptor = ShapeDescriptor(cls, tuple((name, bool(opt)) for name, opt in fields),
                                 factory or cls)
    with _registry_lock:
        _SHAPE_REGISTRY[cls] = descriptor
    logger.debug(f'Registered shape for {cls.__name__}: {[n for n, _ in descriptor.fields]}')
    return descriptor


def _is_optional(annotation: Any) -> bool:
    """True for Optional[X], X | None and bare None annotations."""
    if annotation is None or annotation is type(None):
        return True
    origin = typing.get_origin(annotation)
    if origin is typing.Union or origin is types.UnionType:
        return type(None) in typing.get_args(annotation)
    return False


def _is_namedtuple(cls: type) -> bool:
    return isinstance(cls, type) and issubclass(cls, tuple) and hasattr(cls, '_fields')


@lru_cache(maxsize=256)
def _derive_shape(cls: type) -> ShapeDescriptor | None:
    if dataclasses.is_dataclass(cls):
        hints = typing.get_type_hints(cls)
        fields = tuple((f.name, _is_optional(hints.get(f.name)))
                       for f in dataclasses.fields(cls) if f.init)
        return ShapeDescriptor(cls, fields, cls)
    if _is_namedtuple(cls):
        hints = typing.get_type_hints(cls)
        fields = tuple((name, _is_optional(hints.get(name, Any))) for name in cls._fields)
        return ShapeDescriptor(cls, fields, cls)
    return None


def shape_of(target: type | ShapeDescriptor) -> ShapeDescriptor | None:
    """Return the descriptor for `target`, or None when it is not record-like.

    Registered shapes take precedence over derived ones.
    """
    if isinstance(target, ShapeDescriptor):
        return target
    with _registry_lock:
        registered = _SHAPE_REGISTRY.get(target)
    if registered is not None:
        return registered
    if not isinstance(target, type):
        return None
    return _derive_shape(target)


def materialize(target: type[T] | ShapeDescriptor, row: Row) -> T | None:
    """Build one record from a row.

    Every declared field must have a column of the same name, optional ones
    included; a missing column raises MissingFieldError. Null unboxes to None.

    Returns
        the record, or None when `target` is not record-like
    """
    shape = shape_of(target)
    if shape is None:
        return None
    arguments = []
    for name, optional in shape.fields:
        value = find_value(row, name)
        if value is None:
            raise MissingFieldError(name)
        arguments.append(value_as_optional_object(value) if optional else value_as_object(value))
    return shape.factory(*arguments)


def materialize_all(target: type[T] | ShapeDescriptor, table: Table) -> list[T]:
    """Build a record per row, discarding rows that cannot be materialized."""
    records = []
    for index, row in enumerate(table):
        try:
            record = materialize(target, row)
        except MissingFieldError as exc:
            logger.debug(f'Skipping row {index}: {exc}')
            continue
        if record is None:
            logger.debug(f'Skipping row {index}: target is not record-like')
            continue
        records.append(record)
    return records


def map_each_row(fn: Callable[[Row], T | None], table: Iterable[Row]) -> list[T]:
    """Apply `fn` to every row and keep the non-None results."""
    return [result for result in map(fn, table) if result is not None]

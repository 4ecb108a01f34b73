"""
Exception classes for typed data access.
"""
from typing import Any

import psycopg


class DatabaseError(Exception):
    """Base class for all pgrow errors.
    """


class EmptyQueryError(DatabaseError):
    """No statement configured to execute.
    """

    def __init__(self, message: str = 'No query provided to execute') -> None:
        super().__init__(message)


class TypeConversionError(DatabaseError):
    """Error converting types between Python and database.
    """


class UnsupportedTypeError(TypeConversionError):
    """A runtime value has no `Value` counterpart.
    """

    def __init__(self, type_name: str, column: str | None = None) -> None:
        self.type_name = type_name
        self.column = column
        if column is not None:
            message = f"Unable to read column '{column}' of type '{type_name}'"
        else:
            message = f"Unable to read column of type '{type_name}'"
        super().__init__(message)


class TagMismatchError(TypeConversionError):
    """A narrowing converter was applied to a value of another variant.
    """

    def __init__(self, expected: str, value: Any) -> None:
        self.expected = expected
        self.value = value
        super().__init__(f'Could not convert {value!r} into {expected}')


class MissingFieldError(DatabaseError):
    """A record field has no matching column in the row.
    """

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f'Missing parameter: {name}')


class QueryCancelledError(DatabaseError):
    """The cancel signal was set while the call was suspended.
    """


ExecutionFailure = (
    psycopg.Error,
    )

DbConnectionError = (
    psycopg.OperationalError,
    psycopg.InterfaceError,
    )

IntegrityError = (
    psycopg.IntegrityError,
    )

ProgrammingError = (
    psycopg.ProgrammingError,
    psycopg.DataError,
    )

OperationalError = (
    psycopg.OperationalError,
    )

UniqueViolation = (
    psycopg.errors.UniqueViolation,
    )

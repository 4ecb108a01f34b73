"""
Single-call query execution.

Every operation is written once, as a routine over an IO port, and exposed in
four styles:

- `execute_x(props)`: blocking, raises on failure
- `execute_x_safe(props)`: blocking, returns Ok/Err
- `execute_x_async(props, cancel=None)`: asyncio, raises on failure
- `execute_x_safe_async(props, cancel=None)`: asyncio, returns Ok/Err

Each call opens its own connection in autocommit mode and closes it on every
exit path.
"""
import logging
from collections.abc import Callable
from typing import Any, TypeVar

from pgrow.adapters.type_conversion import decode
from pgrow.core.io import BlockingIO, SuspendingIO
from pgrow.core.runner import CancelSignal, Routine, run_blocking
from pgrow.core.runner import run_blocking_safe, run_suspending
from pgrow.core.runner import run_suspending_safe
from pgrow.cursor import RowReader
from pgrow.query import QueryConfig
from pgrow.reader import read_table_steps
from pgrow.result import Result
from pgrow.sql import Command, bind
from pgrow.types import Null, Table, Value

__all__ = [
    'execute_table', 'execute_table_safe',
    'execute_table_async', 'execute_table_safe_async',
    'execute_reader', 'execute_reader_safe',
    'execute_reader_async', 'execute_reader_safe_async',
    'execute_scalar', 'execute_scalar_safe',
    'execute_scalar_async', 'execute_scalar_safe_async',
    'execute_non_query', 'execute_non_query_safe',
    'execute_non_query_async', 'execute_non_query_safe_async',
    'execute_many', 'execute_many_safe',
    'execute_many_async', 'execute_many_safe_async',
]

logger = logging.getLogger(__name__)

T = TypeVar('T')

IO = BlockingIO | SuspendingIO
Consumer = Callable[[IO, RowReader], Routine[T]]


def statement_steps(io: IO, props: QueryConfig, command: Command,
                    consume: Consumer[T], client_side: bool = False) -> Routine[T]:
    """Connect, execute `command` and hand the reader to `consume`.

    The cursor and connection are closed on every exit path, including
    failures thrown in by the runner.
    """
    connection = yield io.connect(props)
    try:
        cursor = yield io.cursor(connection, client_side)
        try:
            prepare = props.need_prepare and not client_side
            reader = yield io.execute(cursor, command, prepare)
            return (yield from consume(io, reader))
        finally:
            yield io.close_cursor(cursor)
    finally:
        yield io.close(connection)


def _single_command(props: QueryConfig) -> Command:
    return bind(Command(props.first_statement, props.is_function), props.params)


def _table_routine(io: IO, props: QueryConfig) -> Routine[Table]:
    props.require_statement()
    return (yield from statement_steps(io, props, _single_command(props), read_table_steps))


def _reader_routine(io: IO, props: QueryConfig, read: Callable[[RowReader], T | None]) -> Routine[list[T]]:
    props.require_statement()

    def consume(io: IO, reader: RowReader) -> Routine[list[T]]:
        results = []
        while (yield io.read(reader)):
            item = read(reader)
            if item is not None:
                results.append(item)
        return results

    return (yield from statement_steps(io, props, _single_command(props), consume))


def _first_field(io: IO, reader: RowReader) -> Routine[Value]:
    if reader.field_count == 0 or not (yield io.read(reader)):
        return Null()
    if (yield io.is_null(reader, 0)):
        return Null()
    raw = yield io.get_value(reader, 0)
    return decode(raw, reader.get_name(0), reader.get_type_code(0))


def _scalar_routine(io: IO, props: QueryConfig) -> Routine[Value]:
    props.require_statement()
    return (yield from statement_steps(io, props, _single_command(props), _first_field))


def _affected_rows(io: IO, reader: RowReader) -> Routine[int]:
    yield from ()
    return reader.rowcount


def _non_query_routine(io: IO, props: QueryConfig) -> Routine[int]:
    props.require_statement()
    return (yield from statement_steps(io, props, _single_command(props), _affected_rows))


def _many_routine(io: IO, props: QueryConfig) -> Routine[list[Table]]:
    """Run all statements as one batch and read one table per statement.

    psycopg only sends several statements in one round trip with client-side
    parameter binding, so the batch always uses a client cursor and is never
    prepared.
    """
    props.require_statement()
    count = len(props.statements)
    command = bind(Command(';'.join(props.statements)), props.params)

    def consume(io: IO, reader: RowReader) -> Routine[list[Table]]:
        tables = []
        for index in range(count):
            if index:
                yield io.next_result(reader)
            tables.append((yield from read_table_steps(io, reader)))
        logger.debug(f'Read {len(tables)} result sets')
        return tables

    return (yield from statement_steps(io, props, command, consume, client_side=True))


def execute_table(props: QueryConfig) -> Table:
    """Execute the query and return every row of its result set."""
    return run_blocking(_table_routine(BlockingIO(), props))


def execute_table_safe(props: QueryConfig) -> Result:
    return run_blocking_safe(_table_routine(BlockingIO(), props))


async def execute_table_async(props: QueryConfig, cancel: CancelSignal | None = None) -> Table:
    return await run_suspending(_table_routine(SuspendingIO(), props), cancel)


async def execute_table_safe_async(props: QueryConfig, cancel: CancelSignal | None = None) -> Result:
    return await run_suspending_safe(_table_routine(SuspendingIO(), props), cancel)


def execute_reader(props: QueryConfig, read: Callable[[RowReader], Any]) -> list[Any]:
    """Execute the query and apply `read` to each row.

    Args:
        props: query configuration
        read: called with the reader positioned on each row; None results
            are dropped

    Returns
        list of the non-None results, in row order
    """
    return run_blocking(_reader_routine(BlockingIO(), props, read))


def execute_reader_safe(props: QueryConfig, read: Callable[[RowReader], Any]) -> Result:
    return run_blocking_safe(_reader_routine(BlockingIO(), props, read))


async def execute_reader_async(props: QueryConfig, read: Callable[[RowReader], Any],
                               cancel: CancelSignal | None = None) -> list[Any]:
    return await run_suspending(_reader_routine(SuspendingIO(), props, read), cancel)


async def execute_reader_safe_async(props: QueryConfig, read: Callable[[RowReader], Any],
                                    cancel: CancelSignal | None = None) -> Result:
    return await run_suspending_safe(_reader_routine(SuspendingIO(), props, read), cancel)


def execute_scalar(props: QueryConfig) -> Value:
    """Return the first column of the first row, or Null when there is none."""
    return run_blocking(_scalar_routine(BlockingIO(), props))


def execute_scalar_safe(props: QueryConfig) -> Result:
    return run_blocking_safe(_scalar_routine(BlockingIO(), props))


async def execute_scalar_async(props: QueryConfig, cancel: CancelSignal | None = None) -> Value:
    return await run_suspending(_scalar_routine(SuspendingIO(), props), cancel)


async def execute_scalar_safe_async(props: QueryConfig, cancel: CancelSignal | None = None) -> Result:
    return await run_suspending_safe(_scalar_routine(SuspendingIO(), props), cancel)


def execute_non_query(props: QueryConfig) -> int:
    """Execute the statement and return the number of affected rows."""
    return run_blocking(_non_query_routine(BlockingIO(), props))


def execute_non_query_safe(props: QueryConfig) -> Result:
    return run_blocking_safe(_non_query_routine(BlockingIO(), props))


async def execute_non_query_async(props: QueryConfig, cancel: CancelSignal | None = None) -> int:
    return await run_suspending(_non_query_routine(SuspendingIO(), props), cancel)


async def execute_non_query_safe_async(props: QueryConfig, cancel: CancelSignal | None = None) -> Result:
    return await run_suspending_safe(_non_query_routine(SuspendingIO(), props), cancel)


def execute_many(props: QueryConfig) -> list[Table]:
    """Execute all configured statements in one batch.

    Returns
        one table per statement, in statement order; statements without a
        result set give an empty table
    """
    return run_blocking(_many_routine(BlockingIO(), props))


def execute_many_safe(props: QueryConfig) -> Result:
    return run_blocking_safe(_many_routine(BlockingIO(), props))


async def execute_many_async(props: QueryConfig, cancel: CancelSignal | None = None) -> list[Table]:
    return await run_suspending(_many_routine(SuspendingIO(), props), cancel)


async def execute_many_safe_async(props: QueryConfig, cancel: CancelSignal | None = None) -> Result:
    return await run_suspending_safe(_many_routine(SuspendingIO(), props), cancel)

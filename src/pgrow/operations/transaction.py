"""
Multi-statement transactions.

`queries` pairs each statement with the parameter rows to run it with:

    execute_transaction(props, [
        ('insert into audit(msg) values (@msg)', [[('msg', String('a'))],
                                                   [('msg', String('b'))]]),
        ('delete from staging', []),
    ])

A statement with no parameter rows runs once without parameters; otherwise
it runs once per row. Everything commits together or not at all. Only the
connection settings and client certificate of `props` are used.
"""
import logging
from collections.abc import Sequence

from pgrow.core.io import BlockingIO, SuspendingIO
from pgrow.core.runner import CancelSignal, Routine, run_blocking
from pgrow.core.runner import run_blocking_safe, run_suspending
from pgrow.core.runner import run_suspending_safe
from pgrow.query import QueryConfig
from pgrow.result import Result
from pgrow.sql import Command, bind
from pgrow.types import Row

__all__ = [
    'execute_transaction',
    'execute_transaction_safe',
    'execute_transaction_async',
    'execute_transaction_safe_async',
]

logger = logging.getLogger(__name__)

TransactionQueries = Sequence[tuple[str, Sequence[Row]]]


def _transaction_routine(io: BlockingIO | SuspendingIO, props: QueryConfig,
                         queries: TransactionQueries) -> Routine[list[int]]:
    queries = [(statement, list(rows)) for statement, rows in queries]
    if not queries:
        return []

    connection = yield io.connect(props, autocommit=False)
    try:
        counts = []
        try:
            for statement, rows in queries:
                for row in rows or [()]:
                    cursor = yield io.cursor(connection)
                    try:
                        reader = yield io.execute(cursor, bind(Command(statement), row))
                        counts.append(reader.rowcount)
                    finally:
                        yield io.close_cursor(cursor)
            yield io.commit(connection)
        except BaseException:
            yield io.rollback(connection)
            raise
        logger.debug(f'Transaction affected {sum(counts)} rows over {len(counts)} executions')
        return counts
    finally:
        yield io.close(connection)


def execute_transaction(props: QueryConfig, queries: TransactionQueries) -> list[int]:
    """Run every statement inside one transaction.

    Args:
        props: connection settings
        queries: (statement, parameter rows) pairs, run in order

    Returns
        affected row counts, one per execution, in execution order
    """
    return run_blocking(_transaction_routine(BlockingIO(), props, queries))


def execute_transaction_safe(props: QueryConfig, queries: TransactionQueries) -> Result:
    return run_blocking_safe(_transaction_routine(BlockingIO(), props, queries))


async def execute_transaction_async(props: QueryConfig, queries: TransactionQueries,
                                    cancel: CancelSignal | None = None) -> list[int]:
    return await run_suspending(_transaction_routine(SuspendingIO(), props, queries), cancel)


async def execute_transaction_safe_async(props: QueryConfig, queries: TransactionQueries,
                                         cancel: CancelSignal | None = None) -> Result:
    return await run_suspending_safe(_transaction_routine(SuspendingIO(), props, queries), cancel)

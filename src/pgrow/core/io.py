"""
I/O ports used by execution routines.

Both ports expose the same operations. BlockingIO performs each one
immediately; SuspendingIO returns a coroutine for the runner to await, which
makes every call below a suspension point:

connect, execute, read, is_null, get_value, next_result, commit, rollback,
close_cursor, close
"""
import logging
from typing import Any

import psycopg

from pgrow.adapters.type_mapping import AdapterRegistry, get_adapter_registry
from pgrow.cursor import RowReader, dumpsql
from pgrow.options import to_conninfo
from pgrow.query import QueryConfig
from pgrow.sql import Command

logger = logging.getLogger(__name__)


def connect_arguments(props: QueryConfig) -> tuple[str, dict[str, Any]]:
    """Return the conninfo and extra keyword arguments for opening a connection."""
    conninfo = to_conninfo(props.connection_string)
    kwargs: dict[str, Any] = {}
    if props.client_certificate is not None:
        kwargs.update(props.client_certificate.connect_kwargs())
    return conninfo, kwargs


def _execute_kwargs(prepare: bool) -> dict[str, Any]:
    """Only force preparation when asked; otherwise psycopg applies its own policy."""
    return {'prepare': True} if prepare else {}


class BlockingIO:
    """Performs each operation on the calling thread."""

    client_cursor_factory = psycopg.ClientCursor

    def __init__(self, registry: AdapterRegistry | None = None) -> None:
        self.registry = registry or get_adapter_registry()

    def connect(self, props: QueryConfig, autocommit: bool = True) -> psycopg.Connection:
        conninfo, kwargs = connect_arguments(props)
        connection = psycopg.connect(conninfo, autocommit=autocommit, **kwargs)
        try:
            self.registry.postgres(connection, conninfo)
        except BaseException:
            connection.close()
            raise
        logger.debug(f'Opened connection {id(connection)}')
        return connection

    def cursor(self, connection: Any, client_side: bool = False) -> Any:
        if client_side:
            return self.client_cursor_factory(connection)
        return connection.cursor()

    def execute(self, cursor: Any, command: Command, prepare: bool = False) -> RowReader:
        query, params = command.render()
        with dumpsql(command):
            cursor.execute(query, params, **_execute_kwargs(prepare))
        return RowReader(cursor)

    def read(self, reader: RowReader) -> bool:
        return reader.read()

    def is_null(self, reader: RowReader, index: int) -> bool:
        return reader.is_null(index)

    def get_value(self, reader: RowReader, index: int) -> Any:
        return reader.get_value(index)

    def next_result(self, reader: RowReader) -> bool:
        return reader.next_result()

    def commit(self, connection: Any) -> None:
        connection.commit()
        logger.debug(f'Committed transaction for connection {id(connection)}')

    def rollback(self, connection: Any) -> None:
        connection.rollback()
        logger.warning('Rolling back the current transaction')

    def close_cursor(self, cursor: Any) -> None:
        cursor.close()

    def close(self, connection: Any) -> None:
        connection.close()
        logger.debug(f'Closed connection {id(connection)}')


class SuspendingIO:
    """Returns a coroutine per operation, for asyncio callers."""

    client_cursor_factory = psycopg.AsyncClientCursor

    def __init__(self, registry: AdapterRegistry | None = None) -> None:
        self.registry = registry or get_adapter_registry()

    async def connect(self, props: QueryConfig, autocommit: bool = True) -> psycopg.AsyncConnection:
        conninfo, kwargs = connect_arguments(props)
        connection = await psycopg.AsyncConnection.connect(conninfo, autocommit=autocommit, **kwargs)
        try:
            await self.registry.postgres_async(connection, conninfo)
        except BaseException:
            await connection.close()
            raise
        logger.debug(f'Opened connection {id(connection)}')
        return connection

    async def cursor(self, connection: Any, client_side: bool = False) -> Any:
        if client_side:
            return self.client_cursor_factory(connection)
        return connection.cursor()

    async def execute(self, cursor: Any, command: Command, prepare: bool = False) -> RowReader:
        query, params = command.render()
        with dumpsql(command):
            await cursor.execute(query, params, **_execute_kwargs(prepare))
        return RowReader(cursor)

    async def read(self, reader: RowReader) -> bool:
        return await reader.read_async()

    async def is_null(self, reader: RowReader, index: int) -> bool:
        return reader.is_null(index)

    async def get_value(self, reader: RowReader, index: int) -> Any:
        return reader.get_value(index)

    async def next_result(self, reader: RowReader) -> bool:
        return reader.next_result()

    async def commit(self, connection: Any) -> None:
        await connection.commit()
        logger.debug(f'Committed transaction for connection {id(connection)}')

    async def rollback(self, connection: Any) -> None:
        await connection.rollback()
        logger.warning('Rolling back the current transaction')

    async def close_cursor(self, cursor: Any) -> None:
        await cursor.close()

    async def close(self, connection: Any) -> None:
        await connection.close()
        logger.debug(f'Closed connection {id(connection)}')

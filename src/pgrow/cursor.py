"""
Forward-only field access over psycopg cursors.

RowReader exposes the current row of a cursor one field at a time, the way
row decoders and the table readers consume it. The same class wraps blocking
and asyncio cursors; only advancing differs (`read` vs `read_async`).
"""
import logging
import time
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from pgrow.sql import Command
from pgrow.types import Column, columns_from_cursor_description

logger = logging.getLogger(__name__)


@contextmanager
def dumpsql(command: Command) -> Iterator[None]:
    """Log a statement, its parameter names and its execution time."""
    start = time.time()
    names = [p.name for p in command.parameters]
    logger.debug(f'SQL:\n{command.describe()}\nparams: {names}')
    try:
        yield
    except Exception:
        logger.error(f'Error with query:\nSQL:\n{command.describe()}\nparams: {names}')
        raise
    finally:
        elapsed = time.time() - start
        logger.debug(f'Query time: {elapsed:.4f}s')


class RowReader:
    """Field-level reader positioned on the current row of a cursor.

    Before the first `read` there is no current row; `is_null` and
    `get_value` then raise IndexError. A statement that produced no result set
    (e.g. an UPDATE) reads as zero rows with zero fields.
    """

    def __init__(self, cursor: Any) -> None:
        self.cursor = cursor
        self.columns: list[Column] = columns_from_cursor_description(cursor)
        self._row: tuple | None = None

    @property
    def field_count(self) -> int:
        return len(self.columns)

    @property
    def has_result(self) -> bool:
        return self.cursor.description is not None

    @property
    def rowcount(self) -> int:
        """Rows affected by the statement, as reported by the driver."""
        return self.cursor.rowcount

    def get_name(self, index: int) -> str:
        return self.columns[index].name

    def get_type_code(self, index: int) -> int | None:
        return self.columns[index].type_code

    def _current(self) -> tuple:
        if self._row is None:
            raise IndexError('No current row, call read() first')
        return self._row

    def is_null(self, index: int) -> bool:
        return self._current()[index] is None

    def get_value(self, index: int) -> Any:
        return self._current()[index]

    def read(self) -> bool:
        """Advance to the next row; False once the result set is exhausted."""
        self._row = self.cursor.fetchone() if self.has_result else None
        return self._row is not None

    async def read_async(self) -> bool:
        """Advance an asyncio cursor to the next row."""
        self._row = await self.cursor.fetchone() if self.has_result else None
        return self._row is not None

    def next_result(self) -> bool:
        """Move to the next result set of a multi-statement batch."""
        moved = bool(self.cursor.nextset())
        self.columns = columns_from_cursor_description(self.cursor)
        self._row = None
        return moved

"""
Row and table readers.

`read_row_steps` and `read_table_steps` are the single implementation of
reading; the blocking and asyncio functions below only choose the IO port and
runner, so both styles decode the same data into identical rows. Each null
check, field fetch and cursor advance is its own step.
"""
import logging

from pgrow.adapters.type_conversion import decode
from pgrow.core.io import BlockingIO, SuspendingIO
from pgrow.core.runner import CancelSignal, Routine, run_blocking, run_suspending
from pgrow.cursor import RowReader
from pgrow.types import Null, Row, Table

logger = logging.getLogger(__name__)


def read_row_steps(io: BlockingIO | SuspendingIO, reader: RowReader) -> Routine[Row]:
    """Decode every field of the current row, in column order."""
    fields = []
    for index in range(reader.field_count):
        name = reader.get_name(index)
        if (yield io.is_null(reader, index)):
            fields.append((name, Null()))
            continue
        raw = yield io.get_value(reader, index)
        fields.append((name, decode(raw, name, reader.get_type_code(index))))
    return tuple(fields)


def read_table_steps(io: BlockingIO | SuspendingIO, reader: RowReader) -> Routine[Table]:
    """Advance through the remaining rows of the current result set."""
    rows = []
    while (yield io.read(reader)):
        rows.append((yield from read_row_steps(io, reader)))
    logger.debug(f'Read {len(rows)} rows')
    return tuple(rows)


def read_row(reader: RowReader) -> Row:
    """Read the current row of a blocking cursor."""
    return run_blocking(read_row_steps(BlockingIO(), reader))


def read_table(reader: RowReader) -> Table:
    """Read all remaining rows of a blocking cursor."""
    return run_blocking(read_table_steps(BlockingIO(), reader))


async def read_row_async(reader: RowReader, cancel: CancelSignal | None = None) -> Row:
    """Read the current row of an asyncio cursor."""
    return await run_suspending(read_row_steps(SuspendingIO(), reader), cancel)


async def read_table_async(reader: RowReader, cancel: CancelSignal | None = None) -> Table:
    """Read all remaining rows of an asyncio cursor."""
    return await run_suspending(read_table_steps(SuspendingIO(), reader), cancel)

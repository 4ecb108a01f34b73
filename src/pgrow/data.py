"""
DataFrame export for tables.
"""
import logging
from collections.abc import Sequence

import pandas as pd

from pgrow.adapters.type_conversion import value_as_object
from pgrow.types import Row, Table

__all__ = ['to_dataframe', 'to_records']

logger = logging.getLogger(__name__)


def to_records(table: Table) -> list[dict]:
    """Unbox every row into a dict of native values; Null becomes None."""
    return [{name: value_as_object(value) for name, value in row} for row in table]


def _column_tags(row: Row) -> dict[str, str]:
    return {name: value.tag for name, value in row}


def to_dataframe(table: Table, columns: Sequence[str] | None = None) -> pd.DataFrame:
    """Load a table into a pandas DataFrame.

    Always returns a DataFrame, never None. Column order follows the first
    row; pass `columns` to keep the header of an empty result. The value tag
    of each column in the first row is stored in `df.attrs['column_tags']`.
    """
    if not table:
        df = pd.DataFrame(columns=list(columns or ()))
        df.attrs['column_tags'] = {}
        return df

    names = list(columns) if columns is not None else [name for name, _ in table[0]]
    df = pd.DataFrame.from_records(to_records(table), columns=names)
    df.attrs['column_tags'] = _column_tags(table[0])
    logger.debug(f'Loaded {len(df)} rows into DataFrame with columns {names}')
    return df

"""
Immutable query configuration.

A QueryConfig is built incrementally; every setter returns a new instance and
setters may be applied in any order:

    props = (connect(ConnectionOptions(host='localhost', database='app'))
             .query('select * from users where id = @id')
             .parameters([('id', Int(1))]))
"""
from collections.abc import Sequence
from dataclasses import dataclass, field, replace
from typing import Self

from pgrow.exceptions import EmptyQueryError
from pgrow.options import ClientCertificate, ConnectionOptions
from pgrow.types import Row, Value

__all__ = ['QueryConfig', 'connect']


@dataclass(frozen=True)
class QueryConfig:
    """Everything needed to run one call against the database.

    An empty `statements` tuple means no query was configured; execution
    functions reject it with EmptyQueryError before connecting.
    """
    connection_string: str = field(default='', repr=False)
    statements: tuple[str, ...] = ()
    params: Row = ()
    is_function: bool = False
    need_prepare: bool = False
    client_certificate: ClientCertificate | None = None

    def query(self, sql: str) -> Self:
        """Set a single statement."""
        return replace(self, statements=(sql,), is_function=False)

    def func(self, name: str) -> Self:
        """Call the stored function `name` with the configured parameters."""
        return replace(self, statements=(name,), is_function=True)

    def query_many(self, statements: Sequence[str]) -> Self:
        """Set several statements, executed as one batch by execute_many."""
        return replace(self, statements=tuple(statements), is_function=False)

    def parameters(self, row: Sequence[tuple[str, Value]]) -> Self:
        """Set the parameter row."""
        return replace(self, params=tuple((name, value) for name, value in row))

    def prepare(self) -> Self:
        """Prepare the statement server-side before executing it."""
        return replace(self, need_prepare=True)

    def with_cert(self, certificate: ClientCertificate) -> Self:
        """Present a client certificate when the connection opens."""
        return replace(self, client_certificate=certificate)

    @property
    def first_statement(self) -> str:
        self.require_statement()
        return self.statements[0]

    def require_statement(self) -> None:
        if not self.statements:
            raise EmptyQueryError()


def connect(connection_string: str | ConnectionOptions) -> QueryConfig:
    """Start a configuration for the given connection string."""
    return QueryConfig(connection_string=str(connection_string))

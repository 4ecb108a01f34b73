"""
Parameter binding and SQL rendering.

Statements name their parameters with the `@` marker (`where id = @id`).
Binding attaches encoded values to a Command; rendering produces what psycopg
executes:

    SQL + Row → bind (normalize names, encode) → Command
    Command → render → ('... where id = %(id)s', {'id': 1})

Rendering skips string literals, quoted identifiers and dollar-quoted bodies
when looking for placeholders, and doubles literal `%` signs whenever
parameters are sent, because psycopg reads `%` as its own placeholder prefix.
"""
import logging
import re
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any

from psycopg import sql as pgsql

from pgrow.adapters.type_conversion import WireType, encode
from pgrow.adapters.type_mapping import to_wire
from pgrow.types import Value

__all__ = [
    'PARAMETER_MARKER',
    'Parameter',
    'Command',
    'normalize_parameter_name',
    'bind',
    'render_placeholders',
]

logger = logging.getLogger(__name__)

PARAMETER_MARKER = '@'

_TOKEN_RE = re.compile(r"""
      (?P<quoted>
          '(?:[^']|'')*'                                  # string literal
        | "(?:[^"]|"")*"                                  # quoted identifier
        | \$(?P<tag>(?:[A-Za-z_]\w*)?)\$.*?\$(?P=tag)\$   # dollar-quoted body
      )
    | (?<![@\w])@(?P<name>[A-Za-z_]\w*)                   # @name placeholder
    | (?P<percent>%)
""", re.VERBOSE | re.DOTALL)


def normalize_parameter_name(name: str) -> str:
    """Prefix `name` with the parameter marker unless it already has it.

    >>> normalize_parameter_name('id')
    '@id'
    >>> normalize_parameter_name('@id')
    '@id'
    """
    if name.startswith(PARAMETER_MARKER):
        return name
    return f'{PARAMETER_MARKER}{name}'


def _bare(name: str) -> str:
    return name[len(PARAMETER_MARKER):]


@dataclass(frozen=True, slots=True)
class Parameter:
    """One bound parameter: normalized name, wire value and optional type."""
    name: str
    value: Any
    wire_type: WireType | None = None

    @property
    def key(self) -> str:
        return _bare(self.name)


def render_placeholders(sql: str, names: set[str]) -> str:
    """Rewrite `@name` placeholders for bound `names` to `%(name)s`.

    Names not in `names` are left untouched. Literal `%` signs are doubled
    when any parameter is bound.
    """
    escape = bool(names)

    def replace(match: re.Match) -> str:
        if match.group('quoted') is not None:
            text = match.group('quoted')
            return text.replace('%', '%%') if escape else text
        if match.group('percent') is not None:
            return '%%' if escape else '%'
        name = match.group('name')
        if name in names:
            return f'%({name})s'
        return match.group(0)

    return _TOKEN_RE.sub(replace, sql)


@dataclass
class Command:
    """An outgoing statement with its bound parameters.

    `is_function` turns `sql` into the name of a stored function called with
    the parameters in named notation.
    """
    sql: str
    is_function: bool = False
    parameters: list[Parameter] = field(default_factory=list)

    def add(self, name: str, value: Any, wire_type: WireType | None = None) -> None:
        self.parameters.append(Parameter(normalize_parameter_name(name), value, wire_type))

    def values(self) -> dict[str, Any] | None:
        """Parameter dict for psycopg; later duplicates win."""
        if not self.parameters:
            return None
        return {p.key: to_wire(p.value, p.wire_type) for p in self.parameters}

    def render(self) -> tuple[str | pgsql.Composed, dict[str, Any] | None]:
        """Return the query and parameters to hand to `cursor.execute`."""
        params = self.values()
        if self.is_function:
            return self._function_call(params or {}), params
        return render_placeholders(self.sql, set(params or ())), params

    def _function_call(self, params: dict[str, Any]) -> pgsql.Composed:
        arguments = pgsql.SQL(', ').join(
            pgsql.SQL('{} => {}').format(pgsql.Identifier(name), pgsql.Placeholder(name))
            for name in params)
        return pgsql.SQL('SELECT * FROM {}({})').format(
            pgsql.Identifier(*self.sql.split('.')), arguments)

    def describe(self) -> str:
        """Statement text for log messages."""
        if self.is_function:
            return f'function {self.sql}'
        return self.sql


def bind(command: Command, row: Sequence[tuple[str, Value]]) -> Command:
    """Encode every (name, value) pair of `row` onto `command`, in row order."""
    for name, value in row:
        wire_value, wire_type = encode(value)
        command.add(name, wire_value, wire_type)
    return command

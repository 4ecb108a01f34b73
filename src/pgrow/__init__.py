"""
Typed PostgreSQL data access on top of psycopg.

Every value crossing the wire is one `Value` variant; rows are tuples of
(column, Value) pairs. Queries are configured with an immutable QueryConfig
and run through one of the execute_* functions, each available blocking,
blocking-safe, asyncio and asyncio-safe:

    props = pgrow.connect(options).query('select * from users where id = @id')
    table = pgrow.execute_table(props.parameters([('id', pgrow.Int(1))]))
"""
__version__ = '0.1.0'

from pgrow.adapters import WireType, decode, encode, get_adapter_registry
from pgrow.adapters import value_as_object, value_as_optional_object
from pgrow.cursor import RowReader
from pgrow.data import to_dataframe, to_records
from pgrow.exceptions import DatabaseError, DbConnectionError, EmptyQueryError
from pgrow.exceptions import ExecutionFailure, IntegrityError
from pgrow.exceptions import MissingFieldError, OperationalError
from pgrow.exceptions import ProgrammingError, QueryCancelledError
from pgrow.exceptions import TagMismatchError, TypeConversionError
from pgrow.exceptions import UniqueViolation, UnsupportedTypeError
from pgrow.materialize import ShapeDescriptor, map_each_row, materialize
from pgrow.materialize import materialize_all, register_shape, shape_of
from pgrow.operations import *  # noqa: F401,F403
from pgrow.operations import __all__ as _operations_all
from pgrow.options import ClientCertificate, ConnectionOptions, from_uri
from pgrow.options import to_conninfo
from pgrow.query import QueryConfig, connect
from pgrow.reader import read_row, read_row_async, read_table
from pgrow.reader import read_table_async
from pgrow.result import Err, Ok, Result
from pgrow.row import *  # noqa: F401,F403
from pgrow.row import __all__ as _row_all
from pgrow.sql import Command, Parameter, bind, normalize_parameter_name
from pgrow.types import Bool, Bytea, Column, Date, Decimal, HStore, Int
from pgrow.types import Jsonb, Long, Null, Number, Row, Short, String, Table
from pgrow.types import TimeWithTimeZone, Uuid, Value

__all__ = [
    # values
    'Value', 'Null', 'Bool', 'Short', 'Int', 'Long', 'Number', 'Decimal',
    'String', 'Date', 'TimeWithTimeZone', 'Uuid', 'Bytea', 'HStore', 'Jsonb',
    'Row', 'Table', 'Column',
    # codec
    'WireType', 'decode', 'encode', 'value_as_object',
    'value_as_optional_object', 'get_adapter_registry',
    # reading
    'RowReader', 'read_row', 'read_table', 'read_row_async',
    'read_table_async',
    # binding
    'Command', 'Parameter', 'bind', 'normalize_parameter_name',
    # records
    'ShapeDescriptor', 'register_shape', 'shape_of', 'materialize',
    'materialize_all', 'map_each_row', 'to_dataframe', 'to_records',
    # configuration
    'ConnectionOptions', 'ClientCertificate', 'from_uri', 'to_conninfo',
    'QueryConfig', 'connect',
    # results and errors
    'Ok', 'Err', 'Result',
    'DatabaseError', 'EmptyQueryError', 'TypeConversionError',
    'UnsupportedTypeError', 'TagMismatchError', 'MissingFieldError',
    'QueryCancelledError', 'ExecutionFailure', 'DbConnectionError',
    'IntegrityError', 'ProgrammingError', 'OperationalError',
    'UniqueViolation',
] + _operations_all + _row_all

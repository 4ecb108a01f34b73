"""
End-to-end tests against a PostgreSQL container.
"""
import asyncio
import datetime
import decimal
import uuid
from dataclasses import dataclass

import psycopg
import pytest

import pgrow
from pgrow import Bool, Bytea, Date, Decimal, HStore, Int, Jsonb, Long, Null
from pgrow import Number, Short, String, TimeWithTimeZone, Uuid


@dataclass
class Entry:
    name: str
    value: int


class TestSelect:

    def test_execute_table(self, props):
        """Test reading the staged rows in order"""
        table = pgrow.execute_table(props.query('select name, value from test_table order by value'))
        assert len(table) == 6
        assert table[0] == (('name', String('Alice')), ('value', Int(10)))

    def test_parameters(self, props):
        """Test binding named parameters"""
        query = props.query('select name from test_table where value > @min and name <> @skip order by name')
        table = pgrow.execute_table(query.parameters([('min', Int(40)), ('skip', String('Fiona'))]))
        assert [pgrow.read_string(row, 'name') for row in table] == ['Ethan', 'George']

    def test_like_with_parameters(self, props):
        """Test that literal % survives alongside parameters"""
        query = props.query("select count(*) from test_table where name like 'A%' or value = @v")
        assert pgrow.execute_scalar(query.parameters([('v', Int(20))])) == Long(2)

    def test_scalar_and_non_query(self, props):
        """Test scalar reads and affected row counts"""
        count = pgrow.execute_non_query(props.query('update test_table set value = value + 1 where value < 30'))
        assert count == 2
        assert pgrow.execute_scalar(props.query('select sum(value) from test_table')) == Long(262)
        assert pgrow.execute_scalar(props.query('select 1 where false')) == Null()

    def test_materialize(self, props):
        """Test building dataclasses from a table"""
        table = pgrow.execute_table(props.query('select name, value from test_table where value = 10'))
        assert pgrow.materialize_all(Entry, table) == [Entry('Alice', 10)]

    def test_execute_many(self, props):
        """Test that each statement of a batch gets its own table"""
        query = props.query_many(['select count(*) as n from test_table',
                                  'select name from test_table where value = @v']).parameters([('v', Int(20))])
        counts, names = pgrow.execute_many(query)
        assert counts == ((('n', Long(6)),),)
        assert names == ((('name', String('Bob')),),)

    def test_prepare(self, props):
        """Test that prepared statements return the same rows"""
        query = props.query('select name from test_table where value = @v').parameters([('v', Int(30))]).prepare()
        assert pgrow.execute_table(query) == ((('name', String('Charlie')),),)

    def test_safe_error(self, props):
        """Test that driver errors come back as Err"""
        result = pgrow.execute_table_safe(props.query('select * from missing_table'))
        assert isinstance(result.error, psycopg.errors.UndefinedTable)


class TestTypes:

    def test_round_trip(self, props):
        """Test that every readable variant comes back as bound"""
        aware = datetime.datetime(2024, 5, 1, 12, 30, tzinfo=datetime.timezone.utc)
        params = [
            ('b', Bool(True)),
            ('s', Short(-32768)),
            ('i', Int(2147483647)),
            ('l', Long(-9223372036854775808)),
            ('n', Number(2.5)),
            ('d', Decimal(decimal.Decimal('123.450'))),
            ('t', String('')),
            ('ts', Date(datetime.datetime(2024, 2, 29, 23, 59, 59))),
            ('tz', TimeWithTimeZone(aware)),
            ('u', Uuid(uuid.UUID(int=7))),
            ('by', Bytea(b'')),
            ('h', HStore({'k': 'v', 'empty': None})),
        ]
        query = props.query(
            'select @b::bool as b, @s::int2 as s, @i::int4 as i, @l::int8 as l, @n::float8 as n, '
            '@d::numeric as d, @t::text as t, @ts::timestamp as ts, @tz::timestamptz as tz, '
            '@u::uuid as u, @by::bytea as by, @h::hstore as h'
        ).parameters(params)
        (row,) = pgrow.execute_table(query)
        assert row[:11] == tuple(params[:11])
        assert row[11] == ('h', HStore({'k': 'v', 'empty': None}))

    def test_date_column(self, props):
        """Test that date columns read as midnight timestamps"""
        value = pgrow.execute_scalar(props.query("select date '2024-03-01'"))
        assert value == Date(datetime.datetime(2024, 3, 1))

    def test_jsonb_write_only(self, props):
        """Test that jsonb parameters bind but jsonb columns cannot be read"""
        query = props.query('select (@doc::jsonb ->> @key)::text').parameters(
            [('doc', Jsonb('{"a": "x"}')), ('key', String('a'))])
        assert pgrow.execute_scalar(query) == String('x')

        with pytest.raises(pgrow.UnsupportedTypeError):
            pgrow.execute_table(props.query("""select '{"a": 1}'::jsonb as doc"""))


class TestTransactions:

    def test_commit(self, props):
        """Test that all statements commit together"""
        counts = pgrow.execute_transaction(props, [
            ('insert into test_table (name, value) values (@name, @value)', [
                [('name', String('Hana')), ('value', Int(90))],
                [('name', String('Ivan')), ('value', Int(95))],
            ]),
            ('delete from test_table where value < 20', []),
        ])
        assert counts == [1, 1, 1]
        assert pgrow.execute_scalar(props.query('select count(*) from test_table')) == Long(7)

    def test_rollback(self, props):
        """Test that a failure leaves no trace"""
        with pytest.raises(psycopg.errors.UniqueViolation):
            pgrow.execute_transaction(props, [
                ('delete from test_table where name = @name', [[('name', String('Bob'))]]),
                ('insert into test_table (name, value) values (@name, 1)', [[('name', String('Alice'))]]),
            ])
        assert pgrow.execute_scalar(props.query('select count(*) from test_table')) == Long(6)


class TestAsync:

    @pytest.mark.asyncio
    async def test_matches_blocking(self, props):
        """Test that the asyncio path reads identical tables"""
        query = props.query('select name, value from test_table order by name')
        assert await pgrow.execute_table_async(query) == pgrow.execute_table(query)

    @pytest.mark.asyncio
    async def test_cancel(self, props):
        """Test cancelling a long-running statement"""
        cancel = asyncio.Event()
        asyncio.get_running_loop().call_later(0.2, cancel.set)
        with pytest.raises(pgrow.QueryCancelledError):
            await pgrow.execute_non_query_async(props.query('select pg_sleep(30)'), cancel)

"""
Tests for transactional execution.
"""
import asyncio

import psycopg
import pytest
from tests.fixtures.mocks import ResultSet

import pgrow
from pgrow.exceptions import QueryCancelledError
from pgrow.result import Ok
from pgrow.types import Int, String

CONNINFO = 'host=db dbname=app'

QUERIES = [
    ('delete from staging', []),
    ('insert into audit(msg, n) values (@msg, @n)', [
        [('msg', String('a')), ('n', Int(1))],
        [('msg', String('b')), ('n', Int(2))],
    ]),
]


@pytest.fixture
def props():
    return pgrow.connect(CONNINFO)


def queue_counts(fake_db, *counts):
    for count in counts:
        fake_db.queue(ResultSet(rowcount=count))


class TestExecuteTransaction:

    def test_counts_per_execution(self, fake_db, props):
        """Test one count per execution in call order, committed once"""
        queue_counts(fake_db, 5, 1, 1)
        assert pgrow.execute_transaction(props, QUERIES) == [5, 1, 1]

        connection = fake_db.connections[0]
        assert connection.autocommit is False
        assert connection.commits == 1
        assert connection.rollbacks == 0
        assert connection.closed

    def test_parameter_rows(self, fake_db, props):
        """Test that a statement without rows runs once without parameters"""
        queue_counts(fake_db, 5, 1, 1)
        pgrow.execute_transaction(props, QUERIES)

        executed = [(query, params) for query, params, _ in fake_db.executed]
        assert executed == [
            ('delete from staging', None),
            ('insert into audit(msg, n) values (%(msg)s, %(n)s)', {'msg': 'a', 'n': 1}),
            ('insert into audit(msg, n) values (%(msg)s, %(n)s)', {'msg': 'b', 'n': 2}),
        ]

    def test_failure_rolls_back(self, fake_db, props):
        """Test that a failing statement rolls back without committing"""
        queue_counts(fake_db, 5)
        fake_db.fail_on('insert', psycopg.errors.UniqueViolation('duplicate key'))

        with pytest.raises(psycopg.errors.UniqueViolation):
            pgrow.execute_transaction(props, QUERIES)

        connection = fake_db.connections[0]
        assert connection.commits == 0
        assert connection.rollbacks == 1
        assert connection.closed
        assert all(cursor.closed for cursor in connection.cursors)

    def test_empty_queries(self, fake_db, props):
        """Test that no statements means no connection"""
        assert pgrow.execute_transaction(props, []) == []
        assert fake_db.connections == []

    def test_safe(self, fake_db, props):
        """Test both outcomes of the safe variant"""
        queue_counts(fake_db, 5, 1, 1)
        assert pgrow.execute_transaction_safe(props, QUERIES) == Ok([5, 1, 1])

        fake_db.fail_on('delete', psycopg.OperationalError('server closed the connection'))
        result = pgrow.execute_transaction_safe(props, QUERIES)
        assert isinstance(result.error, pgrow.DbConnectionError)
        assert fake_db.connections[-1].rollbacks == 1

    @pytest.mark.asyncio
    async def test_async(self, fake_db, props):
        """Test that the asyncio variant commits once and returns the counts"""
        queue_counts(fake_db, 5, 1, 1)
        assert await pgrow.execute_transaction_async(props, QUERIES) == [5, 1, 1]
        assert fake_db.connections[0].commits == 1

    @pytest.mark.asyncio
    async def test_async_failure(self, fake_db, props):
        """Test rollback under asyncio"""
        fake_db.fail_on('insert', psycopg.errors.UniqueViolation('duplicate key'))
        result = await pgrow.execute_transaction_safe_async(props, QUERIES)
        assert isinstance(result.error, psycopg.errors.UniqueViolation)

        connection = fake_db.connections[0]
        assert connection.commits == 0
        assert connection.rollbacks == 1
        assert connection.closed

    @pytest.mark.asyncio
    async def test_cancelled_rolls_back(self, fake_db, props):
        """Test that cancelling mid-transaction rolls back and closes"""
        cancel = asyncio.Event()
        queue_counts(fake_db, 5, 1, 1)

        original = fake_db.connect_async

        async def connect_then_cancel(*args, **kwargs):
            connection = await original(*args, **kwargs)
            cancel.set()
            return connection

        psycopg.AsyncConnection.connect.side_effect = connect_then_cancel

        with pytest.raises(QueryCancelledError):
            await pgrow.execute_transaction_async(props, QUERIES, cancel)

        connection = fake_db.connections[0]
        assert connection.commits == 0
        assert connection.rollbacks == 1
        assert connection.closed

"""
Tests for building typed records from rows.
"""
import logging
from dataclasses import dataclass
from typing import NamedTuple, Optional

import pytest

from pgrow.exceptions import MissingFieldError
from pgrow.materialize import ShapeDescriptor, map_each_row, materialize
from pgrow.materialize import materialize_all, register_shape, shape_of
from pgrow.row import read_string
from pgrow.types import Int, Null, String


@dataclass
class User:
    id: int
    name: str
    email: str | None


class Point(NamedTuple):
    x: int
    y: Optional[int]


class Legacy:
    """Plain class whose shape has to be registered."""

    def __init__(self, code, label):
        self.code = code
        self.label = label


class NotARecord:
    pass


ALICE = (('id', Int(1)), ('name', String('Alice')), ('email', String('alice@example.com')))


class TestShapes:

    def test_dataclass_shape(self):
        """Test that dataclass fields and optionality are derived"""
        shape = shape_of(User)
        assert shape.fields == (('id', False), ('name', False), ('email', True))
        assert shape.factory is User

    def test_namedtuple_shape(self):
        """Test that NamedTuple fields and optionality are derived"""
        assert shape_of(Point).fields == (('x', False), ('y', True))

    def test_registered_shape(self):
        """Test explicit registration for other classes"""
        descriptor = register_shape(Legacy, [('code', False), ('label', True)])
        assert shape_of(Legacy) is descriptor
        assert descriptor.factory is Legacy

    def test_not_record_like(self):
        """Test that plain classes and non-classes have no shape"""
        assert shape_of(NotARecord) is None
        assert shape_of(42) is None


class TestMaterialize:

    def test_dataclass(self):
        """Test building a dataclass by field name"""
        assert materialize(User, ALICE) == User(1, 'Alice', 'alice@example.com')

    def test_column_order_irrelevant(self):
        """Test that fields are matched by name, not position"""
        row = tuple(reversed(ALICE)) + (('extra', Int(9)),)
        assert materialize(User, row) == User(1, 'Alice', 'alice@example.com')

    def test_null_becomes_none(self):
        """Test that Null unboxes to None"""
        row = (('id', Int(2)), ('name', String('Bob')), ('email', Null()))
        assert materialize(User, row) == User(2, 'Bob', None)

    def test_missing_field(self):
        """Test that an absent column raises naming the field"""
        row = (('id', Int(1)), ('name', String('Alice')))
        with pytest.raises(MissingFieldError) as exc_info:
            materialize(User, row)
        assert exc_info.value.name == 'email'
        assert str(exc_info.value) == 'Missing parameter: email'

    def test_namedtuple(self):
        """Test building a NamedTuple"""
        row = (('y', Null()), ('x', Int(3)))
        assert materialize(Point, row) == Point(3, None)

    def test_registered_factory(self):
        """Test that a registered factory receives values in field order"""
        descriptor = ShapeDescriptor(Legacy, (('code', False), ('label', False)),
                                     lambda code, label: f'{code}:{label}')
        row = (('label', String('x')), ('code', Int(5)))
        assert materialize(descriptor, row) == '5:x'

    def test_not_record_like(self):
        """Test that materializing a plain class gives None"""
        assert materialize(NotARecord, ALICE) is None


class TestMaterializeAll:

    def test_failed_rows_discarded(self, caplog):
        """Test that rows missing a field are skipped and logged"""
        table = (
            ALICE,
            (('id', Int(2)), ('name', String('Bob'))),
            (('id', Int(3)), ('name', String('Carol')), ('email', Null())),
        )
        with caplog.at_level(logging.DEBUG, logger='pgrow.materialize'):
            users = materialize_all(User, table)
        assert users == [User(1, 'Alice', 'alice@example.com'), User(3, 'Carol', None)]
        assert 'Skipping row 1' in caplog.text

    def test_not_record_like(self):
        """Test that nothing is produced for a non-record target"""
        assert materialize_all(NotARecord, (ALICE,)) == []


def test_map_each_row_drops_none():
    """Test that None results are filtered out in row order"""
    table = (ALICE, (('id', Int(2)),), (('name', String('Carol')),))
    assert map_each_row(lambda row: read_string(row, 'name'), table) == ['Alice', 'Carol']

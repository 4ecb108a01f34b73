"""
Test values fixtures for database tests.

This module provides fixture functions that generate test data for codec and
binding tests, ensuring consistent test values across different test modules.
"""
import datetime
import decimal
import math
import uuid

import pytest


@pytest.fixture(scope='module')
def value_dict():
    """Return a dictionary of raw driver values for all major types"""
    return {
        # Integers
        'int_value': 42,
        'big_int': 9223372036854775807,  # Max int64
        'small_int': -32768,  # Min int16

        # Boolean
        'bool_true': True,
        'bool_false': False,

        # Floating point
        'float_value': math.pi,
        'decimal_value': decimal.Decimal('123456.789123'),

        # String types
        'text_value': 'Lorem ipsum dolor sit amet, consectetur adipiscing elit.',
        'empty_text': '',

        # Date and time
        'date_value': datetime.date(2023, 5, 15),
        'datetime_value': datetime.datetime(2023, 5, 15, 14, 30, 45),
        'datetimetz_value': datetime.datetime(2023, 5, 15, 14, 30, 45,
                                              tzinfo=datetime.timezone(datetime.timedelta(hours=-4))),

        # Identifiers and binary data
        'uuid_value': uuid.UUID('12345678-1234-5678-1234-567812345678'),
        'binary_value': b'\x01\x02\x03\x04\x05',
        'empty_binary': b'',

        # hstore
        'hstore_value': {'color': 'red', 'size': None},

        # NULL values
        'null_value': None,

        # Special values
        'json_value': '{"key": "value", "numbers": [1, 2, 3]}',
    }

"""
Conversion between Python values, `Value` variants and psycopg adapters.
"""
from pgrow.adapters.type_conversion import WireType, decode, encode
from pgrow.adapters.type_conversion import value_as_object, value_as_optional_object
from pgrow.adapters.type_mapping import AdapterRegistry, get_adapter_registry, to_wire

__all__ = [
    'WireType',
    'decode',
    'encode',
    'value_as_object',
    'value_as_optional_object',
    'AdapterRegistry',
    'get_adapter_registry',
    'to_wire',
]

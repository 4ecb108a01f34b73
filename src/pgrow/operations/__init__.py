"""
Orchestrated execution: one connection per call, four calling styles each.
"""
from pgrow.operations.query import *  # noqa: F401,F403
from pgrow.operations.query import __all__ as _query_all
from pgrow.operations.transaction import *  # noqa: F401,F403
from pgrow.operations.transaction import __all__ as _transaction_all

__all__ = _query_all + _transaction_all

import pathlib
import site

import pytest

from pgrow.adapters.type_mapping import get_adapter_registry

HERE = pathlib.Path(pathlib.Path(__file__).resolve()).parent
site.addsitedir(HERE)


@pytest.fixture(autouse=True)
def clear_adapter_cache():
    """Clear cached hstore type info before and after each test to ensure test isolation."""
    get_adapter_registry().clear()
    yield
    get_adapter_registry().clear()


pytest_plugins = [
    'tests.fixtures.mocks',
    'tests.fixtures.values',
    'tests.fixtures.postgres',
]

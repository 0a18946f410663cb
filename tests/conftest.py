"""Root test configuration: logging reset and shared pipeline fixtures"""

import pytest
import structlog

from pagewrap.core.cache import PageCache
from pagewrap.core.models import ConvertResult


LAST_UPDATE = 1700000000000


@pytest.fixture(autouse=True)
def reset_logging():
    """Undo structlog configuration done by CLI commands (bound to CliRunner's streams)."""
    yield
    structlog.reset_defaults()


class CountingConverter:
    """Fake markdown converter that records how often it is called."""

    def __init__(self, result: ConvertResult = None, error: Exception = None):
        self.calls = 0
        self.result = result
        self.error = error

    async def __call__(self, md_content, filename, options):
        self.calls += 1
        if self.error:
            raise self.error
        if self.result is not None:
            return self.result
        return ConvertResult(code=f"<p>{md_content}</p>", data={"fm": {}})


@pytest.fixture(name="cache")
def cache_fixture():
    return PageCache(max_entries=8)


@pytest.fixture(name="converter")
def converter_fixture():
    return CountingConverter()


@pytest.fixture(name="make_converter")
def make_converter_fixture():
    return CountingConverter


@pytest.fixture(name="last_update")
def last_update_fixture():
    async def _lookup(file_id):
        return LAST_UPDATE
    return _lookup

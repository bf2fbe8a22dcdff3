"""Root conftest.py for the CityInfo test suite.

Project-wide fixtures that keep settings, request context and logging state
from leaking between tests.
"""

from collections.abc import Generator

import pytest
from loguru import logger

from cityinfo.core.config import get_settings
from cityinfo.core.context import RequestContext
from cityinfo.core.logging import _state


@pytest.fixture(autouse=True)
def clear_settings_cache() -> Generator[None]:
    """Give every test settings built from its own environment."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture(autouse=True)
def clean_request_context() -> Generator[None]:
    """Start and finish every test with an empty RequestContext."""
    RequestContext.clear()
    yield
    RequestContext.clear()


@pytest.fixture(autouse=True)
def quiet_logging() -> Generator[None]:
    """Keep Loguru sinks out of test output.

    Logging stays marked as configured so creating an app does not add a
    stdout sink.
    """
    logger.remove()
    _state.configured = True
    yield
    logger.remove()
    _state.configured = True

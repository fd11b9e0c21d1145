import logging

import pytest

from py_geolinmath import PreferredFormat
from py_geolinmath.logger import logger

logger.setLevel(logging.DEBUG)


@pytest.fixture(autouse=True)
def preferred_format_defaults():
    """Every test starts and ends with the default delimiters."""
    PreferredFormat.restore_defaults()
    yield
    PreferredFormat.restore_defaults()

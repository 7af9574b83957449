import logging

import pytest

from debug import Debug


@pytest.fixture
def dbg():
    """Shared Debug switches, restored after the test."""
    d = Debug()
    saved = d.status()
    yield d
    d.components.update(saved)
    d.toggle_global(True)
    d.set_level(logging.NOTSET)

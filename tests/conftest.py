from datetime import datetime

import pytest

FIXED_NOW = datetime(2024, 6, 15, 12, 30, 45)


@pytest.fixture
def clock():
    """A clock frozen at FIXED_NOW."""
    return lambda: FIXED_NOW

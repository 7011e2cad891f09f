import pytest

from pyzod.config import reset_config


@pytest.fixture(autouse=True)
def _fresh_config():
    """Every test starts and ends with the default global configuration."""
    reset_config()
    yield
    reset_config()

import pytest

from dsoplot.device import DSO6000, MockDSO
from dsoplot.types import DsoConfig, PreambleRecord


def pytest_configure(config):
    """Configure custom markers."""
    config.addinivalue_line("markers", "slow: marks test as slow running test")
    config.addinivalue_line(
        "markers", "hardware: marks test that require a physical oscilloscope"
    )


@pytest.fixture
def config():
    return DsoConfig()


@pytest.fixture
def mock_dso(config):
    """In-process instrument."""
    return MockDSO(config)


@pytest.fixture
def dso(config, mock_dso):
    return DSO6000("mock", config=config, transport=mock_dso)


def _make_preamble(**overrides) -> PreambleRecord:
    values = dict(
        format=4,
        type=0,
        points=100,
        count=1,
        x_increment=1e-3,
        x_origin=0.0,
        x_reference=50,
        y_increment=1e-3,
        y_origin=0.0,
        y_reference=0.0,
    )
    values.update(overrides)
    return PreambleRecord(**values)


@pytest.fixture
def make_preamble():
    """Factory for preambles, defaults: 100 points of 1 ms, reference index 50."""
    return _make_preamble

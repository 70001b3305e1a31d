"""
Pytest fixtures and configuration for HH tests.
"""

import pytest
from hhsim import SimulationConfig, Simulator


@pytest.fixture
def default_config():
    """Fixture providing the reference scenario configuration."""
    return SimulationConfig()


@pytest.fixture
def simulator(default_config):
    """Fixture providing a simulator on the python backend."""
    return Simulator(default_config)


@pytest.fixture(scope='session')
def reference_series():
    """Fixture providing the reference run (computed once per session)."""
    return Simulator(SimulationConfig()).run()


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line(
        "markers", "physiological: mark test as checking physiological behavior"
    )
    config.addinivalue_line(
        "markers", "numerical: mark test as checking numerical properties"
    )
    config.addinivalue_line(
        "markers", "accuracy: mark test as checking numerical accuracy"
    )
    config.addinivalue_line(
        "markers", "scipy: mark test as requiring scipy"
    )
    config.addinivalue_line(
        "markers", "numba: mark test as requiring numba"
    )
    config.addinivalue_line(
        "markers", "slow: mark test as slow running"
    )

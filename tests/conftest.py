import numpy as np
import pytest

from symbolic_descent.logging_system import LogLevel, configure_logging


@pytest.fixture(autouse=True)
def quiet_logging():
    configure_logging(LogLevel.SILENT)
    yield
    configure_logging(LogLevel.SILENT)


@pytest.fixture
def rng():
    return np.random.default_rng(42)

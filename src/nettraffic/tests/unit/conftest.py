import pytest
from PyQt6.QtCore import QCoreApplication

@pytest.fixture(scope="session")
def q_app():
    """Provides a QCoreApplication instance for the test session."""
    return QCoreApplication.instance() or QCoreApplication([])

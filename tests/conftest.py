"""
Pytest configuration and shared fixtures.
"""

import pytest
import sys
import os

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from fastapi.testclient import TestClient

from app.main import app
from app.calculations import FinanceFormulaLibrary


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "slow: marks tests as slow")
    config.addinivalue_line("markers", "integration: marks integration tests")


@pytest.fixture
def library():
    """Formula library built from the default rate and bracket tables."""
    return FinanceFormulaLibrary()


@pytest.fixture
def client():
    """Create test client."""
    return TestClient(app)

"""
Shared pytest fixtures for bracket generator tests.

Running tests:
    pytest tests/                  - full suite
    pytest tests/ -m "not slow"   - skip the large sweeps
"""
import pytest
import random
import sys
import os

# Add src directory to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))


class IdentityRng:
    """Random source whose shuffles leave every list in its original order."""

    def randrange(self, stop):
        return stop - 1


@pytest.fixture
def client():
    """Create a test client for the bracket API."""
    from app import app
    app.config['TESTING'] = True
    with app.test_client() as client:
        yield client


@pytest.fixture
def rng():
    """Seeded random source so brackets are reproducible."""
    return random.Random(1234)


@pytest.fixture
def identity_rng():
    """Random source that keeps input order, for exact bracket layouts."""
    return IdentityRng()

"""Integration test fixtures.

Integration tests drive the FastAPI app through TestClient. Checks run for
real: commands through /bin/sh, HTTP and TCP against loopback ports.
"""

import pytest
from fastapi.testclient import TestClient

from checkmate.main import app


@pytest.fixture(scope="module")
def client():
    """TestClient for the application."""
    with TestClient(app) as test_client:
        yield test_client

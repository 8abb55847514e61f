import os

import pytest
from fastapi.testclient import TestClient

# Set before the app (and app.config) is imported
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["API_PREFIX"] = "/api"

from app.main import app


@pytest.fixture
def client():
    with TestClient(app) as test_client:
        yield test_client

import pytest
from fastapi.testclient import TestClient

import api_app
import notifications


@pytest.fixture
def client(monkeypatch):
    monkeypatch.setattr(api_app, "API_KEY", "")
    monkeypatch.setattr(notifications, "SENDGRID_API_KEY", "")
    return TestClient(api_app.app)

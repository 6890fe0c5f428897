"""Tests for the health, env-check and test-email endpoints."""

from fastapi.testclient import TestClient

from app.core.config import get_settings
from app.core.errors import TransportErrorKind
from app.main import app
from tests.conftest import FakeDispatcher, make_settings


class TestHealthEndpoint:
    def test_health_check(self, client: TestClient):
        """Test the health endpoint returns OK with presence flags."""
        response = client.get("/health")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "OK"
        assert "timestamp" in data
        assert data["env"] == {
            "ENVIRONMENT": "production",
            "EMAIL_USER": "configured",
            "EMAIL_PASS": "configured",
        }

    def test_never_echoes_credentials(self, client: TestClient):
        """Test credential values never appear in the health response."""
        response = client.get("/health")
        assert "secret" not in response.text
        assert "rsvp@example.com" not in response.text

    def test_reports_missing_credentials(self, client: TestClient):
        """Test an unset password is reported as missing."""
        app.dependency_overrides[get_settings] = lambda: make_settings(email_pass="")
        data = client.get("/health").json()
        assert data["env"]["EMAIL_USER"] == "configured"
        assert data["env"]["EMAIL_PASS"] == "missing"


class TestEnvCheckEndpoint:
    def test_all_configured(self, client: TestClient):
        """Test env-check when every required variable is set."""
        data = client.get("/env-check").json()
        assert data == {
            "status": "OK",
            "missing": [],
            "configured": ["EMAIL_USER", "EMAIL_PASS"],
        }

    def test_unset_variables(self, client: TestClient):
        """Test env-check lists exactly the unset variables."""
        app.dependency_overrides[get_settings] = lambda: make_settings(email_user="", email_pass="")
        response = client.get("/env-check")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "Missing Variables"
        assert data["missing"] == ["EMAIL_USER", "EMAIL_PASS"]
        assert data["configured"] == []


class TestTestEmailEndpoint:
    def test_sends_to_self(self, client: TestClient, dispatcher: FakeDispatcher):
        """Test the test email goes from the relay account to itself."""
        response = client.post("/test-email")
        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["messageId"] == "<fake-0@example.com>"

        (message,) = dispatcher.sent
        assert message.to == "rsvp@example.com"
        assert message.sender == "rsvp@example.com"

    def test_failure(self, client: TestClient, dispatcher: FakeDispatcher):
        """Test a failed test email returns 500 with details."""
        dispatcher.failures = {0: TransportErrorKind.AUTHENTICATION}
        response = client.post("/test-email")
        assert response.status_code == 500
        data = response.json()
        assert data["error"] == "Test email failed"
        assert "relay said no" in data["details"]

"""Shared test fixtures."""

import pytest
from fastapi.testclient import TestClient

from app.core.config import Settings, get_settings
from app.core.errors import TransportError, TransportErrorKind
from app.mail.dispatcher import get_mail_dispatcher
from app.main import app
from app.models import MailMessage


class FakeDispatcher:
    """Records messages instead of talking to a relay.

    ``failures`` maps a call index (0 = first send) to the error kind that
    call should fail with.
    """

    def __init__(self, failures: dict[int, TransportErrorKind] | None = None):
        self.failures = failures or {}
        self.sent: list[MailMessage] = []
        self.attempts = 0

    async def send(self, message: MailMessage) -> str:
        index = self.attempts
        self.attempts += 1
        if index in self.failures:
            raise TransportError(self.failures[index], f"relay said no ({self.failures[index].value})")
        self.sent.append(message)
        return f"<fake-{index}@example.com>"

    async def verify(self) -> None:
        return None


def make_settings(**overrides) -> Settings:
    values = {
        "email_user": "rsvp@example.com",
        "email_pass": "secret",
        "environment": "production",
        "admin_email": "admin@example.com",
        "verify_on_startup": False,
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


@pytest.fixture(name="settings")
def settings_fixture() -> Settings:
    """Production-mode settings with credentials present."""
    return make_settings()


@pytest.fixture(name="dispatcher")
def dispatcher_fixture() -> FakeDispatcher:
    """A dispatcher whose sends all succeed."""
    return FakeDispatcher()


@pytest.fixture(name="client")
def client_fixture(settings: Settings, dispatcher: FakeDispatcher):
    """Create a test client wired to the fake dispatcher and test settings."""
    app.dependency_overrides[get_settings] = lambda: settings
    app.dependency_overrides[get_mail_dispatcher] = lambda: dispatcher
    client = TestClient(app)
    yield client
    app.dependency_overrides.clear()


@pytest.fixture(name="ada")
def ada_fixture() -> dict:
    """A valid RSVP form body."""
    return {"name": "Ada", "email": "ada@example.com", "role": "Engineer"}

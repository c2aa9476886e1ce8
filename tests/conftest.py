"""Shared fixtures for Spotify Bridge tests."""
from unittest.mock import Mock

import pytest

from spotify_bridge.auth.credential_store import Credential
from spotify_bridge.client.executor import CallExecutor


class ScriptedTransport:
    """Transport replaying a fixed list of payloads and exceptions."""

    def __init__(self, outcomes):
        self.outcomes = list(outcomes)
        self.sent = []

    def send(self, request):
        self.sent.append(
            {
                "authorization": request.headers.get("Authorization"),
                "params": dict(request.params),
            }
        )
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome


class RecordingSleep:
    """Stand-in for time.sleep that only records the requested delays."""

    def __init__(self):
        self.calls = []

    def __call__(self, seconds):
        self.calls.append(seconds)

    @property
    def total(self):
        return sum(self.calls)


@pytest.fixture
def credential():
    return Credential(
        client_id="client-id",
        client_secret="client-secret",
        access_token="access-1",
        refresh_token="refresh-1",
        granted_scopes={"a", "b"},
    )


@pytest.fixture
def sleep():
    return RecordingSleep()


@pytest.fixture
def make_executor(credential, sleep):
    """Build an executor over a scripted transport."""

    def _make(outcomes, auth=None, max_attempts=10):
        transport = ScriptedTransport(outcomes)
        executor = CallExecutor(
            transport, credential, auth=auth, max_attempts=max_attempts, sleep=sleep
        )
        return executor, transport

    return _make


@pytest.fixture
def credential_store():
    store = Mock()
    store.save.return_value = True
    return store

"""Tests for the login callback endpoint."""
import time
from unittest.mock import Mock, patch

import pytest
from fastapi.testclient import TestClient

from spotify_bridge.auth.oauth_callback_server import CallbackServer, create_callback_app
from spotify_bridge.utils.errors import ScopeInsufficientError


@pytest.fixture
def manager():
    return Mock()


@pytest.fixture
def client(manager):
    return TestClient(create_callback_app(manager))


class TestLoginCallback:
    """Tests for GET /callback."""

    def test_code_completes_login(self, client, manager):
        response = client.get("/callback", params={"code": "abc", "state": "s1"})

        assert response.status_code == 200
        assert response.text == "Successfully logged in!"
        manager.handle_callback.assert_called_once_with("abc", state="s1")

    def test_missing_code_is_rejected(self, client, manager):
        response = client.get("/callback")

        assert response.status_code == 400
        manager.handle_callback.assert_not_called()

    def test_provider_error_is_reported(self, client, manager):
        response = client.get("/callback", params={"error": "access_denied"})

        assert response.status_code == 400
        assert "access_denied" in response.text
        manager.handle_callback.assert_not_called()

    def test_state_mismatch_is_bad_request(self, client, manager):
        manager.handle_callback.side_effect = ValueError("OAuth state mismatch")

        response = client.get("/callback", params={"code": "abc", "state": "forged"})

        assert response.status_code == 400

    def test_insufficient_scope_is_forbidden(self, client, manager):
        manager.handle_callback.side_effect = ScopeInsufficientError({"playlist-modify-private"})

        response = client.get("/callback", params={"code": "abc"})

        assert response.status_code == 403
        assert "playlist-modify-private" in response.text

    def test_exchange_failure_is_server_error(self, client, manager):
        manager.handle_callback.side_effect = RuntimeError("token endpoint down")

        response = client.get("/callback", params={"code": "abc"})

        assert response.status_code == 500

    def test_only_the_redirect_path_is_served(self, manager):
        client = TestClient(create_callback_app(manager, "/custom/callback"))

        assert client.get("/callback", params={"code": "abc"}).status_code == 404
        assert client.get("/custom/callback", params={"code": "abc"}).status_code == 200


class TestCallbackServer:
    """Tests for server setup from the redirect URI."""

    def test_binds_to_redirect_uri(self):
        server = CallbackServer(Mock(), "http://127.0.0.1:9123/callback")

        assert server.host == "127.0.0.1"
        assert server.port == 9123
        assert server.callback_path == "/callback"
        assert not server.is_running

    def test_stop_when_not_running_is_noop(self):
        server = CallbackServer(Mock(), "http://localhost:9124/callback")
        server.stop()
        assert not server.is_running

    @patch("spotify_bridge.auth.oauth_callback_server.uvicorn.Server")
    def test_start_waits_for_uvicorn(self, mock_server_class):
        server = mock_server_class.return_value
        server.started = True
        server.run.side_effect = lambda: time.sleep(0.3)
        callback_server = CallbackServer(
            Mock(), "http://127.0.0.1:9125/callback", startup_timeout=1.0
        )

        assert callback_server.start() == (True, "")
        assert callback_server.is_running

        callback_server.stop()
        assert server.should_exit is True
        assert not callback_server.is_running

    @patch("spotify_bridge.auth.oauth_callback_server.uvicorn.Server")
    def test_start_fails_when_serving_thread_dies(self, mock_server_class):
        """uvicorn leaves its thread when the port can't be bound."""
        server = mock_server_class.return_value
        server.started = False
        server.run.side_effect = lambda: None
        callback_server = CallbackServer(
            Mock(), "http://127.0.0.1:9126/callback", startup_timeout=1.0
        )

        success, error_msg = callback_server.start()

        assert success is False
        assert "9126" in error_msg
        assert not callback_server.is_running

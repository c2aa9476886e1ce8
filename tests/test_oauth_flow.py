"""Tests for the OAuth provider adapter."""
from unittest.mock import Mock, patch

import pytest

from spotify_bridge.auth.oauth_flow import OAuthProvider


@pytest.fixture
def provider(credential):
    return OAuthProvider(
        credential,
        ["user-read-private"],
        redirect_uri="http://127.0.0.1:8080/callback",
        auth_url="https://accounts.example.com/authorize",
        token_url="https://accounts.example.com/api/token",
        timeout=5,
    )


class TestOAuthProvider:
    """Tests for OAuthProvider."""

    @patch("spotify_bridge.auth.oauth_flow.Flow")
    def test_create_flow_uses_client_identity(self, mock_flow, provider):
        provider.create_flow(state="s1")

        client_config = mock_flow.from_client_config.call_args.args[0]
        kwargs = mock_flow.from_client_config.call_args.kwargs
        assert client_config["web"]["client_id"] == "client-id"
        assert client_config["web"]["token_uri"] == "https://accounts.example.com/api/token"
        assert kwargs["scopes"] == "user-read-private"
        assert kwargs["redirect_uri"] == "http://127.0.0.1:8080/callback"
        assert kwargs["state"] == "s1"

    def test_exchange_code_returns_grant(self, provider):
        flow = Mock()
        flow.fetch_token.return_value = {
            "access_token": "at",
            "refresh_token": "rt",
            "scope": "user-read-private",
        }

        grant = provider.exchange_code("code-1", flow=flow)

        flow.fetch_token.assert_called_once_with(code="code-1", timeout=5)
        assert grant.access_token == "at"
        assert grant.refresh_token == "rt"
        assert grant.scopes == frozenset({"user-read-private"})

    def test_refresh_posts_refresh_token(self, provider):
        flow = Mock()
        flow.oauth2session.refresh_token.return_value = {"access_token": "at-2"}

        with patch.object(provider, "create_flow", return_value=flow):
            grant = provider.refresh("rt")

        flow.oauth2session.refresh_token.assert_called_once_with(
            "https://accounts.example.com/api/token",
            refresh_token="rt",
            client_id="client-id",
            client_secret="client-secret",
            timeout=5,
        )
        assert grant.access_token == "at-2"
        assert grant.refresh_token is None
        assert grant.scopes is None

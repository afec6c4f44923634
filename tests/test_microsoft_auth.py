"""Tests for Microsoft refresh-token authentication."""

import asyncio
import json
from urllib.parse import parse_qs

import httpx
import pytest
from authlib.integrations.base_client import OAuthError

from onedrive_utils.config import Credentials
from onedrive_utils.microsoft import MicrosoftOAuth


@pytest.fixture
def credentials():
    """Fake client credentials."""
    return Credentials(
        client_id="test-client-id",
        client_secret="test-client-secret",
        refresh_token="test-refresh-token",
        redirect_uri="http://localhost:3000/callback",
    )


def token_endpoint(status_code=200, body=None, requests=None):
    """Mock transport answering the token endpoint."""
    if body is None:
        body = {
            "token_type": "Bearer",
            "expires_in": 3600,
            "access_token": "test-access-token",
            "refresh_token": "rotated-refresh-token",
        }

    def handler(request: httpx.Request) -> httpx.Response:
        if requests is not None:
            requests.append(request)
        return httpx.Response(status_code, json=body)

    return httpx.MockTransport(handler)


class TestTokenRequest:
    """Test the refresh-token exchange request."""

    def test_posts_to_common_token_endpoint(self, credentials):
        """Should POST to the v2.0 common token endpoint."""
        requests = []
        auth = MicrosoftOAuth(credentials, transport=token_endpoint(requests=requests))
        asyncio.run(auth.get_access_token())

        assert len(requests) == 1
        assert requests[0].method == "POST"
        assert str(requests[0].url) == (
            "https://login.microsoftonline.com/common/oauth2/v2.0/token"
        )

    def test_form_encoded_body(self, credentials):
        """Should send all credential fields form-encoded."""
        requests = []
        auth = MicrosoftOAuth(credentials, transport=token_endpoint(requests=requests))
        asyncio.run(auth.get_access_token())

        request = requests[0]
        assert request.headers["Content-Type"].startswith("application/x-www-form-urlencoded")

        form = parse_qs(request.content.decode())
        assert form["grant_type"] == ["refresh_token"]
        assert form["client_id"] == ["test-client-id"]
        assert form["client_secret"] == ["test-client-secret"]
        assert form["refresh_token"] == ["test-refresh-token"]
        assert form["redirect_uri"] == ["http://localhost:3000/callback"]

    def test_fresh_exchange_every_call(self, credentials):
        """Should not cache tokens between calls."""
        requests = []
        auth = MicrosoftOAuth(credentials, transport=token_endpoint(requests=requests))
        asyncio.run(auth.get_access_token())
        asyncio.run(auth.get_access_token())

        assert len(requests) == 2


class TestTokenResponse:
    """Test handling of the token endpoint response."""

    def test_returns_access_token_verbatim(self, credentials):
        """Should return the access_token field unchanged."""
        body = {"token_type": "Bearer", "expires_in": 3599, "access_token": "EwB4A8l6 BAAU+x/=="}
        auth = MicrosoftOAuth(credentials, transport=token_endpoint(body=body))

        assert asyncio.run(auth.get_access_token()) == "EwB4A8l6 BAAU+x/=="

    def test_fetch_token_returns_full_response(self, credentials):
        """Should expose the whole token response."""
        auth = MicrosoftOAuth(credentials, transport=token_endpoint())
        token = asyncio.run(auth.fetch_token())

        assert token["access_token"] == "test-access-token"
        assert token["token_type"] == "Bearer"

    def test_oauth_error_propagates(self, credentials):
        """Should raise OAuthError for an error body."""
        body = {"error": "invalid_grant", "error_description": "AADSTS70000: expired"}
        auth = MicrosoftOAuth(credentials, transport=token_endpoint(400, body))

        with pytest.raises(OAuthError):
            asyncio.run(auth.get_access_token())

    def test_server_error_propagates(self, credentials):
        """Should raise httpx.HTTPStatusError for 5xx responses."""
        auth = MicrosoftOAuth(credentials, transport=token_endpoint(503, {"message": "down"}))

        with pytest.raises(httpx.HTTPStatusError):
            asyncio.run(auth.get_access_token())

    def test_network_error_propagates(self, credentials):
        """Should not swallow transport failures."""

        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        auth = MicrosoftOAuth(credentials, transport=httpx.MockTransport(handler))

        with pytest.raises(httpx.ConnectError):
            asyncio.run(auth.get_access_token())

    def test_secret_not_logged(self, credentials, caplog):
        """Should not write secrets to the log."""
        auth = MicrosoftOAuth(credentials, transport=token_endpoint())
        with caplog.at_level("DEBUG"):
            asyncio.run(auth.get_access_token())

        logged = json.dumps(
            [r.getMessage() for r in caplog.records if r.name.startswith("onedrive_utils")]
        )
        assert "test-client-secret" not in logged
        assert "test-refresh-token" not in logged
        assert "test-access-token" not in logged

"""Unit tests for bearer-token verification against the identity provider"""

import asyncio
import httpx
import pytest
from unittest.mock import AsyncMock, patch

from savings_gateway.domain.exceptions import AuthenticationError, IdentityServiceError
from savings_gateway.infrastructure.clients.identity import IdentityClient

REQUEST = httpx.Request("GET", "http://identity.test/auth/v1/user")


def _resolve(token: str = "token") -> str:
    client = IdentityClient(base_url="http://identity.test", api_key="anon", timeout=1.0)
    return asyncio.run(client.get_user_id(token))


@patch("httpx.AsyncClient.get", new_callable=AsyncMock)
def test_get_user_id_success(mock_get: AsyncMock):
    mock_get.return_value = httpx.Response(200, json={"id": "user-42", "email": "a@b.c"}, request=REQUEST)

    assert _resolve("abc") == "user-42"

    _, kwargs = mock_get.call_args
    assert kwargs["headers"]["Authorization"] == "Bearer abc"
    assert kwargs["headers"]["apikey"] == "anon"


@pytest.mark.parametrize("status_code", [401, 403])
@patch("httpx.AsyncClient.get", new_callable=AsyncMock)
def test_get_user_id_rejected_token(mock_get: AsyncMock, status_code: int):
    mock_get.return_value = httpx.Response(status_code, json={"msg": "invalid JWT"}, request=REQUEST)

    with pytest.raises(AuthenticationError):
        _resolve()


@patch("httpx.AsyncClient.get", new_callable=AsyncMock)
def test_get_user_id_server_error(mock_get: AsyncMock):
    mock_get.return_value = httpx.Response(500, request=REQUEST)

    with pytest.raises(IdentityServiceError, match="500"):
        _resolve()


@patch("httpx.AsyncClient.get", new_callable=AsyncMock)
def test_get_user_id_timeout(mock_get: AsyncMock):
    mock_get.side_effect = httpx.ReadTimeout("timed out", request=REQUEST)

    with pytest.raises(IdentityServiceError, match="timeout"):
        _resolve()


@patch("httpx.AsyncClient.get", new_callable=AsyncMock)
def test_get_user_id_malformed_payload(mock_get: AsyncMock):
    mock_get.return_value = httpx.Response(200, json={"user": {}}, request=REQUEST)

    with pytest.raises(IdentityServiceError):
        _resolve()


@patch("httpx.AsyncClient.get", new_callable=AsyncMock)
def test_get_user_id_empty_id(mock_get: AsyncMock):
    mock_get.return_value = httpx.Response(200, json={"id": None}, request=REQUEST)

    with pytest.raises(AuthenticationError):
        _resolve()

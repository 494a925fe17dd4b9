"""
Unit tests for the backend request helpers.
"""

import httpx
import pytest

from conftest import VAULT_ADDR, VaultResponse, auth_envelope
from gatekeeper.modules.vault import (
    BackendError,
    LoginResult,
    VaultError,
    decode_error,
    execute_login,
    vault_path,
)


def test_vault_path_joins_base_and_path():
    """Test the URL helper tolerates slashes on either side."""
    assert vault_path("http://vault:8200", "/v1/auth/github/login") == "http://vault:8200/v1/auth/github/login"
    assert vault_path("http://vault:8200/", "v1/sys/health") == "http://vault:8200/v1/sys/health"


def test_vault_path_appends_query():
    """Test the URL helper adds a query string only when given."""
    assert vault_path("http://vault:8200", "/v1/sys/health", "standbyok=true") == (
        "http://vault:8200/v1/sys/health?standbyok=true"
    )


def test_vault_path_accepts_client_base_url():
    """Test httpx.URL bases (which carry a trailing slash) work."""
    client = httpx.AsyncClient(base_url=VAULT_ADDR)
    assert vault_path(client.base_url, "/v1/secret/x") == f"{VAULT_ADDR}/v1/secret/x"


def test_vault_error_str():
    """Test the error formats its code and joined messages."""
    error = VaultError(403, ["permission denied", "bad token"])
    assert str(error) == "403: permission denied, bad token"
    assert BackendError is VaultError


def test_decode_error_with_envelope():
    """Test a standard error envelope is decoded."""
    response = httpx.Response(403, json={"errors": ["permission denied"]})

    error = decode_error(response)

    assert error.code == 403
    assert error.errors == ["permission denied"]


@pytest.mark.parametrize("response", [
    httpx.Response(502, content=b"<html>Bad Gateway</html>"),
    httpx.Response(502, json=["not", "an", "object"]),
    httpx.Response(502, json={"errors": "not a list"}),
])
def test_decode_error_communication_error(response):
    """Test undecodable bodies become a synthetic communication error."""
    error = decode_error(response)

    assert error.code == 502
    assert error.errors == ["communication error."]


def test_login_result_rejects_missing_auth():
    """Test a 200 body without the auth envelope is a decode error."""
    with pytest.raises(ValueError):
        LoginResult.from_envelope({"data": {}})

    with pytest.raises(ValueError):
        LoginResult.from_envelope({"auth": {"lease_duration": 10}})


@pytest.mark.asyncio
async def test_execute_login_returns_client_token(vault_mocker, vault_client):
    """Test a 200 auth envelope yields its client_token."""
    vault_mocker.register("POST", "/v1/auth/github/login", VaultResponse(json=auth_envelope("s.issued")))

    token = await execute_login(vault_client, "POST", "/v1/auth/github/login", {"token": "pat"})

    assert token == "s.issued"
    assert vault_mocker.last_json() == {"token": "pat"}


@pytest.mark.asyncio
async def test_execute_login_backend_error(vault_mocker, vault_client):
    """Test a non-200 response raises VaultError with the backend messages."""
    vault_mocker.register("POST", "/v1/auth/github/login", VaultResponse(
        status_code=400, json={"errors": ["invalid token"]}
    ))

    with pytest.raises(VaultError) as exc_info:
        await execute_login(vault_client, "POST", "/v1/auth/github/login", {"token": "bad"})

    assert exc_info.value.code == 400
    assert exc_info.value.errors == ["invalid token"]


@pytest.mark.asyncio
async def test_execute_login_unparseable_error(vault_mocker, vault_client):
    """Test a non-200 response with a garbage body keeps its status code."""
    vault_mocker.register("POST", "/v1/auth/github/login", VaultResponse(
        status_code=503, content=b"upstream unavailable"
    ))

    with pytest.raises(VaultError) as exc_info:
        await execute_login(vault_client, "POST", "/v1/auth/github/login", {"token": "pat"})

    assert exc_info.value == VaultError(503, ["communication error."])


@pytest.mark.asyncio
async def test_execute_login_malformed_envelope(vault_mocker, vault_client):
    """Test a 200 response that is not JSON raises a decode error."""
    vault_mocker.register("POST", "/v1/auth/github/login", VaultResponse(content=b"ok"))

    with pytest.raises(ValueError) as exc_info:
        await execute_login(vault_client, "POST", "/v1/auth/github/login", {"token": "pat"})

    assert not isinstance(exc_info.value, VaultError)


@pytest.mark.asyncio
async def test_execute_login_transport_error_propagates(vault_mocker, vault_client):
    """Test transport failures propagate unchanged and are not retried."""
    def refuse(request):
        raise httpx.ConnectError("connection refused", request=request)

    vault_mocker.register("POST", "/v1/auth/github/login", refuse)

    with pytest.raises(httpx.ConnectError):
        await execute_login(vault_client, "POST", "/v1/auth/github/login", {"token": "pat"})

    assert vault_mocker.call_count == 1

"""
Backend request helpers shared by the unsealers and the policy store.

This module follows Black Box Design principles:
- Callers hand in an httpx.AsyncClient, nothing is created here
- Response classification lives in one place
- Errors are typed, never swallowed, never retried
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Union

import httpx

from .errors import VaultError

logger = logging.getLogger(__name__)

VAULT_TOKEN_HEADER = "X-Vault-Token"
COMMUNICATION_ERROR = "communication error."


@dataclass
class LoginResult:
    """Decoded auth envelope of a successful login."""
    client_token: str
    lease_duration: int = 0
    ttl: int = 0

    @classmethod
    def from_envelope(cls, envelope: Any) -> "LoginResult":
        """
        Decode {"auth": {"client_token", "lease_duration", "ttl"}}.

        Raises:
            ValueError: If the envelope does not have that shape
        """
        if not isinstance(envelope, dict) or not isinstance(envelope.get("auth"), dict):
            raise ValueError("login response is missing the auth envelope")
        auth = envelope["auth"]
        client_token = auth.get("client_token")
        if not isinstance(client_token, str):
            raise ValueError("login response has no client_token")
        lease_duration = auth.get("lease_duration") or 0
        ttl = auth.get("ttl") or 0
        if not isinstance(lease_duration, int) or not isinstance(ttl, int):
            raise ValueError("login response has a non-integer lease")
        return cls(client_token=client_token, lease_duration=lease_duration, ttl=ttl)


def vault_path(base: Union[str, httpx.URL], path: str, query: str = "") -> str:
    """
    Build a backend URL from the base address and an API path.

    Args:
        base: Backend address, e.g. "https://vault.example.com:8200"
        path: API path, e.g. "/v1/auth/github/login"
        query: Optional raw query string (without "?")

    Returns:
        Absolute URL string

    Example:
        >>> vault_path("http://127.0.0.1:8200/", "v1/sys/health", "standbyok")
        'http://127.0.0.1:8200/v1/sys/health?standbyok'
    """
    url = str(base).rstrip("/") + "/" + path.lstrip("/")
    if query:
        url = f"{url}?{query}"
    return url


def decode_error(response: httpx.Response) -> VaultError:
    """
    Turn a non-200 response into a VaultError.

    The backend answers failures with {"errors": ["...", ...]}. Anything
    that does not decode to that shape becomes "communication error.".

    Args:
        response: Backend response with a non-200 status

    Returns:
        VaultError carrying the status code and messages
    """
    try:
        body = response.json()
    except ValueError:
        return VaultError(response.status_code, [COMMUNICATION_ERROR])

    if not isinstance(body, dict):
        return VaultError(response.status_code, [COMMUNICATION_ERROR])

    errors: Optional[List[Any]] = body.get("errors")
    if errors is None:
        return VaultError(response.status_code, [])
    if not isinstance(errors, list) or not all(isinstance(e, str) for e in errors):
        return VaultError(response.status_code, [COMMUNICATION_ERROR])
    return VaultError(response.status_code, errors)


async def execute_login(
    client: httpx.AsyncClient,
    method: str,
    path: str,
    body: Dict[str, Any],
) -> str:
    """
    Submit a login request and extract the issued token.

    A single attempt is made. Transport failures (httpx.TransportError)
    propagate unchanged.

    Args:
        client: Client bound to the backend address
        method: HTTP method, "POST" for every login endpoint
        path: API path of the login endpoint
        body: JSON body carrying the credential

    Returns:
        The client_token from the auth envelope

    Raises:
        VaultError: Backend answered with anything but 200
        ValueError: 200 response whose body is not an auth envelope
    """
    url = vault_path(client.base_url, path)
    logger.debug(f"Login request: {method} {path}")
    response = await client.request(method, url, json=body)

    if response.status_code != 200:
        error = decode_error(response)
        logger.debug(f"Login rejected by backend: {error}")
        raise error

    result = LoginResult.from_envelope(response.json())
    logger.debug(f"Login succeeded, lease_duration={result.lease_duration}s")
    return result.client_token

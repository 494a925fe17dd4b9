"""
Shared pytest fixtures for Gatekeeper tests.

This module provides common fixtures including:
- VaultMocker: Fake secrets backend served through httpx.MockTransport
- An httpx.AsyncClient bound to the fake backend
"""

import json
import os
import sys
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Tuple, Union

import httpx
import pytest

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

VAULT_ADDR = "http://vault.test:8200"


# =============================================================================
# Vault Mocking Infrastructure
# =============================================================================

@dataclass
class VaultResponse:
    """Represents a canned backend response."""
    status_code: int = 200
    json: Any = None
    content: Optional[bytes] = None
    headers: Optional[Dict[str, str]] = None

    def to_response(self) -> httpx.Response:
        """Build a fresh httpx.Response for one request."""
        if self.content is not None:
            return httpx.Response(self.status_code, content=self.content, headers=self.headers)
        return httpx.Response(self.status_code, json=self.json, headers=self.headers)


Handler = Callable[[httpx.Request], httpx.Response]


class VaultMocker:
    """
    Fake secrets backend keyed by (method, path).

    Usage:
        def test_login(vault_mocker, vault_client):
            vault_mocker.register("POST", "/v1/auth/github/login", VaultResponse(
                json={"auth": {"client_token": "s.abc"}}
            ))

            token = await GithubUnsealer("pat").token(vault_client)

            assert vault_mocker.call_count == 1
    """

    def __init__(self):
        self._routes: Dict[Tuple[str, str], Union[VaultResponse, Handler]] = {}
        self._requests: List[httpx.Request] = []
        self._default_response = VaultResponse(
            status_code=404,
            json={"errors": []}
        )

    def register(
        self,
        method: str,
        path: str,
        response: Union[VaultResponse, Handler],
    ) -> "VaultMocker":
        """
        Register a response (or a handler building one) for a route.

        Returns:
            self for chaining
        """
        self._routes[(method.upper(), path)] = response
        return self

    def handle(self, request: httpx.Request) -> httpx.Response:
        """Transport handler used by httpx.MockTransport."""
        self._requests.append(request)
        route = self._routes.get((request.method, request.url.path), self._default_response)
        if isinstance(route, VaultResponse):
            return route.to_response()
        return route(request)

    @property
    def requests(self) -> List[httpx.Request]:
        """Get all requests made during the test."""
        return self._requests

    @property
    def call_count(self) -> int:
        """Get the number of requests made."""
        return len(self._requests)

    def last_json(self) -> Any:
        """Decode the JSON body of the most recent request."""
        return json.loads(self._requests[-1].content)


@pytest.fixture
def vault_mocker():
    """Fixture that provides an empty VaultMocker."""
    return VaultMocker()


@pytest.fixture
def vault_client(vault_mocker):
    """AsyncClient whose requests are answered by vault_mocker."""
    return httpx.AsyncClient(
        base_url=VAULT_ADDR,
        transport=httpx.MockTransport(vault_mocker.handle),
    )


def auth_envelope(client_token: str, lease_duration: int = 3600) -> Dict[str, Any]:
    """Standard login success body."""
    return {
        "auth": {
            "client_token": client_token,
            "lease_duration": lease_duration,
            "ttl": lease_duration,
        }
    }


# =============================================================================
# Test Markers Configuration
# =============================================================================

def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "integration: Integration tests requiring a real backend"
    )

"""Unsealer interface following Black Box Design principles."""
from typing import Protocol

import httpx


class Unsealer(Protocol):
    """Protocol for credential methods - allows swappable implementations."""

    async def token(self, client: httpx.AsyncClient) -> str:
        """
        Exchange the held credential for a backend access token.

        Args:
            client: Client bound to the backend address

        Returns:
            Opaque access token issued (or confirmed) by the backend
        """
        ...

    def name(self) -> str:
        """Lowercase method identifier used to select this unsealer."""
        ...

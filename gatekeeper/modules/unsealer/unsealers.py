"""
Credential unsealers for the secrets backend.

Each unsealer turns one kind of caller credential into a backend-issued
access token:

- token:    a static token, confirmed through the self-lookup endpoint
- app-id:   an application id plus a user id derived from a MAC address
            or a file, optionally salted and hashed
- github:   a GitHub personal access token
- userpass: a username/password pair

Unsealers hold no mutable state and may be used concurrently. None of
them retry; a failed attempt raises a typed error to the caller.
"""

import errno
import hashlib
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Dict, Type

import httpx
import psutil

from ..vault import (
    VAULT_TOKEN_HEADER,
    UnknownHashMethod,
    UnknownUserIdMethod,
    decode_error,
    execute_login,
    vault_path,
)
from .interfaces import Unsealer

logger = logging.getLogger(__name__)

HASH_METHODS: Dict[str, Callable] = {
    "md5": hashlib.md5,
    "sha1": hashlib.sha1,
    "sha256": hashlib.sha256,
}


@dataclass
class TokenUnsealer:
    """Static token, validated against the backend before it is handed back."""
    auth_token: str = field(repr=False)

    async def token(self, client: httpx.AsyncClient) -> str:
        url = vault_path(client.base_url, "/v1/auth/token/lookup-self")
        response = await client.get(url, headers={VAULT_TOKEN_HEADER: self.auth_token})
        if response.status_code == 200:
            return self.auth_token

        error = decode_error(response)
        logger.debug(f"Token lookup rejected by backend: {error}")
        raise error

    def name(self) -> str:
        return "token"


def interface_hardware_address(interface: str) -> str:
    """
    Get the hardware address of a network interface.

    Args:
        interface: Interface name, e.g. "eth0"

    Returns:
        Lowercase colon-separated address, or "" if the interface has none

    Raises:
        OSError: If no interface with that name exists
    """
    addresses = psutil.net_if_addrs().get(interface)
    if addresses is None:
        raise OSError(errno.ENODEV, "no such network interface", interface)

    for address in addresses:
        if address.family == psutil.AF_LINK:
            # Windows reports "AA-BB-..."
            mac = address.address.replace("-", ":").lower()
            # Loopback and tunnels report all zeros, i.e. no hardware address
            if not mac.replace(":", "").strip("0"):
                return ""
            return mac
    return ""


@dataclass
class AppIdUnsealer:
    """
    App-ID login.

    The user id is read according to user_id_method ("mac" or "file"),
    then hashed with user_id_hash ("md5", "sha1", "sha256" or "" for
    none). When hashing, a non-empty user_id_salt is prepended as
    "<salt>$<user id>".
    """
    app_id: str
    user_id_method: str
    user_id_interface: str = ""
    user_id_path: str = ""
    user_id_hash: str = ""
    user_id_salt: str = field(default="", repr=False)

    def user_id(self) -> str:
        """
        Derive the user id submitted with the login request.

        Raises:
            UnknownUserIdMethod: user_id_method is not "mac" or "file"
            UnknownHashMethod: user_id_hash is not a supported hash
            OSError: The interface or file could not be read
        """
        if self.user_id_method == "mac":
            user_id = interface_hardware_address(self.user_id_interface).encode("utf-8")
        elif self.user_id_method == "file":
            user_id = Path(self.user_id_path).read_bytes()
        else:
            raise UnknownUserIdMethod(self.user_id_method)

        if self.user_id_hash == "":
            return user_id.decode("utf-8", errors="replace")
        if self.user_id_hash not in HASH_METHODS:
            raise UnknownHashMethod(self.user_id_hash)

        if self.user_id_salt:
            user_id = self.user_id_salt.encode("utf-8") + b"$" + user_id
        return HASH_METHODS[self.user_id_hash](user_id).hexdigest()

    async def token(self, client: httpx.AsyncClient) -> str:
        body = {"user_id": self.user_id()}
        return await execute_login(client, "POST", f"/v1/auth/app-id/login/{self.app_id}", body)

    def name(self) -> str:
        return "app-id"


@dataclass
class GithubUnsealer:
    """GitHub personal access token login."""
    personal_token: str = field(repr=False)

    async def token(self, client: httpx.AsyncClient) -> str:
        return await execute_login(
            client, "POST", "/v1/auth/github/login", {"token": self.personal_token}
        )

    def name(self) -> str:
        return "github"


@dataclass
class UserpassUnsealer:
    """Username/password login."""
    username: str
    password: str = field(repr=False)

    async def token(self, client: httpx.AsyncClient) -> str:
        return await execute_login(
            client, "POST", f"/v1/auth/userpass/login/{self.username}", {"password": self.password}
        )

    def name(self) -> str:
        return "userpass"


UNSEALERS: Dict[str, Type] = {
    "token": TokenUnsealer,
    "app-id": AppIdUnsealer,
    "github": GithubUnsealer,
    "userpass": UserpassUnsealer,
}


async def resolve(unsealer: Unsealer, client: httpx.AsyncClient) -> str:
    """
    Obtain an access token for whichever credential method is given.

    Args:
        unsealer: Any of the unsealers above
        client: Client bound to the backend address

    Returns:
        Access token string
    """
    logger.debug(f"Unsealing with method {unsealer.name()}")
    return await unsealer.token(client)


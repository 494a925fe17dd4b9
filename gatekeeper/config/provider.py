"""Configuration provider following Black Box Design principles."""
import os
from dataclasses import dataclass, field
from typing import Protocol

import httpx


@dataclass
class VaultConfig:
    """Secrets backend configuration."""
    address: str
    policies_path: str
    timeout: float

    def create_client(self) -> httpx.AsyncClient:
        """Create a client bound to the backend address."""
        return httpx.AsyncClient(base_url=self.address, timeout=self.timeout)


@dataclass
class UnsealerConfig:
    """Credential parameters for the configured unseal method."""
    method: str
    auth_token: str = field(default="", repr=False)
    app_id: str = ""
    user_id_method: str = ""
    user_id_interface: str = ""
    user_id_path: str = ""
    user_id_hash: str = ""
    user_id_salt: str = field(default="", repr=False)
    github_token: str = field(default="", repr=False)
    username: str = ""
    password: str = field(default="", repr=False)


class ConfigProvider(Protocol):
    """Protocol for configuration providers."""

    def get_vault_config(self) -> VaultConfig:
        """Get secrets backend configuration."""
        ...

    def get_unsealer_config(self) -> UnsealerConfig:
        """Get unseal method configuration."""
        ...


class EnvConfigProvider:
    """Environment-based configuration provider."""

    def get_vault_config(self) -> VaultConfig:
        """Get secrets backend configuration from environment variables."""
        return VaultConfig(
            address=os.getenv("VAULT_ADDR", "http://127.0.0.1:8200"),
            policies_path=os.getenv("VAULT_GK_POLICIES", "gatekeeper"),
            timeout=float(os.getenv("VAULT_TIMEOUT", "10")),
        )

    def get_unsealer_config(self) -> UnsealerConfig:
        """Get unseal method configuration from environment variables."""
        return UnsealerConfig(
            method=os.getenv("UNSEALER", "token").lower(),
            auth_token=os.getenv("VAULT_TOKEN", ""),
            app_id=os.getenv("APP_ID", ""),
            user_id_method=os.getenv("USER_ID_METHOD", ""),
            user_id_interface=os.getenv("USER_ID_INTERFACE", ""),
            user_id_path=os.getenv("USER_ID_PATH", ""),
            user_id_hash=os.getenv("USER_ID_HASH", ""),
            user_id_salt=os.getenv("USER_ID_SALT", ""),
            github_token=os.getenv("GITHUB_TOKEN", ""),
            username=os.getenv("USERPASS_USERNAME", ""),
            password=os.getenv("USERPASS_PASSWORD", ""),
        )

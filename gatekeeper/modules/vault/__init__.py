"""
Vault Module - Black Box Interface

Purpose: Talk to the secrets backend
Interface: vault_path(), execute_login(), decode_error()
Hidden: Envelope formats, header names, status classification

Every other module reaches the backend through this one.
"""

from .client import VAULT_TOKEN_HEADER, LoginResult, decode_error, execute_login, vault_path
from .errors import (
    BackendError,
    PolicyLoadError,
    UnknownHashMethod,
    UnknownUserIdMethod,
    VaultError,
)

__all__ = [
    "VAULT_TOKEN_HEADER",
    "BackendError",
    "LoginResult",
    "PolicyLoadError",
    "UnknownHashMethod",
    "UnknownUserIdMethod",
    "VaultError",
    "decode_error",
    "execute_login",
    "vault_path",
]

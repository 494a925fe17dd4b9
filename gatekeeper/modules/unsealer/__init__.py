"""
Unsealer Module - Black Box Interface

Purpose: Turn a caller credential into a backend access token
Interface: Unsealer.token(), Unsealer.name(), resolve(), UnsealerFactory.build()
Hidden: Login endpoints, user id derivation, hashing

Methods: token, app-id, github, userpass.
"""

from .factory import UnsealerFactory
from .interfaces import Unsealer
from .unsealers import (
    UNSEALERS,
    AppIdUnsealer,
    GithubUnsealer,
    TokenUnsealer,
    UserpassUnsealer,
    resolve,
)

__all__ = [
    "UNSEALERS",
    "AppIdUnsealer",
    "GithubUnsealer",
    "TokenUnsealer",
    "Unsealer",
    "UnsealerFactory",
    "UserpassUnsealer",
    "resolve",
]

"""
Policy store for tokens minted on behalf of callers.

The store maps an identity key (a caller identity or the wildcard "*")
to the Policy attached to tokens minted for that identity. Its contents
come from a secret in the backend and are replaced wholesale on every
successful load.

Thread-safety: the mapping is built completely before it is swapped in
under a lock, and lookups take the same lock, so a reader sees either
the entire old mapping or the entire new one.
"""

import logging
import posixpath
import threading
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Tuple

import httpx

from ..vault import VAULT_TOKEN_HEADER, PolicyLoadError, decode_error, vault_path

logger = logging.getLogger(__name__)

WILDCARD = "*"
DEFAULT_TTL = 21600  # 6 hours
MAX_REDIRECTS = 10


@dataclass(frozen=True)
class Policy:
    """
    Named permission grant attached to minted tokens.

    num_uses is the maximum number of uses of a minted token (0 means
    unlimited). It travels as "num_users" in the policy document.
    """
    policies: Tuple[str, ...] = ()
    meta: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))
    ttl: int = DEFAULT_TTL
    num_uses: int = 0

    @classmethod
    def from_dict(cls, raw: Any) -> "Policy":
        """
        Decode one entry of the policy document.

        Raises:
            ValueError: If the entry does not have the expected shape
        """
        if not isinstance(raw, dict):
            raise ValueError(f"policy entry must be an object, got {type(raw).__name__}")

        policies = raw.get("policies")
        if policies is None:
            policies = []
        if not isinstance(policies, list) or not all(isinstance(p, str) for p in policies):
            raise ValueError("policies must be a list of strings")

        meta = raw.get("meta")
        if meta is None:
            meta = {}
        if not isinstance(meta, dict) or not all(
            isinstance(k, str) and isinstance(v, str) for k, v in meta.items()
        ):
            raise ValueError("meta must map strings to strings")

        ttl = _int_field(raw, "ttl") or DEFAULT_TTL
        num_uses = _int_field(raw, "num_users", "num_uses")

        return cls(
            policies=tuple(policies),
            meta=MappingProxyType(dict(meta)),
            ttl=ttl,
            num_uses=num_uses,
        )

    def __hash__(self) -> int:
        return hash((self.policies, tuple(sorted(self.meta.items())), self.ttl, self.num_uses))

    def to_dict(self) -> Dict[str, Any]:
        """Encode using the policy document's field names."""
        data: Dict[str, Any] = {"policies": list(self.policies)}
        if self.meta:
            data["meta"] = dict(self.meta)
        if self.ttl:
            data["ttl"] = self.ttl
        if self.num_uses:
            data["num_users"] = self.num_uses
        return data


def _int_field(raw: Dict[str, Any], *names: str) -> int:
    for name in names:
        value = raw.get(name)
        if value is None:
            continue
        if isinstance(value, bool) or not isinstance(value, int):
            raise ValueError(f"{name} must be an integer")
        return value
    return 0


# Returned by get() when neither the key nor a wildcard entry exists
DEFAULT_POLICY = Policy(policies=(), ttl=DEFAULT_TTL)

# Installed when the backend holds no policy document at all
DEFAULT_POLICIES: Mapping[str, Policy] = MappingProxyType({
    WILDCARD: Policy(policies=("default",), ttl=DEFAULT_TTL),
})

DECODE_ERROR_HINT = (
    "There was an error decoding policy from vault. This can occur when using "
    "vault-cli to save the policy json, as vault-cli saves it as a string rather "
    "than a json object."
)


def decode_policies(body: Any) -> Dict[str, Policy]:
    """
    Decode {"data": {<key>: Policy, ...}} into a fresh mapping.

    Raises:
        ValueError: If the document does not have that shape
    """
    if not isinstance(body, dict):
        raise ValueError("policy document must be an object")
    data = body.get("data")
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ValueError("policy data must be an object")
    return {key: Policy.from_dict(value) for key, value in data.items()}


class PolicyStore:
    """
    In-memory cache of the policy document.

    Usage:
        store = PolicyStore(client, "gatekeeper")
        await store.load(admin_token)
        policy = store.get("my-app")
    """

    def __init__(self, client: httpx.AsyncClient, policies_path: str):
        """
        Initialize an empty store.

        Args:
            client: Client bound to the backend address
            policies_path: Path of the policy secret below /v1/secret
        """
        self.client = client
        self.policies_path = policies_path
        self._policies: Mapping[str, Policy] = MappingProxyType({})
        self._lock = threading.Lock()

    def get(self, key: str) -> Policy:
        """
        Get the policy for an identity key.

        Returns, in order: the exact entry, the wildcard entry, or the
        process default policy. Never fails.
        """
        with self._lock:
            policies = self._policies
        if key in policies:
            return policies[key]
        if WILDCARD in policies:
            return policies[WILDCARD]
        return DEFAULT_POLICY

    async def load(self, admin_token: str) -> None:
        """
        Replace the store's contents with the backend's policy document.

        A missing document (404) installs DEFAULT_POLICIES. On any error
        the previous contents are kept.

        Args:
            admin_token: Token allowed to read the policy secret

        Raises:
            PolicyLoadError: Wrapping a VaultError, a decode error, or the
                transport error that prevented the request
        """
        path = posixpath.join("/v1/secret", self.policies_path.lstrip("/"))
        try:
            response = await self._fetch(vault_path(self.client.base_url, path), admin_token)
        except httpx.HTTPError as e:
            raise PolicyLoadError(e) from e

        if response.status_code == 200:
            try:
                policies = decode_policies(response.json())
            except ValueError as e:
                cause = ValueError(DECODE_ERROR_HINT)
                cause.__cause__ = e
                raise PolicyLoadError(cause) from cause
            self._replace(policies)
            logger.info(f"Loaded {len(policies)} policies from {self.policies_path}")
            return

        if response.status_code == 404:
            logger.warning(
                f"There was no policy in the secret backend at {self.policies_path}. "
                "Tokens created will have the default vault policy."
            )
            self._replace(DEFAULT_POLICIES)
            return

        error = decode_error(response)
        raise PolicyLoadError(error) from error

    async def _fetch(self, url: str, admin_token: str) -> httpx.Response:
        """GET following at most MAX_REDIRECTS redirects, resending the token header."""
        request = self.client.build_request("GET", url, headers={VAULT_TOKEN_HEADER: admin_token})
        for _ in range(MAX_REDIRECTS + 1):
            logger.debug(f"Policy request: GET {request.url.path}")
            response = await self.client.send(request, follow_redirects=False)
            if response.next_request is None:
                return response
            request = response.next_request
            request.headers[VAULT_TOKEN_HEADER] = admin_token
        raise httpx.TooManyRedirects("Exceeded maximum allowed redirects.", request=request)

    def _replace(self, policies: Mapping[str, Policy]) -> None:
        fresh = MappingProxyType(dict(policies))
        with self._lock:
            self._policies = fresh

    def keys(self) -> List[str]:
        """Identity keys currently loaded."""
        with self._lock:
            return list(self._policies)

    def __len__(self) -> int:
        with self._lock:
            return len(self._policies)

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._policies


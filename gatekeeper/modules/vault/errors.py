"""Error types raised while talking to the secrets backend."""

from typing import List, Optional


class VaultError(Exception):
    """
    Non-200 response from the backend.

    Carries the HTTP status code and the messages from the backend's
    error envelope, or a synthetic "communication error." when the
    body could not be decoded.
    """

    def __init__(self, code: int, errors: Optional[List[str]] = None):
        self.code = code
        self.errors = list(errors or [])
        super().__init__(str(self))

    def __str__(self) -> str:
        return f"{self.code}: {', '.join(self.errors)}"

    def __eq__(self, other) -> bool:
        if not isinstance(other, VaultError):
            return NotImplemented
        return self.code == other.code and self.errors == other.errors

    __hash__ = Exception.__hash__


# Name used by callers that map backend failures to their own responses
BackendError = VaultError


class PolicyLoadError(Exception):
    """Reloading the policy document failed; wraps the underlying error."""

    def __init__(self, err: BaseException):
        self.err = err
        super().__init__(str(self))

    def __str__(self) -> str:
        return f"Error loading policy from vault: {self.err}"


class UnknownUserIdMethod(ValueError):
    """The app-id unsealer was configured with an unsupported user id method."""

    def __init__(self, method: str = ""):
        self.method = method
        super().__init__("Unknown method specified for user id.")


class UnknownHashMethod(ValueError):
    """The app-id unsealer was configured with an unsupported hash method."""

    def __init__(self, method: str = ""):
        self.method = method
        super().__init__("Unknown hash method specified for user id.")

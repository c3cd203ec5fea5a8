"""Error taxonomy for wallosctl.

Every failure raised by the engine is a ``WallosError`` subclass with a
stable ``kind`` string, so callers can branch on it without importing the
concrete classes.
"""

from typing import Any


class WallosError(Exception):
    """Base class for all engine errors."""

    kind = "wallos"

    def __init__(self, message: str, *, entity: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.entity = entity


class ConfigurationError(WallosError):
    """Credentials are insufficient for the requested operation."""

    kind = "configuration"


class AuthenticationError(WallosError):
    """Login was attempted but the backend handed out no session."""

    kind = "authentication"


class ProtectedEntityError(WallosError):
    """Attempt to mutate the reserved default category."""

    kind = "protected_entity"


class RemoteValidationError(WallosError):
    """The backend rejected the operation or answered with an unexpected shape."""

    kind = "remote_validation"


class NetworkError(WallosError):
    """Transport-level failure, including timeouts."""

    kind = "network"


class UnknownEntityError(WallosError):
    """A record expected after a mutation could not be located."""

    kind = "unknown_entity"

    def __init__(self, message: str, *, entity: str | None = None, ack: Any = None) -> None:
        super().__init__(message, entity=entity)
        self.ack = ack


class InvalidRequestError(WallosError, ValueError):
    """Caller input rejected before any network call."""

    kind = "invalid_request"

"""Authentication against Wallos.

Wallos uses two credentials:
- an API key, sent as a query parameter on read endpoints under /api/
- a PHP session cookie, required by every write endpoint

The session is obtained lazily by posting the login form and lives for an
hour. An API key can be minted through an authenticated session when none is
configured. Both are owned by ``Authenticator`` and replaced under a lock,
so concurrent callers wait for a single login instead of racing.
"""

import logging
import threading
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable

from wallosctl.errors import AuthenticationError, ConfigurationError, RemoteValidationError
from wallosctl.transport import SESSION_COOKIE, Transport

LOGIN_PATH = "/login.php"
REGENERATE_API_KEY_PATH = "/endpoints/user/regenerateapikey.php"
SESSION_TTL = timedelta(hours=1)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Credentials:
    """Configured credentials. Needs an API key or a username/password pair."""

    api_key: str | None = None
    username: str | None = None
    password: str | None = None

    @property
    def can_login(self) -> bool:
        return bool(self.username and self.password)


@dataclass(frozen=True)
class SessionState:
    """A logged-in session."""

    token: str
    expires_at: datetime

    def is_valid(self, now: datetime) -> bool:
        return now < self.expires_at


class Authenticator:
    """Owns the session and API key for one client."""

    def __init__(
        self,
        transport: Transport,
        credentials: Credentials,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        if not credentials.api_key and not credentials.can_login:
            raise ConfigurationError("Either an API key or both username and password must be provided")

        self.transport = transport
        self.credentials = credentials
        self.clock = clock or datetime.now
        self._session: SessionState | None = None
        self._api_key = credentials.api_key
        self._session_lock = threading.Lock()
        self._api_key_lock = threading.Lock()

    @property
    def session(self) -> SessionState | None:
        """Current session, if one is still valid."""
        session = self._session
        if session is not None and session.is_valid(self.clock()):
            return session
        return None

    @property
    def api_key(self) -> str | None:
        return self._api_key

    def ensure_session(self) -> SessionState:
        """Return a valid session, logging in if there is none.

        Raises:
            ConfigurationError: If no username/password is configured.
            AuthenticationError: If the backend returns no session cookie.
        """
        if not self.credentials.can_login:
            raise ConfigurationError(
                "Session credentials (WALLOS_USERNAME and WALLOS_PASSWORD) required for mutation operations"
            )

        with self._session_lock:
            session = self.session
            if session is None:
                session = self._login()
                self._session = session
            return session

    def ensure_api_key(self) -> str:
        """Return the API key, issuing a new one through a session if needed.

        Raises:
            ConfigurationError: If there is neither an API key nor login credentials.
            AuthenticationError: If the backend refuses to issue a key.
        """
        if self._api_key:
            return self._api_key
        if not self.credentials.can_login:
            raise ConfigurationError("API key or username/password required for API access")

        session = self.ensure_session()
        with self._api_key_lock:
            if not self._api_key:
                self._api_key = self._issue_api_key(session)
            return self._api_key

    def _login(self) -> SessionState:
        response = self.transport.send(
            "POST",
            LOGIN_PATH,
            data={
                "username": self.credentials.username,
                "password": self.credentials.password,
                "rememberme": "on",
            },
            allow_redirects=False,
        )

        token = response.cookies.get(SESSION_COOKIE)
        if not token:
            raise AuthenticationError("Failed to authenticate: No session cookie received")

        logger.info("Authenticated with Wallos as %s", self.credentials.username)
        return SessionState(token=token, expires_at=self.clock() + SESSION_TTL)

    def _issue_api_key(self, session: SessionState) -> str:
        try:
            payload = self.transport.send_json("POST", REGENERATE_API_KEY_PATH, json={}, session_token=session.token)
        except RemoteValidationError as e:
            raise AuthenticationError(f"Failed to obtain API key: {e.message}") from e

        api_key = payload.get("apiKey") if isinstance(payload, dict) else None
        if not (isinstance(payload, dict) and payload.get("success") and api_key):
            raise AuthenticationError("Failed to obtain API key: server did not issue one")

        logger.info("Issued a new Wallos API key")
        return str(api_key)

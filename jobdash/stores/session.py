"""
JobDash - Session store.

Owns the signed-in identity and the bearer token. Everything else asks
this object whether the user is authenticated and which token to send;
nothing else reads the persisted token.

Lifecycle:
    restore()        at startup, validates a persisted token (never raises)
    login/register   start a session and persist the token
    update_profile   refreshes identity, adopts a rotated token
    logout/expire    discard token + identity

Dependent stores subscribe and are told about every transition:
`reset()` when the session ends, `await on_authenticated()` when one starts.
"""
from typing import Any, List, Optional
import asyncio
import logging

from ..api import ApiClient
from ..errors import (
    JobDashError, NotAuthenticatedError, SESSION_EXPIRED_MESSAGE, SessionExpiredError, TransportError,
)
from ..schemas import AuthResponse, LoginRequest, ProfileUpdate, RegisterRequest, User
from ..services.notifications import Notifier
from ..storage import FileTokenStorage
from .base import build_input, parse_response

logger = logging.getLogger("jobdash.session")


def _require_issued_token(auth: AuthResponse) -> None:
    if not auth.token:
        raise TransportError("Invalid response from server: no token issued")


class SessionStore:
    """Authenticated identity + token, with explicit change notification."""

    def __init__(self, api: ApiClient, storage: FileTokenStorage, notifier: Optional[Notifier] = None):
        self.api = api
        self.storage = storage
        self.notifier = notifier or Notifier()
        self.user: Optional[User] = None
        self.token: Optional[str] = None
        # true until restore() has run
        self.is_loading = True
        self._listeners: List[Any] = []

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None and self.token is not None

    def require_token(self) -> str:
        """Current bearer token, or NotAuthenticatedError."""
        if not self.token:
            raise NotAuthenticatedError()
        return self.token

    # -------------------------------------------------------------------------
    # Subscriptions
    # -------------------------------------------------------------------------

    def subscribe(self, listener) -> None:
        """Register an object with `reset()` and `async on_authenticated()`."""
        if listener not in self._listeners:
            self._listeners.append(listener)

    def unsubscribe(self, listener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    async def _announce_authenticated(self) -> None:
        """Let every store reset and reload; one failing store doesn't fail sign-in."""
        listeners = list(self._listeners)
        results = await asyncio.gather(
            *(listener.on_authenticated() for listener in listeners),
            return_exceptions=True,
        )
        for listener, result in zip(listeners, results):
            if isinstance(result, Exception):
                logger.warning(f"{type(listener).__name__} failed to load after sign-in: {result}")

    def _announce_signed_out(self) -> None:
        for listener in list(self._listeners):
            listener.reset()

    # -------------------------------------------------------------------------
    # Session transitions
    # -------------------------------------------------------------------------

    async def _start(self, auth: AuthResponse) -> User:
        self.storage.set_token(auth.token)
        self.token = auth.token
        self.user = User(id=auth.id, name=auth.name, email=auth.email, profile_picture=auth.profile_picture)
        self.is_loading = False
        logger.info(f"Signed in as {self.user.email}")
        await self._announce_authenticated()
        return self.user

    def _end(self) -> None:
        self.storage.clear_token()
        self.token = None
        self.user = None
        self.is_loading = False
        self._announce_signed_out()

    async def restore(self) -> bool:
        """
        Resume a persisted session at startup.

        An invalid or expired token is not something the user can act on
        here, so any failure just discards the token and starts signed out.

        Returns:
            True if a session was restored
        """
        token = self.storage.get_token()
        if not token:
            self.is_loading = False
            return False

        try:
            data = await self.api.get("/users/profile", token=token, default_message="Failed to authenticate")
            user = parse_response(User, data)
        except JobDashError as e:
            logger.info(f"Stored session could not be restored, starting signed out: {e.message}")
            self.storage.clear_token()
            self.token = None
            self.user = None
            self.is_loading = False
            return False

        self.token = token
        self.user = user
        self.is_loading = False
        logger.info(f"Restored session for {user.email}")
        await self._announce_authenticated()
        return True

    async def login(self, email: str, password: str) -> User:
        """
        Sign in with credentials.

        On failure the previous session state is left exactly as it was.

        Raises:
            InputValidationError: Missing/malformed email or password
            ApiError: Server rejected the credentials (message from server)
            TransportError: Network failure
        """
        request = build_input(LoginRequest, {"email": email, "password": password})
        try:
            data = await self.api.post("/users/login", json=request.to_payload(), default_message="Invalid credentials")
            auth = parse_response(AuthResponse, data)
            _require_issued_token(auth)
        except JobDashError as e:
            self.notifier.error("Login failed", e.message)
            raise

        user = await self._start(auth)
        self.notifier.success("Login successful", f"Welcome back, {user.name}!")
        return user

    async def register(self, name: str, email: str, password: str) -> User:
        """Create an account and sign in; same failure contract as login()."""
        request = build_input(RegisterRequest, {"name": name, "email": email, "password": password})
        try:
            data = await self.api.post("/users", json=request.to_payload(), default_message="Registration failed")
            auth = parse_response(AuthResponse, data)
            _require_issued_token(auth)
        except JobDashError as e:
            self.notifier.error("Registration failed", e.message)
            raise

        user = await self._start(auth)
        self.notifier.success("Registration successful", f"Welcome, {user.name}!")
        return user

    def logout(self) -> None:
        """Sign out locally. No network call."""
        was_authenticated = self.is_authenticated
        self._end()
        if was_authenticated:
            logger.info("Signed out")
            self.notifier.success("Logged out", "You have been successfully logged out.")

    def expire(self) -> None:
        """End the session because the server rejected the token."""
        if self.token is None and self.user is None:
            return
        logger.warning("Session expired; token discarded")
        self._end()
        self.notifier.error("Session expired", SESSION_EXPIRED_MESSAGE)

    async def update_profile(self, **fields) -> User:
        """
        Update name/email/profile picture.

        Args:
            **fields: Any of name, email, profile_picture

        Raises:
            NotAuthenticatedError: No session (no request is sent)
            SessionExpiredError: Token rejected; the session is ended
            InputValidationError, ApiError, TransportError
        """
        token = self.require_token()
        update = build_input(ProfileUpdate, fields)
        try:
            data = await self.api.put(
                "/users/profile",
                token=token,
                json=update.to_payload(partial=True),
                default_message="Failed to update profile",
            )
            auth = parse_response(AuthResponse, data)
        except SessionExpiredError:
            if self.token == token:
                self.expire()
            raise
        except JobDashError as e:
            self.notifier.error("Update failed", e.message)
            raise

        user = User(id=auth.id, name=auth.name, email=auth.email, profile_picture=auth.profile_picture)
        if self.token != token:
            logger.debug("Profile response arrived after the session changed; ignoring it")
            return user

        if auth.token and auth.token != token:
            self.storage.set_token(auth.token)
            self.token = auth.token
            logger.info("Adopted rotated session token")
        self.user = user
        self.notifier.success("Profile updated", "Your profile has been updated successfully.")
        return user

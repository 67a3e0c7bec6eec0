"""Client-side authentication session.

Learn: The session is an explicit state machine, not a bag of flags:

    UNAUTHENTICATED ──login/register──▶ LOADING ──ok──▶ AUTHENTICATED
          ▲                               │                  │
          └──────────── failure ──────────┘                  │
          └───────────── logout / 401 / bad token ───────────┘

Session is an immutable snapshot; the functions below are the only
transitions. AuthSession drives them against the API and keeps the
TokenStore in step: a token is saved only on success and dropped on
any invalidation.
"""

from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Optional

import structlog

from taskboard.client.api import ApiClient, ApiError
from taskboard.client.token_store import TokenStore

logger = structlog.get_logger()


class SessionState(str, Enum):
    UNAUTHENTICATED = "unauthenticated"
    LOADING = "loading"
    AUTHENTICATED = "authenticated"


class InvalidTransition(Exception):
    pass


@dataclass(frozen=True)
class Session:
    state: SessionState = SessionState.UNAUTHENTICATED
    user: Optional[dict[str, Any]] = None
    token: Optional[str] = None

    @property
    def is_authenticated(self) -> bool:
        return self.state is SessionState.AUTHENTICATED

    @property
    def is_loading(self) -> bool:
        return self.state is SessionState.LOADING


# ─── Transitions ──────────────────────────────────────────


def start_loading(current: Session) -> Session:
    return replace(current, state=SessionState.LOADING)


def login_succeeded(user: dict[str, Any], token: str) -> Session:
    return Session(SessionState.AUTHENTICATED, user=user, token=token)


def auth_failed() -> Session:
    return Session(SessionState.UNAUTHENTICATED)


def logged_out() -> Session:
    return Session(SessionState.UNAUTHENTICATED)


def user_updated(current: Session, user: dict[str, Any]) -> Session:
    if not current.is_authenticated:
        raise InvalidTransition(f"cannot update user while {current.state.value}")
    return replace(current, user={**(current.user or {}), **user})


@dataclass(frozen=True)
class AuthResult:
    success: bool
    message: Optional[str] = None
    errors: tuple[str, ...] = ()


class AuthSession:
    """Owns the Session for one client and syncs it with the token store."""

    def __init__(self, api: ApiClient, token_store: Optional[TokenStore] = None):
        self.api = api
        self.token_store = token_store or api.token_store
        self.session = Session()

    @property
    def state(self) -> SessionState:
        return self.session.state

    @property
    def user(self) -> Optional[dict[str, Any]]:
        return self.session.user

    @property
    def is_authenticated(self) -> bool:
        return self.session.is_authenticated

    async def check_auth(self) -> Session:
        """Validate a stored token. Any failure discards it."""
        token = self.token_store.load()
        if not token:
            self.session = logged_out()
            return self.session

        self.session = start_loading(Session(token=token))
        try:
            body = await self.api.get("/auth/verify")
        except ApiError as e:
            logger.info("session.token_rejected", status=e.status_code, reason=e.message)
            self.token_store.clear()
            self.session = auth_failed()
            return self.session

        self.session = login_succeeded(body["data"]["user"], token)
        return self.session

    async def login(self, email: str, password: str) -> AuthResult:
        return await self._authenticate(
            "/auth/login", {"email": email, "password": password}
        )

    async def register(self, name: str, email: str, password: str) -> AuthResult:
        return await self._authenticate(
            "/auth/register", {"name": name, "email": email, "password": password}
        )

    async def _authenticate(self, path: str, payload: dict) -> AuthResult:
        self.session = start_loading(self.session)
        try:
            body = await self.api.post(path, payload)
        except ApiError as e:
            # a failed attempt ends signed out, even if a session was active
            self.token_store.clear()
            self.session = auth_failed()
            return AuthResult(False, e.message, tuple(e.errors))

        data = body["data"]
        self.token_store.save(data["token"])
        self.session = login_succeeded(data["user"], data["token"])
        return AuthResult(True, body.get("message"))

    async def logout(self) -> None:
        """Notify the server if we can, then clear local state regardless."""
        if self.token_store.load():
            try:
                await self.api.post("/auth/logout")
            except ApiError as e:
                logger.info("session.logout_notify_failed", reason=e.message)
        self.force_logout()

    def update_user(self, user: dict[str, Any]) -> Session:
        self.session = user_updated(self.session, user)
        return self.session

    def force_logout(self) -> None:
        self.token_store.clear()
        self.session = logged_out()

"""Per-user session state.

A ``SessionContext`` holds who is signed in, their profile, and the lists
last loaded for them. It is created empty, initialized by ``sign_in`` (or
``resume`` for a request carrying a token), and torn down by ``sign_out``.
"""

from __future__ import annotations

import inspect
from collections.abc import Awaitable, Callable

import structlog

from studyhub.catalog.service import ContentCatalog
from studyhub.errors import Unauthenticated
from studyhub.identity.provider import AuthSession, AuthUser, IdentityProvider, default_name
from studyhub.ledger.policy import sign_in_message
from studyhub.ledger.service import ProfileLedger
from studyhub.schemas import Job, Note, Profile, Quiz

logger = structlog.get_logger()

AuthListener = Callable[[AuthUser | None], Awaitable[None] | None]


class SessionContext:
    """Explicit replacement for ambient "current user" state."""

    def __init__(self, identity: IdentityProvider, ledger: ProfileLedger, catalog: ContentCatalog) -> None:
        self.identity = identity
        self.ledger = ledger
        self.catalog = catalog
        self.user: AuthUser | None = None
        self.access_token: str | None = None
        self.profile: Profile | None = None
        self.notes: list[Note] = []
        self.jobs: list[Job] = []
        self.quizzes: list[Quiz] = []
        self._listeners: list[AuthListener] = []

    @property
    def signed_in(self) -> bool:
        return self.user is not None

    # --- Lifecycle ---

    async def sign_up(self, email: str, password: str, name: str | None = None) -> AuthSession:
        """Register, create the profile, then sign in."""
        uid = await self.identity.sign_up(email, password, display_name=name)
        await self.ledger.ensure_profile(uid, (name or "").strip() or default_name(email.strip().lower()))
        return await self.sign_in(email, password)

    async def sign_in(self, email: str, password: str) -> AuthSession:
        auth = await self.identity.sign_in(email, password)
        await self._start(auth.user, auth.access_token)
        return auth

    async def resume(self, token: str) -> AuthUser:
        """Bind this context to the user a previously issued token belongs to."""
        user = self.identity.verify(token)
        await self._start(user, token)
        return user

    async def sign_out(self) -> None:
        if self.user is None:
            return
        uid = self.user.uid
        self.user = None
        self.access_token = None
        self.profile = None
        self.notes = []
        self.jobs = []
        self.quizzes = []
        logger.info("session_ended", uid=uid)
        await self._notify()

    async def _start(self, user: AuthUser, token: str) -> None:
        self.user = user
        self.access_token = token
        # Accounts created before profiles existed get one lazily here.
        self.profile = await self.ledger.ensure_profile(user.uid, user.name or default_name(user.email))
        await self._notify()

    # --- Auth state listeners ---

    async def on_auth_state_change(self, callback: AuthListener) -> Callable[[], None]:
        """Register ``callback``; it receives the current user now and on every change.

        Returns a function that unregisters it.
        """
        self._listeners.append(callback)
        await self._call(callback)

        def unsubscribe() -> None:
            if callback in self._listeners:
                self._listeners.remove(callback)

        return unsubscribe

    async def _notify(self) -> None:
        for callback in list(self._listeners):
            await self._call(callback)

    async def _call(self, callback: AuthListener) -> None:
        result = callback(self.user)
        if inspect.isawaitable(result):
            await result

    # --- Guards and reloads ---

    def require_user(self, action: str) -> AuthUser:
        """Return the signed-in user or raise Unauthenticated with the action's message."""
        if self.user is None:
            raise Unauthenticated(sign_in_message(action), action=action)
        return self.user

    async def refresh(self) -> None:
        """Re-fetch the profile and every list. No paging, whole collections."""
        if self.user is not None:
            self.profile = await self.ledger.get_profile(self.user.uid)
        self.notes = await self.catalog.list_notes()
        self.jobs = await self.catalog.list_jobs()
        self.quizzes = await self.catalog.list_quizzes()

"""
Identity provider: email/password accounts and session tokens.

Accounts live in the store's private ``accounts`` collection keyed by the
normalized email, which makes duplicate sign-ups collide on insert. The
user id handed to the rest of the system is a separate, stable UUID.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import datetime, timezone

import jwt
import structlog

from studyhub.config import Settings, get_settings
from studyhub.errors import Conflict, Unauthenticated, ValidationError
from studyhub.identity.password import (
    check_needs_rehash,
    hash_password,
    validate_password_strength,
    verify_password,
)
from studyhub.identity.tokens import create_access_token, verify_token
from studyhub.store.base import ACCOUNTS, DocumentStore

logger = structlog.get_logger()


@dataclass(frozen=True)
class AuthUser:
    """The signed-in user as seen by the rest of the application."""

    uid: str
    email: str
    name: str


@dataclass(frozen=True)
class AuthSession:
    user: AuthUser
    access_token: str
    expires_at: datetime


def normalize_email(email: str) -> str:
    return email.strip().lower()


def default_name(email: str) -> str:
    """Display name fallback: the local part of the email."""
    return email.split("@", 1)[0] or email


class IdentityProvider:
    """Registers accounts, checks passwords, and issues/verifies tokens."""

    def __init__(self, store: DocumentStore, settings: Settings | None = None) -> None:
        self.store = store
        self.settings = settings or get_settings()

    async def sign_up(self, email: str, password: str, display_name: str | None = None) -> str:
        """
        Register a new account. Returns the new user id.

        Raises:
            ValidationError: If the email is malformed or the password is weak.
            Conflict: If the email is already registered.
        """
        email = normalize_email(email)
        if "@" not in email:
            msg = "Invalid email address"
            raise ValidationError(msg)
        validate_password_strength(password)

        uid = str(uuid.uuid4())
        now = datetime.now(timezone.utc).isoformat()
        record = {
            "uid": uid,
            "email": email,
            "password_hash": hash_password(password),
            "display_name": (display_name or "").strip() or default_name(email),
            "created_at": now,
            "last_login": None,
        }
        try:
            await self.store.insert(ACCOUNTS, record, doc_id=email)
        except Conflict:
            msg = "Email already registered"
            raise Conflict(msg) from None

        logger.info("account_created", uid=uid)
        return uid

    async def sign_in(self, email: str, password: str) -> AuthSession:
        """
        Check credentials and issue an access token.

        Raises:
            Unauthenticated: On unknown email or wrong password (same message for both).
        """
        email = normalize_email(email)
        account = await self.store.get_by_id(ACCOUNTS, email)
        if account is None or not verify_password(password, account["password_hash"]):
            logger.info("sign_in_failed", email=email)
            msg = "Invalid email or password"
            raise Unauthenticated(msg)

        fields: dict[str, str] = {"last_login": datetime.now(timezone.utc).isoformat()}
        if check_needs_rehash(account["password_hash"]):
            fields["password_hash"] = hash_password(password)
        await self.store.update_fields(ACCOUNTS, email, fields)

        user = AuthUser(uid=account["uid"], email=email, name=account["display_name"])
        token, expires_at = create_access_token(user.uid, user.email, user.name, self.settings)
        logger.info("sign_in", uid=user.uid)
        return AuthSession(user=user, access_token=token, expires_at=expires_at)

    def verify(self, token: str) -> AuthUser:
        """
        Decode an access token into the user it was issued to.

        Raises:
            Unauthenticated: If the token is invalid or expired.
        """
        try:
            payload = verify_token(token, self.settings)
        except jwt.InvalidTokenError as e:
            raise Unauthenticated(str(e)) from e
        return AuthUser(uid=payload["sub"], email=payload.get("email", ""), name=payload.get("name", ""))

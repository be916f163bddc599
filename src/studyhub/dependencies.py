"""Shared FastAPI dependencies."""

from __future__ import annotations

import structlog
from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from studyhub.errors import Unauthenticated
from studyhub.services import Services
from studyhub.session import SessionContext

logger = structlog.get_logger()

_bearer_optional = HTTPBearer(auto_error=False)


def get_services(request: Request) -> Services:
    """Services built at startup and stored on the app."""
    return request.app.state.services


async def get_session_context(
    credentials: HTTPAuthorizationCredentials | None = Depends(_bearer_optional),
    services: Services = Depends(get_services),
) -> SessionContext:
    """Per-request session. Signed in when a valid bearer token is present.

    A bad or expired token leaves the session signed out; endpoints that need
    a user then fail with Unauthenticated.
    """
    session = services.new_session()
    if credentials is not None:
        try:
            await session.resume(credentials.credentials)
        except Unauthenticated as e:
            logger.info("token_rejected", reason=e.message)
    return session

"""Authentication router (/api/v1/auth/*)."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Response

from studyhub.dependencies import get_session_context
from studyhub.identity.provider import AuthSession
from studyhub.schemas import AuthResponse, SignInRequest, SignUpRequest
from studyhub.session import SessionContext

router = APIRouter(prefix="/api/v1/auth", tags=["Auth"])


def _auth_response(session: SessionContext, auth: AuthSession) -> AuthResponse:
    return AuthResponse(
        uid=auth.user.uid,
        email=auth.user.email,
        access_token=auth.access_token,
        expires_at=auth.expires_at,
        profile=session.profile,
    )


@router.post("/signup", response_model=AuthResponse, status_code=201)
async def sign_up(
    body: SignUpRequest,
    session: SessionContext = Depends(get_session_context),
) -> AuthResponse:
    """Register with email + password. Creates the profile and signs in."""
    auth = await session.sign_up(body.email, body.password, name=body.name)
    return _auth_response(session, auth)


@router.post("/signin", response_model=AuthResponse)
async def sign_in(
    body: SignInRequest,
    session: SessionContext = Depends(get_session_context),
) -> AuthResponse:
    """Sign in; creates the profile on first sign-in if it is missing."""
    auth = await session.sign_in(body.email, body.password)
    return _auth_response(session, auth)


@router.post("/signout", status_code=204)
async def sign_out(session: SessionContext = Depends(get_session_context)) -> Response:
    """End the session. Tokens are stateless, so the client discards its copy."""
    await session.sign_out()
    return Response(status_code=204)

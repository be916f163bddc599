"""Profile router (/api/v1/profiles/*)."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from studyhub.dependencies import get_services, get_session_context
from studyhub.errors import NotFound
from studyhub.schemas import Note, Profile, ProfileUpdateRequest
from studyhub.services import Services
from studyhub.session import SessionContext

router = APIRouter(prefix="/api/v1/profiles", tags=["Profiles"])


@router.get("/me", response_model=Profile)
async def get_my_profile(session: SessionContext = Depends(get_session_context)) -> Profile:
    """Own profile with current points and earnings."""
    session.require_user("view_profile")
    return session.profile


@router.patch("/me", response_model=Profile)
async def update_my_profile(
    body: ProfileUpdateRequest,
    session: SessionContext = Depends(get_session_context),
    services: Services = Depends(get_services),
) -> Profile:
    """Edit name, bio, or role."""
    user = session.require_user("update_profile")
    profile = await services.ledger.update_details(user.uid, name=body.name, bio=body.bio, role=body.role)
    session.profile = profile
    return profile


@router.get("/{uid}", response_model=Profile)
async def get_profile(uid: str, services: Services = Depends(get_services)) -> Profile:
    profile = await services.ledger.get_profile(uid)
    if profile is None:
        msg = "Profile not found"
        raise NotFound(msg)
    return profile


@router.get("/{uid}/notes", response_model=list[Note])
async def get_profile_notes(uid: str, services: Services = Depends(get_services)) -> list[Note]:
    """Notes authored by ``uid``."""
    return await services.catalog.list_notes_by(uid)

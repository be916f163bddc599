"""Notes router (/api/v1/notes)."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from studyhub.dependencies import get_services, get_session_context
from studyhub.schemas import Note, NoteContribution, NoteCreate
from studyhub.services import Services
from studyhub.session import SessionContext

router = APIRouter(prefix="/api/v1/notes", tags=["Notes"])


@router.get("", response_model=list[Note])
async def list_notes(services: Services = Depends(get_services)) -> list[Note]:
    return await services.catalog.list_notes()


@router.post("", response_model=NoteContribution, status_code=201)
async def contribute_note(
    body: NoteCreate,
    session: SessionContext = Depends(get_session_context),
    services: Services = Depends(get_services),
) -> NoteContribution:
    """Publish a note. The author earns 5 points."""
    return await services.rewards.contribute_note(session, body)

"""Jobs router for paid gigs (/api/v1/jobs)."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from studyhub.dependencies import get_services, get_session_context
from studyhub.schemas import Job, JobCompletion, JobCreate
from studyhub.services import Services
from studyhub.session import SessionContext

router = APIRouter(prefix="/api/v1/jobs", tags=["Jobs"])


@router.get("", response_model=list[Job])
async def list_jobs(services: Services = Depends(get_services)) -> list[Job]:
    return await services.catalog.list_jobs()


@router.post("", response_model=Job, status_code=201)
async def post_job(
    body: JobCreate,
    session: SessionContext = Depends(get_session_context),
    services: Services = Depends(get_services),
) -> Job:
    return await services.rewards.post_job(session, body)


@router.post("/{job_id}/complete", response_model=JobCompletion)
async def complete_job(
    job_id: str,
    session: SessionContext = Depends(get_session_context),
    services: Services = Depends(get_services),
) -> JobCompletion:
    """Complete an open job and collect its price (50 when the job has none)."""
    return await services.rewards.complete_job(session, job_id)

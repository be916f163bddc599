"""Quiz router (/api/v1/quizzes)."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from studyhub.dependencies import get_services, get_session_context
from studyhub.schemas import PublicQuiz, QuizAttempt, QuizResult, QuizSubmission
from studyhub.services import Services
from studyhub.session import SessionContext

router = APIRouter(prefix="/api/v1/quizzes", tags=["Quizzes"])


@router.get("", response_model=list[PublicQuiz])
async def list_quizzes(services: Services = Depends(get_services)) -> list[PublicQuiz]:
    return [PublicQuiz.from_quiz(q) for q in await services.catalog.list_quizzes()]


@router.get("/attempts/me", response_model=list[QuizAttempt])
async def my_attempts(
    session: SessionContext = Depends(get_session_context),
    services: Services = Depends(get_services),
) -> list[QuizAttempt]:
    user = session.require_user("view_attempts")
    return await services.catalog.list_attempts(user.uid)


@router.get("/{quiz_id}", response_model=PublicQuiz)
async def get_quiz(quiz_id: str, services: Services = Depends(get_services)) -> PublicQuiz:
    """Quiz questions without their answers."""
    return PublicQuiz.from_quiz(await services.catalog.get_quiz(quiz_id))


@router.post("/{quiz_id}/attempts", response_model=QuizResult, status_code=201)
async def submit_quiz(
    quiz_id: str,
    body: QuizSubmission,
    session: SessionContext = Depends(get_session_context),
    services: Services = Depends(get_services),
) -> QuizResult:
    """Score a submission and credit the score as points."""
    return await services.rewards.submit_quiz(session, quiz_id, body)

"""Reward workflows: the user actions that move ledger counters."""

from __future__ import annotations

import structlog

from studyhub.catalog.service import ContentCatalog
from studyhub.errors import Conflict, StoreUnavailable
from studyhub.identity.provider import AuthUser, default_name
from studyhub.ledger.policy import job_payout, max_score, note_reward, score_quiz
from studyhub.ledger.service import ProfileLedger
from studyhub.schemas import (
    Job,
    JobCompletion,
    JobCreate,
    JobStatus,
    NoteContribution,
    NoteCreate,
    Profile,
    QuizResult,
    QuizSubmission,
)
from studyhub.session import SessionContext

logger = structlog.get_logger()


class RewardService:
    """Runs each workflow for the user bound to a ``SessionContext``.

    Every workflow refuses to run without a signed-in user, ensures the
    actor's profile exists before crediting it, and leaves the refreshed
    profile on the session.
    """

    def __init__(self, ledger: ProfileLedger, catalog: ContentCatalog) -> None:
        self.ledger = ledger
        self.catalog = catalog

    async def _actor_profile(self, user: AuthUser) -> Profile:
        return await self.ledger.ensure_profile(user.uid, user.name or default_name(user.email))

    async def contribute_note(self, session: SessionContext, payload: NoteCreate) -> NoteContribution:
        """Create a note and credit its author with the note reward."""
        user = session.require_user("contribute_note")
        author = await self._actor_profile(user)
        note = await self.catalog.create_note(author, payload)

        points = note_reward()
        profile = await self.ledger.credit_points(user.uid, points)
        session.profile = profile
        logger.info("note_rewarded", uid=user.uid, note_id=note.id, points=points)
        return NoteContribution(note=note, points_awarded=points, profile=profile)

    async def post_job(self, session: SessionContext, payload: JobCreate) -> Job:
        """Publish an open gig. Posting does not credit anyone."""
        user = session.require_user("post_job")
        await self._actor_profile(user)
        return await self.catalog.create_job(user.uid, payload)

    async def complete_job(self, session: SessionContext, job_id: str) -> JobCompletion:
        """
        Mark an open job completed by the session user and pay them its price.

        Raises:
            NotFound: If the job does not exist.
            Conflict: If the job is not open (already completed, possibly concurrently).
        """
        user = session.require_user("complete_job")
        job = await self.catalog.get_job(job_id)
        if job.status is not JobStatus.OPEN:
            msg = "Job already completed"
            raise Conflict(msg)

        try:
            job = await self.catalog.mark_job_completed(job_id, user.uid)
        except Conflict:
            msg = "Job already completed"
            raise Conflict(msg) from None

        payout = job_payout(job)
        try:
            await self._actor_profile(user)
            profile = await self.ledger.credit_earnings(user.uid, payout)
        except StoreUnavailable:
            # The job is already marked completed; the payout needs reconciling by hand.
            logger.error("job_payout_failed", uid=user.uid, job_id=job_id, payout=payout)
            raise
        session.profile = profile
        logger.info("job_completed", uid=user.uid, job_id=job_id, payout=payout)
        return JobCompletion(job=job, earnings_awarded=payout, profile=profile)

    async def submit_quiz(self, session: SessionContext, quiz_id: str, submission: QuizSubmission) -> QuizResult:
        """Score the answers, log an attempt, and credit the score as points."""
        user = session.require_user("submit_quiz")
        quiz = await self.catalog.get_quiz(quiz_id)
        score = score_quiz(quiz, submission.answers)
        attempt = await self.catalog.record_attempt(quiz_id, user.uid, score)

        await self._actor_profile(user)
        profile = await self.ledger.credit_points(user.uid, score)
        session.profile = profile
        logger.info("quiz_scored", uid=user.uid, quiz_id=quiz_id, score=score)
        return QuizResult(attempt=attempt, max_score=max_score(quiz), profile=profile)

"""Content catalog: notes, jobs, quizzes and quiz attempts."""

from __future__ import annotations

from datetime import datetime, timezone

import structlog

from studyhub.errors import NotFound, ValidationError
from studyhub.schemas import (
    Job,
    JobCreate,
    JobStatus,
    Note,
    NoteCreate,
    Profile,
    Quiz,
    QuizAttempt,
    dump_record,
)
from studyhub.store.base import JOBS, NOTES, QUIZ_ATTEMPTS, QUIZZES, DocumentStore, Record

logger = structlog.get_logger()


def _require_title(title: str) -> str:
    title = title.strip()
    if not title:
        msg = "Title is required"
        raise ValidationError(msg)
    return title


class ContentCatalog:
    """Thin read/append layer over the content collections."""

    def __init__(self, store: DocumentStore) -> None:
        self.store = store

    # --- Lists ---

    async def list_notes(self) -> list[Note]:
        return [Note.model_validate(r) for r in await self.store.list_all(NOTES)]

    async def list_notes_by(self, uid: str) -> list[Note]:
        return [Note.model_validate(r) for r in await self.store.query(NOTES, "author_uid", uid)]

    async def list_jobs(self) -> list[Job]:
        return [Job.model_validate(r) for r in await self.store.list_all(JOBS)]

    async def list_quizzes(self) -> list[Quiz]:
        return [Quiz.model_validate(r) for r in await self.store.list_all(QUIZZES)]

    async def list_attempts(self, uid: str) -> list[QuizAttempt]:
        return [QuizAttempt.model_validate(r) for r in await self.store.query(QUIZ_ATTEMPTS, "uid", uid)]

    # --- Lookups ---

    async def get_job(self, job_id: str) -> Job:
        record = await self.store.get_by_id(JOBS, job_id)
        if record is None:
            msg = "Job not found"
            raise NotFound(msg)
        return Job.model_validate(record)

    async def get_quiz(self, quiz_id: str) -> Quiz:
        record = await self.store.get_by_id(QUIZZES, quiz_id)
        if record is None:
            msg = "Quiz not found"
            raise NotFound(msg)
        return Quiz.model_validate(record)

    # --- Appends ---

    async def create_note(self, author: Profile, payload: NoteCreate) -> Note:
        """Append a note. ``author_name`` is a snapshot of the profile name."""
        record: Record = {
            "title": _require_title(payload.title),
            "preview": payload.preview,
            "content": payload.content,
            "author_uid": author.uid,
            "author_name": author.name,
            "created_at": datetime.now(timezone.utc).isoformat(),
        }
        note_id = await self.store.insert(NOTES, record)
        logger.info("note_created", note_id=note_id, author_uid=author.uid)
        return Note.model_validate({**record, "id": note_id})

    async def create_job(self, poster_uid: str, payload: JobCreate) -> Job:
        record: Record = {
            "title": _require_title(payload.title),
            "desc": payload.desc,
            "price": payload.price,
            "poster_uid": poster_uid,
            "status": JobStatus.OPEN.value,
            "completed_by": None,
            "created_at": datetime.now(timezone.utc).isoformat(),
            "completed_at": None,
        }
        job_id = await self.store.insert(JOBS, record)
        logger.info("job_created", job_id=job_id, poster_uid=poster_uid, price=payload.price)
        return Job.model_validate({**record, "id": job_id})

    async def mark_job_completed(self, job_id: str, uid: str) -> Job:
        """Flip an open job to completed.

        The write is conditional on ``status == "open"``; the store raises
        Conflict if another completion got there first.
        """
        record = await self.store.update_fields(
            JOBS,
            job_id,
            {
                "status": JobStatus.COMPLETED.value,
                "completed_by": uid,
                "completed_at": datetime.now(timezone.utc).isoformat(),
            },
            expected={"status": JobStatus.OPEN.value},
        )
        return Job.model_validate(record)

    async def record_attempt(self, quiz_id: str, uid: str, score: int) -> QuizAttempt:
        record: Record = {
            "quiz_id": quiz_id,
            "uid": uid,
            "score": score,
            "at": datetime.now(timezone.utc).isoformat(),
        }
        attempt_id = await self.store.insert(QUIZ_ATTEMPTS, record)
        return QuizAttempt.model_validate({**record, "id": attempt_id})

    async def add_quiz(self, quiz: Quiz) -> Quiz:
        """Store a quiz under its own id. Used by seeding."""
        await self.store.insert(QUIZZES, dump_record(quiz), doc_id=quiz.id)
        return quiz

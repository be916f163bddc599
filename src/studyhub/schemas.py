"""Record models and request/response schemas."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

DEFAULT_ROLE = "Student"


# ---------------------------------------------------------------------------
# Stored records
# ---------------------------------------------------------------------------


class Profile(BaseModel):
    """Per-user ledger row. ``uid`` is the identity provider's user id."""

    uid: str
    name: str
    role: str = DEFAULT_ROLE
    bio: str = ""
    points: int = 0
    earnings: float = 0

    @classmethod
    def from_record(cls, record: dict[str, Any]) -> Profile:
        return cls.model_validate({**record, "uid": record["id"]})


class Note(BaseModel):
    id: str
    title: str
    preview: str = ""
    content: str = ""
    author_uid: str
    author_name: str
    created_at: datetime


class JobStatus(str, Enum):
    OPEN = "open"
    COMPLETED = "completed"


class Job(BaseModel):
    """A paid gig. ``price`` may be missing on legacy records."""

    id: str
    title: str
    desc: str = ""
    price: float | None = None
    poster_uid: str
    status: JobStatus = JobStatus.OPEN
    completed_by: str | None = None
    created_at: datetime
    completed_at: datetime | None = None


class Question(BaseModel):
    id: str
    text: str
    options: list[str] = Field(default_factory=list)
    correct: str
    points: int = Field(1, ge=1)


class Quiz(BaseModel):
    id: str
    title: str
    desc: str = ""
    questions: list[Question] = Field(default_factory=list)


class QuizAttempt(BaseModel):
    id: str
    quiz_id: str
    uid: str
    score: int = Field(..., ge=0)
    at: datetime


# ---------------------------------------------------------------------------
# Requests
# ---------------------------------------------------------------------------


class SignUpRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1, max_length=128)
    name: str | None = Field(None, max_length=64)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        """Normalize email to lowercase."""
        return v.lower().strip()


class SignInRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1, max_length=128)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        """Normalize email to lowercase."""
        return v.lower().strip()


class ProfileUpdateRequest(BaseModel):
    name: str | None = Field(None, max_length=64)
    bio: str | None = Field(None, max_length=280)
    role: str | None = Field(None, max_length=32)


class NoteCreate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    title: str = Field(..., max_length=200)
    preview: str = Field("", max_length=500)
    content: str = ""


class JobCreate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    title: str = Field(..., max_length=200)
    desc: str = Field("", max_length=2000)
    price: float = Field(50, gt=0, allow_inf_nan=False)


class QuizSubmission(BaseModel):
    """Answers keyed by question id."""

    answers: dict[str, str] = Field(default_factory=dict)


# ---------------------------------------------------------------------------
# Responses
# ---------------------------------------------------------------------------


class AuthResponse(BaseModel):
    uid: str
    email: str
    access_token: str
    token_type: str = "bearer"
    expires_at: datetime
    profile: Profile


class PublicQuestion(BaseModel):
    id: str
    text: str
    options: list[str]
    points: int


class PublicQuiz(BaseModel):
    """Quiz as shown to a taker: correct answers stripped."""

    id: str
    title: str
    desc: str
    questions: list[PublicQuestion]

    @classmethod
    def from_quiz(cls, quiz: Quiz) -> PublicQuiz:
        return cls(
            id=quiz.id,
            title=quiz.title,
            desc=quiz.desc,
            questions=[
                PublicQuestion(id=q.id, text=q.text, options=q.options, points=q.points)
                for q in quiz.questions
            ],
        )


class NoteContribution(BaseModel):
    note: Note
    points_awarded: int
    profile: Profile | None


class JobCompletion(BaseModel):
    job: Job
    earnings_awarded: float
    profile: Profile | None


class QuizResult(BaseModel):
    attempt: QuizAttempt
    max_score: int
    profile: Profile | None


def dump_record(model: BaseModel) -> dict[str, Any]:
    """JSON-safe dict for storage; the id lives in the store key."""
    return model.model_dump(mode="json", exclude={"id"})

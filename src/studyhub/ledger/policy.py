"""Reward rules. Pure functions, no I/O."""

from __future__ import annotations

from collections.abc import Mapping

from studyhub.schemas import Job, Quiz

NOTE_REWARD_POINTS = 5
DEFAULT_JOB_PRICE = 50

# User-facing text for Unauthenticated, keyed by the action that triggered it.
SIGN_IN_MESSAGES: dict[str, str] = {
    "contribute_note": "Please sign in to contribute",
    "post_job": "Please sign in",
    "complete_job": "Please sign in",
    "submit_quiz": "Sign in first",
}


def note_reward() -> int:
    """Points credited to the author of a new note."""
    return NOTE_REWARD_POINTS


def job_payout(job: Job) -> float:
    """Earnings credited to whoever completes ``job``."""
    return job.price if job.price is not None else DEFAULT_JOB_PRICE


def score_quiz(quiz: Quiz, answers: Mapping[str, str]) -> int:
    """Sum of ``points`` for every question answered with its ``correct`` option."""
    return sum(q.points for q in quiz.questions if answers.get(q.id) == q.correct)


def max_score(quiz: Quiz) -> int:
    return sum(q.points for q in quiz.questions)


def sign_in_message(action: str) -> str:
    return SIGN_IN_MESSAGES.get(action, "Please sign in")

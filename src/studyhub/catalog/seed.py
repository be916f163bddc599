"""Starter quizzes. Quizzes have no user-facing creation flow, so they ship here."""

from __future__ import annotations

import logging

from studyhub.catalog.service import ContentCatalog
from studyhub.errors import Conflict
from studyhub.schemas import Quiz

logger = logging.getLogger(__name__)

QUIZ_SEED_DATA: list[dict] = [
    {
        "id": "python-basics",
        "title": "Python Basics",
        "desc": "Warm-up questions on core Python syntax.",
        "questions": [
            {
                "id": "q1",
                "text": "Which keyword defines a function?",
                "options": ["func", "def", "lambda", "fn"],
                "correct": "def",
                "points": 1,
            },
            {
                "id": "q2",
                "text": "What does len([1, 2, 3]) return?",
                "options": ["2", "3", "4", "An error"],
                "correct": "3",
                "points": 1,
            },
            {
                "id": "q3",
                "text": "Which type is immutable?",
                "options": ["list", "dict", "set", "tuple"],
                "correct": "tuple",
                "points": 2,
            },
        ],
    },
    {
        "id": "study-skills",
        "title": "Study Skills",
        "desc": "Techniques that make revision stick.",
        "questions": [
            {
                "id": "q1",
                "text": "Reviewing material at increasing intervals is called?",
                "options": ["Cramming", "Spaced repetition", "Skimming", "Highlighting"],
                "correct": "Spaced repetition",
                "points": 2,
            },
            {
                "id": "q2",
                "text": "Testing yourself without notes is known as?",
                "options": ["Active recall", "Passive review", "Rereading", "Summarizing"],
                "correct": "Active recall",
                "points": 1,
            },
        ],
    },
]


async def seed_quizzes(catalog: ContentCatalog) -> int:
    """Insert starter quizzes that are not stored yet. Returns number inserted."""
    seeded = 0
    for quiz_data in QUIZ_SEED_DATA:
        try:
            await catalog.add_quiz(Quiz.model_validate(quiz_data))
        except Conflict:
            continue
        seeded += 1

    logger.info("Seeded %d quizzes", seeded)
    return seeded

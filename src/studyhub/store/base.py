"""Document store abstraction.

Records are plain JSON-compatible dicts addressed by collection name and id.
Every returned record carries its id under the ``"id"`` key.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

PROFILES = "profiles"
NOTES = "notes"
JOBS = "jobs"
QUIZZES = "quizzes"
QUIZ_ATTEMPTS = "quiz_attempts"
ACCOUNTS = "accounts"

COLLECTIONS = frozenset({PROFILES, NOTES, JOBS, QUIZZES, QUIZ_ATTEMPTS, ACCOUNTS})

Record = dict[str, Any]


class DocumentStore(ABC):
    """Abstract base class for document store backends."""

    @abstractmethod
    async def insert(self, collection: str, record: Record, doc_id: str | None = None) -> str:
        """Create a document. Returns its id.

        A server id is assigned when ``doc_id`` is None.

        Raises:
            Conflict: If ``doc_id`` already exists in the collection.
        """
        ...

    @abstractmethod
    async def get_by_id(self, collection: str, doc_id: str) -> Record | None:
        """Fetch one document, or None if absent."""
        ...

    @abstractmethod
    async def list_all(self, collection: str) -> list[Record]:
        """Every document in the collection, oldest first."""
        ...

    @abstractmethod
    async def query(self, collection: str, field: str, value: Any) -> list[Record]:  # noqa: ANN401
        """Documents whose ``field`` equals ``value``, oldest first."""
        ...

    @abstractmethod
    async def update_fields(
        self,
        collection: str,
        doc_id: str,
        fields: Record,
        expected: Record | None = None,
    ) -> Record:
        """Merge ``fields`` into a document and return the result.

        When ``expected`` is given, every key in it must currently hold the
        given value or the update is refused.

        Raises:
            NotFound: If the document does not exist.
            Conflict: If an ``expected`` value does not match.
        """
        ...

    @abstractmethod
    async def increment(self, collection: str, doc_id: str, field: str, delta: int | float) -> int | float:
        """Atomically add ``delta`` to a numeric field. Returns the new value.

        Raises:
            NotFound: If the document does not exist.
        """
        ...

    @abstractmethod
    async def ping(self) -> bool:
        """Return True if the backend is reachable."""
        ...

    async def close(self) -> None:  # noqa: B027
        """Release backend resources."""


def check_expected(current: Record, expected: Record | None) -> str | None:
    """Return the first key whose value differs from ``expected``, if any."""
    if not expected:
        return None
    for key, value in expected.items():
        if current.get(key) != value:
            return key
    return None

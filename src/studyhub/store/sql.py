"""SQLAlchemy-backed document store.

All collections share the ``documents`` table. Driver and SQL failures are
caught here and re-raised as ``StoreUnavailable`` so callers never see a raw
SQLAlchemy exception.
"""

from __future__ import annotations

import uuid
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any

import structlog
from sqlalchemy import select, text
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from studyhub.db.models import Document
from studyhub.errors import Conflict, NotFound, StoreUnavailable, ValidationError
from studyhub.store.base import COLLECTIONS, DocumentStore, Record, check_expected

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

logger = structlog.get_logger()


def _as_record(row: Document) -> Record:
    body = dict(row.data)
    body["id"] = row.id
    return body


class SqlDocumentStore(DocumentStore):
    """Document store over an async SQLAlchemy session factory."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._factory = session_factory

    @asynccontextmanager
    async def _transaction(self) -> AsyncIterator[AsyncSession]:
        try:
            async with self._factory() as db, db.begin():
                yield db
        except IntegrityError as e:
            msg = "Document already exists"
            raise Conflict(msg) from e
        except (SQLAlchemyError, OSError) as e:
            logger.error("store_unavailable", error=str(e))
            raise StoreUnavailable from e

    @staticmethod
    def _check(collection: str) -> None:
        if collection not in COLLECTIONS:
            msg = f"Unknown collection '{collection}'"
            raise ValidationError(msg)

    async def _locked(self, db: AsyncSession, collection: str, doc_id: str) -> Document:
        """Load a row for update. SQLite relies on the BEGIN IMMEDIATE set up in ``init_db``."""
        result = await db.execute(
            select(Document)
            .where(Document.collection == collection, Document.id == doc_id)
            .with_for_update()
        )
        row = result.scalar_one_or_none()
        if row is None:
            msg = f"Document '{doc_id}' not found in {collection}"
            raise NotFound(msg)
        return row

    async def insert(self, collection: str, record: Record, doc_id: str | None = None) -> str:
        self._check(collection)
        doc_id = doc_id or uuid.uuid4().hex
        now = datetime.now(timezone.utc)
        body = {k: v for k, v in record.items() if k != "id"}
        async with self._transaction() as db:
            db.add(Document(collection=collection, id=doc_id, data=body, created_at=now, updated_at=now))
        return doc_id

    async def get_by_id(self, collection: str, doc_id: str) -> Record | None:
        self._check(collection)
        async with self._transaction() as db:
            row = await db.get(Document, (collection, doc_id))
            return _as_record(row) if row is not None else None

    async def list_all(self, collection: str) -> list[Record]:
        self._check(collection)
        async with self._transaction() as db:
            result = await db.execute(
                select(Document)
                .where(Document.collection == collection)
                .order_by(Document.created_at, Document.id)
            )
            return [_as_record(row) for row in result.scalars().all()]

    async def query(self, collection: str, field: str, value: Any) -> list[Record]:  # noqa: ANN401
        # JSON path operators differ per dialect; filter after loading.
        return [r for r in await self.list_all(collection) if r.get(field) == value]

    async def update_fields(
        self,
        collection: str,
        doc_id: str,
        fields: Record,
        expected: Record | None = None,
    ) -> Record:
        self._check(collection)
        async with self._transaction() as db:
            row = await self._locked(db, collection, doc_id)
            mismatch = check_expected(row.data, expected)
            if mismatch is not None:
                msg = f"Field '{mismatch}' changed on {collection}/{doc_id}"
                raise Conflict(msg)
            row.data = {**row.data, **{k: v for k, v in fields.items() if k != "id"}}
            row.updated_at = datetime.now(timezone.utc)
            return _as_record(row)

    async def increment(self, collection: str, doc_id: str, field: str, delta: int | float) -> int | float:
        self._check(collection)
        async with self._transaction() as db:
            row = await self._locked(db, collection, doc_id)
            value = row.data.get(field, 0) + delta
            row.data = {**row.data, field: value}
            row.updated_at = datetime.now(timezone.utc)
            return value

    async def ping(self) -> bool:
        try:
            async with self._transaction() as db:
                await db.execute(text("SELECT 1"))
        except StoreUnavailable:
            return False
        return True

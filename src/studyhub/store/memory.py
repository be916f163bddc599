"""In-process document store.

Used by tests and local demos. Each call yields to the event loop once (or
sleeps for ``latency`` seconds) so that interleavings between concurrent
sessions behave like they would against a remote store.
"""

from __future__ import annotations

import asyncio
import copy
import uuid
from collections import defaultdict
from typing import Any

from studyhub.errors import Conflict, NotFound, ValidationError
from studyhub.store.base import COLLECTIONS, DocumentStore, Record, check_expected


class MemoryDocumentStore(DocumentStore):
    """Dict-backed store. Records are deep-copied in and out.

    One lock is kept per document ever updated, for the life of the store.
    """

    def __init__(self, latency: float = 0.0) -> None:
        self.latency = latency
        self._data: dict[str, dict[str, Record]] = defaultdict(dict)
        self._locks: dict[tuple[str, str], asyncio.Lock] = defaultdict(asyncio.Lock)

    async def _io(self) -> None:
        await asyncio.sleep(self.latency)

    def _collection(self, collection: str) -> dict[str, Record]:
        if collection not in COLLECTIONS:
            msg = f"Unknown collection '{collection}'"
            raise ValidationError(msg)
        return self._data[collection]

    async def insert(self, collection: str, record: Record, doc_id: str | None = None) -> str:
        docs = self._collection(collection)
        await self._io()
        doc_id = doc_id or uuid.uuid4().hex
        if doc_id in docs:
            msg = f"Document '{doc_id}' already exists in {collection}"
            raise Conflict(msg)
        body = copy.deepcopy(record)
        body["id"] = doc_id
        docs[doc_id] = body
        return doc_id

    async def get_by_id(self, collection: str, doc_id: str) -> Record | None:
        docs = self._collection(collection)
        await self._io()
        found = docs.get(doc_id)
        return copy.deepcopy(found) if found is not None else None

    async def list_all(self, collection: str) -> list[Record]:
        docs = self._collection(collection)
        await self._io()
        return [copy.deepcopy(d) for d in docs.values()]

    async def query(self, collection: str, field: str, value: Any) -> list[Record]:  # noqa: ANN401
        docs = self._collection(collection)
        await self._io()
        return [copy.deepcopy(d) for d in docs.values() if d.get(field) == value]

    async def update_fields(
        self,
        collection: str,
        doc_id: str,
        fields: Record,
        expected: Record | None = None,
    ) -> Record:
        docs = self._collection(collection)
        async with self._locks[(collection, doc_id)]:
            await self._io()
            current = docs.get(doc_id)
            if current is None:
                msg = f"Document '{doc_id}' not found in {collection}"
                raise NotFound(msg)
            mismatch = check_expected(current, expected)
            if mismatch is not None:
                msg = f"Field '{mismatch}' changed on {collection}/{doc_id}"
                raise Conflict(msg)
            current.update(copy.deepcopy({k: v for k, v in fields.items() if k != "id"}))
            return copy.deepcopy(current)

    async def increment(self, collection: str, doc_id: str, field: str, delta: int | float) -> int | float:
        docs = self._collection(collection)
        async with self._locks[(collection, doc_id)]:
            await self._io()
            current = docs.get(doc_id)
            if current is None:
                msg = f"Document '{doc_id}' not found in {collection}"
                raise NotFound(msg)
            current[field] = current.get(field, 0) + delta
            return current[field]

    async def ping(self) -> bool:
        return True

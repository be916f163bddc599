"""SQL document store against a file-backed SQLite database."""

from __future__ import annotations

import asyncio
from collections.abc import AsyncGenerator
from pathlib import Path

import pytest
import pytest_asyncio

from studyhub.catalog.service import ContentCatalog
from studyhub.database import close_db, create_schema, get_session_factory, init_db
from studyhub.errors import Conflict, NotFound, StoreUnavailable, ValidationError
from studyhub.ledger.service import LedgerMode, ProfileLedger
from studyhub.schemas import Job, JobCreate
from studyhub.store.base import JOBS, NOTES, PROFILES
from studyhub.store.sql import SqlDocumentStore


@pytest_asyncio.fixture
async def sql_store(tmp_path: Path) -> AsyncGenerator[SqlDocumentStore, None]:
    await init_db(f"sqlite+aiosqlite:///{tmp_path / 'studyhub.db'}")
    await create_schema()
    yield SqlDocumentStore(get_session_factory())
    await close_db()


class TestDocuments:
    async def test_insert_and_get(self, sql_store: SqlDocumentStore):
        doc_id = await sql_store.insert(NOTES, {"title": "Calculus", "tags": ["math"]})
        assert await sql_store.get_by_id(NOTES, doc_id) == {"id": doc_id, "title": "Calculus", "tags": ["math"]}
        assert await sql_store.get_by_id(NOTES, "missing") is None

    async def test_collections_are_separate(self, sql_store: SqlDocumentStore):
        await sql_store.insert(NOTES, {"title": "n"}, doc_id="same")
        await sql_store.insert(JOBS, {"title": "j"}, doc_id="same")
        assert (await sql_store.get_by_id(NOTES, "same"))["title"] == "n"
        assert (await sql_store.get_by_id(JOBS, "same"))["title"] == "j"

    async def test_duplicate_id_conflicts(self, sql_store: SqlDocumentStore):
        await sql_store.insert(PROFILES, {"name": "A"}, doc_id="u1")
        with pytest.raises(Conflict):
            await sql_store.insert(PROFILES, {"name": "B"}, doc_id="u1")
        assert (await sql_store.get_by_id(PROFILES, "u1"))["name"] == "A"

    async def test_list_and_query(self, sql_store: SqlDocumentStore):
        await sql_store.insert(NOTES, {"author_uid": "a"})
        await sql_store.insert(NOTES, {"author_uid": "b"})
        await sql_store.insert(NOTES, {"author_uid": "a"})
        assert len(await sql_store.list_all(NOTES)) == 3
        assert {r["author_uid"] for r in await sql_store.query(NOTES, "author_uid", "a")} == {"a"}
        assert len(await sql_store.query(NOTES, "author_uid", "a")) == 2

    async def test_unknown_collection(self, sql_store: SqlDocumentStore):
        with pytest.raises(ValidationError):
            await sql_store.get_by_id("gadgets", "x")


class TestUpdates:
    async def test_update_fields(self, sql_store: SqlDocumentStore):
        await sql_store.insert(JOBS, {"title": "Gig", "status": "open"}, doc_id="j1")
        record = await sql_store.update_fields(JOBS, "j1", {"status": "completed"}, expected={"status": "open"})
        assert record["status"] == "completed"
        assert (await sql_store.get_by_id(JOBS, "j1"))["status"] == "completed"

    async def test_expected_mismatch(self, sql_store: SqlDocumentStore):
        await sql_store.insert(JOBS, {"status": "completed"}, doc_id="j1")
        with pytest.raises(Conflict):
            await sql_store.update_fields(JOBS, "j1", {"completed_by": "x"}, expected={"status": "open"})
        assert "completed_by" not in await sql_store.get_by_id(JOBS, "j1")

    async def test_missing_document(self, sql_store: SqlDocumentStore):
        with pytest.raises(NotFound):
            await sql_store.update_fields(JOBS, "ghost", {"status": "x"})
        with pytest.raises(NotFound):
            await sql_store.increment(PROFILES, "ghost", "points", 1)

    async def test_increment(self, sql_store: SqlDocumentStore):
        await sql_store.insert(PROFILES, {"points": 1}, doc_id="u1")
        assert await sql_store.increment(PROFILES, "u1", "points", 5) == 6
        assert await sql_store.increment(PROFILES, "u1", "earnings", 12.5) == 12.5


async def test_ledger_on_sql(sql_store: SqlDocumentStore):
    ledger = ProfileLedger(sql_store, mode=LedgerMode.ATOMIC)
    await ledger.ensure_profile("u1", "Alice")
    await ledger.ensure_profile("u1", "Other")
    await ledger.credit_points("u1", 5)
    profile = await ledger.credit_earnings("u1", 75)
    assert profile.name == "Alice"
    assert profile.points == 5
    assert profile.earnings == 75


async def test_ping(sql_store: SqlDocumentStore):
    assert await sql_store.ping() is True


async def test_unreachable_database_raises_store_unavailable(tmp_path: Path):
    await init_db(f"sqlite+aiosqlite:///{tmp_path / 'missing-dir' / 'studyhub.db'}")
    try:
        store = SqlDocumentStore(get_session_factory())
        assert await store.ping() is False
        with pytest.raises(StoreUnavailable):
            await store.get_by_id(NOTES, "x")
    finally:
        await close_db()


class TestConcurrency:
    """Overlapping transactions on the same row must not lose writes."""

    async def test_concurrent_increments_all_land(self, sql_store: SqlDocumentStore):
        await sql_store.insert(PROFILES, {"points": 0}, doc_id="u1")
        await asyncio.gather(*(sql_store.increment(PROFILES, "u1", "points", 1) for _ in range(20)))
        assert (await sql_store.get_by_id(PROFILES, "u1"))["points"] == 20

    async def test_atomic_ledger_keeps_every_credit(self, sql_store: SqlDocumentStore):
        ledger = ProfileLedger(sql_store, mode=LedgerMode.ATOMIC)
        await ledger.ensure_profile("u1", "Alice")
        await asyncio.gather(*(ledger.credit_points("u1", 1) for _ in range(20)))
        assert (await ledger.get_profile("u1")).points == 20

    async def test_conditional_update_wins_once(self, sql_store: SqlDocumentStore):
        await sql_store.insert(JOBS, {"status": "open"}, doc_id="j1")
        results = await asyncio.gather(
            *(
                sql_store.update_fields(
                    JOBS, "j1", {"status": "completed", "completed_by": f"u{i}"}, expected={"status": "open"}
                )
                for i in range(5)
            ),
            return_exceptions=True,
        )
        winners = [r for r in results if not isinstance(r, BaseException)]
        assert len(winners) == 1
        assert all(isinstance(r, Conflict) for r in results if isinstance(r, BaseException))
        assert (await sql_store.get_by_id(JOBS, "j1"))["completed_by"] == winners[0]["completed_by"]

    async def test_job_completed_once(self, sql_store: SqlDocumentStore):
        catalog = ContentCatalog(sql_store)
        job = await catalog.create_job("poster", JobCreate(title="Essay review", price=75))
        results = await asyncio.gather(
            *(catalog.mark_job_completed(job.id, f"u{i}") for i in range(5)),
            return_exceptions=True,
        )
        assert sum(isinstance(r, Job) for r in results) == 1
        assert sum(isinstance(r, Conflict) for r in results) == 4

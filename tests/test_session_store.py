"""Session store behaviour for the in-memory and SQLAlchemy backends."""

from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager

import pytest

from verdict.errors import NotFoundError
from verdict.models import SessionRecord
from verdict.services import InMemorySessionStore, NewSession, SqlAlchemySessionStore


def _new_session(**overrides) -> NewSession:
    fields = dict(
        partner1_name="Alex",
        partner2_name="Sam",
        partner1_audio="QUJD",
        partner2_audio="REVG",
        mode="evaluator",
        is_live_argument=False,
        transcription_data={"partner1": {"text": "hi"}, "partner2": None},
    )
    fields.update(overrides)
    return NewSession(**fields)


def test_create_then_get_returns_pending_session() -> None:
    async def scenario():
        store = InMemorySessionStore()
        created = await store.create(_new_session())
        fetched = await store.get(created.id)
        return created, fetched

    created, fetched = asyncio.run(scenario())

    assert created.id == 1
    assert fetched is not None
    assert fetched.ai_response is None
    assert fetched.active is True
    assert fetched.transcription_data == {"partner1": {"text": "hi"}, "partner2": None}


def test_ids_increase_monotonically() -> None:
    async def scenario():
        store = InMemorySessionStore()
        return await asyncio.gather(*(store.create(_new_session()) for _ in range(5)))

    sessions = asyncio.run(scenario())

    assert sorted(session.id for session in sessions) == [1, 2, 3, 4, 5]


def test_update_response_is_visible_on_get() -> None:
    async def scenario():
        store = InMemorySessionStore()
        created = await store.create(_new_session())
        await store.update_response(created.id, '{"verdict": "ok"}')
        return await store.get(created.id)

    fetched = asyncio.run(scenario())

    assert fetched.ai_response == '{"verdict": "ok"}'


def test_update_response_unknown_id_raises_not_found() -> None:
    store = InMemorySessionStore()

    with pytest.raises(NotFoundError):
        asyncio.run(store.update_response(42, "nope"))


def test_get_unknown_id_returns_none() -> None:
    store = InMemorySessionStore()

    assert asyncio.run(store.get(7)) is None


def test_returned_sessions_are_copies() -> None:
    async def scenario():
        store = InMemorySessionStore()
        created = await store.create(_new_session())
        created.ai_response = "tampered"
        return await store.get(created.id)

    assert asyncio.run(scenario()).ai_response is None


def test_nested_transcripts_are_not_shared_with_callers() -> None:
    async def scenario():
        store = InMemorySessionStore()
        created = await store.create(_new_session())
        created.transcription_data["partner1"]["text"] = "tampered"
        fetched = await store.get(created.id)
        fetched.transcription_data["partner2"] = {"text": "also tampered"}
        return await store.get(created.id)

    stored = asyncio.run(scenario())

    assert stored.transcription_data == {"partner1": {"text": "hi"}, "partner2": None}


def test_overwriting_response_logs_warning(caplog: pytest.LogCaptureFixture) -> None:
    async def scenario():
        store = InMemorySessionStore()
        created = await store.create(_new_session())
        await store.update_response(created.id, "first")
        return await store.update_response(created.id, "second")

    with caplog.at_level(logging.WARNING, logger="verdict.services.session_store"):
        updated = asyncio.run(scenario())

    assert updated.ai_response == "second"
    assert "Overwriting ai_response for session=1" in caplog.text


class FakeResult:
    def __init__(self, record) -> None:
        self._record = record

    def scalar_one_or_none(self):
        return self._record


class FakeDb:
    """Just enough of AsyncSession for the session store's queries."""

    def __init__(self) -> None:
        self.records: dict[int, SessionRecord] = {}
        self.commits = 0

    def add(self, record: SessionRecord) -> None:
        if record.id is None:
            record.id = len(self.records) + 1
        self.records[record.id] = record

    async def commit(self) -> None:
        self.commits += 1

    async def refresh(self, record: SessionRecord) -> None:
        return None

    async def execute(self, statement):
        session_id = statement.whereclause.right.value
        return FakeResult(self.records.get(session_id))


def _scope_for(db: FakeDb):
    @asynccontextmanager
    async def scope():
        yield db

    return scope


def test_sql_store_round_trip_through_session_scope() -> None:
    db = FakeDb()
    store = SqlAlchemySessionStore(scope=_scope_for(db))

    async def scenario():
        created = await store.create(_new_session(mode="counselor"))
        pending = await store.get(created.id)
        updated = await store.update_response(created.id, '{"verdict": "talk it out"}')
        return created, pending, updated

    created, pending, updated = asyncio.run(scenario())

    assert created.id == 1
    assert pending.ai_response is None
    assert pending.active is True
    assert pending.mode == "counselor"
    assert updated.ai_response == '{"verdict": "talk it out"}'
    assert db.commits == 2


def test_sql_store_unknown_id() -> None:
    store = SqlAlchemySessionStore(scope=_scope_for(FakeDb()))

    assert asyncio.run(store.get(5)) is None
    with pytest.raises(NotFoundError):
        asyncio.run(store.update_response(5, "nope"))


def test_sql_store_overwrite_logs_warning(caplog: pytest.LogCaptureFixture) -> None:
    db = FakeDb()
    store = SqlAlchemySessionStore(scope=_scope_for(db))

    async def scenario():
        created = await store.create(_new_session())
        await store.update_response(created.id, "first")
        return await store.update_response(created.id, "second")

    with caplog.at_level(logging.WARNING, logger="verdict.services.session_store"):
        updated = asyncio.run(scenario())

    assert updated.ai_response == "second"
    assert "Overwriting ai_response for session=1" in caplog.text

"""Shared pytest fixtures."""

from collections.abc import Callable, Iterator
from copy import deepcopy
from datetime import UTC, datetime
from types import SimpleNamespace
from typing import Any
from uuid import UUID, uuid4

import pytest
from fastapi.testclient import TestClient

from coffeenotes.app import App
from coffeenotes.client.store import StoreError
from coffeenotes.config import Config
from coffeenotes.core import core as core_module
from coffeenotes.core.modules.like.models import LikeStatus
from coffeenotes.core.modules.note.models import Note, NoteCategory
from coffeenotes.web.server import create_fastapi_app

SESSION_A = "user_1718000000000_aaaaaaaaaaaaa"
SESSION_B = "user_1718000000001_bbbbbbbbbbbbb"


# In-memory replacement for the parts of the async MongoDB driver the services use


def _matches(doc: dict[str, Any], query: dict[str, Any]) -> bool:
    for key, expected in query.items():
        if isinstance(expected, dict) and "$in" in expected:
            if doc.get(key) not in expected["$in"]:
                return False
        elif doc.get(key) != expected:
            return False
    return True


class FakeCursor:
    def __init__(self, docs: list[dict[str, Any]]) -> None:
        self._docs = docs

    def sort(self, field: str, direction: int) -> "FakeCursor":
        self._docs = sorted(self._docs, key=lambda doc: doc[field], reverse=direction < 0)
        return self

    def __aiter__(self):
        return self._iterate()

    async def _iterate(self):
        for doc in self._docs:
            yield doc

    async def to_list(self) -> list[dict[str, Any]]:
        return list(self._docs)


class FakeCollection:
    def __init__(self) -> None:
        self.docs: list[dict[str, Any]] = []

    async def create_index(self, keys: Any, **kwargs: Any) -> str:
        return "index"

    async def insert_one(self, doc: dict[str, Any]) -> SimpleNamespace:
        self.docs.append(deepcopy(doc))
        return SimpleNamespace(inserted_id=doc["_id"])

    async def find_one(self, query: dict[str, Any]) -> dict[str, Any] | None:
        for doc in self.docs:
            if _matches(doc, query):
                return deepcopy(doc)
        return None

    def find(self, query: dict[str, Any]) -> FakeCursor:
        return FakeCursor([deepcopy(doc) for doc in self.docs if _matches(doc, query)])

    async def update_one(self, query: dict[str, Any], update: dict[str, Any]) -> SimpleNamespace:
        for doc in self.docs:
            if _matches(doc, query):
                doc.update(update["$set"])
                return SimpleNamespace(matched_count=1)
        return SimpleNamespace(matched_count=0)

    async def find_one_and_update(self, query: dict[str, Any], update: dict[str, Any], **kwargs: Any) -> dict[str, Any] | None:
        for doc in self.docs:
            if _matches(doc, query):
                doc.update(update["$set"])
                return deepcopy(doc)
        return None

    async def delete_one(self, query: dict[str, Any]) -> SimpleNamespace:
        for index, doc in enumerate(self.docs):
            if _matches(doc, query):
                del self.docs[index]
                return SimpleNamespace(deleted_count=1)
        return SimpleNamespace(deleted_count=0)

    async def delete_many(self, query: dict[str, Any]) -> SimpleNamespace:
        kept = [doc for doc in self.docs if not _matches(doc, query)]
        deleted = len(self.docs) - len(kept)
        self.docs = kept
        return SimpleNamespace(deleted_count=deleted)


class FakeDatabase:
    def __init__(self) -> None:
        self.name = ""
        self.collections: dict[str, FakeCollection] = {}

    def get_collection(self, name: str) -> FakeCollection:
        return self.collections.setdefault(name, FakeCollection())


class FakeMongoClient:
    def __init__(self, url: str, **kwargs: Any) -> None:
        self.options = kwargs
        self.database = FakeDatabase()
        self.closed = False

    def get_database(self, name: str) -> FakeDatabase:
        self.database.name = name
        return self.database

    async def aclose(self) -> None:
        self.closed = True


@pytest.fixture
def config():
    return Config(database_url="mongodb://localhost:27017/coffeenotes_test", debug=True)


@pytest.fixture
def fake_mongo(monkeypatch):
    """Replace the MongoDB client so services run against in-memory collections."""
    monkeypatch.setattr(core_module, "AsyncMongoClient", FakeMongoClient)


@pytest.fixture
def app_instance(fake_mongo, config):
    return App(config)


@pytest.fixture
def fastapi_app(app_instance, config):
    return create_fastapi_app(app_instance, config)


@pytest.fixture
def client(fastapi_app) -> Iterator[TestClient]:
    with TestClient(fastapi_app) as test_client:
        yield test_client


# Notes and an in-memory note store for the client-side interaction core


@pytest.fixture
def make_note() -> Callable[..., Note]:
    def _make_note(
        content: str = '{"text":"Ask for feedback early"}',
        category: NoteCategory = NoteCategory.ACTIONABLE_ADVICE,
        session_id: str = SESSION_A,
        **fields: Any,
    ) -> Note:
        return Note(category=category, content=content, session_id=session_id, **fields)

    return _make_note


class FakeNoteStore:
    """NoteStore kept in memory, with the store's like semantics and injectable failures."""

    def __init__(self) -> None:
        self.notes: dict[UUID, Note] = {}
        self.likes: set[tuple[UUID, str]] = set()
        self.calls: list[tuple[Any, ...]] = []
        self.fail_with: BaseException | None = None
        self.override_status: LikeStatus | None = None

    def _record(self, *call: Any) -> None:
        self.calls.append(call)
        if self.fail_with is not None:
            raise self.fail_with

    def add(self, note: Note) -> Note:
        self.notes[note.id] = note
        return note

    async def list_notes(self) -> list[Note]:
        self._record("list_notes")
        return sorted(self.notes.values(), key=lambda note: note.created_at, reverse=True)

    async def create_note(self, category: NoteCategory, content: str, session_id: str, position: tuple[int, int]) -> Note:
        self._record("create_note", category, content, session_id, position)
        note = Note(
            id=uuid4(),
            category=category,
            content=content,
            session_id=session_id,
            position_x=position[0],
            position_y=position[1],
            created_at=datetime.now(UTC),
        )
        return self.add(note)

    async def update_content(self, note_id: UUID, content: str) -> Note:
        self._record("update_content", note_id, content)
        self.notes[note_id] = self.notes[note_id].model_copy(update={"content": content})
        return self.notes[note_id]

    async def update_position(self, note_id: UUID, x: float, y: float) -> bool:
        self._record("update_position", note_id, x, y)
        self.notes[note_id] = self.notes[note_id].model_copy(update={"position_x": x, "position_y": y})
        return True

    async def delete_note(self, note_id: UUID) -> bool:
        self._record("delete_note", note_id)
        if note_id not in self.notes:
            raise StoreError("Note not found", 404)
        del self.notes[note_id]
        return True

    async def toggle_like(self, note_id: UUID, session_id: str) -> LikeStatus:
        self._record("toggle_like", note_id, session_id)
        if self.override_status is not None:
            return self.override_status
        note = self.notes[note_id]
        if (note_id, session_id) in self.likes:
            self.likes.discard((note_id, session_id))
            count, liked = max(0, note.like_count - 1), False
        else:
            self.likes.add((note_id, session_id))
            count, liked = note.like_count + 1, True
        self.notes[note_id] = note.model_copy(update={"like_count": count})
        return LikeStatus(like_count=count, liked=liked)

    async def check_likes(self, note_ids: list[UUID], session_id: str) -> dict[UUID, bool]:
        self._record("check_likes", note_ids, session_id)
        return {note_id: (note_id, session_id) in self.likes for note_id in note_ids}


@pytest.fixture
def store() -> FakeNoteStore:
    return FakeNoteStore()

"""The board as one visitor sees it.

Loads every note once, derives the visible subset from the active filters and
hands out per-note interaction state. Other visitors' changes only show up
after the next ``load``.
"""

import math
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from uuid import UUID

import httpx
import structlog
from pydantic import BaseModel

from coffeenotes.client.canvas import Canvas, NoteDrag, Point
from coffeenotes.client.likes import LikeState, LikeToggle
from coffeenotes.client.session import JsonFileStorage, SessionIdentityProvider
from coffeenotes.client.store import HttpNoteStore, NoteStore
from coffeenotes.config import ClientConfig
from coffeenotes.core.modules.note.content import NoteBody, decode, encode
from coffeenotes.core.modules.note.models import Note, NoteCategory, random_position, resolve_source
from coffeenotes.core.modules.note.search import NoteFilter, apply_filter, known_sources
from coffeenotes.errors import NotFoundError

logger = structlog.get_logger(__name__)


class NoteControls(BaseModel):
    """Which controls to show on a note.

    Edit and delete are offered to the note's author only. The store does not
    enforce this; any caller can edit or delete any note directly.
    """

    can_edit: bool
    can_delete: bool
    can_like: bool


class Board:
    def __init__(self, store: NoteStore, session_id: str, canvas: Canvas | None = None) -> None:
        self.store = store
        self.session_id = session_id
        self.canvas = canvas or Canvas()
        self.note_filter = NoteFilter()
        self.notes: list[Note] = []
        self._likes: dict[UUID, LikeToggle] = {}
        self._drags: dict[UUID, NoteDrag] = {}

    async def load(self) -> list[Note]:
        """Fetch the full snapshot and the session's like state for every note."""
        self.notes = await self.store.list_notes()
        self._likes = {note.id: self._new_like(note) for note in self.notes}
        self._drags = {}
        if self.session_id and self.notes:
            liked = await self.store.check_likes([note.id for note in self.notes], self.session_id)
            for note_id, is_liked in liked.items():
                if note_id in self._likes:
                    self._likes[note_id].hydrate(is_liked)
        logger.debug("board_loaded", notes=len(self.notes))
        return self.notes

    def visible_notes(self) -> list[Note]:
        return apply_filter(self.notes, self.note_filter)

    def sources(self) -> list[str]:
        return known_sources(self.notes)

    def get_note(self, note_id: UUID) -> Note:
        for note in self.notes:
            if note.id == note_id:
                return note
        raise NotFoundError(f"Note not found: {note_id}")

    def controls_for(self, note: Note) -> NoteControls:
        is_owner = bool(self.session_id) and note.session_id == self.session_id
        return NoteControls(can_edit=is_owner, can_delete=is_owner, can_like=bool(self.session_id))

    async def add_note(
        self, category: NoteCategory, body: NoteBody, source_choice: str | None = None, other_source: str = ""
    ) -> Note:
        """Create a note at a random position and put it first on the board.

        When source_choice is given it is resolved against the category's source
        choices and replaces the body's source.
        """
        if source_choice is not None:
            body = body.model_copy(update={"source": resolve_source(category, source_choice, other_source)})
        note = await self.store.create_note(category, encode(category, body), self.session_id, random_position())
        self.notes.insert(0, note)
        self._likes[note.id] = self._new_like(note)
        return note

    async def edit_note(self, note_id: UUID, body: NoteBody) -> Note:
        """Replace a note's body. The attribution source of the existing body is kept."""
        note = self.get_note(note_id)
        current = decode(note.content)
        body = body.model_copy(update={"source": current.source})
        content = encode(note.category, body)
        updated = await self.store.update_content(note_id, content)
        self._replace(updated)
        return updated

    async def delete_note(self, note_id: UUID) -> None:
        await self.store.delete_note(note_id)
        self.notes = [note for note in self.notes if note.id != note_id]
        self._likes.pop(note_id, None)
        self._drags.pop(note_id, None)

    def like_for(self, note_id: UUID) -> LikeToggle:
        if note_id not in self._likes:
            self._likes[note_id] = self._new_like(self.get_note(note_id))
        return self._likes[note_id]

    def drag_for(self, note_id: UUID) -> NoteDrag:
        if note_id not in self._drags:
            note = self.get_note(note_id)
            self._drags[note_id] = NoteDrag(
                note_id,
                Point(note.position_x, note.position_y),
                self.store,
                self.canvas,
                on_move=lambda position: self._move(note_id, position),
            )
        return self._drags[note_id]

    def _new_like(self, note: Note) -> LikeToggle:
        return LikeToggle(note.id, self.store, self.session_id, LikeState(count=note.like_count))

    def _move(self, note_id: UUID, position: Point) -> None:
        update = {"position_x": math.floor(position.x), "position_y": math.floor(position.y)}
        self.notes = [note.model_copy(update=update) if note.id == note_id else note for note in self.notes]

    def _replace(self, updated: Note) -> None:
        self.notes = [updated if note.id == updated.id else note for note in self.notes]


@asynccontextmanager
async def open_board(config: ClientConfig, transport: httpx.AsyncBaseTransport | None = None) -> AsyncGenerator[Board]:
    """Connect to the note store and yield a loaded board for this installation's session."""
    session_id = SessionIdentityProvider(JsonFileStorage(config.session_file)).get_or_create_session_id()
    async with httpx.AsyncClient(base_url=config.api_url, transport=transport) as http:
        board = Board(HttpNoteStore(http), session_id)
        await board.load()
        yield board

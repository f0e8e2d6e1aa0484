from typing import Any
from uuid import UUID

import structlog
from pymongo import ReturnDocument
from pymongo.asynchronous.database import AsyncDatabase

from coffeenotes.core.service import Service
from coffeenotes.core.modules.note.models import Note, NoteCategory, floor_coordinate, random_position
from coffeenotes.core.modules.note.search import NoteFilter, apply_filter
from coffeenotes.errors import NotFoundError, ValidationError
from coffeenotes.utils import now

logger = structlog.get_logger(__name__)


class NoteService(Service):
    """Manages sticky notes: content, position and like counter."""

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        super().__init__(database)
        self._collection = database.get_collection("notes")

    async def on_start(self) -> None:
        """Create index for newest-first listing."""
        await self._collection.create_index([("created_at", -1)])

    async def list_notes(self, note_filter: NoteFilter | None = None) -> list[Note]:
        """Get all notes, newest first, optionally narrowed by a filter."""
        notes = await Note.list_cursor(self._collection.find({}).sort("created_at", -1))
        if note_filter is not None:
            notes = apply_filter(notes, note_filter)
        logger.debug("list_notes", note_filter=note_filter, returned=len(notes))
        return notes

    async def get_note(self, note_id: UUID) -> Note:
        """Get note by ID."""
        doc = await self._collection.find_one({"_id": note_id})
        if not doc:
            raise NotFoundError(f"Note not found: {note_id}")
        return Note.model_validate(doc)

    async def create_note(
        self,
        category: NoteCategory,
        content: str,
        session_id: str,
        position: tuple[float, float] | None = None,
    ) -> Note:
        """Create a note owned by session_id. Position is randomized when not given."""
        if not session_id:
            raise ValidationError("Session ID is required")
        if position is None:
            x, y = random_position()
        else:
            x, y = floor_coordinate(position[0]), floor_coordinate(position[1])

        note = Note(
            category=category,
            content=content,
            position_x=x,
            position_y=y,
            created_at=now(),
            session_id=session_id,
        )
        res = await self._collection.insert_one(note.to_mongo())
        logger.info("note_created", note_id=res.inserted_id, category=category)
        return await self.get_note(res.inserted_id)

    async def update_content(self, note_id: UUID, content: str) -> Note:
        """Replace the encoded body of a note. Ownership is not checked."""
        doc = await self._collection.find_one_and_update(
            {"_id": note_id}, {"$set": {"content": content}}, return_document=ReturnDocument.AFTER
        )
        if not doc:
            raise NotFoundError(f"Note not found: {note_id}")
        logger.debug("update_content", note_id=note_id)
        return Note.model_validate(doc)

    async def update_position(self, note_id: UUID, x: float, y: float) -> None:
        """Store a new position, floored to integers."""
        result = await self._collection.update_one(
            {"_id": note_id}, {"$set": {"position_x": floor_coordinate(x), "position_y": floor_coordinate(y)}}
        )
        if result.matched_count == 0:
            raise NotFoundError(f"Note not found: {note_id}")

    async def set_like_count(self, note_id: UUID, like_count: int) -> int:
        """Overwrite the stored like counter, floored at zero. Returns the stored value."""
        like_count = max(0, like_count)
        result = await self._collection.update_one({"_id": note_id}, {"$set": {"like_count": like_count}})
        if result.matched_count == 0:
            raise NotFoundError(f"Note not found: {note_id}")
        return like_count

    async def delete_note(self, note_id: UUID) -> None:
        """Delete a note and the likes pointing at it. Ownership is not checked."""
        result = await self._collection.delete_one({"_id": note_id})
        if result.deleted_count == 0:
            raise NotFoundError(f"Note not found: {note_id}")
        removed_likes = await self.core.services.like.delete_likes_by_note(note_id)
        logger.info("note_deleted", note_id=note_id, removed_likes=removed_likes)

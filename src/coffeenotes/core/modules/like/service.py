from typing import Any
from uuid import UUID

import structlog
from pymongo.asynchronous.database import AsyncDatabase

from coffeenotes.core.service import Service
from coffeenotes.core.modules.like.models import Like, LikeStatus
from coffeenotes.errors import ValidationError

logger = structlog.get_logger(__name__)


class LikeService(Service):
    """Tracks which session likes which note and keeps the note counters in step."""

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        super().__init__(database)
        self._collection = database.get_collection("note_likes")

    async def on_start(self) -> None:
        """Create indexes on startup."""
        await self._collection.create_index([("note_id", 1), ("session_id", 1)], unique=True)
        await self._collection.create_index([("session_id", 1)])

    async def toggle_like(self, note_id: UUID, session_id: str) -> LikeStatus:
        """Like the note if this session does not like it yet, otherwise unlike it.

        The like record and the note counter are written by separate calls, and the
        counter is read then overwritten, so concurrent toggles on one note can race.
        """
        if not session_id:
            raise ValidationError("Session ID is required")
        note = await self.core.services.note.get_note(note_id)

        existing = await self._collection.find_one({"note_id": note_id, "session_id": session_id})
        if existing:
            await self._collection.delete_one({"_id": existing["_id"]})
            liked = False
        else:
            await self._collection.insert_one(Like(note_id=note_id, session_id=session_id).to_mongo())
            liked = True

        # Re-read the counter right before writing it back
        current = await self.core.services.note.get_note(note.id)
        delta = 1 if liked else -1
        like_count = await self.core.services.note.set_like_count(note.id, current.like_count + delta)

        logger.debug("toggle_like", note_id=note_id, session_id=session_id, liked=liked, like_count=like_count)
        return LikeStatus(like_count=like_count, liked=liked)

    async def check_likes(self, note_ids: list[UUID], session_id: str) -> dict[UUID, bool]:
        """Return whether session_id likes each of note_ids."""
        if not session_id:
            raise ValidationError("Session ID is required")
        cursor = self._collection.find({"session_id": session_id, "note_id": {"$in": note_ids}})
        liked_ids = {doc["note_id"] async for doc in cursor}
        return {note_id: note_id in liked_ids for note_id in note_ids}

    async def delete_likes_by_note(self, note_id: UUID) -> int:
        """Delete all likes of a note and return count of deleted likes."""
        result = await self._collection.delete_many({"note_id": note_id})
        return result.deleted_count

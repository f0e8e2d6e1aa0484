from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from coffeenotes.core.db import MongoModel
from coffeenotes.utils import now


class Like(MongoModel):
    """A session's like of a note.

    Indexed on (note_id, session_id) - unique.
    """

    note_id: UUID
    session_id: str
    created_at: datetime = Field(default_factory=now)


class LikeStatus(BaseModel):
    """Authoritative like state for one note and session after a toggle."""

    like_count: int = Field(..., ge=0)
    liked: bool

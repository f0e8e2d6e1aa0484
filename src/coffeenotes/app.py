from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from uuid import UUID

from coffeenotes.config import Config
from coffeenotes.core.core import Core
from coffeenotes.core.modules.like.models import LikeStatus
from coffeenotes.core.modules.note.models import Note, NoteCategory
from coffeenotes.core.modules.note.search import NoteFilter


class App:
    """Facade for all note store operations.

    There is no authentication: callers identify themselves with an anonymous
    session ID, which is trusted as given. Edit and delete do not check ownership.
    """

    def __init__(self, config: Config) -> None:
        self._core = Core(config)

    @asynccontextmanager
    async def lifespan(self) -> AsyncGenerator[None]:
        """Application lifespan management - delegates to Core."""
        async with self._core.lifespan():
            yield

    async def list_notes(self, note_filter: NoteFilter | None = None) -> list[Note]:
        """Get all notes, newest first."""
        return await self._core.services.note.list_notes(note_filter)

    async def get_note(self, note_id: UUID) -> Note:
        return await self._core.services.note.get_note(note_id)

    async def create_note(
        self, category: NoteCategory, content: str, session_id: str, position: tuple[float, float] | None = None
    ) -> Note:
        """Create a note owned by the given session."""
        return await self._core.services.note.create_note(category, content, session_id, position)

    async def update_note_content(self, note_id: UUID, content: str) -> Note:
        return await self._core.services.note.update_content(note_id, content)

    async def update_note_position(self, note_id: UUID, x: float, y: float) -> None:
        await self._core.services.note.update_position(note_id, x, y)

    async def delete_note(self, note_id: UUID) -> None:
        await self._core.services.note.delete_note(note_id)

    async def toggle_like(self, note_id: UUID, session_id: str) -> LikeStatus:
        """Like or unlike a note on behalf of a session."""
        return await self._core.services.like.toggle_like(note_id, session_id)

    async def check_likes(self, note_ids: list[UUID], session_id: str) -> dict[UUID, bool]:
        """Report which of the notes the session currently likes."""
        return await self._core.services.like.check_likes(note_ids, session_id)

"""Client for the note store HTTP API.

Every operation is one request/response round trip. Nothing is retried and
in-flight requests are not cancelled when their caller goes away.
"""

from typing import Any, Protocol, TypeVar
from uuid import UUID

import httpx
import structlog
from pydantic import BaseModel, TypeAdapter

from coffeenotes.core.modules.like.models import LikeStatus
from coffeenotes.core.modules.note.models import Note, NoteCategory

logger = structlog.get_logger(__name__)

T = TypeVar("T")


class _Success(BaseModel):
    success: bool


class _CheckedLikes(BaseModel):
    liked: dict[UUID, bool]


_notes_adapter = TypeAdapter(list[Note])
_note_adapter = TypeAdapter(Note)
_success_adapter = TypeAdapter(_Success)
_like_status_adapter = TypeAdapter(LikeStatus)
_checked_likes_adapter = TypeAdapter(_CheckedLikes)


class StoreError(Exception):
    """A store call failed. status_code is the HTTP status, or 0 when no response arrived."""

    def __init__(self, message: str, status_code: int) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class NoteStore(Protocol):
    """Operations the interaction core needs from the note store."""

    async def list_notes(self) -> list[Note]: ...

    async def create_note(
        self, category: NoteCategory, content: str, session_id: str, position: tuple[int, int]
    ) -> Note: ...

    async def update_content(self, note_id: UUID, content: str) -> Note: ...

    async def update_position(self, note_id: UUID, x: float, y: float) -> bool: ...

    async def delete_note(self, note_id: UUID) -> bool: ...

    async def toggle_like(self, note_id: UUID, session_id: str) -> LikeStatus: ...

    async def check_likes(self, note_ids: list[UUID], session_id: str) -> dict[UUID, bool]: ...


class HttpNoteStore:
    """NoteStore over the JSON API. The httpx client must have the API root as base_url.

    Every failure surfaces as StoreError: no response, an error status, or a
    success body that does not have the expected shape.
    """

    def __init__(self, http: httpx.AsyncClient) -> None:
        self._http = http

    async def _request(self, adapter: TypeAdapter[T], method: str, path: str, json: Any = None) -> T:
        try:
            response = await self._http.request(method, path, json=json)
        except httpx.HTTPError as exc:
            logger.warning("store_request_failed", method=method, path=path, error=str(exc))
            raise StoreError(f"Request failed: {exc}", 0) from exc

        if response.is_error:
            try:
                data = response.json()
            except ValueError:
                data = None
            message = (data.get("message") if isinstance(data, dict) else None) or response.reason_phrase
            logger.warning("store_error", method=method, path=path, status_code=response.status_code, message=message)
            raise StoreError(message, response.status_code)

        try:
            return adapter.validate_json(response.content)
        except ValueError as exc:  # pydantic's ValidationError, including invalid JSON
            logger.warning("store_bad_response", method=method, path=path, status_code=response.status_code)
            raise StoreError(f"Unexpected response from store: {method} {path}", response.status_code) from exc

    async def list_notes(self) -> list[Note]:
        return await self._request(_notes_adapter, "GET", "/notes")

    async def create_note(
        self, category: NoteCategory, content: str, session_id: str, position: tuple[int, int]
    ) -> Note:
        payload = {
            "category": category,
            "content": content,
            "session_id": session_id,
            "position": {"x": position[0], "y": position[1]},
        }
        return await self._request(_note_adapter, "POST", "/notes", payload)

    async def update_content(self, note_id: UUID, content: str) -> Note:
        return await self._request(_note_adapter, "PATCH", f"/notes/{note_id}", {"content": content})

    async def update_position(self, note_id: UUID, x: float, y: float) -> bool:
        result = await self._request(_success_adapter, "PUT", f"/notes/{note_id}/position", {"x": x, "y": y})
        return result.success

    async def delete_note(self, note_id: UUID) -> bool:
        result = await self._request(_success_adapter, "DELETE", f"/notes/{note_id}")
        return result.success

    async def toggle_like(self, note_id: UUID, session_id: str) -> LikeStatus:
        return await self._request(_like_status_adapter, "POST", f"/notes/{note_id}/like", {"session_id": session_id})

    async def check_likes(self, note_ids: list[UUID], session_id: str) -> dict[UUID, bool]:
        payload = {"note_ids": [str(note_id) for note_id in note_ids], "session_id": session_id}
        result = await self._request(_checked_likes_adapter, "POST", "/notes/likes/check", payload)
        return result.liked

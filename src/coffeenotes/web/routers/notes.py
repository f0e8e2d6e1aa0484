from typing import Annotated, Literal
from uuid import UUID

from fastapi import APIRouter, Query
from pydantic import BaseModel, Field

from coffeenotes.core.modules.note.models import Coordinate, Note, NoteCategory
from coffeenotes.core.modules.note.search import NoteFilter
from coffeenotes.web.deps import AppDep
from coffeenotes.web.openapi import ErrorResponse

router: APIRouter = APIRouter(tags=["notes"])


class Position(BaseModel):
    """Canvas coordinates of a note's top-left corner."""

    x: Coordinate
    y: Coordinate


class CreateNoteRequest(BaseModel):
    """Request to create a new note."""

    category: NoteCategory
    content: str = Field(..., description="Encoded body: JSON text body or JSON list body, see the note content codec")
    session_id: str = Field(..., min_length=1, description="Anonymous session ID of the author")
    position: Position | None = Field(None, description="Initial position; randomized when omitted")

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "category": "resource-list",
                    "content": '{"title":"Books","items":["Deep Work","Show Your Work"],"source":"Professor"}',
                    "session_id": "user_1718000000000_k3j4h5g6f7d8s",
                    "position": {"x": 240, "y": 310},
                }
            ]
        }
    }


class UpdateNoteContentRequest(BaseModel):
    """Request to replace a note's encoded body."""

    content: str


class SuccessResponse(BaseModel):
    success: Literal[True] = True


@router.get(
    "/notes",
    summary="List notes",
    description=(
        "Get every note, newest first. Optional parameters narrow the result the same way the board's "
        "filters do: `category` (or `all`), `source` (case-insensitive substring of the attribution) and "
        "`q` (case-insensitive substring of text, title, items or source)."
    ),
    operation_id="listNotes",
)
async def list_notes(
    app: AppDep,
    category: Annotated[NoteCategory | Literal["all"], Query(description="Category to show")] = "all",
    source: Annotated[str, Query(description="Attribution source to match")] = "all",
    q: Annotated[str, Query(description="Free-text search")] = "",
) -> list[Note]:
    return await app.list_notes(NoteFilter(category=category, source=source, query=q))


@router.get(
    "/notes/{note_id}",
    summary="Get note",
    operation_id="getNote",
    responses={404: {"model": ErrorResponse, "description": "Note not found"}},
)
async def get_note(note_id: UUID, app: AppDep) -> Note:
    return await app.get_note(note_id)


@router.post(
    "/notes",
    summary="Create note",
    description="Create a note owned by the given session.",
    operation_id="createNote",
    status_code=201,
    responses={400: {"model": ErrorResponse, "description": "Missing or invalid field"}},
)
async def create_note(request: CreateNoteRequest, app: AppDep) -> Note:
    position = (request.position.x, request.position.y) if request.position else None
    return await app.create_note(request.category, request.content, request.session_id, position)


@router.patch(
    "/notes/{note_id}",
    summary="Update note content",
    description="Replace the encoded body of a note. Ownership is not checked.",
    operation_id="updateNoteContent",
    responses={
        400: {"model": ErrorResponse, "description": "Missing or invalid field"},
        404: {"model": ErrorResponse, "description": "Note not found"},
    },
)
async def update_note_content(note_id: UUID, request: UpdateNoteContentRequest, app: AppDep) -> Note:
    return await app.update_note_content(note_id, request.content)


@router.put(
    "/notes/{note_id}/position",
    summary="Update note position",
    description="Store a new canvas position. Coordinates are floored to integers.",
    operation_id="updateNotePosition",
    responses={
        400: {"model": ErrorResponse, "description": "Missing or invalid coordinate"},
        404: {"model": ErrorResponse, "description": "Note not found"},
    },
)
async def update_note_position(note_id: UUID, request: Position, app: AppDep) -> SuccessResponse:
    await app.update_note_position(note_id, request.x, request.y)
    return SuccessResponse()


@router.delete(
    "/notes/{note_id}",
    summary="Delete note",
    description="Delete a note and its likes. Ownership is not checked.",
    operation_id="deleteNote",
    responses={404: {"model": ErrorResponse, "description": "Note not found"}},
)
async def delete_note(note_id: UUID, app: AppDep) -> SuccessResponse:
    await app.delete_note(note_id)
    return SuccessResponse()

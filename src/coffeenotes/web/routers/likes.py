from uuid import UUID

from fastapi import APIRouter
from pydantic import BaseModel, Field

from coffeenotes.core.modules.like.models import LikeStatus
from coffeenotes.web.deps import AppDep
from coffeenotes.web.openapi import ErrorResponse

router: APIRouter = APIRouter(tags=["likes"])


class ToggleLikeRequest(BaseModel):
    session_id: str = Field(..., min_length=1, description="Anonymous session ID of the caller")


class CheckLikesRequest(BaseModel):
    """Request to look up like state for several notes at once."""

    note_ids: list[UUID]
    session_id: str = Field(..., min_length=1)


class CheckLikesResponse(BaseModel):
    liked: dict[UUID, bool] = Field(..., description="Whether the session likes each requested note")


@router.post(
    "/notes/{note_id}/like",
    summary="Toggle like",
    description="Like the note for this session, or remove the like if it already exists. Returns the new state.",
    operation_id="toggleLike",
    responses={
        400: {"model": ErrorResponse, "description": "Missing session ID"},
        404: {"model": ErrorResponse, "description": "Note not found"},
    },
)
async def toggle_like(note_id: UUID, request: ToggleLikeRequest, app: AppDep) -> LikeStatus:
    return await app.toggle_like(note_id, request.session_id)


@router.post(
    "/notes/likes/check",
    summary="Check likes",
    description="Report which of the given notes the session currently likes, for initial button state.",
    operation_id="checkLikes",
    responses={400: {"model": ErrorResponse, "description": "Missing note IDs or session ID"}},
)
async def check_likes(request: CheckLikesRequest, app: AppDep) -> CheckLikesResponse:
    return CheckLikesResponse(liked=await app.check_likes(request.note_ids, request.session_id))

"""Optimistic like button state for one note and session.

A toggle moves through two phases. It is applied tentatively before the store
answers, then either confirmed with the store's authoritative state or rolled
back to exactly what it was before the toggle. Rollback happens on every
failure, including transport errors and cancellation.
"""

from enum import StrEnum
from uuid import UUID

import structlog
from pydantic import BaseModel, ConfigDict, Field

from coffeenotes.client.store import NoteStore

logger = structlog.get_logger(__name__)


class LikeState(BaseModel):
    model_config = ConfigDict(frozen=True)

    liked: bool = False
    count: int = Field(default=0, ge=0)

    def flipped(self) -> "LikeState":
        """The state a successful toggle is expected to produce."""
        count = self.count - 1 if self.liked else self.count + 1
        return LikeState(liked=not self.liked, count=max(0, count))


class LikePhase(StrEnum):
    IDLE = "idle"
    TENTATIVE = "tentative"  # Optimistic state shown, store call in flight


class LikeToggle:
    """Like state of a single note as seen by one session."""

    def __init__(self, note_id: UUID, store: NoteStore, session_id: str, state: LikeState | None = None) -> None:
        self.note_id = note_id
        self._store = store
        self._session_id = session_id
        self._state = state or LikeState()
        self._phase = LikePhase.IDLE

    @property
    def state(self) -> LikeState:
        return self._state

    @property
    def phase(self) -> LikePhase:
        return self._phase

    @property
    def in_flight(self) -> bool:
        return self._phase == LikePhase.TENTATIVE

    def hydrate(self, liked: bool) -> None:
        """Set the initial liked flag from a batch like check. Ignored while a toggle is in flight."""
        if self._phase == LikePhase.IDLE:
            self._state = LikeState(liked=liked, count=self._state.count)

    async def toggle(self) -> LikeState:
        """Like or unlike the note.

        Does nothing without a session ID or while another toggle is in flight.
        Store failures are re-raised after the state has been rolled back.
        """
        if not self._session_id or self._phase != LikePhase.IDLE:
            return self._state

        previous = self._state
        self._begin(previous.flipped())
        try:
            status = await self._store.toggle_like(self.note_id, self._session_id)
        except BaseException:
            self._roll_back(previous)
            raise
        self._confirm(LikeState(liked=status.liked, count=status.like_count))
        return self._state

    def _begin(self, tentative: LikeState) -> None:
        self._phase = LikePhase.TENTATIVE
        self._state = tentative

    def _confirm(self, confirmed: LikeState) -> None:
        if confirmed != self._state:
            logger.debug("like_reconciled", note_id=self.note_id, tentative=self._state, confirmed=confirmed)
        self._state = confirmed
        self._phase = LikePhase.IDLE

    def _roll_back(self, previous: LikeState) -> None:
        logger.info("like_rolled_back", note_id=self.note_id, restored=previous)
        self._state = previous
        self._phase = LikePhase.IDLE

"""Pan, zoom and note dragging on the board canvas.

The canvas content layer is placed with a single transform,
``translate(pan) scale(zoom)``. During a continuous gesture at most one visual
update per display frame is applied (see FrameScheduler); the final state is
committed when the gesture ends.
"""

import math
from collections.abc import Callable, Hashable, Sequence
from enum import StrEnum
from typing import NamedTuple
from uuid import UUID

import structlog

from coffeenotes.client.store import NoteStore, StoreError

logger = structlog.get_logger(__name__)

ZOOM_MIN = 0.1
ZOOM_MAX = 3.0
ZOOM_STEP = 0.2
WHEEL_ZOOM_FACTOR = 0.001  # zoom change per wheel delta unit


class ViewMode(StrEnum):
    CANVAS = "canvas"  # Free positioning with pan and zoom
    GRID = "grid"  # Fixed responsive grid, no dragging


class Point(NamedTuple):
    x: float
    y: float


def clamp_zoom(zoom: float) -> float:
    return min(max(ZOOM_MIN, zoom), ZOOM_MAX)


def pointer_distance(a: Point, b: Point) -> float:
    return math.hypot(b.x - a.x, b.y - a.y)


class FrameScheduler:
    """Coalesces visual updates to one per display refresh.

    ``request`` replaces any update already pending for the same target;
    ``flush`` is called once per frame and runs what is pending.
    """

    def __init__(self) -> None:
        self._pending: dict[Hashable, Callable[[], None]] = {}

    def request(self, target: Hashable, update: Callable[[], None]) -> None:
        self._pending[target] = update

    def cancel(self, target: Hashable) -> None:
        self._pending.pop(target, None)

    def is_pending(self, target: Hashable) -> bool:
        return target in self._pending

    def flush(self) -> int:
        """Run pending updates. Returns how many ran."""
        pending, self._pending = self._pending, {}
        for update in pending.values():
            update()
        return len(pending)


class Canvas:
    """View state of one board canvas: zoom, committed pan and an in-flight pan gesture."""

    def __init__(
        self,
        scheduler: FrameScheduler | None = None,
        on_transform: Callable[[str], None] | None = None,
        view_mode: ViewMode = ViewMode.CANVAS,
    ) -> None:
        self.scheduler = scheduler or FrameScheduler()
        self.view_mode = view_mode
        self.zoom = 1.0
        self.pan = Point(0.0, 0.0)
        self.is_panning = False
        self._on_transform = on_transform
        self._live_pan = self.pan
        self._pan_anchor = Point(0.0, 0.0)
        self._pinch_start_distance = 0.0
        self._pinch_start_zoom = 1.0

    @property
    def transform(self) -> str:
        x, y = self._live_pan
        return f"translate({x:g}px, {y:g}px) scale({self.zoom:g})"

    @property
    def transition_enabled(self) -> bool:
        """Animate transform changes only when no pan is in progress."""
        return not self.is_panning

    # Zoom

    def set_zoom(self, zoom: float) -> float:
        self.zoom = clamp_zoom(zoom)
        self._render()
        return self.zoom

    def zoom_in(self) -> float:
        return self.set_zoom(self.zoom + ZOOM_STEP)

    def zoom_out(self) -> float:
        return self.set_zoom(self.zoom - ZOOM_STEP)

    def wheel(self, delta_y: float, ctrl: bool = False, meta: bool = False) -> bool:
        """Zoom on a modifier-held scroll. Returns False when the event should scroll normally."""
        if not (ctrl or meta):
            return False
        self.set_zoom(self.zoom - delta_y * WHEEL_ZOOM_FACTOR)
        return True

    # Pan with a mouse or pen

    def pointer_down(self, x: float, y: float, on_note: bool = False) -> bool:
        """Start panning unless the pointer went down on a note."""
        if on_note:
            return False
        self._start_pan(Point(x, y))
        return True

    def pointer_move(self, x: float, y: float) -> None:
        if self.is_panning:
            self._move_pan(Point(x, y))

    def pointer_up(self) -> None:
        if self.is_panning:
            self._commit_pan()

    # Touch: one finger pans, two fingers pinch-zoom

    def touch_start(self, touches: Sequence[Point], on_note: bool = False) -> None:
        if len(touches) == 2:
            self._pinch_start_distance = pointer_distance(touches[0], touches[1])
            self._pinch_start_zoom = self.zoom
        elif len(touches) == 1 and not on_note:
            self._start_pan(touches[0])

    def touch_move(self, touches: Sequence[Point]) -> None:
        if len(touches) == 2:
            if self._pinch_start_distance > 0:
                distance = pointer_distance(touches[0], touches[1])
                self.set_zoom(self._pinch_start_zoom * distance / self._pinch_start_distance)
        elif len(touches) == 1 and self.is_panning:
            self._move_pan(touches[0])

    def touch_end(self) -> None:
        if self.is_panning:
            self._commit_pan()
        self._pinch_start_distance = 0.0

    def reset_view(self) -> None:
        self.scheduler.cancel(self)
        self.zoom = 1.0
        self.pan = self._live_pan = Point(0.0, 0.0)
        self._render()

    def _start_pan(self, pointer: Point) -> None:
        self.is_panning = True
        self._pan_anchor = Point(pointer.x - self._live_pan.x, pointer.y - self._live_pan.y)

    def _move_pan(self, pointer: Point) -> None:
        self._live_pan = Point(pointer.x - self._pan_anchor.x, pointer.y - self._pan_anchor.y)
        self.scheduler.request(self, self._render)

    def _commit_pan(self) -> None:
        self.is_panning = False
        self.pan = self._live_pan
        self.scheduler.cancel(self)
        self._render()

    def _render(self) -> None:
        if self._on_transform is not None:
            self._on_transform(self.transform)


class NoteDrag:
    """Drag state of one note on a canvas.

    Pointer movement is divided by the current zoom, so a drag covers the same
    on-screen distance at any zoom level. On release the position is floored,
    applied locally at once and then persisted. A failed persist is logged and
    the local position is kept.
    """

    def __init__(
        self,
        note_id: UUID,
        position: Point,
        store: NoteStore,
        canvas: Canvas,
        on_move: Callable[[Point], None] | None = None,
    ) -> None:
        self.note_id = note_id
        self.position = position
        self.is_dragging = False
        self._store = store
        self._canvas = canvas
        self._on_move = on_move
        self._offset = Point(0.0, 0.0)

    @property
    def transition_enabled(self) -> bool:
        return not self.is_dragging

    def pointer_down(self, x: float, y: float, on_control: bool = False) -> bool:
        """Start dragging. Not possible in grid mode or when pressing a control such as a button."""
        if self._canvas.view_mode == ViewMode.GRID or on_control:
            return False
        zoom = self._canvas.zoom
        self._offset = Point(x / zoom - self.position.x, y / zoom - self.position.y)
        self.is_dragging = True
        return True

    def pointer_move(self, x: float, y: float) -> None:
        if not self.is_dragging:
            return
        zoom = self._canvas.zoom
        self.position = Point(x / zoom - self._offset.x, y / zoom - self._offset.y)
        self._canvas.scheduler.request(self.note_id, self._render)

    async def release(self) -> bool:
        """End the drag and persist the floored position. Returns whether the store accepted it."""
        if not self.is_dragging:
            return False
        self.is_dragging = False
        self._canvas.scheduler.cancel(self.note_id)
        x, y = math.floor(self.position.x), math.floor(self.position.y)
        self.position = Point(x, y)
        self._render()
        try:
            return await self._store.update_position(self.note_id, x, y)
        except StoreError as exc:
            logger.warning("position_persist_failed", note_id=self.note_id, x=x, y=y, error=exc.message)
            return False

    def _render(self) -> None:
        if self._on_move is not None:
            self._on_move(self.position)

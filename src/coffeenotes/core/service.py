from __future__ import annotations

from typing import TYPE_CHECKING, Any

from pymongo.asynchronous.database import AsyncDatabase

if TYPE_CHECKING:
    from coffeenotes.core.core import Core


class Service:
    """Base class for services that own a MongoDB collection."""

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        self.database = database
        self._core: Core | None = None

    async def on_start(self) -> None:
        """Create indexes and other startup state."""

    async def on_stop(self) -> None:
        """Release resources on shutdown."""

    @property
    def core(self) -> Core:
        """The core, for calls into sibling services."""
        if self._core is None:
            raise RuntimeError("Core not set for service")
        return self._core

    def set_core(self, core: Core) -> None:
        self._core = core

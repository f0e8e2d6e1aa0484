from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any
from urllib.parse import urlparse

import structlog
from pymongo import AsyncMongoClient
from pymongo.asynchronous.database import AsyncDatabase

from coffeenotes.config import Config
from coffeenotes.core.modules.like.service import LikeService
from coffeenotes.core.modules.note.service import NoteService
from coffeenotes.core.service import Service

logger = structlog.get_logger(__name__)


class Services:
    """The note store's services. Notes start before likes and stop after them."""

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        self.note = NoteService(database)
        self.like = LikeService(database)

    @property
    def all(self) -> tuple[Service, ...]:
        return (self.note, self.like)

    def set_core(self, core: "Core") -> None:
        for service in self.all:
            service.set_core(core)

    async def start_all(self) -> None:
        for service in self.all:
            await service.on_start()

    async def stop_all(self) -> None:
        for service in reversed(self.all):
            await service.on_stop()


class Core:
    """Container providing config, database, and the service instances."""

    config: Config
    mongo_client: AsyncMongoClient[dict[str, Any]]
    database: AsyncDatabase[dict[str, Any]]
    services: Services

    def __init__(self, config: Config) -> None:
        self.config = config
        # Note ids are UUIDs; created_at must come back as aware UTC datetimes
        self.mongo_client = AsyncMongoClient(config.database_url, uuidRepresentation="standard", tz_aware=True)
        self.database = self.mongo_client.get_database(database_name(config.database_url))
        self.services = Services(self.database)
        self.services.set_core(self)

    @asynccontextmanager
    async def lifespan(self) -> AsyncGenerator[None]:
        """Start services, yield, then stop services and close the MongoDB connection."""
        await self.services.start_all()
        logger.info("core_started", database=self.database.name)
        try:
            yield
        finally:
            await self.services.stop_all()
            await self.mongo_client.aclose()


def database_name(database_url: str) -> str:
    """Database named in the URL path, e.g. ``coffeenotes`` in ``mongodb://host:27017/coffeenotes``."""
    name = urlparse(database_url).path.lstrip("/")
    if not name:
        raise ValueError(f"database_url must name a database: {database_url}")
    return name

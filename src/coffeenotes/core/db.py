from typing import Any, Self
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field
from pymongo.asynchronous.cursor import AsyncCursor


class MongoModel(BaseModel):
    """A document with a UUID primary key, ``_id`` in MongoDB and ``id`` in API payloads."""

    model_config = ConfigDict(populate_by_name=True)

    id: UUID = Field(default_factory=uuid4, alias="_id", serialization_alias="id")

    def to_mongo(self) -> dict[str, Any]:
        return {"_id": self.id, **self.model_dump(exclude={"id"})}

    @classmethod
    async def list_cursor(cls, cursor: AsyncCursor[dict[str, Any]]) -> list[Self]:
        return [cls.model_validate(doc) async for doc in cursor]

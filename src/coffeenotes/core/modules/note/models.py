import math
import random
from datetime import datetime
from enum import StrEnum
from types import MappingProxyType
from typing import Annotated

from pydantic import BaseModel, Field

from coffeenotes.core.db import MongoModel
from coffeenotes.errors import ValidationError
from coffeenotes.utils import hash_string, now


class NoteCategory(StrEnum):
    """Kind of a note, chosen at creation. Drives body shape and styling."""

    REFLECTION = "reflection"
    ACTIONABLE_ADVICE = "actionable-advice"
    CAUTIONARY_ADVICE = "cautionary-advice"
    RESOURCE_LIST = "resource-list"


class CategoryInfo(BaseModel):
    """Display metadata for a note category."""

    label: str
    description: str


CATEGORY_INFO = MappingProxyType(
    {
        NoteCategory.REFLECTION: CategoryInfo(
            label="Reflections",
            description="Your own takeaways, impressions, or things you're mulling over from the chat.",
        ),
        NoteCategory.ACTIONABLE_ADVICE: CategoryInfo(
            label="Actionable Advice",
            description="Practical tips you can apply directly.",
        ),
        NoteCategory.CAUTIONARY_ADVICE: CategoryInfo(
            label="Take with Caution",
            description="Hot takes: bold, controversial, and guaranteed to spark discussion.",
        ),
        NoteCategory.RESOURCE_LIST: CategoryInfo(
            label="Resources & Tools",
            description="Specific links, books, templates, or methods shared during the chat.",
        ),
    }
)


# Who a note can be attributed to when it is added. OTHER_SOURCE stands for free text.
OTHER_SOURCE = "Other"
SELF_SOURCE = "Myself"  # Reflections only
SOURCE_CHOICES = ("Recruiter", "Senior Designer", "Mid-Level Designer", "Professor", "Colleague", OTHER_SOURCE)


def source_choices(category: NoteCategory) -> list[str]:
    if category == NoteCategory.REFLECTION:
        return [SELF_SOURCE, *SOURCE_CHOICES]
    return list(SOURCE_CHOICES)


def resolve_source(category: NoteCategory, choice: str, other: str = "") -> str:
    """Return the attribution to store for a picked source, the free text ``other`` for OTHER_SOURCE."""
    if choice not in source_choices(category):
        raise ValidationError(f"Unknown source for {category}: {choice!r}")
    if choice == OTHER_SOURCE:
        if not other.strip():
            raise ValidationError("Say who shared this")
        return other.strip()
    return choice


class Note(MongoModel):
    """A sticky note on the board."""

    category: NoteCategory
    content: str  # Encoded body, see note.content
    position_x: int = 0
    position_y: int = 0
    created_at: datetime = Field(default_factory=now)
    like_count: int = Field(default=0, ge=0)
    session_id: str  # Owner session; only used for presentation-level gating

    @property
    def tilt(self) -> int:
        """Rotation in degrees in [-15, 14], stable for a given note id."""
        return abs(hash_string(str(self.id))) % 30 - 15


# Region where new notes land, in canvas coordinates
SPAWN_X = (100, 600)
SPAWN_Y = (150, 550)

# Stored positions are integers well inside BSON's int64 range
COORDINATE_LIMIT = 1_000_000_000

Coordinate = Annotated[float, Field(allow_inf_nan=False, ge=-COORDINATE_LIMIT, le=COORDINATE_LIMIT)]


def floor_coordinate(value: float) -> int:
    """Floor a canvas coordinate for storage. Rejects NaN, infinities and values beyond COORDINATE_LIMIT."""
    if not math.isfinite(value) or abs(value) > COORDINATE_LIMIT:
        raise ValidationError(f"Coordinate out of range: {value}")
    return math.floor(value)


def random_position() -> tuple[int, int]:
    return random.randrange(*SPAWN_X), random.randrange(*SPAWN_Y)

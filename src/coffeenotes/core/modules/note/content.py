"""Encoding of note bodies.

A note's body is stored as an opaque string. Text categories carry
``{"text", "source"?}``, the resource list carries ``{"title", "items", "source"?}``.
Decoding never fails: anything that is not a recognizable body is shown as plain text.
"""

import json

from pydantic import BaseModel, Field

from coffeenotes.core.modules.note.models import NoteCategory
from coffeenotes.errors import ValidationError


class TextBody(BaseModel):
    """Body of reflection and advice notes."""

    text: str
    source: str | None = None


class ListBody(BaseModel):
    """Body of resource-list notes."""

    title: str
    items: list[str] = Field(default_factory=list)
    source: str | None = None


NoteBody = TextBody | ListBody


def body_for_category(category: NoteCategory) -> type[TextBody] | type[ListBody]:
    if category == NoteCategory.RESOURCE_LIST:
        return ListBody
    return TextBody


def encode(category: NoteCategory, body: NoteBody) -> str:
    """Serialize body for storage, checking it has the shape its category requires and is filled in."""
    expected = body_for_category(category)
    if not isinstance(body, expected):
        raise ValidationError(f"Category '{category}' requires a {expected.__name__}, got {type(body).__name__}")
    _check_filled(body)
    return body.model_dump_json(exclude_none=True)


def _check_filled(body: NoteBody) -> None:
    """A text note needs text; a list needs a title and at least one non-blank item."""
    if isinstance(body, ListBody):
        if not body.title.strip():
            raise ValidationError("List title is required")
        if not body.items:
            raise ValidationError("A list needs at least one item")
        if any(not item.strip() for item in body.items):
            raise ValidationError("List items cannot be blank")
    elif not body.text.strip():
        raise ValidationError("Note text is required")


def decode(blob: str) -> NoteBody:
    """Parse a stored body. Malformed input degrades to ``TextBody(text=blob)``."""
    try:
        data = json.loads(blob)
        if isinstance(data, dict):
            if "title" in data:
                return ListBody.model_validate(data)
            if "text" in data:
                return TextBody.model_validate(data)
    except ValueError:  # JSONDecodeError and pydantic's ValidationError
        pass
    return TextBody(text=blob)


def body_source(body: NoteBody) -> str:
    return body.source or ""


def searchable_text(body: NoteBody) -> str:
    """Text, title, items and source joined, the haystack for free-text search."""
    if isinstance(body, ListBody):
        parts = ["", body.title, " ".join(body.items), body_source(body)]
    else:
        parts = [body.text, "", "", body_source(body)]
    return " ".join(parts)

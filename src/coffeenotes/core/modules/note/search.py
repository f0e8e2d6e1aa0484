"""In-memory filtering of notes by category, attribution source and free text."""

from collections.abc import Iterable
from typing import Literal

from pydantic import BaseModel, Field

from coffeenotes.core.modules.note.content import NoteBody, body_source, decode, searchable_text
from coffeenotes.core.modules.note.models import Note, NoteCategory

ALL = "all"


class NoteFilter(BaseModel):
    """Active filters of a board. A note must pass all of them."""

    category: NoteCategory | Literal["all"] = Field(ALL, description="Category to show, or 'all'")
    source: str = Field(ALL, description="Case-insensitive substring of the note's source, or 'all'")
    query: str = Field("", description="Case-insensitive substring of the note's text, title, items or source")


def _matches_category(note: Note, category: str) -> bool:
    return category == ALL or note.category == category


def _matches_source(body: NoteBody, source: str) -> bool:
    if source in ("", ALL):
        return True
    note_source = body_source(body)
    # A note without a source never matches a specific attribution
    return bool(note_source) and source.lower() in note_source.lower()


def _matches_query(body: NoteBody, query: str) -> bool:
    if not query:
        return True
    return query.lower() in searchable_text(body).lower()


def filter_notes(notes: Iterable[Note], category: str = ALL, source: str = ALL, query: str = "") -> list[Note]:
    """Return the notes passing every active filter, in their original order."""
    result = []
    for note in notes:
        if not _matches_category(note, category):
            continue
        body = decode(note.content)
        if _matches_source(body, source) and _matches_query(body, query):
            result.append(note)
    return result


def apply_filter(notes: Iterable[Note], note_filter: NoteFilter) -> list[Note]:
    return filter_notes(notes, note_filter.category, note_filter.source, note_filter.query)


def known_sources(notes: Iterable[Note]) -> list[str]:
    """Distinct attribution sources in first-seen order, for building filter choices."""
    seen: dict[str, None] = {}
    for note in notes:
        source = body_source(decode(note.content))
        if source:
            seen.setdefault(source, None)
    return list(seen)

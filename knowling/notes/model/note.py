"""
Contains the ``Note`` class, which represents a note held by the note service, the ``Category`` class, which
represents a label attached to a note, and the ``RelatedNote`` class, which pairs a note with a similarity score.
"""

from __future__ import annotations

from typing import List

from knowling import helpers


class Category:
    """
    Represents a category attached to a note.
    """

    def __init__(self, category_id: str, label: str):
        self.id: str = category_id
        self.label: str = label

    @staticmethod
    def from_dict(data: dict) -> Category:
        return Category(category_id=data['id'], label=data['label'])

    def to_dict(self) -> dict:
        return {'id': self.id, 'label': self.label}

    def __eq__(self, other):
        return isinstance(other, Category) and (self.id, self.label) == (other.id, other.label)

    def __hash__(self):
        return hash((self.id, self.label))

    def __str__(self):
        return self.label


class Note:
    """
    Represents a note. Notes are created and modified by the note service only; this class is a read-only view of
    what the service returned.
    """

    def __init__(self,
                 text: str,
                 modified: int,
                 note_id: str | None = None,
                 created: int | None = None,
                 categories: List[Category] = None):
        """
        Create a new note.

        :param text: the full body of the note. The first line is conventionally a heading.
        :param modified: Unix timestamp, in seconds, of the last save.
        :param note_id: the identifier assigned by the note service. ``None`` for a note which has not been saved.
        :param created: Unix timestamp, in seconds, of the first save.
        :param categories: the categories attached to this note.
        """
        if categories is None:
            categories = []
        self.id: str | None = note_id
        self.text: str = text
        self.modified: int = modified
        self.created: int | None = created
        self.categories: List[Category] = categories

    @staticmethod
    def from_dict(data: dict) -> Note:
        """
        Creates a Note instance from a note returned by the note service.

        :param data: the decoded JSON object for the note.
        :return: a Note instance.
        """
        return Note(
            note_id=data.get('id'),
            text=data.get('text', ''),
            modified=int(data['modified']),
            created=data.get('created'),
            categories=[Category.from_dict(c) for c in data.get('categories') or []])

    def to_dict(self) -> dict:
        return {
            'id': self.id,
            'text': self.text,
            'modified': self.modified,
            'created': self.created,
            'categories': [c.to_dict() for c in self.categories]
        }

    @property
    def title(self) -> str:
        return helpers.note_title(self.text)

    @property
    def preview(self) -> str:
        return helpers.get_first_line(self.text)

    def __eq__(self, other):
        return isinstance(other, Note) and self.to_dict() == other.to_dict()

    def __repr__(self):
        return 'Note(id={0!r}, modified={1!r})'.format(self.id, self.modified)

    def __str__(self):
        return self.title


class RelatedNote:
    """
    A note returned by a similarity query, together with its similarity score.
    """

    def __init__(self, note: Note, score: float):
        self.note: Note = note
        self.score: float = score

    @staticmethod
    def from_pair(pair: list | tuple) -> RelatedNote:
        """
        Creates a RelatedNote from a ``[note, score]`` pair returned by the note service.

        :param pair: the note object and its score.
        :return: a RelatedNote instance.
        """
        note, score = pair
        return RelatedNote(Note.from_dict(note), float(score))

    def __repr__(self):
        return 'RelatedNote(id={0!r}, score={1!r})'.format(self.note.id, self.score)

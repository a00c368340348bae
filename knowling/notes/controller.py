"""
This is the note controller. It contains the operations the note list and editor perform against the note service.
These are called by the CLI, but can be called separately if imported.

None of these methods raise when the note service fails. Failures are logged and returned as ``(False, default)``.
"""
from __future__ import annotations

import logging
from datetime import datetime
from typing import Dict, List

from knowling import helpers
from knowling.notes.model.grouping import MonthNames, group_notes_by_date
from knowling.notes.model.note import Note, RelatedNote
from knowling.notes.service import NoteService, RemoteOperationFailed
from knowling.router import Router


class NoteController:
    """
    Contains various static methods for working with notes held by the note service.
    """

    #: The note service client in use
    SERVICE: NoteService = None

    @staticmethod
    async def get_notes() -> tuple[bool, List[Note]]:
        """
        Get every note.

        :returns:

            -success (:py:class:`bool`) - true if the notes are successfully retrieved.

            -data (:py:class:`List[Note]`) - the notes, or an empty list on failure.

        """
        try:
            notes = await NoteController.SERVICE.get_notes()
        except RemoteOperationFailed as e:
            logging.critical('Failed fetching notes: {}'.format(e))
            return False, []
        logging.info('Found [{}] existing notes'.format(len(notes)))
        return True, notes

    @staticmethod
    async def get_note(note_id: str) -> tuple[bool, Note | None]:
        """
        Get a single note.

        :param note_id: the note to fetch.

        :returns:

            -success (:py:class:`bool`) - true if the note is successfully retrieved.

            -data (:py:class:`Note` | None) - the note, or None on failure.

        """
        try:
            note = await NoteController.SERVICE.get_note(note_id)
        except RemoteOperationFailed as e:
            logging.critical('Failed fetching note {0}: {1}'.format(note_id, e))
            return False, None
        return True, note

    @staticmethod
    async def get_grouped_notes(now: datetime | None = None,
                                month_names: MonthNames | None = None) -> tuple[bool, Dict[str, List[Note]]]:
        """
        Get every note, grouped by modification date for the note list.

        :param now: the current moment. Defaults to the current local time.
        :param month_names: month names for the month/year buckets.

        :returns:

            -success (:py:class:`bool`) - true if the notes are successfully retrieved.

            -data (:py:class:`dict`) - bucket label to notes, or an empty dictionary on failure.

        """
        success, notes = await NoteController.get_notes()
        if not success:
            return False, {}
        return True, group_notes_by_date(notes, now, month_names)

    @staticmethod
    async def delete_note(note_id: str | None, router: Router) -> tuple[bool, str]:
        """
        Delete a note and navigate back to the note list. Nothing happens if the note has no identifier.

        :param note_id: the note to delete.
        :param router: the router to navigate once the note is deleted.

        :returns:

            -success (:py:class:`bool`) - true if the note is successfully deleted.

            -data (:py:class:`str`) - success message, or error message on failure.

        """
        if not note_id:
            error = 'The note is not defined: {}'.format(note_id)
            logging.warning(error)
            return False, error
        try:
            await NoteController.SERVICE.delete_note(note_id)
        except RemoteOperationFailed as e:
            error = 'Failed deleting note: {}'.format(e)
            logging.critical(error)
            return False, error
        logging.info('Note deleted: {}'.format(note_id))
        router.push('Home')
        return True, 'Note deleted: {}'.format(note_id)

    @staticmethod
    async def upsert_note(note_id: str | None, text: str) -> tuple[bool, str | None]:
        """
        Save a note. The note is updated if it has an identifier, or created otherwise.

        :param note_id: the note to update, or None to create a new note.
        :param text: the text of the note.

        :returns:

            -success (:py:class:`bool`) - true if the note is successfully saved.

            -data (:py:class:`str` | None) - the identifier of a created note, None after an update or on failure.

        """
        try:
            note = await NoteController.SERVICE.save_note(note_id or None, text)
        except RemoteOperationFailed as e:
            logging.critical('Failed saving note: {}'.format(e))
            return False, None
        if note_id:
            logging.info('Note updated: {}'.format(note.id))
            return True, None
        logging.info('Note created: {}'.format(note.id))
        return True, note.id

    @staticmethod
    async def get_related_notes(note_id: str, threshold: float) -> tuple[bool, List[RelatedNote]]:
        """
        Get the notes similar to a note.

        :param note_id: the note to compare against.
        :param threshold: the minimum similarity score.

        :returns:

            -success (:py:class:`bool`) - true if the related notes are successfully retrieved.

            -data (:py:class:`List[RelatedNote]`) - the related notes, or an empty list on failure.

        """
        try:
            related = await NoteController.SERVICE.get_related_notes(note_id, threshold)
        except RemoteOperationFailed as e:
            logging.critical('Failed fetching related notes: {}'.format(e))
            return False, []
        logging.debug('Found [{0}] notes related to {1}'.format(len(related), note_id))
        return True, related

    @staticmethod
    def note_title(text: str) -> str:
        return helpers.note_title(text)

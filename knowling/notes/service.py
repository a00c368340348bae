"""
Contains the ``NoteService`` class, which sends commands to the external note service, and the
``RemoteOperationFailed`` exception raised whenever one of those commands fails.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, List

import httpx

from knowling.notes.model.note import Note, RelatedNote


class RemoteOperationFailed(Exception):
    """
    Raised when the note service could not carry out an operation.
    """

    def __init__(self, operation: str, message: str):
        super().__init__('{0} failed: {1}'.format(operation, message))
        self.operation: str = operation
        self.message: str = message


class NoteService:
    """
    Thin client for the note service. Every command is sent as ``POST <base_url>/invoke/<command>`` with the
    arguments as a JSON object, and the decoded JSON response is the command's result.

    No retries are made and no timeout is enforced.
    """

    def __init__(self, base_url: str, transport: httpx.AsyncBaseTransport | None = None):
        """
        :param base_url: the address of the note service, e.g. ``http://127.0.0.1:7700``.
        :param transport: an optional httpx transport, used to substitute the network in tests.
        """
        self.base_url: str = base_url.rstrip('/')
        self.client: httpx.AsyncClient = httpx.AsyncClient(
            base_url=self.base_url,
            headers={'Content-Type': 'application/json'},
            timeout=None,
            transport=transport)

    async def __aenter__(self) -> NoteService:
        return self

    async def __aexit__(self, exc_type, exc_value, traceback) -> None:
        await self.close()

    async def close(self) -> None:
        await self.client.aclose()

    async def invoke(self, command: str, **args) -> Any:
        """
        Send a command to the note service.

        :param command: the name of the command, e.g. ``save_note``.
        :param args: the command arguments.

        :return: the decoded result of the command.
        :raises RemoteOperationFailed: if the request cannot be sent, the service answers with an error status or the
            response is not valid JSON.
        """
        logging.debug('Invoking {0} with {1}'.format(command, args))
        try:
            response = await self.client.post('/invoke/{}'.format(command), json=args)
            response.raise_for_status()
            if not response.content:
                return None
            return response.json()
        except httpx.HTTPStatusError as e:
            raise RemoteOperationFailed(command, '{0} {1}'.format(e.response.status_code, e.response.text)) from e
        except httpx.HTTPError as e:
            raise RemoteOperationFailed(command, str(e) or type(e).__name__) from e
        except ValueError as e:
            raise RemoteOperationFailed(command, 'invalid response: {}'.format(e)) from e

    @staticmethod
    def _parse(command: str, parser: Callable[[Any], Any], result: Any) -> Any:
        try:
            return parser(result)
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            raise RemoteOperationFailed(command, 'invalid response: {}'.format(e)) from e

    async def get_notes(self) -> List[Note]:
        result = await self.invoke('get_notes')
        return NoteService._parse('get_notes', lambda r: [Note.from_dict(note) for note in r or []], result)

    async def get_note(self, note_id: str) -> Note:
        result = await self.invoke('get_note', id=note_id)
        if result is None:
            raise RemoteOperationFailed('get_note', 'note {} not found'.format(note_id))
        return NoteService._parse('get_note', Note.from_dict, result)

    async def save_note(self, note_id: str | None, text: str) -> Note:
        """
        Create or update a note. A note is created when ``note_id`` is ``None``.

        :param note_id: the note to update, or ``None``.
        :param text: the new text of the note.

        :return: the saved note, with the identifier assigned by the service.
        """
        result = await self.invoke('save_note', id=note_id, text=text)
        if not isinstance(result, dict):
            raise RemoteOperationFailed('save_note', 'no note returned')
        return NoteService._parse('save_note', Note.from_dict, result)

    async def delete_note(self, note_id: str) -> None:
        await self.invoke('delete_note', id=note_id)

    async def get_related_notes(self, note_id: str, threshold: float) -> List[RelatedNote]:
        """
        Find notes similar to a note.

        :param note_id: the note to compare against.
        :param threshold: the minimum similarity score.

        :return: ``RelatedNote`` objects in the order given by the service.
        """
        result = await self.invoke('get_related_notes', id=note_id, threshold=threshold)
        return NoteService._parse(
            'get_related_notes', lambda r: [RelatedNote.from_pair(pair) for pair in r or []], result)

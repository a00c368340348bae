"""
This is the model of the note part of Knowling. Here, you'll find the following:

- ``note.py`` - Contains the ``Note``, ``Category`` and ``RelatedNote`` classes.
- ``grouping.py`` - Contains ``group_notes_by_date`` and the buckets notes are grouped in.

"""

from . import note, grouping

__all__ = ['note', 'grouping', ]

"""
This is the note part of Knowling. Here, you'll find the following:

- ``model`` - the ``Note`` class and the date grouping of notes.
- ``service.py`` - Contains the ``NoteService`` client which talks to the external note service.
- ``controller.py`` - Contains the ``NoteController`` class used by the front end.

"""

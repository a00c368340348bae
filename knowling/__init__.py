"""
This is the main package for Knowling.

- ``notes`` - notes, their date grouping, and the client and controller for the note service.
- ``cli`` - the Knowling command-line front end.
- ``router`` - the route table and navigation history.
- ``helpers`` - helpers used across Knowling.

"""

from . import helpers

__all__ = ['helpers', ]

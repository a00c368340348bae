"""
This is a helper file shared by the note model, the controller and the CLI.
"""

from __future__ import annotations

import logging
import re
import sys
from datetime import datetime, tzinfo
from pathlib import Path
from types import TracebackType
from typing import Type

import markdown2

DATA_LOCATION: Path = Path.home() / ".knowling"  #: Location where application data is stored.


def get_first_line(text: str, max_chars: int = 25) -> str:
    """
    Get a preview snippet of a note: the text up to the first newline, cut to ``max_chars`` characters.

    :param text: the note text.
    :param max_chars: the maximum number of characters to return.

    :return: the preview snippet.
    """
    newline_index = text.find('\n')
    first_line = text[:newline_index] if newline_index != -1 else text
    return first_line[:max_chars]


def note_title(text: str) -> str:
    """
    Get the display title of a note. This is the first line of the note with any leading heading markers removed.

    :param text: the note text.

    :return: the display title.
    """
    first_line = text.split('\n', 1)[0]
    return re.sub(r'^#+\s*', '', first_line)


def markdown_to_html(text: str) -> str:
    """
    Converts Markdown to HTML using the `markdown2 <https://pypi.org/project/markdown2/>`_ library.

    :param text: the Markdown text to convert to HTMl.

    :return: the HTML version of the Markdown given.
    """
    return markdown2.markdown(text, extras={
        'breaks': {'on_newline': True, 'on_backslash': True},
        'cuddled-lists': None,
        'fenced-code-blocks': None
    })


def settings_folder() -> Path:
    """
    Get the location of the Application Data folder for Knowling.

    :return: path to the Application Data folder.
    """
    folder = DATA_LOCATION
    folder.mkdir(parents=True, exist_ok=True)
    return folder


def log_folder() -> Path:
    """
    Get the location of the ``logs`` folder within Knowling's Application Data folder.

    :return: path to the ``logs`` folder.
    """
    folder = DATA_LOCATION / 'logs'
    folder.mkdir(parents=True, exist_ok=True)
    return folder


def set_panic_hook(log_dir: Path) -> None:
    """
    Installs an exception hook which appends any uncaught exception to ``panic.log`` before the default hook runs.

    :param log_dir: the directory where ``panic.log`` is written.
    """
    panic_logger = logging.getLogger('knowling.panic')
    panic_logger.addHandler(logging.FileHandler(Path(log_dir) / 'panic.log'))
    default_hook = sys.excepthook

    def hook(exc_type: Type[BaseException], exc_value: BaseException, exc_tb: TracebackType | None):
        panic_logger.critical('Panicked: %s', exc_value, exc_info=(exc_type, exc_value, exc_tb))
        default_hook(exc_type, exc_value, exc_tb)

    sys.excepthook = hook


class DateUtil:
    """
    Utility class for converting timestamps and comparing dates by their calendar components.
    """

    @staticmethod
    def from_epoch(seconds: int | float, tz: tzinfo | None = None) -> datetime:
        """
        Convert a Unix timestamp to a date/time. When ``tz`` is ``None``, the local time zone is used.

        :param seconds: seconds since the Unix epoch.
        :param tz: the time zone of the result.

        :return: the date/time for the timestamp.
        """
        return datetime.fromtimestamp(seconds, tz)

    @staticmethod
    def is_same_day(date1: datetime, date2: datetime) -> bool:
        return (date1.year, date1.month, date1.day) == (date2.year, date2.month, date2.day)

    @staticmethod
    def is_same_month(date1: datetime, date2: datetime) -> bool:
        return (date1.year, date1.month) == (date2.year, date2.month)

    @staticmethod
    def month_year_sort_key(year: int, month: int) -> int:
        """
        Get a sortable number for a month, e.g. ``202300`` for January 2023. Months are counted from zero.

        :param year: the year.
        :param month: the month, from 1 to 12.

        :return: the sort key.
        """
        return year * 100 + (month - 1)

"""
Contains the date grouping used by the note list. Notes are placed in ``Today``, ``Yesterday`` or
``Earlier this month``, or in a bucket for the month and year they were last modified in, most recent first.
"""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Dict, Iterable, List

from knowling.helpers import DateUtil
from knowling.notes.model.note import Note


class MonthNames:
    """
    Supplies the month names used to label month/year buckets.
    """

    ENGLISH = ['January', 'February', 'March', 'April', 'May', 'June',
               'July', 'August', 'September', 'October', 'November', 'December']

    def __init__(self, names: List[str] = None):
        """
        :param names: the twelve full month names, January first. Defaults to English.
        """
        if names is None:
            names = MonthNames.ENGLISH
        if len(names) != 12:
            raise ValueError('Expected 12 month names, got {}'.format(len(names)))
        self.names: List[str] = list(names)

    @staticmethod
    def system() -> MonthNames:
        """
        Get the month names of the current locale.

        :return: a MonthNames instance built from the ``LC_TIME`` locale.
        """
        return MonthNames([datetime(2000, month, 1).strftime('%B') for month in range(1, 13)])

    def label(self, year: int, month: int) -> str:
        return '{0} {1}'.format(self.names[month - 1], year)


class Bucket:
    """
    Base class for the buckets notes are grouped in.
    """

    def label(self, month_names: MonthNames) -> str:
        raise NotImplementedError

    def sort_key(self) -> tuple:
        raise NotImplementedError


class FixedBucket(Bucket):
    """
    One of the named buckets shown above any month. These are always ordered by priority, not by date.
    """

    def __init__(self, name: str, priority: int):
        self.name: str = name
        self.priority: int = priority

    def label(self, month_names: MonthNames) -> str:
        return self.name

    def sort_key(self) -> tuple:
        return 0, self.priority

    def __eq__(self, other):
        return isinstance(other, FixedBucket) and self.name == other.name

    def __hash__(self):
        return hash(('fixed', self.name))

    def __repr__(self):
        return 'FixedBucket({!r})'.format(self.name)


class MonthYearBucket(Bucket):
    """
    A bucket for every note modified in a given month of a given year.
    """

    def __init__(self, year: int, month: int):
        self.year: int = year
        self.month: int = month

    def label(self, month_names: MonthNames) -> str:
        return month_names.label(self.year, self.month)

    def sort_key(self) -> tuple:
        # Negated so that ascending order puts the most recent month first.
        return 1, -DateUtil.month_year_sort_key(self.year, self.month)

    def __eq__(self, other):
        return isinstance(other, MonthYearBucket) and (self.year, self.month) == (other.year, other.month)

    def __hash__(self):
        return hash(('month', self.year, self.month))

    def __repr__(self):
        return 'MonthYearBucket({0}, {1})'.format(self.year, self.month)


TODAY = FixedBucket('Today', 0)
YESTERDAY = FixedBucket('Yesterday', 1)
EARLIER_THIS_MONTH = FixedBucket('Earlier this month', 2)


def classify(modified_date: datetime, now: datetime) -> Bucket:
    """
    Find the bucket for a single modification date.

    :param modified_date: when the note was modified.
    :param now: the current moment.

    :return: the bucket the note belongs to.
    """
    yesterday = now - timedelta(days=1)
    if DateUtil.is_same_day(modified_date, now):
        return TODAY
    if DateUtil.is_same_day(modified_date, yesterday):
        return YESTERDAY
    if DateUtil.is_same_month(modified_date, now):
        return EARLIER_THIS_MONTH
    return MonthYearBucket(modified_date.year, modified_date.month)


def group_notes_into_buckets(notes: Iterable[Note], now: datetime | None = None) -> List[tuple[Bucket, List[Note]]]:
    """
    Partition notes by modification date.

    :param notes: the notes to group. Notes keep their relative order within a bucket.
    :param now: the current moment. Defaults to the current local time.

    :return: a list of ``(bucket, notes)`` pairs. Fixed buckets come first, then months, most recent first. Empty
        buckets are omitted.
    """
    if now is None:
        now = datetime.now()
    groups: Dict[Bucket, List[Note]] = {}
    for note in notes:
        modified_date = DateUtil.from_epoch(note.modified, now.tzinfo)
        groups.setdefault(classify(modified_date, now), []).append(note)
    return sorted(groups.items(), key=lambda item: item[0].sort_key())


def group_notes_by_date(notes: Iterable[Note],
                        now: datetime | None = None,
                        month_names: MonthNames | None = None) -> Dict[str, List[Note]]:
    """
    Group notes by modification date, keyed by the bucket label.

    :param notes: the notes to group.
    :param now: the current moment. Defaults to the current local time.
    :param month_names: month names for the month/year labels. Defaults to English.

    :return: an ordered dictionary of bucket label to notes, e.g. ``{'Today': [...], 'May 2024': [...]}``.
    """
    if month_names is None:
        month_names = MonthNames()
    return {bucket.label(month_names): bucket_notes for bucket, bucket_notes in group_notes_into_buckets(notes, now)}


def flatten_groups(groups: Dict[str, List[Note]]) -> List[Note]:
    return [note for bucket_notes in groups.values() for note in bucket_notes]

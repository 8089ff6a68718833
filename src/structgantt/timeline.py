from __future__ import annotations

import calendar
import datetime as _dt
from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable, Iterator

# Range lengths (in day-steps) below which a finer header scale is used.
DAY_SCALE_LIMIT = 14
WEEK_SCALE_LIMIT = 60


class InsufficientDataError(Exception):
    """Raised when the records do not span enough days to draw a timeline."""


class Granularity(Enum):
    DAY = "day"
    WEEK = "week"
    MONTH = "month"

    def label(self, day: _dt.date) -> str:
        """Header label of the bucket the given day falls into."""
        if self is Granularity.DAY:
            return str(day.day)
        if self is Granularity.WEEK:
            return f"{day.isocalendar()[1]:02d}"
        return calendar.month_name[day.month]


@dataclass(frozen=True)
class DateRange:
    """
    Inclusive pair of calendar dates bounding the timeline.

    Endpoints are swapped on construction when given in reverse. `days` counts
    the day-steps from start up to (not including) end, which is also the
    number of day columns the timeline is drawn with.
    """

    start: _dt.date
    end: _dt.date
    skip_weekends: bool = False

    def __post_init__(self) -> None:
        if self.start > self.end:
            start, end = self.end, self.start
            object.__setattr__(self, "start", start)
            object.__setattr__(self, "end", end)

    @property
    def days(self) -> int:
        return day_distance(self.start, self.end, self.skip_weekends)


@dataclass(frozen=True)
class HeaderBucket:
    label: str
    span: int


@dataclass(frozen=True)
class RowSpan:
    """Day columns before the task, covered by the task, and after it."""

    pre: int
    during: int
    after: int

    @property
    def total(self) -> int:
        return self.pre + self.during + self.after


def compute_range(
    records: Iterable[Any],
    start_field: str,
    end_field: str,
    skip_weekends: bool = False,
) -> DateRange:
    """
    Return the smallest DateRange holding every start and end date of the records.

    Absent values are ignored and times of day are cut off. Raises
    InsufficientDataError when the result covers one day-step or less.
    """

    min_date: _dt.date | None = None
    max_date: _dt.date | None = None

    for record in records:
        for name in (start_field, end_field):
            value = as_date(_field_value(record, name))
            if value is None:
                continue
            if min_date is None or value < min_date:
                min_date = value
            if max_date is None or value > max_date:
                max_date = value

    if min_date is None or max_date is None:
        raise InsufficientDataError("No dates found to create a range")

    date_range = DateRange(min_date, max_date, skip_weekends)
    if date_range.days <= 1:
        raise InsufficientDataError("Not enough variation in dates to create a range")
    return date_range


def choose_granularity(date_range: DateRange) -> Granularity:
    """Pick the header scale from the range length alone."""
    days = date_range.days
    if days < DAY_SCALE_LIMIT:
        return Granularity.DAY
    if days < WEEK_SCALE_LIMIT:
        return Granularity.WEEK
    return Granularity.MONTH


def build_headers(date_range: DateRange, granularity: Granularity) -> list[HeaderBucket]:
    """
    Group the days of the range into header buckets, in chronological order.

    Consecutive days sharing a label form one bucket. The same label may come
    back later as a separate bucket (e.g. a week number seen again a year on).
    """

    buckets: list[HeaderBucket] = []
    current: str | None = None
    count = 0

    for day in _walk_days(date_range.start, date_range.end, date_range.skip_weekends):
        label = granularity.label(day)
        if label == current:
            count += 1
            continue
        if current is not None:
            buckets.append(HeaderBucket(current, count))
        current, count = label, 1

    if current is not None:
        buckets.append(HeaderBucket(current, count))
    return buckets


def compute_row_span(date_range: DateRange, task_start: Any, task_end: Any) -> RowSpan:
    """
    Split the range into the day columns before, during and after one task.

    A task missing either date is drawn as an empty row.
    """

    start = as_date(task_start)
    end = as_date(task_end)
    skip = date_range.skip_weekends

    if start is None or end is None:
        return RowSpan(date_range.days, 0, 0)

    return RowSpan(
        pre=day_distance(date_range.start, start, skip),
        during=day_distance(start, end, skip),
        after=day_distance(end, date_range.end, skip),
    )


def day_distance(a: _dt.date, b: _dt.date, skip_weekends: bool = False) -> int:
    """
    Count the days stepped from the earlier date up to (not including) the later one.

    With skip_weekends, Saturdays and Sundays are not counted.
    """

    if a > b:
        a, b = b, a
    if not skip_weekends:
        return (b - a).days
    return sum(1 for _ in _walk_days(a, b, skip_weekends=True))


def as_date(value: Any) -> _dt.date | None:
    """Reduce a date, datetime or ISO string to its calendar date; empty values give None."""
    if value is None:
        return None
    if isinstance(value, _dt.datetime):
        return value.date()
    if isinstance(value, _dt.date):
        return value
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        # cut off time
        return _dt.date.fromisoformat(text[:10])
    raise TypeError(f"Unsupported date value: {value!r}")


def _walk_days(start: _dt.date, end: _dt.date, skip_weekends: bool) -> Iterator[_dt.date]:
    one_day = _dt.timedelta(days=1)
    day = start
    while day < end:
        if not (skip_weekends and day.isoweekday() >= 6):
            yield day
        day += one_day


def _field_value(record: Any, name: str) -> Any:
    getter = getattr(record, "get", None)
    if callable(getter):
        return getter(name)
    return getattr(record, name, None)

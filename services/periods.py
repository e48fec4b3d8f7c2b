"""
Period resolution for the hospital statistics report.

Turns the requested period (a whole year, a quarter or a single month) into
a concrete half-open date range, the ordered bucket labels the counts are
attributed to, and the calendar field the store should group by.
"""

import calendar
import re
from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import Optional, Tuple

from exceptions import InvalidParameter

MONTH_ABBREVIATIONS = (
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


class PeriodMode(str, Enum):
    YEAR = "year"
    QUARTER = "quarter"
    MONTH = "month"


class Granularity(str, Enum):
    MONTH = "month"  # month of year, 1..12
    DAY = "day"  # day of month, 1..N


def parse_int(value) -> Optional[int]:
    """Parse the leading integer of a form value, or None when there is none."""
    if value is None:
        return None
    if isinstance(value, int):
        return value
    match = _LEADING_INT.match(str(value))
    return int(match.group(1)) if match else None


@dataclass(frozen=True)
class PeriodSpec:
    mode: str
    year: int
    quarter: Optional[int] = None
    month: Optional[int] = None

    @classmethod
    def from_form(cls, type=None, year=None, quarter=None, month=None, today: Optional[date] = None) -> "PeriodSpec":
        mode = (str(type) if type is not None else "").strip().lower() or PeriodMode.YEAR.value
        parsed_year = parse_int(year)
        if not parsed_year or parsed_year < 1:
            # Absent or unparseable years default to the current calendar year.
            parsed_year = (today or date.today()).year
        return cls(mode=mode, year=parsed_year, quarter=parse_int(quarter), month=parse_int(month))


@dataclass(frozen=True)
class DateRange:
    start: datetime
    end: datetime  # exclusive


@dataclass(frozen=True)
class ResolvedPeriod:
    spec: PeriodSpec
    date_range: DateRange
    buckets: Tuple[str, ...]
    label: str
    granularity: Granularity
    start_month: int = 0  # 0-indexed first month of a quarter

    @property
    def n(self) -> int:
        return len(self.buckets)


def _first_of_month(year: int, month_index: int) -> datetime:
    # month_index is 0-based and may roll over into the next year
    return datetime(year + month_index // 12, month_index % 12 + 1, 1)


def resolve_period(spec: PeriodSpec) -> ResolvedPeriod:
    """Resolve a period request into its date range, buckets and label.

    Raises InvalidParameter for an unknown mode, or a quarter/month that is
    missing or out of range for the chosen mode.
    """
    mode = spec.mode.value if isinstance(spec.mode, PeriodMode) else spec.mode

    if mode not in (PeriodMode.YEAR.value, PeriodMode.QUARTER.value, PeriodMode.MONTH.value):
        raise InvalidParameter("type")
    if not 1 <= spec.year <= 9998:
        raise InvalidParameter("year")

    year = spec.year

    if mode == PeriodMode.YEAR.value:
        return ResolvedPeriod(
            spec=spec,
            date_range=DateRange(datetime(year, 1, 1), datetime(year + 1, 1, 1)),
            buckets=MONTH_ABBREVIATIONS,
            label=f"Year {year}",
            granularity=Granularity.MONTH,
        )

    if mode == PeriodMode.QUARTER.value:
        quarter = spec.quarter
        if quarter is None or not 1 <= quarter <= 4:
            raise InvalidParameter("quarter")
        start_month = (quarter - 1) * 3
        return ResolvedPeriod(
            spec=spec,
            date_range=DateRange(_first_of_month(year, start_month), _first_of_month(year, start_month + 3)),
            buckets=MONTH_ABBREVIATIONS[start_month:start_month + 3],
            label=f"Quarter {quarter} / {year}",
            granularity=Granularity.MONTH,
            start_month=start_month,
        )

    month = spec.month
    if month is None or not 1 <= month <= 12:
        raise InvalidParameter("month")
    days_in_month = calendar.monthrange(year, month)[1]
    return ResolvedPeriod(
        spec=spec,
        date_range=DateRange(_first_of_month(year, month - 1), _first_of_month(year, month)),
        buckets=tuple(str(day) for day in range(1, days_in_month + 1)),
        label=f"Month {month}/{year}",
        granularity=Granularity.DAY,
    )


def bucket_index(bucket_id: int, period: ResolvedPeriod) -> int:
    """Map a grouped bucket id (month number or day of month) onto its array index.

    The result may fall outside [0, n) for ids that do not belong to the
    period; callers discard those.
    """
    if period.spec.mode == PeriodMode.QUARTER.value:
        return bucket_id - (period.start_month + 1)
    return bucket_id - 1

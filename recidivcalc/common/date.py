# Recidiviz - a data platform for criminal justice reform
# Copyright (C) 2025 Recidiviz, Inc.
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License
# along with this program.  If not, see <https://www.gnu.org/licenses/>.
# =============================================================================
"""Utils for parsing and manipulating the dates that drive expungement and
recidivism calculations.

Dates are kept as datetime.date objects in memory and exchanged as ISO
(YYYY-MM-DD) strings, which compare lexicographically in the same order as the
dates they represent.
"""
import datetime
import re
from typing import Optional, Union

from dateutil.relativedelta import relativedelta

ISO_DATE_FORMAT = "%Y-%m-%d"

_ISO_DATE_REGEX = re.compile(r"^\d{4}-\d{2}-\d{2}$")

DateOrStr = Union[datetime.date, str]


# Date Parsing


def is_date_str(potential_date_str: str) -> bool:
    """Returns True if the string is an ISO-formatted date, (e.g. '2019-09-25')."""
    if not _ISO_DATE_REGEX.match(potential_date_str):
        return False
    try:
        datetime.datetime.strptime(potential_date_str, ISO_DATE_FORMAT)
        return True
    except ValueError:
        return False


def parse_iso_date(date_str: str) -> datetime.date:
    """Parses an ISO-formatted (YYYY-MM-DD) date string, throwing a ValueError
    with the offending value if it cannot be parsed."""
    if not is_date_str(date_str):
        raise ValueError(f"Expected date in YYYY-MM-DD format, found [{date_str}].")
    return datetime.datetime.strptime(date_str, ISO_DATE_FORMAT).date()


def parse_opt_iso_date(date_str: Optional[str]) -> Optional[datetime.date]:
    """Parses an optional ISO date string. Empty strings are treated as unset, which
    is how blank date inputs arrive from data entry."""
    if date_str is None or not date_str.strip():
        return None
    return parse_iso_date(date_str.strip())


def as_date(value: DateOrStr) -> datetime.date:
    if isinstance(value, datetime.datetime):
        return value.date()
    if isinstance(value, datetime.date):
        return value
    return parse_iso_date(value)


def format_opt_date(value: Optional[datetime.date], default: str = "") -> str:
    """Formats an optional date as an ISO string, or |default| if it is unset."""
    return value.isoformat() if value else default


# Date Manipulation


def add_years(date: datetime.date, years: int) -> datetime.date:
    """Returns the date |years| calendar years after |date|. A February 29th start
    date lands on February 28th in non-leap years."""
    return date + relativedelta(years=years)


def add_months(date: datetime.date, months: int) -> datetime.date:
    """Returns the date |months| calendar months after |date|, clamped to the last
    day of the target month when the day does not exist there."""
    return date + relativedelta(months=months)


def later_of(
    date_1: Optional[datetime.date], date_2: Optional[datetime.date]
) -> Optional[datetime.date]:
    """Returns the later of two optional dates, or whichever one is set."""
    if date_1 is None:
        return date_2
    if date_2 is None:
        return date_1
    return max(date_1, date_2)


def is_strictly_before(
    date: Optional[datetime.date], other: Optional[datetime.date]
) -> bool:
    """Returns True if |date| falls strictly before |other|. Returns False if either
    date is unset."""
    if date is None or other is None:
        return False
    return date < other


def age_on_date(birth_date: datetime.date, on_date: datetime.date) -> int:
    """Returns the age in full years of a person born on |birth_date| as of
    |on_date|."""
    return relativedelta(on_date, birth_date).years

"""
Story Date Module.

Normalizes the three textual date forms used by story events into values the
timeline can sort, group and display:

- BC dates: ``BC 500`` or ``公元前 500``.
- Gregorian dates: ``YYYY-MM-DD`` with an optional ``HH:MM:SS`` suffix.
- Custom era dates: ``<era name> <value>[.<MMDDhhmmss>]`` where the era name
  is looked up in a user-defined era order.

Functions:
    normalize_date: Date string to an exact sortable number.
    get_day_key: Date string to the key used to stack same-day events.
    format_display_date: Date string to a human readable label.
    format_day_key: Day key to a ruler label.
    compose_date: Structured parts to a date string.
    decompose_date: Date string back to structured parts.
    next_gregorian_day: The calendar day after a Gregorian date.
"""

import logging
import re
from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone
from decimal import Decimal, InvalidOperation, localcontext
from typing import List, Optional, Tuple

from src.app.constants import GREGORIAN_ANCHOR_ERA

logger = logging.getLogger(__name__)

# Sorts after every recognized date.
UNSORTABLE = Decimal("Infinity")

# Must exceed the largest value.fraction magnitude used inside one era.
ERA_MULTIPLIER = Decimal("1e14")

# Enough digits for the era offset plus year and a 10-digit fraction.
KEY_PRECISION = 40

FRACTION_WIDTH = 10
NO_DATE_KEY = "NoDate"
NO_DATE_LABEL = "无日期"

_BC_PATTERN = re.compile(r"^(?:公元前|BC)\s*(\d+(\.\d+)?)", re.IGNORECASE)
_BC_DAY_PATTERN = re.compile(r"^(?:公元前|BC)\s*(\d+)", re.IGNORECASE)
_GREGORIAN_PATTERN = re.compile(
    r"^(\d{4})-(\d{2})-(\d{2})(?:\s+(\d{2}):(\d{2}):(\d{2}))?"
)
_GREGORIAN_DAY_PATTERN = re.compile(r"^(\d{4}-\d{2}-\d{2})")
_LEADING_NUMBER = re.compile(r"^\s*([+-]?(?:\d+\.?\d*|\.\d+))")

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def _anchor_index(era_order: List[str]) -> int:
    try:
        return era_order.index(GREGORIAN_ANCHOR_ERA)
    except ValueError:
        return 0


def _match_era(date_string: str, era_order: List[str]) -> Optional[Tuple[int, str]]:
    """
    Finds the era a date string starts with.

    The first era in list order whose name prefixes the string wins, so an
    era named "Age" shadows a later "Age of Myth". Keeping era names
    prefix-free is the caller's responsibility.

    Returns:
        Optional[Tuple[int, str]]: (era index, era name) or None.
    """
    for index, era in enumerate(era_order):
        if era and date_string.startswith(era):
            return index, era
    return None


def _split_era_value(value_str: str) -> Tuple[str, str]:
    parts = value_str.split(".")
    year = parts[0]
    fraction = parts[1] if len(parts) > 1 else ""
    return year, fraction


def _parse_leading_decimal(text: str) -> Optional[Decimal]:
    match = _LEADING_NUMBER.match(text)
    if not match:
        return None
    try:
        return Decimal(match.group(1))
    except InvalidOperation:
        return None


def normalize_date(date_string: str, era_order: List[str]) -> Decimal:
    """
    Converts a date string into a sortable number.

    Args:
        date_string: The date string to parse.
        era_order: Era names in chronological order. The position of the
            Gregorian anchor era decides which eras come before and after
            Gregorian dates.

    Returns:
        Decimal: Exact sort key. BC dates are negative years, Gregorian dates are
        UTC epoch milliseconds, era dates are offset by their distance from
        the anchor era. Unrecognized input returns UNSORTABLE.
    """
    if not date_string:
        return UNSORTABLE

    trimmed = date_string.strip()

    bc_match = _BC_PATTERN.match(trimmed)
    if bc_match:
        return -Decimal(bc_match.group(1))

    gregorian_match = _GREGORIAN_PATTERN.match(trimmed)
    if gregorian_match:
        year, month, day, hour, minute, second = (
            int(group) if group is not None else 0
            for group in gregorian_match.groups()
        )
        try:
            moment = datetime(
                year, month, day, hour, minute, second, tzinfo=timezone.utc
            )
        except ValueError:
            logger.debug(f"Unsortable Gregorian date: {date_string!r}")
            return UNSORTABLE
        return Decimal((moment - _EPOCH) // timedelta(milliseconds=1))

    era_match = _match_era(trimmed, era_order)
    if era_match:
        index, era = era_match
        value_str = trimmed[len(era) :].strip()
        year, fraction = _split_era_value(value_str)
        padded = fraction.ljust(FRACTION_WIDTH, "0")
        numeric = _parse_leading_decimal(f"{year}.{padded}")
        with localcontext() as ctx:
            ctx.prec = KEY_PRECISION
            era_base = (index - _anchor_index(era_order)) * ERA_MULTIPLIER
            return era_base + (numeric or Decimal(0))

    return UNSORTABLE


def get_day_key(date_string: str) -> str:
    """
    Returns the key that groups events occurring on the same day.

    Sub-day detail (time of day, the fractional part of an era value) is
    discarded.

    Args:
        date_string: The date string.

    Returns:
        str: ``BC-<n>``, ``YYYY-MM-DD`` or ``<era> <value>``.
    """
    if not date_string:
        return NO_DATE_KEY

    trimmed = date_string.strip()

    bc_match = _BC_DAY_PATTERN.match(trimmed)
    if bc_match:
        return f"BC-{bc_match.group(1)}"

    gregorian_match = _GREGORIAN_DAY_PATTERN.match(trimmed)
    if gregorian_match:
        return gregorian_match.group(1)

    space_index = trimmed.find(" ")
    if space_index > 0:
        era_part = trimmed[:space_index]
        year_part = trimmed[space_index + 1 :].split(".")[0]
        return f"{era_part} {year_part}"

    return trimmed


def format_display_date(date_string: str, era_order: List[str]) -> str:
    """
    Formats a date string for display.

    Args:
        date_string: The date string.
        era_order: Known era names.

    Returns:
        str: Localized label, or the input unchanged if unrecognized.
    """
    if not date_string:
        return NO_DATE_LABEL

    trimmed = date_string.strip()

    gregorian_match = _GREGORIAN_PATTERN.match(trimmed)
    if gregorian_match:
        year, month, day, hour, minute, second = gregorian_match.groups()
        formatted = f"{year}年{month}月{day}日"
        if hour and minute and second:
            formatted += f" {hour}:{minute}:{second}"
        return formatted

    era_match = _match_era(trimmed, era_order)
    if era_match:
        _, era = era_match
        value_str = trimmed[len(era) :].strip()
        year, fraction = _split_era_value(value_str)
        if fraction:
            parts = DateParts.from_fraction(year, fraction)
            formatted = f"{era} {year}年{parts.month}月{parts.day}日"
            if parts.has_time():
                formatted += f" {parts.hour}:{parts.minute}:{parts.second}"
            return formatted
        return f"{era} {year}年"

    return date_string


def format_day_key(day_key: str) -> str:
    """
    Formats a day key as a ruler label.

    Args:
        day_key: A key produced by get_day_key.

    Returns:
        str: The label shown above the day column.
    """
    if day_key.startswith("BC-"):
        return f"公元前 {day_key[3:]}"

    gregorian_match = _GREGORIAN_PATTERN.match(day_key)
    if gregorian_match:
        year, month, day = gregorian_match.groups()[:3]
        return f"{year}年{month}月{day}日"

    parts = day_key.split(" ")
    if len(parts) > 1:
        return f"{' '.join(parts[:-1])} {parts[-1]}年"
    return day_key


@dataclass
class DateParts:
    """
    Structured date fields as entered in the event form.

    All fields are strings so that partially filled forms keep whatever the
    user typed. Padding happens in compose_date.
    """

    year: str = ""
    month: str = ""
    day: str = ""
    hour: str = ""
    minute: str = ""
    second: str = ""

    @classmethod
    def from_fraction(cls, year: str, fraction: str) -> "DateParts":
        """
        Decodes a ``MMDDhhmmss`` era fraction, right-padding it with zeros.
        """
        padded = fraction.ljust(FRACTION_WIDTH, "0")
        return cls(
            year=year,
            month=padded[0:2],
            day=padded[2:4],
            hour=padded[4:6],
            minute=padded[6:8],
            second=padded[8:10],
        )

    def has_time(self) -> bool:
        return any(value not in ("", "00") for value in self.time_fields())

    def time_fields(self) -> Tuple[str, str, str]:
        return self.hour, self.minute, self.second


def _pad(value: str, width: int = 2) -> str:
    return (value or "").rjust(width, "0")


def compose_date(
    era: str,
    parts: DateParts,
    show_time: bool = False,
    anchor_era: str = GREGORIAN_ANCHOR_ERA,
) -> str:
    """
    Builds a date string from form fields.

    Args:
        era: Selected era name. The anchor era produces a Gregorian date.
        parts: Entered date fields.
        show_time: Whether the time-of-day fields are in use.
        anchor_era: Name of the Gregorian anchor era.

    Returns:
        str: ``YYYY-MM-DD[ HH:MM:SS]`` or ``<era> <year>.<MMDDhhmmss>``.
    """
    if era == anchor_era:
        composed = f"{_pad(parts.year, 4)}-{_pad(parts.month)}-{_pad(parts.day)}"
        if show_time and any(parts.time_fields()):
            composed += (
                f" {_pad(parts.hour)}:{_pad(parts.minute)}:{_pad(parts.second)}"
            )
        return composed.strip()

    year = parts.year or "0"
    if show_time:
        time_part = f"{_pad(parts.hour)}{_pad(parts.minute)}{_pad(parts.second)}"
    else:
        time_part = "000000"
    return f"{era} {year}.{_pad(parts.month)}{_pad(parts.day)}{time_part}".strip()


def decompose_date(
    date_string: str,
    era_order: List[str],
    anchor_era: str = GREGORIAN_ANCHOR_ERA,
) -> Optional[Tuple[str, DateParts, bool]]:
    """
    Splits a date string back into form fields.

    Args:
        date_string: The stored date string.
        era_order: Known era names, checked before the Gregorian form.
        anchor_era: Name reported for Gregorian dates.

    Returns:
        Optional[Tuple[str, DateParts, bool]]: (era, parts, show_time), or
        None when the string is in neither form.
    """
    if not date_string:
        return None

    era_match = _match_era(date_string, era_order)
    if era_match:
        _, era = era_match
        value_str = date_string[len(era) :].strip()
        year, fraction = _split_era_value(value_str)
        parts = DateParts.from_fraction(year, fraction)
        return era, parts, parts.has_time()

    gregorian_match = _GREGORIAN_PATTERN.match(date_string)
    if gregorian_match:
        year, month, day, hour, minute, second = gregorian_match.groups()
        parts = DateParts(
            year=year,
            month=month,
            day=day,
            hour=hour or "00",
            minute=minute or "00",
            second=second or "00",
        )
        return anchor_era, parts, hour is not None

    return None


def next_gregorian_day(date_string: str) -> Optional[str]:
    """
    Returns midnight of the day after a Gregorian date.

    Args:
        date_string: A date string starting with ``YYYY-MM-DD``.

    Returns:
        Optional[str]: ``YYYY-MM-DD 00:00:00``, or None when the string does
        not start with a valid Gregorian date.
    """
    match = _GREGORIAN_DAY_PATTERN.match(date_string.strip())
    if not match:
        return None
    try:
        following = date.fromisoformat(match.group(1)) + timedelta(days=1)
    except (ValueError, OverflowError):
        return None
    return midnight_of(following)


def midnight_of(day: date) -> str:
    """Formats a calendar day as a Gregorian date string at midnight."""
    return f"{day.isoformat()} 00:00:00"

"""Work hours between two instants, skipping weekends and stored holidays."""

from __future__ import annotations

import logging
import re
import sqlite3
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone, tzinfo
from typing import Any, Mapping
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from workhours.db import Database

logger = logging.getLogger(__name__)

DEFAULT_START_OF_DAY = "09:00:00"
DEFAULT_END_OF_DAY = "17:00:00"

_ONE_DAY = timedelta(days=1)
_RFC3339 = re.compile(
    r"(\d{4})-(\d{2})-(\d{2})[Tt ](\d{2}):(\d{2}):(\d{2})(?:\.(\d+))?"
    r"([Zz]|[+-](\d{2}):(\d{2}))"
)
_CLOCK = re.compile(r"(\d{2}):(\d{2}):(\d{2})")
_INTEGER = re.compile(r"[+-]?\d+")


class InvalidRequestError(ValueError):
    """The request cannot be answered as given."""


@dataclass
class HolidayInput:
    """A holiday as submitted for a country."""

    date: str
    description: str = ""

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> HolidayInput:
        """Build a holiday from a JSON object; ``date`` is required."""
        if not isinstance(data, Mapping):
            raise InvalidRequestError("holiday must be a JSON object")
        return cls(
            date=_text(data, "date"),
            description=_text(data, "description", ""),
        )

    def to_dict(self) -> dict[str, str]:
        """Return the holiday as a JSON-ready mapping."""
        return {"date": self.date, "description": self.description}


@dataclass
class WorkHoursRequest:
    """Parameters of a work hours calculation.

    Either ``end_date`` or ``duration_seconds`` gives the end; ``end_date`` wins
    when both are set.
    """

    start_date: str
    end_date: str | None = None
    duration_seconds: int | None = None
    start_of_day: str = DEFAULT_START_OF_DAY
    end_of_day: str = DEFAULT_END_OF_DAY
    country: str = ""
    timezone: str = ""

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> WorkHoursRequest:
        """Build a request from JSON fields or query parameters."""
        if not isinstance(data, Mapping):
            raise InvalidRequestError("request must be a JSON object")
        end_date = _first_present(data, "endDate", "end_date")
        duration = _first_present(data, "durationSeconds", "duration_seconds")
        if end_date is not None:
            if not isinstance(end_date, str):
                raise InvalidRequestError("endDate must be a string")
            duration_seconds = None
        elif duration is not None:
            duration_seconds = _as_int(duration)
        else:
            raise InvalidRequestError("Either endDate or durationSeconds must be provided")
        return cls(
            start_date=_text(data, "startDate"),
            end_date=end_date,
            duration_seconds=duration_seconds,
            start_of_day=_text(data, "startOfDay", DEFAULT_START_OF_DAY),
            end_of_day=_text(data, "endOfDay", DEFAULT_END_OF_DAY),
            country=_text(data, "country", ""),
            timezone=_text(data, "timezone", ""),
        )


@dataclass(frozen=True)
class WorkHoursResponse:
    """Result of a work hours calculation."""

    work_hours: float
    work_minutes: float
    work_seconds: float
    start_date: str
    end_date: str

    def to_dict(self) -> dict[str, Any]:
        """Return the result as a JSON-ready mapping."""
        return {
            "work_hours": self.work_hours,
            "work_minutes": self.work_minutes,
            "work_seconds": self.work_seconds,
            "start_date": self.start_date,
            "end_date": self.end_date,
        }


def calculate_work_hours(database: Database, request: WorkHoursRequest) -> WorkHoursResponse:
    """Count the work hours between the request's start and end.

    Dates keep their wall-clock time and are read in the request's timezone;
    weekends and the country's holidays count for nothing.
    """
    logger.debug("Processing work hours calculation: %r", request)

    start_naive = _parse_date(request.start_date, "Invalid start date format")
    start_of_day = _parse_clock(request.start_of_day, "Invalid start time format")
    end_of_day = _parse_clock(request.end_of_day, "Invalid end time format")
    zone = _load_timezone(request.timezone)

    start = _localize(start_naive, zone)
    if request.end_date is not None:
        end = _localize(_parse_date(request.end_date, "Invalid end date format"), zone)
    elif request.duration_seconds is not None:
        try:
            end = start + timedelta(seconds=request.duration_seconds)
        except OverflowError as exc:
            raise InvalidRequestError("Duration is out of range") from exc
    else:
        raise InvalidRequestError("Either endDate or durationSeconds must be provided")

    if start >= end:
        raise InvalidRequestError("Start date must be strictly before end date")

    start_local = start.astimezone(zone)
    end_local = end.astimezone(zone)
    is_holiday = _holiday_checker(database, request.country.lower())
    full_day = (_clock_seconds(end_of_day) - _clock_seconds(start_of_day)) / 3600.0

    work_hours = 0.0
    current = start
    while (current_local := current.astimezone(zone)).date() <= end_local.date():
        day = current_local.date()
        if current_local.weekday() < 5 and not is_holiday(day):
            work_hours += _day_hours(
                day, start, end, start_local, end_local, start_of_day, end_of_day, zone, full_day
            )
        current += _ONE_DAY

    return WorkHoursResponse(
        work_hours=work_hours,
        work_minutes=work_hours * 60.0,
        work_seconds=work_hours * 3600.0,
        start_date=_format_rfc3339(start_local),
        end_date=_format_rfc3339(end_local),
    )


def _day_hours(
    day: date,
    start: datetime,
    end: datetime,
    start_local: datetime,
    end_local: datetime,
    start_of_day: time,
    end_of_day: time,
    zone: tzinfo,
    full_day: float,
) -> float:
    day_start = _localize(datetime.combine(day, start_of_day), zone)
    day_end = _localize(datetime.combine(day, end_of_day), zone)
    on_start = day == start_local.date()
    on_end = day == end_local.date()
    start_time = start_local.time()
    end_time = end_local.time()

    if on_start and on_end:
        if start_time > end_of_day or end_time < start_of_day:
            return 0.0
        effective_start = day_start if start_time < start_of_day else start
        effective_end = day_end if end_time > end_of_day else end
        return _whole_seconds(effective_end - effective_start) / 3600.0
    if on_start:
        if start_time >= end_of_day:
            return 0.0
        effective_start = day_start if start_time < start_of_day else start
        return _whole_seconds(day_end - effective_start) / 3600.0
    if on_end:
        if end_time < start_of_day:
            return 0.0
        effective_end = day_end if end_time > end_of_day else end
        return _whole_seconds(effective_end - day_start) / 3600.0
    return full_day


def _holiday_checker(database: Database, country: str):
    try:
        holidays = database.get_holidays_by_country(country)
    except sqlite3.Error:
        logger.warning("Could not read holidays for %r", country, exc_info=True)
        holidays = []

    dates: set[date] = set()
    for holiday in holidays:
        try:
            dates.add(_parse_rfc3339(holiday.date).date())
        except ValueError:
            # An unreadable holiday date matches every day.
            return lambda _day: True
    return dates.__contains__


def _parse_rfc3339(text: str) -> datetime:
    """Return the wall-clock time written in an RFC 3339 string, without its offset."""
    match = _RFC3339.fullmatch(text)
    if match is None:
        raise ValueError(f"{text!r} is not an RFC 3339 date-time")
    year, month, day, hour, minute, second = (int(group) for group in match.groups()[:6])
    fraction = match.group(7) or ""
    if match.group(9) is not None and (int(match.group(9)) > 23 or int(match.group(10)) > 59):
        raise ValueError(f"{text!r} has an invalid offset")
    microsecond = int((fraction + "000000")[:6])
    return datetime(year, month, day, hour, minute, second, microsecond)


def _parse_date(text: str, message: str) -> datetime:
    try:
        return _parse_rfc3339(text)
    except ValueError as exc:
        raise InvalidRequestError(f"{message}: {exc}") from exc


def _parse_clock(text: str, message: str) -> time:
    match = _CLOCK.fullmatch(text)
    if match is None:
        raise InvalidRequestError(f"{message}: {text!r} is not HH:MM:SS")
    try:
        return time(*(int(group) for group in match.groups()))
    except ValueError as exc:
        raise InvalidRequestError(f"{message}: {exc}") from exc


def _load_timezone(name: str) -> tzinfo:
    if not name:
        raise InvalidRequestError("Invalid timezone: empty name")
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError, OSError) as exc:
        if name == "UTC":
            return timezone.utc
        raise InvalidRequestError(f"Invalid timezone: {name!r}") from exc


def _localize(naive: datetime, zone: tzinfo) -> datetime:
    """Attach a zone to a wall-clock time and return the instant in UTC."""
    early = naive.replace(tzinfo=zone, fold=0)
    late = naive.replace(tzinfo=zone, fold=1)
    if early.utcoffset() != late.utcoffset():
        raise InvalidRequestError(
            f"Local time {naive.isoformat()} is ambiguous or does not exist in {zone}"
        )
    return early.astimezone(timezone.utc)


def _format_rfc3339(moment: datetime) -> str:
    if moment.microsecond == 0:
        timespec = "seconds"
    elif moment.microsecond % 1000 == 0:
        timespec = "milliseconds"
    else:
        timespec = "microseconds"
    return moment.isoformat(timespec=timespec)


def _whole_seconds(delta: timedelta) -> int:
    micros = delta // timedelta(microseconds=1)
    seconds = abs(micros) // 1_000_000
    return seconds if micros >= 0 else -seconds


def _clock_seconds(clock: time) -> float:
    return clock.hour * 3600 + clock.minute * 60 + clock.second + clock.microsecond / 1e6


def _first_present(data: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        if data.get(key) is not None:
            return data[key]
    return None


def _text(data: Mapping[str, Any], key: str, default: str | None = None) -> str:
    value = data.get(key)
    if value is None:
        if default is None:
            raise InvalidRequestError(f"missing field {key!r}")
        return default
    if not isinstance(value, str):
        raise InvalidRequestError(f"field {key!r} must be a string")
    return value


def _as_int(value: Any) -> int:
    if isinstance(value, bool):
        raise InvalidRequestError("durationSeconds must be an integer")
    if isinstance(value, int):
        return value
    if isinstance(value, str) and _INTEGER.fullmatch(value):
        return int(value)
    raise InvalidRequestError("durationSeconds must be an integer")
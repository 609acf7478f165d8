from datetime import timedelta

from config import max_idle_calendar_days, weeks_per_month
from date_utils import round_half_up
from models import Duration, DurationUnit, UnsupportedUnitError

MS_PER_HOUR = 60 * 60 * 1000

# --- Unit conversion ---

def _effective_hours_per_day(prefs):
    return 24 if prefs.is_calendar_mode else prefs.hours_per_day


def _unit_ms(unit, prefs):
    """Length of one *unit* in milliseconds under *prefs*."""
    unit = DurationUnit.parse(unit)
    hours_per_day = _effective_hours_per_day(prefs)
    if unit is DurationUnit.MILLISECONDS:
        return 1
    if unit is DurationUnit.SECONDS:
        return 1000
    if unit is DurationUnit.MINUTES:
        return 60 * 1000
    if unit is DurationUnit.HOURS:
        return MS_PER_HOUR
    if unit is DurationUnit.DAYS:
        return hours_per_day * MS_PER_HOUR
    if unit is DurationUnit.WEEKS:
        hours_per_week = 7 * 24 if prefs.is_calendar_mode else prefs.hours_per_week
        return hours_per_week * MS_PER_HOUR
    if unit is DurationUnit.MONTHS:
        return prefs.days_per_month * hours_per_day * MS_PER_HOUR
    raise UnsupportedUnitError(f"Unsupported duration unit: {unit!r}")


def duration_to_ms(duration, prefs):
    return duration.value * _unit_ms(duration.unit, prefs)


def ms_to_unit(ms, unit, prefs):
    return ms / _unit_ms(unit, prefs)


def convert_duration(duration, to_unit, prefs):
    """
    Convert *duration* into *to_unit*.

    Days, weeks and months follow the calendar preferences: in working mode a
    day is ``hours_per_day`` hours, in calendar mode it is 24 hours. Values are
    never rounded here.
    """
    to_unit = DurationUnit.parse(to_unit)
    if duration.unit is to_unit:
        return duration
    ms = duration_to_ms(duration, prefs)
    return Duration(ms_to_unit(ms, to_unit, prefs), to_unit)


# --- Date math ---

def calculate_finish_date(start_date, duration, prefs):
    if duration.value == 0:
        return start_date
    return start_date + timedelta(milliseconds=duration_to_ms(duration, prefs))


def calculate_duration(start_date, end_date, unit, prefs):
    """Duration between two dates; a span in days never drops below one day."""
    unit = DurationUnit.parse(unit)
    ms = (end_date - start_date) / timedelta(milliseconds=1)
    value = ms_to_unit(ms, unit, prefs)
    if unit is DurationUnit.DAYS:
        value = max(1, round_half_up(value))
    return Duration(value, unit)


# --- Working calendars ---

def _calendar_unit_hours(unit, calendar):
    """Working hours in one *unit* of a resource calendar."""
    unit = DurationUnit.parse(unit)
    if unit is DurationUnit.MILLISECONDS:
        return 1 / MS_PER_HOUR
    if unit is DurationUnit.SECONDS:
        return 1 / 3600
    if unit is DurationUnit.MINUTES:
        return 1 / 60
    if unit is DurationUnit.HOURS:
        return 1
    if unit is DurationUnit.DAYS:
        return calendar.hours_per_day
    if unit is DurationUnit.WEEKS:
        return calendar.hours_per_day * calendar.working_days_per_week
    if unit is DurationUnit.MONTHS:
        return calendar.hours_per_day * calendar.working_days_per_week * weeks_per_month
    raise UnsupportedUnitError(f"Unsupported duration unit: {unit!r}")


def calculate_duration_with_calendar(start_date, end_date, calendar, unit):
    """Sums the working hours of every day from start to end, inclusive."""
    total_hours = 0
    current = start_date
    while current <= end_date:
        total_hours += calendar.working_hours_on(current)
        current += timedelta(days=1)
    return Duration(total_hours / _calendar_unit_hours(unit, calendar), unit)


def calculate_finish_date_with_calendar(start_date, duration, calendar):
    """
    Walk forward from *start_date* one day at a time, spending each day's
    working hours, and return the day on which the duration is used up.
    Weekends and holidays cost nothing, so the finish lands after them.
    """
    remaining_hours = duration.value * _calendar_unit_hours(duration.unit, calendar)
    current = start_date
    idle_days = 0
    while remaining_hours > 0:
        hours = calendar.working_hours_on(current)
        if hours > 0:
            idle_days = 0
        else:
            idle_days += 1
            if idle_days > max_idle_calendar_days:
                raise ValueError(
                    f"Calendar has no working time within {max_idle_calendar_days} days of {current:%d-%m-%Y}."
                )
        remaining_hours -= hours
        if remaining_hours > 0:
            current += timedelta(days=1)
    return current

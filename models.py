from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Dict, Optional, Tuple

from config import (
    default_calendar_preferences,
    default_schedule_preferences,
    default_working_weekdays,
)


class UnsupportedUnitError(ValueError):
    """Raised when a duration unit is not one of DurationUnit."""


class DurationUnit(Enum):
    MILLISECONDS = "milliseconds"
    SECONDS = "seconds"
    MINUTES = "minutes"
    HOURS = "hours"
    DAYS = "days"
    WEEKS = "weeks"
    MONTHS = "months"

    @classmethod
    def parse(cls, unit):
        if isinstance(unit, cls):
            return unit
        try:
            return cls(unit)
        except ValueError:
            raise UnsupportedUnitError(f"Unsupported duration unit: {unit!r}")


class DurationMode(Enum):
    WORKING = "working"
    CALENDAR = "calendar"


class TaskType(Enum):
    FIXED_UNITS = "FixedUnits"
    FIXED_DURATION = "FixedDuration"
    FIXED_WORK = "FixedWork"


class ConstraintType(Enum):
    AS_SOON_AS_POSSIBLE = "AsSoonAsPossible"
    AS_LATE_AS_POSSIBLE = "AsLateAsPossible"
    MUST_START_ON = "MustStartOn"
    MUST_FINISH_ON = "MustFinishOn"
    START_NO_EARLIER_THAN = "StartNoEarlierThan"
    START_NO_LATER_THAN = "StartNoLaterThan"
    FINISH_NO_EARLIER_THAN = "FinishNoEarlierThan"
    FINISH_NO_LATER_THAN = "FinishNoLaterThan"


@dataclass(frozen=True)
class Duration:
    value: float
    unit: DurationUnit

    def __post_init__(self):
        object.__setattr__(self, "unit", DurationUnit.parse(self.unit))


@dataclass(frozen=True)
class CalendarPreferences:
    hours_per_day: float = default_calendar_preferences["hours_per_day"]
    hours_per_week: float = default_calendar_preferences["hours_per_week"]
    days_per_month: float = default_calendar_preferences["days_per_month"]
    duration_calculation_mode: DurationMode = DurationMode(
        default_calendar_preferences["duration_calculation_mode"]
    )

    def __post_init__(self):
        object.__setattr__(
            self, "duration_calculation_mode", DurationMode(self.duration_calculation_mode)
        )

    @property
    def is_calendar_mode(self):
        return self.duration_calculation_mode is DurationMode.CALENDAR


@dataclass(frozen=True)
class SchedulePreferences:
    new_tasks_start_today: bool = default_schedule_preferences["new_tasks_start_today"]
    duration_entered_in: str = default_schedule_preferences["duration_entered_in"]
    scheduling_rule: int = default_schedule_preferences["scheduling_rule"]
    effort_driven: bool = default_schedule_preferences["effort_driven"]
    honor_required_dates: bool = default_schedule_preferences["honor_required_dates"]
    work_unit: str = default_schedule_preferences["work_unit"]
    auto_link_tasks: bool = default_schedule_preferences["auto_link_tasks"]


# --- Working calendars ---

def _hours_between(start, end):
    """Hours between two "HH:MM" strings; an end before the start wraps past midnight."""
    start_h, start_m = (int(part) for part in start.split(":"))
    end_h, end_m = (int(part) for part in end.split(":"))
    hours = end_h - start_h
    if hours < 0:
        hours += 24
    return hours + (end_m - start_m) / 60


def _as_date(day):
    return day.date() if isinstance(day, datetime) else day


@dataclass(frozen=True)
class WorkingHours:
    start: str
    end: str
    break_start: Optional[str] = None
    break_end: Optional[str] = None

    @property
    def hours(self):
        hours = _hours_between(self.start, self.end)
        if self.break_start and self.break_end:
            hours -= _hours_between(self.break_start, self.break_end)
        return hours


@dataclass(frozen=True)
class CalendarException:
    date: date
    is_working: bool = False
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    name: str = ""


@dataclass(frozen=True)
class WorkCalendar:
    hours_per_day: float = 8
    working_days_per_week: int = 5
    working_weekdays: Tuple[int, ...] = default_working_weekdays
    working_hours: Dict[int, WorkingHours] = field(default_factory=dict)
    exceptions: Tuple[CalendarException, ...] = ()

    def _exception_on(self, day):
        day = _as_date(day)
        for exception in self.exceptions:
            if _as_date(exception.date) == day:
                return exception
        return None

    def is_working_day(self, day):
        exception = self._exception_on(day)
        if exception is not None:
            return exception.is_working
        return day.weekday() in self.working_weekdays

    def working_hours_on(self, day):
        """Working hours available on *day*, 0 for weekends and holidays."""
        if not self.is_working_day(day):
            return 0
        exception = self._exception_on(day)
        if exception is not None and exception.start_time and exception.end_time:
            return _hours_between(exception.start_time, exception.end_time)
        schedule = self.working_hours.get(day.weekday())
        if schedule is not None:
            return schedule.hours
        return self.hours_per_day


# --- Tasks ---

@dataclass(frozen=True)
class ResourceAssignment:
    resource_id: str
    units: Optional[float] = None


@dataclass(frozen=True)
class Task:
    id: str
    name: str
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    duration: int = 1
    progress: float = 0.0
    is_milestone: bool = False
    is_summary: bool = False
    level: int = 0
    parent_id: Optional[str] = None
    predecessors: Tuple[str, ...] = ()
    resource_assignments: Tuple[ResourceAssignment, ...] = ()
    constraint: Optional[ConstraintType] = None
    type: Optional[TaskType] = None

    def __post_init__(self):
        object.__setattr__(self, "predecessors", tuple(self.predecessors or ()))
        object.__setattr__(self, "resource_assignments", tuple(self.resource_assignments or ()))
        if self.constraint is not None:
            object.__setattr__(self, "constraint", ConstraintType(self.constraint))
        if self.type is not None:
            object.__setattr__(self, "type", TaskType(self.type))


import collections
import os

# --- Default Preferences ---

# Values used when a project does not supply its own calendar settings.
default_calendar_preferences = {
    "hours_per_day": 8,
    "hours_per_week": 40,
    "days_per_month": 20,
    "duration_calculation_mode": "working",
}

default_schedule_preferences = {
    "new_tasks_start_today": True,
    "duration_entered_in": "days",
    "scheduling_rule": 0,
    "effort_driven": True,
    "honor_required_dates": False,
    "work_unit": "hours",
    "auto_link_tasks": False,
}

# Python weekday numbers, Monday == 0.
default_working_weekdays = (0, 1, 2, 3, 4)

# --- Scheduling Rules ---

scheduling_rule_types = collections.OrderedDict([
    (0, 'FixedUnits'),
    (1, 'FixedDuration'),
    (2, 'FixedWork'),
])

# Constraints whose dates are authoritative when honor_required_dates is on.
required_date_constraints = frozenset(['MustStartOn', 'MustFinishOn'])

# --- Resource Units ---

# Assignment units above this are read as percentages (200 -> 2.0).
percent_threshold = 10
default_units = 1.0

# Average number of weeks in a month for working-calendar conversions.
weeks_per_month = 4.33

# Days without any working time before a calendar walk gives up.
max_idle_calendar_days = 366

# --- Logging ---

LOG_LEVEL = os.environ.get("GANTT_CORE_LOG_LEVEL", "INFO")

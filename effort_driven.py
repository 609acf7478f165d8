"""
Effort-driven scheduling: total work (duration x assigned units) stays
constant, so adding resources shortens a task and removing them stretches it.
"""
from dataclasses import replace

from calendar_math import calculate_duration, calculate_finish_date
from date_utils import is_valid_date
from diagnostics import INVALID_DATE, report
from duration_sync import calculate_duration_in_days
from logging_config import get_logger
from models import Duration, DurationUnit, TaskType
from resource_units import to_coefficient

logger = get_logger(__name__)


def get_total_units(task):
    return sum(to_coefficient(assignment.units) for assignment in task.resource_assignments)


def should_apply(effort_driven_enabled, task):
    if not effort_driven_enabled:
        return False
    if task.is_milestone or task.is_summary:
        return False
    return task.type is not TaskType.FIXED_DURATION


def recalculate_duration(task, original_total_units, prefs, diagnostics=None):
    """
    Rescale *task* after its assignments changed from *original_total_units*.

    The first assignment on a task (original total of 0) inherits the
    authored span and changes nothing. Undated tasks are reported and
    returned as they are.
    """
    new_total_units = get_total_units(task)
    if new_total_units == 0 or original_total_units == 0 or new_total_units == original_total_units:
        return task

    if not is_valid_date(task.start_date) or not is_valid_date(task.end_date):
        report(diagnostics, INVALID_DATE, "Task has invalid dates, skipping effort-driven rescale", task_id=task.id)
        return task

    ratio = original_total_units / new_total_units
    hours = calculate_duration(task.start_date, task.end_date, DurationUnit.HOURS, prefs)
    new_hours = Duration(hours.value * ratio, DurationUnit.HOURS)
    end_date = calculate_finish_date(task.start_date, new_hours, prefs)

    logger.debug(
        "Effort-driven rescale",
        task_id=task.id,
        original_units=original_total_units,
        new_units=new_total_units,
        hours=new_hours.value,
    )
    return replace(
        task,
        end_date=end_date,
        duration=calculate_duration_in_days(task.start_date, end_date, diagnostics, task_id=task.id),
    )

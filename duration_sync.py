"""
Keeps a task's stored ``duration`` (whole calendar days) in step with its dates.

The stored duration always counts 24-hour days, whatever the calendar mode.
Working time only matters at the resource-assignment level.
"""
from datetime import datetime, timedelta

from date_utils import is_valid_date, round_half_up, to_local_midnight
from diagnostics import INVALID_DATE, INVERTED_RANGE, report

DAY = timedelta(days=1)


def _as_datetime(value):
    return value if isinstance(value, datetime) else to_local_midnight(value)


def calculate_duration_in_days(start_date, end_date, diagnostics=None, task_id=None):
    if not is_valid_date(start_date) or not is_valid_date(end_date):
        report(
            diagnostics, INVALID_DATE,
            "Invalid date in duration calculation, defaulting to 1 day",
            task_id=task_id, start_date=repr(start_date), end_date=repr(end_date),
        )
        return 1
    start_date, end_date = _as_datetime(start_date), _as_datetime(end_date)
    try:
        inverted = end_date < start_date
    except TypeError:
        # Naive and timezone-aware datetimes cannot be compared.
        report(
            diagnostics, INVALID_DATE,
            "Incomparable dates in duration calculation, defaulting to 1 day",
            task_id=task_id, start_date=repr(start_date), end_date=repr(end_date),
        )
        return 1
    if inverted:
        report(
            diagnostics, INVERTED_RANGE,
            "Finish before start in duration calculation, defaulting to 1 day",
            task_id=task_id, start_date=start_date.isoformat(), end_date=end_date.isoformat(),
        )
        return 1
    return max(1, round_half_up((end_date - start_date) / DAY))


def calculate_duration_from_gantt(start_date, end_date, diagnostics=None):
    """Duration for a bar dragged or resized on the chart."""
    return calculate_duration_in_days(start_date, end_date, diagnostics)


def enrich_updates_with_duration(updates, current_task, diagnostics=None):
    """
    Attach a recomputed ``duration`` to a partial task update that moves either date.

    Whichever date the update leaves out is taken from *current_task*. Updates
    that do not touch the dates come back unchanged.
    """
    if "start_date" not in updates and "end_date" not in updates:
        return updates
    start_date = updates.get("start_date", current_task.start_date)
    end_date = updates.get("end_date", current_task.end_date)
    enriched = dict(updates)
    enriched["duration"] = calculate_duration_in_days(
        start_date, end_date, diagnostics, task_id=current_task.id
    )
    return enriched

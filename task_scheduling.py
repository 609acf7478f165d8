from dataclasses import replace
from datetime import date, timedelta

from calendar_math import calculate_duration, calculate_finish_date
from config import required_date_constraints, scheduling_rule_types
from date_utils import is_valid_date, normalize_fraction, to_local_midnight
from diagnostics import INVALID_DATE, report
from duration_sync import calculate_duration_in_days
from logging_config import get_logger
from models import Duration, DurationUnit, TaskType
from task_tree import TaskTree

logger = get_logger(__name__)

# --- Core Calculation Logic ---

def has_required_date_constraint(task):
    return task.constraint is not None and task.constraint.value in required_date_constraints


def recalculate_all(tasks, calendar_prefs, schedule_prefs=None, diagnostics=None):
    """
    Refresh the finish date of every work task, then roll up the summaries.

    Each task keeps its current span in hours and gets its finish date
    recomputed from it. Milestones and summaries are skipped, and so are tasks
    pinned by MustStartOn/MustFinishOn when required dates are honored.
    """
    honor_required_dates = schedule_prefs is not None and schedule_prefs.honor_required_dates

    updated = []
    for task in tasks:
        if task.is_milestone or task.is_summary:
            updated.append(task)
            continue
        if honor_required_dates and has_required_date_constraint(task):
            logger.debug("Keeping required dates", task_id=task.id, constraint=task.constraint.value)
            updated.append(task)
            continue
        if not is_valid_date(task.start_date) or not is_valid_date(task.end_date):
            report(diagnostics, INVALID_DATE, "Task has invalid dates, leaving it unscheduled", task_id=task.id)
            updated.append(task)
            continue

        span = calculate_duration(task.start_date, task.end_date, DurationUnit.HOURS, calendar_prefs)
        end_date = calculate_finish_date(task.start_date, span, calendar_prefs)
        updated.append(replace(
            task,
            end_date=end_date,
            duration=calculate_duration_in_days(task.start_date, end_date, diagnostics, task_id=task.id),
        ))

    return recalculate_summary_tasks(updated, diagnostics)


def recalculate_summary_tasks(tasks, diagnostics=None):
    """
    Roll dates and progress up into summary tasks, deepest summaries first.

    A summary spans from its earliest descendant start to its latest
    descendant finish, both at midnight. Its progress is the mean progress of
    its descendants, leaving out milestones since they carry no work.
    """
    tree = TaskTree.from_tasks(tasks)

    for task_id in tree.post_order():
        task = tree.tasks[task_id]
        if not task.is_summary:
            continue
        subtasks = [tree.tasks[child_id] for child_id in tree.descendants(task_id)]
        dated = [t for t in subtasks if is_valid_date(t.start_date) and is_valid_date(t.end_date)]
        if not dated:
            continue

        try:
            start_date = min(to_local_midnight(t.start_date) for t in dated)
            end_date = max(to_local_midnight(t.end_date) for t in dated)
        except TypeError:
            # Mixed naive and timezone-aware children.
            report(diagnostics, INVALID_DATE, "Summary children have incomparable dates, leaving it as is",
                   task_id=task_id)
            continue

        work = [t for t in subtasks if not t.is_milestone]
        progress = 0.0
        if work:
            progress = normalize_fraction(sum(t.progress or 0 for t in work) / len(work))

        tree.tasks[task_id] = replace(
            task,
            start_date=start_date,
            end_date=end_date,
            progress=progress,
            duration=calculate_duration_in_days(start_date, end_date, diagnostics, task_id=task_id),
        )

    return tree.to_list()


def _task_type_for_rule(rule):
    if not isinstance(rule, int):
        rule = 0
    return TaskType(scheduling_rule_types.get(rule, TaskType.FIXED_UNITS.value))


def prepare_new_task(task, last_task, schedule_prefs, calendar_prefs, today=None, diagnostics=None):
    """
    Fill in and normalize a task that is about to be inserted.

    Dates are always moved to midnight so a UI's timezone handling cannot
    shift them. A missing start becomes today when the preferences ask for
    it, and a start without a finish gets a one-day finish.
    """
    changes = {}

    if task.type is None and schedule_prefs is not None:
        changes["type"] = _task_type_for_rule(schedule_prefs.scheduling_rule)

    start_date = task.start_date
    if start_date is not None:
        start_date = to_local_midnight(start_date)
    elif schedule_prefs is not None and schedule_prefs.new_tasks_start_today:
        start_date = to_local_midnight(today or date.today())

    end_date = task.end_date
    if end_date is not None:
        end_date = to_local_midnight(end_date)
    elif start_date is not None:
        end_date = calculate_finish_date(start_date, Duration(1, DurationUnit.DAYS), calendar_prefs)

    auto_link = (
        schedule_prefs is not None
        and schedule_prefs.auto_link_tasks
        and last_task is not None
        and not task.predecessors
    )
    if auto_link and not is_valid_date(last_task.end_date):
        report(diagnostics, INVALID_DATE, "Previous task has no finish date, not auto-linking",
               task_id=task.id, predecessor_id=last_task.id)
    elif auto_link:
        span = timedelta(days=1)
        if start_date is not None and end_date is not None:
            span = end_date - start_date
        start_date = to_local_midnight(last_task.end_date + timedelta(days=1))
        end_date = start_date + span
        changes["predecessors"] = (last_task.id,)
        logger.debug("Auto-linked new task", task_id=task.id, predecessor_id=last_task.id)

    changes["start_date"] = start_date
    changes["end_date"] = end_date
    if start_date is not None and end_date is not None:
        changes["duration"] = calculate_duration_in_days(start_date, end_date, diagnostics, task_id=task.id)

    return replace(task, **changes)

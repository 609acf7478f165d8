"""
Finish-to-start links between tasks.

A successor may start no earlier than the day after its predecessor finishes.
``is_valid_predecessor`` must be checked before ``link``: linking never
validates on its own.
"""
from dataclasses import dataclass, replace
from datetime import datetime, timedelta
from enum import Enum
from typing import Optional

from calendar_math import calculate_duration, calculate_finish_date
from date_utils import is_valid_date, to_local_midnight
from diagnostics import INVALID_DATE, report
from duration_sync import calculate_duration_in_days
from logging_config import get_logger
from models import DurationUnit

logger = get_logger(__name__)

ONE_DAY = timedelta(days=1)


class LinkRejection(Enum):
    SELF = "self"
    SUMMARY = "summary"
    CYCLE = "cycle"


class ConflictKind(Enum):
    BEFORE_PREDECESSOR = "before_predecessor"
    DURING_OR_END = "during_or_end"


@dataclass(frozen=True)
class DependencyConflict:
    has_conflict: bool
    successor_name: str
    predecessor_name: str
    min_start_date: datetime
    conflict_kind: Optional[ConflictKind] = None


def _find(tasks, task_id):
    return next((t for t in tasks if t.id == task_id), None)


def _is_dated(task):
    return is_valid_date(task.start_date) and is_valid_date(task.end_date)


def min_successor_start(predecessor_end):
    """Midnight of the calendar day after the predecessor finishes."""
    return to_local_midnight(predecessor_end + ONE_DAY)


def link(tasks, source_id, target_id, prefs, skip_date_correction=False, diagnostics=None):
    """
    Make *target_id* a finish-to-start predecessor of *source_id*.

    The source is moved to midnight of the day after the target ends and keeps
    its span in working hours. With *skip_date_correction* (e.g. while loading
    a saved project) only the predecessor is recorded. When either task lacks
    dates the problem is reported and the list comes back unchanged.
    """
    target = _find(tasks, target_id)
    if target is None:
        return tasks
    if not skip_date_correction and not _is_dated(target):
        report(diagnostics, INVALID_DATE, "Predecessor has invalid dates, not linking",
               task_id=source_id, predecessor_id=target_id)
        return tasks

    linked = []
    for task in tasks:
        if task.id != source_id or target_id in task.predecessors:
            linked.append(task)
            continue

        if not skip_date_correction and not _is_dated(task):
            report(diagnostics, INVALID_DATE, "Task has invalid dates, not linking",
                   task_id=task.id, predecessor_id=target_id)
            linked.append(task)
            continue

        start_date, end_date = task.start_date, task.end_date
        if not skip_date_correction:
            span = calculate_duration(task.start_date, task.end_date, DurationUnit.HOURS, prefs)
            start_date = min_successor_start(target.end_date)
            end_date = calculate_finish_date(start_date, span, prefs)
            logger.debug(
                "Linked task moved after predecessor",
                task_id=task.id, predecessor_id=target_id,
                start_date=start_date.isoformat(), end_date=end_date.isoformat(),
            )

        linked.append(replace(
            task,
            predecessors=task.predecessors + (target_id,),
            start_date=start_date,
            end_date=end_date,
            duration=calculate_duration_in_days(start_date, end_date, diagnostics, task_id=task.id),
        ))
    return linked


def _reaches(tasks_by_id, start_id, goal_id):
    """Depth-first walk along predecessor chains from *start_id* looking for *goal_id*."""
    visited = set()
    stack = [start_id]
    while stack:
        current_id = stack.pop()
        if current_id == goal_id:
            return True
        if current_id in visited:
            continue
        visited.add(current_id)
        task = tasks_by_id.get(current_id)
        if task is not None:
            stack.extend(task.predecessors)
    return False


def predecessor_disabled_reason(tasks, task_id, potential_pred_id):
    """Why *potential_pred_id* cannot precede *task_id*, or None if it can."""
    if task_id == potential_pred_id:
        return LinkRejection.SELF

    tasks_by_id = {t.id: t for t in tasks}
    potential_pred = tasks_by_id.get(potential_pred_id)
    # Links only join tasks that carry work; summaries are rolled up.
    if potential_pred is not None and potential_pred.is_summary:
        return LinkRejection.SUMMARY
    if _reaches(tasks_by_id, potential_pred_id, task_id):
        return LinkRejection.CYCLE
    return None


def is_valid_predecessor(tasks, task_id, potential_pred_id):
    return predecessor_disabled_reason(tasks, task_id, potential_pred_id) is None


# --- Date conflicts ---

def detect_date_conflict(tasks, successor_id, predecessor_id):
    successor = _find(tasks, successor_id)
    predecessor = _find(tasks, predecessor_id)
    min_start = (
        min_successor_start(predecessor.end_date)
        if predecessor is not None and is_valid_date(predecessor.end_date)
        else datetime.min
    )
    return DependencyConflict(
        has_conflict=(
            successor is not None
            and predecessor is not None
            and is_valid_date(successor.start_date)
            and successor.start_date < min_start
        ),
        successor_name=successor.name if successor else successor_id,
        predecessor_name=predecessor.name if predecessor else predecessor_id,
        min_start_date=min_start,
    )


def detect_conflict_for_move(tasks, successor_id, new_start_date):
    """
    Check whether moving *successor_id* to *new_start_date* breaks one of its links.

    Returns ``(conflict, predecessor_id)`` for the first broken link, else None.
    Summary predecessors are skipped since their dates follow their children.
    """
    successor = _find(tasks, successor_id)
    if successor is None:
        return None

    for pred_id in successor.predecessors:
        predecessor = _find(tasks, pred_id)
        if predecessor is None:
            continue
        if predecessor.is_summary:
            logger.debug("Skipping conflict check with summary predecessor", predecessor_id=pred_id)
            continue

        result = detect_date_conflict(tasks, successor_id, pred_id)
        if new_start_date < result.min_start_date:
            kind = (
                ConflictKind.BEFORE_PREDECESSOR
                if is_valid_date(predecessor.start_date) and new_start_date < predecessor.start_date
                else ConflictKind.DURING_OR_END
            )
            return replace(result, has_conflict=True, conflict_kind=kind), pred_id
    return None

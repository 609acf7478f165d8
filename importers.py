import pandas as pd

from models import Task

# Task field -> default column name in a task table.
default_column_mapping = {
    "Task ID": "Task ID",
    "Task Name": "Task Name",
    "Start Date": "Start Date",
    "End Date": "End Date",
    "Progress": "Progress",
    "Level": "Level",
    "Predecessors": "Predecessors",
    "Milestone": "Milestone",
    "Summary": "Summary",
}


def _cell(row, mapping, field):
    column = mapping.get(field)
    if not column:
        return None
    value = row[column]
    if not isinstance(value, (list, tuple)) and pd.isna(value):
        return None
    return value


def _parse_date(value):
    if value is None:
        return None
    return pd.to_datetime(value, dayfirst=True).to_pydatetime()


def _parse_flag(value):
    if value is None:
        return False
    if isinstance(value, str):
        return value.strip().lower() in ("1", "true", "yes", "y")
    return bool(value)


def _parse_predecessors(value):
    if value is None:
        return ()
    if isinstance(value, (list, tuple)):
        return tuple(str(v) for v in value)
    return tuple(part.strip() for part in str(value).split(",") if part.strip())


def tasks_from_frame(df, mapping=None):
    """
    Builds tasks from a task table the caller has already loaded.

    Rows without a task name are skipped. A mapped column that is missing from
    the frame raises ValueError.
    """
    explicit = mapping is not None
    mapping = dict(default_column_mapping if mapping is None else mapping)
    if not mapping.get("Task Name"):
        raise ValueError("You must map a column to 'Task Name'.")

    for field, column in list(mapping.items()):
        if not column or column in df.columns:
            continue
        if explicit or field == "Task Name":
            raise ValueError(f"The column '{column}' selected in the mapping does not exist.")
        del mapping[field]

    tasks = []
    for index, row in df.iterrows():
        name = _cell(row, mapping, "Task Name")
        if name is None:
            continue  # Skip rows where task name is empty

        try:
            task_id = _cell(row, mapping, "Task ID")
            progress = _cell(row, mapping, "Progress")
            level = _cell(row, mapping, "Level")
            tasks.append(Task(
                id=str(task_id) if task_id is not None else str(index + 1),
                name=str(name),
                start_date=_parse_date(_cell(row, mapping, "Start Date")),
                end_date=_parse_date(_cell(row, mapping, "End Date")),
                progress=float(progress) if progress is not None else 0.0,
                level=int(level) if level is not None else 0,
                predecessors=_parse_predecessors(_cell(row, mapping, "Predecessors")),
                is_milestone=_parse_flag(_cell(row, mapping, "Milestone")),
                is_summary=_parse_flag(_cell(row, mapping, "Summary")),
            ))
        except (TypeError, ValueError) as e:
            raise ValueError(f"An error occurred while processing row {index + 2}: {e}") from e

    return tasks


def tasks_to_frame(tasks):
    """One row per task, in the default column layout."""
    rows = [
        {
            "Task ID": task.id,
            "Task Name": task.name,
            "Start Date": task.start_date,
            "End Date": task.end_date,
            "Duration": task.duration,
            "Progress": task.progress,
            "Level": task.level,
            "Predecessors": ",".join(task.predecessors),
            "Milestone": task.is_milestone,
            "Summary": task.is_summary,
        }
        for task in tasks
    ]
    return pd.DataFrame(rows, columns=list(default_column_mapping) + ["Duration"])

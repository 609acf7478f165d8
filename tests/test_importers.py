"""
Unit tests for the importers module.

Tests cover:
- tasks_from_frame: Building tasks from a loaded task table
- tasks_to_frame: Turning tasks back into a table
"""

import pytest
from datetime import datetime
import sys
import os

import pandas as pd

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from importers import tasks_from_frame, tasks_to_frame
from models import Task
from task_scheduling import recalculate_summary_tasks


@pytest.fixture
def frame():
    return pd.DataFrame([
        {"Task ID": "S", "Task Name": "Phase 1", "Start Date": "01-02-2026", "End Date": "02-02-2026",
         "Progress": 0, "Level": 0, "Predecessors": None, "Milestone": "no", "Summary": "yes"},
        {"Task ID": "A", "Task Name": "Design", "Start Date": "12-02-2026", "End Date": "15-02-2026",
         "Progress": 0.5, "Level": 1, "Predecessors": None, "Milestone": "no", "Summary": "no"},
        {"Task ID": "B", "Task Name": None, "Start Date": None, "End Date": None,
         "Progress": None, "Level": 1, "Predecessors": None, "Milestone": None, "Summary": None},
        {"Task ID": "C", "Task Name": "Build", "Start Date": "16-02-2026", "End Date": "20-02-2026",
         "Progress": 0.7, "Level": 1, "Predecessors": "A", "Milestone": "no", "Summary": "no"},
    ])


class TestTasksFromFrame:
    """Tests for the tasks_from_frame function."""

    def test_rows_become_tasks(self, frame):
        tasks = tasks_from_frame(frame)
        assert [t.id for t in tasks] == ["S", "A", "C"]
        design = tasks[1]
        assert design.name == "Design"
        assert design.start_date == datetime(2026, 2, 12)
        assert design.end_date == datetime(2026, 2, 15)
        assert design.progress == 0.5
        assert design.level == 1

    def test_flags_and_predecessors(self, frame):
        tasks = tasks_from_frame(frame)
        assert tasks[0].is_summary is True
        assert tasks[1].is_summary is False
        assert tasks[2].predecessors == ("A",)

    def test_blank_names_skipped(self, frame):
        """Rows without a task name are left out."""
        assert "B" not in [t.id for t in tasks_from_frame(frame)]

    def test_imported_tasks_roll_up(self, frame):
        """Imported levels are enough to roll up the summary."""
        summary = recalculate_summary_tasks(tasks_from_frame(frame))[0]
        assert summary.start_date == datetime(2026, 2, 12)
        assert summary.end_date == datetime(2026, 2, 20)
        assert summary.progress == pytest.approx(0.6)

    def test_name_only_table(self):
        """Optional columns may be absent from the default layout."""
        tasks = tasks_from_frame(pd.DataFrame({"Task Name": ["One", "Two"]}))
        assert [(t.id, t.name) for t in tasks] == [("1", "One"), ("2", "Two")]
        assert tasks[0].start_date is None

    def test_custom_mapping(self):
        df = pd.DataFrame({"Name": ["One"], "Begin": ["03-03-2026"]})
        tasks = tasks_from_frame(df, {"Task Name": "Name", "Start Date": "Begin"})
        assert tasks[0].name == "One"
        assert tasks[0].start_date == datetime(2026, 3, 3)

    def test_mapping_requires_task_name(self, frame):
        with pytest.raises(ValueError) as exc_info:
            tasks_from_frame(frame, {"Start Date": "Start Date"})
        assert "Task Name" in str(exc_info.value)

    def test_missing_mapped_column_raises(self, frame):
        with pytest.raises(ValueError) as exc_info:
            tasks_from_frame(frame, {"Task Name": "Task Name", "Start Date": "Kickoff"})
        assert "Kickoff" in str(exc_info.value)

    def test_bad_value_reports_row(self):
        df = pd.DataFrame({"Task Name": ["One"], "Progress": ["lots"]})
        with pytest.raises(ValueError) as exc_info:
            tasks_from_frame(df)
        assert "row 2" in str(exc_info.value)


class TestTasksToFrame:
    """Tests for the tasks_to_frame function."""

    def test_one_row_per_task(self):
        tasks = [
            Task(id="A", name="Design", start_date=datetime(2026, 2, 12), end_date=datetime(2026, 2, 15),
                 duration=3, predecessors=("X", "Y")),
        ]
        df = tasks_to_frame(tasks)
        assert len(df) == 1
        row = df.iloc[0]
        assert row["Task ID"] == "A"
        assert row["Duration"] == 3
        assert row["Predecessors"] == "X,Y"

    def test_table_reads_back(self):
        tasks = [Task(id="A", name="Design", start_date=datetime(2026, 2, 12), end_date=datetime(2026, 2, 15))]
        again = tasks_from_frame(tasks_to_frame(tasks))
        assert again[0].id == "A"
        assert again[0].start_date == datetime(2026, 2, 12)

    def test_empty(self):
        assert list(tasks_to_frame([]).columns)[:2] == ["Task ID", "Task Name"]

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from logging_config import get_logger

logger = get_logger(__name__)

# --- Warning codes ---

INVALID_DATE = "invalid_date"
INVERTED_RANGE = "inverted_range"


@dataclass(frozen=True)
class ScheduleWarning:
    code: str
    message: str
    task_id: Optional[str] = None
    details: Dict[str, Any] = field(default_factory=dict)


class Diagnostics:
    """
    Collects recoverable problems found while scheduling.

    Bad input is still defaulted so callers keep working, but the warnings end
    up here as well as in the log so a caller can surface them.
    """

    def __init__(self):
        self.warnings: List[ScheduleWarning] = []

    def warn(self, code, message, task_id=None, **details):
        warning = ScheduleWarning(code=code, message=message, task_id=task_id, details=details)
        self.warnings.append(warning)
        return warning

    def codes(self):
        return [w.code for w in self.warnings]

    def __len__(self):
        return len(self.warnings)

    def __iter__(self):
        return iter(self.warnings)


def report(diagnostics, code, message, task_id=None, **details):
    """Log a recovered problem and record it on *diagnostics* when given."""
    logger.warning(message, code=code, task_id=task_id, **details)
    if diagnostics is not None:
        diagnostics.warn(code, message, task_id=task_id, **details)

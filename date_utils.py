"""
Calendar date helpers shared by the scheduling modules.

Dates are handled in the caller's local time: naive datetimes stay naive and
aware datetimes keep their tzinfo.
"""
from datetime import date, datetime, time
import math

import pandas as pd


def is_valid_date(value):
    """True for a usable datetime; None, NaN, NaT and non-dates are not."""
    if value is None or not isinstance(value, (datetime, date)):
        return False
    return not pd.isna(value)


def to_local_midnight(value):
    """Midnight at the start of the calendar day of *value*."""
    if not isinstance(value, datetime):
        return datetime.combine(value, time.min)
    return value.replace(hour=0, minute=0, second=0, microsecond=0)


def round_half_up(value):
    # 2.5 days reads as 3 days, not Python's banker's 2.
    return int(math.floor(value + 0.5))


def normalize_fraction(value, places=10):
    """Strip float noise from a fraction (0.27999999999 -> 0.28)."""
    return round(value, places)

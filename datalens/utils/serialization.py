from typing import Any
from decimal import Decimal
from datetime import datetime, date, time

import numpy as np
import pandas as pd


def make_cell_json_safe(value: Any) -> Any:
    """
    Convert a single decoded cell into a JSON-serialisable scalar.

    Missing values become the empty string so every row keeps the full
    column vocabulary. Strings are returned untouched.
    """
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, (bool, np.bool_)):
        return bool(value)
    if isinstance(value, float) and value != value:
        return ""
    if value is pd.NaT:
        return ""
    if isinstance(value, np.integer):
        return int(value)
    if isinstance(value, np.floating):
        return "" if np.isnan(value) else float(value)
    if isinstance(value, Decimal):
        # Keep integers as ints, otherwise convert to string to avoid precision loss
        if value == value.to_integral():
            return int(value)
        return str(value)
    if isinstance(value, pd.Timestamp):
        return value.isoformat()
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()
    if isinstance(value, bytes):
        return value.decode(errors="ignore")
    if isinstance(value, (int, float)):
        return value
    # Fallback to string representation for unsupported types
    return str(value)

import datetime
import math
from decimal import ROUND_HALF_UP, Decimal

import numpy as np
import pandas as pd


def to_fixed(value: float, digits: int = 2) -> str:
    """
    Render a number with a fixed count of decimals.

    Ties are resolved away from zero on the exact binary value, so
    ``0.125`` renders as ``"0.13"`` and ``1.005`` as ``"1.00"``.
    Non-finite values render as ``"NaN"``, ``"Infinity"`` or ``"-Infinity"``.
    """
    number = float(value)
    if math.isnan(number):
        return "NaN"
    if math.isinf(number):
        return "Infinity" if number > 0 else "-Infinity"

    quantum = Decimal(1).scaleb(-digits)
    fixed = Decimal(number).quantize(quantum, rounding=ROUND_HALF_UP)
    return f"{fixed:.{digits}f}"


def round_fixed(value: float, digits: int = 2) -> float:
    return float(to_fixed(value, digits))


def convert_numpy(obj):
    if isinstance(obj, dict):
        return {k: convert_numpy(v) for k, v in obj.items()}

    elif isinstance(obj, list):
        return [convert_numpy(v) for v in obj]

    elif isinstance(obj, tuple):
        return [convert_numpy(v) for v in obj]  # tuples → lists (JSON-safe)

    elif isinstance(obj, np.ndarray):
        return convert_numpy(obj.tolist())

    elif isinstance(obj, (np.integer,)):
        return int(obj)

    elif isinstance(obj, (np.floating,)):
        return float(obj)

    elif isinstance(obj, (np.bool_,)):
        return bool(obj)

    elif obj is pd.NaT:
        return None

    elif isinstance(obj, pd.Timestamp):
        return obj.isoformat()

    elif isinstance(obj, (datetime.datetime, datetime.date)):
        return obj.isoformat()

    else:
        return obj

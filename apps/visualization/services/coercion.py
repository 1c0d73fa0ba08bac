"""
Value coercion for raw dataset cells.

Every raw scalar (string, number or boolean) is interpreted as exactly one of
``number``, ``boolean`` or ``string``. Nothing here raises: a value that is not
numeric or boolean is simply a string. The profiler and the chart aggregator
both coerce on the fly; no coerced copy of the dataset is ever stored.
"""

import datetime
import logging
import math
import warnings
from typing import Any, Optional, Tuple

import numpy as np
import pandas as pd
from dateutil import parser as date_parser

from apps.visualization.constants import (
    BOOLEAN_LITERALS,
    DATE_MIN_YEAR,
    DECIMAL_LITERAL_PATTERN,
    DIGIT_PATTERN,
    NON_DECIMAL_LITERAL_PATTERN,
)

logger = logging.getLogger(__name__)

NUMBER = "number"
BOOLEAN = "boolean"
STRING = "string"

# Two unrelated fill-in dates; a string whose parse depends on which one is
# used is missing part of its calendar date.
_DEFAULT_DATES = (datetime.datetime(2000, 1, 1), datetime.datetime(2001, 2, 2))


def is_missing(value: Any) -> bool:
    """A cell is missing when it is absent, ``None``, NaN or the empty string."""
    if value is None:
        return True
    if isinstance(value, str):
        return value == ""
    if isinstance(value, (float, np.floating)):
        return math.isnan(value)
    return False


def to_number(value: Any) -> Optional[float]:
    """
    Read a raw value as a number, or return ``None`` when it is not one.

    Accepts native ints and floats and strings holding a decimal literal
    (optional sign, fraction and exponent), ``Infinity``, or an unsigned
    ``0x``/``0o``/``0b`` integer literal. Surrounding whitespace is ignored
    and a whitespace-only string reads as ``0``. Native booleans read as
    ``1``/``0``; the strings ``"true"``/``"false"`` are not numbers.
    """
    if value is None:
        return None

    if isinstance(value, (bool, np.bool_)):
        return int(value)

    if isinstance(value, (int, np.integer)):
        return int(value)

    if isinstance(value, (float, np.floating)):
        return None if math.isnan(value) else float(value)

    if not isinstance(value, str):
        return None

    text = value.strip()
    if text == "":
        return 0

    if DECIMAL_LITERAL_PATTERN.match(text):
        return float(text.replace("Infinity", "inf"))

    if NON_DECIMAL_LITERAL_PATTERN.match(text):
        return int(text, 0)

    return None


def looks_numeric(value: Any) -> bool:
    if is_missing(value):
        return False
    return to_number(value) is not None


def looks_boolean(value: Any) -> bool:
    if isinstance(value, (bool, np.bool_)):
        return True
    return isinstance(value, str) and value.lower() in BOOLEAN_LITERALS


def coerce_value(value: Any) -> Tuple[str, Any]:
    """
    Classify a raw value and return ``(kind, typed_value)``.

    Numeric wins over boolean, boolean over string.
    """
    if looks_numeric(value):
        return NUMBER, to_number(value)

    # Native booleans are already numeric here, so only the literals remain.
    if looks_boolean(value):
        return BOOLEAN, BOOLEAN_LITERALS[value.lower()]

    return STRING, "" if value is None else str(value)


def finite_number(value: Any) -> Optional[float]:
    """The coerced number when the value is present and finite, else ``None``."""
    if is_missing(value):
        return None
    number = to_number(value)
    if number is None or not math.isfinite(number):
        return None
    return number


def value_key(value: Any) -> Tuple[str, Any]:
    """
    Identity of a raw value for distinct counting.

    The raw type family takes part in equality, so ``5`` and ``"5"`` (or
    ``True`` and ``1``) are different members.
    """
    if isinstance(value, (bool, np.bool_)):
        return BOOLEAN, bool(value)
    if isinstance(value, (int, float, np.integer, np.floating)):
        return NUMBER, value
    return STRING, value


def value_label(value: Any) -> str:
    """
    Text form of a raw value used as a category name.

    Booleans render in lower case and an integral float drops its fraction,
    so ``5``, ``5.0`` and ``"5"`` share one label.
    """
    if isinstance(value, (bool, np.bool_)):
        return "true" if value else "false"
    if isinstance(value, (float, np.floating)) and float(value).is_integer():
        return str(int(value))
    if isinstance(value, (float, np.floating)) and math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    return str(value)


def parse_date(value: Any) -> Optional[pd.Timestamp]:
    """
    Best-effort calendar parse of a raw value.

    Numbers are read as epoch milliseconds. Strings must contain at least one
    digit, which rules out bare month or weekday names, and must name a full
    calendar date: times alone or a day without month and year would be
    completed from the current date. Timezone-aware results are converted to
    UTC and made naive so all parsed dates compare.
    """
    if is_missing(value) or isinstance(value, (bool, np.bool_)):
        return None

    try:
        if isinstance(value, (int, float, np.integer, np.floating)):
            if not math.isfinite(value):
                return None
            parsed = pd.to_datetime(value, unit="ms", errors="coerce")
        else:
            text = str(value).strip()
            if not DIGIT_PATTERN.search(text):
                return None
            with warnings.catch_warnings():
                warnings.simplefilter("ignore")
                if not has_calendar_date(text):
                    return None
                parsed = pd.to_datetime(text, errors="coerce")
    except (ValueError, OverflowError, TypeError) as e:
        logger.debug("Date parsing failed for %r: %s", value, e)
        return None

    if parsed is None or pd.isna(parsed):
        return None

    if parsed.tzinfo is not None:
        parsed = parsed.tz_convert("UTC").tz_localize(None)

    return parsed


def has_calendar_date(text: str) -> bool:
    """True when ``text`` fixes year, month and day on its own."""
    try:
        first, second = (
            date_parser.parse(text, default=default) for default in _DEFAULT_DATES
        )
    except (ValueError, OverflowError) as e:
        logger.debug("No calendar date in %r: %s", text, e)
        return False
    return first.date() == second.date()


def looks_like_date(value: Any) -> bool:
    """
    Date heuristic used for type inference.

    The value must parse, and then either be exactly the ``YYYY-MM-DD``
    rendering of its own date or land after 1900.
    """
    parsed = parse_date(value)
    if parsed is None:
        return False

    if isinstance(value, str) and parsed.date().isoformat() == value:
        return True

    return parsed.year > DATE_MIN_YEAR

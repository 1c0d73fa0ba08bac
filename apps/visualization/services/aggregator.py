import logging
import math
from dataclasses import asdict, dataclass
from typing import Any, Callable, Dict, List, Mapping, Sequence

import pandas as pd

from apps.visualization.constants import (
    BAR,
    CATEGORICAL,
    DATE,
    HISTOGRAM,
    HISTOGRAM_BIN_COUNT,
    LINE,
    NUMERICAL,
    SCATTER,
)
from apps.visualization.services.coercion import (
    finite_number,
    is_missing,
    parse_date,
    value_label,
)
from apps.visualization.services.profiler import ColumnProfile
from apps.visualization.utils import to_fixed

logger = logging.getLogger(__name__)

Rows = Sequence[Mapping[str, Any]]
DateFormatter = Callable[[pd.Timestamp], str]


@dataclass(frozen=True)
class ChartConfig:
    chart_kind: str = BAR
    x_axis: str = ""
    y_axis: str = ""

    def to_dict(self) -> Dict[str, str]:
        return asdict(self)


def format_locale_date(value: pd.Timestamp) -> str:
    """Short US-style date (``1/5/2024``) that does not depend on the process locale."""
    return f"{value.month}/{value.day}/{value.year}"


def strftime_formatter(pattern: str) -> DateFormatter:
    def formatter(value: pd.Timestamp) -> str:
        return value.strftime(pattern)

    return formatter


class DataAggregator:
    """
    Turn rows into the plot-ready records of one chart kind.

    A selection that does not fit the chart kind (wrong column types, unknown
    column, missing axis) yields an empty list rather than an error: the
    caller recomputes on every selection change and passes through invalid
    combinations on the way.
    """

    def __init__(
        self,
        date_formatter: DateFormatter = format_locale_date,
        bin_count: int = HISTOGRAM_BIN_COUNT,
    ):
        self.date_formatter = date_formatter
        self.bin_count = bin_count

    def aggregate(
        self, rows: Rows, profiles: Sequence[ColumnProfile], config: ChartConfig
    ) -> List[Dict]:
        if not rows or not config.x_axis:
            return []

        data_types = {profile.name: profile.data_type for profile in profiles}
        x_type = data_types.get(config.x_axis)
        y_type = data_types.get(config.y_axis) if config.y_axis else None
        kind = config.chart_kind

        if kind == BAR and x_type == CATEGORICAL:
            return self._bar(rows, config.x_axis)

        if kind == HISTOGRAM and x_type == NUMERICAL:
            return self._histogram(rows, config.x_axis)

        if kind == SCATTER and x_type == NUMERICAL and y_type == NUMERICAL:
            return self._scatter(rows, config.x_axis, config.y_axis)

        if kind == LINE and x_type == DATE and y_type == NUMERICAL:
            return self._line(rows, config.x_axis, config.y_axis)

        logger.debug(
            "Selection %s not applicable (x=%s, y=%s)", config.to_dict(), x_type, y_type
        )
        return []

    def _bar(self, rows: Rows, x_axis: str) -> List[Dict]:
        counts: Dict[str, int] = {}
        for row in rows:
            value = row.get(x_axis)
            if is_missing(value):
                continue
            name = value_label(value)
            counts[name] = counts.get(name, 0) + 1

        return [{"name": name, "value": count} for name, count in counts.items()]

    def _histogram(self, rows: Rows, x_axis: str) -> List[Dict]:
        values = [finite_number(row.get(x_axis)) for row in rows]
        values = [value for value in values if value is not None]
        if not values:
            return []

        low, high = min(values), max(values)
        bin_width = (high - low) / self.bin_count

        bins = [
            {
                "range": f"{to_fixed(low + i * bin_width)} - "
                f"{to_fixed(low + (i + 1) * bin_width)}",
                "count": 0,
            }
            for i in range(self.bin_count)
        ]

        for value in values:
            # All values equal: everything lands in the first bin.
            if bin_width == 0:
                index = 0
            else:
                index = min(math.floor((value - low) / bin_width), self.bin_count - 1)
            bins[index]["count"] += 1

        return bins

    def _scatter(self, rows: Rows, x_axis: str, y_axis: str) -> List[Dict]:
        points = []
        for row in rows:
            x = finite_number(row.get(x_axis))
            y = finite_number(row.get(y_axis))
            if x is not None and y is not None:
                points.append({"x": x, "y": y})
        return points

    def _line(self, rows: Rows, x_axis: str, y_axis: str) -> List[Dict]:
        series = []
        for row in rows:
            date = parse_date(row.get(x_axis))
            value = finite_number(row.get(y_axis))
            if date is not None and value is not None:
                series.append((date, value))

        series.sort(key=lambda point: point[0])

        return [
            {"date": self.date_formatter(date), "value": value}
            for date, value in series
        ]


def derive_chart_data(
    rows: Rows,
    profiles: Sequence[ColumnProfile],
    config: ChartConfig,
    date_formatter: DateFormatter = format_locale_date,
) -> List[Dict]:
    """Recompute the chart records from scratch for the given inputs."""
    return DataAggregator(date_formatter=date_formatter).aggregate(
        rows, profiles, config
    )

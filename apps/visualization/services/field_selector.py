from typing import List, Sequence

from apps.visualization.constants import (
    BAR,
    CATEGORICAL,
    CHART_AXIS_TYPES,
    DATE,
    HISTOGRAM,
    NUMERICAL,
)
from apps.visualization.services.aggregator import ChartConfig
from apps.visualization.services.analyzer import DatasetAnalyzer
from apps.visualization.services.profiler import ColumnProfile


class FieldSelector:
    def default_config(self, profiles: Sequence[ColumnProfile]) -> ChartConfig:
        """
        Pick the chart shown right after a dataset is profiled.
        :param profiles: column profiles in dataset column order
        :return: ChartConfig with the initial chart kind and axes
        """
        column_types = DatasetAnalyzer().get_column_types(list(profiles))

        cat_cols = column_types[CATEGORICAL]
        num_cols = column_types[NUMERICAL]
        dt_cols = column_types[DATE]

        chart_kind, x_axis, y_axis = BAR, "", ""

        if cat_cols:
            chart_kind, x_axis = BAR, cat_cols[0]
        elif num_cols:
            chart_kind, x_axis = HISTOGRAM, num_cols[0]

        if len(num_cols) > 1:
            y_axis = num_cols[1]

        # A date column pairs with the first numeric column for a line chart.
        if dt_cols and num_cols:
            y_axis = num_cols[0]

        return ChartConfig(chart_kind=chart_kind, x_axis=x_axis, y_axis=y_axis)

    def eligible_columns(
        self, chart_kind: str, axis: str, profiles: Sequence[ColumnProfile]
    ) -> List[str]:
        """
        Columns that can go on ``axis`` ("x" or "y") of ``chart_kind``.
        :param chart_kind: one of bar, histogram, scatter or line
        :param axis: "x" or "y"
        :param profiles: column profiles in dataset column order
        :return: Column names in profile order; empty when the axis is unused
        """
        required_type = CHART_AXIS_TYPES.get(chart_kind, {}).get(axis)
        if required_type is None:
            return []
        return [
            profile.name for profile in profiles if profile.data_type == required_type
        ]

from typing import Any, Dict, List, Mapping, Optional, Sequence

from apps.visualization.constants import DATA_TYPES
from apps.visualization.services.profiler import ColumnProfile, DatasetProfiler
from apps.visualization.utils import round_fixed


class DatasetAnalyzer:
    def __init__(self, profiler: Optional[DatasetProfiler] = None):
        self.profiler = profiler or DatasetProfiler()

    def analyze(self, rows: Sequence[Mapping[str, Any]]) -> Dict:
        """
        Profile a dataset and return the profiles with a dataset overview.
        :param rows: parsed dataset, one mapping per row
        :return: Dictionary with "dataset_overview" and serialised "columns"
        """
        profiles = self.profiler.profile(rows)

        return {
            "dataset_overview": self.get_overview(rows, profiles),
            "columns": [profile.to_dict() for profile in profiles],
        }

    def get_overview(
        self, rows: Sequence[Mapping[str, Any]], profiles: List[ColumnProfile]
    ) -> Dict:
        total_rows = len(rows)
        total_cells = total_rows * len(profiles)
        missing_cells = sum(profile.missing_count for profile in profiles)

        type_counts = {data_type: 0 for data_type in DATA_TYPES}
        for profile in profiles:
            type_counts[profile.data_type] += 1

        return {
            "row_count": total_rows,
            "column_count": len(profiles),
            "missing_cells": missing_cells,
            "missing_overall_percent": (
                round_fixed(missing_cells / total_cells * 100) if total_cells else 0.0
            ),
            "column_type_summary": type_counts,
        }

    def get_column_types(self, profiles: List[ColumnProfile]) -> Dict[str, List[str]]:
        """
        Extract Columns Grouped By Types
        :param profiles: column profiles to group
        :return: Dictionary of data types mapped to a list of column names
        """
        column_types = {data_type: [] for data_type in DATA_TYPES}
        for profile in profiles:
            column_types[profile.data_type].append(profile.name)
        return column_types

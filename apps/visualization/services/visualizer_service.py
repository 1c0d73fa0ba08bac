import logging
from typing import Any, Dict, List, Mapping, Optional, Sequence

from django.conf import settings

from apps.visualization.constants import CHART_AXIS_TYPES
from apps.visualization.services.aggregator import (
    ChartConfig,
    derive_chart_data,
    format_locale_date,
    strftime_formatter,
)
from apps.visualization.services.analyzer import DatasetAnalyzer
from apps.visualization.services.field_selector import FieldSelector
from apps.visualization.services.loader import DatasetLoader
from apps.visualization.services.profiler import ColumnProfile

logger = logging.getLogger(__name__)


class VisualizationService:
    def __init__(self, date_format: Optional[str] = None):
        self.loader = DatasetLoader()
        self.analyzer = DatasetAnalyzer()
        self.field_selector = FieldSelector()

        date_format = date_format or getattr(settings, "CHART_DATE_FORMAT", None)
        self.date_formatter = (
            strftime_formatter(date_format) if date_format else format_locale_date
        )

    def analyze_dataset(self, dataset_model) -> Dict:
        rows = self.loader.load_from_model(dataset_model)
        analysis = self.analyzer.analyze(rows)
        logger.info(
            "Profiled dataset %s: %d rows, %d columns",
            dataset_model.pk,
            len(rows),
            len(analysis["columns"]),
        )
        return analysis

    def default_config(self, profiles: Sequence[ColumnProfile]) -> ChartConfig:
        return self.field_selector.default_config(profiles)

    def chart_data(
        self,
        rows: Sequence[Mapping[str, Any]],
        profiles: Sequence[ColumnProfile],
        config: ChartConfig,
    ) -> List[Dict]:
        return derive_chart_data(
            rows, profiles, config, date_formatter=self.date_formatter
        )

    def eligible_columns(self, profiles: Sequence[ColumnProfile]) -> Dict:
        return {
            chart_kind: {
                axis: self.field_selector.eligible_columns(chart_kind, axis, profiles)
                for axis in axes
            }
            for chart_kind, axes in CHART_AXIS_TYPES.items()
        }


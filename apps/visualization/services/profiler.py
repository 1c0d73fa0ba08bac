import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Sequence

from apps.visualization.constants import (
    CATEGORICAL,
    CATEGORICAL_MAX_RATIO,
    CATEGORICAL_MAX_UNIQUE,
    CATEGORICAL_MIN_UNIQUE,
    DATE,
    ID_UNIQUE,
    NUMERICAL,
    TEXT,
)
from apps.visualization.services.coercion import (
    is_missing,
    looks_like_date,
    to_number,
    value_key,
)
from apps.visualization.services.statistics_calculator import describe
from apps.visualization.utils import to_fixed

logger = logging.getLogger(__name__)


@dataclass
class ColumnProfile:
    name: str
    data_type: str
    unique_count: int
    missing_count: int
    missing_percentage: str
    stats: Dict[str, float] = field(default_factory=dict)
    values: List[Any] = field(default_factory=list)

    def to_dict(self) -> Dict:
        return {
            "name": self.name,
            "dataType": self.data_type,
            "uniqueCount": self.unique_count,
            "missingCount": self.missing_count,
            "missingPercentage": self.missing_percentage,
            "stats": dict(self.stats),
            "values": list(self.values),
        }

    @classmethod
    def from_dict(cls, data: Mapping) -> "ColumnProfile":
        return cls(
            name=data["name"],
            data_type=data["dataType"],
            unique_count=data["uniqueCount"],
            missing_count=data["missingCount"],
            missing_percentage=data["missingPercentage"],
            stats=dict(data.get("stats") or {}),
            values=list(data.get("values") or []),
        )


class DatasetProfiler:
    """
    Infer a semantic data type and cardinality/missingness metadata per column.

    The type decision is a fixed priority chain: Numerical, then Date, then
    the Categorical density heuristic, then ID/Unique, with Text as the
    catch-all. Thresholds are exclusive on both sides of the categorical range.
    """

    def __init__(
        self,
        categorical_ratio: float = CATEGORICAL_MAX_RATIO,
        min_categories: int = CATEGORICAL_MIN_UNIQUE,
        max_categories: int = CATEGORICAL_MAX_UNIQUE,
    ):
        self.categorical_ratio = categorical_ratio
        self.min_categories = min_categories
        self.max_categories = max_categories

    def profile(self, rows: Sequence[Mapping[str, Any]]) -> List[ColumnProfile]:
        """
        Profile every column named in the first row.

        :param rows: parsed dataset, one mapping per row
        :return: one ColumnProfile per column, in first-row key order
        """
        if not rows:
            logger.debug("Empty dataset, nothing to profile")
            return []

        columns = list(rows[0].keys())
        return [self._profile_column(name, rows) for name in columns]

    def _profile_column(
        self, name: str, rows: Sequence[Mapping[str, Any]]
    ) -> ColumnProfile:
        total_rows = len(rows)
        unique_values: Dict[Any, Any] = {}
        numerical_values = []
        missing_count = 0
        is_numerical = True
        is_date = False

        for row in rows:
            value = row.get(name)
            if is_missing(value):
                missing_count += 1
                continue

            unique_values.setdefault(value_key(value), value)

            number = to_number(value)
            if number is not None:
                numerical_values.append(number)
            else:
                is_numerical = False
                if not is_date and looks_like_date(value):
                    is_date = True

        unique_count = len(unique_values)
        data_type = self._decide_type(
            is_numerical, bool(numerical_values), is_date, unique_count, total_rows
        )

        stats = {}
        if data_type == NUMERICAL:
            stats = describe(numerical_values).rounded().to_dict()

        logger.debug(
            "Column %r: %s (%d unique, %d missing of %d)",
            name,
            data_type,
            unique_count,
            missing_count,
            total_rows,
        )

        return ColumnProfile(
            name=name,
            data_type=data_type,
            unique_count=unique_count,
            missing_count=missing_count,
            missing_percentage=to_fixed(missing_count / total_rows * 100),
            stats=stats,
            values=list(unique_values.values()),
        )

    def _decide_type(
        self,
        is_numerical: bool,
        has_numbers: bool,
        is_date: bool,
        unique_count: int,
        total_rows: int,
    ) -> str:
        if is_numerical and has_numbers:
            return NUMERICAL
        if is_date:
            return DATE
        if (
            unique_count / total_rows < self.categorical_ratio
            and self.min_categories < unique_count < self.max_categories
        ):
            return CATEGORICAL
        if unique_count == total_rows:
            return ID_UNIQUE
        return TEXT


def profile_dataset(rows: Sequence[Mapping[str, Any]]) -> List[ColumnProfile]:
    return DatasetProfiler().profile(rows)

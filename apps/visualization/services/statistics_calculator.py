from dataclasses import dataclass
from typing import Dict, Sequence

import numpy as np

from apps.visualization.constants import STATS_DECIMALS
from apps.visualization.utils import round_fixed


@dataclass(frozen=True)
class NumericStats:
    mean: float
    median: float
    min: float
    max: float
    std_dev: float

    def rounded(self, digits: int = STATS_DECIMALS) -> "NumericStats":
        """Round mean, median and stdDev; min and max stay exact."""
        return NumericStats(
            mean=round_fixed(self.mean, digits),
            median=round_fixed(self.median, digits),
            min=self.min,
            max=self.max,
            std_dev=round_fixed(self.std_dev, digits),
        )

    def to_dict(self) -> Dict[str, float]:
        return {
            "mean": self.mean,
            "median": self.median,
            "min": self.min,
            "max": self.max,
            "stdDev": self.std_dev,
        }


def describe(values: Sequence[float]) -> NumericStats:
    """
    Population descriptive statistics of a non-empty numeric sequence.

    Parameters
    ----------
    values : sequence of numbers
        Already coerced, missing values excluded.

    Returns
    -------
    NumericStats
        Mean, median, min, max and standard deviation with divisor N.
    """
    if len(values) == 0:
        raise ValueError("describe() requires at least one value")

    ordered = sorted(values)
    count = len(ordered)
    middle = count // 2

    if count % 2 == 0:
        median = (ordered[middle - 1] + ordered[middle]) / 2
    else:
        median = ordered[middle]

    array = np.asarray(ordered, dtype=float)
    with np.errstate(invalid="ignore"):
        mean = float(array.mean())
        std_dev = float(np.sqrt(np.mean((array - mean) ** 2)))

    return NumericStats(
        mean=mean,
        median=median,
        min=ordered[0],
        max=ordered[-1],
        std_dev=std_dev,
    )

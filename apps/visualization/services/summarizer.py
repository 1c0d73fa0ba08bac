import json
import logging
from typing import Any, Dict, List, Mapping, Optional, Sequence

import requests
from django.conf import settings

from apps.visualization.constants import (
    LLM_DATASET_SUMMARY_PROMPT,
    SUMMARY_SAMPLE_ROWS,
)
from apps.visualization.exceptions import SummaryError
from apps.visualization.services.profiler import ColumnProfile

logger = logging.getLogger(__name__)


class DatasetSummarizer:
    """
    Ask a hosted text-generation endpoint for a prose summary of a dataset.

    One ``summarize`` call is one attempt. Any failure raises ``SummaryError``
    and leaves retrying to the caller.
    """

    def __init__(
        self,
        endpoint: Optional[str] = None,
        model: Optional[str] = None,
        timeout: Optional[float] = None,
    ):
        self.endpoint = endpoint or settings.LLM_API_ENDPOINT
        self.model = model or settings.LLM_MODEL
        self.timeout = timeout or settings.LLM_TIMEOUT

    def reduced_view(self, profiles: Sequence[ColumnProfile]) -> List[Dict]:
        return [
            {
                "name": profile.name,
                "dataType": profile.data_type,
                "uniqueCount": profile.unique_count,
                "missingPercentage": profile.missing_percentage,
                "stats": profile.stats,
            }
            for profile in profiles
        ]

    def build_prompt(
        self,
        profiles: Sequence[ColumnProfile],
        sample_rows: Sequence[Mapping[str, Any]],
    ) -> str:
        sample = list(sample_rows[:SUMMARY_SAMPLE_ROWS])
        return LLM_DATASET_SUMMARY_PROMPT.format(
            column_info=json.dumps(self.reduced_view(profiles), indent=2, default=str),
            sample_size=SUMMARY_SAMPLE_ROWS,
            sample_rows=json.dumps(sample, indent=2, default=str),
        )

    def summarize(
        self,
        profiles: Sequence[ColumnProfile],
        sample_rows: Sequence[Mapping[str, Any]],
    ) -> str:
        prompt = self.build_prompt(profiles, sample_rows)

        try:
            response = requests.post(
                self.endpoint,
                json={"model": self.model, "prompt": prompt, "stream": False},
                timeout=self.timeout,
            )
            response.raise_for_status()
            payload = response.json()
        except requests.Timeout as e:
            raise SummaryError(f"LLM timeout after {self.timeout}s") from e
        except requests.RequestException as e:
            raise SummaryError(f"LLM request error: {e}") from e
        except ValueError as e:
            raise SummaryError(f"LLM response parsing error: {e}") from e

        text = payload.get("response") if isinstance(payload, dict) else None
        if not isinstance(text, str) or not text.strip():
            raise SummaryError(
                "Failed to get AI summary. Unexpected response structure."
            )

        logger.debug("Received %d character summary from %s", len(text), self.model)
        return text.strip()

class VisualizationError(Exception):
    """Base error for the collaborators around the profiling engine."""


class DatasetLoadError(VisualizationError):
    """Raised when an uploaded file cannot be turned into rows."""


class SummaryError(VisualizationError):
    """Raised when the hosted LLM could not produce a dataset summary.

    Each raise represents one failed attempt; callers decide whether to retry.
    """

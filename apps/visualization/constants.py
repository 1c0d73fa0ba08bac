import re

# Column data types, in the order the profiler tries them.
NUMERICAL = "Numerical"
DATE = "Date"
CATEGORICAL = "Categorical"
ID_UNIQUE = "ID/Unique"
TEXT = "Text"

DATA_TYPES = [NUMERICAL, DATE, CATEGORICAL, ID_UNIQUE, TEXT]

# Chart kinds understood by the aggregator.
BAR = "bar"
HISTOGRAM = "histogram"
SCATTER = "scatter"
LINE = "line"

CHART_KINDS = [BAR, HISTOGRAM, SCATTER, LINE]

# Which data type each axis of a chart kind accepts. A missing axis means
# the chart kind does not use it.
CHART_AXIS_TYPES = {
    BAR: {"x": CATEGORICAL},
    HISTOGRAM: {"x": NUMERICAL},
    SCATTER: {"x": NUMERICAL, "y": NUMERICAL},
    LINE: {"x": DATE, "y": NUMERICAL},
}

# Categorical heuristic: unique / total < ratio and min < unique < max.
CATEGORICAL_MAX_RATIO = 0.1
CATEGORICAL_MIN_UNIQUE = 1
CATEGORICAL_MAX_UNIQUE = 50

# Date heuristic: parsed year must be after this unless the value is an
# exact ISO calendar date.
DATE_MIN_YEAR = 1900

HISTOGRAM_BIN_COUNT = 10
STATS_DECIMALS = 2

# Value coercion patterns (decimal / Infinity literals and unsigned
# hex, octal and binary integer literals).
DECIMAL_LITERAL_PATTERN = re.compile(
    r"^[+-]?(?:Infinity|(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)$"
)
NON_DECIMAL_LITERAL_PATTERN = re.compile(r"^0(?:[xX][0-9a-fA-F]+|[oO][0-7]+|[bB][01]+)$")
DIGIT_PATTERN = re.compile(r"\d")
BOOLEAN_LITERALS = {"true": True, "false": False}

EMPTY_DATASET_MESSAGE = "CSV file is empty or could not be parsed."

SUMMARY_SAMPLE_ROWS = 5

LLM_DATASET_SUMMARY_PROMPT = """
Analyze the following dataset information and provide a concise, clear understanding of what the dataset is about, its main characteristics, and what kind of data it contains. Focus on key columns and their types, and any interesting patterns or missing data.

Dataset Structure (Column Info):
{column_info}

Sample Data (first {sample_size} rows):
{sample_rows}

Provide a summary in a paragraph or two. No need to highlight the words with markups. Just text is necessary.
"""

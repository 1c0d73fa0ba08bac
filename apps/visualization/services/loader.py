import logging
from pathlib import Path
from typing import Any, Dict, List

import pandas as pd

from apps.visualization.constants import BOOLEAN_LITERALS
from apps.visualization.exceptions import DatasetLoadError
from apps.visualization.services.coercion import looks_numeric, to_number

logger = logging.getLogger(__name__)


def parse_cell(value: str) -> Any:
    """Numeric-looking cells become numbers, true/false become booleans."""
    if looks_numeric(value):
        number = to_number(value)
        if isinstance(number, float) and number.is_integer():
            return int(number)
        return number
    if value.lower() in BOOLEAN_LITERALS:
        return BOOLEAN_LITERALS[value.lower()]
    return value


class DatasetLoader:
    SUPPORTED_SUFFIXES = [".csv"]

    @staticmethod
    def load_from_text(text: str) -> List[Dict[str, Any]]:
        """
        Split comma-separated text into rows keyed by the header line.

        Cells and headers are trimmed; lines whose field count differs from
        the header are skipped.

        :param text: raw CSV content
        :return: list of rows, in file order
        """
        lines = pd.Series(text.strip().split("\n"))
        if lines.empty or not lines.iloc[0].strip():
            return []

        headers = [header.strip() for header in lines.iloc[0].split(",")]
        cells = lines.iloc[1:].str.split(",")
        well_formed = cells[cells.str.len() == len(headers)]

        skipped = len(cells) - len(well_formed)
        if skipped:
            logger.info("Skipped %d malformed row(s)", skipped)

        if well_formed.empty:
            return []

        frame = pd.DataFrame(well_formed.tolist(), columns=headers, dtype=object)
        frame = frame.map(lambda cell: parse_cell(cell.strip()))
        return frame.to_dict(orient="records")

    @staticmethod
    def load_from_file(file_path: str) -> List[Dict[str, Any]]:
        """
        Load rows from a file path.

        :param file_path: path to a .csv file
        :return: list of rows
        """
        file_path = Path(file_path)

        if file_path.suffix.lower() not in DatasetLoader.SUPPORTED_SUFFIXES:
            raise DatasetLoadError(f"Unsupported file format: {file_path.suffix}")

        try:
            text = file_path.read_text(encoding="utf-8-sig")
        except (OSError, UnicodeDecodeError) as e:
            raise DatasetLoadError(f"Could not read {file_path.name}: {e}") from e

        return DatasetLoader.load_from_text(text)

    @staticmethod
    def load_from_model(dataset_model) -> List[Dict[str, Any]]:
        """
        Load rows from Django Model.
        :param dataset_model: DatasetUploadModel with a stored file
        :return: list of rows
        """
        return DatasetLoader.load_from_file(dataset_model.file.path)

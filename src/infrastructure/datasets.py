"""Load issue submissions stored as CSV files."""
from __future__ import annotations

from pathlib import Path
from typing import Any, Optional

import pandas as pd

from src.core.entities import IssueReport
from src.utils.logger import logger

METADATA_COLUMNS: tuple[str, ...] = (
    "location",
    "timestamp",
    "reporterHistory",
    "nearCriticalInfrastructure",
    "duplicateReports",
)


class IssueReportCSVLoader:
    """Read a CSV of submissions with a ``text`` column and optional metadata columns.

    An ``image_path`` column, when present, is resolved relative to the CSV
    file and read as raw bytes.
    """

    def __init__(self, csv_path: Path, required_columns: tuple[str, ...] = ("text",)) -> None:
        self._csv_path = Path(csv_path)
        self._required_columns = required_columns

    def load(self) -> pd.DataFrame:
        if not self._csv_path.exists():
            raise FileNotFoundError(f"Dataset not found: {self._csv_path}")

        data = pd.read_csv(self._csv_path)
        missing = set(self._required_columns) - set(data.columns)
        if missing:
            raise ValueError(
                "Dataset is missing required columns: " + ", ".join(sorted(missing))
            )
        logger.info("Loaded {} issue reports from {}", len(data), self._csv_path)
        return data

    def to_reports(self, data: pd.DataFrame) -> list[IssueReport]:
        reports: list[IssueReport] = []
        for row in data.to_dict(orient="records"):
            metadata = {
                column: _clean(row.get(column))
                for column in METADATA_COLUMNS
                if column in row and _clean(row.get(column)) is not None
            }
            text = _clean(row.get("text"))
            reports.append(
                IssueReport(
                    text=str(text) if text is not None else None,
                    image_bytes=self._read_image(_clean(row.get("image_path"))),
                    metadata=metadata,
                )
            )
        return reports

    def _read_image(self, image_path: Optional[Any]) -> Optional[bytes]:
        if image_path is None:
            return None
        path = Path(str(image_path))
        if not path.is_absolute():
            path = self._csv_path.parent / path
        try:
            return path.read_bytes()
        except OSError as error:
            logger.warning("Could not read image {}: {}", path, error)
            return None


def _clean(value: Any) -> Any:
    if value is None:
        return None
    if isinstance(value, float) and pd.isna(value):
        return None
    if isinstance(value, str) and not value.strip():
        return None
    return value


__all__ = ["IssueReportCSVLoader", "METADATA_COLUMNS"]

"""Infrastructure helpers for reporting on classification batches."""

from .classification_summary import (
    ClassificationSummaryAnalyzer,
    FileSystemReportRepository,
    results_to_frame,
)

__all__ = [
    "ClassificationSummaryAnalyzer",
    "FileSystemReportRepository",
    "results_to_frame",
]

"""Unit tests for the CSV issue report loader."""
from __future__ import annotations

import pandas as pd
import pytest

from src.infrastructure.datasets import IssueReportCSVLoader


def test_loader_builds_reports_with_metadata_and_images(tmp_path, make_image) -> None:
    (tmp_path / "img.png").write_bytes(make_image())
    csv_path = tmp_path / "reports.csv"
    pd.DataFrame(
        {
            "text": ["Leaking pipe", None],
            "image_path": ["img.png", "missing.png"],
            "location": ["Main St", None],
            "duplicateReports": [2, None],
        }
    ).to_csv(csv_path, index=False)

    loader = IssueReportCSVLoader(csv_path)
    reports = loader.to_reports(loader.load())

    assert reports[0].text == "Leaking pipe"
    assert reports[0].image_bytes is not None
    assert reports[0].metadata == {"location": "Main St", "duplicateReports": 2.0}
    assert reports[1].text is None
    assert reports[1].image_bytes is None
    assert reports[1].metadata == {}


def test_loader_validates_dataset(tmp_path) -> None:
    with pytest.raises(FileNotFoundError):
        IssueReportCSVLoader(tmp_path / "absent.csv").load()

    csv_path = tmp_path / "reports.csv"
    pd.DataFrame({"description": ["x"]}).to_csv(csv_path, index=False)
    with pytest.raises(ValueError):
        IssueReportCSVLoader(csv_path).load()

"""Projection of submission metadata into features."""
from __future__ import annotations

from typing import Any, Mapping

import pandas as pd

from src.core.entities import MetadataFeatures
from src.core.errors import ExtractionError
from src.utils.logger import logger


class MetadataFeatureExtractor:
    def extract(self, metadata: Mapping[str, Any]) -> MetadataFeatures:
        time_of_day: int | None = None
        day_of_week: int | None = None
        timestamp = self._parse_timestamp(metadata.get("timestamp"))
        if timestamp is not None:
            time_of_day = int(timestamp.hour)
            # Sunday-first numbering: 0 = Sunday .. 6 = Saturday.
            day_of_week = (int(timestamp.dayofweek) + 1) % 7

        return MetadataFeatures(
            has_location=bool(metadata.get("location")),
            time_of_day=time_of_day,
            day_of_week=day_of_week,
            reporter_history=self._parse_count(metadata.get("reporterHistory")),
        )

    @staticmethod
    def _parse_timestamp(value: Any) -> pd.Timestamp | None:
        if value is None or value == "":
            return None
        try:
            if isinstance(value, (int, float)) and not isinstance(value, bool):
                # Numeric timestamps are epoch milliseconds.
                parsed = pd.to_datetime(value, unit="ms", utc=True)
            else:
                parsed = pd.to_datetime(value)
        except (ValueError, TypeError, OverflowError) as error:
            raise ExtractionError("metadata", f"invalid timestamp {value!r}") from error
        if pd.isna(parsed):
            raise ExtractionError("metadata", f"invalid timestamp {value!r}")
        if parsed.tzinfo is not None:
            parsed = parsed.tz_convert("UTC")
        return parsed

    @staticmethod
    def _parse_count(value: Any) -> int:
        if value is None or isinstance(value, bool):
            return 0
        try:
            return max(int(float(value)), 0)
        except (TypeError, ValueError, OverflowError):
            logger.debug("Ignoring non-numeric reporterHistory value: {!r}", value)
            return 0


__all__ = ["MetadataFeatureExtractor"]

"""
Collection exports — `{entity}.{format}` files from a list of records.

Nested API records are flattened with pandas.json_normalize, so
`customerInfo.name` becomes its own column. JSON keeps the original nesting.
"""

from __future__ import annotations

import json
import logging
from io import BytesIO
from typing import Iterable, Tuple

import pandas as pd

logger = logging.getLogger(__name__)

EXPORT_FORMATS = {"csv": "csv", "xlsx": "xlsx", "excel": "xlsx", "json": "json"}


class ExportError(ValueError):
    """Raised for an unsupported export format."""


def records_frame(records: Iterable[dict]) -> pd.DataFrame:
    records = list(records or [])
    if not records:
        return pd.DataFrame()
    return pd.json_normalize(records)


def export_records(entity: str, records: Iterable[dict], fmt: str = "csv") -> Tuple[str, bytes]:
    """
    Serialize *records* for download.

    Returns:
        (filename, payload), e.g. ("sales.csv", b"...")
    """
    ext = EXPORT_FORMATS.get((fmt or "").lower())
    if ext is None:
        raise ExportError(f"Unsupported export format: {fmt}")

    records = list(records or [])
    filename = f"{entity}.{ext}"

    if ext == "json":
        payload = json.dumps(records, indent=2, default=str).encode("utf-8")
    else:
        frame = records_frame(records)
        for column in frame.columns:
            if frame[column].map(lambda v: isinstance(v, (list, dict))).any():
                frame[column] = frame[column].map(
                    lambda v: json.dumps(v, default=str) if isinstance(v, (list, dict)) else v
                )
        if ext == "csv":
            payload = frame.to_csv(index=False).encode("utf-8")
        else:
            output = BytesIO()
            with pd.ExcelWriter(output, engine="openpyxl") as writer:
                frame.to_excel(writer, sheet_name=entity[:31] or "Sheet1", index=False)
            payload = output.getvalue()

    logger.info("Exported %d %s record(s) to %s", len(records), entity, filename)
    return filename, payload

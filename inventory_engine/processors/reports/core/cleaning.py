"""
Cleaning — numeric and timestamp normalization for raw API records.

API records are loose: amounts may be missing, null or numeric strings,
timestamps are ISO-8601 strings with or without a trailing 'Z'. Everything
here is tolerant and never raises on bad input.
"""

from __future__ import annotations

from datetime import date, datetime, timezone
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

import pandas as pd


def to_amount(value) -> float:
    """Coerce an API amount to float. None / '' / garbage -> 0.0."""
    if value is None or isinstance(value, bool):
        return 0.0
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    return 0.0 if number != number else number  # NaN


def amount_column(df: pd.DataFrame, column: str) -> pd.Series:
    """Return *column* as floats with missing / non-numeric values set to 0."""
    if column not in df.columns:
        return pd.Series(0.0, index=df.index, dtype="float64")
    return pd.to_numeric(df[column], errors="coerce").fillna(0.0).astype("float64")


def round_half_up(value: float, digits: int = 0) -> float:
    """
    Round like a dashboard does (0.5 goes up), not banker's rounding.

    round_half_up(2.5) -> 3.0, round_half_up(12.25, 1) -> 12.3
    """
    try:
        quantum = Decimal(1).scaleb(-digits)
        return float(Decimal(repr(float(value))).quantize(quantum, rounding=ROUND_HALF_UP))
    except (InvalidOperation, ValueError, TypeError):
        return 0.0


def parse_timestamp(value) -> datetime | None:
    """
    Parse an API timestamp into an aware UTC datetime.

    Naive values are taken as UTC. Returns None when unparseable.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, date):
        dt = datetime(value.year, value.month, value.day)
    else:
        text = str(value).strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            dt = datetime.fromisoformat(text)
        except ValueError:
            return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def utc_day(value) -> date | None:
    """Calendar day (UTC) of an API timestamp, or None."""
    dt = parse_timestamp(value)
    return dt.date() if dt is not None else None


def ref_id(ref):
    """Id of a reference field that may be an id string or a populated object."""
    if isinstance(ref, dict):
        return ref.get("_id") or ref.get("id")
    return ref


def ref_name(ref, default: str = "Unknown") -> str:
    if isinstance(ref, dict) and ref.get("name"):
        return str(ref["name"])
    return default

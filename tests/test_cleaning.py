from datetime import date, datetime, timezone

import pandas as pd

from inventory_engine.processors.reports.core.cleaning import (
    amount_column,
    parse_timestamp,
    ref_id,
    ref_name,
    round_half_up,
    to_amount,
    utc_day,
)


def test_to_amount():
    assert to_amount("12.5") == 12.5
    assert to_amount(None) == 0.0
    assert to_amount("n/a") == 0.0
    assert to_amount(float("nan")) == 0.0


def test_amount_column_fills_missing():
    df = pd.DataFrame({"totalAmount": [10, None, "x"]})
    assert list(amount_column(df, "totalAmount")) == [10.0, 0.0, 0.0]
    assert list(amount_column(df, "taxAmount")) == [0.0, 0.0, 0.0]


def test_round_half_up():
    assert round_half_up(2.5) == 3.0
    assert round_half_up(312.5) == 313.0
    assert round_half_up(12.25, 1) == 12.3
    assert round_half_up("bad") == 0.0


def test_parse_timestamp():
    assert parse_timestamp("2024-05-15T08:00:00Z") == datetime(2024, 5, 15, 8, tzinfo=timezone.utc)
    assert parse_timestamp("2024-05-15T08:00:00").tzinfo is not None
    assert parse_timestamp("yesterday") is None
    assert parse_timestamp(None) is None
    assert utc_day("2024-05-15T23:59:00+00:00") == date(2024, 5, 15)


def test_refs():
    assert ref_id({"_id": "p1", "name": "Widget"}) == "p1"
    assert ref_id("p2") == "p2"
    assert ref_name({"name": "Widget"}) == "Widget"
    assert ref_name("p2") == "Unknown"

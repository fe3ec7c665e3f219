"""
Trend Metrics — trailing daily sales series for the revenue chart.

Days are UTC calendar days. Orders whose timestamp cannot be parsed are
left out of every bucket.
"""

from __future__ import annotations

from collections import defaultdict
from datetime import date, datetime, timedelta, timezone

from ..core.cleaning import round_half_up, to_amount, utc_day
from ..core.status import RETURN_STATUSES, SalesStatus


def estimate_daily_profit(day_revenue: float, margin_pct: float) -> float:
    """
    Approximate a day's profit from the overall profit margin.

    This is an estimate, not accounting: purchases are not matched to the
    day they were sold. A non-positive margin yields 0.
    """
    if margin_pct <= 0:
        return 0.0
    return round_half_up(day_revenue * margin_pct / 100)


def trailing_days(now: datetime, window_days: int) -> list[date]:
    """The last *window_days* UTC days ending today, oldest first."""
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    today = now.astimezone(timezone.utc).date()
    return [today - timedelta(days=offset) for offset in range(window_days - 1, -1, -1)]


def calculate_daily_sales(
    sales,
    margin_pct: float,
    *,
    now: datetime,
    window_days: int = 30,
) -> list[dict]:
    """
    One row per day of the trailing window.

    `orders` counts every non-cancelled order created that day, `revenue`
    leaves out returned orders and orders awaiting a return.

    Returns:
        [{"date": "2024-05-01", "revenue": 1200.0, "orders": 3, "profit": 240.0}, ...]
    """
    if window_days <= 0:
        return []

    revenue_by_day: dict[date, float] = defaultdict(float)
    orders_by_day: dict[date, int] = defaultdict(int)

    for order in sales or []:
        status = order.get("status")
        if status == SalesStatus.CANCELLED.value:
            continue
        day = utc_day(order.get("createdAt"))
        if day is None:
            continue
        orders_by_day[day] += 1
        if status not in RETURN_STATUSES:
            revenue_by_day[day] += to_amount(order.get("totalAmount"))

    rows = []
    for day in trailing_days(now, window_days):
        revenue = revenue_by_day.get(day, 0.0)
        rows.append({
            "date": day.isoformat(),
            "revenue": revenue,
            "orders": orders_by_day.get(day, 0),
            "profit": estimate_daily_profit(revenue, margin_pct),
        })
    return rows

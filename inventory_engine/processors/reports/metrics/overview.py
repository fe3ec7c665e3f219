"""
Overview Metrics — headline numbers of the reports page.

Revenue counts revenue-eligible sales only (not cancelled, returned or
awaiting a return). Cost counts purchases that are actually paid.
"""

from __future__ import annotations

import pandas as pd

from ..core.cleaning import amount_column, round_half_up
from ..core.status import NON_REVENUE_STATUSES, RETURN_STATUSES, SalesStatus


def _frame(records) -> pd.DataFrame:
    return pd.DataFrame(list(records or []))


def _text_column(df: pd.DataFrame, column: str) -> pd.Series:
    if column not in df.columns:
        return pd.Series("", index=df.index, dtype="object")
    return df[column].fillna("").astype(str)


def profit_margin(revenue: float, profit: float) -> float:
    """Profit as a percentage of revenue, 0 when there is no revenue."""
    return profit / revenue * 100 if revenue > 0 else 0.0


def calculate_totals(sales, purchases) -> dict:
    """
    Unrounded totals over the raw sales and purchase records.

    Returns:
        {
          "total_revenue": 1000.0,
          "total_cost": 400.0,
          "total_profit": 600.0,
          "profit_margin": 60.0,
          "total_orders": 2,
          "delivered_orders": 1,
          "returned_orders": 0,
          "average_order_value": 500.0,
          "return_rate": 0.0,
        }
    """
    sales_df = _frame(sales)
    purchases_df = _frame(purchases)

    status = _text_column(sales_df, "status")
    eligible = ~status.isin(NON_REVENUE_STATUSES)
    revenue = float(amount_column(sales_df, "totalAmount")[eligible].sum())

    paid = _text_column(purchases_df, "paymentStatus") == "paid"
    cost = float(amount_column(purchases_df, "totalAmount")[paid].sum())

    profit = revenue - cost
    total_orders = len(sales_df)
    returned = int(status.isin(RETURN_STATUSES).sum())

    return {
        "total_revenue": revenue,
        "total_cost": cost,
        "total_profit": profit,
        "profit_margin": profit_margin(revenue, profit),
        "total_orders": total_orders,
        "delivered_orders": int((status == SalesStatus.DELIVERED.value).sum()),
        "returned_orders": returned,
        "average_order_value": revenue / total_orders if total_orders else 0.0,
        "return_rate": returned / total_orders * 100 if total_orders else 0.0,
    }


def calculate_overview(sales, purchases, products=None) -> dict:
    """
    Display-ready overview block.

    Currency values are rounded half-up to whole units, margin and return
    rate to one decimal.
    """
    totals = calculate_totals(sales, purchases)
    return {
        "total_revenue": round_half_up(totals["total_revenue"]),
        "total_cost": round_half_up(totals["total_cost"]),
        "total_profit": round_half_up(totals["total_profit"]),
        "total_orders": totals["total_orders"],
        "total_products": len(list(products or [])),
        "average_order_value": round_half_up(totals["average_order_value"]),
        "profit_margin": round_half_up(totals["profit_margin"], 1),
        "return_rate": round_half_up(totals["return_rate"], 1),
        "delivered_orders": totals["delivered_orders"],
        "returned_orders": totals["returned_orders"],
    }

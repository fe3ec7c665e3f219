"""
Report Analyzer — The single entry point for client-side report aggregation.

Orchestrates all metric modules and returns a consolidated "Report Snapshot"
dictionary that the dashboard renders directly. Pure: the wall clock is only
read when `now` is not given.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from .metrics.inventory import (
    calculate_sales_by_warehouse,
    calculate_stock_alerts,
    calculate_warehouse_utilization,
)
from .metrics.overview import calculate_overview, calculate_totals
from .metrics.products import calculate_top_products
from .metrics.trends import calculate_daily_sales

logger = logging.getLogger(__name__)

# Fast movers are the head of the top-products ranking
FAST_MOVING_LIMIT = 5


class ReportAnalyzer:
    """
    Takes raw API collections and produces the report snapshot.

    Usage:
        analyzer = ReportAnalyzer()
        snapshot = analyzer.analyze(sales, products, warehouses, purchases)
    """

    def __init__(self, window_days: int = 30, top_n: int = 10):
        self.window_days = window_days
        self.top_n = top_n

    def analyze(
        self,
        sales,
        products,
        warehouses,
        purchases,
        *,
        now: datetime | None = None,
        window_days: int | None = None,
        top_n: int | None = None,
    ) -> dict:
        """
        Run every report calculation and return a Report Snapshot.

        Args:
            sales:       Sales order records (dicts, camelCase API shape).
            products:    Product records.
            warehouses:  Warehouse records with `currentStock`.
            purchases:   Purchase records.
            now:         Reference time for the daily series (UTC).
            window_days: Length of the daily series, overrides the default.
            top_n:       Size of the top-products ranking.

        Returns:
            {
              "meta":      { "generated_at": "...", "window_days": 30, ... },
              "overview":  { "total_revenue": 1000.0, "profit_margin": 60.0, ... },
              "sales":     { "daily_sales": [...], "top_products": [...],
                             "sales_by_warehouse": [...] },
              "inventory": { "low_stock_products": [...],
                             "out_of_stock_products": [...],
                             "fast_moving_products": [...],
                             "warehouse_utilization": [...] },
            }
        """
        sales = list(sales or [])
        products = list(products or [])
        warehouses = list(warehouses or [])
        purchases = list(purchases or [])
        now = now or datetime.now(timezone.utc)
        window_days = self.window_days if window_days is None else window_days
        top_n = self.top_n if top_n is None else top_n

        totals = calculate_totals(sales, purchases)
        top_products = calculate_top_products(sales, top_n)
        alerts = calculate_stock_alerts(warehouses)

        snapshot: dict = {
            "meta": {
                "generated_at": now.isoformat(),
                "window_days": window_days,
                "top_n": top_n,
                "counts": {
                    "sales": len(sales),
                    "products": len(products),
                    "warehouses": len(warehouses),
                    "purchases": len(purchases),
                },
            },
            "overview": calculate_overview(sales, purchases, products),
            "sales": {
                "daily_sales": calculate_daily_sales(
                    sales, totals["profit_margin"], now=now, window_days=window_days,
                ),
                "top_products": top_products,
                "sales_by_warehouse": calculate_sales_by_warehouse(sales, warehouses),
            },
            "inventory": {
                "low_stock_products": alerts["low_stock_products"],
                "out_of_stock_products": alerts["out_of_stock_products"],
                "fast_moving_products": top_products[:FAST_MOVING_LIMIT],
                "warehouse_utilization": calculate_warehouse_utilization(warehouses),
            },
        }

        logger.debug(
            "Report snapshot: %d sales, %d purchases, revenue=%s",
            len(sales), len(purchases), snapshot["overview"]["total_revenue"],
        )
        return snapshot


def empty_snapshot(now: datetime | None = None) -> dict:
    """All-zero snapshot used when no data could be loaded."""
    return ReportAnalyzer().analyze([], [], [], [], now=now)

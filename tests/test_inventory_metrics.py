"""Stock status, capacity, list filters and sales stats."""

from datetime import datetime, timezone

from inventory_engine.processors.reports.metrics.inventory import (
    calculate_sales_stats,
    capacity_level,
    capacity_usage,
    filter_products,
    filter_sales_by_period,
    period_start,
    product_overall_stock,
    sort_products,
    stock_status,
    warehouse_stock_total,
)


class TestStock:

    def test_stock_status(self):
        assert stock_status(0) == "Out of Stock"
        assert stock_status(5) == "Low Stock"
        assert stock_status(6) == "In Stock"

    def test_overall_stock(self, products):
        assert product_overall_stock(products[0]) == 4
        assert product_overall_stock({"currentStock": 7}) == 7

    def test_warehouse_total_prefers_backend_value(self, warehouses):
        assert warehouse_stock_total(warehouses[0]) == 92
        assert warehouse_stock_total({**warehouses[0], "totalStock": 10}) == 10


class TestCapacity:

    def test_usage(self):
        assert capacity_usage(45, 60) == 75
        assert capacity_usage(10, 0) == 0

    def test_levels(self):
        assert capacity_level(90) == "critical"
        assert capacity_level(75) == "warning"
        assert capacity_level(74.9) == "ok"


class TestProductList:

    def test_search_by_name_or_sku(self, products):
        assert [p["_id"] for p in filter_products(products, "gad")] == ["p2"]
        assert [p["_id"] for p in filter_products(products, "doo-3")] == ["p3"]

    def test_category(self, products):
        assert [p["_id"] for p in filter_products(products, category="Tools")] == ["p1", "p3"]

    def test_sorts(self, products):
        assert [p["name"] for p in sort_products(products, "name")] == ["Doohickey", "Gadget", "Widget"]
        assert [p["_id"] for p in sort_products(products, "stock")] == ["p2", "p1", "p3"]
        assert [p["_id"] for p in sort_products(products, "price")] == ["p3", "p1", "p2"]


class TestSalesList:
    NOW = datetime(2024, 5, 15, 12, 0, tzinfo=timezone.utc)

    def test_period_starts(self):
        assert period_start("day", self.NOW) == datetime(2024, 5, 15, tzinfo=timezone.utc)
        assert period_start("month", self.NOW) == datetime(2024, 5, 1, tzinfo=timezone.utc)
        assert period_start("year", self.NOW) == datetime(2024, 1, 1, tzinfo=timezone.utc)
        assert period_start("week", self.NOW) == datetime(2024, 5, 8, 12, tzinfo=timezone.utc)
        assert period_start("all", self.NOW) is None

    def test_filter(self, sales):
        assert [s["_id"] for s in filter_sales_by_period(sales, "day", self.NOW)] == ["s1", "s2"]
        assert len(filter_sales_by_period(sales, "all", self.NOW)) == 4

    def test_stats(self, sales):
        assert calculate_sales_stats(sales) == {
            "total_sales": 4,
            "total_delivered": 1,
            "total_returns": 1,
            "total_revenue": 2050,
        }

    def test_stats_count_only_completed_returns(self, sales):
        sales.append({"_id": "s5", "status": "expected_return", "totalAmount": 100})
        stats = calculate_sales_stats(sales)
        assert stats["total_returns"] == 1
        assert stats["total_sales"] == 5

"""
Inventory Metrics — stock alerts, warehouse capacity and list helpers.

Stock lines are read from each warehouse's `currentStock`; the available
quantity of a line is quantity minus reservedQuantity.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

from ..core.cleaning import parse_timestamp, ref_id, ref_name, round_half_up, to_amount
from ..core.status import SalesStatus


# Available quantity below which a stock line is flagged in reports
LOW_STOCK_ALERT = 10

# Overall product stock at or below which the product list says "Low Stock"
LOW_STOCK_LEVEL = 5

CAPACITY_CRITICAL = 90
CAPACITY_WARNING = 75

SALES_PERIODS = ("day", "week", "month", "90days", "year", "all")

PRODUCT_SORTS = ("name", "stock", "price")


# ---------------------------------------------------------------------------
# Stock alerts
# ---------------------------------------------------------------------------

def _stock_lines(warehouses):
    for warehouse in warehouses or []:
        for entry in warehouse.get("currentStock") or []:
            quantity = to_amount(entry.get("quantity"))
            available = quantity - to_amount(entry.get("reservedQuantity"))
            yield {
                "product_id": ref_id(entry.get("productId")),
                "product_name": ref_name(entry.get("productId")),
                "warehouse_id": warehouse.get("_id") or warehouse.get("id"),
                "warehouse_name": warehouse.get("name") or "Unknown",
                "quantity": quantity,
                "available": available,
            }


def calculate_stock_alerts(warehouses) -> dict:
    """
    Split warehouse stock lines into low-stock and out-of-stock lists.

    Low stock:    0 < available < LOW_STOCK_ALERT
    Out of stock: available <= 0
    """
    low, out = [], []
    for line in _stock_lines(warehouses):
        if line["available"] <= 0:
            out.append(line)
        elif line["available"] < LOW_STOCK_ALERT:
            low.append(line)
    return {"low_stock_products": low, "out_of_stock_products": out}


def calculate_sales_by_warehouse(sales, warehouses) -> list[dict]:
    """Order count and revenue of non-cancelled orders, per warehouse."""
    rows = []
    for warehouse in warehouses or []:
        warehouse_id = warehouse.get("_id") or warehouse.get("id")
        orders = [
            o for o in sales or []
            if ref_id(o.get("warehouseId")) == warehouse_id
            and o.get("status") != SalesStatus.CANCELLED.value
        ]
        rows.append({
            "warehouse_id": warehouse_id,
            "name": warehouse.get("name") or "Unknown",
            "orders": len(orders),
            "revenue": sum(to_amount(o.get("totalAmount")) for o in orders),
        })
    return rows


# ---------------------------------------------------------------------------
# Warehouse capacity
# ---------------------------------------------------------------------------

def warehouse_stock_total(warehouse: dict) -> float:
    """Backend `totalStock` when present, else the sum of stock lines."""
    if warehouse.get("totalStock") is not None:
        return to_amount(warehouse["totalStock"])
    return sum(to_amount(e.get("quantity")) for e in warehouse.get("currentStock") or [])


def capacity_usage(total_stock: float, capacity: float) -> float:
    """Stock as a percentage of capacity, 0 when capacity is not set."""
    if not capacity or capacity <= 0:
        return 0.0
    return total_stock / capacity * 100


def capacity_level(usage: float) -> str:
    if usage >= CAPACITY_CRITICAL:
        return "critical"
    if usage >= CAPACITY_WARNING:
        return "warning"
    return "ok"


def available_capacity(total_stock: float, capacity: float) -> float:
    return max(to_amount(capacity) - total_stock, 0.0)


def calculate_warehouse_utilization(warehouses) -> list[dict]:
    rows = []
    for warehouse in warehouses or []:
        capacity = to_amount(warehouse.get("capacity"))
        total = warehouse_stock_total(warehouse)
        usage = capacity_usage(total, capacity)
        rows.append({
            "warehouse_id": warehouse.get("_id") or warehouse.get("id"),
            "name": warehouse.get("name") or "Unknown",
            "capacity": capacity,
            "total_stock": total,
            "usage": round_half_up(usage, 1),
            "available_capacity": available_capacity(total, capacity),
            "level": capacity_level(usage),
        })
    return rows


# ---------------------------------------------------------------------------
# Product list
# ---------------------------------------------------------------------------

def product_overall_stock(product: dict) -> float:
    """Sum of per-warehouse stock, falling back to currentStock."""
    warehouses = product.get("warehouses") or []
    if warehouses:
        return sum(to_amount(w.get("stock")) for w in warehouses)
    return to_amount(product.get("currentStock"))


def stock_status(stock: float) -> str:
    if stock <= 0:
        return "Out of Stock"
    if stock <= LOW_STOCK_LEVEL:
        return "Low Stock"
    return "In Stock"


def filter_products(products, search: str = "", category: str = "") -> list[dict]:
    """Case-insensitive name / SKU search plus an exact category match."""
    needle = (search or "").strip().lower()
    result = []
    for product in products or []:
        if category and product.get("category") != category:
            continue
        if needle:
            name = str(product.get("name") or "").lower()
            sku = str(product.get("sku") or "").lower()
            if needle not in name and needle not in sku:
                continue
        result.append(product)
    return result


def sort_products(products, sort_by: str = "name") -> list[dict]:
    """Sort by name (A-Z), stock (high first) or selling price (high first)."""
    products = list(products or [])
    if sort_by == "stock":
        return sorted(products, key=product_overall_stock, reverse=True)
    if sort_by == "price":
        return sorted(products, key=lambda p: to_amount(p.get("sellingPrice")), reverse=True)
    return sorted(products, key=lambda p: str(p.get("name") or "").lower())


# ---------------------------------------------------------------------------
# Sales list
# ---------------------------------------------------------------------------

def period_start(period: str, now: datetime) -> datetime | None:
    """
    Earliest creation time included by a sales list period.

    'day', 'month' and 'year' start at the calendar boundary, 'week' and
    '90days' are rolling windows. 'all' (and unknown periods) -> None.
    """
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    midnight = now.replace(hour=0, minute=0, second=0, microsecond=0)
    if period == "day":
        return midnight
    if period == "week":
        return now - timedelta(days=7)
    if period == "month":
        return midnight.replace(day=1)
    if period == "90days":
        return now - timedelta(days=90)
    if period == "year":
        return midnight.replace(month=1, day=1)
    return None


def filter_sales_by_period(sales, period: str = "all", now: datetime | None = None) -> list[dict]:
    """Keep orders created on or after the period start. Undated orders drop out."""
    sales = list(sales or [])
    start = period_start(period, now or datetime.now(timezone.utc))
    if start is None:
        return sales
    kept = []
    for order in sales:
        created = parse_timestamp(order.get("createdAt"))
        if created is not None and created >= start:
            kept.append(order)
    return kept


def calculate_sales_stats(sales) -> dict:
    """
    Counters shown above the sales list.

    Returns count only orders already returned (not expected_return, which the
    report return rate includes). Revenue sums every order.
    """
    sales = list(sales or [])
    return {
        "total_sales": len(sales),
        "total_delivered": sum(1 for o in sales if o.get("status") == SalesStatus.DELIVERED.value),
        "total_returns": sum(1 for o in sales if o.get("status") == SalesStatus.RETURNED.value),
        "total_revenue": sum(to_amount(o.get("totalAmount")) for o in sales),
    }

"""
Product Metrics — top sellers by revenue.

Per-product profit is a flat-margin estimate (ESTIMATED_PRODUCT_MARGIN),
not derived from the product's cost price.
"""

from __future__ import annotations

from ..core.cleaning import ref_id, to_amount
from ..core.status import SalesStatus


# Flat margin applied to product revenue to approximate product profit
ESTIMATED_PRODUCT_MARGIN = 0.18


def estimate_product_profit(revenue: float) -> float:
    """Approximate profit of a product line from its revenue."""
    return revenue * ESTIMATED_PRODUCT_MARGIN


def _line_name(item: dict) -> str:
    product = item.get("productId")
    name = None
    if isinstance(product, dict):
        name = product.get("name")
    name = name or item.get("productName") or "Unknown Product"
    variant = item.get("variantName")
    return f"{name} - {variant}" if variant else name


def calculate_top_products(sales, top_n: int = 10) -> list[dict]:
    """
    Rank products by revenue over the line items of non-cancelled orders.

    Lines are grouped by product id. `sales` counts order lines, `quantity`
    sums units and `revenue` sums quantity x unitPrice. The name shown is
    the first one seen for the product.

    Returns:
        [{"product_id": "p1", "name": "Widget - Red", "sales": 4,
          "quantity": 9, "revenue": 900.0, "profit": 162.0}, ...]
    """
    if top_n <= 0:
        return []

    by_product: dict = {}
    for order in sales or []:
        if order.get("status") == SalesStatus.CANCELLED.value:
            continue
        for item in order.get("items") or []:
            key = ref_id(item.get("productId"))
            quantity = to_amount(item.get("quantity"))
            entry = by_product.setdefault(key, {
                "product_id": key,
                "name": _line_name(item),
                "sales": 0,
                "quantity": 0.0,
                "revenue": 0.0,
            })
            entry["sales"] += 1
            entry["quantity"] += quantity
            entry["revenue"] += quantity * to_amount(item.get("unitPrice"))

    ranked = sorted(by_product.values(), key=lambda e: e["revenue"], reverse=True)
    top = ranked[:top_n]
    for entry in top:
        entry["profit"] = estimate_product_profit(entry["revenue"])
    return top

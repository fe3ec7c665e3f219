"""
Form validation — field-level checks run before any request is sent.

Every validator returns {field_key: message}; an empty dict means the form
can be submitted. Item fields are keyed `item_{index}_{field}` so the page
can show the message next to the right row.
"""

from __future__ import annotations

import math
import re
from typing import Dict, Iterable, List, Mapping, Optional

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

STOCK_TAGS = ("returned", "damaged", "expired")


def _number(value) -> float:
    """float(value), with blanks, garbage and NaN / inf read as 0."""
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    return number if math.isfinite(number) else 0.0


def _blank(value) -> bool:
    if isinstance(value, float) and math.isnan(value):
        return True
    return value is None or str(value).strip() == ""


def filled_item_rows(rows: Iterable[Mapping]) -> List[dict]:
    """
    Drop the untouched rows of an item grid.

    A row counts once it has a product or a positive unit price. Empty grid
    cells arrive as None or NaN.
    """
    return [
        dict(row) for row in rows or []
        if not _blank(row.get("productId")) or _number(row.get("unitPrice")) > 0
    ]


# ---------------------------------------------------------------------------
# Totals
# ---------------------------------------------------------------------------

def order_subtotal(items: Iterable[Mapping]) -> float:
    """Sum of quantity x unitPrice over the form's items."""
    return sum(_number(i.get("quantity")) * _number(i.get("unitPrice")) for i in items or [])


def order_final_amount(items: Iterable[Mapping], tax=0, discount=0) -> float:
    return order_subtotal(items) + _number(tax) - _number(discount)


# ---------------------------------------------------------------------------
# Forms
# ---------------------------------------------------------------------------

def validate_registration(form: Mapping) -> Dict[str, str]:
    errors: Dict[str, str] = {}

    for key, label in (("firstName", "First name"), ("lastName", "Last name")):
        value = str(form.get(key) or "").strip()
        if not value:
            errors[key] = f"{label} is required"
        elif len(value) < 2:
            errors[key] = f"{label} must be at least 2 characters"

    email = str(form.get("email") or "").strip()
    if not email:
        errors["email"] = "Email is required"
    elif not EMAIL_RE.match(email):
        errors["email"] = "Please enter a valid email address"

    password = str(form.get("password") or "")
    if not password:
        errors["password"] = "Password is required"
    elif len(password) < 6:
        errors["password"] = "Password must be at least 6 characters"
    elif not (re.search(r"[a-z]", password) and re.search(r"[A-Z]", password) and re.search(r"\d", password)):
        errors["password"] = (
            "Password must contain at least one uppercase letter, "
            "one lowercase letter, and one number"
        )

    return errors


def _product_has_variants(product: Optional[Mapping]) -> bool:
    return bool(product and product.get("hasVariants") and product.get("variants"))


def validate_sales_order(
    form: Mapping,
    products: Optional[List[Mapping]] = None,
    stock_checks: Optional[Mapping[str, Mapping]] = None,
) -> Dict[str, str]:
    """
    Args:
        form:         {"customerInfo": {...}, "deliveryAddress": {...}, "items": [...]}
        products:     Product records, used for the variant requirement.
        stock_checks: {productId: {"available": 3, "required": 5, "sufficient": False}}
    """
    errors: Dict[str, str] = {}
    customer = form.get("customerInfo") or {}
    address = form.get("deliveryAddress") or {}

    if _blank(customer.get("name")):
        errors["customerInfo.name"] = "Customer name is required"
    email = customer.get("email")
    if _blank(email):
        errors["customerInfo.email"] = "Customer email is required"
    elif not EMAIL_RE.match(str(email).strip()):
        errors["customerInfo.email"] = "Customer email is invalid"
    if _blank(customer.get("phone")):
        errors["customerInfo.phone"] = "Customer phone is required"

    if _blank(address.get("street")):
        errors["deliveryAddress.street"] = "Delivery address is required"
    if _blank(address.get("city")):
        errors["deliveryAddress.city"] = "Delivery city is required"

    items = form.get("items") or []
    if not items:
        errors["items"] = "At least one item is required"

    by_id = {p.get("_id"): p for p in products or []}
    stock_checks = stock_checks or {}
    for index, item in enumerate(items):
        product_id = item.get("productId")
        if _blank(product_id):
            errors[f"item_{index}_productId"] = "Product is required"
        elif _product_has_variants(by_id.get(product_id)) and _blank(item.get("variantId")):
            errors[f"item_{index}_variantId"] = "Variant is required for this product"
        if _number(item.get("quantity")) <= 0:
            errors[f"item_{index}_quantity"] = "Quantity must be greater than 0"
        if _number(item.get("unitPrice")) <= 0:
            errors[f"item_{index}_unitPrice"] = "Unit price must be greater than 0"
        check = stock_checks.get(product_id)
        if check and not check.get("sufficient", True):
            errors[f"item_{index}_stock"] = (
                f"Insufficient stock. Available: {check.get('available')}, "
                f"Required: {check.get('required')}"
            )

    return errors


def validate_purchase_order(form: Mapping) -> Dict[str, str]:
    errors: Dict[str, str] = {}
    if _blank(form.get("supplierId")):
        errors["supplierId"] = "Supplier is required"

    items = form.get("items") or []
    if not items:
        errors["items"] = "At least one item is required"
    for index, item in enumerate(items):
        if _blank(item.get("productId")):
            errors[f"item_{index}_productId"] = "Product is required"
        if _number(item.get("quantity")) <= 0:
            errors[f"item_{index}_quantity"] = "Quantity must be greater than 0"
        if _number(item.get("unitPrice")) <= 0:
            errors[f"item_{index}_unitPrice"] = "Unit price must be greater than 0"
    return errors


def validate_product(form: Mapping, is_admin: bool = False) -> Dict[str, str]:
    """Name, SKU, category and selling price are required; admins also set the cost price."""
    errors: Dict[str, str] = {}
    for key, label in (("name", "Name"), ("sku", "SKU"), ("category", "Category")):
        if _blank(form.get(key)):
            errors[key] = f"{label} is required"

    if _blank(form.get("sellingPrice")):
        errors["sellingPrice"] = "Selling price is required"
    elif _number(form.get("sellingPrice")) <= 0:
        errors["sellingPrice"] = "Selling price must be greater than 0"

    if is_admin:
        if _blank(form.get("costPrice")):
            errors["costPrice"] = "Cost price is required"
        elif _number(form.get("costPrice")) <= 0:
            errors["costPrice"] = "Cost price must be greater than 0"
    return errors


def validate_add_stock(form: Mapping) -> Dict[str, str]:
    errors: Dict[str, str] = {}
    if _blank(form.get("productId")):
        errors["productId"] = "Product is required"

    quantity = form.get("quantity")
    try:
        whole = int(str(quantity).strip())
    except (TypeError, ValueError):
        whole = None
    if whole is None or whole <= 0:
        errors["quantity"] = "Quantity must be a positive whole number"

    unknown = [t for t in form.get("tags") or [] if t not in STOCK_TAGS]
    if unknown:
        errors["tags"] = f"Unknown tag(s): {', '.join(unknown)}"
    return errors


# ---------------------------------------------------------------------------
# Stock check
# ---------------------------------------------------------------------------

def total_available_stock(stock_levels: Iterable[Mapping], product_id: str) -> float:
    """Sum a product's availableStock over the warehouses of a /stock/levels answer."""
    total = 0.0
    for warehouse in stock_levels or []:
        for line in warehouse.get("products") or []:
            if line.get("productId") == product_id:
                total += _number(line.get("availableStock"))
    return total


def stock_check(stock_levels: Iterable[Mapping], product_id: str, required) -> dict:
    available = total_available_stock(stock_levels, product_id)
    required = _number(required)
    return {"available": available, "required": required, "sufficient": available >= required}

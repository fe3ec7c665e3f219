"""
Pydantic schemas for the records returned by the inventory REST API.
"""

from .records import (
    ExpectedReturn,
    LineItem,
    ProductRef,
    Product,
    Purchase,
    SalesOrder,
    StockEntry,
    Supplier,
    Warehouse,
    WarehouseStock,
)

__all__ = [
    "ExpectedReturn",
    "LineItem",
    "ProductRef",
    "Product",
    "Purchase",
    "SalesOrder",
    "StockEntry",
    "Supplier",
    "Warehouse",
    "WarehouseStock",
]
